from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class CyberCase(Base):
    """
    Caso (expediente) de ciberdelito.

    id, created_by, created_at y updated_at los asigna el servidor.
    """

    __tablename__ = "cyber_cases"
    __table_args__ = (
        CheckConstraint("stolen_amount >= 0", name="ck_cyber_cases_stolen_amount_non_negative"),
        Index("ix_cyber_cases_created_at_id", "created_at", "id"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    case_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    expedient_number: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True
    )
    crime_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    sender_account_data: Mapped[str] = mapped_column(Text, nullable=False)
    victim: Mapped[str] = mapped_column(String(255), nullable=False)
    receiver_account_data: Mapped[str] = mapped_column(Text, nullable=False)
    receiver_account_research: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    investigation_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="Pendiente", index=True
    )
    stolen_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self):
        return f"<CyberCase(id={self.id}, expedient_number={self.expedient_number})>"
