"""
Esquemas Pydantic de casos de ciberdelitos.

Formato de cable en camelCase (caseDate, expedientNumber, stolenAmount...)
para mantener compatibilidad con el panel web. Internamente los importes
son Decimal y las fechas date/datetime.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class CrimeType(str, Enum):
    """Catálogo de tipos de delito que ofrece la UI (no se impone en BD)."""
    HACKING = "Hacking"
    PHISHING = "Phishing"
    MALWARE = "Malware"
    RANSOMWARE = "Ransomware"
    FRAUDE_CIBERNETICO = "Fraude cibernético"
    ROBO_IDENTIDAD = "Robo de identidad"
    CIBERACOSO = "Ciberacoso"
    SUPLANTACION_IDENTIDAD = "Suplantación de identidad"


class InvestigationStatus(str, Enum):
    """Catálogo de estados de investigación."""
    PENDIENTE = "Pendiente"
    EN_PROCESO = "En proceso"
    COMPLETADO = "Completado"
    SIN_RESPUESTA = "Sin respuesta"
    RECHAZADO = "Rechazado"


# Activo = pendiente o en proceso; resuelto = completado.
# "Sin respuesta" y "Rechazado" no cuentan en ninguno de los dos.
ACTIVE_STATUSES = (InvestigationStatus.PENDIENTE.value, InvestigationStatus.EN_PROCESO.value)
RESOLVED_STATUSES = (InvestigationStatus.COMPLETADO.value,)

DEFAULT_INVESTIGATION_STATUS = InvestigationStatus.PENDIENTE.value

# Campos obligatorios: en una actualización parcial pueden omitirse, pero no anularse
REQUIRED_CASE_FIELDS = (
    "case_date",
    "expedient_number",
    "crime_type",
    "sender_account_data",
    "victim",
    "receiver_account_data",
    "investigation_status",
    "stolen_amount",
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CyberCaseCreate(_CamelModel):
    """
    Datos para registrar un caso.

    id, createdBy y timestamps los asigna el servidor: si el cliente los
    envía se ignoran.
    """
    model_config = ConfigDict(extra="ignore")

    case_date: date = Field(..., description="Fecha del caso (sin hora)")
    expedient_number: str = Field(..., min_length=1, max_length=100)
    crime_type: str = Field(..., min_length=1, max_length=100)
    sender_account_data: str = Field(..., min_length=1)
    victim: str = Field(..., min_length=1, max_length=255)
    receiver_account_data: str = Field(..., min_length=1)
    receiver_account_research: Optional[str] = None
    investigation_status: str = Field(
        default=DEFAULT_INVESTIGATION_STATUS, min_length=1, max_length=50
    )
    stolen_amount: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
    observations: Optional[str] = None


class CyberCaseUpdate(_CamelModel):
    """
    Actualización parcial: solo se modifican los campos enviados.

    id y createdBy son inmutables; si llegan en el cuerpo se descartan.
    """
    model_config = ConfigDict(extra="ignore")

    case_date: Optional[date] = None
    expedient_number: Optional[str] = Field(None, min_length=1, max_length=100)
    crime_type: Optional[str] = Field(None, min_length=1, max_length=100)
    sender_account_data: Optional[str] = Field(None, min_length=1)
    victim: Optional[str] = Field(None, min_length=1, max_length=255)
    receiver_account_data: Optional[str] = Field(None, min_length=1)
    receiver_account_research: Optional[str] = None
    investigation_status: Optional[str] = Field(None, min_length=1, max_length=50)
    stolen_amount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    observations: Optional[str] = None

    @field_validator(*REQUIRED_CASE_FIELDS)
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("El campo es obligatorio y no puede ser nulo")
        return v

    def changes(self) -> dict:
        """Campos enviados explícitamente por el cliente (nombres Python)."""
        return self.model_dump(exclude_unset=True)


class CyberCaseResponse(_CamelModel):
    """Caso tal y como se expone al panel."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    case_date: date
    expedient_number: str
    crime_type: str
    sender_account_data: str
    victim: str
    receiver_account_data: str
    receiver_account_research: Optional[str] = None
    investigation_status: str
    stolen_amount: Decimal
    observations: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("stolen_amount")
    def serialize_amount(self, value: Decimal) -> str:
        return f"{value:.2f}"


class CyberCaseListResponse(_CamelModel):
    """Página de casos más el total que cumple los filtros."""
    cases: List[CyberCaseResponse]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next: bool = False
    has_prev: bool = False


class CatalogsResponse(_CamelModel):
    """Catálogos para los desplegables de la UI."""
    crime_types: List[str]
    investigation_statuses: List[str]
    active_statuses: List[str]
    resolved_statuses: List[str]
