"""
Motor de agregación del panel principal.

Calcula las estadísticas sobre TODA la tabla de casos, sin aplicar los
filtros del listado. El usuario que pide las estadísticas solo se usa
para trazas: todos los usuarios ven el mismo conjunto global.

Cada sub-consulta es independiente; con escrituras concurrentes pueden
reflejar instantes ligeramente distintos.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import extract, func, select

from app.models.case_schemas import ACTIVE_STATUSES, RESOLVED_STATUSES
from app.models.cyber_case import CyberCase
from app.models.dashboard import MONTHS_PER_YEAR, CrimeTypeStat, DashboardStats
from app.services.base import BaseService

CENTS = Decimal("0.01")


def fill_monthly_buckets(counts_by_month: Dict[int, int]) -> List[int]:
    """
    Vuelca {mes: casos} (mes 1-12) en una lista fija de 12 posiciones.

    Los meses sin casos quedan a 0; meses fuera de rango se ignoran.
    """
    buckets = [0] * MONTHS_PER_YEAR
    for month, count in counts_by_month.items():
        month = int(month)
        if 1 <= month <= MONTHS_PER_YEAR:
            buckets[month - 1] = int(count)
    return buckets


def to_amount(value) -> Decimal:
    """Normaliza una suma de importes a Decimal con 2 decimales (None -> 0.00)."""
    if value is None:
        return Decimal("0").quantize(CENTS)
    return Decimal(str(value)).quantize(CENTS)


class DashboardStatsService(BaseService):
    """Estadísticas agregadas de casos."""

    def get_dashboard_stats(
        self,
        caller_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> DashboardStats:
        """
        Calcula las estadísticas del panel.

        Args:
            caller_id: Usuario que consulta (no filtra resultados)
            today: Fecha de referencia para el "año en curso" (por defecto hoy)

        Returns:
            DashboardStats

        Raises:
            StoreException: fallo de la base de datos
        """
        today = today or date.today()

        try:
            total_cases, total_amount = self._totals()
            active_cases = self._count_by_status(ACTIVE_STATUSES)
            resolved_cases = self._count_by_status(RESOLVED_STATUSES)
            monthly_cases = self._monthly_cases(today.year)
            crime_type_stats = self._crime_type_stats()
        except Exception as e:
            raise self._handle_exception(e, "dashboard_stats") from e

        stats = DashboardStats(
            total_cases=total_cases,
            total_amount=total_amount,
            active_cases=active_cases,
            resolved_cases=resolved_cases,
            monthly_cases=monthly_cases,
            crime_type_stats=crime_type_stats,
        )

        self._log_info(
            "Estadísticas del panel calculadas",
            action="dashboard_stats",
            caller_id=caller_id,
            total_cases=total_cases,
            year=today.year,
        )
        return stats

    # =========================================================
    # SUB-CONSULTAS
    # =========================================================

    def _totals(self) -> tuple[int, Decimal]:
        row = self.db.execute(
            select(
                func.count(CyberCase.id),
                func.coalesce(func.sum(CyberCase.stolen_amount), 0),
            )
        ).one()
        return int(row[0]), to_amount(row[1])

    def _count_by_status(self, statuses) -> int:
        return self.db.execute(
            select(func.count(CyberCase.id)).where(
                CyberCase.investigation_status.in_(statuses)
            )
        ).scalar_one()

    def _monthly_cases(self, year: int) -> List[int]:
        # Rango de fechas en lugar de EXTRACT(YEAR) para aprovechar el índice
        month = extract("month", CyberCase.case_date)
        rows = self.db.execute(
            select(month, func.count(CyberCase.id))
            .where(
                CyberCase.case_date >= date(year, 1, 1),
                CyberCase.case_date <= date(year, 12, 31),
            )
            .group_by(month)
        ).all()
        return fill_monthly_buckets({row[0]: row[1] for row in rows})

    def _crime_type_stats(self) -> List[CrimeTypeStat]:
        case_count = func.count(CyberCase.id)
        rows = self.db.execute(
            select(CyberCase.crime_type, case_count)
            .group_by(CyberCase.crime_type)
            .order_by(case_count.desc(), CyberCase.crime_type.asc())
        ).all()
        return [CrimeTypeStat(type=row[0], count=row[1]) for row in rows]
