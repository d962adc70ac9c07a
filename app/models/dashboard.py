"""
Esquemas de las estadísticas del panel principal.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

MONTHS_PER_YEAR = 12


class CrimeTypeStat(BaseModel):
    """Número de casos de un tipo de delito."""
    type: str
    count: int = Field(..., ge=0)


class DashboardStats(BaseModel):
    """
    Estadísticas globales sobre toda la tabla de casos.

    monthly_cases tiene siempre 12 posiciones (0 = enero ... 11 = diciembre)
    con los casos del año en curso; crime_type_stats va ordenado por número
    de casos descendente y, a igualdad, por nombre.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_cases: int = Field(..., ge=0)
    total_amount: Decimal = Field(..., ge=0)
    active_cases: int = Field(..., ge=0)
    resolved_cases: int = Field(..., ge=0)
    monthly_cases: List[int] = Field(..., min_length=MONTHS_PER_YEAR, max_length=MONTHS_PER_YEAR)
    crime_type_stats: List[CrimeTypeStat]

    @field_serializer("total_amount")
    def serialize_amount(self, value: Decimal) -> str:
        return f"{value:.2f}"
