"""
Compilador de filtros de casos.

Convierte un CaseFilter en la lista de predicados SQLAlchemy que se
combinan con AND. Un filtro ausente o vacío no aporta ninguna condición.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from app.models.cyber_case import CyberCase

LIKE_ESCAPE_CHAR = "\\"


def _empty_to_none(value: Optional[str]) -> Optional[str]:
    # Solo "" anula el filtro; los espacios forman parte del valor buscado
    return value if value else None


@dataclass(frozen=True)
class CaseFilter:
    """
    Filtros del listado de casos. Todos opcionales.

    - search: subcadena sin distinguir mayúsculas en expediente, tipo de
      delito o víctima (basta con que coincida uno).
    - crime_type: coincidencia exacta con el tipo de delito.
    - date_from / date_to: rango inclusivo sobre la fecha del caso.
    """
    search: Optional[str] = None
    crime_type: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def __post_init__(self):
        object.__setattr__(self, "search", _empty_to_none(self.search))
        object.__setattr__(self, "crime_type", _empty_to_none(self.crime_type))

    @property
    def is_empty(self) -> bool:
        return not any((self.search, self.crime_type, self.date_from, self.date_to))

    def applied(self) -> dict:
        """Filtros efectivamente aplicados (para logging)."""
        applied = {}
        if self.search:
            applied["search"] = self.search
        if self.crime_type:
            applied["crime_type"] = self.crime_type
        if self.date_from:
            applied["date_from"] = self.date_from.isoformat()
        if self.date_to:
            applied["date_to"] = self.date_to.isoformat()
        return applied


def escape_like(value: str) -> str:
    """Escapa los comodines de LIKE para buscar el texto literal."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def compile_predicates(case_filter: CaseFilter) -> List[ColumnElement[bool]]:
    """
    Traduce el filtro a predicados individuales.

    Args:
        case_filter: Filtros solicitados

    Returns:
        Lista de condiciones (vacía si no hay filtros)
    """
    predicates: List[ColumnElement[bool]] = []

    if case_filter.search:
        pattern = f"%{escape_like(case_filter.search)}%"
        predicates.append(
            or_(
                CyberCase.expedient_number.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                CyberCase.crime_type.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                CyberCase.victim.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
            )
        )

    if case_filter.crime_type:
        predicates.append(CyberCase.crime_type == case_filter.crime_type)

    if case_filter.date_from:
        predicates.append(CyberCase.case_date >= case_filter.date_from)

    if case_filter.date_to:
        predicates.append(CyberCase.case_date <= case_filter.date_to)

    return predicates


def compile_filter(case_filter: CaseFilter) -> ColumnElement[bool]:
    """
    Predicado único (AND de todos los filtros).

    Un filtro vacío produce una condición siempre verdadera.
    """
    if case_filter.is_empty:
        return true()
    return and_(*compile_predicates(case_filter))
