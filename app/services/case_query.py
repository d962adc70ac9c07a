"""
EJECUTOR DE CONSULTAS PAGINADAS DE CASOS.

Devuelve una página de casos y el total de casos que cumplen el filtro:
- Paginación real en BD (LIMIT + OFFSET)
- El conteo y la página usan exactamente el mismo predicado
- Orden: más recientes primero (created_at DESC, id DESC para desempatar)

Una página más allá de la última devuelve una lista vacía con el total
correcto; no se ajusta a la última página ni se considera error.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationException
from app.core.logger import StructuredLogger
from app.models.cyber_case import CyberCase
from app.services.base import BaseService
from app.services.case_filters import CaseFilter, compile_filter

DEFAULT_PAGE = 1


@dataclass
class CasePage:
    """Resultado de un listado paginado."""
    records: List[CyberCase]
    total: int
    page: int
    limit: int
    filters_applied: dict = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class CaseQueryService(BaseService):
    """Listado filtrado y paginado de casos."""

    def __init__(
        self,
        db: Session,
        default_limit: int = 10,
        logger: Optional[StructuredLogger] = None,
    ):
        super().__init__(db, logger)
        self.default_limit = default_limit

    def list_cases(
        self,
        case_filter: Optional[CaseFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: Optional[int] = None,
        caller_id: Optional[str] = None,
    ) -> CasePage:
        """
        Ejecuta el listado.

        Args:
            case_filter: Filtros (None = sin filtros)
            page: Página 1-based
            limit: Casos por página (None = tamaño por defecto)
            caller_id: Usuario que consulta (solo para trazas)

        Returns:
            CasePage con los casos de la página y el total

        Raises:
            ValidationException: page < 1 o limit < 1
            StoreException: fallo de la base de datos
        """
        case_filter = case_filter or CaseFilter()
        limit = self.default_limit if limit is None else limit

        if page < 1:
            raise ValidationException("La página debe ser >= 1", field="page")
        if limit < 1:
            raise ValidationException("El límite debe ser >= 1", field="limit")

        predicate = compile_filter(case_filter)
        offset = (page - 1) * limit

        try:
            total = self.db.execute(
                select(func.count(CyberCase.id)).where(predicate)
            ).scalar_one()

            records = list(
                self.db.execute(
                    select(CyberCase)
                    .where(predicate)
                    .order_by(CyberCase.created_at.desc(), CyberCase.id.desc())
                    .offset(offset)
                    .limit(limit)
                ).scalars()
            )
        except Exception as e:
            raise self._handle_exception(e, "list_cases") from e

        result = CasePage(
            records=records,
            total=total,
            page=page,
            limit=limit,
            filters_applied=case_filter.applied(),
        )

        self._log_info(
            "Listado de casos ejecutado",
            action="cases_listed",
            caller_id=caller_id,
            page=page,
            limit=limit,
            total=total,
            returned=len(records),
            filters=result.filters_applied or None,
        )
        return result

