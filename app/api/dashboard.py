"""
Endpoints del panel principal: estadísticas globales y catálogos.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.auth import User, get_current_user
from app.core.database import get_db
from app.models.case_schemas import (
    ACTIVE_STATUSES,
    RESOLVED_STATUSES,
    CatalogsResponse,
    CrimeType,
    InvestigationStatus,
)
from app.models.dashboard import DashboardStats
from app.services.dashboard_stats import DashboardStatsService

router = APIRouter(prefix="/api", tags=["dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardStatsService:
    return DashboardStatsService(db)


@router.get(
    "/dashboard/stats",
    response_model=DashboardStats,
    response_model_by_alias=True,
    summary="Estadísticas globales de casos",
)
def dashboard_stats(
    service: DashboardStatsService = Depends(get_dashboard_service),
    current_user: User = Depends(get_current_user),
) -> DashboardStats:
    """
    Totales, estados, histograma mensual del año en curso y casos por tipo
    de delito, siempre sobre la tabla completa (sin filtros de listado).
    """
    return service.get_dashboard_stats(caller_id=current_user.id)


@router.get("/catalogs", response_model=CatalogsResponse, response_model_by_alias=True)
def catalogs(current_user: User = Depends(get_current_user)) -> CatalogsResponse:
    """Valores de los desplegables de tipo de delito y estado."""
    return CatalogsResponse(
        crime_types=[c.value for c in CrimeType],
        investigation_statuses=[s.value for s in InvestigationStatus],
        active_statuses=list(ACTIVE_STATUSES),
        resolved_statuses=list(RESOLVED_STATUSES),
    )
