"""
ENDPOINTS DE CASOS DE CIBERDELITOS.

Capa fina sobre los servicios: traduce query/body a tipos del núcleo,
inyecta la identidad del usuario autenticado y serializa en camelCase.
La lógica de filtrado, paginación y validación vive en app/services.

Cualquier usuario autenticado puede leer y modificar cualquier caso.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.auth import User, get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import ValidationException
from app.models.case_schemas import (
    CyberCaseCreate,
    CyberCaseListResponse,
    CyberCaseResponse,
    CyberCaseUpdate,
)
from app.services.case_filters import CaseFilter
from app.services.case_query import CaseQueryService
from app.services.case_service import CaseService

router = APIRouter(
    prefix="/api/cyber-cases",
    tags=["cyber-cases"],
)


def get_case_service(db: Session = Depends(get_db)) -> CaseService:
    return CaseService(db)


def get_case_query_service(db: Session = Depends(get_db)) -> CaseQueryService:
    return CaseQueryService(db, default_limit=get_settings().default_page_size)


def parse_date_param(value: Optional[str], field: str) -> Optional[date]:
    """Fecha ISO de un query param; "" se trata como ausente."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationException(
            f"Fecha inválida en {field}: {value}",
            field=field,
            errors=[{"field": field, "message": "Formato esperado YYYY-MM-DD"}],
        )


@router.get(
    "",
    response_model=CyberCaseListResponse,
    response_model_by_alias=True,
    summary="Listado paginado con filtros",
)
def list_cases(
    page: int = Query(1, ge=1, description="Número de página (1-based)"),
    limit: Optional[int] = Query(
        None, ge=1, le=get_settings().max_page_size, description="Casos por página"
    ),
    search: Optional[str] = Query(
        None, description="Subcadena en expediente, tipo de delito o víctima"
    ),
    crime_type: Optional[str] = Query(None, alias="crimeType", description="Tipo de delito exacto"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Fecha inicio (inclusive)"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Fecha fin (inclusive)"),
    service: CaseQueryService = Depends(get_case_query_service),
    current_user: User = Depends(get_current_user),
) -> CyberCaseListResponse:
    """Devuelve la página solicitada y el total de casos que cumplen los filtros."""
    case_filter = CaseFilter(
        search=search,
        crime_type=crime_type,
        date_from=parse_date_param(date_from, "dateFrom"),
        date_to=parse_date_param(date_to, "dateTo"),
    )

    result = service.list_cases(case_filter, page=page, limit=limit, caller_id=current_user.id)

    return CyberCaseListResponse(
        cases=[CyberCaseResponse.model_validate(c) for c in result.records],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_next=result.has_next,
        has_prev=result.has_prev,
    )


@router.get("/{case_id}", response_model=CyberCaseResponse, response_model_by_alias=True)
def get_case(
    case_id: str,
    service: CaseService = Depends(get_case_service),
    current_user: User = Depends(get_current_user),
) -> CyberCaseResponse:
    return CyberCaseResponse.model_validate(service.get_case(case_id))


@router.post(
    "",
    response_model=CyberCaseResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_case(
    payload: CyberCaseCreate,
    service: CaseService = Depends(get_case_service),
    current_user: User = Depends(get_current_user),
) -> CyberCaseResponse:
    """Registra un caso; createdBy es siempre el usuario autenticado."""
    cyber_case = service.create_case(payload, caller_id=current_user.id)
    return CyberCaseResponse.model_validate(cyber_case)


@router.put("/{case_id}", response_model=CyberCaseResponse, response_model_by_alias=True)
def update_case(
    case_id: str,
    payload: CyberCaseUpdate,
    service: CaseService = Depends(get_case_service),
    current_user: User = Depends(get_current_user),
) -> CyberCaseResponse:
    """Actualización parcial: solo cambian los campos enviados."""
    cyber_case = service.update_case(case_id, payload, caller_id=current_user.id)
    return CyberCaseResponse.model_validate(cyber_case)


@router.delete("/{case_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_case(
    case_id: str,
    service: CaseService = Depends(get_case_service),
    current_user: User = Depends(get_current_user),
) -> Response:
    service.delete_case(case_id, caller_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
