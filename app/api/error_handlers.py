"""
Traducción de excepciones del servicio a respuestas HTTP.

- ValidationException / RequestValidationError -> 400
- AuthenticationException                       -> 401
- CaseNotFoundException                         -> 404
- StoreException y resto                        -> 500 (mensaje opaco)
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    AuthenticationException,
    CaseNotFoundException,
    CyberCaseException,
    StoreException,
    ValidationException,
)
from app.core.logger import get_logger

logger = get_logger()


async def validation_exception_handler(request: Request, exc: ValidationException):
    """Errores de validación de mutaciones (incluye expediente duplicado)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation error",
            "error_code": exc.code,
            "errors": exc.errors or [{"field": exc.field, "message": exc.message}],
            "details": exc.details,
        },
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Errores de esquema detectados por FastAPI (cuerpo, query, path)."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) if loc else None,
            "message": err.get("msg"),
            "type": err.get("type"),
        })

    logger.warning(
        "Petición rechazada por validación",
        action="request_validation_failed",
        path=request.url.path,
        fields=[e["field"] for e in errors],
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation error",
            "error_code": "VALIDATION_ERROR",
            "errors": errors,
        },
    )


async def authentication_handler(request: Request, exc: AuthenticationException):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": exc.message, "error_code": exc.code},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def case_not_found_handler(request: Request, exc: CaseNotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "message": "Cyber case not found",
            "error_code": exc.code,
            "details": exc.details,
        },
    )


async def store_error_handler(request: Request, exc: StoreException):
    """Fallo de persistencia: no se exponen detalles internos."""
    logger.error(
        "Error de almacenamiento",
        action="store_error",
        path=request.url.path,
        exception=exc.to_dict(),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Error de almacenamiento al procesar la petición",
            "error_code": exc.code,
        },
    )


async def service_error_handler(request: Request, exc: CyberCaseException):
    logger.error(
        "Error interno del servicio",
        action="internal_error",
        path=request.url.path,
        exception=exc.to_dict(),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Error interno del servidor",
            "error_code": exc.code,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra los handlers en la aplicación."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(AuthenticationException, authentication_handler)
    app.add_exception_handler(CaseNotFoundException, case_not_found_handler)
    app.add_exception_handler(StoreException, store_error_handler)
    app.add_exception_handler(CyberCaseException, service_error_handler)
