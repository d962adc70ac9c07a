"""
Sistema de excepciones estandarizado del servicio de casos.

Todas las excepciones del sistema heredan de CyberCaseException y siguen
un formato consistente con:
- Código de error único
- Mensaje descriptivo
- Detalles adicionales (dict)
- Severity level

La capa API traduce cada familia a un código HTTP (ver app/api/error_handlers.py).
"""
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorSeverity(str, Enum):
    """Niveles de severidad para errores."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CyberCaseException(Exception):
    """
    Excepción base del servicio.

    Todas las excepciones custom deben heredar de esta clase.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        original_error: Optional[Exception] = None
    ):
        """
        Inicializa una excepción del servicio.

        Args:
            code: Código único del error (ej: "CASE_NOT_FOUND")
            message: Mensaje descriptivo para humanos
            details: Detalles adicionales (dict)
            severity: Nivel de severidad
            original_error: Excepción original si es un wrap
        """
        self.code = code
        self.message = message
        self.details = details or {}
        self.severity = severity
        self.original_error = original_error

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario (para API/logging).

        Returns:
            Dict con información de la excepción
        """
        result = {
            "error_code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details
        }

        if self.original_error:
            result["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error)
            }

        return result

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base


# =========================================================
# EXCEPCIONES DE VALIDACIÓN
# =========================================================

class ValidationException(CyberCaseException):
    """Datos de entrada inválidos o incompletos para una mutación."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None) or {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors

        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs
        )
        self.field = field
        self.errors = errors or []


class DuplicateExpedientException(ValidationException):
    """Ya existe un caso con el mismo número de expediente."""

    def __init__(self, expedient_number: str, **kwargs):
        super().__init__(
            message=f"Ya existe un caso con número de expediente: {expedient_number}",
            field="expedientNumber",
            errors=[{
                "field": "expedientNumber",
                "message": "El número de expediente ya existe",
            }],
            **kwargs
        )
        self.details["expedient_number"] = expedient_number
        self.code = "DUPLICATE_EXPEDIENT"


# =========================================================
# EXCEPCIONES DE ALMACENAMIENTO
# =========================================================

class CaseNotFoundException(CyberCaseException):
    """Caso no encontrado en base de datos."""

    def __init__(self, case_id: str, **kwargs):
        super().__init__(
            code="CASE_NOT_FOUND",
            message=f"Caso no encontrado: {case_id}",
            details={"case_id": case_id},
            severity=ErrorSeverity.LOW,
            **kwargs
        )
        self.case_id = case_id


class StoreException(CyberCaseException):
    """Fallo de persistencia (conexión, restricción no clasificada...)."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            code="STORE_ERROR",
            message=message,
            severity=ErrorSeverity.HIGH,
            **kwargs
        )


# =========================================================
# EXCEPCIONES DE AUTENTICACIÓN
# =========================================================

class AuthenticationException(CyberCaseException):
    """Error de autenticación."""

    def __init__(self, message: str = "Autenticación fallida", **kwargs):
        super().__init__(
            code="AUTH_ERROR",
            message=message,
            severity=ErrorSeverity.MEDIUM,
            **kwargs
        )


def wrap_exception(error: Exception, context: str, **details) -> CyberCaseException:
    """
    Convierte una excepción arbitraria en CyberCaseException.

    Args:
        error: Excepción original
        context: Operación en curso (ej: "create_case")
        **details: Datos adicionales para el campo details

    Returns:
        La misma excepción si ya es del servicio, o una genérica INTERNAL_ERROR
    """
    if isinstance(error, CyberCaseException):
        return error

    return CyberCaseException(
        code="INTERNAL_ERROR",
        message=f"Error interno en {context}",
        details={"context": context, **details},
        severity=ErrorSeverity.HIGH,
        original_error=error,
    )
