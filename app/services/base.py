"""
Servicio base para toda la aplicación.

Proporciona funcionalidad común a todos los servicios:
- Logging estructurado
- Manejo de excepciones
- Acceso a base de datos
"""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import CyberCaseException, StoreException, wrap_exception
from app.core.logger import StructuredLogger, get_logger


class BaseService:
    """
    Clase base para todos los servicios.

    Los servicios encapsulan la lógica de negocio; no guardan estado entre
    peticiones más allá de la sesión que reciben.
    """

    def __init__(
        self,
        db: Session,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Inicializa el servicio base.

        Args:
            db: Sesión de base de datos
            logger: Logger estructurado (opcional)
        """
        self.db = db
        self.logger = logger or get_logger()

    def _log_info(self, message: str, **kwargs):
        """Log nivel INFO."""
        self.logger.info(message, **kwargs)

    def _log_warning(self, message: str, **kwargs):
        """Log nivel WARNING."""
        self.logger.warning(message, **kwargs)

    def _log_error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log nivel ERROR."""
        self.logger.error(message, error=error, **kwargs)

    def _handle_exception(
        self,
        error: Exception,
        context: str,
        case_id: Optional[str] = None
    ) -> CyberCaseException:
        """
        Maneja una excepción de manera consistente.

        Los errores de SQLAlchemy se convierten en StoreException; el
        llamador decide si reintenta la petición completa.

        Args:
            error: Excepción original
            context: Contexto donde ocurrió
            case_id: ID del caso (si aplica)

        Returns:
            CyberCaseException lista para relanzar
        """
        if isinstance(error, CyberCaseException):
            self._log_warning(
                f"Error de servicio en {context}",
                case_id=case_id,
                action=context,
                error_code=error.code,
            )
            return error

        if isinstance(error, SQLAlchemyError):
            self._log_error(
                f"Error de almacenamiento en {context}",
                error=error,
                case_id=case_id,
                action=context,
            )
            return StoreException(
                f"Error de almacenamiento en {context}",
                details={"context": context},
                original_error=error,
            )

        self._log_error(
            f"Unexpected error in {context}",
            error=error,
            case_id=case_id,
            action=context,
        )
        return wrap_exception(error, context)
