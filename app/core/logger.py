"""
Logging estructurado (una línea JSON por evento) del servicio de casos.

Campos fijos: timestamp, level, logger, message. Campos de contexto:
case_id, caller_id, action y cualquier extra. Los datos de cuentas
bancarias y los secretos nunca se escriben en claro.
"""
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import get_settings

DEFAULT_LOGGER_NAME = "cybercases"
LOG_FILE_NAME = "cyber_cases.log"

# Claves cuyo valor se enmascara dejando visibles los 4 últimos dígitos
ACCOUNT_KEYS = frozenset({
    "sender_account_data",
    "receiver_account_data",
    "receiver_account_research",
    "search",
})

# Claves que no se escriben nunca
SECRET_KEYS = frozenset({"password", "hashed_password", "token", "access_token", "jwt_secret_key"})

# Dígito seguido de al menos otros 4 dígitos (admite espacios o guiones entre ellos)
_ACCOUNT_DIGIT = re.compile(r"\d(?=(?:[\s-]*\d){4})")


def mask_account(value: str, mask_char: str = "*") -> str:
    """
    Enmascara números de cuenta.

    "ES91 2100 0418 4502 0005 1332" -> "ES** **** **** **** **** 1332"
    """
    return _ACCOUNT_DIGIT.sub(mask_char, value)


def sanitize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Quita None, oculta secretos y enmascara cuentas (también en dicts anidados)."""
    clean = {}
    for key, value in data.items():
        if value is None:
            continue
        if key in SECRET_KEYS:
            clean[key] = "***"
        elif isinstance(value, dict):
            clean[key] = sanitize(value)
        elif key in ACCOUNT_KEYS and isinstance(value, str):
            clean[key] = mask_account(value)
        else:
            clean[key] = value
    return clean


class JsonFormatter(logging.Formatter):
    """Serializa el LogRecord y su contexto como un objeto JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "context", {}))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Decimal, date y UUID salen como texto
        return json.dumps(entry, ensure_ascii=False, default=str)


class StructuredLogger:
    """
    Envoltorio de logging.Logger con contexto de caso.

    Escribe a stdout y, si se indica, a fichero. No propaga al root logger
    para no duplicar líneas bajo uvicorn.
    """

    def __init__(self, name: str, log_file: Optional[Path] = None, level: str = "INFO"):
        """
        Args:
            name: Nombre del logger (ej: "cybercases")
            log_file: Fichero de log (opcional)
            level: Nivel mínimo (DEBUG/INFO/WARNING/ERROR)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False
        self.logger.handlers = []

        formatter = JsonFormatter()
        handlers = [logging.StreamHandler(sys.stdout)]
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log(
        self,
        level: int,
        message: str,
        case_id: Optional[str] = None,
        action: Optional[str] = None,
        caller_id: Optional[str] = None,
        **extra,
    ):
        if not self.logger.isEnabledFor(level):
            return
        context = sanitize({"case_id": case_id, "caller_id": caller_id, "action": action, **extra})
        self.logger.log(level, message, extra={"context": context})

    def debug(self, message: str, **context):
        self.log(logging.DEBUG, message, **context)

    def info(self, message: str, **context):
        self.log(logging.INFO, message, **context)

    def warning(self, message: str, **context):
        self.log(logging.WARNING, message, **context)

    def error(self, message: str, error: Optional[Exception] = None, **context):
        """ERROR; si se pasa la excepción se añaden error_type y error_message."""
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
        self.log(logging.ERROR, message, **context)


_default_logger: Optional[StructuredLogger] = None


def get_logger(name: str = DEFAULT_LOGGER_NAME, log_file: Optional[Path] = None) -> StructuredLogger:
    """
    Logger de la aplicación (singleton).

    El primero en llamar fija el fichero; por defecto <logs_dir>/cyber_cases.log
    con el nivel de LOG_LEVEL.
    """
    global _default_logger

    if _default_logger is None:
        settings = get_settings()
        _default_logger = StructuredLogger(
            name,
            log_file or settings.logs_dir / LOG_FILE_NAME,
            level=settings.log_level,
        )

    return _default_logger
