"""
Sistema de configuración con Pydantic Settings.

Centraliza la configuración del servicio de casos de ciberdelitos:
- Validación automática de tipos
- Valores por defecto seguros
- Separación por entornos (dev/staging/prod)
"""
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DB_SCHEMES = ("sqlite://", "postgresql://", "postgresql+psycopg2://")

DEFAULT_JWT_SECRET = "change_this_secret_key_in_production"


class Settings(BaseSettings):
    """
    Configuración global del servicio.

    Todas las variables se pueden sobrescribir con variables de entorno.
    """

    # =========================================================
    # ENTORNO Y DEPLOYMENT
    # =========================================================

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Entorno de ejecución"
    )

    debug: bool = Field(default=False, description="Modo debug (solo para development)")

    app_name: str = Field(default="Cyber Case Tracker")

    app_version: str = Field(default="1.0.0")

    # =========================================================
    # DATABASE
    # =========================================================

    database_url: str = Field(
        default="sqlite:///./runtime/db/cyber_cases.db",
        description="URL de conexión a base de datos",
    )

    db_pool_size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Tamaño del pool de conexiones (solo PostgreSQL)",
    )

    db_max_overflow: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Conexiones adicionales permitidas",
    )

    # =========================================================
    # SEGURIDAD
    # =========================================================

    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Clave secreta para JWT",
    )

    jwt_algorithm: str = Field(default="HS256")

    # Una semana
    jwt_access_token_expire_minutes: int = Field(default=60 * 24 * 7, ge=5)

    cors_origins: str = Field(
        default="http://localhost:5000,http://localhost:5173",
        description="Orígenes CORS separados por coma",
    )

    # =========================================================
    # PAGINACIÓN
    # =========================================================

    default_page_size: int = Field(
        default=10, ge=1, le=100, description="Tamaño de página por defecto del listado"
    )

    max_page_size: int = Field(
        default=100, ge=1, le=1000, description="Tamaño de página máximo aceptado"
    )

    # =========================================================
    # OBSERVABILIDAD
    # =========================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    logs_dir: Path = Field(default=Path("runtime/logs"), description="Directorio de logs")

    # =========================================================
    # VALIDACIONES
    # =========================================================

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v.startswith(SUPPORTED_DB_SCHEMES):
            raise ValueError(f"database_url debe empezar con uno de {', '.join(SUPPORTED_DB_SCHEMES)}")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "Settings":
        """
        Reglas entre campos:
        - en producción, sin debug y con JWT_SECRET_KEY propia
        - el tamaño de página por defecto no supera el máximo aceptado
        """
        if self.is_production:
            if self.debug:
                raise ValueError("DEBUG debe estar deshabilitado en producción")
            if self.jwt_secret_key == DEFAULT_JWT_SECRET:
                raise ValueError("JWT_SECRET_KEY debe ser cambiada en producción")

        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE no puede ser mayor que MAX_PAGE_SIZE")

        return self

    # =========================================================
    # PROPIEDADES COMPUTADAS
    # =========================================================

    @property
    def is_production(self) -> bool:
        """Verifica si está en producción."""
        return self.environment == "production"

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def cors_origins_list(self) -> List[str]:
        """Orígenes CORS como lista."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )


# =========================================================
# INSTANCIA GLOBAL (SINGLETON)
# =========================================================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Obtiene la instancia global de configuración (singleton).

    Returns:
        Settings: Configuración global validada
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


# Atajo para importación
settings = get_settings()


def reload_settings() -> Settings:
    """
    Recarga la configuración (útil para tests).

    Returns:
        Settings: Nueva instancia de configuración
    """
    global _settings, settings
    _settings = None
    settings = get_settings()
    return settings
