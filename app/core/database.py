from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import get_settings

Base = declarative_base()

# Singleton para el engine y session factory
_engine = None
_session_factory = None


def get_database_url() -> str:
    return get_settings().database_url


def _ensure_sqlite_dir(database_url: str) -> None:
    """Crea el directorio del fichero SQLite si no existe."""
    database = make_url(database_url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(dbapi_conn) -> None:
    """
    Sustituye lower() de SQLite por uno Unicode.

    El lower() nativo solo convierte ASCII, así que ILIKE ("lower(x) LIKE
    lower(y)") no casaría "MARÍA" con "María".
    """
    dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def configure_sqlite_engine(engine, wal: bool = True) -> None:
    """Registra el listener de conexión SQLite (funciones Unicode y pragmas)."""

    @event.listens_for(engine, "connect")
    def on_sqlite_connect(dbapi_conn, connection_record):
        register_sqlite_functions(dbapi_conn)
        if not wal:
            return
        cursor = dbapi_conn.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=30000")
        finally:
            cursor.close()


def get_engine():
    """Obtiene el engine de base de datos (singleton)."""
    global _engine

    if _engine is None:
        settings = get_settings()
        database_url = get_database_url()

        engine_kwargs = {"echo": False, "pool_pre_ping": True}
        if settings.uses_sqlite:
            _ensure_sqlite_dir(database_url)
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": 30,
            }
        else:
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow

        _engine = create_engine(database_url, **engine_kwargs)

        if settings.uses_sqlite:
            configure_sqlite_engine(_engine)

    return _engine


def get_session_factory():
    """Obtiene el session factory (singleton)."""
    global _session_factory

    if _session_factory is None:
        engine = get_engine()
        _session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    return _session_factory


def get_db():
    """
    Dependency para FastAPI.
    Proporciona una sesión por request.

    NO hace commit automático: los servicios confirman sus propias mutaciones.
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def health_check() -> bool:
    """Comprueba que la base de datos responde."""
    from app.core.logger import get_logger

    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        get_logger().error("Base de datos no disponible", action="health_check", error=e)
        return False
