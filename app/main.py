from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.auth import router as auth_router
from app.api.cyber_cases import router as cyber_cases_router
from app.api.dashboard import router as dashboard_router
from app.api.error_handlers import register_exception_handlers
from app.core.config import get_settings
from app.core.database import get_engine, health_check
from app.core.init_db import create_tables
from app.core.logger import get_logger


# =========================================================
# CARGA DE ENTORNO
# =========================================================

load_dotenv()

settings = get_settings()


# =========================================================
# FASTAPI APP (ENTRYPOINT ASGI)
# =========================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Crea las tablas si faltan (equivalente a app.core.init_db)."""
    tables = create_tables()
    get_logger().info("Aplicación iniciada", action="startup", tables=tables)
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(cyber_cases_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    """Información del servicio."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "login": "/api/login",
            "cases": "/api/cyber-cases",
            "dashboard": "/api/dashboard/stats",
            "catalogs": "/api/catalogs",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health")
def health():
    """Health check: comprueba la conexión a base de datos."""
    db_healthy = health_check()
    return {
        "status": "healthy" if db_healthy else "unhealthy",
        "database": "healthy" if db_healthy else "unhealthy",
    }


# =========================================================
# MAIN CLÁSICO (solo para comprobaciones manuales)
# =========================================================

def main():
    """
    Punto de entrada manual (NO usado por uvicorn).
    Sirve para comprobar que la conexión a base de datos funciona.
    """
    engine = get_engine()
    connection = engine.connect()
    print("✅ Conexión a la base de datos OK")
    connection.close()


if __name__ == "__main__":
    main()
