from pathlib import Path

from dotenv import load_dotenv

from app.core.database import Base, get_engine
from app.models.cyber_case import CyberCase  # noqa: F401, E402

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")


def create_tables(engine=None) -> list[str]:
    """Crea las tablas que falten y devuelve las registradas."""
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    return sorted(Base.metadata.tables.keys())


# =========================================================
# INIT DB
# =========================================================

def main():
    """
    Inicializa la base de datos:
    - Crea todas las tablas definidas en los modelos
    - Muestra las tablas registradas en SQLAlchemy
    """
    tables = create_tables()

    print("✅ Tablas creadas / registradas en SQLAlchemy:")
    for table in tables:
        print(f"   - {table}")

    print(f"\n📊 Total tablas: {len(tables)}")


if __name__ == "__main__":
    main()
