"""Fixtures pytest: BD SQLite en memoria por test y cliente HTTP autenticado."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, configure_sqlite_engine, get_db
from app.main import app
from app.models.cyber_case import CyberCase


@pytest.fixture(scope="function")
def db_engine():
    """Engine en memoria compartido por todas las sesiones del test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine, wal=False)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Sesión DB en memoria para tests."""
    Session = sessionmaker(bind=db_engine)
    session = Session()

    yield session

    session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """TestClient con get_db apuntando a la BD del test."""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Cabecera Bearer del usuario admin."""
    response = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def case_payload():
    """Payload válido de alta en formato de cable (camelCase)."""
    return {
        "caseDate": "2025-03-15",
        "expedientNumber": "EXP-2025-0001",
        "crimeType": "Phishing",
        "senderAccountData": "ES91 2100 0418 4502 0005 1332",
        "victim": "María López",
        "receiverAccountData": "ES79 2100 0813 6101 2345 6789",
        "receiverAccountResearch": None,
        "investigationStatus": "Pendiente",
        "stolenAmount": "1500.50",
        "observations": "Correo suplantando al banco",
    }


@pytest.fixture
def make_case(db_session):
    """
    Inserta casos directamente en BD.

    created_at se escalona (cada caso 1 minuto más reciente que el anterior)
    para que el orden del listado sea determinista.
    """
    counter = {"n": 0}
    base_time = datetime(2025, 1, 1, 12, 0, 0)

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        created_at = overrides.pop("created_at", base_time + timedelta(minutes=n))
        values = {
            "case_date": date(2025, 1, 10),
            "expedient_number": f"EXP-TEST-{n:04d}",
            "crime_type": "Hacking",
            "sender_account_data": "cuenta emisora",
            "victim": f"Víctima {n}",
            "receiver_account_data": "cuenta receptora",
            "investigation_status": "Pendiente",
            "stolen_amount": Decimal("100.00"),
            "created_by": "admin",
            "created_at": created_at,
            "updated_at": created_at,
        }
        values.update(overrides)
        cyber_case = CyberCase(**values)
        db_session.add(cyber_case)
        db_session.commit()
        db_session.refresh(cyber_case)
        return cyber_case

    return _make
