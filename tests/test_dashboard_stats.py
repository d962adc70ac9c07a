"""
Tests del motor de estadísticas del panel.
"""
from datetime import date
from decimal import Decimal

import pytest

from app.services.dashboard_stats import (
    DashboardStatsService,
    fill_monthly_buckets,
    to_amount,
)

TODAY = date(2025, 6, 15)


@pytest.fixture
def stats_service(db_session):
    return DashboardStatsService(db_session)


def test_fill_monthly_buckets():
    assert fill_monthly_buckets({}) == [0] * 12
    assert fill_monthly_buckets({1: 3, 12: 1}) == [3] + [0] * 10 + [1]
    # meses fuera de rango se ignoran
    assert fill_monthly_buckets({0: 5, 13: 2}) == [0] * 12


def test_to_amount():
    assert to_amount(None) == Decimal("0.00")
    assert to_amount(0) == Decimal("0.00")
    assert to_amount(1500.5) == Decimal("1500.50")
    assert str(to_amount(Decimal("10"))) == "10.00"


def test_empty_database(stats_service):
    """Test: BD vacía -> ceros y 12 meses a 0."""
    stats = stats_service.get_dashboard_stats(today=TODAY)

    assert stats.total_cases == 0
    assert stats.total_amount == Decimal("0.00")
    assert stats.active_cases == 0
    assert stats.resolved_cases == 0
    assert stats.monthly_cases == [0] * 12
    assert stats.crime_type_stats == []

    dumped = stats.model_dump(by_alias=True)
    assert dumped["totalAmount"] == "0.00"


def test_totals_and_statuses(stats_service, make_case):
    make_case(investigation_status="Pendiente", stolen_amount=Decimal("1500.50"))
    make_case(investigation_status="En proceso", stolen_amount=Decimal("200.25"))
    make_case(investigation_status="Completado", stolen_amount=Decimal("99.25"))
    make_case(investigation_status="Rechazado", stolen_amount=Decimal("0.00"))
    make_case(investigation_status="Sin respuesta", stolen_amount=Decimal("10.00"))

    stats = stats_service.get_dashboard_stats(today=TODAY)

    assert stats.total_cases == 5
    assert stats.total_amount == Decimal("1810.00")
    assert stats.active_cases == 2
    assert stats.resolved_cases == 1
    # Rechazado y Sin respuesta no son ni activos ni resueltos
    assert stats.active_cases + stats.resolved_cases <= stats.total_cases


def test_monthly_cases_current_year_only(stats_service, make_case):
    make_case(case_date=date(2025, 1, 5))
    make_case(case_date=date(2025, 1, 20))
    make_case(case_date=date(2025, 3, 1))
    make_case(case_date=date(2025, 12, 31))
    make_case(case_date=date(2024, 1, 5))
    make_case(case_date=date(2026, 1, 1))

    stats = stats_service.get_dashboard_stats(today=TODAY)

    assert len(stats.monthly_cases) == 12
    assert stats.monthly_cases[0] == 2
    assert stats.monthly_cases[2] == 1
    assert stats.monthly_cases[11] == 1
    assert sum(stats.monthly_cases) == 4
    # los totales sí incluyen todos los años
    assert stats.total_cases == 6


def test_crime_type_stats_ordering(stats_service, make_case):
    for _ in range(3):
        make_case(crime_type="Phishing")
    for _ in range(2):
        make_case(crime_type="Ransomware")
    for _ in range(2):
        make_case(crime_type="Malware")
    make_case(crime_type="Estafa por SMS")

    stats = stats_service.get_dashboard_stats(today=TODAY)

    assert [(s.type, s.count) for s in stats.crime_type_stats] == [
        ("Phishing", 3),
        ("Malware", 2),
        ("Ransomware", 2),
        ("Estafa por SMS", 1),
    ]


def test_crime_type_counts_add_up(stats_service, make_case):
    for crime_type in ("Hacking", "Hacking", "Phishing", "Tipo no catalogado"):
        make_case(crime_type=crime_type)

    stats = stats_service.get_dashboard_stats(today=TODAY)

    assert sum(s.count for s in stats.crime_type_stats) == stats.total_cases
    assert "Tipo no catalogado" in {s.type for s in stats.crime_type_stats}


def test_stats_ignore_caller(stats_service, make_case):
    make_case(created_by="admin")
    make_case(created_by="analyst")

    as_admin = stats_service.get_dashboard_stats(caller_id="admin", today=TODAY)
    as_analyst = stats_service.get_dashboard_stats(caller_id="analyst", today=TODAY)

    assert as_admin == as_analyst
    assert as_admin.total_cases == 2


def test_wire_format(stats_service, make_case):
    make_case(crime_type="Phishing", stolen_amount=Decimal("1500.5"), case_date=date(2025, 3, 15))

    dumped = stats_service.get_dashboard_stats(today=TODAY).model_dump(by_alias=True)

    assert set(dumped) == {
        "totalCases",
        "totalAmount",
        "activeCases",
        "resolvedCases",
        "monthlyCases",
        "crimeTypeStats",
    }
    assert dumped["totalAmount"] == "1500.50"
    assert dumped["crimeTypeStats"] == [{"type": "Phishing", "count": 1}]
