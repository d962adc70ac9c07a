"""
Tests de /api/dashboard/stats y /api/catalogs.
"""
from datetime import date
from decimal import Decimal


def test_stats_require_token(client):
    assert client.get("/api/dashboard/stats").status_code == 401


def test_stats_empty(client, auth_headers):
    response = client.get("/api/dashboard/stats", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "totalCases": 0,
        "totalAmount": "0.00",
        "activeCases": 0,
        "resolvedCases": 0,
        "monthlyCases": [0] * 12,
        "crimeTypeStats": [],
    }


def test_stats_after_mutations(client, auth_headers, case_payload):
    """Test: Las estadísticas reflejan altas y bajas hechas por la API."""
    client.post("/api/cyber-cases", json=case_payload, headers=auth_headers)
    second = dict(
        case_payload,
        expedientNumber="EXP-2025-0002",
        crimeType="Hacking",
        investigationStatus="Completado",
        stolenAmount="500.00",
    )
    created = client.post("/api/cyber-cases", json=second, headers=auth_headers).json()

    stats = client.get("/api/dashboard/stats", headers=auth_headers).json()

    assert stats["totalCases"] == 2
    assert stats["totalAmount"] == "2000.50"
    assert stats["activeCases"] == 1
    assert stats["resolvedCases"] == 1
    assert {s["type"]: s["count"] for s in stats["crimeTypeStats"]} == {"Phishing": 1, "Hacking": 1}

    client.delete(f"/api/cyber-cases/{created['id']}", headers=auth_headers)

    stats = client.get("/api/dashboard/stats", headers=auth_headers).json()
    assert stats["totalCases"] == 1
    assert stats["totalAmount"] == "1500.50"
    assert stats["resolvedCases"] == 0


def test_stats_ignore_list_filters(client, auth_headers, make_case):
    make_case(crime_type="Phishing", stolen_amount=Decimal("10.00"))
    make_case(crime_type="Hacking", stolen_amount=Decimal("20.00"))

    response = client.get(
        "/api/dashboard/stats",
        params={"crimeType": "Phishing"},
        headers=auth_headers,
    )

    assert response.json()["totalCases"] == 2
    assert response.json()["totalAmount"] == "30.00"


def test_monthly_cases_current_year(client, auth_headers, make_case):
    this_year = date.today().year
    make_case(case_date=date(this_year, 2, 14))
    make_case(case_date=date(this_year - 1, 2, 14))

    monthly = client.get("/api/dashboard/stats", headers=auth_headers).json()["monthlyCases"]

    assert len(monthly) == 12
    assert monthly[1] == 1
    assert sum(monthly) == 1


def test_catalogs(client, auth_headers):
    response = client.get("/api/catalogs", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert "Phishing" in body["crimeTypes"]
    assert "Fraude cibernético" in body["crimeTypes"]
    assert body["investigationStatuses"] == [
        "Pendiente",
        "En proceso",
        "Completado",
        "Sin respuesta",
        "Rechazado",
    ]
    assert body["activeStatuses"] == ["Pendiente", "En proceso"]
    assert body["resolvedStatuses"] == ["Completado"]
