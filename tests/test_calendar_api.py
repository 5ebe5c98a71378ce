"""Tests for the calendar API endpoints."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from panchang_api.app import app
from panchang_api.routers.calendar import get_calendar


@pytest.fixture
def client(panchang_calendar):
    app.dependency_overrides[get_calendar] = lambda: panchang_calendar
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health() -> None:
    resp = TestClient(app).get("/__health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_month_defaults_to_current_month_at_default_place(client) -> None:
    resp = client.get("/v1/calendar/month")
    assert resp.status_code == 200
    data = resp.json()
    assert (data["year"], data["month"]) == (2026, 1)
    assert data["region"] == "universal"
    assert data["timezone_id"] == "Asia/Kolkata"
    assert (data["latitude"], data["longitude"]) == (28.6139, 77.209)
    assert len(data["days"]) == 31

    first = data["days"][0]
    assert first["date"] == "2026-01-01"
    assert first["tithi_name"] == "Shukla Pratipada"
    assert first["sunrise_time"] == "06:15"
    assert first["rahu_kalam"] == "07:45 - 09:15"
    assert data["days"][13]["festivals"] == ["Makar Sankranti", "Pongal"]


def test_month_with_explicit_place_and_region(client) -> None:
    resp = client.get(
        "/v1/calendar/month",
        params={"year": 2026, "month": 3, "region": "tamil", "lat": 13.0827, "lon": 80.2707, "tz": "UTC"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["region"] == "tamil"
    assert data["timezone_id"] == "UTC"
    assert len(data["days"]) == 31
    assert data["days"][3]["festivals"] == ["Holi"]


def test_month_is_cached_between_requests(client, rise_set) -> None:
    client.get("/v1/calendar/month")
    client.get("/v1/calendar/month")
    assert len(rise_set.calls) == 31


def test_month_upstream_failure_is_bad_gateway(client, longitudes) -> None:
    longitudes.fail_on = date(2026, 1, 17)
    resp = client.get("/v1/calendar/month", params={"year": 2026, "month": 1})
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["provider"] == "longitude"
    assert detail["date"] == "2026-01-17"
    assert "ephemeris offline" in detail["reason"]


def test_festival_failure_is_bad_gateway(client, festivals) -> None:
    festivals.fail = True
    resp = client.get("/v1/calendar/year")
    assert resp.status_code == 502
    assert resp.json()["detail"]["provider"] == "festival"
    assert resp.json()["detail"]["date"] is None


@pytest.mark.parametrize(
    "params",
    [
        {"month": 13},
        {"year": 0},
        {"region": "atlantis"},
        {"lat": 95.0, "lon": 77.0},
        {"tz": "Mars/Olympus_Mons"},
    ],
)
def test_month_rejects_invalid_input(client, rise_set, params) -> None:
    resp = client.get("/v1/calendar/month", params=params)
    assert resp.status_code == 422
    assert rise_set.calls == []


def test_year_groups_festivals_by_month(client) -> None:
    resp = client.get("/v1/calendar/year", params={"year": 2026, "region": "north_indian"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["year"] == 2026
    assert data["region"] == "north_indian"
    assert data["festivals_by_month"] == {
        "1": ["Makar Sankranti", "Pongal", "Vasant Panchami"],
        "3": ["Holi"],
    }


def test_elements_from_longitudes() -> None:
    resp = TestClient(app).get("/v1/calendar/elements", params={"sun": 260.5, "moon": 15.3})
    assert resp.status_code == 200
    assert resp.json() == {
        "sun_longitude": 260.5,
        "moon_longitude": 15.3,
        "tithi": "Shukla Dashami",
        "paksha": "Shukla",
        "yoga": "Siddha",
        "karana": "Vanija",
    }


def test_elements_use_configured_karana_table(monkeypatch) -> None:
    monkeypatch.setenv("PANCHANG_KARANA_TABLE", "canonical")
    resp = TestClient(app).get("/v1/calendar/elements", params={"sun": 260.5, "moon": 15.3})
    assert resp.status_code == 200
    assert resp.json()["karana"] == "Garaja"


def test_elements_require_both_longitudes() -> None:
    resp = TestClient(app).get("/v1/calendar/elements", params={"sun": 10.0})
    assert resp.status_code == 422
