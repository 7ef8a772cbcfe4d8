from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from railcal.api.app import app
from railcal.api.public import get_calendar_day, get_calendar_month, get_calendar_week


@pytest.fixture(scope="module")
def client() -> TestClient:
    return TestClient(app)


# ============================================================
# Function-style API
# ============================================================

def test_calendar_day_shape():
    res = get_calendar_day("2025-12-05")
    assert set(res) == {"date", "in_month", "railway", "holidays", "moon", "daylight", "payday", "season"}
    assert res["date"] == "2025-12-05"
    assert res["payday"] is True
    assert res["railway"] == {
        "year": 2025,
        "display": "2025/26",
        "week": 36,
        "day": 7,
        "day_name": "Friday",
        "period": 9,
        "week_in_period": 4,
        "total_weeks": 52,
    }
    assert res["season"]["name"] == "Winter"


def test_calendar_week_collects_distinct_events():
    res = get_calendar_week("2025-12-25")
    assert (res["start"], res["end"]) == ("2025-12-20", "2025-12-26")
    assert len(res["days"]) == 7
    names = [e["name"] for e in res["events"]]
    assert names == ["Christmas Eve", "Christmas Day", "Boxing Day"]


def test_calendar_month_weeks():
    res = get_calendar_month(2025, 2)
    assert (res["year"], res["month"]) == (2025, 2)
    assert len(res["weeks"]) == 4
    assert res["weeks"][0]["days"][0]["date"] == "2025-02-01"


# ============================================================
# HTTP
# ============================================================

def test_railway_day_endpoint(client):
    r = client.get("/api/v1/railway/day", params={"date": "2025-01-01"})
    assert r.status_code == 200
    body = r.json()
    assert body["railway"]["railway_year"] == 2024
    assert body["railway"]["membership"] == "previous"
    assert body["week"] == {"start": "2024-12-28", "end": "2025-01-03"}
    assert body["period"]["period"] == 10


def test_railway_day_defaults_to_today(client):
    r = client.get("/api/v1/railway/day")
    assert r.status_code == 200


def test_railway_week_endpoint(client):
    r = client.get("/api/v1/railway/week", params={"year": 2023, "week": 53})
    assert r.status_code == 200
    assert r.json()["start"] == "2024-03-23"


def test_railway_period_endpoint(client):
    r = client.get("/api/v1/railway/period", params={"year": 2025, "period": 10})
    assert r.status_code == 200
    body = r.json()
    assert (body["start"], body["end"], body["weeks"]) == ("2025-12-06", "2026-01-02", 4)


def test_railway_year_endpoint(client):
    r = client.get("/api/v1/railway/year", params={"year": 2023})
    assert r.status_code == 200
    body = r.json()
    assert body["total_weeks"] == 53
    assert body["period_count"] == len(body["periods"]) == 14


@pytest.mark.parametrize(
    "path, params",
    [
        ("/api/v1/railway/day", {"date": "2024-02-30"}),
        ("/api/v1/railway/week", {"year": 2024, "week": 53}),
        ("/api/v1/railway/period", {"year": 2024, "period": 14}),
        ("/api/v1/payroll", {"date": "not-a-date"}),
        ("/api/v1/astronomy/day", {"date": "2025-06-21", "lat": 10.0}),
    ],
)
def test_invalid_input_is_unprocessable(client, path, params):
    assert client.get(path, params=params).status_code == 422


def test_astronomy_endpoint(client):
    r = client.get("/api/v1/astronomy/day", params={"date": "2000-01-21"})
    assert r.status_code == 200
    body = r.json()
    assert body["latitude"] == pytest.approx(51.5074)
    assert body["moon"]["phase_name"] == "Full Moon"
    assert body["daylight"]["sunrise"] < body["daylight"]["sunset"]


def test_astronomy_endpoint_polar(client):
    r = client.get("/api/v1/astronomy/day", params={"date": "2025-06-21", "lat": 80, "lon": 0})
    assert r.status_code == 200
    daylight = r.json()["daylight"]
    assert daylight["sunrise"] is None and daylight["day_length_hours"] == 24.0


def test_payroll_endpoint(client):
    r = client.get("/api/v1/payroll", params={"date": "2025-12-06"})
    assert r.status_code == 200
    assert r.json() == {
        "date": "2025-12-06",
        "is_payday": False,
        "next_payday": "2026-01-02",
        "days_until": 27,
    }


def test_holidays_endpoint(client):
    r = client.get("/api/v1/holidays", params={"year": 2025})
    assert r.status_code == 200
    rows = r.json()["holidays"]
    dates = [h["date"] for h in rows]
    assert dates == sorted(dates)
    bank = [h["date"] for h in rows if h["category"] == "bank"]
    assert bank[0] == "2025-01-01" and len(bank) == 8


def test_easter_endpoint(client):
    r = client.get("/api/v1/easter", params={"year": 2026})
    assert r.json() == {"year": 2026, "easter_sunday": "2026-04-05"}


def test_calendar_endpoints(client):
    assert client.get("/api/v1/calendar/day", params={"date": "2025-03-30"}).status_code == 200
    assert client.get("/api/v1/calendar/week", params={"date": "2025-03-30"}).status_code == 200
    r = client.get("/api/v1/calendar/month", params={"year": 2025, "month": 8})
    assert r.status_code == 200
    assert len(r.json()["weeks"]) == 6


def test_timing_flag_logs_build_time(client, caplog):
    with caplog.at_level("WARNING", logger="railcal.api.public"):
        r = client.get("/api/v1/calendar/week", params={"date": "2025-03-30", "timing": "true"})
    assert r.status_code == 200
    assert any("timing /calendar/week" in rec.getMessage() for rec in caplog.records)


def test_astronomy_endpoint_last_representable_date(client):
    r = client.get("/api/v1/astronomy/day", params={"date": "9999-12-31"})
    assert r.status_code == 200
    assert r.json()["daylight"]["is_lengthening"] is True


def test_calendar_day_past_last_railway_year_is_rejected_cleanly(client):
    # railway year 9999 ends in year 10000, which datetime cannot represent
    r = client.get("/api/v1/calendar/day", params={"date": "9999-12-31"})
    assert r.status_code == 422
