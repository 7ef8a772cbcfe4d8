from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from railcal.core.astronomy import DayLengthInfo, MoonPhaseInfo, get_day_length, get_moon_phase
from railcal.core.config import AstroConfig, ObserverConfig, RailcalConfig
from railcal.core.easter import get_easter_sunday
from railcal.core.errors import RailcalError
from railcal.core.payroll import days_until_payday, get_next_payday, is_payday
from railcal.core.railway import (
    RailwayCoordinate,
    YearMembership,
    date_to_railway,
    get_period_dates,
    railway_to_date_range,
)
from railcal.core.timeutil import as_date
from railcal.features.config import HolidayCategory
from railcal.features.holidays import HolidayEntry, get_uk_bank_holidays
from railcal.features.views import (
    DaySummary,
    day_summary,
    month_grid,
    railway_year_overview,
    week_days,
)

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("railcal.api.public")


# ============================================================
# Response Models
# ============================================================
class RailwayCoordinateModel(BaseModel):
    railway_year: int
    rail_week: int = Field(description="1..53")
    day_of_rail_week: int = Field(description="1=Saturday .. 7=Friday")
    period: int
    week_in_period: int
    total_weeks: int
    week_one_start: date
    railway_year_display: str
    day_name: str
    membership: YearMembership


class DateRangeModel(BaseModel):
    start: date
    end: date


class PeriodModel(BaseModel):
    railway_year: int
    period: int
    start: date
    end: date
    start_week: int
    end_week: int
    weeks: int


class RailwayDayResponse(BaseModel):
    date: date
    railway: RailwayCoordinateModel
    week: DateRangeModel
    period: PeriodModel


class RailwayWeekResponse(BaseModel):
    railway_year: int
    rail_week: int
    start: date
    end: date


class RailwayYearResponse(BaseModel):
    railway_year: int
    display: str
    start: date
    end: date
    total_weeks: int
    period_count: int
    periods: List[PeriodModel]


class DayLengthModel(BaseModel):
    day_length_hours: float
    day_length_formatted: str
    sunrise: Optional[str] = Field(default=None, description="HH:MM local mean time; null in continuous day/night")
    sunset: Optional[str] = None
    day_length_percent: int
    is_lengthening: bool
    change_minutes: int
    change_formatted: str


class MoonPhaseModel(BaseModel):
    phase_index: int
    phase_name: str
    emoji: str
    illumination_percent: int
    lunar_day_offset: float
    is_significant: bool


class AstronomyDayResponse(BaseModel):
    date: date
    latitude: float
    longitude: float
    daylight: DayLengthModel
    moon: MoonPhaseModel


class PayrollResponse(BaseModel):
    date: date
    is_payday: bool
    next_payday: date
    days_until: int


class HolidayModel(BaseModel):
    date: date
    name: str
    emoji: str
    category: HolidayCategory
    approximate: bool = False


class HolidaysResponse(BaseModel):
    year: int
    holidays: List[HolidayModel]


class EasterResponse(BaseModel):
    year: int
    easter_sunday: date


# ============================================================
# Helpers
# ============================================================
@contextmanager
def _unprocessable() -> Iterator[None]:
    """Turn engine validation errors into HTTP 422."""
    try:
        yield
    except RailcalError as e:
        log.warning("rejected request: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e


def _resolve_date(date_str: Optional[str]) -> date:
    # "today" is sampled once per request and threaded through every calculation
    if date_str is None or not date_str.strip():
        return date.today()
    return as_date(date_str, "date")


def _resolve_astro(lat: Optional[float], lon: Optional[float]) -> AstroConfig:
    if lat is None and lon is None:
        return AstroConfig()
    if lat is None or lon is None:
        raise HTTPException(status_code=422, detail="lat and lon must be provided together")
    return AstroConfig(observer=ObserverConfig(latitude_deg=float(lat), longitude_deg=float(lon)))


def _coord_model(c: RailwayCoordinate) -> RailwayCoordinateModel:
    return RailwayCoordinateModel(**asdict(c))


def _period_model(railway_year: int, period: int) -> PeriodModel:
    p = get_period_dates(railway_year, period)
    return PeriodModel(railway_year=railway_year, weeks=p.weeks, **asdict(p))


def _daylight_model(x: DayLengthInfo) -> DayLengthModel:
    return DayLengthModel(**asdict(x))


def _moon_model(x: MoonPhaseInfo) -> MoonPhaseModel:
    return MoonPhaseModel(**asdict(x))


def _holiday_model(h: HolidayEntry) -> HolidayModel:
    return HolidayModel(**asdict(h))


# =========================================================
# Public JSON API (function-style, HTTP-ready)
# =========================================================
def _holiday_json(h: HolidayEntry) -> Dict[str, Any]:
    return {
        "date": h.date.isoformat(),
        "name": h.name,
        "emoji": h.emoji,
        "category": h.category.value,
        "approximate": h.approximate,
    }


def _day_json(s: DaySummary) -> Dict[str, Any]:
    r = s.railway
    return {
        "date": s.date.isoformat(),
        "in_month": s.in_month,
        "railway": {
            "year": r.railway_year,
            "display": r.railway_year_display,
            "week": r.rail_week,
            "day": r.day_of_rail_week,
            "day_name": r.day_name,
            "period": r.period,
            "week_in_period": r.week_in_period,
            "total_weeks": r.total_weeks,
        },
        "holidays": [_holiday_json(h) for h in s.holidays],
        "moon": {
            "phase": s.moon.phase_index,
            "name": s.moon.phase_name,
            "emoji": s.moon.emoji,
            "illumination": s.moon.illumination_percent,
            "lunar_day": round(s.moon.lunar_day_offset, 6),
            "significant": s.moon.is_significant,
        },
        "daylight": {
            "hours": s.daylight.day_length_hours,
            "formatted": s.daylight.day_length_formatted,
            "sunrise": s.daylight.sunrise,
            "sunset": s.daylight.sunset,
            "percent": s.daylight.day_length_percent,
            "lengthening": s.daylight.is_lengthening,
            "change": s.daylight.change_formatted,
        },
        "payday": s.is_payday,
        "season": {"name": s.season.name, "emoji": s.season.emoji},
    }


def get_calendar_day(
    date_: str | date,
    *,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> dict:
    d = as_date(date_, "date")
    cfg = RailcalConfig(astro=_resolve_astro(lat, lon))
    return _day_json(day_summary(d, config=cfg))


def get_calendar_week(
    date_: str | date,
    *,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> dict:
    d = as_date(date_, "date")
    cfg = RailcalConfig(astro=_resolve_astro(lat, lon))
    days = week_days(d, config=cfg)
    first = days[0].railway

    # distinct events of the week, first occurrence wins
    events: List[Dict[str, Any]] = []
    seen = set()
    for s in days:
        for h in s.holidays:
            if h.name in seen:
                continue
            seen.add(h.name)
            events.append(_holiday_json(h))

    return {
        "railway_year": first.railway_year,
        "display": first.railway_year_display,
        "rail_week": first.rail_week,
        "period": first.period,
        "week_in_period": first.week_in_period,
        "start": days[0].date.isoformat(),
        "end": days[-1].date.isoformat(),
        "days": [_day_json(s) for s in days],
        "events": events,
    }


def get_calendar_month(
    year: int,
    month: int,
    *,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> dict:
    cfg = RailcalConfig(astro=_resolve_astro(lat, lon))
    grid = month_grid(year, month, config=cfg)
    return {
        "year": grid.year,
        "month": grid.month,
        "weeks": [
            {
                "railway_year": week[0].railway.railway_year,
                "rail_week": week[0].railway.rail_week,
                "days": [_day_json(s) for s in week],
            }
            for week in grid.weeks
        ],
    }


# ============================================================
# Endpoints
# ============================================================
@router.get("/railway/day", response_model=RailwayDayResponse)
def get_railway_day(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD (default: today)"),
) -> RailwayDayResponse:
    with _unprocessable():
        d = _resolve_date(date_str)
        c = date_to_railway(d)
        week = railway_to_date_range(c.railway_year, c.rail_week)
        return RailwayDayResponse(
            date=d,
            railway=_coord_model(c),
            week=DateRangeModel(start=week.start, end=week.end),
            period=_period_model(c.railway_year, c.period),
        )


@router.get("/railway/week", response_model=RailwayWeekResponse)
def get_railway_week(
    year: int = Query(..., description="railway year, e.g. 2025 for 2025/26"),
    week: int = Query(..., description="rail week 1..52/53"),
) -> RailwayWeekResponse:
    with _unprocessable():
        r = railway_to_date_range(year, week)
        return RailwayWeekResponse(railway_year=year, rail_week=week, start=r.start, end=r.end)


@router.get("/railway/period", response_model=PeriodModel)
def get_railway_period(
    year: int = Query(...),
    period: int = Query(..., description="1..13 (14 in a 53-week year)"),
) -> PeriodModel:
    with _unprocessable():
        return _period_model(year, period)


@router.get("/railway/year", response_model=RailwayYearResponse)
def get_railway_year(year: int = Query(...)) -> RailwayYearResponse:
    with _unprocessable():
        ov = railway_year_overview(year)
        return RailwayYearResponse(
            railway_year=ov.railway_year,
            display=ov.display,
            start=ov.start,
            end=ov.end,
            total_weeks=ov.total_weeks,
            period_count=ov.period_count,
            periods=[PeriodModel(railway_year=year, weeks=p.weeks, **asdict(p)) for p in ov.periods],
        )


@router.get("/astronomy/day", response_model=AstronomyDayResponse)
def get_astronomy_day(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD (default: today)"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="observer latitude (deg)"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="observer longitude (deg, east positive)"),
) -> AstronomyDayResponse:
    with _unprocessable():
        d = _resolve_date(date_str)
        astro = _resolve_astro(lat, lon)
        return AstronomyDayResponse(
            date=d,
            latitude=astro.observer.latitude_deg,
            longitude=astro.observer.longitude_deg,
            daylight=_daylight_model(get_day_length(d, config=astro)),
            moon=_moon_model(get_moon_phase(d)),
        )


@router.get("/payroll", response_model=PayrollResponse)
def get_payroll(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD (default: today)"),
) -> PayrollResponse:
    with _unprocessable():
        d = _resolve_date(date_str)
        return PayrollResponse(
            date=d,
            is_payday=is_payday(d),
            next_payday=get_next_payday(d),
            days_until=days_until_payday(d),
        )


@router.get("/holidays", response_model=HolidaysResponse)
def get_holidays(year: int = Query(..., ge=1, le=9998)) -> HolidaysResponse:
    with _unprocessable():
        rows = sorted(get_uk_bank_holidays(year), key=lambda h: h.date)
        return HolidaysResponse(year=year, holidays=[_holiday_model(h) for h in rows])


@router.get("/easter", response_model=EasterResponse)
def get_easter(year: int = Query(..., ge=1, le=9999)) -> EasterResponse:
    with _unprocessable():
        return EasterResponse(year=year, easter_sunday=get_easter_sunday(year))


# =========================================================
# Calendar JSON endpoints (stable schema)
# =========================================================
@router.get("/calendar/day")
def get_calendar_day_endpoint(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD (default: today)"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
) -> Dict[str, Any]:
    with _unprocessable():
        return get_calendar_day(_resolve_date(date_str), lat=lat, lon=lon)


@router.get("/calendar/week")
def get_calendar_week_endpoint(
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD (default: today)"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
    timing: bool = Query(False, description="log build timing (diagnostics)"),
) -> Dict[str, Any]:
    t0 = time.perf_counter()
    with _unprocessable():
        res = get_calendar_week(_resolve_date(date_str), lat=lat, lon=lon)
    if timing:
        log.warning("timing /calendar/week start=%s total=%.3fs", res["start"], time.perf_counter() - t0)
    return res


@router.get("/calendar/month")
def get_calendar_month_endpoint(
    year: int = Query(..., ge=2, le=9998),
    month: int = Query(..., ge=1, le=12),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
    timing: bool = Query(False, description="log build timing (diagnostics)"),
) -> Dict[str, Any]:
    t0 = time.perf_counter()
    with _unprocessable():
        res = get_calendar_month(year, month, lat=lat, lon=lon)
    if timing:
        log.warning(
            "timing /calendar/month year=%d month=%d weeks=%d total=%.3fs",
            year, month, len(res["weeks"]), time.perf_counter() - t0,
        )
    return res
