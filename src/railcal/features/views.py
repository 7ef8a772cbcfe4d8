# src/railcal/features/views.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from railcal.core.astronomy import DayLengthInfo, MoonPhaseInfo, get_day_length, get_moon_phase
from railcal.core.config import RailcalConfig
from railcal.core.errors import InvalidRange
from railcal.core.payroll import is_payday
from railcal.core.railway import (
    PeriodRange,
    RailwayCoordinate,
    date_to_railway,
    iter_periods,
    rail_week_start,
    railway_year_display,
    railway_year_end,
    total_weeks,
    week_one_start,
)
from railcal.core.timeutil import add_days, as_date, make_date
from railcal.features.config import SeasonLabel
from railcal.features.holidays import HolidayEntry, holidays_between
from railcal.features.seasons import season_for_date

MAX_MONTH_WEEKS = 6


@dataclass(frozen=True)
class DaySummary:
    """
    Everything a calendar cell shows for one date.
    """
    date: date
    railway: RailwayCoordinate
    holidays: Tuple[HolidayEntry, ...]
    moon: MoonPhaseInfo
    daylight: DayLengthInfo
    is_payday: bool
    season: SeasonLabel
    in_month: bool = True

    @property
    def holiday(self) -> Optional[HolidayEntry]:
        return self.holidays[0] if self.holidays else None


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    weeks: List[List[DaySummary]] = field(default_factory=list)


@dataclass(frozen=True)
class RailwayYearOverview:
    railway_year: int
    display: str
    start: date
    end: date
    total_weeks: int
    periods: List[PeriodRange]

    @property
    def period_count(self) -> int:
        return len(self.periods)


def _summaries(
    start: date,
    days: int,
    *,
    config: RailcalConfig,
    month: Optional[int] = None,
) -> List[DaySummary]:
    end = add_days(start, days - 1)
    by_date: dict = {}
    for h in holidays_between(start, end):
        by_date.setdefault(h.date, []).append(h)

    out: List[DaySummary] = []
    for i in range(days):
        d = add_days(start, i)
        out.append(
            DaySummary(
                date=d,
                railway=date_to_railway(d),
                holidays=tuple(by_date.get(d, ())),
                moon=get_moon_phase(d, config=config.moon),
                daylight=get_day_length(d, config=config.astro),
                is_payday=is_payday(d, config=config.payroll),
                season=season_for_date(d),
                in_month=True if month is None else d.month == month,
            )
        )
    return out


def day_summary(d: date | str, *, config: RailcalConfig = RailcalConfig()) -> DaySummary:
    d = as_date(d)
    return _summaries(d, 1, config=config)[0]


def week_days(d: date | str, *, config: RailcalConfig = RailcalConfig()) -> List[DaySummary]:
    """The Saturday..Friday rail week containing d."""
    return _summaries(rail_week_start(d), 7, config=config)


def month_grid(year: int, month: int, *, config: RailcalConfig = RailcalConfig()) -> MonthGrid:
    """
    Saturday-start weeks covering a calendar month. Only weeks holding at
    least one day of the month are kept (at most six).
    """
    if not (1 <= month <= 12):
        raise InvalidRange(f"month must be in 1..12: {month}")
    first = make_date(year, month, 1)
    start = rail_week_start(first)
    cells = _summaries(start, MAX_MONTH_WEEKS * 7, config=config, month=month)

    weeks: List[List[DaySummary]] = []
    for w in range(MAX_MONTH_WEEKS):
        week = cells[w * 7:(w + 1) * 7]
        if any(c.in_month for c in week):
            weeks.append(week)
    return MonthGrid(year=year, month=month, weeks=weeks)


def railway_year_overview(railway_year: int) -> RailwayYearOverview:
    return RailwayYearOverview(
        railway_year=railway_year,
        display=railway_year_display(railway_year),
        start=week_one_start(railway_year),
        end=railway_year_end(railway_year),
        total_weeks=total_weeks(railway_year),
        periods=iter_periods(railway_year),
    )
