# src/railcal/core/railway.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Tuple

from .errors import InvalidRange, RailcalError
from .timeutil import ONE_DAY, add_days, as_date, make_date, sunday_based_weekday

log = logging.getLogger(__name__)

WEEKS_PER_PERIOD = 4
DAYS_PER_WEEK = 7

# day_of_rail_week 1..7
RAIL_DAY_NAMES = ("Saturday", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


class YearMembership(str, Enum):
    """
    Which side of the railway-year boundary a Gregorian date fell on,
    relative to its own calendar year.
    """
    PREVIOUS = "previous"
    CURRENT = "current"
    ROLLED_FORWARD = "rolled_forward"


@dataclass(frozen=True)
class RailwayCoordinate:
    railway_year: int
    rail_week: int           # 1..53
    day_of_rail_week: int    # 1=Saturday .. 7=Friday
    period: int              # ceil(rail_week / 4)
    week_in_period: int      # 1..4
    total_weeks: int         # 52 or 53
    week_one_start: date
    railway_year_display: str
    day_name: str
    membership: YearMembership = YearMembership.CURRENT


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date  # inclusive


@dataclass(frozen=True)
class PeriodRange:
    period: int
    start: date
    end: date  # inclusive
    start_week: int
    end_week: int

    @property
    def weeks(self) -> int:
        return self.end_week - self.start_week + 1


# ============================================================
# Year boundary
# ============================================================

def week_one_start(railway_year: int) -> date:
    """
    Week 1 Day 1 of a railway year: the Saturday on or before March 31.
    Always falls on March 25..31.
    """
    march31 = make_date(railway_year, 3, 31)
    days_back = (sunday_based_weekday(march31) + 1) % 7
    return add_days(march31, -days_back)


def total_weeks(railway_year: int) -> int:
    """Number of rail weeks in the railway year (52 or 53)."""
    days = (week_one_start(railway_year + 1) - week_one_start(railway_year)).days
    weeks = days // DAYS_PER_WEEK
    if weeks not in (52, 53):
        raise RailcalError(f"railway year {railway_year} has {weeks} weeks (expected 52 or 53)")
    return weeks


def period_count(railway_year: int) -> int:
    """Periods in the year; a 53-week year ends with a one-week period 14."""
    return -(-total_weeks(railway_year) // WEEKS_PER_PERIOD)


def railway_year_end(railway_year: int) -> date:
    """Last day (a Friday) of the railway year."""
    return week_one_start(railway_year + 1) - ONE_DAY


def railway_year_display(railway_year: int) -> str:
    """'2024/25' style label."""
    return f"{railway_year}/{(railway_year + 1) % 100:02d}"


def rail_week_start(d: date | str) -> date:
    """The Saturday on or before d."""
    d = as_date(d)
    return add_days(d, -((sunday_based_weekday(d) + 1) % 7))


def _resolve_railway_year(d: date) -> Tuple[YearMembership, int, date]:
    """
    Decide which railway year d belongs to.

    A railway year straddles two Gregorian years, so d is compared against the
    week-one start of its own calendar year and of the following one.
    """
    this_start = week_one_start(d.year)
    if d < this_start:
        membership = YearMembership.PREVIOUS
    elif d >= week_one_start(d.year + 1):
        membership = YearMembership.ROLLED_FORWARD
    else:
        membership = YearMembership.CURRENT

    if membership is YearMembership.PREVIOUS:
        year = d.year - 1
        return membership, year, week_one_start(year)
    if membership is YearMembership.ROLLED_FORWARD:
        year = d.year + 1
        log.debug("date %s rolled forward into railway year %d", d, year)
        return membership, year, week_one_start(year)
    return membership, d.year, this_start


# ============================================================
# Forward conversion
# ============================================================

def date_to_railway(d: date | str) -> RailwayCoordinate:
    """
    Convert a Gregorian date into its railway-calendar coordinate.
    """
    d = as_date(d)
    membership, year, start = _resolve_railway_year(d)

    days_since_start = (d - start).days
    rail_week = days_since_start // DAYS_PER_WEEK + 1
    day_of_rail_week = days_since_start % DAYS_PER_WEEK + 1

    return RailwayCoordinate(
        railway_year=year,
        rail_week=rail_week,
        day_of_rail_week=day_of_rail_week,
        period=-(-rail_week // WEEKS_PER_PERIOD),
        week_in_period=(rail_week - 1) % WEEKS_PER_PERIOD + 1,
        total_weeks=total_weeks(year),
        week_one_start=start,
        railway_year_display=railway_year_display(year),
        day_name=RAIL_DAY_NAMES[day_of_rail_week - 1],
        membership=membership,
    )


# ============================================================
# Inverse conversion
# ============================================================

def railway_to_date_range(railway_year: int, rail_week: int, *, strict: bool = True) -> DateRange:
    """
    Saturday..Friday date range of a rail week.

    strict=True rejects weeks outside 1..total_weeks(railway_year) with
    InvalidRange. strict=False computes the arithmetically consistent date
    for any week number (week 0 is the last week of the previous year, etc.).
    """
    if strict:
        n = total_weeks(railway_year)
        if not (1 <= rail_week <= n):
            raise InvalidRange(f"rail_week must be in 1..{n} for railway year {railway_year}: {rail_week}")
    start = add_days(week_one_start(railway_year), (rail_week - 1) * DAYS_PER_WEEK)
    return DateRange(start=start, end=add_days(start, DAYS_PER_WEEK - 1))


def get_period_dates(railway_year: int, period: int, *, strict: bool = True) -> PeriodRange:
    """
    Date range and week span of a period. The last period is clamped to the
    year's final week.
    """
    n = total_weeks(railway_year)
    if strict:
        pc = period_count(railway_year)
        if not (1 <= period <= pc):
            raise InvalidRange(f"period must be in 1..{pc} for railway year {railway_year}: {period}")

    start_week = (period - 1) * WEEKS_PER_PERIOD + 1
    end_week = min(period * WEEKS_PER_PERIOD, n)

    first = railway_to_date_range(railway_year, start_week, strict=False)
    last = railway_to_date_range(railway_year, end_week, strict=False)
    return PeriodRange(
        period=period,
        start=first.start,
        end=last.end,
        start_week=start_week,
        end_week=end_week,
    )


def iter_periods(railway_year: int) -> List[PeriodRange]:
    return [get_period_dates(railway_year, p) for p in range(1, period_count(railway_year) + 1)]
