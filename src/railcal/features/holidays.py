# src/railcal/features/holidays.py
from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Iterable, List, Tuple

from railcal.core.easter import get_easter_sunday
from railcal.core.errors import InvalidRange
from railcal.core.timeutil import add_days, as_date, make_date, require_date_range, sunday_based_weekday
from railcal.features.config import HolidayCategory, holiday_style, is_approximate_name

log = logging.getLogger(__name__)

# reference points for the approximate (non-Gregorian) observances
APPROX_ANCHOR_YEAR = 2024
EID_AL_FITR_ANCHOR = date(2024, 4, 10)
LUNAR_YEAR_DRIFT_DAYS = 11
ISLAMIC_YEAR_DAYS = 354
EID_AL_ADHA_AFTER_FITR_DAYS = 70


@dataclass(frozen=True)
class HolidayEntry:
    date: date
    name: str
    emoji: str
    category: HolidayCategory
    approximate: bool = False


def _entry(d: date, name: str) -> HolidayEntry:
    emoji, category = holiday_style(name)
    return HolidayEntry(date=d, name=name, emoji=emoji, category=category, approximate=is_approximate_name(name))


# ============================================================
# Date rules
# ============================================================

def nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """
    n-th `weekday` (Monday=0 .. Sunday=6) of a month.

    n > 0 counts forward from the 1st; n < 0 counts back from the last day
    (n=-1 is the last occurrence).
    """
    if not (1 <= month <= 12):
        raise InvalidRange(f"month must be in 1..12: {month}")
    if not (0 <= weekday <= 6):
        raise InvalidRange(f"weekday must be in 0..6: {weekday}")
    if n == 0:
        raise InvalidRange("n must be non-zero")

    days_in_month = calendar.monthrange(year, month)[1]
    if n > 0:
        first = make_date(year, month, 1)
        day = 1 + (weekday - first.weekday()) % 7 + (n - 1) * 7
    else:
        last = make_date(year, month, days_in_month)
        day = days_in_month - (last.weekday() - weekday) % 7 + (n + 1) * 7

    if not (1 <= day <= days_in_month):
        raise InvalidRange(f"no occurrence n={n} of weekday {weekday} in {year:04d}-{month:02d}")
    return make_date(year, month, day)


def _substitute_weekday(nominal: date, taken: Iterable[date] = ()) -> date:
    """Move a weekend holiday forward to the next free weekday."""
    blocked = set(taken)
    d = nominal
    while d.weekday() >= 5 or d in blocked:
        d = add_days(d, 1)
    return d


def _christmas_and_boxing_day(year: int) -> Tuple[date, date]:
    """
    Substitute days for 25/26 December. A Boxing Day that already falls on a
    weekday keeps its date, so Christmas must step past it.
    """
    xmas_nominal = make_date(year, 12, 25)
    boxing_nominal = make_date(year, 12, 26)
    taken = [boxing_nominal] if boxing_nominal.weekday() < 5 else []
    xmas = _substitute_weekday(xmas_nominal, taken)
    boxing = _substitute_weekday(boxing_nominal, [xmas])
    return xmas, boxing


def advent_sunday(year: int) -> date:
    """Fourth Sunday before Christmas Day (always Nov 27 .. Dec 3)."""
    xmas = make_date(year, 12, 25)
    dow = sunday_based_weekday(xmas)
    days_to_prev_sunday = dow if dow != 0 else 7
    return add_days(xmas, -(days_to_prev_sunday + 21))


def _drift(year: int, modulus: int) -> int:
    """
    Lunar drift since the anchor year, wrapped to (-modulus, modulus).
    The remainder keeps the sign of the year difference, so years before
    the anchor shift the other way instead of wrapping around the cycle.
    """
    return int(math.fmod((year - APPROX_ANCHOR_YEAR) * LUNAR_YEAR_DRIFT_DAYS, modulus))


def _diwali_approx(year: int) -> date:
    # mid-October base drifting 11 days a year around a 30-day cycle
    base = 15 + _drift(year, 30)
    month = 10 + base // 30
    day = int(math.fmod(base, 30)) or 15
    # day may be zero or negative; count back from the 1st of the month
    return add_days(make_date(year, month, 1), day - 1)


def _eid_al_fitr_approx(year: int) -> date:
    shift = _drift(year, ISLAMIC_YEAR_DAYS)
    d = add_days(EID_AL_FITR_ANCHOR, -shift)
    if d.year == year:
        return d
    # keep month/day, move into the requested year
    if d.month == 2 and d.day == 29 and not calendar.isleap(year):
        log.debug("eid al-fitr approximation clamped Feb 29 -> Feb 28 for %d", year)
        return make_date(year, 2, 28)
    return make_date(year, d.month, d.day)


# ============================================================
# Table
# ============================================================

@lru_cache(maxsize=64)
def _holiday_table(year: int) -> Tuple[HolidayEntry, ...]:
    easter = get_easter_sunday(year)
    xmas, boxing = _christmas_and_boxing_day(year)
    eid_fitr = _eid_al_fitr_approx(year)

    rows: List[Tuple[date, str]] = [
        # UK bank holidays
        (_substitute_weekday(make_date(year, 1, 1)), "New Year's Day"),
        (add_days(easter, -2), "Good Friday"),
        (add_days(easter, 1), "Easter Monday"),
        (nth_weekday(year, 5, calendar.MONDAY, 1), "Early May Bank Holiday"),
        (nth_weekday(year, 5, calendar.MONDAY, -1), "Spring Bank Holiday"),
        (nth_weekday(year, 8, calendar.MONDAY, -1), "Summer Bank Holiday"),
        (xmas, "Christmas Day"),
        (boxing, "Boxing Day"),
        # Christian observances
        (make_date(year, 1, 6), "Epiphany"),
        (add_days(easter, -47), "Shrove Tuesday"),
        (add_days(easter, -46), "Ash Wednesday"),
        (add_days(easter, -21), "Mother's Day (UK)"),
        (add_days(easter, -7), "Palm Sunday"),
        (add_days(easter, -3), "Maundy Thursday"),
        (easter, "Easter Sunday"),
        (add_days(easter, 39), "Ascension Day"),
        (add_days(easter, 49), "Pentecost"),
        (advent_sunday(year), "Advent Sunday"),
        (make_date(year, 12, 24), "Christmas Eve"),
        # other faiths (approximate)
        (_diwali_approx(year), "Diwali (approx)"),
        (make_date(year, 12, 10), "Hanukkah (approx)"),
        (eid_fitr, "Eid al-Fitr (approx)"),
        (add_days(eid_fitr, EID_AL_ADHA_AFTER_FITR_DAYS), "Eid al-Adha (approx)"),
        # cultural & national
        (make_date(year, 1, 25), "Burns Night"),
        (make_date(year, 2, 14), "Valentine's Day"),
        (make_date(year, 3, 1), "St David's Day"),
        (make_date(year, 3, 17), "St Patrick's Day"),
        (make_date(year, 4, 23), "St George's Day"),
        (nth_weekday(year, 6, calendar.SUNDAY, 3), "Father's Day"),
        (make_date(year, 10, 31), "Halloween"),
        (make_date(year, 11, 5), "Bonfire Night"),
        (nth_weekday(year, 11, calendar.SUNDAY, 2), "Remembrance Sunday"),
        (make_date(year, 11, 11), "Armistice Day"),
        (make_date(year, 11, 30), "St Andrew's Day"),
        (make_date(year, 12, 31), "New Year's Eve"),
    ]
    return tuple(_entry(d, name) for d, name in rows)


def get_uk_bank_holidays(year: int) -> List[HolidayEntry]:
    """
    UK bank holidays, Christian observances and notable cultural dates for a
    calendar year. Returns a new list on every call.
    """
    return list(_holiday_table(int(year)))


def holidays_between(start: date | str, end: date | str) -> List[HolidayEntry]:
    """All entries dated in [start, end], ordered by date (table order within a day)."""
    s, e = require_date_range(start, end)
    out: List[HolidayEntry] = []
    # approximate entries can spill into the next calendar year
    for year in range(max(s.year - 1, 1), e.year + 1):
        out.extend(h for h in _holiday_table(year) if s <= h.date <= e)
    out.sort(key=lambda h: h.date)
    return out


def holidays_on(d: date | str) -> List[HolidayEntry]:
    d = as_date(d)
    return holidays_between(d, d)
