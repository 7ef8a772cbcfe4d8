# src/railcal/core/timeutil.py
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Tuple

from .errors import InvalidDate

ONE_DAY = timedelta(days=1)


def as_date(value: date | str, name: str = "date") -> date:
    """
    Coerce a calendar-date input into a datetime.date.

    Parameters
    ----------
    value:
        A date, or an ISO "YYYY-MM-DD" string.
    name:
        Parameter name for error messages.

    Returns
    -------
    date
        The validated calendar date.

    Raises
    ------
    InvalidDate
        If value is a datetime (has a time-of-day), a malformed/impossible
        ISO string, or any other type.
    """
    if isinstance(value, datetime):
        raise InvalidDate(f"{name} must be a calendar date without time-of-day (got datetime {value!r})")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            return date.fromisoformat(s)
        except ValueError as e:
            raise InvalidDate(f"{name} is not a valid YYYY-MM-DD date: {value!r}") from e
    raise InvalidDate(f"{name} must be a date or ISO string (got {type(value).__name__})")


def make_date(year: int, month: int, day: int) -> date:
    """
    Build a date, failing fast (never normalizing) on impossible values.
    """
    try:
        return date(int(year), int(month), int(day))
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"invalid calendar date: year={year} month={month} day={day} ({e})") from e


def add_days(d: date, days: int) -> date:
    try:
        return d + timedelta(days=days)
    except OverflowError as e:
        raise InvalidDate(f"{d.isoformat()} {days:+d} days is outside the supported date range") from e


def sunday_based_weekday(d: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return (d.weekday() + 1) % 7


def require_date_range(start: date | str, end: date | str) -> Tuple[date, date]:
    """
    Validate [start, end] (inclusive) and ensure end >= start.
    """
    s = as_date(start, "start")
    e = as_date(end, "end")
    if e < s:
        raise InvalidDate("end must be >= start")
    return s, e


def iter_dates(start: date, end: date) -> Iterator[date]:
    cur = start
    while cur <= end:
        yield cur
        cur = cur + ONE_DAY
