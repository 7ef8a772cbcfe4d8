# src/railcal/core/payroll.py
from __future__ import annotations

from datetime import date
from typing import List

from .config import PayrollConfig
from .errors import RailcalError
from .timeutil import add_days, as_date, require_date_range


def _cycle_position(d: date, config: PayrollConfig) -> int:
    if config.cycle_days <= 0:
        raise RailcalError(f"cycle_days must be positive: {config.cycle_days}")
    # floor modulo: dates before the reference payday still land in 0..cycle-1
    return (d - config.reference_payday).days % config.cycle_days


def is_payday(d: date | str, *, config: PayrollConfig = PayrollConfig()) -> bool:
    return _cycle_position(as_date(d), config) == 0


def days_until_payday(d: date | str, *, config: PayrollConfig = PayrollConfig()) -> int:
    """0 on a payday, otherwise days to the next one."""
    pos = _cycle_position(as_date(d), config)
    return 0 if pos == 0 else config.cycle_days - pos


def get_next_payday(d: date | str, *, config: PayrollConfig = PayrollConfig()) -> date:
    """
    The next payday on or after d (d itself when d is a payday).
    """
    d = as_date(d)
    return add_days(d, days_until_payday(d, config=config))


def paydays_between(start: date | str, end: date | str, *, config: PayrollConfig = PayrollConfig()) -> List[date]:
    """All paydays in [start, end] (inclusive)."""
    s, e = require_date_range(start, end)
    out: List[date] = []
    cur = get_next_payday(s, config=config)
    while cur <= e:
        out.append(cur)
        cur = add_days(cur, config.cycle_days)
    return out
