# src/railcal/core/easter.py
from __future__ import annotations

from datetime import date

from .timeutil import make_date


def get_easter_sunday(year: int) -> date:
    """
    Gregorian Easter Sunday (Anonymous Gregorian / Meeus-Jones-Butcher).
    Integer arithmetic only; exact for every proleptic Gregorian year.
    """
    y = int(year)
    a = y % 19
    b, c = divmod(y, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day0 = divmod(h + l - 7 * m + 114, 31)
    return make_date(y, month, day0 + 1)
