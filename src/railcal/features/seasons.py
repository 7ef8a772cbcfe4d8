# src/railcal/features/seasons.py
from __future__ import annotations

from datetime import date

from railcal.core.timeutil import as_date
from railcal.features.config import SEASONS, SeasonLabel, season_key_from_month


def season_for_date(d: date | str) -> SeasonLabel:
    """
    Meteorological season label (Mar-May spring, Jun-Aug summer,
    Sep-Nov autumn, otherwise winter).
    """
    d = as_date(d)
    return SEASONS[season_key_from_month(d.month)]
