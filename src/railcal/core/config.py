# src/railcal/core/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone


@dataclass(frozen=True)
class ObserverConfig:
    """
    Fixed observer for the daylight estimate.

    Longitude is signed east-positive (London is slightly west => negative).
    """
    latitude_deg: float = 51.5074
    longitude_deg: float = -0.1278


@dataclass(frozen=True)
class AstroConfig:
    """
    Day-length approximation constants.
    All angles are in degrees here; conversion to radians happens in core.astronomy.
    """
    observer: ObserverConfig = field(default_factory=ObserverConfig)
    axial_tilt_deg: float = 23.44

    # reference band used for the 0..100 "how long is today" gauge
    min_day_length_hours: float = 7.5
    max_day_length_hours: float = 16.5


@dataclass(frozen=True)
class MoonConfig:
    """
    Mean-lunation moon phase model.

    reference_new_moon is a known new moon instant (UTC); dates are sampled at 00:00.
    """
    reference_new_moon: datetime = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)
    synodic_month_days: float = 29.53058867


@dataclass(frozen=True)
class PayrollConfig:
    """
    Single global pay schedule: one known payday (a Friday) + fixed cycle.
    """
    reference_payday: date = date(2025, 12, 5)
    cycle_days: int = 28


@dataclass(frozen=True)
class RailcalConfig:
    astro: AstroConfig = field(default_factory=AstroConfig)
    moon: MoonConfig = field(default_factory=MoonConfig)
    payroll: PayrollConfig = field(default_factory=PayrollConfig)
