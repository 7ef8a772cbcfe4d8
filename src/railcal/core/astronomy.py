# src/railcal/core/astronomy.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Protocol, Tuple, runtime_checkable

from .config import AstroConfig, MoonConfig
from .timeutil import as_date

# phase_index -> (name, emoji)
MOON_PHASES: Tuple[Tuple[str, str], ...] = (
    ("New Moon", "\U0001F311"),
    ("Waxing Crescent", "\U0001F312"),
    ("First Quarter", "\U0001F313"),
    ("Waxing Gibbous", "\U0001F314"),
    ("Full Moon", "\U0001F315"),
    ("Waning Gibbous", "\U0001F316"),
    ("Last Quarter", "\U0001F317"),
    ("Waning Crescent", "\U0001F318"),
)
SIGNIFICANT_PHASES = frozenset({0, 2, 4, 6})


def norm360(deg: float) -> float:
    x = deg % 360.0
    return x + 360.0 if x < 0 else x


@runtime_checkable
class ReferenceProvider(Protocol):
    """
    Precise ephemeris used to sanity-check the approximations below
    (see tools/daylight_check.py, tools/moon_check.py).
    """
    def sunrise_sunset_utc_for_date(
        self,
        day_local: date,
        tzinfo_local: tzinfo,
        *,
        latitude: float,
        longitude: float,
    ) -> Tuple[Optional[datetime], Optional[datetime]]: ...

    def moon_phase_deg(self, dt_utc: datetime) -> float: ...


# ============================================================
# Daylight
# ============================================================

@dataclass(frozen=True)
class DayLengthInfo:
    day_length_hours: float          # rounded to 0.01h
    day_length_formatted: str        # "16h 38m"
    sunrise: Optional[str]           # "HH:MM" (None in continuous day/night)
    sunset: Optional[str]
    day_length_percent: int          # 0..100 within the configured band
    is_lengthening: bool
    change_minutes: int
    change_formatted: str            # "+2m" / "-3m"


def _solar_declination_rad(day_of_year: int, axial_tilt_deg: float) -> float:
    """Sinusoidal declination model."""
    return math.radians(axial_tilt_deg * math.sin(math.radians(360.0 / 365.0 * (day_of_year + 284))))


def _cos_hour_angle(day_of_year: int, config: AstroConfig) -> float:
    decl = _solar_declination_rad(day_of_year, config.axial_tilt_deg)
    lat = math.radians(config.observer.latitude_deg)
    return -math.tan(lat) * math.tan(decl)


def _day_length_from_cos(cos_h: float) -> float:
    # polar day / polar night are valid degenerate results
    if cos_h < -1.0:
        return 24.0
    if cos_h > 1.0:
        return 0.0
    return 2.0 * math.degrees(math.acos(cos_h)) / 15.0


def _equation_of_time_minutes(day_of_year: int) -> float:
    b = math.radians(360.0 / 365.0 * (day_of_year - 81))
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def _format_clock(minutes: float) -> str:
    total = int(round(minutes)) % (24 * 60)
    hh, mm = divmod(total, 60)
    return f"{hh:02d}:{mm:02d}"


def _format_duration(hours: float) -> str:
    total = int(round(hours * 60))
    hh, mm = divmod(total, 60)
    return f"{hh}h {mm}m"


def get_day_length(d: date | str, *, config: AstroConfig = AstroConfig()) -> DayLengthInfo:
    """
    Approximate day length, sunrise and sunset (local mean clock, no DST) for
    the configured observer.

    Standard solar-geometry approximation; good to a few minutes at
    mid-latitudes.
    """
    d = as_date(d)
    doy = d.timetuple().tm_yday

    cos_h = _cos_hour_angle(doy, config)
    hours = _day_length_from_cos(cos_h)

    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    if -1.0 <= cos_h <= 1.0:
        time_correction = 4.0 * config.observer.longitude_deg + _equation_of_time_minutes(doy)
        solar_noon = 12 * 60 - time_correction
        half_day_minutes = hours * 30.0
        sunrise = _format_clock(solar_noon - half_day_minutes)
        sunset = _format_clock(solar_noon + half_day_minutes)

    lo, hi = config.min_day_length_hours, config.max_day_length_hours
    percent = round((hours - lo) / (hi - lo) * 100)
    percent = max(0, min(100, percent))

    # trend: tomorrow, with cos clamped so polar edges stay finite
    next_doy = 1 if (d.month, d.day) == (12, 31) else doy + 1
    next_cos = max(-1.0, min(1.0, _cos_hour_angle(next_doy, config)))
    next_hours = _day_length_from_cos(next_cos)
    change = next_hours - hours
    is_lengthening = change > 0
    change_minutes = round(abs(change) * 60)

    return DayLengthInfo(
        day_length_hours=round(hours, 2),
        day_length_formatted=_format_duration(hours),
        sunrise=sunrise,
        sunset=sunset,
        day_length_percent=percent,
        is_lengthening=is_lengthening,
        change_minutes=change_minutes,
        change_formatted=f"{'+' if is_lengthening else '-'}{change_minutes}m",
    )


# ============================================================
# Moon
# ============================================================

@dataclass(frozen=True)
class MoonPhaseInfo:
    phase_index: int             # 0..7
    phase_name: str
    emoji: str
    illumination_percent: int    # 0..100
    lunar_day_offset: float      # days since last mean new moon, [0, synodic)
    is_significant: bool         # new / first quarter / full / last quarter


def lunar_day_offset(d: date | str, *, config: MoonConfig = MoonConfig()) -> float:
    """Days since the last mean new moon, sampled at 00:00 UTC of d."""
    d = as_date(d)
    t = datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    days = (t - config.reference_new_moon).total_seconds() / 86400.0
    synodic = config.synodic_month_days
    offset = days % synodic
    # float modulo can land exactly on synodic for tiny negative inputs
    return 0.0 if offset >= synodic else offset


def phase_index_for_offset(offset: float, synodic: float) -> int:
    """
    Eight equal bands centred on the principal phases; past 7.5 bands the
    cycle wraps back to New Moon.
    """
    band = synodic / 8.0
    for i in range(8):
        if offset < band * (i + 0.5):
            return i
    return 0


def get_moon_phase(d: date | str, *, config: MoonConfig = MoonConfig()) -> MoonPhaseInfo:
    """
    Moon phase from a mean synodic month anchored at a known new moon.
    """
    offset = lunar_day_offset(d, config=config)
    synodic = config.synodic_month_days
    illumination = round((1.0 - math.cos(2.0 * math.pi * offset / synodic)) / 2.0 * 100.0)
    idx = phase_index_for_offset(offset, synodic)
    name, emoji = MOON_PHASES[idx]
    return MoonPhaseInfo(
        phase_index=idx,
        phase_name=name,
        emoji=emoji,
        illumination_percent=int(illumination),
        lunar_day_offset=offset,
        is_significant=idx in SIGNIFICANT_PHASES,
    )


def phase_angle_deg(d: date | str, *, config: MoonConfig = MoonConfig()) -> float:
    """Mean elongation (0=new, 180=full) implied by the model; comparable to skyfield's moon_phase."""
    return norm360(lunar_day_offset(d, config=config) / config.synodic_month_days * 360.0)
