from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import List, Optional, Tuple, Union
from functools import lru_cache
import logging

from skyfield.api import Loader, wgs84
from skyfield import almanac

log = logging.getLogger(__name__)


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def _default_ephemeris_path() -> Path:
    """
    Prefer de440s (longer coverage) if present; otherwise fall back to de421.
    """
    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    p421 = data_dir / "de421.bsp"
    return p440s if p440s.exists() else p421


def _resolve_ephemeris_path(
    *,
    ephemeris_path: Optional[Path],
    ephemeris: Optional[Union[str, Path]],
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path (Path) if provided
      2) ephemeris (str|Path) if provided:
         - absolute path -> use as is
         - relative path / filename -> resolve under project data dir
      3) default: prefer de440s if present else de421
    """
    if ephemeris_path is not None:
        return ephemeris_path

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris)
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    return _default_ephemeris_path()


@lru_cache(maxsize=32)
def _topos_for_latlon(lat: float, lon: float):
    return wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon)


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    Precise reference for the railcal approximations:
    - sunrise / sunset for an observer and local day
    - moon phase angle (0=new, 90=first quarter, 180=full, 270=last quarter)
    - principal moon phase instants in a window
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        resolved = _resolve_ephemeris_path(
            ephemeris_path=self.ephemeris_path,
            ephemeris=self.ephemeris,
        )
        object.__setattr__(self, "ephemeris_path", resolved)

        if not self.ephemeris_path.exists():
            data_dir = _project_data_dir()
            candidates = [
                data_dir / "de440s.bsp",
                data_dir / "de421.bsp",
            ]
            cand_str = "\n".join(f"  - {p}" for p in candidates)
            raise FileNotFoundError(
                f"Ephemeris not found: {self.ephemeris_path}\n"
                f"Place one of the following files under {data_dir}:\n"
                f"{cand_str}\n"
                "Or pass ephemeris='de440s.bsp' / ephemeris_path=Path(...)."
            )

        loader = Loader(str(self.ephemeris_path.parent))
        eph = loader(self.ephemeris_path.name)
        ts = loader.timescale()

        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)

        start_utc, end_utc = self._compute_ephemeris_utc_range()
        object.__setattr__(self, "_ephem_start_utc", start_utc)
        object.__setattr__(self, "_ephem_end_utc", end_utc)

    def _compute_ephemeris_utc_range(self) -> Tuple[datetime, datetime]:
        """
        Coverage from SPK segments, so out-of-range requests fail with a clear message
        instead of skyfield's EphemerisRangeError deep inside a search.
        """
        segments = getattr(self._eph, "spk", None)
        if segments is None or not getattr(segments, "segments", None):
            return (
                datetime.min.replace(tzinfo=timezone.utc),
                datetime.max.replace(tzinfo=timezone.utc),
            )

        segs = segments.segments
        start_jd = min(s.start_jd for s in segs)
        end_jd = max(s.end_jd for s in segs)

        t0 = self._ts.tt_jd(start_jd)
        t1 = self._ts.tt_jd(end_jd)
        return (
            t0.utc_datetime().replace(tzinfo=timezone.utc),
            t1.utc_datetime().replace(tzinfo=timezone.utc),
        )

    # ---- time helpers ----
    def _as_utc(self, dt_utc: datetime) -> datetime:
        if dt_utc.tzinfo is None:
            raise ValueError("dt_utc must be timezone-aware")
        return dt_utc.astimezone(timezone.utc)

    def _check_ephemeris_range(self, dt_utc: datetime) -> None:
        dt = self._as_utc(dt_utc)
        start = self._ephem_start_utc
        end = self._ephem_end_utc

        if dt < start or dt > end:
            raise ValueError(
                "Requested datetime is outside ephemeris coverage.\n"
                f"  requested: {dt.isoformat()}\n"
                f"  ephemeris: {self.ephemeris_path}\n"
                f"  coverage : {start.isoformat()} .. {end.isoformat()}\n"
                "Hint: use de440s.bsp (place it under ./data or pass ephemeris='de440s.bsp')."
            )

    def _t(self, dt_utc: datetime):
        self._check_ephemeris_range(dt_utc)
        return self._ts.from_datetime(self._as_utc(dt_utc))

    # ---- moon ----
    def moon_phase_deg(self, dt_utc: datetime) -> float:
        """Moon-sun ecliptic elongation in degrees [0, 360)."""
        t = self._t(dt_utc)
        return float(almanac.moon_phase(self._eph, t).degrees % 360.0)

    def moon_phase_events_utc(self, start_utc: datetime, end_utc: datetime) -> List[Tuple[datetime, int]]:
        """
        Principal phases in [start_utc, end_utc]:
        0=new, 1=first quarter, 2=full, 3=last quarter.
        """
        t0 = self._t(start_utc)
        t1 = self._t(end_utc)
        times, events = almanac.find_discrete(t0, t1, almanac.moon_phases(self._eph))
        out: List[Tuple[datetime, int]] = []
        for t, ev in zip(times, events):
            dt = t.utc_datetime()
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            out.append((dt, int(ev)))
        return out

    # ---- sunrise / sunset ----
    def sunrise_sunset_utc_for_date(
        self,
        day_local: date,
        tzinfo_local: tzinfo,
        *,
        latitude: float,
        longitude: float,
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        if tzinfo_local is None:
            raise ValueError("tzinfo_local must be provided")

        start_local = datetime(day_local.year, day_local.month, day_local.day, tzinfo=tzinfo_local)
        end_local = start_local + timedelta(days=1)

        start_utc = start_local.astimezone(timezone.utc)
        end_utc = end_local.astimezone(timezone.utc)

        self._check_ephemeris_range(start_utc)
        self._check_ephemeris_range(end_utc)

        topos = _topos_for_latlon(latitude, longitude)
        fn = almanac.sunrise_sunset(self._eph, topos)

        t0 = self._ts.from_datetime(start_utc)
        t1 = self._ts.from_datetime(end_utc)

        times, events = almanac.find_discrete(t0, t1, fn)

        sunrise_utc: Optional[datetime] = None
        sunset_utc: Optional[datetime] = None

        for t, ev in zip(times, events):
            dt = t.utc_datetime()
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            if int(ev) == 1 and sunrise_utc is None:
                sunrise_utc = dt
            elif int(ev) == 0 and sunset_utc is None:
                sunset_utc = dt

        if sunrise_utc is None or sunset_utc is None:
            log.warning(
                "sunrise/sunset not found: day=%s lat=%.6f lon=%.6f start_utc=%s end_utc=%s",
                day_local,
                latitude,
                longitude,
                start_utc.isoformat(),
                end_utc.isoformat(),
            )

        return sunrise_utc, sunset_utc
