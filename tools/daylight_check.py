from __future__ import annotations

"""
Daylight check script: approximate sunrise/sunset vs skyfield.

Uses:
- railcal.core.astronomy.get_day_length
- railcal.core.providers.skyfield_provider.SkyfieldProvider.sunrise_sunset_utc_for_date

The approximation ignores DST, so skyfield times are compared in UTC
(GMT is London's mean clock).
"""

import argparse
from datetime import timezone

from railcal.core.astronomy import get_day_length
from railcal.core.config import AstroConfig
from railcal.core.providers.skyfield_provider import SkyfieldProvider
from railcal.core.timeutil import iter_dates

from tools.common import (
    add_common_args,
    add_ephemeris_args,
    dump_json,
    minutes_of_day,
    resolve_date_range,
    resolve_ephemeris,
    skip,
)

UTC = timezone.utc


def _hhmm(dt) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(UTC).strftime("%H:%M")


def main() -> None:
    parser = argparse.ArgumentParser(description="Day length approximation check")
    add_common_args(parser)
    add_ephemeris_args(parser)
    args = parser.parse_args()

    window = resolve_date_range(args)
    if window is None:
        parser.error("--date or --start/--end required")
    start, end = window

    eph = resolve_ephemeris(args.ephemeris, args.ephemeris_path)
    if eph.skip_reason:
        skip(eph.skip_reason)

    cfg = AstroConfig()
    provider = SkyfieldProvider(ephemeris_path=eph.path)

    rows = []
    worst = 0
    for d in iter_dates(start, end):
        approx = get_day_length(d, config=cfg)
        rise_utc, set_utc = provider.sunrise_sunset_utc_for_date(
            d,
            UTC,
            latitude=cfg.observer.latitude_deg,
            longitude=cfg.observer.longitude_deg,
        )
        ref_rise, ref_set = _hhmm(rise_utc), _hhmm(set_utc)

        deltas = []
        for a, r in ((approx.sunrise, ref_rise), (approx.sunset, ref_set)):
            ma, mr = minutes_of_day(a), minutes_of_day(r)
            deltas.append(None if ma is None or mr is None else ma - mr)
        worst = max([worst] + [abs(x) for x in deltas if x is not None])

        row = {
            "date": d.isoformat(),
            "approx": {"sunrise": approx.sunrise, "sunset": approx.sunset, "hours": approx.day_length_hours},
            "skyfield": {"sunrise": ref_rise, "sunset": ref_set},
            "delta_minutes": {"sunrise": deltas[0], "sunset": deltas[1]},
        }
        rows.append(row)
        if args.verbose and not args.json:
            delta = "/".join("n/a" if x is None else f"{x:+d}" for x in deltas)
            print(
                f"{d.isoformat()}  approx {approx.sunrise}-{approx.sunset} ({approx.day_length_formatted})  "
                f"skyfield {ref_rise}-{ref_set}  d={delta}m"
            )

    if args.json:
        dump_json({"rows": rows, "max_abs_delta_minutes": worst})
    else:
        print(f"max |delta| = {worst} min over {len(rows)} days")


if __name__ == "__main__":
    main()
