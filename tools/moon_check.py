from __future__ import annotations

"""
Moon phase check script: mean-lunation model vs skyfield.

Uses:
- railcal.core.astronomy.get_moon_phase / phase_angle_deg
- railcal.core.providers.skyfield_provider.SkyfieldProvider.moon_phase_deg
"""

import argparse
from datetime import datetime, timezone

from railcal.core.astronomy import get_moon_phase, phase_angle_deg
from railcal.core.providers.skyfield_provider import SkyfieldProvider
from railcal.core.timeutil import iter_dates

from tools.common import (
    add_common_args,
    add_ephemeris_args,
    dump_json,
    resolve_date_range,
    resolve_ephemeris,
    skip,
)

UTC = timezone.utc


def _angle_diff(a: float, b: float) -> float:
    """a - b mapped to (-180, 180]."""
    x = (a - b + 180.0) % 360.0 - 180.0
    return 180.0 if x == -180.0 else x


def main() -> None:
    parser = argparse.ArgumentParser(description="Moon phase approximation check")
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

    provider = SkyfieldProvider(ephemeris_path=eph.path)

    rows = []
    worst = 0.0
    for d in iter_dates(start, end):
        info = get_moon_phase(d)
        model_deg = phase_angle_deg(d)
        ref_deg = provider.moon_phase_deg(datetime(d.year, d.month, d.day, tzinfo=UTC))
        diff = _angle_diff(model_deg, ref_deg)
        worst = max(worst, abs(diff))

        rows.append(
            {
                "date": d.isoformat(),
                "phase": info.phase_name,
                "illumination": info.illumination_percent,
                "model_deg": round(model_deg, 3),
                "skyfield_deg": round(ref_deg, 3),
                "diff_deg": round(diff, 3),
            }
        )
        if args.verbose and not args.json:
            print(
                f"{d.isoformat()}  {info.emoji} {info.phase_name:<16} {info.illumination_percent:3d}%  "
                f"model={model_deg:7.2f}  skyfield={ref_deg:7.2f}  diff={diff:+6.2f}"
            )

    if args.json:
        dump_json({"rows": rows, "max_abs_diff_deg": round(worst, 3)})
    else:
        # 1 day of lunation ~ 12.2 deg
        print(f"max |diff| = {worst:.2f} deg (~{worst / 12.19:.1f} days) over {len(rows)} days")


if __name__ == "__main__":
    main()
