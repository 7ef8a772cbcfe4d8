from __future__ import annotations

"""
Railway year check script.

Uses:
- railcal.core.railway.week_one_start / total_weeks / iter_periods
- railcal.core.railway.date_to_railway (round-trip of every week start)
"""

import argparse

from railcal.core.railway import (
    date_to_railway,
    iter_periods,
    railway_to_date_range,
    railway_year_display,
    railway_year_end,
    total_weeks,
    week_one_start,
)

from tools.common import dump_json


def main() -> None:
    parser = argparse.ArgumentParser(description="Railway year / period table check")
    parser.add_argument("--year", type=int, required=True, help="railway year (2025 => 2025/26)")
    parser.add_argument("--years", type=int, default=1, help="number of consecutive years")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    payload = []
    failures = 0
    for y in range(args.year, args.year + args.years):
        n = total_weeks(y)

        # every week start must convert back to (y, week, Saturday)
        for w in range(1, n + 1):
            r = railway_to_date_range(y, w)
            c = date_to_railway(r.start)
            if (c.railway_year, c.rail_week, c.day_of_rail_week) != (y, w, 1):
                failures += 1
                print(f"MISMATCH {y} week {w}: {r.start} -> {c.railway_year} wk{c.rail_week} d{c.day_of_rail_week}")

        periods = iter_periods(y)
        if args.json:
            payload.append(
                {
                    "railway_year": y,
                    "display": railway_year_display(y),
                    "start": week_one_start(y).isoformat(),
                    "end": railway_year_end(y).isoformat(),
                    "total_weeks": n,
                    "periods": [
                        {
                            "period": p.period,
                            "start": p.start.isoformat(),
                            "end": p.end.isoformat(),
                            "weeks": f"{p.start_week}-{p.end_week}",
                        }
                        for p in periods
                    ],
                }
            )
            continue

        print(f"# {railway_year_display(y)}  {week_one_start(y)} .. {railway_year_end(y)}  weeks={n}")
        if args.verbose:
            for p in periods:
                print(f"  P{p.period:02d}  {p.start} .. {p.end}  wk {p.start_week:02d}-{p.end_week:02d}")

    if args.json:
        dump_json({"years": payload, "failures": failures})
    elif failures == 0:
        print("OK: all week starts round-trip")


if __name__ == "__main__":
    main()
