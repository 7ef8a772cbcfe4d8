from __future__ import annotations

"""
Holiday table check script.

Uses:
- railcal.features.holidays.get_uk_bank_holidays
- railcal.core.railway.date_to_railway (rail week of each entry)
"""

import argparse

from railcal.core.railway import date_to_railway
from railcal.features.config import HolidayCategory
from railcal.features.holidays import get_uk_bank_holidays

from tools.common import dump_json


def main() -> None:
    parser = argparse.ArgumentParser(description="UK holidays & observances check")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--category", choices=[c.value for c in HolidayCategory], default=None)
    parser.add_argument("--json", action="store_true")
    args = parser.parse_args()

    rows = sorted(get_uk_bank_holidays(args.year), key=lambda h: h.date)
    if args.category:
        rows = [h for h in rows if h.category.value == args.category]

    if args.json:
        dump_json(
            {
                "year": args.year,
                "holidays": [
                    {
                        "date": h.date.isoformat(),
                        "weekday": h.date.strftime("%a"),
                        "name": h.name,
                        "category": h.category.value,
                        "approximate": h.approximate,
                        "rail_week": date_to_railway(h.date).rail_week,
                    }
                    for h in rows
                ],
            }
        )
        return

    for h in rows:
        c = date_to_railway(h.date)
        flag = "~" if h.approximate else " "
        print(
            f"{h.date.isoformat()} {h.date.strftime('%a')} {flag} {h.category.value:<9} "
            f"{c.railway_year_display} wk{c.rail_week:02d}  {h.emoji} {h.name}"
        )


if __name__ == "__main__":
    main()
