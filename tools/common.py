from __future__ import annotations

"""
Shared plumbing for the railcal check scripts.

Dates go through railcal.core.timeutil so the scripts reject the same
inputs the engine does. The ephemeris is only needed by the skyfield
comparisons (daylight_check, moon_check).
"""

import argparse
import json
import os
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from railcal.core.timeutil import as_date, require_date_range

EPHEMERIS_CANDIDATES = ("de440s.bsp", "de421.bsp")

ENV_EPHEMERIS = "RAILCAL_EPHEMERIS"
ENV_EPHEMERIS_PATH = "RAILCAL_EPHEMERIS_PATH"


@dataclass(frozen=True)
class EphemerisChoice:
    path: Optional[Path]
    skip_reason: Optional[str] = None


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """--date, or an inclusive --start/--end window, plus output switches."""
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def add_ephemeris_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ephemeris", default="", help=f"file name under ./data (default: {EPHEMERIS_CANDIDATES[0]})")
    parser.add_argument("--ephemeris-path", default="", help=f"explicit .bsp path (env {ENV_EPHEMERIS_PATH})")


def resolve_date_range(args: argparse.Namespace) -> Optional[Tuple[date, date]]:
    """(start, end) from the parsed arguments, or None when neither form was given."""
    if args.start and args.end:
        return require_date_range(args.start, args.end)
    if args.date:
        d = as_date(args.date)
        return d, d
    return None


def resolve_ephemeris(name_arg: str = "", path_arg: str = "", data_dir: Path = Path("data")) -> EphemerisChoice:
    """
    Priority: explicit path, RAILCAL_EPHEMERIS_PATH, then a named (or the
    first available candidate) file under data_dir.
    """
    path_raw = (path_arg or "").strip() or os.environ.get(ENV_EPHEMERIS_PATH, "").strip()
    if path_raw:
        p = Path(path_raw).expanduser()
        if p.exists():
            return EphemerisChoice(path=p)
        return EphemerisChoice(path=None, skip_reason=f"ephemeris path not found: {p}")

    name = (name_arg or "").strip() or os.environ.get(ENV_EPHEMERIS, "").strip()
    names: List[str] = [name] if name else list(EPHEMERIS_CANDIDATES)
    for n in names:
        p = data_dir / n
        if p.exists():
            return EphemerisChoice(path=p)

    return EphemerisChoice(
        path=None,
        skip_reason=(
            f"no ephemeris among {', '.join(names)} under {data_dir}/; "
            f"set {ENV_EPHEMERIS_PATH} or pass --ephemeris-path"
        ),
    )


def minutes_of_day(hhmm: Optional[str]) -> Optional[int]:
    if hhmm is None:
        return None
    hh, mm = hhmm.split(":")
    return int(hh) * 60 + int(mm)


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
