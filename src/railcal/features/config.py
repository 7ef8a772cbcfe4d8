from __future__ import annotations

"""
Feature-level labels / constants.

- holidays: name => (emoji, category), one row per observance
- seasons: meteorological season labels keyed by month

Design goals:
- Keep every user-facing string in one place so the generators only decide dates.
- Keep mapping stable and test-friendly (names are the lookup keys).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class HolidayCategory(str, Enum):
    BANK = "bank"
    RELIGIOUS = "religious"
    CULTURAL = "cultural"


# ============================================================
# Holidays
#   NOTE:
#     "(approx)" rows are date heuristics, not lunar-calendar computations.
#     They are flagged approximate in HolidayEntry as well as in the label.
# ============================================================

HOLIDAYS: List[Tuple[str, str, HolidayCategory]] = [
    # UK bank holidays (England & Wales)
    ("New Year's Day",          "\U0001F386", HolidayCategory.BANK),
    ("Good Friday",             "✝️", HolidayCategory.BANK),
    ("Easter Monday",           "\U0001F423", HolidayCategory.BANK),
    ("Early May Bank Holiday",  "\U0001F337", HolidayCategory.BANK),
    ("Spring Bank Holiday",     "\U0001F33B", HolidayCategory.BANK),
    ("Summer Bank Holiday",     "☀️", HolidayCategory.BANK),
    ("Christmas Day",           "\U0001F384", HolidayCategory.BANK),
    ("Boxing Day",              "\U0001F381", HolidayCategory.BANK),
    # Christian observances
    ("Epiphany",                "⭐", HolidayCategory.RELIGIOUS),
    ("Shrove Tuesday",          "\U0001F95E", HolidayCategory.RELIGIOUS),
    ("Ash Wednesday",           "✝️", HolidayCategory.RELIGIOUS),
    ("Mother's Day (UK)",       "\U0001F490", HolidayCategory.CULTURAL),
    ("Palm Sunday",             "\U0001F33F", HolidayCategory.RELIGIOUS),
    ("Maundy Thursday",         "✝️", HolidayCategory.RELIGIOUS),
    ("Easter Sunday",           "\U0001F423", HolidayCategory.RELIGIOUS),
    ("Ascension Day",           "☁️", HolidayCategory.RELIGIOUS),
    ("Pentecost",               "\U0001F54A️", HolidayCategory.RELIGIOUS),
    ("Advent Sunday",           "\U0001F56F️", HolidayCategory.RELIGIOUS),
    ("Christmas Eve",           "\U0001F384", HolidayCategory.RELIGIOUS),
    # other faiths (approximate)
    ("Diwali (approx)",         "\U0001FA94", HolidayCategory.RELIGIOUS),
    ("Hanukkah (approx)",       "\U0001F54E", HolidayCategory.RELIGIOUS),
    ("Eid al-Fitr (approx)",    "\U0001F319", HolidayCategory.RELIGIOUS),
    ("Eid al-Adha (approx)",    "\U0001F319", HolidayCategory.RELIGIOUS),
    # cultural & national
    ("Burns Night",             "\U0001F3F4\U000E0067\U000E0062\U000E0073\U000E0063\U000E0074\U000E007F", HolidayCategory.CULTURAL),
    ("Valentine's Day",         "\U0001F49D", HolidayCategory.CULTURAL),
    ("St David's Day",          "\U0001F3F4\U000E0067\U000E0062\U000E0077\U000E006C\U000E0073\U000E007F", HolidayCategory.CULTURAL),
    ("St Patrick's Day",        "☘️", HolidayCategory.CULTURAL),
    ("St George's Day",         "\U0001F3F4\U000E0067\U000E0062\U000E0065\U000E006E\U000E0067\U000E007F", HolidayCategory.CULTURAL),
    ("Father's Day",            "\U0001F454", HolidayCategory.CULTURAL),
    ("Halloween",               "\U0001F383", HolidayCategory.CULTURAL),
    ("Bonfire Night",           "\U0001F386", HolidayCategory.CULTURAL),
    ("Remembrance Sunday",      "\U0001F33A", HolidayCategory.CULTURAL),
    ("Armistice Day",           "\U0001F396️", HolidayCategory.CULTURAL),
    ("St Andrew's Day",         "\U0001F3F4\U000E0067\U000E0062\U000E0073\U000E0063\U000E0074\U000E007F", HolidayCategory.CULTURAL),
    ("New Year's Eve",          "\U0001F942", HolidayCategory.CULTURAL),
]

HOLIDAY_NAMES: List[str] = [name for name, _, _ in HOLIDAYS]
HOLIDAY_STYLE_BY_NAME: Dict[str, Tuple[str, HolidayCategory]] = {
    name: (emoji, category) for name, emoji, category in HOLIDAYS
}


def holiday_style(name: str) -> Tuple[str, HolidayCategory]:
    """
    (emoji, category) for a holiday name.
    """
    try:
        return HOLIDAY_STYLE_BY_NAME[name]
    except KeyError as e:
        raise KeyError(f"Unknown holiday name: {name!r}") from e


def is_approximate_name(name: str) -> bool:
    return name.endswith("(approx)")


# ============================================================
# Seasons (meteorological, northern hemisphere)
# ============================================================

@dataclass(frozen=True)
class SeasonLabel:
    key: str
    name: str
    emoji: str
    months: str
    description: str


SEASONS: Dict[str, SeasonLabel] = {
    "winter": SeasonLabel(
        key="winter",
        name="Winter",
        emoji="❄️",
        months="Dec - Feb",
        description="Frosty mornings and long blue evenings over the network.",
    ),
    "spring": SeasonLabel(
        key="spring",
        name="Spring",
        emoji="\U0001F331",
        months="Mar - May",
        description="Bright greens, longer days, and blossoms by the sidings.",
    ),
    "summer": SeasonLabel(
        key="summer",
        name="Summer",
        emoji="☀️",
        months="Jun - Aug",
        description="Warm sunsets, bright skies, and long light evenings on the rails.",
    ),
    "autumn": SeasonLabel(
        key="autumn",
        name="Autumn",
        emoji="\U0001F342",
        months="Sep - Nov",
        description="Copper light, crisp air, and falling leaves along the line.",
    ),
}

SEASON_KEY_BY_MONTH: Dict[int, str] = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "autumn", 10: "autumn", 11: "autumn",
}


def season_key_from_month(month: int) -> str:
    m = int(month)
    try:
        return SEASON_KEY_BY_MONTH[m]
    except KeyError as e:
        raise ValueError(f"invalid month: {month}") from e
