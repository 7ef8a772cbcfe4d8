from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from railcal.core.errors import InvalidDate, InvalidRange, RailcalError
from railcal.core.railway import (
    YearMembership,
    date_to_railway,
    get_period_dates,
    iter_periods,
    period_count,
    rail_week_start,
    railway_to_date_range,
    railway_year_display,
    railway_year_end,
    total_weeks,
    week_one_start,
)

YEARS = range(1990, 2061)


@pytest.mark.parametrize(
    "year, expected",
    [
        (2018, date(2018, 3, 31)),  # March 31 is itself a Saturday
        (2023, date(2023, 3, 25)),  # March 31 is a Friday => earliest possible start
        (2024, date(2024, 3, 30)),
        (2025, date(2025, 3, 29)),
        (2026, date(2026, 3, 28)),
    ],
)
def test_week_one_start_known_years(year, expected):
    assert week_one_start(year) == expected


def test_week_one_start_is_saturday_in_last_week_of_march():
    for y in YEARS:
        d = week_one_start(y)
        assert d.weekday() == 5, y
        assert d.month == 3 and 25 <= d.day <= 31, y


def test_total_weeks_is_52_or_53():
    counts = {total_weeks(y) for y in YEARS}
    assert counts == {52, 53}
    assert total_weeks(2023) == 53
    assert total_weeks(2024) == 52


def test_week_one_start_maps_to_week_one_day_one():
    for y in YEARS:
        c = date_to_railway(week_one_start(y))
        assert (c.railway_year, c.rail_week, c.day_of_rail_week, c.period, c.week_in_period) == (y, 1, 1, 1, 1)
        assert c.day_name == "Saturday"


def test_every_week_round_trips():
    for y in YEARS:
        for w in range(1, total_weeks(y) + 1):
            r = railway_to_date_range(y, w)
            assert (r.end - r.start).days == 6
            assert r.start.weekday() == 5 and r.end.weekday() == 4
            c = date_to_railway(r.start)
            assert (c.railway_year, c.rail_week) == (y, w)
            assert date_to_railway(r.end).rail_week == w


def test_consecutive_days_advance_by_one_rail_day():
    d = date(2022, 12, 1)
    prev = date_to_railway(d)
    while d < date(2027, 6, 1):
        d = d + timedelta(days=1)
        cur = date_to_railway(d)
        if cur.railway_year == prev.railway_year:
            assert (cur.rail_week - 1) * 7 + cur.day_of_rail_week == (prev.rail_week - 1) * 7 + prev.day_of_rail_week + 1
        else:
            assert cur.railway_year == prev.railway_year + 1
            assert (prev.rail_week, prev.day_of_rail_week) == (prev.total_weeks, 7)
            assert (cur.rail_week, cur.day_of_rail_week) == (1, 1)
        prev = cur


def test_coordinate_invariants_hold_for_every_day():
    d = date(2023, 1, 1)
    while d <= date(2026, 12, 31):
        c = date_to_railway(d)
        r = railway_to_date_range(c.railway_year, c.rail_week)
        assert c.week_one_start <= r.start <= d <= r.end
        assert c.period == -(-c.rail_week // 4)
        assert c.week_in_period == (c.rail_week - 1) % 4 + 1
        assert 1 <= c.rail_week <= c.total_weeks
        d = d + timedelta(days=1)


def test_date_before_week_one_belongs_to_previous_railway_year():
    c = date_to_railway(date(2025, 1, 1))
    assert c.membership is YearMembership.PREVIOUS
    assert c.railway_year == 2024
    assert c.railway_year_display == "2024/25"
    assert c.week_one_start == date(2024, 3, 30)
    assert (c.rail_week, c.day_of_rail_week, c.day_name) == (40, 5, "Wednesday")
    assert (c.period, c.week_in_period) == (10, 4)


def test_date_after_week_one_stays_in_current_year():
    c = date_to_railway(date(2025, 6, 1))
    assert c.membership is YearMembership.CURRENT
    assert c.railway_year == 2025


def test_reference_payday_is_friday_before_period_ten():
    c = date_to_railway(date(2025, 12, 5))
    assert (c.rail_week, c.day_of_rail_week, c.day_name) == (36, 7, "Friday")
    assert (c.period, c.week_in_period) == (9, 4)
    assert date_to_railway(date(2025, 12, 6)).period == 10


def test_iso_string_input_is_accepted():
    assert date_to_railway("2025-12-05") == date_to_railway(date(2025, 12, 5))


@pytest.mark.parametrize("bad", ["2024-04-31", "2024-02-30", "05/12/2025", "", 20250101, None])
def test_malformed_dates_fail_fast(bad):
    with pytest.raises(InvalidDate):
        date_to_railway(bad)


def test_datetime_is_rejected():
    with pytest.raises(InvalidDate):
        date_to_railway(datetime(2025, 1, 1, 12, 0))


def test_errors_are_value_errors():
    assert issubclass(InvalidDate, RailcalError)
    assert issubclass(InvalidRange, ValueError)


def test_week_53_is_a_one_week_period_14():
    c = date_to_railway(date(2024, 3, 29))
    assert (c.railway_year, c.rail_week, c.total_weeks) == (2023, 53, 53)
    assert (c.period, c.week_in_period) == (14, 1)

    p = get_period_dates(2023, 14)
    assert (p.start_week, p.end_week, p.weeks) == (53, 53, 1)
    assert (p.start, p.end) == (date(2024, 3, 23), date(2024, 3, 29))
    assert period_count(2023) == 14
    assert period_count(2024) == 13


def test_period_dates():
    p = get_period_dates(2025, 10)
    assert (p.start_week, p.end_week) == (37, 40)
    assert p.start == date(2025, 12, 6)
    assert p.end == date(2026, 1, 2)


def test_periods_tile_the_year():
    for y in (2023, 2024, 2025):
        periods = iter_periods(y)
        assert periods[0].start == week_one_start(y)
        assert periods[-1].end == railway_year_end(y)
        for a, b in zip(periods, periods[1:]):
            assert b.start == a.end + timedelta(days=1)
        assert sum(p.weeks for p in periods) == total_weeks(y)


@pytest.mark.parametrize("week", [0, 53, -1, 100])
def test_out_of_range_week_is_rejected(week):
    # 2024 has 52 weeks
    with pytest.raises(InvalidRange):
        railway_to_date_range(2024, week)


@pytest.mark.parametrize("period", [0, 14, 15])
def test_out_of_range_period_is_rejected(period):
    with pytest.raises(InvalidRange):
        get_period_dates(2024, period)


def test_non_strict_range_is_arithmetically_consistent():
    r = railway_to_date_range(2024, 53, strict=False)
    assert r.start == week_one_start(2025)
    r0 = railway_to_date_range(2025, 0, strict=False)
    assert r0 == railway_to_date_range(2024, 52)


def test_railway_year_labels():
    assert railway_year_display(2025) == "2025/26"
    assert railway_year_display(2099) == "2099/00"
    assert railway_year_end(2025) == date(2026, 3, 27)


def test_rail_week_start_is_saturday_on_or_before():
    assert rail_week_start(date(2025, 12, 5)) == date(2025, 11, 29)
    assert rail_week_start(date(2025, 11, 29)) == date(2025, 11, 29)
