from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone

from datevalue import wallclock


def test_make_rolls_over_months_and_days() -> None:
    assert wallclock.make(2019, 12, 1) == datetime(2020, 1, 1)
    assert wallclock.make(2019, 1, 31) == datetime(2019, 3, 3)
    assert wallclock.make(2019, 0, 0) == datetime(2018, 12, 31)
    assert wallclock.make(2019, -1, 15) == datetime(2018, 12, 15)
    assert wallclock.make(2020, 1, 29) == datetime(2020, 2, 29)


def test_make_rolls_over_time_fields() -> None:
    assert wallclock.make(2019, 10, 23, 0, 0, -1) == datetime(2019, 11, 22, 23, 59, 59)
    assert wallclock.make(2019, 10, 23, 25, 0, 0, 1500) == datetime(2019, 11, 24, 1, 0, 1, 500000)


def test_make_invalid_fields_give_none() -> None:
    assert wallclock.make(float("nan"), 0, 1) is None
    assert wallclock.make(2019, 0, float("nan")) is None
    assert wallclock.make(10000, 0, 1) is None


def test_millis_round_trip() -> None:
    dt = datetime(2019, 11, 23, 14, 5, 9, 123000)
    ms = wallclock.to_millis(dt)
    assert isinstance(ms, int)
    assert wallclock.from_millis(ms) == dt
    assert wallclock.to_millis(dt + timedelta(milliseconds=1)) == ms + 1


def test_invalid_instant_is_nan() -> None:
    assert math.isnan(wallclock.to_millis(None))
    assert wallclock.from_millis(float("nan")) is None


def test_from_native_truncates_and_localizes() -> None:
    assert wallclock.from_native(datetime(2019, 11, 23, 1, 2, 3, 456789)) == datetime(2019, 11, 23, 1, 2, 3, 456000)
    assert wallclock.from_native(date(2019, 11, 23)) == datetime(2019, 11, 23)

    aware = datetime(2019, 11, 23, 12, 0, tzinfo=timezone.utc)
    local = wallclock.from_native(aware)
    assert local is not None and local.tzinfo is None
    assert wallclock.to_millis(local) == int(aware.timestamp()) * 1000


def test_js_weekday() -> None:
    assert wallclock.js_weekday(date(2019, 11, 24)) == 0  # Sunday
    assert wallclock.js_weekday(date(2019, 11, 23)) == 6


def test_week_number_matches_iso_for_monday_weeks() -> None:
    d = date(2018, 1, 1)
    while d < date(2022, 1, 1):
        assert wallclock.week_number(d, 1) == d.isocalendar()[1], d
        d += timedelta(days=1)


def test_week_number_sunday_weeks() -> None:
    assert wallclock.week_number(date(2019, 11, 23), 0) == 47
    assert wallclock.week_number(date(2019, 11, 24), 0) == 48
    assert wallclock.week_number(date(2019, 11, 24), 1) == 47
