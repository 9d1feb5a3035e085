"""Adapter over datetime.datetime acting as the native wall-clock date.

Instants are naive datetimes in local wall time with millisecond precision.
None stands for the invalid instant; its numeric view is NaN.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

NAN = float("nan")
MS_PER_DAY = 24 * 60 * 60 * 1000


def truncate_ms(dt: datetime) -> datetime:
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)


def from_native(value: date) -> datetime | None:
    """Copy a date/datetime into a local, naive, millisecond-precision instant."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone().replace(tzinfo=None)
            except (OverflowError, OSError, ValueError):
                return None
        return truncate_ms(value)
    return datetime(value.year, value.month, value.day)


def make(
    year: float,
    month: float,
    day: float = 1,
    hours: float = 0,
    minutes: float = 0,
    seconds: float = 0,
    ms: float = 0,
) -> datetime | None:
    """Build an instant from fields with a 0-based month, rolling over out-of-range values.

    make(2019, 12, 1) is 2020-01-01, make(2019, 1, 31) is 2019-03-03 and
    make(2019, 0, 0) is 2018-12-31. Returns None if any field is NaN or the
    result falls outside the supported year range.
    """
    fields = (year, month, day, hours, minutes, seconds, ms)
    if any(isinstance(f, float) and not math.isfinite(f) for f in fields):
        return None
    y, mo, d, h, mi, s, milli = (int(f) for f in fields)

    y += mo // 12
    mo %= 12
    try:
        base = datetime(y, mo + 1, 1)
        return base + timedelta(days=d - 1, hours=h, minutes=mi, seconds=s, milliseconds=milli)
    except (OverflowError, ValueError):
        return None


def to_millis(dt: datetime | None) -> int | float:
    """Epoch milliseconds of a local instant, NaN for the invalid instant."""
    if dt is None:
        return NAN
    try:
        whole = dt.replace(microsecond=0).timestamp()
    except (OverflowError, OSError, ValueError):
        return NAN
    return int(whole) * 1000 + dt.microsecond // 1000


def from_millis(ms: int | float) -> datetime | None:
    if isinstance(ms, float):
        if not math.isfinite(ms):
            return None
        ms = int(ms)
    secs, rem = divmod(ms, 1000)
    try:
        return datetime.fromtimestamp(secs) + timedelta(milliseconds=rem)
    except (OverflowError, OSError, ValueError):
        return None


def js_weekday(d: date) -> int:
    """Day of week with 0=Sunday ... 6=Saturday."""
    return (d.weekday() + 1) % 7


def week_number(d: date, first_day: int = 1) -> int:
    """Week of the year for weeks starting on first_day (0=Sunday).

    Week 1 is the week containing January 4th, so first_day=1 gives ISO-8601 weeks.
    """
    if isinstance(d, datetime):
        d = d.date()
    first_day %= 7
    start = d - timedelta(days=(js_weekday(d) - first_day) % 7)
    # The year a week belongs to is the year of its fourth day.
    year = (start + timedelta(days=3)).year
    jan4 = date(year, 1, 4)
    first_start = jan4 - timedelta(days=(js_weekday(jan4) - first_day) % 7)
    return (start - first_start).days // 7 + 1
