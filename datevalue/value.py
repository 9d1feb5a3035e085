from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Literal, Union

from . import wallclock
from .config import get_defaults
from .errors import InvalidInclusivityError, InvalidUnitError
from .formatting import format_instant, to_date_string, to_locale_string
from .parsers import parse_with_format

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

Unit = Literal["seconds", "days", "months", "years"]
Inclusivity = Literal["()", "[)", "(]", "[]"]
DateInput = Union["DateValue", datetime, date, str, int, float, None]

NATIVE_DATE_TYPES = (datetime, date)
EPOCH_MILLIS_RE = re.compile(r"-?[0-9]{10,}")

UNIT_ALIASES: dict[str, Unit] = {
    "second": "seconds",
    "seconds": "seconds",
    "day": "days",
    "days": "days",
    "month": "months",
    "months": "months",
    "year": "years",
    "years": "years",
}

ALL_UNITS: frozenset[Unit] = frozenset({"seconds", "days", "months", "years"})
NO_YEARS: frozenset[Unit] = frozenset({"seconds", "days", "months"})


def normalize_unit(unit: str, operation: str, allowed: frozenset[Unit] = ALL_UNITS) -> Unit:
    """Map "day"/"days" etc. to a canonical unit or raise InvalidUnitError naming operation."""
    canonical = UNIT_ALIASES.get(unit) if isinstance(unit, str) else None
    if canonical is None or canonical not in allowed:
        raise InvalidUnitError(operation, unit)
    return canonical


def _round_half_up(x: float) -> int | float:
    if math.isnan(x):
        return x
    return math.floor(x + 0.5)


class DateValue:
    """A mutable wall-clock date/time with locale-aware parsing and formatting.

    The held instant is a naive local datetime with millisecond precision, or
    None when the value is invalid. Invalid values never raise: numeric getters
    return NaN and comparisons are False.
    """

    def __init__(self, value: DateInput = None, format: str | None = None, locale: str | None = None) -> None:
        if format:
            self._instant = DateValue.parse(value, format, locale)
        elif value is not None:
            self._instant = DateValue.parse(value, locale=locale)
        else:
            self._instant = DateValue.parse(datetime.now())
        self.locale = locale or get_defaults().locale

    # Construction

    @staticmethod
    def parse(value: DateInput, format: str | None = None, locale: str | None = None) -> datetime | None:
        """Resolve any supported input to a held instant (None = invalid).

        Strings of 10+ digits are epoch milliseconds whatever the format; other
        strings are parsed with format (default "yyyy-MM-dd") under locale.
        """
        if value is None or (isinstance(value, str) and not value):
            return None
        if isinstance(value, DateValue):
            return value._instant
        if isinstance(value, NATIVE_DATE_TYPES):
            return wallclock.from_native(value)
        if isinstance(value, str):
            if EPOCH_MILLIS_RE.fullmatch(value):
                return wallclock.from_millis(int(value))
            defaults = get_defaults()
            return parse_with_format(value, format or defaults.format, locale or defaults.locale)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return wallclock.from_millis(value)
        logger.debug("cannot interpret %r as a date", value)
        return None

    @classmethod
    def _from_instant(cls, instant: datetime | None, locale: str | None = None) -> "DateValue":
        obj = cls.__new__(cls)
        obj._instant = instant
        obj.locale = locale or get_defaults().locale
        return obj

    @classmethod
    def now(cls, locale: str | None = None) -> "DateValue":
        return cls._from_instant(wallclock.from_native(datetime.now()), locale)

    @classmethod
    def from_datetime(cls, value: date, locale: str | None = None) -> "DateValue":
        return cls._from_instant(wallclock.from_native(value), locale)

    @classmethod
    def from_millis(cls, ms: int | float, locale: str | None = None) -> "DateValue":
        return cls._from_instant(wallclock.from_millis(ms), locale)

    @classmethod
    def from_string(cls, text: str, format: str | None = None, locale: str | None = None) -> "DateValue":
        return cls(text, format or get_defaults().format, locale)

    @classmethod
    def convert_array(cls, items: Iterable[object], format: str | None = None) -> list:
        """Convert a list of dates and/or lists of dates, keeping the nesting.

        ["2019-11-23", ["2019-01-01", "2019-01-15"]] -> [DateValue, [DateValue, DateValue]]
        """
        out: list = []
        for item in items:
            if isinstance(item, (list, tuple)):
                out.append([cls(sub, format) for sub in item])
            else:
                out.append(cls(item, format))
        return out

    def clone(self) -> "DateValue":
        return self._from_instant(self._instant, self.locale)

    def __repr__(self) -> str:
        if self._instant is None:
            return "DateValue(<invalid>)"
        return f"DateValue({self._instant.isoformat(timespec='milliseconds')!r}, locale={self.locale!r})"

    # Accessors

    def get_date_instance(self) -> datetime | None:
        return self._instant

    def is_valid(self) -> bool:
        return self._instant is not None

    def _field(self, name: str) -> int | float:
        if self._instant is None:
            return wallclock.NAN
        return getattr(self._instant, name)

    def get_time(self) -> int | float:
        """Epoch milliseconds, NaN when invalid."""
        return wallclock.to_millis(self._instant)

    def get_full_year(self) -> int | float:
        return self._field("year")

    def get_month(self) -> int | float:
        """Month, 0-based (January is 0)."""
        if self._instant is None:
            return wallclock.NAN
        return self._instant.month - 1

    def get_date(self) -> int | float:
        """Day of the month."""
        return self._field("day")

    def get_day(self) -> int | float:
        """Day of the week, 0 is Sunday."""
        if self._instant is None:
            return wallclock.NAN
        return wallclock.js_weekday(self._instant)

    def get_hours(self) -> int | float:
        return self._field("hour")

    def get_minutes(self) -> int | float:
        return self._field("minute")

    def get_seconds(self) -> int | float:
        return self._field("second")

    def get_milliseconds(self) -> int | float:
        if self._instant is None:
            return wallclock.NAN
        return self._instant.microsecond // 1000

    def get_week(self, first_day: int = 1) -> int | float:
        """Week of the year; weeks start on first_day (0=Sunday) and week 1 holds January 4th."""
        if self._instant is None:
            return wallclock.NAN
        return wallclock.week_number(self._instant.date(), first_day)

    # Mutators: same contract as the native setters, returning the new epoch ms.

    def _set(self, **changes: float) -> int | float:
        dt = self._instant
        if dt is None:
            return wallclock.NAN
        fields = {
            "year": dt.year,
            "month": dt.month - 1,
            "day": dt.day,
            "hours": dt.hour,
            "minutes": dt.minute,
            "seconds": dt.second,
            "ms": dt.microsecond // 1000,
        }
        fields.update(changes)
        self._instant = wallclock.make(**fields)
        return self.get_time()

    def set_month(self, month: int, day: int | None = None) -> int | float:
        if day is None:
            return self._set(month=month)
        return self._set(month=month, day=day)

    def set_hours(self, hours: int = 0, minutes: int = 0, seconds: int = 0, ms: int = 0) -> int | float:
        return self._set(hours=hours, minutes=minutes, seconds=seconds, ms=ms)

    def set_seconds(self, seconds: int) -> int | float:
        return self._set(seconds=seconds)

    def set_date(self, day: int) -> int | float:
        return self._set(day=day)

    def set_full_year(self, year: int) -> int | float:
        return self._set(year=year)

    # Comparison

    def _midnight(self) -> int | float:
        if self._instant is None:
            return wallclock.NAN
        dt = self._instant
        return wallclock.to_millis(wallclock.make(dt.year, dt.month - 1, dt.day))

    def _month_start(self) -> int | float:
        if self._instant is None:
            return wallclock.NAN
        dt = self._instant
        return wallclock.to_millis(wallclock.make(dt.year, dt.month - 1, 1))

    def _key(self, unit: Unit) -> int | float:
        if unit == "seconds":
            return self.get_time()
        if unit == "days":
            return self._midnight()
        if unit == "months":
            return self._month_start()
        return self.get_full_year()

    def is_between(self, lower: "DateValue", upper: "DateValue", inclusivity: Inclusivity = "()") -> bool:
        """Whether this date lies between lower and upper.

        This date is compared at day granularity (its midnight) while the bounds
        are compared at full precision.
        """
        t = self._midnight()
        lo = lower.get_time()
        hi = upper.get_time()
        if inclusivity == "()":
            return t > lo and t < hi
        if inclusivity == "[)":
            return t >= lo and t < hi
        if inclusivity == "(]":
            return t > lo and t <= hi
        if inclusivity == "[]":
            return t >= lo and t <= hi
        raise InvalidInclusivityError(inclusivity)

    def is_before(self, other: "DateValue", unit: str = "seconds") -> bool:
        u = normalize_unit(unit, "is_before")
        return other._key(u) > self._key(u)

    def is_same_or_before(self, other: "DateValue", unit: str = "seconds") -> bool:
        u = normalize_unit(unit, "is_same_or_before", NO_YEARS)
        return other._key(u) >= self._key(u)

    def is_after(self, other: "DateValue", unit: str = "seconds") -> bool:
        u = normalize_unit(unit, "is_after")
        return self._key(u) > other._key(u)

    def is_same_or_after(self, other: "DateValue", unit: str = "seconds") -> bool:
        u = normalize_unit(unit, "is_same_or_after", NO_YEARS)
        return self._key(u) >= other._key(u)

    def is_same(self, other: "DateValue", unit: str = "seconds") -> bool:
        u = normalize_unit(unit, "is_same")
        return self._key(u) == other._key(u)

    # Arithmetic

    def _shift(self, amount: int, unit: str, operation: str) -> "DateValue":
        u = normalize_unit(unit, operation, NO_YEARS)
        if u == "seconds":
            self.set_seconds(self.get_seconds() + amount)
        elif u == "days":
            self.set_date(self.get_date() + amount)
        else:
            self.set_month(self.get_month() + amount)
        return self

    def add(self, amount: int, unit: str = "seconds") -> "DateValue":
        return self._shift(amount, unit, "add")

    def subtract(self, amount: int, unit: str = "seconds") -> "DateValue":
        return self._shift(-amount, unit, "subtract")

    def diff(self, other: "DateValue", unit: str = "seconds") -> int | float:
        """Signed difference self - other.

        "seconds" yields milliseconds; "days" yields whole days (this date taken
        at midnight, rounded to the nearest day).
        """
        u = normalize_unit(unit, "diff", NO_YEARS)
        if u == "seconds":
            return self.get_time() - other.get_time()
        if u == "days":
            return _round_half_up((self._midnight() - other.get_time()) / wallclock.MS_PER_DAY)
        # TODO: calendar-month difference (whole months between the two dates)
        raise NotImplementedError("diff: months granularity is not implemented")

    # Formatting

    def format(self, pattern: str, locale: str | None = None) -> str:
        return format_instant(self._instant, pattern, locale or self.locale)

    def to_locale_string(self, locale: str | None = None, options: Mapping[str, object] | None = None) -> str:
        return to_locale_string(self._instant, locale or self.locale, options)

    def to_date_string(self) -> str:
        return to_date_string(self._instant)

