"""Parse date strings against CLDR-style patterns.

Patterns use the same letters Babel formats with (yyyy, MM, dd, MMMM, LLLL, EEEE,
HH, mm, ss, SSS, a, 'quoted text'). Localized month, weekday and AM/PM names come
from Babel's CLDR data for the requested locale. Y and D are accepted as aliases
of y and d since patterns such as "YYYY-MM-DD" are common in the wild.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Literal

from babel import Locale, UnknownLocaleError

from .locales import resolve_locale

logger = logging.getLogger(__name__)

FieldKind = Literal[
    "year",
    "year2",
    "month",
    "month_name",
    "day",
    "weekday",
    "hour",
    "hour24",
    "hour12",
    "hour11",
    "period",
    "minute",
    "second",
    "fraction",
]

TokenType = Literal["field", "literal"]

HOUR_KINDS: dict[str, FieldKind] = {"H": "hour", "k": "hour24", "h": "hour12", "K": "hour11"}


class UnsupportedTokenError(ValueError):
    """Raised when a pattern uses a letter the parser cannot match."""


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str


@dataclass(frozen=True)
class Field:
    group: str
    kind: FieldKind


@dataclass(frozen=True)
class LocaleNames:
    """Lower-cased localized names used for matching."""

    months_abbr: dict[str, int]  # -> 1..12
    months_wide: dict[str, int]
    weekdays_abbr: dict[str, int]  # -> 0=Monday..6=Sunday
    weekdays_wide: dict[str, int]
    periods: dict[str, str]  # -> "am" / "pm"


@dataclass(frozen=True)
class CompiledPattern:
    regex: re.Pattern[str]
    fields: tuple[Field, ...]
    names: LocaleNames


def tokenize_pattern(pattern: str) -> list[Token]:
    """Split a pattern into field and literal tokens.

    Runs of the same ASCII letter form one field ("yyyy", "MM"). Text in single
    quotes is literal and '' is an escaped quote:

        "yyyy-MM-dd"     -> yyyy, "-", MM, "-", dd
        "h 'o''clock' a" -> h, " ", "o'clock", " ", a
    """
    tokens: list[Token] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            tokens.append(Token("literal", "".join(literal)))
            literal.clear()

    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]

        if ch == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            i += 1
            while i < n:
                if pattern[i] == "'":
                    if i + 1 < n and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
            continue

        if ch.isascii() and ch.isalpha():
            flush()
            j = i + 1
            while j < n and pattern[j] == ch:
                j += 1
            tokens.append(Token("field", pattern[i:j]))
            i = j
            continue

        literal.append(ch)
        i += 1

    flush()
    return tokens


def _name_table(contexts, width: str) -> dict[str, int]:
    out: dict[str, int] = {}
    for context in ("format", "stand-alone"):
        try:
            names = contexts[context][width]
        except KeyError:
            continue
        for key, name in names.items():
            low = str(name).lower()
            out[low] = int(key)
            # "janv." should also match "janv"
            out.setdefault(low.rstrip("."), int(key))
    return out


def load_names(locale: Locale) -> LocaleNames:
    periods = {"am": "am", "pm": "pm"}
    for key in ("am", "pm"):
        name = locale.periods.get(key)
        if name:
            periods[str(name).lower()] = key
    return LocaleNames(
        months_abbr=_name_table(locale.months, "abbreviated"),
        months_wide=_name_table(locale.months, "wide"),
        weekdays_abbr=_name_table(locale.days, "abbreviated"),
        weekdays_wide=_name_table(locale.days, "wide"),
        periods=periods,
    )


def _alternation(names: dict[str, object]) -> str:
    # Longest first so "june" wins over "jun".
    return "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True) if name)


def _literal_regex(text: str) -> str:
    # CLDR data often uses no-break spaces where users type plain ones.
    return "".join(r"\s" if ch.isspace() else re.escape(ch) for ch in text)


def _field_regex(token: str, names: LocaleNames) -> tuple[str, FieldKind]:
    letter = token[0]
    width = len(token)

    if letter in "yY":
        if width == 2:
            return r"\d{2}", "year2"
        if width == 1:
            return r"\d{1,6}", "year"
        return rf"\d{{{width}}}", "year"

    if letter in "ML" and width <= 4:
        if width == 1:
            return r"\d{1,2}", "month"
        if width == 2:
            return r"\d{2}", "month"
        table = names.months_wide if width == 4 else names.months_abbr
        return _alternation(table), "month_name"

    if letter in "dD" and width <= 2:
        return (r"\d{1,2}" if width == 1 else r"\d{2}"), "day"

    if (letter == "E" and width <= 4) or (letter == "c" and width in (3, 4)):
        table = names.weekdays_wide if width == 4 else names.weekdays_abbr
        return _alternation(table), "weekday"

    if letter in HOUR_KINDS and width <= 2:
        return (r"\d{1,2}" if width == 1 else r"\d{2}"), HOUR_KINDS[letter]

    if letter == "a" and width <= 3:
        return _alternation(names.periods), "period"

    if letter in "ms" and width <= 2:
        return (r"\d{1,2}" if width == 1 else r"\d{2}"), ("minute" if letter == "m" else "second")

    if letter == "S":
        return (r"\d{1,3}" if width == 1 else rf"\d{{{width}}}"), "fraction"

    raise UnsupportedTokenError(f"Unsupported pattern token: {token!r}")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str, locale_tag: str) -> CompiledPattern:
    """Build (and memoize) the matcher for a pattern under a locale.

    Raises UnsupportedTokenError, babel.UnknownLocaleError or ValueError.
    """
    names = load_names(resolve_locale(locale_tag))

    parts: list[str] = []
    fields: list[Field] = []
    for tok in tokenize_pattern(pattern):
        if tok.type == "literal":
            parts.append(_literal_regex(tok.text))
            continue
        body, kind = _field_regex(tok.text, names)
        group = f"f{len(fields)}"
        parts.append(f"(?P<{group}>{body})")
        fields.append(Field(group=group, kind=kind))

    regex = re.compile("".join(parts), re.IGNORECASE)
    return CompiledPattern(regex=regex, fields=tuple(fields), names=names)


def _two_digit_year(value: int) -> int:
    return 1900 + value if value > 60 else 2000 + value


def _fraction_ms(digits: str) -> int:
    return int(digits.ljust(3, "0")[:3])


def _collect(m: re.Match[str], compiled: CompiledPattern) -> dict[str, int | str] | None:
    """Convert matched groups to field values; None when two fields disagree."""
    names = compiled.names
    values: dict[str, int | str] = {}

    def put(key: str, value: int | str) -> bool:
        if key in values and values[key] != value:
            return False
        values[key] = value
        return True

    for field in compiled.fields:
        raw = m.group(field.group)
        low = raw.lower()
        kind = field.kind
        if kind == "year":
            ok = put("year", int(raw))
        elif kind == "year2":
            ok = put("year", _two_digit_year(int(raw)))
        elif kind == "month":
            ok = put("month", int(raw))
        elif kind == "month_name":
            month = names.months_wide.get(low) or names.months_abbr.get(low)
            ok = month is not None and put("month", month)
        elif kind == "day":
            ok = put("day", int(raw))
        elif kind == "weekday":
            wd = names.weekdays_wide.get(low)
            if wd is None:
                wd = names.weekdays_abbr.get(low)
            ok = wd is not None and put("weekday", wd)
        elif kind == "hour":
            ok = put("hour", int(raw))
        elif kind == "hour24":
            ok = put("hour", int(raw) % 24) if 1 <= int(raw) <= 24 else False
        elif kind == "hour12":
            ok = put("hour12", int(raw)) if 1 <= int(raw) <= 12 else False
        elif kind == "hour11":
            ok = put("hour12", int(raw) or 12) if 0 <= int(raw) <= 11 else False
        elif kind == "period":
            period = names.periods.get(low)
            ok = period is not None and put("period", period)
        elif kind == "minute":
            ok = put("minute", int(raw))
        elif kind == "second":
            ok = put("second", int(raw))
        else:
            ok = put("ms", _fraction_ms(raw))
        if not ok:
            return None
    return values


def _build(values: dict[str, int | str], *, today: datetime) -> datetime | None:
    hour = int(values.get("hour", 0))
    if "hour12" in values:
        h12 = int(values["hour12"]) % 12
        pm = values.get("period") == "pm"
        h12 = h12 + 12 if pm else h12
        if "hour" in values and values["hour"] != h12:
            return None
        hour = h12
    elif values.get("period") == "pm" and hour < 12:
        hour += 12

    try:
        dt = datetime(
            int(values.get("year", today.year)),
            int(values.get("month", 1)),
            int(values.get("day", 1)),
            hour,
            int(values.get("minute", 0)),
            int(values.get("second", 0)),
            int(values.get("ms", 0)) * 1000,
        )
    except ValueError:
        return None

    if "weekday" in values and dt.weekday() != values["weekday"]:
        return None
    return dt


def parse_with_format(text: str, pattern: str, locale: str, *, today: datetime | None = None) -> datetime | None:
    """Parse text against pattern under locale.

    Returns a naive local datetime, or None if the text does not match, a field
    is out of range, or the pattern/locale cannot be used. Never raises for bad input.
    """
    try:
        compiled = compile_pattern(pattern, locale)
    except (UnsupportedTokenError, UnknownLocaleError, ValueError, re.error) as e:
        logger.debug("cannot use pattern %r with locale %r: %s", pattern, locale, e)
        return None

    m = compiled.regex.fullmatch(text.strip())
    if not m:
        logger.debug("%r does not match pattern %r (%s)", text, pattern, locale)
        return None

    values = _collect(m, compiled)
    if values is None:
        logger.debug("%r has conflicting fields for pattern %r", text, pattern)
        return None

    dt = _build(values, today=today or datetime.now())
    if dt is None:
        logger.debug("%r is not a valid date for pattern %r", text, pattern)
    return dt
