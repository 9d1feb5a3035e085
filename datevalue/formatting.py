from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping

from babel.dates import format_datetime, format_skeleton

from .locales import resolve_locale

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"

# Intl.DateTimeFormat option -> {option value -> CLDR skeleton fragment}
DATE_OPTIONS: dict[str, dict[str, str]] = {
    "weekday": {"long": "EEEE", "short": "EEE", "narrow": "EEEEE"},
    "year": {"numeric": "y", "2-digit": "yy"},
    "month": {"numeric": "M", "2-digit": "MM", "long": "MMMM", "short": "MMM", "narrow": "MMMMM"},
    "day": {"numeric": "d", "2-digit": "dd"},
}
TIME_OPTIONS: dict[str, dict[str, str]] = {
    "hour": {"numeric": "H", "2-digit": "HH"},
    "minute": {"numeric": "m", "2-digit": "mm"},
    "second": {"numeric": "s", "2-digit": "ss"},
}

# toLocaleString() without options: numeric date and time
DEFAULT_LOCALE_STRING_OPTIONS: dict[str, str] = {
    "year": "numeric",
    "month": "numeric",
    "day": "numeric",
    "hour": "numeric",
    "minute": "numeric",
    "second": "numeric",
}


def format_instant(instant: datetime | None, pattern: str, locale: str) -> str:
    """Format an instant with a CLDR pattern under a locale (Babel does all token work)."""
    if instant is None:
        return INVALID_DATE
    return format_datetime(instant, pattern, locale=resolve_locale(locale))


def _uses_12_hour(locale) -> bool:
    return "a" in locale.time_formats["short"].pattern


def build_skeletons(options: Mapping[str, object], locale) -> tuple[str, str]:
    """Translate Intl-style options into (date skeleton, time skeleton)."""
    unknown = set(options) - set(DATE_OPTIONS) - set(TIME_OPTIONS) - {"hour12"}
    if unknown:
        raise ValueError(f"Unsupported locale string option(s): {', '.join(sorted(unknown))}")

    def fragment(table: dict[str, dict[str, str]], key: str) -> str:
        value = options.get(key)
        if value is None:
            return ""
        try:
            return table[key][str(value)]
        except KeyError:
            raise ValueError(f"Invalid value for {key}: {value!r}") from None

    date_skel = "".join(fragment(DATE_OPTIONS, k) for k in DATE_OPTIONS)
    time_skel = "".join(fragment(TIME_OPTIONS, k) for k in TIME_OPTIONS)

    hour12 = options.get("hour12")
    if hour12 is None:
        hour12 = _uses_12_hour(locale)
    if hour12 and "H" in time_skel:
        time_skel = time_skel.replace("H", "h")
    return date_skel, time_skel


def _format_skeleton(skeleton: str, instant: datetime, locale) -> str:
    try:
        return format_skeleton(skeleton, instant, locale=locale)
    except KeyError:
        logger.debug("no CLDR skeleton close to %r for %s, formatting it as a pattern", skeleton, locale)
        return format_datetime(instant, skeleton, locale=locale)


def to_locale_string(instant: datetime | None, locale: str, options: Mapping[str, object] | None = None) -> str:
    """Localized text for an instant, driven by Intl.DateTimeFormat-like options.

    Without options this is the numeric date and time, e.g. "11/23/2019, 12:00:00 AM"
    for en-US.
    """
    if instant is None:
        return INVALID_DATE
    loc = resolve_locale(locale)
    if not options:
        options = DEFAULT_LOCALE_STRING_OPTIONS

    date_skel, time_skel = build_skeletons(options, loc)
    date_text = _format_skeleton(date_skel, instant, loc) if date_skel else ""
    time_text = _format_skeleton(time_skel, instant, loc) if time_skel else ""
    if date_text and time_text:
        glue = str(loc.datetime_formats["medium"])
        return glue.replace("{1}", date_text).replace("{0}", time_text)
    return date_text or time_text


def to_date_string(instant: datetime | None) -> str:
    """English "Sat Nov 23 2019" rendering, independent of the process locale."""
    if instant is None:
        return INVALID_DATE
    return format_datetime(instant, "EEE MMM dd yyyy", locale=resolve_locale("en-US"))
