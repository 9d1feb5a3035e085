from __future__ import annotations

from functools import lru_cache

from babel import Locale


@lru_cache(maxsize=64)
def resolve_locale(tag: str) -> Locale:
    """Return the Babel locale for a tag such as "en-US", "en_US" or "fr".

    Raises babel.UnknownLocaleError for unknown locales and ValueError for malformed tags.
    """
    tag = (tag or "").strip()
    if not tag:
        raise ValueError("Empty locale tag")
    return Locale.parse(tag.replace("-", "_"))
