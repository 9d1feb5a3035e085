"""Process-wide defaults for parsing and formatting.

Defaults can be overridden with environment variables (or a .env file):

- DATEVALUE_LOCALE: locale tag used when none is given (default "en-US")
- DATEVALUE_FORMAT: pattern used to parse strings when none is given (default "yyyy-MM-dd")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from babel import UnknownLocaleError
from dotenv import dotenv_values, find_dotenv

from .errors import ConfigurationError
from .locales import resolve_locale

DEFAULT_LOCALE = "en-US"
DEFAULT_FORMAT = "yyyy-MM-dd"


@dataclass(frozen=True)
class Defaults:
    locale: str = DEFAULT_LOCALE
    format: str = DEFAULT_FORMAT

    @classmethod
    def from_env(cls, *, env_file: Path | None = None) -> "Defaults":
        """Read DATEVALUE_LOCALE / DATEVALUE_FORMAT from env_file (or the nearest .env
        above the working directory) and the environment.

        Variables already set in the environment win over the .env file, and
        os.environ is left untouched.
        """
        values = {**dotenv_values(env_file or find_dotenv(usecwd=True)), **os.environ}
        locale = (values.get("DATEVALUE_LOCALE") or "").strip() or DEFAULT_LOCALE
        fmt = (values.get("DATEVALUE_FORMAT") or "").strip() or DEFAULT_FORMAT
        try:
            resolve_locale(locale)
        except (UnknownLocaleError, ValueError) as e:
            raise ConfigurationError(f"DATEVALUE_LOCALE is not a known locale: {locale!r}") from e
        return cls(locale=locale, format=fmt)


@lru_cache(maxsize=1)
def get_defaults() -> Defaults:
    return Defaults.from_env()


def reset_defaults() -> None:
    """Forget cached defaults so the next get_defaults() re-reads the environment."""
    get_defaults.cache_clear()
