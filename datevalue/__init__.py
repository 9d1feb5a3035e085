"""Calendar-date value wrapper with locale-aware parsing and formatting.

DateValue holds a local wall-clock instant (or an invalid sentinel) and offers
comparison, arithmetic and formatting helpers. Locale data and pattern
formatting come from Babel.
"""

from .config import Defaults, get_defaults, reset_defaults
from .errors import ConfigurationError, DateValueError, InvalidInclusivityError, InvalidUnitError
from .parsers import parse_with_format
from .value import DateValue, normalize_unit

__version__ = "0.1.0"
