"""Command line front end.

Usage:
  datevalue format 2019-11-23 --pattern "d MMMM yyyy" --locale fr-FR
  datevalue format "23/11/2019" --input-format dd/MM/yyyy --pattern yyyy-MM-dd
  datevalue diff 2019-11-23 2019-11-01 --unit days
  datevalue week 2019-11-23 --first-day 0
"""

from __future__ import annotations

import argparse
import logging
import sys

from babel import UnknownLocaleError

from .errors import DateValueError
from .logging import configure_logging
from .value import DateValue

logger = logging.getLogger(__name__)


def _load(raw: str, args: argparse.Namespace) -> DateValue:
    dv = DateValue(raw, args.input_format, args.locale)
    if not dv.is_valid():
        fmt = args.input_format or "default format"
        raise DateValueError(f"Invalid date: {raw!r} ({fmt})")
    return dv


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="datevalue")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = ap.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--input-format", default=None, help="Pattern used to parse the input(s).")
        p.add_argument("--locale", default=None, help="Locale tag, e.g. en-US or fr-CA.")

    p_fmt = sub.add_parser("format", help="Parse a date and print it with a pattern.")
    p_fmt.add_argument("value")
    p_fmt.add_argument("--pattern", required=True)
    common(p_fmt)

    p_diff = sub.add_parser("diff", help="Print A - B (ms for seconds, whole days for days).")
    p_diff.add_argument("a")
    p_diff.add_argument("b")
    p_diff.add_argument("--unit", default="days")
    common(p_diff)

    p_week = sub.add_parser("week", help="Print the week number of a date.")
    p_week.add_argument("value")
    p_week.add_argument("--first-day", type=int, default=1, help="0=Sunday ... 6=Saturday (default: 1)")
    common(p_week)

    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.command == "format":
            print(_load(args.value, args).format(args.pattern))
        elif args.command == "diff":
            a = _load(args.a, args)
            b = _load(args.b, args)
            print(a.diff(b, args.unit))
        else:
            print(_load(args.value, args).get_week(args.first_day))
    except (DateValueError, NotImplementedError, UnknownLocaleError) as e:
        logger.debug("command failed", exc_info=True)
        print(str(e), file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
