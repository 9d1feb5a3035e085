from __future__ import annotations


class DateValueError(ValueError):
    """Base class for programmer errors raised by DateValue operations."""


class InvalidUnitError(DateValueError):
    """Raised when an operation receives a unit it does not support."""

    def __init__(self, operation: str, unit: str) -> None:
        super().__init__(f"{operation}: Invalid unit!")
        self.operation = operation
        self.unit = unit


class InvalidInclusivityError(DateValueError):
    """Raised when is_between() receives an unknown inclusivity token."""

    def __init__(self, inclusivity: str) -> None:
        super().__init__(f"is_between: Invalid inclusivity {inclusivity!r} (expected one of (), [), (], [])")
        self.inclusivity = inclusivity


class ConfigurationError(RuntimeError):
    """Raised when configured defaults are invalid."""
