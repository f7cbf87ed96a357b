"""
Input Guards and Currency Rounding

Shared helpers used by every calculator. Inputs are checked before any
computation starts; outputs are rounded to cents at the point of computation.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


class InvalidInput(ValueError):
    """Raised when a calculator receives an amount, rate or term it cannot use."""


def require_non_negative(name: str, value: float) -> None:
    """Reject negative or NaN values."""
    if value is None or math.isnan(value) or math.isinf(value):
        raise InvalidInput(f"{name} must be a finite number")
    if value < 0:
        raise InvalidInput(f"{name} cannot be negative (got {value})")


def require_positive(name: str, value: float) -> None:
    """Reject zero, negative or NaN values."""
    require_non_negative(name, value)
    if value == 0:
        raise InvalidInput(f"{name} must be greater than zero")


def round_currency(value: float, places: int = 2) -> float:
    """Round half-up to the given number of decimal places (2.345 -> 2.35)."""
    value = float(value)
    if math.isinf(value) or math.isnan(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def to_percent(ratio: float) -> float:
    """Convert a ratio (0.28) to a percentage rounded to 2 places (28.0)."""
    return round_currency(ratio * 100)


def require_whole_years(name: str, value: float) -> None:
    """Reject terms that are not a positive whole number of years."""
    require_positive(name, value)
    if value != int(value):
        raise InvalidInput(f"{name} must be a whole number of years (got {value})")
