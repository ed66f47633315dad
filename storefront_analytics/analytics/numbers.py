"""
Numeric helpers

Money is accumulated as Decimal and rounded once, to two places, when a
figure leaves the engine. Ratios never raise on a zero denominator.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, Decimal]

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Optional[Number]) -> Decimal:
    """Coerce a possibly-missing number to Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round2(value: Optional[Number]) -> float:
    """Round half-up to two decimal places."""
    return float(to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def safe_divide(numerator: Optional[Number], denominator: Optional[Number]) -> Decimal:
    """numerator / denominator, or 0 when the denominator is 0 or missing."""
    denominator = to_decimal(denominator)
    if denominator == 0:
        return ZERO
    return to_decimal(numerator) / denominator


def percentage(numerator: Optional[Number], denominator: Optional[Number]) -> float:
    """numerator / denominator * 100 rounded to two places (0 on a zero denominator)."""
    return round2(safe_divide(numerator, denominator) * 100)
