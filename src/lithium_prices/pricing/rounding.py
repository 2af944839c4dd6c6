"""Decimal rounding helpers shared by every derived figure.

All rounding is half-up (away from zero): 0.125 -> 0.13 and -0.125 -> -0.13.
"""

from decimal import ROUND_HALF_UP, Decimal

CHANGE_PLACES = 2
RATE_PLACES = 4


def round_half_up(value: Decimal, places: int) -> Decimal:
    """Round to a fixed number of decimal places, halves away from zero."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_optional(value: Decimal | None, places: int) -> Decimal | None:
    """Round a value that may be missing; None passes through."""
    if value is None:
        return None
    return round_half_up(value, places)


def round_to_int(value: Decimal) -> int:
    """Round to a whole number, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
