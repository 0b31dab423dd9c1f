"""Cent rounding shared by every worksheet line."""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round_half_up(value: Decimal) -> Decimal:
    """Round to two places, midpoints away from zero (123.455 -> 123.46)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def or_zero(value: Decimal | None) -> Decimal:
    return ZERO if value is None else value
