"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Return numerator / denominator, or zero for a zero denominator."""
    if not denominator:
        return ZERO
    return numerator / denominator


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """Return part as a percentage of whole, zero when whole is zero."""
    return safe_ratio(part, whole) * HUNDRED


def quantize(value: Decimal, places: int = 2) -> Decimal:
    """Round a Decimal half-up to a fixed number of places."""
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


__all__ = [
    "ZERO",
    "HUNDRED",
    "coerce_decimal",
    "safe_ratio",
    "percentage",
    "quantize",
]
