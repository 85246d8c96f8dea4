"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


RATE_QUANTUM = Decimal("0.000001")


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


def parse_decimal(value) -> Decimal | None:
    """Parse user input into a finite Decimal.

    Args:
        value: Raw value (Decimal, int, float or string).

    Returns:
        Decimal | None: Parsed value, or None when empty, unparseable or
        not finite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        parsed = coerce_decimal(value)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def quantize_rate(value: Decimal | None) -> Decimal | None:
    """Round an exchange rate to the stored NUMERIC(19, 6) scale."""
    if value is None:
        return None
    return coerce_decimal(value).quantize(RATE_QUANTUM)


__all__ = [
    "RATE_QUANTUM",
    "coerce_decimal",
    "parse_decimal",
    "quantize_rate",
]
