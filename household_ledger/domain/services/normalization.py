"""Domain normalization helpers."""

from datetime import date, datetime


def normalize_currency(currency: str | None) -> str | None:
    """Normalize ISO currency codes.

    Args:
        currency: Raw currency value from a request or repository.

    Returns:
        str | None: Upper-case three letter code, or None when blank or
        malformed.
    """
    if not currency:
        return None
    cleaned = str(currency).strip().upper()
    if len(cleaned) != 3 or not cleaned.isalpha():
        return None
    return cleaned


def parse_entry_date(value) -> date | None:
    """Normalize request dates.

    Args:
        value: A date, datetime or ISO formatted string.

    Returns:
        date | None: Parsed calendar date, or None when invalid.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


__all__ = ["normalize_currency", "parse_entry_date"]
