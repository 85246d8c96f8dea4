"""Domain helpers for currency conversion."""

from collections.abc import Iterable
from decimal import Decimal

from household_ledger.domain.models import Entry, Money


IDENTITY_RATE = Decimal("1")


def _entry_recency(entry: Entry) -> tuple:
    updated = entry.updated_at.timestamp() if entry.updated_at else 0.0
    return (entry.date, updated)


def select_manual_rate_entry(
    entries: Iterable[Entry],
    target_currency: str,
) -> Entry | None:
    """Pick the most recent entry carrying a manual exchange rate.

    Args:
        entries: Entries of a single account.
        target_currency: Currency the rate must convert into.

    Returns:
        Entry | None: Latest entry by date with a non-null rate and a
        currency different from the target, if any.
    """
    candidates = [
        entry
        for entry in entries
        if entry.exchange_rate is not None and entry.currency != target_currency
    ]
    if not candidates:
        return None
    return max(candidates, key=_entry_recency)


def convert_money(
    money: Money | None,
    target_currency: str,
    rate: Decimal,
) -> Money:
    """Convert a balance into the target currency.

    Args:
        money: Balance to convert; None is treated as zero.
        target_currency: Target currency code.
        rate: Multiplier from the balance currency into the target.

    Returns:
        Money: Converted balance rounded to the target minor unit.
    """
    if money is None or money.is_zero:
        return Money.zero(target_currency)
    if money.currency == Money.zero(target_currency).currency:
        return money
    return money.exchange_to(target_currency, rate=rate)


def convert_amount(amount: Decimal, rate: Decimal) -> Decimal:
    """Multiply at full precision; rounding is left to the caller."""
    return amount * rate


__all__ = [
    "IDENTITY_RATE",
    "select_manual_rate_entry",
    "convert_money",
    "convert_amount",
]
