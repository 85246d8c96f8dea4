"""Balance derivation from ledger entries."""

from collections.abc import Callable, Iterable, Sequence
from datetime import date
from decimal import Decimal

from household_ledger.domain.constants import LIABILITY_CLASSIFICATION
from household_ledger.domain.models import Entry


def _native_amount(entry: Entry) -> Decimal:
    return entry.amount


def _anchor_key(entry: Entry) -> tuple:
    updated = entry.updated_at.timestamp() if entry.updated_at else 0.0
    return (entry.date, updated)


def balance_as_of(
    entries: Iterable[Entry],
    as_of: date,
    amount_of: Callable[[Entry], Decimal] = _native_amount,
) -> Decimal:
    """Compute an account balance at the end of a day.

    The latest valuation on or before ``as_of`` anchors the balance; the
    transactions dated after that valuation are added to it. Without any
    valuation the balance is the sum of transactions.

    Args:
        entries: Entries of a single account.
        as_of: Day to evaluate.
        amount_of: Maps an entry to the amount to use (native or converted).

    Returns:
        Decimal: Balance at the end of ``as_of``.
    """
    relevant = [entry for entry in entries if entry.date <= as_of]
    valuations = [entry for entry in relevant if entry.is_valuation]
    if valuations:
        anchor = max(valuations, key=_anchor_key)
        balance = amount_of(anchor)
        anchor_date = anchor.date
    else:
        balance = Decimal("0")
        anchor_date = None
    for entry in relevant:
        if entry.is_valuation:
            continue
        if anchor_date is not None and entry.date <= anchor_date:
            continue
        balance += amount_of(entry)
    return balance


def balance_series(
    entries: Sequence[Entry],
    days: Iterable[date],
    amount_of: Callable[[Entry], Decimal] = _native_amount,
) -> list[tuple[date, Decimal]]:
    """Evaluate ``balance_as_of`` for each requested day."""
    return [(day, balance_as_of(entries, day, amount_of)) for day in days]


def net_worth_contribution(classification: str, balance: Decimal) -> Decimal:
    """Return the signed contribution of an account to net worth."""
    if classification == LIABILITY_CLASSIFICATION:
        return -balance
    return balance


__all__ = ["balance_as_of", "balance_series", "net_worth_contribution"]
