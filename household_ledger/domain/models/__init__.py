"""Domain models package."""

from .ledger import (
    Account,
    Entry,
    Entryable,
    Family,
    Period,
    TransactionEntryable,
    ValuationEntryable,
    build_entryable,
)
from .money import Money, currency_decimal_places
from .results import (
    AccountRow,
    AccountTotalsView,
    BalancePoint,
    NetWorthSeries,
    NetWorthSummary,
    ReconciliationPreview,
    ReconciliationResult,
    Trend,
)

__all__ = [
    "Account",
    "Entry",
    "Entryable",
    "Family",
    "Period",
    "TransactionEntryable",
    "ValuationEntryable",
    "build_entryable",
    "Money",
    "currency_decimal_places",
    "AccountRow",
    "AccountTotalsView",
    "BalancePoint",
    "NetWorthSeries",
    "NetWorthSummary",
    "ReconciliationPreview",
    "ReconciliationResult",
    "Trend",
]
