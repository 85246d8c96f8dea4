"""Domain package for business rules and core models."""

from .constants import (
    ASSET_CLASSIFICATION,
    LIABILITY_CLASSIFICATION,
    RECONCILIATION_ENTRY_NAME,
)
from .exceptions import DuplicateValuationError, LedgerError, NotFoundError
from .models import (
    Account,
    AccountRow,
    AccountTotalsView,
    BalancePoint,
    Entry,
    Family,
    Money,
    NetWorthSeries,
    NetWorthSummary,
    Period,
    ReconciliationPreview,
    ReconciliationResult,
    TransactionEntryable,
    ValuationEntryable,
)

__all__ = [
    "ASSET_CLASSIFICATION",
    "LIABILITY_CLASSIFICATION",
    "RECONCILIATION_ENTRY_NAME",
    "DuplicateValuationError",
    "LedgerError",
    "NotFoundError",
    "Account",
    "AccountRow",
    "AccountTotalsView",
    "BalancePoint",
    "Entry",
    "Family",
    "Money",
    "NetWorthSeries",
    "NetWorthSummary",
    "Period",
    "ReconciliationPreview",
    "ReconciliationResult",
    "TransactionEntryable",
    "ValuationEntryable",
]
