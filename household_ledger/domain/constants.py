"""Domain constants for ledger reconciliation and reporting."""

ASSET_CLASSIFICATION = "asset"
LIABILITY_CLASSIFICATION = "liability"

ASSET_ACCOUNTABLE_TYPES = (
    "Depository",
    "Investment",
    "Crypto",
    "Property",
    "Vehicle",
    "OtherAsset",
)

LIABILITY_ACCOUNTABLE_TYPES = (
    "CreditCard",
    "Loan",
    "OtherLiability",
)

VISIBLE_ACCOUNT_STATUSES = ("draft", "active")

TRANSACTION_ENTRYABLE = "Transaction"
VALUATION_ENTRYABLE = "Valuation"

VALUATION_KINDS = ("reconciliation", "opening_anchor", "current_anchor")

RECONCILIATION_ENTRY_NAME = "Manual value update"

MAX_ENTRY_AGE_YEARS = 10

DEFAULT_DECIMAL_PLACES = 2

CURRENCY_DECIMAL_PLACES = {
    "BHD": 3,
    "CLP": 0,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "UGX": 0,
    "VND": 0,
}


__all__ = [
    "ASSET_CLASSIFICATION",
    "LIABILITY_CLASSIFICATION",
    "ASSET_ACCOUNTABLE_TYPES",
    "LIABILITY_ACCOUNTABLE_TYPES",
    "VISIBLE_ACCOUNT_STATUSES",
    "TRANSACTION_ENTRYABLE",
    "VALUATION_ENTRYABLE",
    "VALUATION_KINDS",
    "RECONCILIATION_ENTRY_NAME",
    "MAX_ENTRY_AGE_YEARS",
    "DEFAULT_DECIMAL_PLACES",
    "CURRENCY_DECIMAL_PLACES",
]
