"""Domain services package."""

from .balances import balance_as_of, balance_series, net_worth_contribution
from .finance import compute_net_worth_summary
from .fx import (
    IDENTITY_RATE,
    convert_amount,
    convert_money,
    select_manual_rate_entry,
)
from .normalization import normalize_currency, parse_entry_date
from .validation import (
    earliest_allowed_date,
    validate_balance_sign,
    validate_entry_date,
    validate_exchange_rate,
)

__all__ = [
    "balance_as_of",
    "balance_series",
    "net_worth_contribution",
    "compute_net_worth_summary",
    "IDENTITY_RATE",
    "convert_amount",
    "convert_money",
    "select_manual_rate_entry",
    "normalize_currency",
    "parse_entry_date",
    "earliest_allowed_date",
    "validate_balance_sign",
    "validate_entry_date",
    "validate_exchange_rate",
]
