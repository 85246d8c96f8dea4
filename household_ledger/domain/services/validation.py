"""Domain validation helpers."""

from datetime import date
from decimal import Decimal
from logging import Logger

from household_ledger.domain.constants import (
    ASSET_CLASSIFICATION,
    LIABILITY_CLASSIFICATION,
    MAX_ENTRY_AGE_YEARS,
)


def earliest_allowed_date(today: date) -> date:
    """Return the oldest date an entry may carry."""
    try:
        return today.replace(year=today.year - MAX_ENTRY_AGE_YEARS)
    except ValueError:
        # Feb 29 on a non-leap target year.
        return today.replace(year=today.year - MAX_ENTRY_AGE_YEARS, day=28)


def validate_entry_date(entry_date: date, today: date) -> str | None:
    """Check an entry date against the allowed window.

    Args:
        entry_date: Date requested for the entry.
        today: Current calendar date.

    Returns:
        str | None: Error message, or None when the date is acceptable.
    """
    if entry_date <= earliest_allowed_date(today):
        return f"Date must be within the last {MAX_ENTRY_AGE_YEARS} years"
    return None


def validate_exchange_rate(rate: Decimal) -> str | None:
    """Check that a manual exchange rate is usable."""
    if rate <= 0:
        return "Exchange rate must be greater than zero"
    if rate >= Decimal("10") ** 13:
        return "Exchange rate is too large"
    return None


def validate_balance_sign(
    classification: str,
    balance: Decimal,
    account_name: str,
    logger: Logger,
) -> None:
    """Warn when balances violate expected sign conventions.

    Args:
        classification: Account classification (asset or liability).
        balance: Balance in the account currency.
        account_name: Account name used in the warning.
        logger: Logger used for warnings.
    """
    if classification == ASSET_CLASSIFICATION and balance < 0:
        logger.warning(
            f"Asset balance is negative for account={account_name}: {balance}"
        )
    if classification == LIABILITY_CLASSIFICATION and balance < 0:
        logger.warning(
            f"Liability balance is negative for account={account_name}: {balance}"
        )


__all__ = [
    "earliest_allowed_date",
    "validate_entry_date",
    "validate_exchange_rate",
    "validate_balance_sign",
]
