"""Domain services for finance aggregates."""

from collections.abc import Iterable
from decimal import Decimal
from logging import Logger

from household_ledger.domain.constants import (
    ASSET_CLASSIFICATION,
    LIABILITY_CLASSIFICATION,
)
from household_ledger.domain.models import AccountRow, NetWorthSummary
from household_ledger.domain.services.validation import validate_balance_sign


def compute_net_worth_summary(
    rows: Iterable[AccountRow],
    *,
    target_currency: str,
    logger: Logger,
) -> NetWorthSummary:
    """Compute net worth totals from converted account rows.

    Args:
        rows: Account rows with balances converted to the target currency.
        target_currency: Family reporting currency.
        logger: Logger used for warnings.

    Returns:
        NetWorthSummary: Computed asset, liability, and net worth totals.
    """
    asset_total = Decimal("0")
    liability_total = Decimal("0")

    for row in rows:
        if row.balance is not None:
            validate_balance_sign(
                row.classification,
                row.balance.amount,
                row.name,
                logger,
            )
        converted = row.converted_balance.amount
        if row.classification == ASSET_CLASSIFICATION:
            asset_total += converted
        elif row.classification == LIABILITY_CLASSIFICATION:
            liability_total += converted

    return NetWorthSummary(
        asset_total=asset_total,
        liability_total=liability_total,
        net_worth=asset_total - liability_total,
        currency_code=target_currency,
    )


__all__ = ["compute_net_worth_summary"]
