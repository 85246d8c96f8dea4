"""Result and view models returned by ledger use cases."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from household_ledger.domain.models.ledger import Entry, Period
from household_ledger.domain.models.money import Money


@dataclass(frozen=True)
class ReconciliationPreview:
    """Computed effect of a reconciliation, shown before committing.

    Attributes:
        date: Valuation date.
        balance: Reported balance in the entry currency.
        previous_balance: Account balance before the change.
        converted_balance: Reported balance in the family currency.
        change: Difference with the previous balance when both share a
            currency, otherwise None.
    """

    date: date
    balance: Money
    previous_balance: Money | None
    converted_balance: Money
    change: Money | None


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of a reconciliation request.

    Validation problems are reported through ``error_message`` instead of
    exceptions so callers can render them back to the user.
    """

    success: bool
    entry: Entry | None = None
    error_message: str | None = None
    dry_run: bool = False
    preview: ReconciliationPreview | None = None
    not_found: bool = False
    changed: bool = True

    @classmethod
    def ok(
        cls,
        entry: Entry,
        dry_run: bool = False,
        preview: ReconciliationPreview | None = None,
        changed: bool = True,
    ) -> "ReconciliationResult":
        return cls(
            success=True,
            entry=entry,
            dry_run=dry_run,
            preview=preview,
            changed=changed,
        )

    @classmethod
    def failure(
        cls,
        error_message: str,
        dry_run: bool = False,
    ) -> "ReconciliationResult":
        return cls(success=False, error_message=error_message, dry_run=dry_run)

    @classmethod
    def missing(cls, error_message: str) -> "ReconciliationResult":
        return cls(success=False, error_message=error_message, not_found=True)


@dataclass(frozen=True)
class BalancePoint:
    """Balance of a scope at the end of a given day."""

    date: date
    balance: Money


@dataclass(frozen=True)
class Trend:
    """Change between the first and last points of a series."""

    previous: Money
    current: Money
    favorable_direction: str = "up"

    @property
    def value(self) -> Money:
        return self.current - self.previous

    @property
    def percent(self) -> Decimal | None:
        if self.previous.amount == 0:
            return None
        ratio = self.value.amount / abs(self.previous.amount)
        return (ratio * Decimal("100")).quantize(Decimal("0.1"))

    @property
    def is_favorable(self) -> bool:
        if self.favorable_direction == "down":
            return self.value.amount <= 0
        return self.value.amount >= 0


@dataclass(frozen=True)
class NetWorthSeries:
    """Ordered net worth points over a period in the family currency."""

    currency: str
    period: Period
    points: list[BalancePoint] = field(default_factory=list)
    favorable_direction: str = "up"

    @property
    def trend(self) -> Trend | None:
        if not self.points:
            return None
        return Trend(
            previous=self.points[0].balance,
            current=self.points[-1].balance,
            favorable_direction=self.favorable_direction,
        )


@dataclass(frozen=True)
class NetWorthSummary:
    """Summary of net worth figures.

    Attributes:
        asset_total: Sum of asset balances.
        liability_total: Sum of liability balances.
        net_worth: Assets minus liabilities.
    """

    asset_total: Decimal
    liability_total: Decimal
    net_worth: Decimal
    currency_code: str


@dataclass(frozen=True)
class AccountRow:
    """Read-only presentation row for an account and its converted balance."""

    account_id: str
    name: str
    accountable_type: str
    classification: str
    currency: str
    balance: Money | None
    converted_balance: Money
    is_syncing: bool

    @property
    def syncing(self) -> bool:
        return self.is_syncing


@dataclass(frozen=True)
class AccountTotalsView:
    """Accounts grouped by classification."""

    currency: str
    asset_accounts: list[AccountRow]
    liability_accounts: list[AccountRow]

    @property
    def asset_total(self) -> Money:
        return _sum_rows(self.asset_accounts, self.currency)

    @property
    def liability_total(self) -> Money:
        return _sum_rows(self.liability_accounts, self.currency)


def _sum_rows(rows: list[AccountRow], currency: str) -> Money:
    total = Money.zero(currency)
    for row in rows:
        total = total + row.converted_balance
    return total


__all__ = [
    "ReconciliationPreview",
    "ReconciliationResult",
    "BalancePoint",
    "Trend",
    "NetWorthSeries",
    "NetWorthSummary",
    "AccountRow",
    "AccountTotalsView",
]
