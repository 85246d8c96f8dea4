"""Domain models for families, accounts and ledger entries."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Literal

from household_ledger.domain.constants import (
    ASSET_ACCOUNTABLE_TYPES,
    ASSET_CLASSIFICATION,
    LIABILITY_ACCOUNTABLE_TYPES,
    LIABILITY_CLASSIFICATION,
    TRANSACTION_ENTRYABLE,
    VALUATION_ENTRYABLE,
    VISIBLE_ACCOUNT_STATUSES,
)
from household_ledger.domain.models.money import Money


@dataclass(frozen=True)
class Family:
    """Owner of accounts with a single reporting currency."""

    id: str
    name: str
    currency: str


@dataclass(frozen=True)
class Account:
    """Ledger account evaluated in its own currency.

    Attributes:
        id: Account identifier.
        family_id: Owning family identifier.
        name: Display name.
        currency: Native currency code.
        balance: Cached balance in the native currency, if computed.
        accountable_type: Account subtype (Depository, Loan, ...).
        status: Lifecycle status; disabled accounts are hidden.
    """

    id: str
    family_id: str
    name: str
    currency: str
    balance: Decimal | None
    accountable_type: str
    status: str = "active"

    @property
    def classification(self) -> str:
        if self.accountable_type in LIABILITY_ACCOUNTABLE_TYPES:
            return LIABILITY_CLASSIFICATION
        if self.accountable_type in ASSET_ACCOUNTABLE_TYPES:
            return ASSET_CLASSIFICATION
        raise ValueError(f"Unknown accountable type: {self.accountable_type}")

    @property
    def is_visible(self) -> bool:
        return self.status in VISIBLE_ACCOUNT_STATUSES

    @property
    def balance_money(self) -> Money | None:
        if self.balance is None:
            return None
        return Money(amount=self.balance, currency=self.currency)


@dataclass(frozen=True)
class TransactionEntryable:
    """Payload for a regular ledger transaction."""

    kind: str = "standard"
    entryable_type: Literal["Transaction"] = field(
        default=TRANSACTION_ENTRYABLE,
        init=False,
    )


@dataclass(frozen=True)
class ValuationEntryable:
    """Payload for a point-in-time balance assertion."""

    kind: str = "reconciliation"
    entryable_type: Literal["Valuation"] = field(
        default=VALUATION_ENTRYABLE,
        init=False,
    )


Entryable = TransactionEntryable | ValuationEntryable


def build_entryable(entryable_type: str, kind: str | None) -> Entryable:
    """Rebuild the entryable variant from its stored discriminant."""
    if entryable_type == VALUATION_ENTRYABLE:
        return ValuationEntryable(kind=kind or "reconciliation")
    if entryable_type == TRANSACTION_ENTRYABLE:
        return TransactionEntryable(kind=kind or "standard")
    raise ValueError(f"Unknown entryable type: {entryable_type}")


@dataclass(frozen=True)
class Entry:
    """Ledger row belonging to an account.

    ``amount`` is expressed in ``currency``. For transactions it is the
    signed change applied to the account balance; for valuations it is the
    asserted balance itself. ``exchange_rate`` converts ``currency`` into
    the family currency and cannot change once set.
    """

    id: str
    account_id: str
    date: date
    amount: Decimal
    currency: str
    name: str
    entryable: Entryable
    exchange_rate: Decimal | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def entryable_type(self) -> str:
        return self.entryable.entryable_type

    @property
    def is_valuation(self) -> bool:
        return self.entryable.entryable_type == VALUATION_ENTRYABLE

    @property
    def amount_money(self) -> Money:
        return Money(amount=self.amount, currency=self.currency)

    def needs_manual_exchange_rate(self, family_currency: str) -> bool:
        """Return True when the entry currency differs from the family's."""
        return self.currency != family_currency

    def with_changes(self, **changes) -> "Entry":
        return replace(self, **changes)


@dataclass(frozen=True)
class Period:
    """Inclusive date range used to bound series queries."""

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"Period start {self.start_date} is after end {self.end_date}"
            )

    @classmethod
    def custom(cls, start_date: date, end_date: date) -> "Period":
        return cls(start_date=start_date, end_date=end_date)

    @classmethod
    def last_days(cls, days: int, today: date | None = None) -> "Period":
        end = today or date.today()
        return cls(start_date=end - timedelta(days=days), end_date=end)

    @classmethod
    def last_30_days(cls, today: date | None = None) -> "Period":
        return cls.last_days(30, today)

    @classmethod
    def last_90_days(cls, today: date | None = None) -> "Period":
        return cls.last_days(90, today)

    @classmethod
    def last_365_days(cls, today: date | None = None) -> "Period":
        return cls.last_days(365, today)

    @classmethod
    def current_month(cls, today: date | None = None) -> "Period":
        end = today or date.today()
        return cls(start_date=end.replace(day=1), end_date=end)

    @classmethod
    def year_to_date(cls, today: date | None = None) -> "Period":
        end = today or date.today()
        return cls(start_date=date(end.year, 1, 1), end_date=end)

    @property
    def days_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def interval_days(self) -> int:
        """Sampling step keeping long periods to a bounded number of points."""
        if self.days_count <= 90:
            return 1
        if self.days_count <= 400:
            return 7
        return 30

    def days(self):
        """Yield sampled dates from start to end, always including the end."""
        step = timedelta(days=self.interval_days)
        current = self.start_date
        while current < self.end_date:
            yield current
            current += step
        yield self.end_date


__all__ = [
    "Family",
    "Account",
    "TransactionEntryable",
    "ValuationEntryable",
    "Entryable",
    "build_entryable",
    "Entry",
    "Period",
]
