"""Shared fakes for application use case tests."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from household_ledger.domain.exceptions import (
    DuplicateValuationError,
    NotFoundError,
)
from household_ledger.domain.models import (
    Account,
    Entry,
    Family,
    TransactionEntryable,
    ValuationEntryable,
)
from household_ledger.domain.services import select_manual_rate_entry


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class InMemoryLedgerRepository:
    """Dictionary-backed implementation of the ledger repository port."""

    def __init__(self) -> None:
        self.families: dict[str, Family] = {}
        self.accounts: dict[str, Account] = {}
        self.entries: dict[str, Entry] = {}
        self.saved: list[Entry] = []

    def add_family(self, family: Family) -> Family:
        self.families[family.id] = family
        return family

    def add_account(self, account: Account) -> Account:
        self.accounts[account.id] = account
        return account

    def add_entry(self, entry: Entry) -> Entry:
        self.entries[entry.id] = entry
        return entry

    def get_family(self, family_id):
        if family_id not in self.families:
            raise NotFoundError("Family", family_id)
        return self.families[family_id]

    def get_account(self, account_id):
        if account_id not in self.accounts:
            raise NotFoundError("Account", account_id)
        return self.accounts[account_id]

    def get_entry(self, entry_id):
        if entry_id not in self.entries:
            raise NotFoundError("Entry", entry_id)
        return self.entries[entry_id]

    def list_accounts(self, family_id, visible_only=True):
        accounts = [
            account
            for account in self.accounts.values()
            if account.family_id == family_id
            and (account.is_visible or not visible_only)
        ]
        return sorted(accounts, key=lambda account: account.name)

    def list_entries(self, account_id, end_date=None):
        entries = [
            entry
            for entry in self.entries.values()
            if entry.account_id == account_id
            and (end_date is None or entry.date <= end_date)
        ]
        return sorted(entries, key=lambda entry: entry.date)

    def find_valuation(self, account_id, on_date):
        for entry in self.entries.values():
            if (
                entry.account_id == account_id
                and entry.date == on_date
                and entry.is_valuation
            ):
                return entry
        return None

    def latest_manual_rate_entry(self, account_id, target_currency):
        return select_manual_rate_entry(
            (
                entry
                for entry in self.entries.values()
                if entry.account_id == account_id
            ),
            target_currency,
        )

    def _family_entries(self, family_id):
        return [
            entry
            for entry in self.entries.values()
            if self.accounts[entry.account_id].family_id == family_id
        ]

    def latest_manual_rate_timestamp(self, family_id):
        stamps = [
            entry.updated_at
            for entry in self._family_entries(family_id)
            if entry.exchange_rate is not None and entry.updated_at
        ]
        return max(stamps) if stamps else None

    def latest_entry_update(self, family_id):
        stamps = [
            entry.updated_at
            for entry in self._family_entries(family_id)
            if entry.updated_at
        ]
        return max(stamps) if stamps else None

    def save_valuation(self, entry):
        conflict = self.find_valuation(entry.account_id, entry.date)
        if conflict is not None and conflict.id != entry.id:
            raise DuplicateValuationError(entry.account_id, entry.date)
        stored = self.entries.get(entry.id)
        if stored is not None and stored.exchange_rate is not None:
            entry = entry.with_changes(exchange_rate=stored.exchange_rate)
        self.entries[entry.id] = entry
        self.saved.append(entry)
        return entry

    def insert_transaction(self, entry):
        self.entries[entry.id] = entry
        return entry

    def update_notes(self, entry_id, notes):
        entry = self.get_entry(entry_id).with_changes(notes=notes)
        self.entries[entry_id] = entry
        return entry

    def delete_entry(self, entry_id):
        entry = self.get_entry(entry_id)
        del self.entries[entry_id]
        return entry


class DictCache:
    """Cache store fake recording computed keys."""

    def __init__(self) -> None:
        self.values: dict = {}
        self.computed: list[str] = []

    def fetch(self, key, compute):
        if key not in self.values:
            self.computed.append(key)
            self.values[key] = compute()
        return self.values[key]

    def delete(self, key):
        self.values.pop(key, None)


def _make_account(
    account_id: str = "acc-1",
    currency: str = "USD",
    balance: str | None = "100",
    accountable_type: str = "Depository",
    family_id: str = "fam-1",
    name: str | None = None,
    status: str = "active",
) -> Account:
    return Account(
        id=account_id,
        family_id=family_id,
        name=name or account_id,
        currency=currency,
        balance=Decimal(balance) if balance is not None else None,
        accountable_type=accountable_type,
        status=status,
    )


def _make_entry(
    entry_id: str,
    on: date,
    amount: str,
    account_id: str = "acc-1",
    currency: str = "USD",
    valuation: bool = False,
    rate: str | None = None,
    updated_at: datetime = NOW,
) -> Entry:
    return Entry(
        id=entry_id,
        account_id=account_id,
        date=on,
        amount=Decimal(amount),
        currency=currency,
        name="Manual value update" if valuation else entry_id,
        entryable=ValuationEntryable() if valuation else TransactionEntryable(),
        exchange_rate=Decimal(rate) if rate is not None else None,
        created_at=updated_at,
        updated_at=updated_at,
    )


@pytest.fixture
def repository() -> InMemoryLedgerRepository:
    repo = InMemoryLedgerRepository()
    repo.add_family(Family(id="fam-1", name="Doe", currency="USD"))
    return repo


@pytest.fixture
def rate_provider() -> MagicMock:
    provider = MagicMock()
    provider.find_rate.return_value = None
    return provider


@pytest.fixture
def sync_queue() -> MagicMock:
    return MagicMock()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def cache() -> DictCache:
    return DictCache()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_account():
    return _make_account


@pytest.fixture
def make_entry():
    return _make_entry
