"""Tests for the SQLAlchemy ledger repository against SQLite."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text

from household_ledger.application.use_cases import GetAccountTotalsUseCase
from household_ledger.domain.exceptions import (
    DuplicateValuationError,
    NotFoundError,
)
from household_ledger.domain.models import (
    Entry,
    TransactionEntryable,
    ValuationEntryable,
)
from household_ledger.domain.services import select_manual_rate_entry
from household_ledger.infrastructure.cache import MemoryCacheStore
from household_ledger.infrastructure.exchange_rate_repository import (
    StaticExchangeRateProvider,
)
from household_ledger.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from household_ledger.infrastructure.sync_queue import SqlAlchemySyncStatusMonitor


@pytest.fixture
def repository(db_port, clock):
    return SqlAlchemyLedgerRepository(db_port, clock=clock)


def _valuation(entry_id, on, amount, account_id="acc-checking", **changes):
    return Entry(
        id=entry_id,
        account_id=account_id,
        date=on,
        amount=Decimal(amount),
        currency=changes.pop("currency", "USD"),
        name="Manual value update",
        entryable=ValuationEntryable(),
        **changes,
    )


def _transaction(entry_id, on, amount, account_id="acc-checking", **changes):
    return Entry(
        id=entry_id,
        account_id=account_id,
        date=on,
        amount=Decimal(amount),
        currency=changes.pop("currency", "USD"),
        name=f"Payment {entry_id}",
        entryable=TransactionEntryable(),
        **changes,
    )


def test_get_family_and_account(repository) -> None:
    family = repository.get_family("fam-1")
    account = repository.get_account("acc-checking")

    assert family.currency == "USD"
    assert account.balance == Decimal("1000.5")
    assert account.classification == "asset"
    assert repository.get_account("acc-old").balance is None


@pytest.mark.parametrize(
    ("method", "identifier"),
    [
        ("get_family", "fam-x"),
        ("get_account", "acc-x"),
        ("get_entry", "entry-x"),
    ],
)
def test_missing_records_raise_not_found(repository, method, identifier) -> None:
    with pytest.raises(NotFoundError):
        getattr(repository, method)(identifier)


def test_list_accounts_filters_hidden_statuses(repository) -> None:
    visible = repository.list_accounts("fam-1")
    everything = repository.list_accounts("fam-1", visible_only=False)

    assert [account.id for account in visible] == ["acc-card", "acc-checking"]
    assert [account.id for account in everything] == [
        "acc-card",
        "acc-checking",
        "acc-old",
    ]


def _insert_unchecked_account(db_port, accountable_type) -> None:
    with db_port.get_ledger_engine().begin() as conn:
        conn.exec_driver_sql("PRAGMA ignore_check_constraints = ON")
        conn.execute(
            text(
                "INSERT INTO accounts (id, family_id, name, currency, balance, "
                "accountable_type, status) "
                "VALUES ('acc-legacy', 'fam-1', 'Legacy', 'USD', 5, "
                ":accountable_type, 'active')"
            ),
            {"accountable_type": accountable_type},
        )
        conn.exec_driver_sql("PRAGMA ignore_check_constraints = OFF")


def test_list_accounts_skips_unknown_accountable_types(db_port, clock) -> None:
    _insert_unchecked_account(db_port, "Other")
    logger = MagicMock()
    repository = SqlAlchemyLedgerRepository(db_port, clock=clock, logger=logger)

    visible = repository.list_accounts("fam-1")

    assert [account.id for account in visible] == ["acc-card", "acc-checking"]
    logger.warning.assert_called_once()
    assert "acc-legacy" in logger.warning.call_args.args[0]


def test_account_totals_survive_unknown_accountable_types(db_port, clock) -> None:
    _insert_unchecked_account(db_port, "Other")
    use_case = GetAccountTotalsUseCase(
        SqlAlchemyLedgerRepository(db_port, clock=clock, logger=MagicMock()),
        StaticExchangeRateProvider({}),
        SqlAlchemySyncStatusMonitor(db_port),
        MemoryCacheStore(),
        logger=MagicMock(),
        clock=clock,
    )

    view = use_case.execute("fam-1")

    assert [row.account_id for row in view.asset_accounts] == ["acc-checking"]
    assert [row.account_id for row in view.liability_accounts] == ["acc-card"]


def test_save_valuation_stamps_and_reads_back(repository, now) -> None:
    stored = repository.save_valuation(
        _valuation("val-1", date(2026, 10, 1), "1200.25", notes="Statement")
    )

    assert stored.amount == Decimal("1200.25")
    assert stored.date == date(2026, 10, 1)
    assert stored.entryable.kind == "reconciliation"
    assert stored.notes == "Statement"
    assert stored.created_at == now
    assert stored.updated_at == now
    assert stored.updated_at.tzinfo is not None


def test_large_amounts_keep_every_digit(repository) -> None:
    repository.save_valuation(
        _valuation("val-1", date(2026, 10, 1), "12345678901234.5678")
    )

    stored = repository.get_entry("val-1")

    assert stored.amount == Decimal("12345678901234.5678")
    assert str(stored.amount) == "12345678901234.5678"


def test_save_valuation_updates_in_place_and_keeps_rate(repository) -> None:
    repository.save_valuation(
        _valuation(
            "val-1",
            date(2026, 10, 1),
            "1000",
            currency="EUR",
            exchange_rate=Decimal("1.1"),
        )
    )

    stored = repository.save_valuation(
        _valuation(
            "val-1",
            date(2026, 10, 2),
            "1100",
            currency="EUR",
            exchange_rate=Decimal("1.3"),
        )
    )

    assert stored.amount == Decimal("1100")
    assert stored.date == date(2026, 10, 2)
    assert stored.exchange_rate == Decimal("1.1")
    assert len(repository.list_entries("acc-checking")) == 1


def test_second_valuation_on_same_day_is_rejected(repository) -> None:
    repository.save_valuation(_valuation("val-1", date(2026, 10, 1), "1"))

    with pytest.raises(DuplicateValuationError):
        repository.save_valuation(_valuation("val-2", date(2026, 10, 1), "2"))

    assert repository.get_entry("val-1").amount == Decimal("1")


def test_transactions_may_share_a_valuation_date(repository) -> None:
    repository.save_valuation(_valuation("val-1", date(2026, 10, 1), "1"))
    repository.insert_transaction(_transaction("txn-1", date(2026, 10, 1), "-5"))
    repository.insert_transaction(_transaction("txn-2", date(2026, 10, 1), "7"))

    entries = repository.list_entries("acc-checking")

    assert {entry.id for entry in entries} == {"val-1", "txn-1", "txn-2"}


def test_save_valuation_rejects_transactions(repository) -> None:
    with pytest.raises(ValueError):
        repository.save_valuation(_transaction("txn-1", date(2026, 10, 1), "1"))


def test_list_entries_respects_end_date(repository) -> None:
    repository.insert_transaction(_transaction("txn-1", date(2026, 9, 1), "1"))
    repository.insert_transaction(_transaction("txn-2", date(2026, 10, 1), "2"))

    entries = repository.list_entries("acc-checking", end_date=date(2026, 9, 30))

    assert [entry.id for entry in entries] == ["txn-1"]


def test_find_valuation_ignores_transactions(repository) -> None:
    repository.insert_transaction(_transaction("txn-1", date(2026, 10, 1), "1"))

    assert repository.find_valuation("acc-checking", date(2026, 10, 1)) is None

    repository.save_valuation(_valuation("val-1", date(2026, 10, 1), "9"))
    found = repository.find_valuation("acc-checking", date(2026, 10, 1))

    assert found.id == "val-1"


def test_latest_manual_rate_entry_prefers_latest_date(repository) -> None:
    repository.insert_transaction(
        _transaction(
            "txn-eur",
            date(2026, 10, 5),
            "10",
            currency="EUR",
            exchange_rate=Decimal("1.2"),
        )
    )
    repository.save_valuation(
        _valuation(
            "val-eur",
            date(2026, 10, 1),
            "10",
            currency="EUR",
            exchange_rate=Decimal("1.1"),
        )
    )
    repository.insert_transaction(
        _transaction(
            "txn-usd",
            date(2026, 10, 9),
            "10",
            exchange_rate=Decimal("1"),
        )
    )

    latest = repository.latest_manual_rate_entry("acc-checking", "USD")

    assert latest.id == "txn-eur"
    assert latest.exchange_rate == Decimal("1.2")
    in_memory_choice = select_manual_rate_entry(
        repository.list_entries("acc-checking"),
        "USD",
    )
    assert in_memory_choice.id == latest.id


def test_freshness_timestamps(repository, now) -> None:
    assert repository.latest_manual_rate_timestamp("fam-1") is None
    assert repository.latest_entry_update("fam-1") is None

    earlier = now - timedelta(days=1)
    repository.insert_transaction(
        _transaction(
            "txn-1",
            date(2026, 10, 1),
            "1",
            created_at=earlier,
            updated_at=earlier,
        )
    )
    repository.save_valuation(
        _valuation(
            "val-1",
            date(2026, 10, 2),
            "1",
            currency="EUR",
            exchange_rate=Decimal("1.1"),
        )
    )

    assert repository.latest_entry_update("fam-1") == now
    assert repository.latest_manual_rate_timestamp("fam-1") == now
    assert repository.latest_entry_update("fam-2") is None


def test_update_notes(repository) -> None:
    repository.insert_transaction(_transaction("txn-1", date(2026, 10, 1), "1"))

    updated = repository.update_notes("txn-1", "Rent for October")

    assert updated.notes == "Rent for October"
    with pytest.raises(NotFoundError):
        repository.update_notes("missing", "text")


def test_delete_entry_returns_removed_entry(repository) -> None:
    repository.insert_transaction(_transaction("txn-1", date(2026, 10, 1), "1"))

    deleted = repository.delete_entry("txn-1")

    assert deleted.id == "txn-1"
    with pytest.raises(NotFoundError):
        repository.get_entry("txn-1")
    with pytest.raises(NotFoundError):
        repository.delete_entry("txn-1")


def test_timestamps_with_offsets_are_stored_as_utc(repository) -> None:
    offset = timezone(timedelta(hours=2))
    local = datetime(2026, 10, 19, 14, 0, tzinfo=offset)
    repository.insert_transaction(
        _transaction(
            "txn-1",
            date(2026, 10, 1),
            "1",
            created_at=local,
            updated_at=local,
        )
    )

    stored = repository.get_entry("txn-1")

    assert stored.updated_at == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
