"""Tests for the reconciliation manager and reconcileable account."""

from datetime import date
from decimal import Decimal

import pytest

from household_ledger.application.use_cases.exchange_rates import (
    ExchangeRateResolver,
)
from household_ledger.application.use_cases.reconcile_balance import (
    DUPLICATE_VALUATION_MESSAGE,
    MISSING_EXCHANGE_RATE_MESSAGE,
    ReconcileableAccount,
    ReconciliationManager,
)
from household_ledger.domain.exceptions import DuplicateValuationError
from household_ledger.domain.models import Family, Money


@pytest.fixture
def account(repository, make_account):
    return repository.add_account(make_account(balance="1000"))


@pytest.fixture
def reconcileable(
    account,
    repository,
    rate_provider,
    sync_queue,
    logger,
    clock,
):
    family = repository.get_family("fam-1")
    resolver = ExchangeRateResolver(repository, rate_provider, logger=logger)
    return ReconcileableAccount(
        account,
        family,
        repository,
        resolver,
        sync_queue,
        logger=logger,
        clock=clock,
    )


def test_create_reconciliation_persists_entry_and_enqueues_resync(
    reconcileable,
    repository,
    sync_queue,
    now,
) -> None:
    """A new valuation is stored for today and resync starts today."""
    today = now.date()

    result = reconcileable.create_reconciliation(balance="1100", date=today)

    assert result.success
    entry = repository.get_entry(result.entry.id)
    assert entry.amount == Decimal("1100")
    assert entry.name == "Manual value update"
    assert entry.date == today
    assert entry.currency == "USD"
    assert entry.exchange_rate is None
    assert entry.entryable.kind == "reconciliation"
    sync_queue.enqueue_resync.assert_called_once_with("acc-1", today)


def test_create_reconciliation_in_foreign_currency_keeps_amount_and_rate(
    reconcileable,
    repository,
    now,
) -> None:
    result = reconcileable.create_reconciliation(
        balance="1000",
        date=now.date(),
        currency="EUR",
        exchange_rate="1.1",
    )

    assert result.success
    entry = repository.get_entry(result.entry.id)
    assert entry.currency == "EUR"
    assert entry.exchange_rate == Decimal("1.1")
    assert entry.amount == Decimal("1000")
    assert result.preview.converted_balance == Money.of("1100.00", "USD")


def test_foreign_currency_without_rate_fails(
    reconcileable,
    repository,
    sync_queue,
    now,
) -> None:
    result = reconcileable.create_reconciliation(
        balance="1000",
        date=now.date(),
        currency="EUR",
    )

    assert not result.success
    assert result.error_message == MISSING_EXCHANGE_RATE_MESSAGE
    assert repository.entries == {}
    sync_queue.enqueue_resync.assert_not_called()


@pytest.mark.parametrize(
    ("balance", "entry_date", "message"),
    [
        ("abc", "2026-10-01", "Balance must be a valid number"),
        ("Infinity", "2026-10-01", "Balance must be a valid number"),
        ("10", "2026-13-01", "Date is invalid"),
        ("10", "2016-10-19", "Date must be within the last 10 years"),
    ],
)
def test_invalid_requests_are_reported_as_failures(
    reconcileable,
    repository,
    balance,
    entry_date,
    message,
) -> None:
    result = reconcileable.create_reconciliation(balance=balance, date=entry_date)

    assert not result.success
    assert result.error_message == message
    assert repository.entries == {}


def test_date_just_inside_window_is_accepted(reconcileable) -> None:
    result = reconcileable.create_reconciliation(
        balance="10",
        date=date(2016, 10, 20),
    )

    assert result.success


def test_invalid_currency_fails(reconcileable, now) -> None:
    result = reconcileable.create_reconciliation(
        balance="10",
        date=now.date(),
        currency="EURO",
    )

    assert not result.success
    assert result.error_message == "Currency is invalid: EURO"


def test_non_positive_rate_fails(reconcileable, now) -> None:
    result = reconcileable.create_reconciliation(
        balance="10",
        date=now.date(),
        currency="EUR",
        exchange_rate="0",
    )

    assert not result.success
    assert result.error_message == "Exchange rate must be greater than zero"


def test_second_valuation_on_same_date_fails(
    reconcileable,
    repository,
    now,
) -> None:
    first = reconcileable.create_reconciliation(balance="10", date=now.date())
    second = reconcileable.create_reconciliation(balance="20", date=now.date())

    assert first.success
    assert not second.success
    assert second.error_message == DUPLICATE_VALUATION_MESSAGE
    assert len(repository.entries) == 1


def test_duplicate_race_in_storage_becomes_failure(
    account,
    repository,
    rate_provider,
    logger,
    clock,
    now,
    monkeypatch,
) -> None:
    """A uniqueness violation raised at commit time is reported, not raised."""
    family = repository.get_family("fam-1")
    resolver = ExchangeRateResolver(repository, rate_provider, logger=logger)
    manager = ReconciliationManager(
        account,
        family,
        repository,
        resolver,
        logger=logger,
        clock=clock,
    )

    def _raise(entry):
        raise DuplicateValuationError(entry.account_id, entry.date)

    monkeypatch.setattr(repository, "save_valuation", _raise)

    result = manager.reconcile_balance(balance="10", date=now.date())

    assert not result.success
    assert result.error_message == DUPLICATE_VALUATION_MESSAGE


def test_dry_run_previews_without_persisting(
    reconcileable,
    repository,
    sync_queue,
    now,
) -> None:
    result = reconcileable.create_reconciliation(
        balance="1250.50",
        date=now.date(),
        dry_run=True,
    )

    assert result.success
    assert result.dry_run
    assert repository.entries == {}
    sync_queue.enqueue_resync.assert_not_called()
    preview = result.preview
    assert preview.balance == Money.of("1250.50", "USD")
    assert preview.previous_balance == Money.of("1000", "USD")
    assert preview.change == Money.of("250.50", "USD")
    assert preview.converted_balance == Money.of("1250.50", "USD")


def test_update_keeps_fixed_exchange_rate(
    reconcileable,
    repository,
    make_entry,
    sync_queue,
) -> None:
    existing = repository.add_entry(
        make_entry(
            "val-1",
            date(2026, 10, 1),
            "900",
            currency="EUR",
            valuation=True,
            rate="1.1",
        )
    )

    result = reconcileable.update_reconciliation(
        existing,
        balance="950",
        date=date(2026, 10, 1),
        exchange_rate="2.5",
    )

    assert result.success
    stored = repository.get_entry("val-1")
    assert stored.exchange_rate == Decimal("1.1")
    assert stored.amount == Decimal("950")
    assert stored.currency == "EUR"
    sync_queue.enqueue_resync.assert_called_once_with("acc-1", date(2026, 10, 1))


def test_update_moving_date_resyncs_from_earliest_date(
    reconcileable,
    repository,
    make_entry,
    sync_queue,
) -> None:
    existing = repository.add_entry(
        make_entry("val-1", date(2026, 10, 10), "900", valuation=True)
    )

    result = reconcileable.update_reconciliation(
        existing,
        balance="900",
        date=date(2026, 9, 1),
    )

    assert result.success
    assert repository.get_entry("val-1").date == date(2026, 9, 1)
    sync_queue.enqueue_resync.assert_called_once_with("acc-1", date(2026, 9, 1))


def test_identical_update_is_idempotent(
    reconcileable,
    repository,
    make_entry,
    sync_queue,
) -> None:
    existing = repository.add_entry(
        make_entry("val-1", date(2026, 10, 10), "900", valuation=True)
    )

    first = reconcileable.update_reconciliation(
        existing,
        balance="950",
        date=date(2026, 10, 10),
    )
    second = reconcileable.update_reconciliation(
        repository.get_entry("val-1"),
        balance="950",
        date=date(2026, 10, 10),
    )

    assert first.success and second.success
    assert first.changed and not second.changed
    assert repository.get_entry("val-1").amount == Decimal("950")
    assert len(repository.saved) == 1
    sync_queue.enqueue_resync.assert_called_once_with("acc-1", date(2026, 10, 10))


def test_update_rejects_entry_of_another_account(
    reconcileable,
    repository,
    make_entry,
) -> None:
    foreign = make_entry(
        "val-x",
        date(2026, 10, 1),
        "1",
        account_id="acc-2",
        valuation=True,
    )

    with pytest.raises(ValueError):
        reconcileable.update_reconciliation(
            foreign,
            balance="2",
            date=date(2026, 10, 1),
        )


def test_update_rejects_transaction_entry(
    reconcileable,
    make_entry,
) -> None:
    transaction = make_entry("txn-1", date(2026, 10, 1), "1")

    with pytest.raises(ValueError):
        reconcileable.update_reconciliation(
            transaction,
            balance="2",
            date=date(2026, 10, 1),
        )


def test_preview_converts_with_manual_rate_into_family_currency(
    repository,
    rate_provider,
    logger,
    clock,
    make_account,
    now,
) -> None:
    """10000 NGN at a manual rate of 0.000556 previews as 5.56 EUR."""
    repository.add_family(Family(id="fam-eu", name="Eu", currency="EUR"))
    account = repository.add_account(
        make_account("acc-usd", currency="USD", family_id="fam-eu")
    )
    resolver = ExchangeRateResolver(repository, rate_provider, logger=logger)
    manager = ReconciliationManager(
        account,
        repository.get_family("fam-eu"),
        repository,
        resolver,
        logger=logger,
        clock=clock,
    )

    result = manager.reconcile_balance(
        balance="10000",
        date=now.date(),
        currency="NGN",
        exchange_rate="0.000556",
        dry_run=True,
    )

    assert result.success
    assert result.preview.converted_balance == Money.of("5.56", "EUR")
    assert result.preview.change is None
