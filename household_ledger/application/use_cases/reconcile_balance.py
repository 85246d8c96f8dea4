"""Use cases reconciling an account balance with a valuation entry.

A reconciliation asserts the balance of an account at a date. The manager
validates the request, inserts or updates the valuation entry for that date
and reports problems as failed results; the account facade then asks for a
resync of the balances from the affected date forward.
"""

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.application.ports.sync import SyncQueuePort
from household_ledger.application.use_cases.exchange_rates import (
    ExchangeRateResolver,
)
from household_ledger.domain.constants import RECONCILIATION_ENTRY_NAME
from household_ledger.domain.exceptions import DuplicateValuationError
from household_ledger.domain.models import (
    Account,
    Entry,
    Family,
    Money,
    ReconciliationPreview,
    ReconciliationResult,
    ValuationEntryable,
)
from household_ledger.domain.services.fx import convert_money
from household_ledger.domain.services.normalization import (
    normalize_currency,
    parse_entry_date,
)
from household_ledger.domain.services.validation import (
    validate_entry_date,
    validate_exchange_rate,
)
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.decimal_utils import parse_decimal, quantize_rate
from household_ledger.utils.utils import utc_now


DUPLICATE_VALUATION_MESSAGE = "A valuation already exists for this date"
MISSING_EXCHANGE_RATE_MESSAGE = (
    "Exchange rate is required when the currency differs from the account "
    "currency"
)


class ReconciliationManager:
    """Insert or update the valuation entry matching a reported balance."""

    def __init__(
        self,
        account: Account,
        family: Family,
        repository: LedgerRepositoryPort,
        resolver: ExchangeRateResolver,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            account: Account being reconciled.
            family: Owning family, used for previews in its currency.
            repository: Port providing ledger persistence.
            resolver: Exchange rate resolver for preview conversions.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
        """
        self._account = account
        self._family = family
        self._repository = repository
        self._resolver = resolver
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now

    def reconcile_balance(
        self,
        balance,
        date,
        currency: str | None = None,
        exchange_rate=None,
        existing_valuation_entry: Entry | None = None,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        """Reconcile the account balance at a date.

        Args:
            balance: Reported balance, in ``currency``.
            date: Valuation date (date or ISO string).
            currency: Entry currency; defaults to the existing entry's
                currency, then to the account currency.
            exchange_rate: Manual rate into the family currency. Ignored
                when the existing entry already carries one.
            existing_valuation_entry: Entry to update; None inserts a new one.
            dry_run: Validate and preview without persisting.

        Returns:
            ReconciliationResult: Success with the entry, or a failure with
            a user-facing message.

        Raises:
            ValueError: If the existing entry is not a valuation of this
                account.
        """
        existing = existing_valuation_entry
        if existing is not None:
            self._check_existing_entry(existing)

        amount = parse_decimal(balance)
        if amount is None:
            return ReconciliationResult.failure(
                "Balance must be a valid number",
                dry_run=dry_run,
            )

        entry_date = parse_entry_date(date)
        if entry_date is None:
            return ReconciliationResult.failure(
                "Date is invalid",
                dry_run=dry_run,
            )
        date_error = validate_entry_date(entry_date, self._clock().date())
        if date_error:
            return ReconciliationResult.failure(date_error, dry_run=dry_run)

        entry_currency = self._resolve_currency(currency, existing)
        if entry_currency is None:
            return ReconciliationResult.failure(
                f"Currency is invalid: {currency}",
                dry_run=dry_run,
            )

        rate, rate_error = self._resolve_exchange_rate(
            entry_currency,
            exchange_rate,
            existing,
        )
        if rate_error:
            return ReconciliationResult.failure(rate_error, dry_run=dry_run)

        conflict = self._repository.find_valuation(self._account.id, entry_date)
        if conflict is not None and (
            existing is None or conflict.id != existing.id
        ):
            return ReconciliationResult.failure(
                DUPLICATE_VALUATION_MESSAGE,
                dry_run=dry_run,
            )

        entry = self._build_entry(amount, entry_date, entry_currency, rate, existing)
        preview = self._build_preview(entry)
        if dry_run:
            return ReconciliationResult.ok(entry, dry_run=True, preview=preview)

        if existing is not None and _same_valuation(existing, entry):
            self._logger.info(
                f"Valuation {existing.id} already matches the request; "
                "nothing to update"
            )
            return ReconciliationResult.ok(existing, preview=preview, changed=False)

        try:
            saved = self._repository.save_valuation(entry)
        except DuplicateValuationError as exc:
            self._logger.warning(f"Reconciliation rejected: {exc}")
            return ReconciliationResult.failure(DUPLICATE_VALUATION_MESSAGE)

        self._logger.info(
            f"Reconciled account {self._account.id} on {entry_date}: "
            f"{saved.amount} {saved.currency}"
        )
        return ReconciliationResult.ok(saved, preview=preview)

    def _check_existing_entry(self, entry: Entry) -> None:
        if entry.account_id != self._account.id:
            raise ValueError(
                f"Entry {entry.id} does not belong to account {self._account.id}"
            )
        if not entry.is_valuation:
            raise ValueError(f"Entry {entry.id} is not a valuation")

    def _resolve_currency(
        self,
        currency: str | None,
        existing: Entry | None,
    ) -> str | None:
        if currency is None or not str(currency).strip():
            if existing is not None:
                return existing.currency
            return self._account.currency
        return normalize_currency(currency)

    def _resolve_exchange_rate(
        self,
        entry_currency: str,
        exchange_rate,
        existing: Entry | None,
    ) -> tuple[Decimal | None, str | None]:
        if existing is not None and existing.exchange_rate is not None:
            return existing.exchange_rate, None

        blank = exchange_rate is None or (
            isinstance(exchange_rate, str) and not exchange_rate.strip()
        )
        if blank:
            if entry_currency != self._account.currency:
                return None, MISSING_EXCHANGE_RATE_MESSAGE
            return None, None

        rate = parse_decimal(exchange_rate)
        if rate is None:
            return None, "Exchange rate must be a valid number"
        rate_error = validate_exchange_rate(rate)
        if rate_error:
            return None, rate_error
        return quantize_rate(rate), None

    def _build_entry(
        self,
        amount: Decimal,
        entry_date: date,
        entry_currency: str,
        rate: Decimal | None,
        existing: Entry | None,
    ) -> Entry:
        now = self._clock()
        if existing is not None:
            return existing.with_changes(
                amount=amount,
                date=entry_date,
                currency=entry_currency,
                exchange_rate=rate,
                updated_at=now,
            )
        return Entry(
            id=uuid4().hex,
            account_id=self._account.id,
            date=entry_date,
            amount=amount,
            currency=entry_currency,
            name=RECONCILIATION_ENTRY_NAME,
            entryable=ValuationEntryable(kind="reconciliation"),
            exchange_rate=rate,
            created_at=now,
            updated_at=now,
        )

    def _build_preview(self, entry: Entry) -> ReconciliationPreview:
        balance = entry.amount_money
        previous = self._account.balance_money
        if entry.exchange_rate is None and entry.currency == self._account.currency:
            rate = self._resolver.resolve(
                self._account,
                self._family.currency,
                entry.date,
            )
            converted = convert_money(balance, self._family.currency, rate)
        else:
            converted = self._resolver.convert_entry(entry, self._family.currency)
        change = None
        if previous is not None and previous.currency == balance.currency:
            change = balance - previous
        return ReconciliationPreview(
            date=entry.date,
            balance=balance,
            previous_balance=previous,
            converted_balance=converted,
            change=change,
        )


def _same_valuation(existing: Entry, candidate: Entry) -> bool:
    return (
        existing.amount == candidate.amount
        and existing.date == candidate.date
        and existing.currency == candidate.currency
        and existing.exchange_rate == candidate.exchange_rate
    )


class ReconcileableAccount:
    """Account-level reconciliation entry points.

    Wraps the manager and enqueues a single resync after every committed
    change, starting at the earliest date the change affects.
    """

    def __init__(
        self,
        account: Account,
        family: Family,
        repository: LedgerRepositoryPort,
        resolver: ExchangeRateResolver,
        sync_queue: SyncQueuePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._account = account
        self._sync_queue = sync_queue
        self._logger = logger or get_app_logger()
        self._manager = ReconciliationManager(
            account,
            family,
            repository,
            resolver,
            logger=self._logger,
            clock=clock,
        )

    @property
    def account(self) -> Account:
        return self._account

    def create_reconciliation(
        self,
        balance,
        date,
        dry_run: bool = False,
        currency: str | None = None,
        exchange_rate=None,
    ) -> ReconciliationResult:
        result = self._manager.reconcile_balance(
            balance=balance,
            date=date,
            currency=currency,
            exchange_rate=exchange_rate,
            dry_run=dry_run,
        )
        if result.success and not dry_run and result.changed:
            self._sync_later(result.entry.date)
        return result

    def update_reconciliation(
        self,
        existing_valuation_entry: Entry,
        balance,
        date,
        dry_run: bool = False,
        currency: str | None = None,
        exchange_rate=None,
    ) -> ReconciliationResult:
        previous_date = existing_valuation_entry.date
        result = self._manager.reconcile_balance(
            balance=balance,
            date=date,
            currency=currency,
            exchange_rate=exchange_rate,
            existing_valuation_entry=existing_valuation_entry,
            dry_run=dry_run,
        )
        if result.success and not dry_run and result.changed:
            self._sync_later(min(previous_date, result.entry.date))
        return result

    def _sync_later(self, window_start_date: date | None) -> None:
        self._sync_queue.enqueue_resync(self._account.id, window_start_date)
        self._logger.info(
            f"Resync enqueued for account {self._account.id} "
            f"from {window_start_date}"
        )


__all__ = [
    "DUPLICATE_VALUATION_MESSAGE",
    "MISSING_EXCHANGE_RATE_MESSAGE",
    "ReconciliationManager",
    "ReconcileableAccount",
]
