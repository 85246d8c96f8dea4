"""Use cases creating, editing and deleting ledger entries by id."""

from collections.abc import Callable
from datetime import datetime

from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.application.ports.sync import SyncQueuePort
from household_ledger.application.use_cases.exchange_rates import (
    ExchangeRateResolver,
)
from household_ledger.application.use_cases.reconcile_balance import (
    ReconcileableAccount,
)
from household_ledger.domain.exceptions import NotFoundError
from household_ledger.domain.models import Account, Entry, ReconciliationResult
from household_ledger.infrastructure.logging.logger import get_app_logger


class _ValuationUseCase:
    def __init__(
        self,
        repository: LedgerRepositoryPort,
        rate_provider: ExchangeRateProviderPort,
        sync_queue: SyncQueuePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Port providing ledger persistence.
            rate_provider: Port providing automatic exchange rates.
            sync_queue: Port receiving resync requests.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
        """
        self._repository = repository
        self._rate_provider = rate_provider
        self._sync_queue = sync_queue
        self._logger = logger or get_app_logger()
        self._clock = clock

    def _reconcileable(self, account: Account) -> ReconcileableAccount:
        family = self._repository.get_family(account.family_id)
        resolver = ExchangeRateResolver(
            self._repository,
            self._rate_provider,
            logger=self._logger,
        )
        return ReconcileableAccount(
            account,
            family,
            self._repository,
            resolver,
            self._sync_queue,
            logger=self._logger,
            clock=self._clock,
        )


class CreateValuationUseCase(_ValuationUseCase):
    """Record a reported balance for an account."""

    def execute(
        self,
        account_id: str,
        balance,
        date,
        currency: str | None = None,
        exchange_rate=None,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        try:
            account = self._repository.get_account(account_id)
            reconcileable = self._reconcileable(account)
        except NotFoundError as exc:
            self._logger.warning(f"Valuation not created: {exc}")
            return ReconciliationResult.missing(str(exc))
        return reconcileable.create_reconciliation(
            balance=balance,
            date=date,
            dry_run=dry_run,
            currency=currency,
            exchange_rate=exchange_rate,
        )


class UpdateValuationEntryUseCase(_ValuationUseCase):
    """Edit a valuation entry.

    Notes are saved on their own. The balance is reconciled only when both
    an amount and a date are supplied, and a rate already fixed on the entry
    is never replaced.
    """

    def execute(
        self,
        entry_id: str,
        amount=None,
        date=None,
        currency: str | None = None,
        exchange_rate=None,
        notes: str | None = None,
        dry_run: bool = False,
    ) -> ReconciliationResult:
        """Apply the requested changes to a valuation entry.

        Args:
            entry_id: Entry to edit.
            amount: New balance; requires ``date``.
            date: New valuation date; requires ``amount``.
            currency: New entry currency.
            exchange_rate: Manual rate, applied only if none is set yet.
            notes: Free-text notes, saved when non-blank.
            dry_run: Validate and preview without persisting.

        Returns:
            ReconciliationResult: Outcome with the updated entry.
        """
        try:
            entry = self._repository.get_entry(entry_id)
            account = self._repository.get_account(entry.account_id)
        except NotFoundError as exc:
            self._logger.warning(f"Valuation not updated: {exc}")
            return ReconciliationResult.missing(str(exc))

        if not entry.is_valuation:
            return ReconciliationResult.failure(
                f"Entry {entry_id} is not a valuation",
                dry_run=dry_run,
            )

        if _present(notes) and not dry_run:
            entry = self._repository.update_notes(entry.id, notes)

        if not (_present(amount) and _present(date)):
            return ReconciliationResult.ok(entry, dry_run=dry_run, changed=False)

        if entry.exchange_rate is not None and _present(exchange_rate):
            self._logger.info(
                f"Ignoring exchange rate for entry {entry.id}: already set to "
                f"{entry.exchange_rate}"
            )
            exchange_rate = None

        return self._reconcileable(account).update_reconciliation(
            entry,
            balance=amount,
            date=date,
            dry_run=dry_run,
            currency=currency,
            exchange_rate=exchange_rate,
        )


class DeleteEntryUseCase:
    """Delete an entry and recompute the whole account history."""

    def __init__(
        self,
        repository: LedgerRepositoryPort,
        sync_queue: SyncQueuePort,
        logger=None,
    ) -> None:
        self._repository = repository
        self._sync_queue = sync_queue
        self._logger = logger or get_app_logger()

    def execute(self, entry_id: str) -> Entry:
        """Delete the entry.

        Raises:
            NotFoundError: If the entry does not exist.
        """
        entry = self._repository.delete_entry(entry_id)
        self._sync_queue.enqueue_resync(entry.account_id, None)
        self._logger.info(
            f"Deleted entry {entry.id} of account {entry.account_id}; "
            "full resync enqueued"
        )
        return entry


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


__all__ = [
    "CreateValuationUseCase",
    "UpdateValuationEntryUseCase",
    "DeleteEntryUseCase",
]
