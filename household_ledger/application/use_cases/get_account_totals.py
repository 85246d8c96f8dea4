"""Use case to group a family's accounts by classification."""

from collections.abc import Callable
from datetime import datetime

from household_ledger.application.ports.cache import CacheStorePort
from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.application.ports.sync import SyncStatusPort
from household_ledger.application.use_cases.cache_keys import (
    build_family_cache_key,
)
from household_ledger.application.use_cases.exchange_rates import (
    ExchangeRateResolver,
)
from household_ledger.application.use_cases.get_net_worth_series import (
    DEFAULT_CACHE_BUCKET_SECONDS,
)
from household_ledger.domain.constants import (
    ASSET_CLASSIFICATION,
    LIABILITY_CLASSIFICATION,
)
from household_ledger.domain.models import (
    Account,
    AccountRow,
    AccountTotalsView,
    Family,
    NetWorthSummary,
)
from household_ledger.domain.services.finance import compute_net_worth_summary
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.utils import utc_now


class AccountTotals:
    """Visible accounts with balances converted to the family currency."""

    def __init__(
        self,
        family: Family,
        repository: LedgerRepositoryPort,
        resolver: ExchangeRateResolver,
        sync_status_monitor: SyncStatusPort,
        cache: CacheStorePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        cache_bucket_seconds: int = DEFAULT_CACHE_BUCKET_SECONDS,
    ) -> None:
        self._family = family
        self._repository = repository
        self._resolver = resolver
        self._sync_status_monitor = sync_status_monitor
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._cache_bucket_seconds = cache_bucket_seconds
        self._rows: list[AccountRow] | None = None

    def asset_accounts(self) -> list[AccountRow]:
        return [
            row
            for row in self._account_rows()
            if row.classification == ASSET_CLASSIFICATION
        ]

    def liability_accounts(self) -> list[AccountRow]:
        return [
            row
            for row in self._account_rows()
            if row.classification == LIABILITY_CLASSIFICATION
        ]

    def view(self) -> AccountTotalsView:
        return AccountTotalsView(
            currency=self._family.currency,
            asset_accounts=self.asset_accounts(),
            liability_accounts=self.liability_accounts(),
        )

    def net_worth_summary(self) -> NetWorthSummary:
        """Return asset, liability and net worth totals for the family."""
        return compute_net_worth_summary(
            self._account_rows(),
            target_currency=self._family.currency,
            logger=self._logger,
        )

    def _account_rows(self) -> list[AccountRow]:
        if self._rows is None:
            self._rows = [
                self._build_row(account) for account in self._visible_accounts()
            ]
        return self._rows

    def _visible_accounts(self) -> list[Account]:
        return self._cache.fetch(
            self._cache_key(),
            lambda: self._repository.list_accounts(
                self._family.id,
                visible_only=True,
            ),
        )

    def _build_row(self, account: Account) -> AccountRow:
        return AccountRow(
            account_id=account.id,
            name=account.name,
            accountable_type=account.accountable_type,
            classification=account.classification,
            currency=account.currency,
            balance=account.balance_money,
            converted_balance=self._resolver.convert_balance(
                account,
                self._family.currency,
                self._clock().date(),
            ),
            is_syncing=self._sync_status_monitor.account_syncing(account.id),
        )

    def _cache_key(self) -> str:
        return build_family_cache_key(
            self._repository,
            self._family.id,
            "balance_sheet_account_rows",
            now=self._clock(),
            bucket_seconds=self._cache_bucket_seconds,
        )


class GetAccountTotalsUseCase:
    """Return a family's accounts grouped into assets and liabilities."""

    def __init__(
        self,
        repository: LedgerRepositoryPort,
        rate_provider: ExchangeRateProviderPort,
        sync_status_monitor: SyncStatusPort,
        cache: CacheStorePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        cache_bucket_seconds: int = DEFAULT_CACHE_BUCKET_SECONDS,
    ) -> None:
        self._repository = repository
        self._rate_provider = rate_provider
        self._sync_status_monitor = sync_status_monitor
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._cache_bucket_seconds = cache_bucket_seconds

    def build(self, family_id: str) -> AccountTotals:
        """Return the AccountTotals view for a family.

        Raises:
            NotFoundError: If the family does not exist.
        """
        family = self._repository.get_family(family_id)
        resolver = ExchangeRateResolver(
            self._repository,
            self._rate_provider,
            logger=self._logger,
        )
        return AccountTotals(
            family,
            self._repository,
            resolver,
            self._sync_status_monitor,
            self._cache,
            logger=self._logger,
            clock=self._clock,
            cache_bucket_seconds=self._cache_bucket_seconds,
        )

    def execute(self, family_id: str) -> AccountTotalsView:
        totals = self.build(family_id)
        view = totals.view()
        self._logger.info(
            f"Account totals for family {family_id}: "
            f"{len(view.asset_accounts)} assets, "
            f"{len(view.liability_accounts)} liabilities"
        )
        return view


__all__ = ["AccountTotals", "GetAccountTotalsUseCase"]
