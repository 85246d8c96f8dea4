"""Use case to build a family's net worth series."""

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from household_ledger.application.ports.cache import CacheStorePort
from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.application.use_cases.cache_keys import (
    build_family_cache_key,
)
from household_ledger.application.use_cases.exchange_rates import (
    ExchangeRateResolver,
)
from household_ledger.domain.models import (
    Account,
    BalancePoint,
    Entry,
    Family,
    Money,
    NetWorthSeries,
    Period,
)
from household_ledger.domain.services.balances import (
    balance_series,
    net_worth_contribution,
)
from household_ledger.domain.services.fx import convert_amount
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.utils import utc_now


DEFAULT_CACHE_BUCKET_SECONDS = 300


class NetWorthSeriesBuilder:
    """Build net worth points over a period in the family currency."""

    def __init__(
        self,
        family: Family,
        repository: LedgerRepositoryPort,
        resolver: ExchangeRateResolver,
        cache: CacheStorePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        cache_bucket_seconds: int = DEFAULT_CACHE_BUCKET_SECONDS,
    ) -> None:
        self._family = family
        self._repository = repository
        self._resolver = resolver
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._cache_bucket_seconds = cache_bucket_seconds

    def net_worth_series(self, period: Period | None = None) -> NetWorthSeries:
        """Return the cached net worth series for a period.

        Args:
            period: Date range; defaults to the last 30 days.

        Returns:
            NetWorthSeries: One point per sampled day.
        """
        period = period or Period.last_30_days(self._clock().date())
        return self._cache.fetch(
            self._cache_key(period),
            lambda: self._build_series(period),
        )

    def _build_series(self, period: Period) -> NetWorthSeries:
        currency = self._family.currency
        days = list(period.days())
        totals = {day: Decimal("0") for day in days}
        accounts = self._repository.list_accounts(
            self._family.id,
            visible_only=True,
        )
        for account in accounts:
            entries = self._repository.list_entries(
                account.id,
                end_date=period.end_date,
            )
            if not entries:
                continue
            amount_of = self._entry_converter(account, period.end_date)
            for day, balance in balance_series(entries, days, amount_of):
                totals[day] += net_worth_contribution(
                    account.classification,
                    balance,
                )

        points = [
            BalancePoint(
                date=day,
                balance=Money(amount=totals[day], currency=currency).round(),
            )
            for day in days
        ]
        self._logger.info(
            f"Built net worth series for family {self._family.id}: "
            f"{len(points)} points over {len(accounts)} accounts"
        )
        return NetWorthSeries(
            currency=currency,
            period=period,
            points=points,
            favorable_direction="up",
        )

    def _entry_converter(
        self,
        account: Account,
        as_of: date,
    ) -> Callable[[Entry], Decimal]:
        target = self._family.currency
        account_rate = self._resolver.resolve(account, target, as_of)

        def amount_of(entry: Entry) -> Decimal:
            if entry.currency == target:
                return entry.amount
            if entry.exchange_rate is not None:
                return convert_amount(entry.amount, entry.exchange_rate)
            if entry.currency == account.currency:
                return convert_amount(entry.amount, account_rate)
            rate = self._resolver.lookup_rate(entry.currency, target, as_of)
            return convert_amount(entry.amount, rate)

        return amount_of

    def _cache_key(self, period: Period) -> str:
        return build_family_cache_key(
            self._repository,
            self._family.id,
            f"balance_sheet_net_worth_series:{period.start_date}:{period.end_date}",
            now=self._clock(),
            bucket_seconds=self._cache_bucket_seconds,
        )


class GetNetWorthSeriesUseCase:
    """Compute the net worth series of a family."""

    def __init__(
        self,
        repository: LedgerRepositoryPort,
        rate_provider: ExchangeRateProviderPort,
        cache: CacheStorePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        cache_bucket_seconds: int = DEFAULT_CACHE_BUCKET_SECONDS,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Port providing ledger data.
            rate_provider: Port providing automatic exchange rates.
            cache: Cache store for derived series.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
            cache_bucket_seconds: Maximum staleness of cached series.
        """
        self._repository = repository
        self._rate_provider = rate_provider
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._cache_bucket_seconds = cache_bucket_seconds

    def execute(
        self,
        family_id: str,
        period: Period | None = None,
    ) -> NetWorthSeries:
        """Return the family's net worth series.

        Raises:
            NotFoundError: If the family does not exist.
        """
        family = self._repository.get_family(family_id)
        resolver = ExchangeRateResolver(
            self._repository,
            self._rate_provider,
            logger=self._logger,
        )
        builder = NetWorthSeriesBuilder(
            family,
            self._repository,
            resolver,
            self._cache,
            logger=self._logger,
            clock=self._clock,
            cache_bucket_seconds=self._cache_bucket_seconds,
        )
        return builder.net_worth_series(period)


__all__ = [
    "DEFAULT_CACHE_BUCKET_SECONDS",
    "NetWorthSeriesBuilder",
    "GetNetWorthSeriesUseCase",
]
