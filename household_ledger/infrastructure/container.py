"""Composition root for wiring infrastructure adapters."""

from household_ledger.application.ports.cache import CacheStorePort
from household_ledger.application.ports.database import DatabaseEnginePort
from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.application.ports.sync import (
    SyncQueuePort,
    SyncStatusPort,
)
from household_ledger.application.use_cases.get_account_totals import (
    GetAccountTotalsUseCase,
)
from household_ledger.application.use_cases.get_net_worth_series import (
    GetNetWorthSeriesUseCase,
)
from household_ledger.application.use_cases.manage_valuations import (
    CreateValuationUseCase,
    DeleteEntryUseCase,
    UpdateValuationEntryUseCase,
)
from household_ledger.infrastructure.cache import MemoryCacheStore
from household_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from household_ledger.infrastructure.exchange_rate_repository import (
    SqlAlchemyExchangeRateProvider,
    StaticExchangeRateProvider,
)
from household_ledger.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.infrastructure.settings import LedgerSettings
from household_ledger.infrastructure.sync_queue import (
    SqlAlchemySyncQueue,
    SqlAlchemySyncStatusMonitor,
)


_cache_store: MemoryCacheStore | None = None


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerRepositoryPort:
    """Return the ledger repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerRepository(resolved_db, logger=get_app_logger())


def build_rate_provider(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> ExchangeRateProviderPort:
    """Return the configured automatic exchange rate provider."""
    settings = settings or LedgerSettings.from_env()
    if settings.rate_source == "static":
        return StaticExchangeRateProvider(settings.static_rates)
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyExchangeRateProvider(resolved_db, logger=get_app_logger())


def build_sync_queue(
    db_port: DatabaseEnginePort | None = None,
) -> SyncQueuePort:
    """Return the resync request queue."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemySyncQueue(resolved_db, logger=get_app_logger())


def build_sync_status_monitor(
    db_port: DatabaseEnginePort | None = None,
) -> SyncStatusPort:
    """Return the monitor reporting pending resyncs."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemySyncStatusMonitor(resolved_db)


def build_cache_store(settings: LedgerSettings | None = None) -> CacheStorePort:
    """Return the process-wide cache store.

    Values live for one cache bucket; keys roll over with the bucket.
    """
    global _cache_store
    if _cache_store is None:
        settings = settings or LedgerSettings.from_env()
        _cache_store = MemoryCacheStore(
            ttl_seconds=settings.cache_bucket_seconds,
        )
    return _cache_store


def build_create_valuation_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> CreateValuationUseCase:
    resolved_db = db_port or build_database_adapter()
    return CreateValuationUseCase(
        build_ledger_repository(resolved_db),
        build_rate_provider(resolved_db),
        build_sync_queue(resolved_db),
        logger=get_app_logger(),
    )


def build_update_valuation_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> UpdateValuationEntryUseCase:
    resolved_db = db_port or build_database_adapter()
    return UpdateValuationEntryUseCase(
        build_ledger_repository(resolved_db),
        build_rate_provider(resolved_db),
        build_sync_queue(resolved_db),
        logger=get_app_logger(),
    )


def build_delete_entry_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> DeleteEntryUseCase:
    resolved_db = db_port or build_database_adapter()
    return DeleteEntryUseCase(
        build_ledger_repository(resolved_db),
        build_sync_queue(resolved_db),
        logger=get_app_logger(),
    )


def build_net_worth_series_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> GetNetWorthSeriesUseCase:
    resolved_db = db_port or build_database_adapter()
    settings = LedgerSettings.from_env()
    return GetNetWorthSeriesUseCase(
        build_ledger_repository(resolved_db),
        build_rate_provider(resolved_db, settings=settings),
        build_cache_store(settings),
        logger=get_app_logger(),
        cache_bucket_seconds=settings.cache_bucket_seconds,
    )


def build_account_totals_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> GetAccountTotalsUseCase:
    resolved_db = db_port or build_database_adapter()
    settings = LedgerSettings.from_env()
    return GetAccountTotalsUseCase(
        build_ledger_repository(resolved_db),
        build_rate_provider(resolved_db, settings=settings),
        build_sync_status_monitor(resolved_db),
        build_cache_store(settings),
        logger=get_app_logger(),
        cache_bucket_seconds=settings.cache_bucket_seconds,
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_repository",
    "build_rate_provider",
    "build_sync_queue",
    "build_sync_status_monitor",
    "build_cache_store",
    "build_create_valuation_use_case",
    "build_update_valuation_use_case",
    "build_delete_entry_use_case",
    "build_net_worth_series_use_case",
    "build_account_totals_use_case",
]
