"""Application ports package."""

from .cache import CacheStorePort
from .database import DatabaseEnginePort
from .exchange_rates import ExchangeRateProviderPort
from .ledger_repository import LedgerRepositoryPort
from .sync import SyncQueuePort, SyncStatusPort

__all__ = [
    "CacheStorePort",
    "DatabaseEnginePort",
    "ExchangeRateProviderPort",
    "LedgerRepositoryPort",
    "SyncQueuePort",
    "SyncStatusPort",
]
