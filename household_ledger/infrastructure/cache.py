"""Process-local cache store for derived aggregates."""

import threading
import time
from collections.abc import Callable
from typing import Any

from household_ledger.application.ports.cache import CacheStorePort


class MemoryCacheStore(CacheStorePort):
    """Thread-safe get-or-compute cache with optional expiry.

    Values are computed outside the lock; when two callers race on the same
    key both compute and the last write wins. Expired values are dropped
    whenever a new value is stored.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._values: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def fetch(self, key: str, compute: Callable[[], Any]) -> Any:
        with self._lock:
            cached = self._values.get(key)
        if cached is not None and not self._expired(cached[0]):
            return cached[1]
        value = compute()
        with self._lock:
            self._evict_expired()
            self._values[key] = (self._clock(), value)
        return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def _evict_expired(self) -> None:
        if self._ttl_seconds is None:
            return
        expired = [
            key
            for key, (stored_at, _) in self._values.items()
            if self._expired(stored_at)
        ]
        for key in expired:
            del self._values[key]

    def _expired(self, stored_at: float) -> bool:
        if self._ttl_seconds is None:
            return False
        return self._clock() - stored_at >= self._ttl_seconds


__all__ = ["MemoryCacheStore"]
