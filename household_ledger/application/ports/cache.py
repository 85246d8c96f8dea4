"""Port for derived-data caching."""

from collections.abc import Callable
from typing import Any, Protocol


class CacheStorePort(Protocol):
    """Get-or-compute cache keyed by string.

    Cached values are derived data and may be dropped at any time.
    """

    def fetch(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or store ``compute()``."""

    def delete(self, key: str) -> None:
        """Drop ``key`` if present."""


__all__ = ["CacheStorePort"]
