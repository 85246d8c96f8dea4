"""Cache key helpers for family-wide aggregate views."""

from datetime import datetime

from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)


CACHE_KEY_VERSION = "v2"


def _epoch(value: datetime | None) -> int:
    return int(value.timestamp()) if value else 0


def time_bucket(now: datetime, bucket_seconds: int) -> int:
    """Floor ``now`` to a staleness bucket expressed in epoch seconds."""
    seconds = int(now.timestamp())
    if bucket_seconds <= 1:
        return seconds
    return seconds - seconds % bucket_seconds


def manual_rate_fingerprint(
    repository: LedgerRepositoryPort,
    family_id: str,
) -> int:
    """Epoch seconds of the newest manual-rate entry update, 0 when none."""
    return _epoch(repository.latest_manual_rate_timestamp(family_id))


def build_family_cache_key(
    repository: LedgerRepositoryPort,
    family_id: str,
    key: str,
    now: datetime,
    bucket_seconds: int,
) -> str:
    """Build a cache key scoped to a family.

    The key changes whenever a manual exchange rate is updated, whenever any
    family entry changes, and when the staleness bucket rolls over.

    Args:
        repository: Port providing the freshness timestamps.
        family_id: Family scope of the cached value.
        key: View-specific key fragment.
        now: Current time.
        bucket_seconds: Length of the staleness bucket.

    Returns:
        str: Deterministic cache key.
    """
    parts = [
        f"family:{family_id}",
        key,
        f"manual_exchange_rates_{manual_rate_fingerprint(repository, family_id)}",
        f"entries_{_epoch(repository.latest_entry_update(family_id))}",
        f"{CACHE_KEY_VERSION}_bucket_{time_bucket(now, bucket_seconds)}",
    ]
    return ":".join(parts)


__all__ = [
    "CACHE_KEY_VERSION",
    "time_bucket",
    "manual_rate_fingerprint",
    "build_family_cache_key",
]
