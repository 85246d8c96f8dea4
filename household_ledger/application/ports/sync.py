"""Ports for account resync signalling."""

from datetime import date
from typing import Protocol


class SyncQueuePort(Protocol):
    """Port enqueuing balance recomputation for an account.

    The contract is "message enqueued": callers never wait for the resync
    to complete.
    """

    def enqueue_resync(
        self,
        account_id: str,
        window_start_date: date | None,
    ) -> None:
        """Request a resync starting at ``window_start_date``.

        ``None`` means the whole history must be recomputed.
        """


class SyncStatusPort(Protocol):
    """Port reporting whether an account has a resync in flight."""

    def account_syncing(self, account_id: str) -> bool:
        """Return True while a resync for the account is pending."""


__all__ = ["SyncQueuePort", "SyncStatusPort"]
