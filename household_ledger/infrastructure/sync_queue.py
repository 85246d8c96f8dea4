"""Resync request queue stored in the ``sync_requests`` table."""

from collections.abc import Callable
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import Date, DateTime, bindparam, text

from household_ledger.application.ports.database import DatabaseEnginePort
from household_ledger.application.ports.sync import (
    SyncQueuePort,
    SyncStatusPort,
)
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.utils import utc_now


PENDING_STATUS = "pending"

INSERT_SYNC_REQUEST_SQL = text(
    """
    INSERT INTO sync_requests (
        id,
        account_id,
        window_start_date,
        status,
        requested_at
    )
    VALUES (
        :id,
        :account_id,
        :window_start_date,
        :status,
        :requested_at
    )
    """
).bindparams(
    bindparam("window_start_date", type_=Date),
    bindparam("requested_at", type_=DateTime),
)

SELECT_PENDING_COUNT_SQL = text(
    """
    SELECT COUNT(*) AS pending
    FROM sync_requests
    WHERE account_id = :account_id AND status = :status
    """
)

SELECT_PENDING_REQUESTS_SQL = text(
    """
    SELECT id, account_id, window_start_date, requested_at
    FROM sync_requests
    WHERE status = :status
    ORDER BY requested_at, id
    """
).columns(window_start_date=Date, requested_at=DateTime)


class SqlAlchemySyncQueue(SyncQueuePort):
    """Enqueue resync requests for a worker processing them elsewhere."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now

    def enqueue_resync(
        self,
        account_id: str,
        window_start_date: date | None,
    ) -> None:
        requested_at = self._clock().astimezone(timezone.utc).replace(tzinfo=None)
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                INSERT_SYNC_REQUEST_SQL,
                {
                    "id": uuid4().hex,
                    "account_id": account_id,
                    "window_start_date": window_start_date,
                    "status": PENDING_STATUS,
                    "requested_at": requested_at,
                },
            )
        self._logger.debug(
            f"Queued sync request for account {account_id} "
            f"from {window_start_date or 'the beginning'}"
        )

    def pending_requests(self) -> list[dict]:
        """Return pending requests, oldest first."""
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_PENDING_REQUESTS_SQL,
                {"status": PENDING_STATUS},
            ).all()
        return [
            {
                "id": row.id,
                "account_id": row.account_id,
                "window_start_date": row.window_start_date,
                "requested_at": row.requested_at,
            }
            for row in rows
        ]


class SqlAlchemySyncStatusMonitor(SyncStatusPort):
    """Report accounts with pending resync requests."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    def account_syncing(self, account_id: str) -> bool:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            pending = conn.execute(
                SELECT_PENDING_COUNT_SQL,
                {"account_id": account_id, "status": PENDING_STATUS},
            ).scalar_one()
        return pending > 0


__all__ = [
    "PENDING_STATUS",
    "SqlAlchemySyncQueue",
    "SqlAlchemySyncStatusMonitor",
]
