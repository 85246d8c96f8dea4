"""Tests for the resync request queue."""

from datetime import date, datetime
from unittest.mock import MagicMock

from household_ledger.infrastructure.sync_queue import (
    SqlAlchemySyncQueue,
    SqlAlchemySyncStatusMonitor,
)


def test_enqueue_records_pending_request(db_port, clock) -> None:
    queue = SqlAlchemySyncQueue(db_port, logger=MagicMock(), clock=clock)

    queue.enqueue_resync("acc-checking", date(2026, 10, 1))
    queue.enqueue_resync("acc-card", None)

    pending = queue.pending_requests()
    assert sorted(request["account_id"] for request in pending) == [
        "acc-card",
        "acc-checking",
    ]
    by_account = {request["account_id"]: request for request in pending}
    assert by_account["acc-checking"]["window_start_date"] == date(2026, 10, 1)
    assert by_account["acc-card"]["window_start_date"] is None
    assert by_account["acc-card"]["requested_at"] == datetime(2026, 10, 19, 12, 0)


def test_status_monitor_reports_pending_accounts(db_port, clock) -> None:
    queue = SqlAlchemySyncQueue(db_port, logger=MagicMock(), clock=clock)
    monitor = SqlAlchemySyncStatusMonitor(db_port)

    assert not monitor.account_syncing("acc-checking")

    queue.enqueue_resync("acc-checking", date(2026, 10, 1))

    assert monitor.account_syncing("acc-checking")
    assert not monitor.account_syncing("acc-card")
