"""SQLAlchemy-backed repository for families, accounts and entries."""

from collections.abc import Callable
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, String, bindparam, text
from sqlalchemy.exc import IntegrityError

from household_ledger.application.ports.database import DatabaseEnginePort
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.domain.constants import (
    ASSET_ACCOUNTABLE_TYPES,
    LIABILITY_ACCOUNTABLE_TYPES,
    VALUATION_ENTRYABLE,
    VISIBLE_ACCOUNT_STATUSES,
)
from household_ledger.domain.exceptions import (
    DuplicateValuationError,
    NotFoundError,
)
from household_ledger.domain.models import (
    Account,
    Entry,
    Family,
    build_entryable,
)
from household_ledger.infrastructure.db import LedgerDecimal
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.decimal_utils import coerce_decimal, quantize_rate
from household_ledger.utils.utils import utc_now


AMOUNT_TYPE = LedgerDecimal(19, 4)
RATE_TYPE = LedgerDecimal(19, 6)

KNOWN_ACCOUNTABLE_TYPES = ASSET_ACCOUNTABLE_TYPES + LIABILITY_ACCOUNTABLE_TYPES

ENTRY_COLUMNS = """
    e.id, e.account_id, e.date, e.amount, e.currency, e.exchange_rate,
    e.name, e.notes, e.entryable_type, e.entryable_kind,
    e.created_at, e.updated_at
"""

ENTRY_RESULT_TYPES = {
    "date": Date,
    "amount": AMOUNT_TYPE,
    "exchange_rate": RATE_TYPE,
    "created_at": DateTime,
    "updated_at": DateTime,
}

ENTRY_BIND_TYPES = [
    bindparam("date", type_=Date),
    bindparam("amount", type_=AMOUNT_TYPE),
    bindparam("exchange_rate", type_=RATE_TYPE),
    bindparam("created_at", type_=DateTime),
    bindparam("updated_at", type_=DateTime),
]

SELECT_FAMILY_SQL = text(
    """
    SELECT id, name, currency
    FROM families
    WHERE id = :family_id
    """
)

SELECT_ACCOUNT_SQL = text(
    """
    SELECT id, family_id, name, currency, balance, accountable_type, status
    FROM accounts
    WHERE id = :account_id
    """
).columns(balance=AMOUNT_TYPE)

SELECT_FAMILY_ACCOUNTS_SQL = text(
    """
    SELECT id, family_id, name, currency, balance, accountable_type, status
    FROM accounts
    WHERE family_id = :family_id
    ORDER BY name, id
    """
).columns(balance=AMOUNT_TYPE)

SELECT_VISIBLE_ACCOUNTS_SQL = (
    text(
        """
        SELECT id, family_id, name, currency, balance, accountable_type, status
        FROM accounts
        WHERE family_id = :family_id AND status IN :statuses
        ORDER BY name, id
        """
    )
    .bindparams(bindparam("statuses", expanding=True))
    .columns(balance=AMOUNT_TYPE)
)

SELECT_ENTRY_SQL = text(
    f"""
    SELECT {ENTRY_COLUMNS}
    FROM entries e
    WHERE e.id = :entry_id
    """
).columns(**ENTRY_RESULT_TYPES)

SELECT_ACCOUNT_ENTRIES_SQL = text(
    f"""
    SELECT {ENTRY_COLUMNS}
    FROM entries e
    WHERE e.account_id = :account_id
    ORDER BY e.date, e.created_at, e.id
    """
).columns(**ENTRY_RESULT_TYPES)

SELECT_ACCOUNT_ENTRIES_UNTIL_SQL = (
    text(
        f"""
        SELECT {ENTRY_COLUMNS}
        FROM entries e
        WHERE e.account_id = :account_id AND e.date <= :end_date
        ORDER BY e.date, e.created_at, e.id
        """
    )
    .bindparams(bindparam("end_date", type_=Date))
    .columns(**ENTRY_RESULT_TYPES)
)

SELECT_VALUATION_ON_DATE_SQL = (
    text(
        f"""
        SELECT {ENTRY_COLUMNS}
        FROM entries e
        WHERE e.account_id = :account_id
          AND e.date = :on_date
          AND e.entryable_type = :valuation_type
        """
    )
    .bindparams(bindparam("on_date", type_=Date))
    .columns(**ENTRY_RESULT_TYPES)
)

SELECT_LATEST_MANUAL_RATE_ENTRY_SQL = text(
    f"""
    SELECT {ENTRY_COLUMNS}
    FROM entries e
    WHERE e.account_id = :account_id
      AND e.exchange_rate IS NOT NULL
      AND e.currency <> :target_currency
    ORDER BY e.date DESC, e.updated_at DESC
    LIMIT 1
    """
).columns(**ENTRY_RESULT_TYPES)

SELECT_LATEST_MANUAL_RATE_TIMESTAMP_SQL = text(
    """
    SELECT MAX(e.updated_at) AS latest
    FROM entries e
    JOIN accounts a ON a.id = e.account_id
    WHERE a.family_id = :family_id AND e.exchange_rate IS NOT NULL
    """
).columns(latest=DateTime)

SELECT_LATEST_ENTRY_UPDATE_SQL = text(
    """
    SELECT MAX(e.updated_at) AS latest
    FROM entries e
    JOIN accounts a ON a.id = e.account_id
    WHERE a.family_id = :family_id
    """
).columns(latest=DateTime)

# A manual rate is written once; later updates keep the stored value.
UPDATE_VALUATION_SQL = text(
    """
    UPDATE entries
    SET amount = :amount,
        date = :date,
        currency = :currency,
        exchange_rate = COALESCE(exchange_rate, :exchange_rate),
        entryable_kind = :entryable_kind,
        updated_at = :updated_at
    WHERE id = :id AND entryable_type = :entryable_type
    """
).bindparams(
    bindparam("amount", type_=AMOUNT_TYPE),
    bindparam("date", type_=Date),
    bindparam("exchange_rate", type_=RATE_TYPE),
    bindparam("updated_at", type_=DateTime),
)

INSERT_ENTRY_SQL = text(
    """
    INSERT INTO entries (
        id,
        account_id,
        date,
        amount,
        currency,
        exchange_rate,
        name,
        notes,
        entryable_type,
        entryable_kind,
        created_at,
        updated_at
    )
    VALUES (
        :id,
        :account_id,
        :date,
        :amount,
        :currency,
        :exchange_rate,
        :name,
        :notes,
        :entryable_type,
        :entryable_kind,
        :created_at,
        :updated_at
    )
    """
).bindparams(*ENTRY_BIND_TYPES)

UPDATE_NOTES_SQL = text(
    """
    UPDATE entries
    SET notes = :notes, updated_at = :updated_at
    WHERE id = :entry_id
    """
).bindparams(
    bindparam("notes", type_=String),
    bindparam("updated_at", type_=DateTime),
)

DELETE_ENTRY_SQL = text("DELETE FROM entries WHERE id = :entry_id")


def _to_db_timestamp(value: datetime | None) -> datetime | None:
    """Store timestamps as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_timestamp(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _row_to_family(row) -> Family:
    return Family(id=row.id, name=row.name, currency=row.currency)


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        family_id=row.family_id,
        name=row.name,
        currency=row.currency,
        balance=None if row.balance is None else coerce_decimal(row.balance),
        accountable_type=row.accountable_type,
        status=row.status,
    )


def _row_to_entry(row) -> Entry:
    return Entry(
        id=row.id,
        account_id=row.account_id,
        date=row.date,
        amount=coerce_decimal(row.amount),
        currency=row.currency,
        name=row.name,
        entryable=build_entryable(row.entryable_type, row.entryable_kind),
        exchange_rate=quantize_rate(row.exchange_rate),
        notes=row.notes,
        created_at=_from_db_timestamp(row.created_at),
        updated_at=_from_db_timestamp(row.updated_at),
    )


def _entry_params(entry: Entry) -> dict:
    return {
        "id": entry.id,
        "account_id": entry.account_id,
        "date": entry.date,
        "amount": entry.amount,
        "currency": entry.currency,
        "exchange_rate": quantize_rate(entry.exchange_rate),
        "name": entry.name,
        "notes": entry.notes,
        "entryable_type": entry.entryable_type,
        "entryable_kind": entry.entryable.kind,
        "created_at": _to_db_timestamp(entry.created_at),
        "updated_at": _to_db_timestamp(entry.updated_at),
    }


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Ledger repository backed by SQLAlchemy Core statements."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        clock: Callable[[], datetime] | None = None,
        logger=None,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            clock: Optional callable returning the current UTC time.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._clock = clock or utc_now
        self._logger = logger or get_app_logger()

    def get_family(self, family_id: str) -> Family:
        row = self._fetch_one(SELECT_FAMILY_SQL, family_id=family_id)
        if row is None:
            raise NotFoundError("Family", family_id)
        return _row_to_family(row)

    def get_account(self, account_id: str) -> Account:
        row = self._fetch_one(SELECT_ACCOUNT_SQL, account_id=account_id)
        if row is None:
            raise NotFoundError("Account", account_id)
        return _row_to_account(row)

    def get_entry(self, entry_id: str) -> Entry:
        row = self._fetch_one(SELECT_ENTRY_SQL, entry_id=entry_id)
        if row is None:
            raise NotFoundError("Entry", entry_id)
        return _row_to_entry(row)

    def list_accounts(
        self,
        family_id: str,
        visible_only: bool = True,
    ) -> list[Account]:
        """Return the family's accounts ordered by name.

        Rows with an accountable type outside the known classifications are
        skipped with a warning.

        Args:
            family_id: Owning family identifier.
            visible_only: Skip accounts whose status hides them.

        Returns:
            list[Account]: Accounts of the family.
        """
        if visible_only:
            rows = self._fetch_all(
                SELECT_VISIBLE_ACCOUNTS_SQL,
                family_id=family_id,
                statuses=list(VISIBLE_ACCOUNT_STATUSES),
            )
        else:
            rows = self._fetch_all(SELECT_FAMILY_ACCOUNTS_SQL, family_id=family_id)
        accounts = []
        for row in rows:
            if row.accountable_type not in KNOWN_ACCOUNTABLE_TYPES:
                self._logger.warning(
                    f"Skipping account {row.id} with unknown accountable type "
                    f"{row.accountable_type!r}"
                )
                continue
            accounts.append(_row_to_account(row))
        return accounts

    def list_entries(
        self,
        account_id: str,
        end_date: date | None = None,
    ) -> list[Entry]:
        if end_date is None:
            rows = self._fetch_all(SELECT_ACCOUNT_ENTRIES_SQL, account_id=account_id)
        else:
            rows = self._fetch_all(
                SELECT_ACCOUNT_ENTRIES_UNTIL_SQL,
                account_id=account_id,
                end_date=end_date,
            )
        return [_row_to_entry(row) for row in rows]

    def find_valuation(self, account_id: str, on_date: date) -> Entry | None:
        row = self._fetch_one(
            SELECT_VALUATION_ON_DATE_SQL,
            account_id=account_id,
            on_date=on_date,
            valuation_type=VALUATION_ENTRYABLE,
        )
        return _row_to_entry(row) if row is not None else None

    def latest_manual_rate_entry(
        self,
        account_id: str,
        target_currency: str,
    ) -> Entry | None:
        row = self._fetch_one(
            SELECT_LATEST_MANUAL_RATE_ENTRY_SQL,
            account_id=account_id,
            target_currency=target_currency,
        )
        return _row_to_entry(row) if row is not None else None

    def latest_manual_rate_timestamp(self, family_id: str) -> datetime | None:
        row = self._fetch_one(
            SELECT_LATEST_MANUAL_RATE_TIMESTAMP_SQL,
            family_id=family_id,
        )
        return _from_db_timestamp(row.latest) if row is not None else None

    def latest_entry_update(self, family_id: str) -> datetime | None:
        row = self._fetch_one(SELECT_LATEST_ENTRY_UPDATE_SQL, family_id=family_id)
        return _from_db_timestamp(row.latest) if row is not None else None

    def save_valuation(self, entry: Entry) -> Entry:
        """Insert or update a valuation entry in a single transaction.

        An existing manual exchange rate is never overwritten.

        Args:
            entry: Valuation entry to persist.

        Returns:
            Entry: The stored entry as read back from the database.

        Raises:
            DuplicateValuationError: If another valuation already exists for
                the account and date.
            ValueError: If the entry is not a valuation.
        """
        if not entry.is_valuation:
            raise ValueError(f"Entry {entry.id} is not a valuation")
        params = _entry_params(self._stamped(entry))
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                updated = conn.execute(
                    UPDATE_VALUATION_SQL,
                    {
                        "id": params["id"],
                        "amount": params["amount"],
                        "date": params["date"],
                        "currency": params["currency"],
                        "exchange_rate": params["exchange_rate"],
                        "entryable_kind": params["entryable_kind"],
                        "entryable_type": params["entryable_type"],
                        "updated_at": params["updated_at"],
                    },
                )
                if updated.rowcount == 0:
                    conn.execute(INSERT_ENTRY_SQL, params)
        except IntegrityError as exc:
            conflict = self.find_valuation(entry.account_id, entry.date)
            if conflict is not None and conflict.id != entry.id:
                raise DuplicateValuationError(entry.account_id, entry.date) from exc
            raise
        return self.get_entry(entry.id)

    def insert_transaction(self, entry: Entry) -> Entry:
        """Insert a transaction entry and return it as stored."""
        if entry.is_valuation:
            raise ValueError(f"Entry {entry.id} is a valuation")
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(INSERT_ENTRY_SQL, _entry_params(self._stamped(entry)))
        return self.get_entry(entry.id)

    def update_notes(self, entry_id: str, notes: str | None) -> Entry:
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            updated = conn.execute(
                UPDATE_NOTES_SQL,
                {
                    "entry_id": entry_id,
                    "notes": notes,
                    "updated_at": _to_db_timestamp(self._clock()),
                },
            )
            missing = updated.rowcount == 0
        if missing:
            raise NotFoundError("Entry", entry_id)
        return self.get_entry(entry_id)

    def delete_entry(self, entry_id: str) -> Entry:
        entry = self.get_entry(entry_id)
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(DELETE_ENTRY_SQL, {"entry_id": entry_id})
        return entry

    def _stamped(self, entry: Entry) -> Entry:
        now = self._clock()
        return entry.with_changes(
            created_at=entry.created_at or now,
            updated_at=entry.updated_at or now,
        )

    def _fetch_one(self, statement, **params):
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            return conn.execute(statement, params).first()

    def _fetch_all(self, statement, **params):
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            return conn.execute(statement, params).all()


__all__ = [
    "SqlAlchemyLedgerRepository",
    "UPDATE_VALUATION_SQL",
    "INSERT_ENTRY_SQL",
]
