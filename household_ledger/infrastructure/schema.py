"""DDL for the ledger tables."""

from household_ledger.application.ports.database import DatabaseEnginePort
from household_ledger.domain.constants import (
    ASSET_ACCOUNTABLE_TYPES,
    LIABILITY_ACCOUNTABLE_TYPES,
)
from household_ledger.infrastructure.logging.logger import get_app_logger


CREATE_FAMILIES_SQL = """
CREATE TABLE IF NOT EXISTS families (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    currency VARCHAR(3) NOT NULL DEFAULT 'USD'
)
"""

ACCOUNTABLE_TYPES_SQL = ", ".join(
    f"'{accountable_type}'"
    for accountable_type in ASSET_ACCOUNTABLE_TYPES + LIABILITY_ACCOUNTABLE_TYPES
)

CREATE_ACCOUNTS_SQL = f"""
CREATE TABLE IF NOT EXISTS accounts (
    id TEXT PRIMARY KEY,
    family_id TEXT NOT NULL REFERENCES families (id),
    name TEXT NOT NULL,
    currency VARCHAR(3) NOT NULL,
    balance {{amount_type}},
    accountable_type TEXT NOT NULL
        CHECK (accountable_type IN ({ACCOUNTABLE_TYPES_SQL})),
    status TEXT NOT NULL DEFAULT 'active'
)
"""

CREATE_ENTRIES_SQL = """
CREATE TABLE IF NOT EXISTS entries (
    id TEXT PRIMARY KEY,
    account_id TEXT NOT NULL REFERENCES accounts (id) ON DELETE CASCADE,
    date DATE NOT NULL,
    amount {amount_type} NOT NULL,
    currency VARCHAR(3) NOT NULL,
    exchange_rate {rate_type},
    name TEXT NOT NULL,
    notes TEXT,
    entryable_type TEXT NOT NULL,
    entryable_kind TEXT,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
)
"""

CREATE_ENTRIES_ACCOUNT_DATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS ix_entries_account_date
ON entries (account_id, date)
"""

CREATE_VALUATION_PER_DAY_INDEX_SQL = """
CREATE UNIQUE INDEX IF NOT EXISTS uq_entries_valuation_per_day
ON entries (account_id, date)
WHERE entryable_type = 'Valuation'
"""

CREATE_EXCHANGE_RATES_SQL = """
CREATE TABLE IF NOT EXISTS exchange_rates (
    from_currency VARCHAR(3) NOT NULL,
    to_currency VARCHAR(3) NOT NULL,
    date DATE NOT NULL,
    rate {rate_type} NOT NULL,
    PRIMARY KEY (from_currency, to_currency, date)
)
"""

CREATE_SYNC_REQUESTS_SQL = """
CREATE TABLE IF NOT EXISTS sync_requests (
    id TEXT PRIMARY KEY,
    account_id TEXT NOT NULL,
    window_start_date DATE,
    status TEXT NOT NULL DEFAULT 'pending',
    requested_at TIMESTAMP NOT NULL
)
"""

SCHEMA_STATEMENTS = [
    CREATE_FAMILIES_SQL,
    CREATE_ACCOUNTS_SQL,
    CREATE_ENTRIES_SQL,
    CREATE_ENTRIES_ACCOUNT_DATE_INDEX_SQL,
    CREATE_VALUATION_PER_DAY_INDEX_SQL,
    CREATE_EXCHANGE_RATES_SQL,
    CREATE_SYNC_REQUESTS_SQL,
]

# SQLite gives NUMERIC columns numeric affinity and keeps only 15
# significant digits, so decimals are stored as text there.
DECIMAL_COLUMN_TYPES = {
    "sqlite": {"amount_type": "TEXT", "rate_type": "TEXT"},
}
DEFAULT_DECIMAL_COLUMN_TYPES = {
    "amount_type": "NUMERIC(19, 4)",
    "rate_type": "NUMERIC(19, 6)",
}


def render_schema_statements(dialect_name: str) -> list[str]:
    """Return the DDL statements with decimal column types for a dialect."""
    column_types = DECIMAL_COLUMN_TYPES.get(
        dialect_name,
        DEFAULT_DECIMAL_COLUMN_TYPES,
    )
    return [statement.format(**column_types) for statement in SCHEMA_STATEMENTS]


def create_schema(db_port: DatabaseEnginePort, logger=None) -> int:
    """Create the ledger tables and indexes when missing.

    Args:
        db_port: Port providing access to the ledger engine.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        int: Number of DDL statements executed.
    """
    logger = logger or get_app_logger()
    engine = db_port.get_ledger_engine()
    statements = render_schema_statements(engine.dialect.name)
    with engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)
    logger.info(f"Ledger schema ensured ({len(statements)} statements)")
    return len(statements)


__all__ = [
    "CREATE_FAMILIES_SQL",
    "CREATE_ACCOUNTS_SQL",
    "CREATE_ENTRIES_SQL",
    "CREATE_ENTRIES_ACCOUNT_DATE_INDEX_SQL",
    "CREATE_VALUATION_PER_DAY_INDEX_SQL",
    "CREATE_EXCHANGE_RATES_SQL",
    "CREATE_SYNC_REQUESTS_SQL",
    "SCHEMA_STATEMENTS",
    "render_schema_statements",
    "create_schema",
]
