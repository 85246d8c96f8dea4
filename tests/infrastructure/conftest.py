"""SQLite fixtures for repository tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text

from household_ledger.infrastructure.db import (
    SqlAlchemyDatabaseEngineAdapter,
    _create_engine,
)
from household_ledger.infrastructure.schema import create_schema


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

SEED_SQL = [
    "INSERT INTO families (id, name, currency) VALUES ('fam-1', 'Doe', 'USD')",
    "INSERT INTO families (id, name, currency) VALUES ('fam-2', 'Roe', 'EUR')",
    """
    INSERT INTO accounts (id, family_id, name, currency, balance,
                          accountable_type, status)
    VALUES ('acc-checking', 'fam-1', 'Checking', 'USD', 1000.5,
            'Depository', 'active')
    """,
    """
    INSERT INTO accounts (id, family_id, name, currency, balance,
                          accountable_type, status)
    VALUES ('acc-card', 'fam-1', 'Card', 'USD', 250,
            'CreditCard', 'draft')
    """,
    """
    INSERT INTO accounts (id, family_id, name, currency, balance,
                          accountable_type, status)
    VALUES ('acc-old', 'fam-1', 'Old savings', 'EUR', NULL,
            'Depository', 'disabled')
    """,
    """
    INSERT INTO accounts (id, family_id, name, currency, balance,
                          accountable_type, status)
    VALUES ('acc-other', 'fam-2', 'Girokonto', 'EUR', 10,
            'Depository', 'active')
    """,
]


@pytest.fixture
def db_port(tmp_path):
    engine = _create_engine(f"sqlite:///{tmp_path}/ledger.db")
    port = SqlAlchemyDatabaseEngineAdapter(engine)
    create_schema(port, logger=MagicMock())
    with engine.begin() as conn:
        for statement in SEED_SQL:
            conn.execute(text(statement))
    yield port
    engine.dispose()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def now() -> datetime:
    return NOW
