"""CLI adapter to create the ledger schema and check the connection."""

from household_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.infrastructure.schema import create_schema


def main() -> None:
    """Create missing ledger tables in the configured database."""
    logger = get_app_logger()
    adapter = SqlAlchemyDatabaseEngineAdapter()
    engine = adapter.get_ledger_engine()
    logger.info(f"Ledger DB: {engine.url}")

    with engine.connect() as conn:
        conn.exec_driver_sql("SELECT 1")

    count = create_schema(adapter, logger=logger)
    print(f"Ledger schema ready ({count} statements applied).")


if __name__ == "__main__":  # pragma: no cover
    main()
