"""Exchange rate providers backed by the rates table or static settings."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from household_ledger.application.ports.database import DatabaseEnginePort
from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.infrastructure.db import LedgerDecimal
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.decimal_utils import quantize_rate


RATE_TYPE = LedgerDecimal(19, 6)

# Rates are published on business days; the latest quote on or before the
# requested date applies.
SELECT_RATE_SQL = (
    text(
        """
        SELECT rate
        FROM exchange_rates
        WHERE from_currency = :from_currency
          AND to_currency = :to_currency
          AND date <= :as_of
        ORDER BY date DESC
        LIMIT 1
        """
    )
    .bindparams(bindparam("as_of", type_=Date))
    .columns(rate=RATE_TYPE)
)

UPSERT_RATE_DELETE_SQL = text(
    """
    DELETE FROM exchange_rates
    WHERE from_currency = :from_currency
      AND to_currency = :to_currency
      AND date = :date
    """
).bindparams(bindparam("date", type_=Date))

UPSERT_RATE_INSERT_SQL = text(
    """
    INSERT INTO exchange_rates (from_currency, to_currency, date, rate)
    VALUES (:from_currency, :to_currency, :date, :rate)
    """
).bindparams(
    bindparam("date", type_=Date),
    bindparam("rate", type_=RATE_TYPE),
)


class SqlAlchemyExchangeRateProvider(ExchangeRateProviderPort):
    """Provider reading market rates from the ``exchange_rates`` table."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the provider.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def find_rate(
        self,
        from_currency: str,
        to_currency: str,
        as_of: date,
    ) -> Decimal | None:
        """Return the latest known rate, or None when unavailable.

        Database errors are logged and reported as a missing rate so
        conversions can degrade to the identity fallback.
        """
        if from_currency == to_currency:
            return Decimal("1")
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_RATE_SQL,
                    {
                        "from_currency": from_currency,
                        "to_currency": to_currency,
                        "as_of": as_of,
                    },
                ).first()
        except SQLAlchemyError as exc:
            self._logger.warning(
                f"Exchange rate lookup failed for {from_currency}->{to_currency} "
                f"on {as_of}: {exc}"
            )
            return None
        if row is None:
            return None
        return quantize_rate(row.rate)

    def store_rate(
        self,
        from_currency: str,
        to_currency: str,
        on_date: date,
        rate: Decimal,
    ) -> None:
        """Insert or replace the rate quoted for a date."""
        params = {
            "from_currency": from_currency,
            "to_currency": to_currency,
            "date": on_date,
            "rate": quantize_rate(rate),
        }
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(UPSERT_RATE_DELETE_SQL, params)
            conn.execute(UPSERT_RATE_INSERT_SQL, params)
        self._logger.info(
            f"Stored exchange rate {from_currency}->{to_currency} "
            f"on {on_date}: {params['rate']}"
        )


class StaticExchangeRateProvider(ExchangeRateProviderPort):
    """Provider returning fixed rates regardless of the date.

    Inverse pairs are derived when only one direction is configured.
    """

    def __init__(self, rates: dict[tuple[str, str], Decimal] | None = None):
        self._rates = {
            pair: quantize_rate(rate) for pair, rate in (rates or {}).items()
        }

    def find_rate(
        self,
        from_currency: str,
        to_currency: str,
        as_of: date,
    ) -> Decimal | None:
        if from_currency == to_currency:
            return Decimal("1")
        rate = self._rates.get((from_currency, to_currency))
        if rate is not None:
            return rate
        inverse = self._rates.get((to_currency, from_currency))
        if inverse:
            return quantize_rate(Decimal("1") / inverse)
        return None


__all__ = [
    "SELECT_RATE_SQL",
    "SqlAlchemyExchangeRateProvider",
    "StaticExchangeRateProvider",
]
