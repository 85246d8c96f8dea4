"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from decimal import Decimal
import os

import dotenv

from household_ledger.domain.services.normalization import normalize_currency
from household_ledger.infrastructure.logging.logger import get_app_logger
from household_ledger.utils.decimal_utils import parse_decimal


RATE_SOURCES = ("database", "static")


@dataclass(frozen=True)
class LedgerSettings:
    """Runtime settings for the ledger services.

    Attributes:
        cache_bucket_seconds: Maximum staleness of cached aggregates.
        rate_source: Automatic exchange rate backend (database or static).
        static_rates: Fixed rates used by the static backend.
    """

    cache_bucket_seconds: int = 300
    rate_source: str = "database"
    static_rates: dict[tuple[str, str], Decimal] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        bucket = cls._parse_bucket(
            os.getenv("LEDGER_CACHE_BUCKET_SECONDS", "300"),
            logger=logger,
        )
        rate_source = os.getenv("LEDGER_RATE_SOURCE", "database").strip().lower()
        if rate_source not in RATE_SOURCES:
            logger.warning(
                f"Unknown LEDGER_RATE_SOURCE {rate_source!r}; using database"
            )
            rate_source = "database"
        static_rates = cls._parse_static_rates(
            os.getenv("LEDGER_STATIC_RATES", ""),
            logger=logger,
        )
        return cls(
            cache_bucket_seconds=bucket,
            rate_source=rate_source,
            static_rates=static_rates,
        )

    @staticmethod
    def _parse_bucket(raw_value: str, logger) -> int:
        try:
            bucket = int(raw_value)
        except ValueError:
            logger.warning(
                f"Invalid LEDGER_CACHE_BUCKET_SECONDS {raw_value!r}; using 300"
            )
            return 300
        return max(bucket, 1)

    @staticmethod
    def _parse_static_rates(
        raw_value: str,
        logger,
    ) -> dict[tuple[str, str], Decimal]:
        """Parse ``EUR:USD=1.1,GBP:USD=1.27`` into a rates mapping.

        Args:
            raw_value: Comma separated ``FROM:TO=RATE`` items.
            logger: Logger used for warnings.

        Returns:
            dict[tuple[str, str], Decimal]: Rates keyed by currency pair.
        """
        rates: dict[tuple[str, str], Decimal] = {}
        for item in raw_value.split(","):
            item = item.strip()
            if not item:
                continue
            pair, _, raw_rate = item.partition("=")
            from_raw, _, to_raw = pair.partition(":")
            from_currency = normalize_currency(from_raw)
            to_currency = normalize_currency(to_raw)
            rate = parse_decimal(raw_rate)
            if from_currency is None or to_currency is None or rate is None:
                logger.warning(f"Ignoring invalid static rate {item!r}")
                continue
            rates[(from_currency, to_currency)] = rate
        return rates


__all__ = ["RATE_SOURCES", "LedgerSettings"]
