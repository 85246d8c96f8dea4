"""Port for automatic exchange rate lookups."""

from datetime import date
from decimal import Decimal
from typing import Protocol


class ExchangeRateProviderPort(Protocol):
    """Port exposing market exchange rates."""

    def find_rate(
        self,
        from_currency: str,
        to_currency: str,
        as_of: date,
    ) -> Decimal | None:
        """Return the multiplier converting ``from_currency`` into
        ``to_currency`` on ``as_of``, or None when unavailable."""


__all__ = ["ExchangeRateProviderPort"]
