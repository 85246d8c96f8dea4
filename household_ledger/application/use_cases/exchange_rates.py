"""Exchange rate resolution for account and entry conversions."""

from datetime import date
from decimal import Decimal

from household_ledger.application.ports.exchange_rates import (
    ExchangeRateProviderPort,
)
from household_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from household_ledger.domain.models import Account, Entry, Money
from household_ledger.domain.services.fx import IDENTITY_RATE, convert_money
from household_ledger.infrastructure.logging.logger import get_app_logger


class ExchangeRateResolver:
    """Resolve the rate converting an account's currency into a target.

    Resolution order:

    * identical currencies use a rate of 1;
    * the latest entry of the account carrying a manual rate, in a currency
      other than the target, wins over market data;
    * otherwise the automatic provider is asked, and a missing rate falls
      back to 1 so the amount is reported unconverted.
    """

    def __init__(
        self,
        repository: LedgerRepositoryPort,
        rate_provider: ExchangeRateProviderPort,
        logger=None,
    ) -> None:
        """Initialize the resolver.

        Args:
            repository: Port providing ledger entries.
            rate_provider: Port providing automatic exchange rates.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = repository
        self._rate_provider = rate_provider
        self._logger = logger or get_app_logger()
        self._lookups: dict[tuple[str, str, date], Decimal] = {}

    def resolve(
        self,
        account: Account,
        target_currency: str,
        as_of: date,
    ) -> Decimal:
        """Return the rate converting the account currency into the target.

        Args:
            account: Account whose balance is converted.
            target_currency: Reporting currency code.
            as_of: Date used for the automatic lookup.

        Returns:
            Decimal: Multiplier from the account currency into the target.
        """
        if account.currency == target_currency:
            return IDENTITY_RATE
        manual_entry = self._repository.latest_manual_rate_entry(
            account.id,
            target_currency,
        )
        if manual_entry is not None and manual_entry.exchange_rate is not None:
            return manual_entry.exchange_rate
        return self.lookup_rate(account.currency, target_currency, as_of)

    def lookup_rate(
        self,
        from_currency: str,
        to_currency: str,
        as_of: date,
    ) -> Decimal:
        """Return the automatic rate, or 1 when none is available."""
        if from_currency == to_currency:
            return IDENTITY_RATE
        key = (from_currency, to_currency, as_of)
        if key in self._lookups:
            return self._lookups[key]
        rate = self._rate_provider.find_rate(from_currency, to_currency, as_of)
        if rate is None:
            self._logger.warning(
                f"No exchange rate for {from_currency} to {to_currency} "
                f"on {as_of}; reporting amounts unconverted"
            )
            rate = IDENTITY_RATE
        self._lookups[key] = rate
        return rate

    def convert(
        self,
        money: Money | None,
        account: Account,
        target_currency: str,
        as_of: date,
    ) -> Money:
        """Convert an amount held in the account currency into the target."""
        if money is None:
            return Money.zero(target_currency)
        if money.currency == target_currency:
            return money
        rate = self.resolve(account, target_currency, as_of)
        return convert_money(money, target_currency, rate)

    def convert_balance(
        self,
        account: Account,
        target_currency: str,
        as_of: date,
    ) -> Money:
        """Convert an account's cached balance into the target currency."""
        return self.convert(
            account.balance_money,
            account,
            target_currency,
            as_of,
        )

    def convert_entry(self, entry: Entry, target_currency: str) -> Money:
        """Convert an entry amount, preferring the entry's own manual rate."""
        if entry.currency == target_currency:
            return entry.amount_money
        if entry.exchange_rate is not None:
            return convert_money(
                entry.amount_money,
                target_currency,
                entry.exchange_rate,
            )
        rate = self.lookup_rate(entry.currency, target_currency, entry.date)
        return convert_money(entry.amount_money, target_currency, rate)


__all__ = ["ExchangeRateResolver"]
