"""Money value type."""

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation

from household_ledger.domain.constants import (
    CURRENCY_DECIMAL_PLACES,
    DEFAULT_DECIMAL_PLACES,
)


def currency_decimal_places(currency: str) -> int:
    """Return the number of minor-unit digits for a currency code."""
    return CURRENCY_DECIMAL_PLACES.get(currency, DEFAULT_DECIMAL_PLACES)


def _quantum(decimal_places: int) -> Decimal:
    if decimal_places <= 0:
        return Decimal("1")
    return Decimal("1").scaleb(-decimal_places)


@dataclass(frozen=True)
class Money:
    """Immutable amount paired with an ISO currency code.

    Arithmetic between two Money values requires the same currency; mixing
    currencies is a programming error and raises ValueError. Amounts keep
    full precision until ``round`` or ``exchange_to`` produces a reportable
    value.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, ValueError) as exc:
                raise ValueError(f"Invalid amount: {self.amount}") from exc
        code = str(self.currency or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code: {self.currency!r}")
        object.__setattr__(self, "currency", code)

    @classmethod
    def of(cls, amount: Decimal | int | str, currency: str) -> "Money":
        """Build Money from a Decimal, int or numeric string."""
        return cls(amount=Decimal(str(amount)), currency=currency)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        """Return a zero amount in the given currency."""
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def decimal_places(self) -> int:
        return currency_decimal_places(self.currency)

    @property
    def cents(self) -> int:
        """Amount expressed in minor units, rounded half up."""
        scaled = self.amount.scaleb(self.decimal_places)
        return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def to_decimal(self) -> Decimal:
        return self.amount

    def round(self, rounding: str = ROUND_HALF_UP) -> "Money":
        """Round to the currency's minor-unit precision."""
        rounded = self.amount.quantize(
            _quantum(self.decimal_places),
            rounding=rounding,
        )
        return Money(amount=rounded, currency=self.currency)

    def ceil(self) -> int:
        """Return the smallest integer not below the amount."""
        return int(self.amount.to_integral_value(rounding=ROUND_CEILING))

    def exchange_to(
        self,
        currency: str,
        rate: Decimal | None = None,
        fallback_rate: Decimal | int | None = None,
    ) -> "Money":
        """Convert into another currency.

        Args:
            currency: Target currency code.
            rate: Explicit multiplier from this currency into the target.
            fallback_rate: Multiplier used when no explicit rate is given.

        Returns:
            Money: Converted amount rounded to the target minor unit.

        Raises:
            ValueError: If the currencies differ and no rate is available.
        """
        target = Money.zero(currency)
        if target.currency == self.currency:
            return self
        effective = rate if rate is not None else fallback_rate
        if effective is None:
            raise ValueError(
                f"No exchange rate available for {self.currency} "
                f"to {target.currency}"
            )
        converted = self.amount * Decimal(str(effective))
        return Money(amount=converted, currency=target.currency).round()

    def _require_same_currency(self, other: "Money", operation: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {operation} Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __mul__(self, factor: Decimal | int) -> "Money":
        if isinstance(factor, int):
            factor = Decimal(factor)
        if not isinstance(factor, Decimal):
            return NotImplemented
        return Money(amount=self.amount * factor, currency=self.currency)

    __rmul__ = __mul__

    def __neg__(self) -> "Money":
        return Money(amount=-self.amount, currency=self.currency)

    def __abs__(self) -> "Money":
        return Money(amount=abs(self.amount), currency=self.currency)

    def __lt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.round().amount:,} {self.currency}"


__all__ = ["Money", "currency_decimal_places"]
