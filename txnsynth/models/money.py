"""Currencies and currency-scaled monetary amounts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum


class Currency(StrEnum):
    """Supported ISO 4217 currency codes (plus BTC)."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CNY = "CNY"
    INR = "INR"
    BTC = "BTC"

    @property
    def display_name(self) -> str:
        return _CURRENCY_DETAILS[self][0]

    @property
    def symbol(self) -> str:
        return _CURRENCY_DETAILS[self][1]

    @property
    def fraction_digits(self) -> int:
        """Number of minor-unit digits amounts in this currency carry."""
        return _CURRENCY_DETAILS[self][2]

    @property
    def quantum(self) -> Decimal:
        """Smallest representable amount, e.g. ``Decimal("0.01")`` for USD."""
        return Decimal(1).scaleb(-self.fraction_digits)


# (display name, symbol, fraction digits)
_CURRENCY_DETAILS: dict[Currency, tuple[str, str, int]] = {
    Currency.USD: ("US Dollar", "$", 2),
    Currency.EUR: ("Euro", "€", 2),
    Currency.GBP: ("British Pound", "£", 2),
    Currency.JPY: ("Japanese Yen", "¥", 0),
    Currency.CAD: ("Canadian Dollar", "C$", 2),
    Currency.AUD: ("Australian Dollar", "A$", 2),
    Currency.CNY: ("Chinese Yuan", "¥", 2),
    Currency.INR: ("Indian Rupee", "₹", 2),
    Currency.BTC: ("Bitcoin", "₿", 8),
}


@dataclass(frozen=True)
class Money:
    """A non-negative amount scaled to its currency's minor unit.

    The amount is quantised with HALF_UP rounding on construction, so a
    ``Money`` never carries more decimals than its currency allows.

    Attributes:
        amount: Decimal amount at the currency's scale.
        currency: Currency of the amount.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        amount = Decimal(self.amount).quantize(self.currency.quantum, rounding=ROUND_HALF_UP)
        if amount < 0:
            msg = f"Money amount must be >= 0, got {amount}"
            raise ValueError(msg)
        object.__setattr__(self, "amount", amount)

    @classmethod
    def of(cls, value: float | str | Decimal, currency: Currency) -> Money:
        """Build a Money from a float, numeric string or Decimal.

        Floats go through their shortest ``repr`` so that ``12.99`` becomes
        ``Decimal("12.99")`` rather than its binary expansion.
        """
        if isinstance(value, float):
            value = repr(value)
        return cls(Decimal(value), currency)

    def add(self, other: Money) -> Money:
        if self.currency != other.currency:
            msg = f"Cannot add {other.currency} to {self.currency}"
            raise ValueError(msg)
        return Money(self.amount + other.amount, self.currency)

    def formatted(self) -> str:
        return f"{self.currency.symbol}{self.amount}"

    def __float__(self) -> float:
        return float(self.amount)
