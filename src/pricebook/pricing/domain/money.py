"""Money: exact integer cents with a currency tag."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from numbers import Real
from typing import Union

from pricebook.domain import CurrencyMismatch, InvalidArgument, ValueObject

Percentage = Union[int, float, Decimal]

DEFAULT_CURRENCY = "USD"
_HUNDRED = Decimal(100)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_decimal(percentage: Percentage, what: str = "Percentage") -> Decimal:
    """Check a percentage is a number in [0, 100] and return it as a Decimal."""
    if isinstance(percentage, bool) or not isinstance(percentage, (Real, Decimal)):
        raise InvalidArgument(f"{what} must be a number, got {percentage!r}")
    try:
        value = Decimal(str(percentage))
    except InvalidOperation:
        raise InvalidArgument(f"{what} must be a number, got {percentage!r}") from None
    if not value.is_finite() or value < 0 or value > _HUNDRED:
        raise InvalidArgument(f"{what} must be between 0 and 100, got {percentage}")
    return value


def _normalize_currency(currency: str) -> str:
    if not isinstance(currency, str) or not currency.strip():
        raise InvalidArgument("Currency code cannot be empty")
    return currency.strip().upper()


@dataclass(frozen=True)
class Money(ValueObject):
    amount_in_cents: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        cents = self.amount_in_cents
        if isinstance(cents, bool) or not isinstance(cents, int):
            raise InvalidArgument(f"Amount in cents must be an integer, got {cents!r}")
        if cents < 0:
            raise InvalidArgument(f"Amount cannot be negative, got {cents}")
        self._set("currency", _normalize_currency(self.currency))

    @classmethod
    def from_cents(cls, amount_in_cents: int, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount_in_cents, currency)

    @classmethod
    def from_dollars(cls, amount: Union[int, float, Decimal, str], currency: str = DEFAULT_CURRENCY) -> Money:
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            raise InvalidArgument(f"Amount must be a number, got {amount!r}") from None
        if not value.is_finite():
            raise InvalidArgument(f"Amount must be finite, got {amount!r}")
        return cls(round_half_up(value * _HUNDRED), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(0, currency)

    @property
    def cents(self) -> int:
        return self.amount_in_cents

    def to_dollars(self) -> Decimal:
        return Decimal(self.amount_in_cents) / _HUNDRED

    def add(self, other: Money) -> Money:
        self._ensure_same_currency(other)
        return Money(self.amount_in_cents + other.amount_in_cents, self.currency)

    def subtract(self, other: Money) -> Money:
        self._ensure_same_currency(other)
        result = self.amount_in_cents - other.amount_in_cents
        if result < 0:
            raise InvalidArgument(
                f"Cannot subtract {other} from {self}: would result in negative amount"
            )
        return Money(result, self.currency)

    def multiply_by_percentage(self, percentage: Percentage) -> Money:
        """That percentage of this amount, rounded half-up to the cent."""
        value = to_decimal(percentage)
        return Money(round_half_up(self.amount_in_cents * value / _HUNDRED), self.currency)

    def apply_discount(self, discount_percentage: Percentage) -> Money:
        """Subtract the discount, rounded half-up to the cent before subtracting."""
        value = to_decimal(discount_percentage, "Discount percentage")
        discount = round_half_up(self.amount_in_cents * value / _HUNDRED)
        return Money(self.amount_in_cents - discount, self.currency)

    def is_greater_than(self, other: Money) -> bool:
        self._ensure_same_currency(other)
        return self.amount_in_cents > other.amount_in_cents

    def is_zero(self) -> bool:
        return self.amount_in_cents == 0

    def equals(self, other: Money) -> bool:
        return self == other

    def _ensure_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(self.currency, other.currency)

    def __str__(self) -> str:
        return f"{self.to_dollars():.2f} {self.currency}"
