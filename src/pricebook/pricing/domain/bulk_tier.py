"""BulkTier: quantity range mapped to a percentage discount."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pricebook.domain import InvalidArgument, ValueObject
from pricebook.pricing.domain.money import Percentage, to_decimal


def _check_quantity(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class BulkTier(ValueObject):
    min_quantity: int
    discount_percentage: Percentage
    max_quantity: Optional[int] = None

    def __post_init__(self) -> None:
        _check_quantity("Minimum quantity", self.min_quantity)
        if self.min_quantity < 1:
            raise InvalidArgument("Minimum quantity must be at least 1")
        if self.max_quantity is not None:
            _check_quantity("Maximum quantity", self.max_quantity)
            if self.max_quantity < self.min_quantity:
                raise InvalidArgument(
                    f"Maximum quantity {self.max_quantity} is below minimum quantity {self.min_quantity}"
                )
        to_decimal(self.discount_percentage, "Discount percentage")

    @classmethod
    def create(
        cls, min_quantity: int, discount_percentage: Percentage, max_quantity: Optional[int] = None
    ) -> BulkTier:
        return cls(min_quantity, discount_percentage, max_quantity)

    def applies_to(self, quantity: int) -> bool:
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity

    @property
    def label(self) -> str:
        return f"Bulk discount ({self.min_quantity}+ units)"
