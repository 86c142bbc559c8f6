"""Result of a price calculation and its discount trail."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple

from pricebook.pricing.domain.money import Money, Percentage, round_half_up


class DiscountReason(str, Enum):
    FULL = "FULL"
    REDUCED_LOW_STOCK = "REDUCED_LOW_STOCK"
    SUPPRESSED_OUT_OF_STOCK = "SUPPRESSED_OUT_OF_STOCK"
    BULK_TIER = "BULK_TIER"

    @property
    def text(self) -> str:
        """Human-readable rendering; callers match on these exact strings."""
        return _REASON_TEXT[self]


_REASON_TEXT = {
    DiscountReason.FULL: "Full discount applied",
    DiscountReason.REDUCED_LOW_STOCK: "Reduced discount: low stock",
    DiscountReason.SUPPRESSED_OUT_OF_STOCK: "No discount: item out of stock",
    DiscountReason.BULK_TIER: "Bulk tier discount applied",
}


@dataclass(frozen=True)
class AppliedDiscount:
    promotion_name: str
    original_percentage: Percentage
    applied_percentage: Percentage
    reason: DiscountReason

    @property
    def reason_text(self) -> str:
        return self.reason.text


@dataclass(frozen=True)
class CalculatedPrice:
    """
    `base_price` is the effective base (after schedule resolution), not the
    entry's stored base price. `applied_discounts` is in application order.
    """

    sku: str
    base_price: Money
    final_price: Money
    applied_discounts: Tuple[AppliedDiscount, ...] = field(default_factory=tuple)

    @property
    def currency(self) -> str:
        return self.base_price.currency

    @property
    def saved(self) -> Money:
        return self.base_price.subtract(self.final_price)

    def total_discount_percentage(self) -> int:
        """Overall reduction versus the effective base, in whole percent.

        Derived from the two prices: summing applied percentages would
        over-count because discounts compound.
        """
        base = self.base_price.amount_in_cents
        if base == 0:
            return 0
        saved = base - self.final_price.amount_in_cents
        return round_half_up(Decimal(saved) * 100 / Decimal(base))
