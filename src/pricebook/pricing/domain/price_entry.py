"""PriceEntry aggregate: one SKU's pricing state and the calculation that reduces it to a price."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from pricebook.domain import AlreadyExists, Entity, InvalidArgument, NotFound
from pricebook.pricing.domain.availability import AvailabilitySignal
from pricebook.pricing.domain.bulk_tier import BulkTier
from pricebook.pricing.domain.calculated_price import AppliedDiscount, CalculatedPrice, DiscountReason
from pricebook.pricing.domain.instants import to_instant, utc_now
from pricebook.pricing.domain.money import Money, Percentage
from pricebook.pricing.domain.promotion import Promotion
from pricebook.pricing.domain.scheduled_price import ScheduledPrice
from pricebook.pricing.domain.sku import SKU

# Share of a promotion kept while stock is low. Fixed, not configurable.
LOW_STOCK_DISCOUNT_FACTOR = 0.5


def _reduced_for_low_stock(percentage: Percentage) -> Percentage:
    if isinstance(percentage, Decimal):
        return percentage * Decimal(str(LOW_STOCK_DISCOUNT_FACTOR))
    return percentage * LOW_STOCK_DISCOUNT_FACTOR


def _promotion_order(promotion: Promotion) -> int:
    return -promotion.priority


def _tier_order(tier: BulkTier) -> int:
    return tier.min_quantity


class PriceEntry(Entity):
    """
    Aggregate root, identified by its SKU.

    Iteration order is part of the contract:
    - promotions: priority descending (ties keep insertion order),
    - scheduled prices: effective date ascending,
    - bulk tiers: min quantity ascending.
    Every mutation re-sorts with an explicit key.
    """

    def __init__(self, sku: SKU, base_price: Money) -> None:
        super().__init__(sku)
        self._sku = sku
        self._base_price = self._checked_base(base_price)
        self._promotions: list[Promotion] = []
        self._scheduled_prices: list[ScheduledPrice] = []
        self._bulk_tiers: list[BulkTier] = []

    @classmethod
    def create(cls, sku: SKU, base_price: Money) -> PriceEntry:
        return cls(sku, base_price)

    @staticmethod
    def _checked_base(price: Money) -> Money:
        if price.is_zero():
            raise InvalidArgument("Base price cannot be zero")
        return price

    @property
    def sku(self) -> SKU:
        return self._sku

    @property
    def base_price(self) -> Money:
        return self._base_price

    @property
    def promotions(self) -> tuple[Promotion, ...]:
        return tuple(self._promotions)

    @property
    def scheduled_prices(self) -> tuple[ScheduledPrice, ...]:
        return tuple(self._scheduled_prices)

    @property
    def bulk_tiers(self) -> tuple[BulkTier, ...]:
        return tuple(self._bulk_tiers)

    # Commands

    def set_base_price(self, price: Money) -> None:
        self._base_price = self._checked_base(price)

    def schedule_base_price(self, scheduled: ScheduledPrice) -> None:
        """Schedules may coexist; they are not deduplicated."""
        self._scheduled_prices.append(scheduled)
        self._scheduled_prices.sort(key=lambda s: s.effective_date)

    def set_bulk_tiers(self, tiers: Iterable[BulkTier]) -> None:
        self._bulk_tiers = sorted(tiers, key=_tier_order)

    def add_promotion(self, promotion: Promotion) -> None:
        if any(existing.equals(promotion) for existing in self._promotions):
            raise AlreadyExists(
                f"Promotion already exists: {promotion.name} ({promotion.type.value})"
            )
        self._promotions.append(promotion)
        self._promotions.sort(key=_promotion_order)

    def remove_promotion(self, promotion_name: str) -> None:
        """Remove the first promotion with this name, in priority order."""
        for index, promotion in enumerate(self._promotions):
            if promotion.name == promotion_name:
                del self._promotions[index]
                return
        raise NotFound(f"Promotion not found: {promotion_name}")

    # Queries

    def find_promotion(self, promotion_name: str) -> Optional[Promotion]:
        return next((p for p in self._promotions if p.name == promotion_name), None)

    def active_promotions(self, at: datetime) -> list[Promotion]:
        return [p for p in self._promotions if p.is_active_at(at)]

    def effective_base_price(self, at: datetime) -> Money:
        """The most recently triggered schedule wins; the stored base price otherwise."""
        effective = self._base_price
        for scheduled in self._scheduled_prices:
            if scheduled.is_effective_at(at):
                effective = scheduled.price
        return effective

    def applicable_tier(self, quantity: int) -> Optional[BulkTier]:
        """Last match wins over the ascending tiers, i.e. the highest matching minimum."""
        applicable = None
        for tier in self._bulk_tiers:
            if tier.applies_to(quantity):
                applicable = tier
        return applicable

    def calculate_price(
        self,
        availability: AvailabilitySignal,
        now: Optional[datetime] = None,
        quantity: Optional[int] = None,
    ) -> CalculatedPrice:
        now = utc_now() if now is None else to_instant(now)
        if quantity is not None and (
            isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1
        ):
            raise InvalidArgument(f"Quantity must be a positive integer, got {quantity!r}")

        effective_base = self.effective_base_price(now)
        current = effective_base
        applied: list[AppliedDiscount] = []

        if quantity is not None and self._bulk_tiers:
            tier = self.applicable_tier(quantity)
            if tier is not None and tier.discount_percentage > 0:
                current = current.apply_discount(tier.discount_percentage)
                applied.append(
                    AppliedDiscount(
                        promotion_name=tier.label,
                        original_percentage=tier.discount_percentage,
                        applied_percentage=tier.discount_percentage,
                        reason=DiscountReason.BULK_TIER,
                    )
                )

        for promotion in self.active_promotions(now):
            original = promotion.discount_percentage
            if availability.is_out_of_stock:
                percentage, reason = 0, DiscountReason.SUPPRESSED_OUT_OF_STOCK
            elif availability.is_low:
                percentage, reason = _reduced_for_low_stock(original), DiscountReason.REDUCED_LOW_STOCK
            else:
                percentage, reason = original, DiscountReason.FULL

            # Compounds on the running price, rounded to the cent at each step.
            if percentage > 0:
                current = current.apply_discount(percentage)
            applied.append(AppliedDiscount(promotion.name, original, percentage, reason))

        return CalculatedPrice(str(self._sku), effective_base, current, tuple(applied))

    def __repr__(self) -> str:
        return (
            f"PriceEntry(sku={self._sku.value!r}, base_price={self._base_price}, "
            f"promotions={len(self._promotions)}, scheduled={len(self._scheduled_prices)}, "
            f"tiers={len(self._bulk_tiers)})"
        )
