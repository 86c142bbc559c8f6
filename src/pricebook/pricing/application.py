"""Application layer: commands, queries, DTOs and the use cases that run them."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

import structlog

from pricebook.core.config import Settings
from pricebook.ddd import Command, Query
from pricebook.domain import AlreadyExists, InvalidArgument, NotFound
from pricebook.pricing.domain import (
    SKU,
    AvailabilityLevel,
    AvailabilityProvider,
    AvailabilitySignal,
    BulkTier,
    CalculatedPrice,
    Money,
    PriceEntry,
    PriceEntryRepository,
    Promotion,
    PromotionType,
    ScheduledPrice,
    to_instant,
    utc_now,
)
from pricebook.pricing.domain.money import Percentage

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]
TierInput = Union[BulkTier, Mapping[str, Any]]


# Commands


@dataclass
class SetBasePrice(Command):
    sku: str
    price_in_cents: int
    currency: Optional[str] = None


@dataclass
class ScheduleBasePrice(Command):
    sku: str
    price_in_cents: int
    effective_date: datetime
    currency: Optional[str] = None


@dataclass
class SetBulkTiers(Command):
    """Replaces the whole tier set. Each tier: min_quantity, discount_percentage, max_quantity?"""
    sku: str
    tiers: list = field(default_factory=list)


@dataclass
class AddPromotion(Command):
    sku: str
    name: str
    type: str
    discount_percentage: float
    valid_from: datetime
    valid_until: datetime
    priority: int = 0


@dataclass
class RemovePromotion(Command):
    sku: str
    promotion_name: str


@dataclass
class ClonePromotion(Command):
    source_sku: str
    promotion_name: str
    target_skus: list = field(default_factory=list)


# Queries


@dataclass
class GetPriceEntry(Query):
    sku: str


@dataclass
class CalculatePrice(Query):
    sku: str
    at: Optional[datetime] = None
    quantity: Optional[int] = None


@dataclass
class CalculateSavingsSummary(Query):
    sku: str
    quantity: Optional[int] = None


@dataclass
class ListActivePromotions(Query):
    type: Optional[str] = None
    at: Optional[datetime] = None


@dataclass
class GenerateShelfLabel(Query):
    sku: str


# DTOs


@dataclass(frozen=True)
class PromotionDTO:
    name: str
    type: str
    discount_percentage: Percentage
    valid_from: datetime
    valid_until: datetime
    priority: int

    @classmethod
    def from_domain(cls, promotion: Promotion) -> PromotionDTO:
        return cls(
            name=promotion.name,
            type=promotion.type.value,
            discount_percentage=promotion.discount_percentage,
            valid_from=promotion.valid_from,
            valid_until=promotion.valid_until,
            priority=promotion.priority,
        )


@dataclass(frozen=True)
class ScheduledPriceDTO:
    price_in_cents: int
    currency: str
    effective_date: datetime


@dataclass(frozen=True)
class BulkTierDTO:
    min_quantity: int
    max_quantity: Optional[int]
    discount_percentage: Percentage


@dataclass(frozen=True)
class PriceEntryDTO:
    sku: str
    base_price_in_cents: int
    currency: str
    promotions: list[PromotionDTO]
    scheduled_prices: list[ScheduledPriceDTO]
    bulk_tiers: list[BulkTierDTO]

    @classmethod
    def from_domain(cls, entry: PriceEntry) -> PriceEntryDTO:
        return cls(
            sku=str(entry.sku),
            base_price_in_cents=entry.base_price.amount_in_cents,
            currency=entry.base_price.currency,
            promotions=[PromotionDTO.from_domain(p) for p in entry.promotions],
            scheduled_prices=[
                ScheduledPriceDTO(s.price.amount_in_cents, s.price.currency, s.effective_date)
                for s in entry.scheduled_prices
            ],
            bulk_tiers=[
                BulkTierDTO(t.min_quantity, t.max_quantity, t.discount_percentage)
                for t in entry.bulk_tiers
            ],
        )


@dataclass(frozen=True)
class AppliedDiscountDTO:
    promotion_name: str
    original_percentage: Percentage
    applied_percentage: Percentage
    reason: str
    reason_code: str


@dataclass(frozen=True)
class CalculatedPriceDTO:
    sku: str
    base_price_in_cents: int
    final_price_in_cents: int
    currency: str
    total_discount_percentage: int
    applied_discounts: list[AppliedDiscountDTO]

    @classmethod
    def from_domain(cls, calculated: CalculatedPrice) -> CalculatedPriceDTO:
        return cls(
            sku=calculated.sku,
            base_price_in_cents=calculated.base_price.amount_in_cents,
            final_price_in_cents=calculated.final_price.amount_in_cents,
            currency=calculated.currency,
            total_discount_percentage=calculated.total_discount_percentage(),
            applied_discounts=[
                AppliedDiscountDTO(
                    promotion_name=d.promotion_name,
                    original_percentage=d.original_percentage,
                    applied_percentage=d.applied_percentage,
                    reason=d.reason.text,
                    reason_code=d.reason.value,
                )
                for d in calculated.applied_discounts
            ],
        )


@dataclass(frozen=True)
class DiscountSavingDTO:
    label: str
    reason: str
    applied_percentage: Percentage
    amount_saved_in_cents: int


@dataclass(frozen=True)
class SavingsSummaryDTO:
    sku: str
    currency: str
    base_price_in_cents: int
    final_price_in_cents: int
    total_savings_in_cents: int
    total_savings_percentage: int
    discounts: list[DiscountSavingDTO]


@dataclass(frozen=True)
class ActivePromotionDTO:
    sku: str
    name: str
    type: str
    discount_percentage: Percentage
    valid_from: datetime
    valid_until: datetime
    priority: int


@dataclass(frozen=True)
class ClonePromotionResult:
    cloned_count: int
    skipped_skus: list[str]


@dataclass(frozen=True)
class ShelfLabelDTO:
    sku: str
    final_price_in_cents: int
    currency: str
    savings_percentage: int
    availability_badge: str
    original_price_in_cents: Optional[int] = None


_BADGES = {
    AvailabilityLevel.OUT_OF_STOCK: "Out of Stock",
    AvailabilityLevel.LOW: "Low Stock",
}


def _tier_from(raw: TierInput) -> BulkTier:
    if isinstance(raw, BulkTier):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidArgument(f"Bulk tier must be an object, got {raw!r}")
    unknown = set(raw) - {"min_quantity", "max_quantity", "discount_percentage"}
    if unknown:
        raise InvalidArgument(f"Unknown bulk tier fields: {', '.join(sorted(unknown))}")
    if "min_quantity" not in raw or "discount_percentage" not in raw:
        raise InvalidArgument("Bulk tier requires min_quantity and discount_percentage")
    return BulkTier.create(raw["min_quantity"], raw["discount_percentage"], raw.get("max_quantity"))


def _require_entry(repository: PriceEntryRepository, sku: SKU) -> PriceEntry:
    entry = repository.find_by_sku(sku)
    if entry is None:
        raise NotFound(f"Price entry not found: {sku}")
    return entry


class PriceEntryUseCases:
    """
    Thin coordination over the PriceEntry aggregate: validate the SKU, load or
    create the entry, call into it, save, and map to DTOs.
    """

    def __init__(
        self,
        repository: PriceEntryRepository,
        availability: AvailabilityProvider,
        settings: Settings = Settings(),
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repository
        self._availability = availability
        self._settings = settings
        self._clock = clock

    def _money(self, cents: int, currency: Optional[str]) -> Money:
        return Money.from_cents(cents, currency or self._settings.default_currency)

    # Commands

    def set_base_price(self, cmd: SetBasePrice) -> None:
        sku = SKU.create(cmd.sku)
        price = self._money(cmd.price_in_cents, cmd.currency)
        entry = self._repo.find_by_sku(sku)
        if entry is None:
            entry = PriceEntry.create(sku, price)
            logger.info("price_entry.created", sku=str(sku), price_in_cents=price.cents, currency=price.currency)
        else:
            entry.set_base_price(price)
            logger.info("price_entry.base_price_set", sku=str(sku), price_in_cents=price.cents, currency=price.currency)
        self._repo.save(entry)

    def schedule_base_price(self, cmd: ScheduleBasePrice) -> None:
        sku = SKU.create(cmd.sku)
        scheduled = ScheduledPrice.create(self._money(cmd.price_in_cents, cmd.currency), cmd.effective_date)
        entry = _require_entry(self._repo, sku)
        entry.schedule_base_price(scheduled)
        self._repo.save(entry)
        logger.info(
            "price_entry.price_scheduled",
            sku=str(sku),
            price_in_cents=scheduled.price.cents,
            effective_date=scheduled.effective_date.isoformat(),
        )

    def set_bulk_tiers(self, cmd: SetBulkTiers) -> None:
        sku = SKU.create(cmd.sku)
        tiers = [_tier_from(raw) for raw in cmd.tiers]
        entry = _require_entry(self._repo, sku)
        entry.set_bulk_tiers(tiers)
        self._repo.save(entry)
        logger.info("price_entry.bulk_tiers_set", sku=str(sku), tiers=len(tiers))

    def add_promotion(self, cmd: AddPromotion) -> None:
        sku = SKU.create(cmd.sku)
        promotion = Promotion.create(
            cmd.name,
            cmd.type,
            cmd.discount_percentage,
            cmd.valid_from,
            cmd.valid_until,
            0 if cmd.priority is None else cmd.priority,
        )
        entry = _require_entry(self._repo, sku)
        entry.add_promotion(promotion)
        self._repo.save(entry)
        logger.info(
            "price_entry.promotion_added",
            sku=str(sku),
            promotion=promotion.name,
            type=promotion.type.value,
            priority=promotion.priority,
        )

    def remove_promotion(self, cmd: RemovePromotion) -> None:
        sku = SKU.create(cmd.sku)
        entry = _require_entry(self._repo, sku)
        entry.remove_promotion(cmd.promotion_name)
        self._repo.save(entry)
        logger.info("price_entry.promotion_removed", sku=str(sku), promotion=cmd.promotion_name)

    # Queries

    def get_price_entry(self, query: GetPriceEntry) -> Optional[PriceEntryDTO]:
        entry = self._repo.find_by_sku(SKU.create(query.sku))
        if entry is None:
            return None
        return PriceEntryDTO.from_domain(entry)

    def calculate_price(self, query: CalculatePrice) -> CalculatedPrice:
        calculated, _ = self.calculate_with_signal(query)
        return calculated

    def calculate_with_signal(self, query: CalculatePrice) -> tuple[CalculatedPrice, AvailabilitySignal]:
        """Calculate and also return the availability signal the calculation used."""
        sku = SKU.create(query.sku)
        entry = _require_entry(self._repo, sku)
        at = self._clock() if query.at is None else to_instant(query.at, "at")
        availability = self._availability.get_availability(str(sku))
        calculated = entry.calculate_price(availability, at, query.quantity)
        logger.debug(
            "price.calculated",
            sku=str(sku),
            availability=availability.level.value,
            base_price_in_cents=calculated.base_price.cents,
            final_price_in_cents=calculated.final_price.cents,
            discounts=len(calculated.applied_discounts),
        )
        return calculated, availability

    def calculate_savings_summary(self, query: CalculateSavingsSummary) -> SavingsSummaryDTO:
        calculated = self.calculate_price(CalculatePrice(sku=query.sku, quantity=query.quantity))

        # Replays the running price of the calculation so each step's cents
        # are attributed to the discount that removed them.
        running = calculated.base_price
        discounts: list[DiscountSavingDTO] = []
        for applied in calculated.applied_discounts:
            after = running.apply_discount(applied.applied_percentage) if applied.applied_percentage > 0 else running
            discounts.append(
                DiscountSavingDTO(
                    label=applied.promotion_name,
                    reason=applied.reason.text,
                    applied_percentage=applied.applied_percentage,
                    amount_saved_in_cents=running.cents - after.cents,
                )
            )
            running = after

        return SavingsSummaryDTO(
            sku=calculated.sku,
            currency=calculated.currency,
            base_price_in_cents=calculated.base_price.cents,
            final_price_in_cents=running.cents,
            total_savings_in_cents=calculated.saved.cents,
            total_savings_percentage=calculated.total_discount_percentage(),
            discounts=discounts,
        )


class PromotionUseCases:
    """Promotion queries and commands that span several price entries."""

    def __init__(self, repository: PriceEntryRepository, clock: Clock = utc_now) -> None:
        self._repo = repository
        self._clock = clock

    def list_active_promotions(self, query: ListActivePromotions) -> list[ActivePromotionDTO]:
        wanted = None if query.type is None else PromotionType.parse(query.type)
        at = self._clock() if query.at is None else to_instant(query.at, "at")
        result = []
        for entry in self._repo.find_all():
            for promotion in entry.active_promotions(at):
                if wanted is not None and promotion.type is not wanted:
                    continue
                dto = PromotionDTO.from_domain(promotion)
                result.append(ActivePromotionDTO(sku=str(entry.sku), **vars(dto)))
        return result

    def clone_promotion(self, cmd: ClonePromotion) -> ClonePromotionResult:
        """Copy one promotion onto other SKUs. Unknown targets and duplicates are skipped."""
        source_sku = SKU.create(cmd.source_sku)
        source = _require_entry(self._repo, source_sku)
        promotion = source.find_promotion(cmd.promotion_name)
        if promotion is None:
            raise NotFound(f"Promotion not found: {cmd.promotion_name}")

        targets = [SKU.create(raw) for raw in cmd.target_skus]
        cloned = 0
        skipped: list[str] = []
        for target_sku in targets:
            target = self._repo.find_by_sku(target_sku)
            if target is None:
                skipped.append(str(target_sku))
                continue
            try:
                target.add_promotion(promotion)
            except AlreadyExists:
                skipped.append(str(target_sku))
                continue
            self._repo.save(target)
            cloned += 1

        logger.info(
            "promotion.cloned",
            source=str(source_sku),
            promotion=promotion.name,
            cloned=cloned,
            skipped=skipped,
        )
        return ClonePromotionResult(cloned_count=cloned, skipped_skus=skipped)


class ShelfLabelUseCases:
    def __init__(self, prices: PriceEntryUseCases) -> None:
        self._prices = prices

    def generate_shelf_label(self, query: GenerateShelfLabel) -> ShelfLabelDTO:
        calculated, signal = self._prices.calculate_with_signal(CalculatePrice(sku=query.sku))
        level = signal.level
        discounted = calculated.final_price.cents < calculated.base_price.cents
        return ShelfLabelDTO(
            sku=calculated.sku,
            final_price_in_cents=calculated.final_price.cents,
            currency=calculated.currency,
            savings_percentage=calculated.total_discount_percentage(),
            availability_badge=_BADGES.get(level, "In Stock"),
            original_price_in_cents=calculated.base_price.cents if discounted else None,
        )
