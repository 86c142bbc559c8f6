"""Pricing domain: value objects, the PriceEntry aggregate and its ports."""
from pricebook.pricing.domain.availability import (
    AvailabilityLevel,
    AvailabilityProvider,
    AvailabilitySignal,
)
from pricebook.pricing.domain.bulk_tier import BulkTier
from pricebook.pricing.domain.calculated_price import AppliedDiscount, CalculatedPrice, DiscountReason
from pricebook.pricing.domain.instants import to_instant, utc_now
from pricebook.pricing.domain.money import Money
from pricebook.pricing.domain.price_entry import LOW_STOCK_DISCOUNT_FACTOR, PriceEntry
from pricebook.pricing.domain.promotion import Promotion, PromotionType
from pricebook.pricing.domain.repository import PriceEntryRepository
from pricebook.pricing.domain.scheduled_price import ScheduledPrice
from pricebook.pricing.domain.sku import SKU

__all__ = [
    "AvailabilityLevel",
    "AvailabilityProvider",
    "AvailabilitySignal",
    "AppliedDiscount",
    "BulkTier",
    "CalculatedPrice",
    "DiscountReason",
    "LOW_STOCK_DISCOUNT_FACTOR",
    "Money",
    "PriceEntry",
    "PriceEntryRepository",
    "Promotion",
    "PromotionType",
    "ScheduledPrice",
    "SKU",
    "to_instant",
    "utc_now",
]
