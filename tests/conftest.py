"""Pytest fixtures for the pricing context."""
from datetime import datetime, timedelta, timezone

import pytest

from pricebook.core import Settings
from pricebook.pricing.application import PriceEntryUseCases, PromotionUseCases, ShelfLabelUseCases
from pricebook.pricing.domain import SKU, AvailabilitySignal, Money, PriceEntry
from pricebook.pricing.infrastructure import InMemoryPriceEntryRepository, StaticAvailabilityProvider

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def window():
    """Promotion window around NOW: started yesterday, ends in thirty days."""
    return NOW - timedelta(days=1), NOW + timedelta(days=30)


@pytest.fixture
def high():
    return AvailabilitySignal.create("WIDGET-1", "HIGH")


@pytest.fixture
def low():
    return AvailabilitySignal.create("WIDGET-1", "LOW")


@pytest.fixture
def out_of_stock():
    return AvailabilitySignal.create("WIDGET-1", "OUT_OF_STOCK")


@pytest.fixture
def entry() -> PriceEntry:
    return PriceEntry.create(SKU("widget-1"), Money.from_cents(1000))


@pytest.fixture
def repository() -> InMemoryPriceEntryRepository:
    return InMemoryPriceEntryRepository()


@pytest.fixture
def availability() -> StaticAvailabilityProvider:
    return StaticAvailabilityProvider(fallback="HIGH")


@pytest.fixture
def use_cases(repository, availability, clock) -> PriceEntryUseCases:
    return PriceEntryUseCases(repository, availability, Settings(), clock)


@pytest.fixture
def promotion_use_cases(repository, clock) -> PromotionUseCases:
    return PromotionUseCases(repository, clock)


@pytest.fixture
def shelf_labels(use_cases) -> ShelfLabelUseCases:
    return ShelfLabelUseCases(use_cases)
