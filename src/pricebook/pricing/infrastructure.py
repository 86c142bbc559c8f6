"""Infrastructure: in-memory repository and availability providers."""
from __future__ import annotations

from typing import Mapping, Optional, Union

from pricebook.domain import InvalidArgument
from pricebook.pricing.domain import (
    SKU,
    AvailabilityLevel,
    AvailabilitySignal,
    PriceEntry,
    PriceEntryRepository,
)


class InMemoryPriceEntryRepository(PriceEntryRepository):
    def __init__(self) -> None:
        self._store: dict[SKU, PriceEntry] = {}

    def find_by_sku(self, sku: SKU) -> Optional[PriceEntry]:
        return self._store.get(SKU.create(sku))

    def save(self, aggregate: PriceEntry) -> None:
        self._store[aggregate.sku] = aggregate

    def find_all(self) -> list[PriceEntry]:
        return list(self._store.values())

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


def _sku_key(sku: str) -> str:
    return sku.strip().upper()


class StaticAvailabilityProvider:
    """Explicit level per SKU; SKUs it has never heard of get the fallback level."""

    def __init__(
        self,
        levels: Optional[Mapping[str, Union[str, AvailabilityLevel]]] = None,
        fallback: Union[str, AvailabilityLevel] = AvailabilityLevel.OUT_OF_STOCK,
    ) -> None:
        self._fallback = AvailabilityLevel.parse(fallback)
        self._levels: dict[str, AvailabilityLevel] = {}
        for sku, level in (levels or {}).items():
            self.set_level(sku, level)

    def set_level(self, sku: str, level: Union[str, AvailabilityLevel]) -> None:
        self._levels[_sku_key(sku)] = AvailabilityLevel.parse(level)

    def get_availability(self, sku: str) -> AvailabilitySignal:
        key = _sku_key(sku)
        return AvailabilitySignal(key, self._levels.get(key, self._fallback))


class StockLevelAvailabilityProvider:
    """
    Derives the level from on-hand quantity:
    0 is OUT_OF_STOCK, up to low_stock_threshold is LOW, up to
    medium_stock_threshold (when given) is MEDIUM, above that HIGH.
    """

    def __init__(
        self,
        on_hand: Optional[Mapping[str, int]] = None,
        low_stock_threshold: int = 5,
        fallback: Union[str, AvailabilityLevel] = AvailabilityLevel.OUT_OF_STOCK,
        medium_stock_threshold: Optional[int] = None,
    ) -> None:
        if low_stock_threshold < 0:
            raise InvalidArgument("Low stock threshold cannot be negative")
        if medium_stock_threshold is not None and medium_stock_threshold < low_stock_threshold:
            raise InvalidArgument(
                f"Medium stock threshold {medium_stock_threshold} is below low stock threshold {low_stock_threshold}"
            )
        self._threshold = low_stock_threshold
        self._medium_threshold = medium_stock_threshold
        self._fallback = AvailabilityLevel.parse(fallback)
        self._on_hand: dict[str, int] = {}
        for sku, quantity in (on_hand or {}).items():
            self.set_on_hand(sku, quantity)

    def set_on_hand(self, sku: str, quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidArgument(f"On-hand quantity must be a non-negative integer, got {quantity!r}")
        self._on_hand[_sku_key(sku)] = quantity

    def level_for(self, quantity: int) -> AvailabilityLevel:
        if quantity == 0:
            return AvailabilityLevel.OUT_OF_STOCK
        if quantity <= self._threshold:
            return AvailabilityLevel.LOW
        if self._medium_threshold is not None and quantity <= self._medium_threshold:
            return AvailabilityLevel.MEDIUM
        return AvailabilityLevel.HIGH

    def get_availability(self, sku: str) -> AvailabilitySignal:
        key = _sku_key(sku)
        quantity = self._on_hand.get(key)
        level = self._fallback if quantity is None else self.level_for(quantity)
        return AvailabilitySignal(key, level)
