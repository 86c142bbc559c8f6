"""PriceEntryRepository: persistence port for the PriceEntry aggregate."""
from __future__ import annotations

from abc import abstractmethod
from typing import Hashable, Optional

from pricebook.domain import Repository
from pricebook.pricing.domain.price_entry import PriceEntry
from pricebook.pricing.domain.sku import SKU


class PriceEntryRepository(Repository[PriceEntry]):
    """Keyed by normalized SKU. Last writer wins; callers serialize commands per SKU."""

    @abstractmethod
    def find_by_sku(self, sku: SKU) -> Optional[PriceEntry]:
        ...

    def get(self, id: Hashable) -> Optional[PriceEntry]:
        return self.find_by_sku(SKU.create(id))  # type: ignore[arg-type]
