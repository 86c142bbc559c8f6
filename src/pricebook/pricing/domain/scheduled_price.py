"""ScheduledPrice: a base-price override that takes effect at an instant."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from pricebook.domain import InvalidArgument, ValueObject
from pricebook.pricing.domain.instants import to_instant
from pricebook.pricing.domain.money import Money


@dataclass(frozen=True)
class ScheduledPrice(ValueObject):
    price: Money
    effective_date: datetime

    @classmethod
    def create(cls, price: Money, effective_date: Union[datetime, str]) -> ScheduledPrice:
        if price.is_zero():
            raise InvalidArgument("Scheduled price cannot be zero")
        return cls(price, to_instant(effective_date, "effective_date"))

    def is_effective_at(self, at: datetime) -> bool:
        return self.effective_date <= to_instant(at)
