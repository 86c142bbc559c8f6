"""Promotion: a named, typed, time-bounded percentage discount."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from pricebook.domain import InvalidArgument
from pricebook.pricing.domain.instants import to_instant
from pricebook.pricing.domain.money import Percentage, to_decimal


class PromotionType(str, Enum):
    BLACK_FRIDAY = "BLACK_FRIDAY"
    CLEARANCE = "CLEARANCE"
    SEASONAL = "SEASONAL"
    BULK_DISCOUNT = "BULK_DISCOUNT"

    @classmethod
    def parse(cls, value: Union[str, PromotionType]) -> PromotionType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise InvalidArgument(f"Unknown promotion type {value!r}; expected one of {allowed}") from None


@dataclass(frozen=True, eq=False)
class Promotion:
    """
    Immutable once created. Active on the half-open window [valid_from, valid_until).

    Equality is by (name, type) only: two promotions that differ in percentage,
    window or priority are still duplicates of each other.
    """

    name: str
    type: PromotionType
    discount_percentage: Percentage
    valid_from: datetime
    valid_until: datetime
    priority: int = field(default=0)

    @classmethod
    def create(
        cls,
        name: str,
        type: Union[str, PromotionType],
        discount_percentage: Percentage,
        valid_from: Union[datetime, str],
        valid_until: Union[datetime, str],
        priority: int = 0,
    ) -> Promotion:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("Promotion name cannot be empty")
        to_decimal(discount_percentage, "Discount percentage")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidArgument(f"Priority must be an integer, got {priority!r}")
        start = to_instant(valid_from, "valid_from")
        end = to_instant(valid_until, "valid_until")
        if start >= end:
            raise InvalidArgument("Valid from date must be before valid until date")
        return cls(name, PromotionType.parse(type), discount_percentage, start, end, priority)

    def is_active_at(self, at: datetime) -> bool:
        at = to_instant(at)
        return self.valid_from <= at < self.valid_until

    def equals(self, other: Promotion) -> bool:
        return self.name == other.name and self.type == other.type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Promotion):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.name, self.type))
