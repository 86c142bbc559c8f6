"""Availability signal consumed from the inventory subsystem, and the port that supplies it."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

from pricebook.domain import InvalidArgument


class AvailabilityLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    OUT_OF_STOCK = "OUT_OF_STOCK"

    @classmethod
    def parse(cls, value: Union[str, AvailabilityLevel]) -> AvailabilityLevel:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(level.value for level in cls)
            raise InvalidArgument(f"Unknown availability level {value!r}; expected one of {allowed}") from None


@dataclass(frozen=True)
class AvailabilitySignal:
    """Coarse stock classification for one SKU. Read-only for pricing."""

    sku: str
    level: AvailabilityLevel

    @classmethod
    def create(cls, sku: str, level: Union[str, AvailabilityLevel]) -> AvailabilitySignal:
        return cls(sku, AvailabilityLevel.parse(level))

    @property
    def is_low(self) -> bool:
        return self.level is AvailabilityLevel.LOW

    @property
    def is_out_of_stock(self) -> bool:
        return self.level is AvailabilityLevel.OUT_OF_STOCK


@runtime_checkable
class AvailabilityProvider(Protocol):
    """Synchronous and total: unknown SKUs resolve to a fallback level, never an error."""

    def get_availability(self, sku: str) -> AvailabilitySignal:
        ...
