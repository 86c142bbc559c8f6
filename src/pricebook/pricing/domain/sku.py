"""SKU value object."""
from __future__ import annotations

import re
from dataclasses import dataclass

from pricebook.domain import InvalidArgument, ValueObject

_SKU_PATTERN = re.compile(r"^[A-Z0-9-]+$")


@dataclass(frozen=True)
class SKU(ValueObject):
    """Stock-keeping unit: trimmed, uppercased, letters, digits and hyphens only."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidArgument("SKU must be a string")
        normalized = self.value.strip().upper()
        if not normalized:
            raise InvalidArgument("SKU cannot be empty")
        if not _SKU_PATTERN.match(normalized):
            raise InvalidArgument(f"SKU must contain only alphanumeric characters and hyphens: {self.value!r}")
        self._set("value", normalized)

    @classmethod
    def create(cls, value: str | SKU) -> SKU:
        if isinstance(value, SKU):
            return value
        return cls(value)

    def __str__(self) -> str:
        return self.value
