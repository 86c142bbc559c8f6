"""ValueObject: value without identity; equality by fields."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValueObject:
    """Immutable, equal by all fields. Subclasses normalize in __post_init__ via _set."""

    def _set(self, name: str, value: Any) -> None:
        # Frozen dataclasses reject plain assignment, even during __post_init__.
        object.__setattr__(self, name, value)
