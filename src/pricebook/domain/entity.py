"""Entity: identity-bearing object."""
from typing import Hashable


class Entity:
    """Entity: equality by identity, whatever else changes."""

    def __init__(self, id: Hashable) -> None:
        self._id = id

    @property
    def id(self) -> Hashable:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or type(other) is not type(self):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))
