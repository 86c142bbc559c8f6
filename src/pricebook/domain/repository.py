"""Repository: interface for aggregate persistence."""
from abc import ABC, abstractmethod
from typing import Generic, Hashable, Optional, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Repository interface: get by id, save (insert or replace), list everything.

    Calls are synchronous and total; there is no transaction spanning calls.
    """

    @abstractmethod
    def get(self, id: Hashable) -> Optional[T]:
        ...

    @abstractmethod
    def save(self, aggregate: T) -> None:
        ...

    @abstractmethod
    def find_all(self) -> list[T]:
        ...
