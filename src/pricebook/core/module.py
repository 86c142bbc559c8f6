"""Module protocol: a named unit the application composes via register_into(app)."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pricebook.core.app import Application


@runtime_checkable
class Module(Protocol):
    """A bounded context or adapter. `name` prefixes its route names and shows up in logs."""

    name: str

    def register_into(self, app: Application) -> None:
        """Add routes and container bindings to the app."""
        ...
