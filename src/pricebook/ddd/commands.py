"""Command and query markers. `route_segment` names the URL segment their endpoints live under."""
from dataclasses import dataclass
from typing import ClassVar


@dataclass
class Command:
    """Intent to change a price entry. Served as POST {prefix}/commands/{name}."""

    route_segment: ClassVar[str] = "commands"
    http_methods: ClassVar[tuple[str, ...]] = ("POST",)


@dataclass
class Query:
    """Read-only question. Served as GET or POST {prefix}/queries/{name}; None means 404."""

    route_segment: ClassVar[str] = "queries"
    http_methods: ClassVar[tuple[str, ...]] = ("GET", "POST")
