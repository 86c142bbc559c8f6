"""Instants are timezone-aware datetimes; naive values are read as UTC."""
from __future__ import annotations

from datetime import datetime, timezone

from pricebook.domain.errors import InvalidArgument


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_instant(value: datetime | str, field: str = "date") -> datetime:
    """Accept a datetime or an ISO-8601 string (trailing Z allowed)."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidArgument(f"{field} is not an ISO-8601 date: {value!r}") from None
    if not isinstance(value, datetime):
        raise InvalidArgument(f"{field} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
