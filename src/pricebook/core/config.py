"""Single settings object: built from the environment, available via DI."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from pricebook.domain.errors import InvalidArgument

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class Config:
    """Helpers for reading configuration from os.environ."""

    @classmethod
    def load_from_env(
        cls, prefix: str = "PRICEBOOK_", environ: Mapping[str, str] | None = None, **defaults: Any
    ) -> dict[str, Any]:
        """Load prefixed variables over defaults. PRICEBOOK_LOG_LEVEL -> {"log_level": ...}."""
        env = os.environ if environ is None else environ
        result = dict(defaults)
        for key, value in env.items():
            if key.startswith(prefix):
                result[key[len(prefix):].lower()] = value
        return result


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidArgument(f"{name} must be a boolean, got {value!r}")


def _as_int(name: str, value: Any, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise InvalidArgument(f"{name} must be >= {minimum}, got {number}")
    return number


@dataclass(frozen=True)
class Settings:
    default_currency: str = "USD"
    availability_fallback: str = "OUT_OF_STOCK"
    low_stock_threshold: int = 5
    medium_stock_threshold: Optional[int] = None
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        currency = str(self.default_currency).strip().upper()
        if not currency.isalpha():
            raise InvalidArgument(f"default_currency must be an alphabetic code, got {self.default_currency!r}")
        object.__setattr__(self, "default_currency", currency)
        # Level names are checked when the availability provider is built.
        object.__setattr__(self, "availability_fallback", str(self.availability_fallback).strip().upper())
        object.__setattr__(
            self, "low_stock_threshold", _as_int("low_stock_threshold", self.low_stock_threshold)
        )
        if self.medium_stock_threshold in (None, ""):
            object.__setattr__(self, "medium_stock_threshold", None)
        else:
            object.__setattr__(
                self, "medium_stock_threshold", _as_int("medium_stock_threshold", self.medium_stock_threshold)
            )
        object.__setattr__(self, "port", _as_int("port", self.port, minimum=1))
        object.__setattr__(self, "log_level", str(self.log_level).upper())
        object.__setattr__(self, "log_json", _as_bool("log_json", self.log_json))


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from PRICEBOOK_* variables; unknown variables are ignored."""
    known = {f.name for f in fields(Settings)}
    values = Config.load_from_env("PRICEBOOK_", environ=environ)
    return Settings(**{k: v for k, v in values.items() if k in known})
