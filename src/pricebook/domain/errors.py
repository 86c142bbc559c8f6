"""Error taxonomy shared by the pricing domain and its use cases."""
from __future__ import annotations


class PricingError(Exception):
    """Base class for all pricing failures. `code` is stable and machine-readable."""

    code = "PRICING_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class InvalidArgument(PricingError, ValueError):
    """Malformed SKU, negative or zero money, out-of-range percentage, bad date ordering."""

    code = "INVALID_ARGUMENT"


class NotFound(PricingError, LookupError):
    code = "NOT_FOUND"


class AlreadyExists(PricingError):
    code = "ALREADY_EXISTS"


class CurrencyMismatch(PricingError, ValueError):
    code = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str) -> None:
        self.left = left
        self.right = right
        super().__init__(f"Currency mismatch: {left} vs {right}")
