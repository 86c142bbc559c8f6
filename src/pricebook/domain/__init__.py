"""Domain layer base classes: Entity, ValueObject, Repository and the error taxonomy."""
from pricebook.domain.entity import Entity
from pricebook.domain.value_object import ValueObject
from pricebook.domain.repository import Repository
from pricebook.domain.errors import (
    AlreadyExists,
    CurrencyMismatch,
    InvalidArgument,
    NotFound,
    PricingError,
)

__all__ = [
    "Entity",
    "ValueObject",
    "Repository",
    "PricingError",
    "InvalidArgument",
    "NotFound",
    "AlreadyExists",
    "CurrencyMismatch",
]
