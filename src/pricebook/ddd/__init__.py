"""DDD building blocks: command/query markers and DomainModule."""
from pricebook.ddd.commands import Command, Query
from pricebook.ddd.domain_module import DomainModule

__all__ = ["Command", "Query", "DomainModule"]
