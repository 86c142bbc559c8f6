"""Pricing bounded context: PriceEntry aggregate, use cases, adapters."""
