"""
App composition: settings, availability provider, pricing module.
To run: uvicorn --factory pricebook.main:create_app, or `pricebook serve`.
"""
from __future__ import annotations

from typing import Optional

from pricebook.core import Application, Settings, load_settings
from pricebook.pricing.domain import AvailabilityProvider, PriceEntryRepository
from pricebook.pricing.infrastructure import StaticAvailabilityProvider
from pricebook.pricing.module import pricing_module


def create_app(
    settings: Optional[Settings] = None,
    availability: Optional[AvailabilityProvider] = None,
    repository: Optional[PriceEntryRepository] = None,
) -> Application:
    settings = settings or load_settings()
    app = Application(config=settings)
    if availability is None:
        # No inventory subsystem attached: every SKU resolves to the fallback level.
        availability = StaticAvailabilityProvider(fallback=settings.availability_fallback)
    app.container.register_instance(AvailabilityProvider, availability)
    if repository is not None:
        app.container.register_instance(PriceEntryRepository, repository)
    app.register(pricing_module)
    return app
