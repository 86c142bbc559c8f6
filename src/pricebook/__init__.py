"""
pricebook: SKU price calculation with scheduled prices, bulk tiers and
stock-aware promotions. The application is composed from module objects via
app.register(module).
"""
from pricebook.core import Application, Container, Module, Config, Settings, load_settings

__version__ = "0.1.0"

__all__ = [
    "Application",
    "Container",
    "Module",
    "Config",
    "Settings",
    "load_settings",
]
