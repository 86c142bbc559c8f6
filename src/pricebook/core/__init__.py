from pricebook.core.app import Application
from pricebook.core.container import Container
from pricebook.core.module import Module
from pricebook.core.config import Config, Settings, load_settings
from pricebook.core.logging_config import configure_logging

__all__ = [
    "Application",
    "Container",
    "Module",
    "Config",
    "Settings",
    "load_settings",
    "configure_logging",
]
