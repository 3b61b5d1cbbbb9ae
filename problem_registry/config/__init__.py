"""Configuration: settings and logging."""
from problem_registry.config.settings import ServiceSettings, get_settings, reset_settings

__all__ = [
    "ServiceSettings",
    "get_settings",
    "reset_settings",
]
