"""Configuration module for mljboard."""

from .settings import (
    DatabaseSettings,
    HttpSettings,
    LastfmSettings,
    RelaySettings,
    Settings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "HttpSettings",
    "LastfmSettings",
    "RelaySettings",
    "Settings",
    "get_settings",
]
