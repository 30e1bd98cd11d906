"""Configuration for the export engine."""

from parksys.config.settings import (
    ExportSettings,
    LoggingSettings,
    OrganizationSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "ExportSettings",
    "LoggingSettings",
    "OrganizationSettings",
    "get_settings",
    "reset_settings",
]
