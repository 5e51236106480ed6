"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from shared.config import settings

    print(settings.environment)
    print(settings.reporting.currency_symbol)
"""

from shared.config.settings import (
    Environment,
    LogLevel,
    ReportingSettings,
    Settings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "ReportingSettings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
]
