"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and explicit overrides.

Usage:
    from autolocate.config import get_settings, load_config

    # Get global settings (loaded once)
    settings = get_settings()

    # Or load fresh settings with overrides
    settings = load_config(browser={"headless": True})

Environment Variables:
    AUTOLOCATE__BROWSER__HEADLESS=true
    AUTOLOCATE__RESOLVER__FIELD_SCORE_THRESHOLD=30
    AUTOLOCATE__HARNESS__INTERACTIVE_ON_FAILURE=true
    STEP_DELAY_MS=250
    STEP_CONFIRM=1
"""

from autolocate.config.settings import (
    Settings,
    BrowserSettings,
    ReadinessSettings,
    ResolverSettings,
    HarnessSettings,
    LoggingSettings,
)
from autolocate.config.loader import ConfigLoader, load_config, step_env_overrides

# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "ReadinessSettings",
    "ResolverSettings",
    "HarnessSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "step_env_overrides",
    "get_settings",
    "reset_settings",
]
