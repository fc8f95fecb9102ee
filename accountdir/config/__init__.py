"""Configuration loading for the account directory.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from accountdir.config import get_settings

    settings = get_settings()
    backend = settings.storage.backend
"""

from functools import lru_cache

from accountdir.config.loader import load_config
from accountdir.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Missing TOML files are not fatal: model defaults and environment
    variables still apply. Call `get_settings.cache_clear()` to reload.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        set_toml_config({})
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
