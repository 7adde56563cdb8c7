"""Configuration loading for formatcache.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from formatcache.config import get_settings

    settings = get_settings()
    max_size_kb = settings.cache.max_size_kb
    dev_mode = settings.dev_mode
"""

from functools import lru_cache

from formatcache.config.loader import load_config
from formatcache.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Returns:
        Settings instance with all configuration loaded and validated
    """
    config_dict = load_config()
    set_toml_config(config_dict)

    # pydantic-settings gives env vars priority over the TOML source
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
