"""Build a TemplateCache from application settings."""

from formatcache.config import get_settings
from formatcache.config.settings import Settings
from formatcache.observability.logging import setup_logging
from formatcache.observability.metrics import setup_metrics
from formatcache.templates.dependencies import SchemaDirectoryLookup
from formatcache.templates.resolver import DevModeFlag, TemplateCache


def _settings_dev_mode() -> bool:
    return get_settings().dev_mode


def configure_observability(settings: Settings) -> None:
    """Apply the observability section: structlog output and the metrics hook."""
    logging_config = settings.observability.logging
    setup_logging(level=logging_config.level, format=logging_config.format)
    if settings.observability.metrics.enabled:
        setup_metrics()


def build_template_cache(
    settings: Settings,
    schema_lookup: SchemaDirectoryLookup,
    dev_mode: DevModeFlag | None = None,
) -> TemplateCache:
    """Create the process's TemplateCache.

    Args:
        settings: Loaded settings; the cache section sizes the cache
        schema_lookup: Maps a schema name to its directory
        dev_mode: Development-mode flag or callable. Defaults to reading
            ``get_settings().dev_mode`` on every resolution.

    Raises:
        CacheConfigurationError: If ``settings.cache.max_size_kb`` is out of range
    """
    return TemplateCache(
        settings.cache,
        schema_lookup,
        dev_mode=_settings_dev_mode if dev_mode is None else dev_mode,
        record_metrics=settings.observability.metrics.enabled,
    )
