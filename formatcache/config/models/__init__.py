"""Configuration model exports.

    from formatcache.config.models import TemplateCacheConfig
"""

from formatcache.config.models.cache import TemplateCacheConfig
from formatcache.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)

__all__ = [
    # Cache
    "TemplateCacheConfig",
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
]
