"""Template file resolution and caching.

    from formatcache.templates import TemplateCache, MappingSchemaLookup

    cache = TemplateCache(settings.cache, MappingSchemaLookup(schemas))
    resolved = cache.resolve(formatter_dir, schema_dir, root_dir, "view.html")
"""

from formatcache.templates.dependencies import (
    DependencyConfig,
    DependencyConfigLoader,
    MappingSchemaLookup,
    TomlDependencyConfigLoader,
)
from formatcache.templates.exceptions import (
    CacheConfigurationError,
    SchemaDependencyCycleError,
    SchemaNotFoundError,
    TemplateCacheError,
    TemplateNotFoundError,
)
from formatcache.templates.factory import build_template_cache, configure_observability
from formatcache.templates.models import CacheStats, ResolvedFile
from formatcache.templates.resolver import TemplateCache, canonical_path
from formatcache.templates.weighted_cache import WeightedContentCache, compute_capacity

__all__ = [
    "CacheConfigurationError",
    "CacheStats",
    "DependencyConfig",
    "DependencyConfigLoader",
    "MappingSchemaLookup",
    "ResolvedFile",
    "SchemaDependencyCycleError",
    "SchemaNotFoundError",
    "TemplateCache",
    "TemplateCacheError",
    "TemplateNotFoundError",
    "TomlDependencyConfigLoader",
    "WeightedContentCache",
    "build_template_cache",
    "canonical_path",
    "compute_capacity",
    "configure_observability",
]
