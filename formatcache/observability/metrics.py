"""Prometheus metrics for the template cache.

Tracks cache effectiveness, eviction pressure and resolution latency.
"""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

TEMPLATE_CACHE_HITS = Counter(
    "formatcache_template_cache_hits_total",
    "Template resolutions served from the cache",
    labelnames=["tier"],
)

TEMPLATE_CACHE_MISSES = Counter(
    "formatcache_template_cache_misses_total",
    "Template resolutions that read from disk",
)

# Caches sharing a name share the eviction and weight series.
TEMPLATE_CACHE_EVICTIONS = Counter(
    "formatcache_template_cache_evictions_total",
    "Cache entries evicted to respect the weight budget",
    labelnames=["cache"],
)

TEMPLATE_CACHE_WEIGHT = Gauge(
    "formatcache_template_cache_weight",
    "Total weight of live cache entries",
    labelnames=["cache"],
)

TEMPLATE_RESOLVE_LATENCY = Histogram(
    "formatcache_template_resolve_latency_seconds",
    "Template resolution latency in seconds",
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

TEMPLATE_NOT_FOUND = Counter(
    "formatcache_template_not_found_total",
    "Template resolutions that found no file in any tier",
)


def setup_metrics() -> CollectorRegistry:
    """Initialize metrics configuration.

    Collectors register themselves on import; this is the startup hook
    and returns the registry they live in.
    """
    return REGISTRY
