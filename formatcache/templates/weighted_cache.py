"""Weighted, sharded LRU cache for template text.

Entries are keyed by canonical file path and weighed as
``len(key) + len(value)``. Keys are spread over a number of shards, each
guarded by its own lock, so concurrent readers only contend when their
keys land in the same shard. Every access stamps the entry from one
process-wide counter; writers share a single lock and, while the total
weight is over budget, evict whichever shard holds the oldest stamp.
"""

import itertools
import threading
from collections import OrderedDict

from formatcache.observability.logging import get_logger
from formatcache.observability.metrics import TEMPLATE_CACHE_EVICTIONS, TEMPLATE_CACHE_WEIGHT
from formatcache.templates.exceptions import CacheConfigurationError
from formatcache.templates.models import CacheStats

logger = get_logger(__name__)

# Largest capacity the weight counter may hold (signed 32-bit).
MAX_WEIGHT = 2**31 - 1

# Conservative factor applied when converting KB to weight units.
SIZE_DIVISOR = 8

_access_clock = itertools.count()


def compute_capacity(max_size_kb: int) -> int:
    """Convert a size in KB into the cache's weight capacity.

    Raises:
        CacheConfigurationError: If the capacity is below 1 or does not fit
            the weight counter.
    """
    capacity = (max_size_kb * 1024) // SIZE_DIVISOR
    if capacity > MAX_WEIGHT:
        max_allowed = (MAX_WEIGHT * SIZE_DIVISOR) // 1024
        raise CacheConfigurationError(
            f"maxSizeKB is too large: {max_size_kb} max allowed value is: {max_allowed}",
            max_size_kb,
        )
    if capacity < 1:
        raise CacheConfigurationError(f"maxSizeKB is too small: {max_size_kb}", max_size_kb)
    return capacity


def weigh(key: str, value: str) -> int:
    """Weight of a single cache entry."""
    return len(key) + len(value)


def shard_count_for(concurrency_level: int) -> int:
    """Smallest power of two covering ``concurrency_level``."""
    count = 1
    while count < concurrency_level:
        count *= 2
    return count


class _Shard:
    """One independently locked segment, kept in least-recently-used order."""

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        # key -> (value, last access stamp)
        self._entries: OrderedDict[str, tuple[str, int]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self._entries[key] = (entry[0], next(_access_clock))
            self._entries.move_to_end(key)
            self.hits += 1
            return entry[0]

    def store(self, key: str, value: str) -> str | None:
        """Insert ``key`` as most recent; return the value it replaced."""
        with self._lock:
            previous = self._entries.pop(key, None)
            self._entries[key] = (value, next(_access_clock))
            return previous[0] if previous is not None else None

    def oldest(self, exclude: str) -> tuple[int, str] | None:
        """Stamp and key of the least recent entry other than ``exclude``."""
        with self._lock:
            for key, (_, stamp) in self._entries.items():
                if key != exclude:
                    return stamp, key
            return None

    def remove(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.pop(key, None)
            return entry[0] if entry is not None else None

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class WeightedContentCache:
    """Thread-safe mapping of canonical file path to file content.

    The sum of entry weights is kept at or below ``capacity``: inserting
    past the budget evicts the least recently used entries, from any
    shard. An entry heavier than the whole capacity is still stored, alone.

    ``name`` labels this cache's weight and eviction metrics.
    """

    def __init__(
        self,
        max_size_kb: int = 100000,
        concurrency_level: int = 4,
        *,
        name: str = "templates",
        record_metrics: bool = True,
    ) -> None:
        if concurrency_level < 1:
            raise CacheConfigurationError(
                f"concurrencyLevel must be positive: {concurrency_level}", max_size_kb
            )
        self.max_size_kb = max_size_kb
        self.concurrency_level = concurrency_level
        self.capacity = compute_capacity(max_size_kb)
        self.name = name
        self.evictions = 0

        count = shard_count_for(concurrency_level)
        self._shards = [_Shard() for _ in range(count)]
        self._mask = count - 1
        self._weight = 0
        self._write_lock = threading.Lock()
        self._record_metrics = record_metrics
        if record_metrics:
            TEMPLATE_CACHE_WEIGHT.labels(cache=name).set(0)

        logger.info(
            "template_cache_initialized",
            cache=name,
            max_size_kb=max_size_kb,
            capacity=self.capacity,
            shards=count,
        )

    @property
    def shard_count(self) -> int:
        return len(self._shards)

    def _shard(self, key: str) -> _Shard:
        return self._shards[hash(key) & self._mask]

    def get(self, key: str) -> str | None:
        """Return the cached content for ``key``, or None."""
        return self._shard(key).get(key)

    def put(self, key: str, value: str) -> None:
        """Insert or overwrite ``key``, evicting stale entries as needed."""
        with self._write_lock:
            previous = self._shard(key).store(key, value)
            delta = weigh(key, value)
            if previous is not None:
                delta -= weigh(key, previous)
            self._add_weight(delta)

            while self._weight > self.capacity and not self._evict_oldest(exclude=key):
                pass

    def _evict_oldest(self, exclude: str) -> bool:
        """Drop the least recent entry other than ``exclude``.

        Returns True when nothing is left to evict.
        """
        candidates = [
            (found, shard)
            for shard in self._shards
            if (found := shard.oldest(exclude)) is not None
        ]
        if not candidates:
            return True

        (_, old_key), shard = min(candidates, key=lambda item: item[0][0])
        old_value = shard.remove(old_key)
        if old_value is not None:
            self._add_weight(-weigh(old_key, old_value))
            self.evictions += 1
            if self._record_metrics:
                TEMPLATE_CACHE_EVICTIONS.labels(cache=self.name).inc()
            logger.debug("template_cache_evicted", cache=self.name, key=old_key)
        return False

    def _add_weight(self, delta: int) -> None:
        self._weight += delta
        if self._record_metrics:
            TEMPLATE_CACHE_WEIGHT.labels(cache=self.name).set(self._weight)

    def clear(self) -> None:
        """Drop every entry."""
        with self._write_lock:
            for shard in self._shards:
                shard.clear()
            self._add_weight(-self._weight)

    @property
    def total_weight(self) -> int:
        return self._weight

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=sum(shard.hits for shard in self._shards),
            misses=sum(shard.misses for shard in self._shards),
            evictions=self.evictions,
            entries=len(self),
            weight=self.total_weight,
        )

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._shard(key).contains(key)

    def __len__(self) -> int:
        return sum(shard.size() for shard in self._shards)
