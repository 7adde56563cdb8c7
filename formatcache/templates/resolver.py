"""Tiered template resolution backed by the weighted content cache.

A template path is looked up, in order, under:

1. the formatter directory
2. the schema directory
3. the formatter plugin directory of each parent schema, following the
   ``depends_on`` declarations
4. the root formatter directory

Outside development mode the cache is consulted for every tier before
any file is touched. In development mode reads always go to disk. Either
way the text of the file that wins is written back into the cache.
"""

import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from formatcache.config.models.cache import TemplateCacheConfig
from formatcache.observability.logging import get_logger
from formatcache.observability.metrics import (
    TEMPLATE_CACHE_HITS,
    TEMPLATE_CACHE_MISSES,
    TEMPLATE_NOT_FOUND,
    TEMPLATE_RESOLVE_LATENCY,
)
from formatcache.templates.dependencies import (
    DependencyConfigLoader,
    SchemaDirectoryLookup,
    TomlDependencyConfigLoader,
)
from formatcache.templates.exceptions import SchemaDependencyCycleError, TemplateNotFoundError
from formatcache.templates.models import ResolvedFile
from formatcache.templates.weighted_cache import WeightedContentCache

logger = get_logger(__name__)

DevModeFlag = bool | Callable[[], bool]


def canonical_path(file: Path) -> str:
    """Absolute, normalized form of ``file`` used as the cache key."""
    return str(Path(file).resolve())


class TemplateCache:
    """Resolves template files across tiers and caches their content.

    Only one resolution runs at a time in the process: ``resolve`` holds a
    lock shared by all instances for its whole look-up-then-populate
    sequence, even though the content cache is safe for concurrent use.
    """

    _resolve_lock = threading.Lock()

    def __init__(
        self,
        config: TemplateCacheConfig,
        schema_lookup: SchemaDirectoryLookup,
        dev_mode: DevModeFlag = False,
        config_loader: DependencyConfigLoader | None = None,
        *,
        record_metrics: bool = True,
    ) -> None:
        self.config = config
        self._schema_lookup = schema_lookup
        self._dev_mode = dev_mode
        self._config_loader = config_loader or TomlDependencyConfigLoader(config.dependency_file)
        self._record_metrics = record_metrics
        self._cache = WeightedContentCache(
            config.max_size_kb,
            config.concurrency_level,
            record_metrics=record_metrics,
        )

    @property
    def cache(self) -> WeightedContentCache:
        return self._cache

    def is_dev_mode(self) -> bool:
        if callable(self._dev_mode):
            return bool(self._dev_mode())
        return self._dev_mode

    def resolve(
        self,
        formatter_dir: Path,
        schema_dir: Path | None,
        root_formatter_dir: Path,
        path: str,
        substitutions: Mapping[str, Any] | None = None,
    ) -> ResolvedFile:
        """Find the file backing ``path`` and return it with its content.

        Raises:
            TemplateNotFoundError: If no tier contains the file.
            SchemaDependencyCycleError: If parent schema declarations loop.
            OSError: If the selected file cannot be read.
        """
        substitutions = dict(substitutions or {})
        with self._resolve_lock:
            if not self._record_metrics:
                return self._resolve(formatter_dir, schema_dir, root_formatter_dir, path, substitutions)
            with TEMPLATE_RESOLVE_LATENCY.time():
                return self._resolve(formatter_dir, schema_dir, root_formatter_dir, path, substitutions)

    def _resolve(
        self,
        formatter_dir: Path,
        schema_dir: Path | None,
        root_formatter_dir: Path,
        path: str,
        substitutions: dict[str, Any],
    ) -> ResolvedFile:
        from_parent_schema: Path | None = None

        if not self.is_dev_mode():
            candidates: list[tuple[str, Path | None]] = [
                ("formatter", Path(formatter_dir) / path),
                ("schema", Path(schema_dir) / path if schema_dir is not None else None),
            ]
            for tier, file in candidates:
                hit = self._cached(tier, file, substitutions)
                if hit is not None:
                    return hit

            from_parent_schema = self._from_parent_schema(formatter_dir, schema_dir, path)
            hit = self._cached("parent", from_parent_schema, substitutions)
            if hit is not None:
                return hit

            hit = self._cached("root", Path(root_formatter_dir) / path, substitutions)
            if hit is not None:
                return hit

        file = Path(formatter_dir) / path
        if not file.exists() and schema_dir is not None:
            file = Path(schema_dir) / path

        if not file.exists():
            if from_parent_schema is None:
                from_parent_schema = self._from_parent_schema(formatter_dir, schema_dir, path)
            if from_parent_schema is not None:
                file = from_parent_schema

        if not file.exists():
            file = Path(root_formatter_dir) / path

        if not file.exists():
            if self._record_metrics:
                TEMPLATE_NOT_FOUND.inc()
            logger.warning("template_not_found", path=path, formatter_dir=str(formatter_dir))
            raise TemplateNotFoundError(
                path, [formatter_dir, schema_dir, from_parent_schema, root_formatter_dir]
            )

        template = file.read_text(encoding=self.config.encoding)
        self._cache.put(canonical_path(file), template)
        if self._record_metrics:
            TEMPLATE_CACHE_MISSES.inc()
        logger.debug("template_loaded_from_disk", file=str(file), size=len(template))

        return ResolvedFile(file=file, content=template, substitutions=substitutions)

    def _cached(
        self, tier: str, file: Path | None, substitutions: dict[str, Any]
    ) -> ResolvedFile | None:
        if file is None:
            return None
        template = self._cache.get(canonical_path(file))
        if template is None:
            return None
        if self._record_metrics:
            TEMPLATE_CACHE_HITS.labels(tier=tier).inc()
        logger.debug("template_cache_hit", tier=tier, file=str(file))
        return ResolvedFile(file=file, content=template, substitutions=substitutions)

    def _from_parent_schema(
        self, formatter_dir: Path | None, schema_dir: Path | None, path: str
    ) -> Path | None:
        """Walk the ``depends_on`` chain looking for ``path``.

        Returns the first existing file under a parent schema's formatter
        directory, or None once a schema declares no further dependency.
        """
        if formatter_dir is not None:
            dependency_config = self._config_loader.load(formatter_dir, True, schema_dir)
        else:
            dependency_config = self._config_loader.load(schema_dir, False)

        chain: list[str] = []
        visited: set[str] = set()
        while True:
            schema_name = dependency_config.depends_on()
            if schema_name is None:
                return None

            chain.append(schema_name)
            parent_schema = Path(self._schema_lookup(schema_name)) / self.config.formatter_subdir
            key = canonical_path(parent_schema)
            if key in visited:
                raise SchemaDependencyCycleError(chain)
            visited.add(key)

            file = parent_schema / path
            logger.debug("template_parent_schema_checked", schema=schema_name, file=str(file))
            if file.exists():
                return file

            dependency_config = self._config_loader.load(parent_schema, False)
