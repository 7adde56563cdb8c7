"""Template cache exception hierarchy.

Configuration errors are raised once, while the cache is built.
Not-found errors reach the caller of a resolution with every location
that was tried. I/O and artifact parsing errors are not wrapped.
"""

from collections.abc import Sequence
from pathlib import Path


class TemplateCacheError(Exception):
    """Base exception for template cache errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CacheConfigurationError(TemplateCacheError):
    """Raised when the configured cache size yields an unusable capacity."""

    def __init__(self, message: str, max_size_kb: int) -> None:
        super().__init__(message)
        self.max_size_kb = max_size_kb


class TemplateNotFoundError(TemplateCacheError, FileNotFoundError):
    """Raised when no tier holds the requested template."""

    def __init__(self, path: str, tried: Sequence[Path | None]) -> None:
        self.path = path
        self.tried = list(tried)
        formatter_dir, schema_dir, parent_candidate, root_dir = self.tried
        message = (
            f"There is no file: {path} in any of: \n"
            f"\t * {formatter_dir}\n"
            f"\t * {schema_dir}\n"
            f"\t * if parent exists: {parent_candidate}\n"
            f"\t * {root_dir}"
        )
        super().__init__(message)


class SchemaNotFoundError(TemplateCacheError, LookupError):
    """Raised when a schema name has no known directory."""

    def __init__(self, schema_name: str) -> None:
        super().__init__(f"No such schema: {schema_name}")
        self.schema_name = schema_name


class SchemaDependencyCycleError(TemplateCacheError):
    """Raised when parent schema declarations loop back on themselves."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        super().__init__("Cyclic schema dependency: " + " -> ".join(self.chain))
