"""Parent schema declarations and schema directory lookup.

A formatter or schema directory may carry a small TOML file naming the
schema it depends on::

    depends_on = "iso19139"

Templates missing from a directory are then looked up in the formatter
plugin directory of that schema, and so on up the chain.
"""

import tomllib
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from formatcache.config.loader import deep_merge
from formatcache.templates.exceptions import SchemaNotFoundError

DEPENDS_ON_KEYS = ("depends_on", "dependsOn")

SchemaDirectoryLookup = Callable[[str], Path]


@dataclass(frozen=True)
class DependencyConfig:
    """Parsed dependency-declaring file of one directory."""

    directory: Path | None
    values: dict[str, Any] = field(default_factory=dict)

    def depends_on(self) -> str | None:
        """Name of the schema this directory depends on, if any."""
        for key in DEPENDS_ON_KEYS:
            value = self.values.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None


class DependencyConfigLoader(ABC):
    """Loads the dependency declaration of a formatter or schema directory."""

    @abstractmethod
    def load(
        self,
        directory: Path | None,
        formatter_scoped: bool,
        schema_dir: Path | None = None,
    ) -> DependencyConfig:
        """Load the declaration for ``directory``.

        In formatter scope ``schema_dir`` is the schema directory the
        formatter belongs to and may supply defaults.
        """
        pass


class TomlDependencyConfigLoader(DependencyConfigLoader):
    """Reads ``<directory>/<file_name>`` with tomllib.

    A missing file is an empty declaration. A malformed file raises
    ``tomllib.TOMLDecodeError``.
    """

    def __init__(self, file_name: str = "config.toml") -> None:
        self.file_name = file_name

    def load(
        self,
        directory: Path | None,
        formatter_scoped: bool,
        schema_dir: Path | None = None,
    ) -> DependencyConfig:
        values = self._read(directory)
        if formatter_scoped and schema_dir is not None:
            values = deep_merge(self._read(schema_dir), values)
        return DependencyConfig(directory=directory, values=values)

    def _read(self, directory: Path | None) -> dict[str, Any]:
        if directory is None:
            return {}
        config_file = Path(directory) / self.file_name
        if not config_file.is_file():
            return {}
        with config_file.open("rb") as f:
            return tomllib.load(f)


class MappingSchemaLookup:
    """Schema directory lookup backed by a name -> directory mapping."""

    def __init__(self, schemas: Mapping[str, Path | str]) -> None:
        self._schemas = {name: Path(path) for name, path in schemas.items()}

    def __call__(self, schema_name: str) -> Path:
        try:
            return self._schemas[schema_name]
        except KeyError:
            raise SchemaNotFoundError(schema_name) from None

    def __contains__(self, schema_name: object) -> bool:
        return schema_name in self._schemas
