"""Template cache configuration models."""

from pydantic import BaseModel, Field


class TemplateCacheConfig(BaseModel):
    """Tunables for the weighted template content cache.

    `max_size_kb` is not range-checked here; the cache validates the
    derived capacity at construction so the error can report the
    maximum allowed value.
    """

    max_size_kb: int = Field(
        default=100000,
        description="Soft cap on total cached template text, in KB",
    )
    concurrency_level: int = Field(
        default=4,
        gt=0,
        description="Number of independently locked cache shards",
    )
    dependency_file: str = Field(
        default="config.toml",
        min_length=1,
        description="File declaring the parent schema of a formatter/schema directory",
    )
    formatter_subdir: str = Field(
        default="formatter",
        min_length=1,
        description="Formatter plugin directory inside a schema directory",
    )
    encoding: str = Field(
        default="utf-8",
        description="Character encoding used to read template files",
    )
