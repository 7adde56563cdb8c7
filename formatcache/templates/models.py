"""Template resolution result models."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResolvedFile(BaseModel):
    """A template file bound to its text and the caller's substitutions."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file: Path = Field(..., description="Location of the winning template file")
    content: str = Field(..., description="Full text of the template")
    substitutions: dict[str, Any] = Field(
        default_factory=dict,
        description="Caller-supplied substitutions, passed through unmodified",
    )


class CacheStats(BaseModel):
    """Point-in-time counters of a weighted content cache."""

    hits: int = Field(default=0, ge=0)
    misses: int = Field(default=0, ge=0)
    evictions: int = Field(default=0, ge=0)
    entries: int = Field(default=0, ge=0)
    weight: int = Field(default=0, ge=0)
