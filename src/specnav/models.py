"""Canonical Pydantic models shared across specnav modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`CacheConfig`, :class:`ExplorerConfig`
    and :class:`GlobalConfig`.

**Persistence models** -- records written by the favorites store:
    :class:`FavoriteEndpoint`.

Plus the two enums used throughout the query layer, :class:`HTTPMethod` and
:class:`SecurityMode`.

The tag tree itself (:class:`~specnav.indexer.tree.TagNode`) is a plain
dataclass rather than a Pydantic model: it holds raw operation mappings by
identity, and validation would copy them.
"""

from __future__ import annotations

import enum
import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Declaration order is the order in which the indexer visits method slots.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"
    TRACE = "trace"


class SecurityMode(str, enum.Enum):
    """Which operations survive the security filter."""

    ALL = "all"
    PRIVATE = "private"
    PUBLIC = "public"


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class CacheConfig(BaseModel):
    """Remote spec cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Cache specs fetched over HTTP")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")


class ExplorerConfig(BaseModel):
    """Default filters applied by ``specnav tree`` when no flags are given."""

    methods: list[str] = Field(
        default_factory=lambda: [m.value.upper() for m in HTTPMethod],
        description="HTTP methods shown in the tree",
    )
    security: SecurityMode = Field(
        default=SecurityMode.ALL, description="Security filter: all, private, public"
    )

    @field_validator("methods")
    @classmethod
    def _upper_methods(cls, value: list[str]) -> list[str]:
        return [m.upper() for m in value]


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specnav/config.json``.

    Loaded and saved by :func:`~specnav.config.load_global_config` and
    :func:`~specnav.config.save_global_config`. Environment variables and CLI
    flags override it; see :func:`~specnav.config.resolve_config`.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    explorer: ExplorerConfig = Field(default_factory=ExplorerConfig)


# --- Favorites ---


class FavoriteEndpoint(BaseModel):
    """A bookmarked operation, identified by method, path and spec source.

    The ``id`` is ``"<METHOD>:<path>:<source>"`` so that the same endpoint in
    two different specs can be bookmarked independently.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    method: str
    path: str
    source: Optional[str] = None
    spec_title: Optional[str] = None
    summary: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)

    @staticmethod
    def make_id(method: str, path: str, source: Optional[str] = None) -> str:
        """Build the identifier used to key a favorite."""
        return f"{method.upper()}:{path}:{source or 'unknown'}"
