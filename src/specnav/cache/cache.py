"""Disk-based cache for OpenAPI documents fetched over HTTP.

Uses :mod:`diskcache` to persist parsed documents on the filesystem with a
configurable time-to-live (TTL), so that exploring a remote spec repeatedly
does not refetch it on every command.

Cache keys are SHA-256 hashes of the source URL.

See Also:
    :class:`~specnav.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Optional

import diskcache

from specnav.models import CacheConfig

logger = logging.getLogger(__name__)


class SpecCache:
    """Disk-backed cache of parsed documents keyed by URL.

    Args:
        cache_dir: Root directory for the cache.  A ``specs/`` subdirectory
            is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = SpecCache("/tmp/specnav-cache", CacheConfig(ttl_seconds=600))
        cache.set("https://example.com/openapi.json", document)
        hit = cache.get("https://example.com/openapi.json")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "specs"))

    def get(self, source: str) -> Optional[dict[str, Any]]:
        """Return the cached document for *source*, or ``None``."""
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(source))

    def set(self, source: str, document: dict[str, Any]) -> None:
        """Store *document* for *source* with the configured TTL."""
        if self._cache is None:
            return
        self._cache.set(self._make_key(source), document, expire=self._config.ttl_seconds)
        logger.debug("Cached spec from %s for %ss", source, self._config.ttl_seconds)

    def invalidate(self, source: str) -> None:
        """Remove the entry for *source*."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(source))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return ``enabled`` and, when enabled, ``size``, ``directory`` and ``ttl_seconds``."""
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "specs"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()

    def __enter__(self) -> SpecCache:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _make_key(source: str) -> str:
        return hashlib.sha256(source.encode()).hexdigest()
