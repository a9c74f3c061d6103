"""Bookmarked endpoints persisted as JSON.

Favorites are keyed by ``"<METHOD>:<path>:<source>"`` (see
:meth:`~specnav.models.FavoriteEndpoint.make_id`) and written with the same
atomic temp-file-then-rename strategy as the global config.  A corrupt file is
logged and treated as empty rather than blocking the CLI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from specnav.config import atomic_write, get_favorites_path
from specnav.models import FavoriteEndpoint

logger = logging.getLogger(__name__)


class FavoritesStore:
    """Load, modify and save the favorites file.

    Args:
        path: JSON file to use.  Defaults to
            :func:`~specnav.config.get_favorites_path`.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_favorites_path()
        self._items: dict[str, FavoriteEndpoint] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """(Re)read the file.  Missing or invalid files yield an empty store."""
        self._items = {}
        if not self._path.is_file():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            items = [FavoriteEndpoint.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable favorites file %s: %s", self._path, exc)
            return
        self._items = {item.id: item for item in items}

    def save(self) -> None:
        data = [item.model_dump(mode="json") for item in self._items.values()]
        atomic_write(self._path, json.dumps(data, indent=2) + "\n")

    def add(
        self,
        method: str,
        path: str,
        source: Optional[str] = None,
        spec_title: Optional[str] = None,
        summary: Optional[str] = None,
    ) -> FavoriteEndpoint:
        """Bookmark an endpoint (replacing an existing entry) and save."""
        favorite = FavoriteEndpoint(
            id=FavoriteEndpoint.make_id(method, path, source),
            method=method.upper(),
            path=path,
            source=source,
            spec_title=spec_title,
            summary=summary,
        )
        self._items[favorite.id] = favorite
        self.save()
        return favorite

    def remove(self, method: str, path: str, source: Optional[str] = None) -> bool:
        """Delete a bookmark.  Returns ``False`` if it did not exist."""
        removed = self._items.pop(FavoriteEndpoint.make_id(method, path, source), None)
        if removed is None:
            return False
        self.save()
        return True

    def remove_all(self, method: str, path: str) -> int:
        """Delete the bookmarks for ``METHOD path`` in every source.  Returns how many went."""
        verb = method.upper()
        doomed = [key for key, item in self._items.items() if item.method == verb and item.path == path]
        for key in doomed:
            del self._items[key]
        if doomed:
            self.save()
        return len(doomed)

    def toggle(self, method: str, path: str, source: Optional[str] = None, **details: Optional[str]) -> bool:
        """Add the endpoint if absent, remove it otherwise.  Returns the new state."""
        if self.is_favorite(method, path, source):
            self.remove(method, path, source)
            return False
        self.add(method, path, source, **details)
        return True

    def is_favorite(self, method: str, path: str, source: Optional[str] = None) -> bool:
        return FavoriteEndpoint.make_id(method, path, source) in self._items

    def entries(self, source: Optional[str] = None) -> list[FavoriteEndpoint]:
        """All favorites, newest first, optionally restricted to one source."""
        items = [i for i in self._items.values() if source is None or i.source == source]
        return sorted(items, key=lambda item: item.timestamp, reverse=True)

    def clear(self) -> None:
        self._items.clear()
        self.save()

    def __len__(self) -> int:
        return len(self._items)
