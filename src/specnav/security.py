"""Effective security resolution for operations.

OpenAPI lets ``security`` be declared at three levels.  The first level that
declares it wins, in this order:

1. the operation,
2. the path item,
3. the document.

The winning value is used as-is; levels are never merged.  An explicit empty
list (``security: []``) is a real declaration meaning "no authentication", so
it overrides any non-empty requirement further up.

:class:`PrivacyCache` memoizes the private/public verdict per
``(METHOD, path)`` for a list of documents.  It is an ordinary object owned by
a :class:`~specnav.workspace.Workspace`; clear it whenever the documents
change.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

SecurityRequirements = list[dict[str, list[str]]]


def effective_security(
    operation: dict[str, Any],
    path_item: Optional[dict[str, Any]],
    document: Optional[dict[str, Any]],
) -> Optional[SecurityRequirements]:
    """Return the security requirements that apply to *operation*.

    Returns:
        The first of ``operation.security``, ``path_item.security`` and
        ``document.security`` that is declared (possibly an empty list), or
        ``None`` when no level declares security.

    Example::

        >>> effective_security({"security": []}, {"security": [{"apiKey": []}]}, {})
        []
    """
    for level in (operation, path_item, document):
        if isinstance(level, dict):
            security = level.get("security")
            if security is not None:
                return security
    return None


def is_private(
    operation: dict[str, Any],
    path_item: Optional[dict[str, Any]],
    document: Optional[dict[str, Any]],
) -> bool:
    """``True`` when the effective security is a non-empty list."""
    security = effective_security(operation, path_item, document)
    return bool(security)


def security_scheme_names(requirements: Optional[SecurityRequirements]) -> list[str]:
    """List the distinct scheme names referenced by *requirements*, in order."""
    names: list[str] = []
    for requirement in requirements or []:
        if not isinstance(requirement, dict):
            continue
        for name in requirement:
            if name not in names:
                names.append(name)
    return names


def find_path_item(
    path: str,
    documents: Sequence[dict[str, Any]],
    method: Optional[str] = None,
) -> Optional[tuple[dict[str, Any], dict[str, Any]]]:
    """Locate *path* in ``paths`` (then ``webhooks``) of the first document that has it.

    With *method*, documents whose path item has no such operation are
    skipped, so ``POST /pets`` is found in a later document even when an
    earlier one only declares ``GET /pets``.

    Returns:
        ``(document, path_item)`` or ``None``.
    """
    for section in ("paths", "webhooks"):
        for document in documents:
            items = document.get(section)
            if not isinstance(items, dict):
                continue
            path_item = items.get(path)
            if not isinstance(path_item, dict):
                continue
            if method is None or isinstance(path_item.get(method.lower()), dict):
                return document, path_item
    return None


class PrivacyCache:
    """Memoized privacy checks keyed by ``(METHOD, path)``.

    Two maps are kept: the verdict per operation and the located
    ``(document, path_item)`` per operation.  Both are scoped to this instance.

    Example::

        cache = PrivacyCache()
        cache.is_private("GET", "/pets", [document])
        cache.clear()  # after the documents change
    """

    def __init__(self) -> None:
        self._privacy: dict[tuple[str, str], bool] = {}
        self._path_items: dict[tuple[str, str], Optional[tuple[dict[str, Any], dict[str, Any]]]] = {}

    def is_private(self, method: str, path: str, documents: Sequence[dict[str, Any]]) -> bool:
        """Return whether ``METHOD path`` requires authentication.

        Operations that cannot be found in any document are reported public.
        """
        key = (method.upper(), path)
        if key in self._privacy:
            return self._privacy[key]

        if key in self._path_items:
            located = self._path_items[key]
        else:
            located = find_path_item(path, documents, method)
            self._path_items[key] = located

        result = False
        if located is not None:
            document, path_item = located
            result = is_private(path_item[method.lower()], path_item, document)
        else:
            logger.debug("No %s operation at %s", key[0], path)

        self._privacy[key] = result
        return result

    def invalidate(self, method: str, path: str) -> None:
        """Forget the verdict and the located path item for one operation."""
        key = (method.upper(), path)
        self._privacy.pop(key, None)
        self._path_items.pop(key, None)

    def clear(self) -> None:
        """Forget everything."""
        self._privacy.clear()
        self._path_items.clear()

    def __len__(self) -> int:
        return len(self._privacy)
