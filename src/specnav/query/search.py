"""Free-text search over operations.

Matching is a case-insensitive substring test against an operation's method,
path, summary, description, ``operationId``, tags, parameter names and
descriptions, request body description, and response status codes and
descriptions.  Parameters, request bodies and responses given as ``$ref``
pointers are not followed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from specnav.indexer.tree import TagNode, document_title
from specnav.models import HTTPMethod
from specnav.query.filters import prune_tree


@dataclass
class SearchResult:
    """A matching operation found by :func:`search_operations`."""

    method: str
    path: str
    operation: dict[str, Any] = field(repr=False)
    spec_title: str
    spec_index: int
    tags: list[str] = field(default_factory=list)


def _normalize(text: str) -> str:
    return text.strip().lower()


def _searchable_text(operation: dict[str, Any]) -> Iterator[Any]:
    for key in ("summary", "description", "operationId"):
        yield operation.get(key)

    tags = operation.get("tags")
    if isinstance(tags, list):
        yield from tags

    parameters = operation.get("parameters")
    if isinstance(parameters, list):
        for param in parameters:
            if isinstance(param, dict):
                yield param.get("name")
                yield param.get("description")

    body = operation.get("requestBody")
    if isinstance(body, dict):
        yield body.get("description")

    responses = operation.get("responses")
    if isinstance(responses, dict):
        for status, response in responses.items():
            yield str(status)
            if isinstance(response, dict):
                yield response.get("description")


def operation_matches(operation: dict[str, Any], method: str, path: str, query: str) -> bool:
    """Return ``True`` if any searchable field of the operation contains *query*."""
    needle = _normalize(query)
    if needle in method.lower() or needle in path.lower():
        return True
    return any(
        isinstance(text, str) and needle in text.lower()
        for text in _searchable_text(operation)
    )


def filter_tree_by_query(node: TagNode, query: str) -> Optional[TagNode]:
    """Prune *node* to operations matching *query* and their ancestors.

    A blank query returns *node* itself.  Otherwise a new tree is built, or
    ``None`` is returned when nothing matches.
    """
    if not query.strip():
        return node
    return prune_tree(
        node,
        lambda entry: operation_matches(entry.operation, entry.method, entry.path, query),
    )


def search_operations(documents: Sequence[dict[str, Any]], query: str) -> list[SearchResult]:
    """Search ``paths`` of every document and return a flat list of matches.

    Results follow document order, then path order, then method slot order.
    A blank query returns no results.
    """
    if not query.strip():
        return []

    results: list[SearchResult] = []
    for index, document in enumerate(documents):
        paths = document.get("paths")
        if not isinstance(paths, dict):
            continue
        title = document_title(document)
        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            for method in HTTPMethod:
                operation = path_item.get(method.value)
                if not isinstance(operation, dict):
                    continue
                verb = method.value.upper()
                if operation_matches(operation, verb, path, query):
                    tags = operation.get("tags")
                    results.append(
                        SearchResult(
                            method=verb,
                            path=path,
                            operation=operation,
                            spec_title=title,
                            spec_index=index,
                            tags=list(tags) if isinstance(tags, list) else [],
                        )
                    )
    return results
