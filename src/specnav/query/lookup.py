"""Locate nodes and operations in a tag tree.

All searches are depth-first, visit a node before its children and children
in insertion order, and return the first match.  A miss returns ``None``.
"""

from __future__ import annotations

from typing import Iterator, Optional

from specnav.indexer.tree import OperationEntry, TagNode
from specnav.query.slugs import tag_path_to_slug


def iter_nodes(node: TagNode) -> Iterator[TagNode]:
    """Yield *node* and all its descendants, depth-first."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children.values())))


def iter_operations(node: TagNode) -> Iterator[tuple[TagNode, OperationEntry]]:
    """Yield ``(node, entry)`` for every operation in the tree."""
    for current in iter_nodes(node):
        for entry in current.operations:
            yield current, entry


def find_node_by_path(node: TagNode, full_path: str) -> Optional[TagNode]:
    """Return the first node whose ``full_path`` equals *full_path*."""
    for current in iter_nodes(node):
        if current.full_path == full_path:
            return current
    return None


def find_node_by_slug(node: TagNode, slug: str) -> Optional[TagNode]:
    """Return the first node whose slugified ``full_path`` equals *slug*.

    *slug* is normalized the same way, so ``"Pet-Store/Pets"`` and
    ``"pet-store/pets/"`` both match ``"Pet Store | Pets"``.
    """
    target = tag_path_to_slug(slug.strip("/").replace("/", " | "))
    for current in iter_nodes(node):
        if tag_path_to_slug(current.full_path) == target:
            return current
    return None


def find_operation(node: TagNode, method: str, path: str) -> Optional[OperationEntry]:
    """Return the first entry for ``METHOD path``."""
    method = method.upper()
    for _, entry in iter_operations(node):
        if entry.method == method and entry.path == path:
            return entry
    return None


def find_operation_by_id(node: TagNode, operation_id: str) -> Optional[OperationEntry]:
    """Return the first entry whose effective operation id is *operation_id*."""
    for _, entry in iter_operations(node):
        if entry.operation_id == operation_id:
            return entry
    return None
