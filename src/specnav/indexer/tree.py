"""Build the tag tree from OpenAPI documents.

This is the indexing core of specnav.  It walks every operation under
``paths`` (and ``webhooks`` for OpenAPI 3.1) and files it under the node
chain named by each of its tags.

**Algorithm summary**

1. For each path item, visit the eight HTTP method slots in a fixed order.
2. Derive the operation's tag chains via
   :func:`~specnav.indexer.tags.operation_tag_chains` (``Untagged`` when it
   has none, ``Webhooks | ...`` for webhooks).
3. Walk from the root, creating one :class:`TagNode` per missing segment.
4. Append an :class:`OperationEntry` to the *deepest* node only, unless an
   entry with the same method, path and effective operation id is already
   there.

Operations are stored raw: any ``$ref`` inside them is left for a
:class:`~specnav.parser.resolver.RefResolver` to resolve when read.

Several documents are indexed separately and grafted under one synthetic node
per document title; two documents with the same title share that node and
their subtrees are merged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from specnav.indexer.tags import join_tag, operation_tag_chains
from specnav.models import HTTPMethod

logger = logging.getLogger(__name__)

ROOT_NAME = "root"
DEFAULT_TITLE = "Untitled API"


@dataclass
class OperationEntry:
    """One operation filed at a tag node."""

    method: str
    path: str
    operation: dict[str, Any] = field(repr=False)
    webhook: bool = False

    @property
    def operation_id(self) -> str:
        """``operationId`` when present, else a deterministic ``"<METHOD> <path>"``."""
        op_id = self.operation.get("operationId")
        if isinstance(op_id, str) and op_id:
            return op_id
        return f"{self.method} {self.path}"

    @property
    def key(self) -> tuple[str, str, str]:
        """Deduplication key: method, path and effective operation id."""
        return (self.method, self.path, self.operation_id)


@dataclass
class TagNode:
    """A node in the tag tree.

    ``children`` preserves insertion order.  ``operations`` holds only the
    entries filed at this exact node, never those of descendants.
    """

    name: str
    full_path: str = ""
    children: dict[str, TagNode] = field(default_factory=dict)
    operations: list[OperationEntry] = field(default_factory=list)

    def child(self, name: str) -> TagNode:
        """Return the child called *name*, creating it if missing."""
        node = self.children.get(name)
        if node is None:
            full_path = join_tag([self.full_path, name]) if self.full_path else name
            node = TagNode(name=name, full_path=full_path)
            self.children[name] = node
        return node

    def add_operation(self, entry: OperationEntry) -> bool:
        """Append *entry* unless an entry with the same key is present.

        Returns:
            ``True`` if the entry was added.
        """
        key = entry.key
        if any(existing.key == key for existing in self.operations):
            return False
        self.operations.append(entry)
        return True

    def is_empty(self) -> bool:
        """``True`` when the node holds no operations and no children."""
        return not self.operations and not self.children

    def operation_count(self) -> int:
        """Number of entries in this node and all descendants."""
        return len(self.operations) + sum(c.operation_count() for c in self.children.values())


def new_root() -> TagNode:
    """Return an empty root node."""
    return TagNode(name=ROOT_NAME, full_path="")


def document_title(document: dict[str, Any]) -> str:
    """Display title of a document (``info.title``), with a fallback."""
    info = document.get("info")
    if isinstance(info, dict):
        title = info.get("title")
        if isinstance(title, str) and title.strip():
            return title.strip()
    return DEFAULT_TITLE


def index_document(document: dict[str, Any], root: Optional[TagNode] = None) -> TagNode:
    """Index every operation of *document* into a tag tree.

    Args:
        document: A parsed OpenAPI document.
        root: Tree to add to.  A fresh root is created when omitted; passing
            an existing tree is idempotent for operations it already holds.

    Returns:
        The root node.

    Example::

        root = index_document({"openapi": "3.0.3", "paths": {
            "/pets": {"get": {"tags": ["Pet Store | Pets"], "operationId": "listPets"}},
        }})
        root.children["Pet Store"].children["Pets"].operations[0].method  # "GET"
    """
    if root is None:
        root = new_root()

    added = 0
    for section, webhook in (("paths", False), ("webhooks", True)):
        items = document.get(section)
        if not isinstance(items, dict):
            continue
        for path, path_item in items.items():
            if not isinstance(path_item, dict):
                continue
            added += _index_path_item(root, str(path), path_item, webhook)

    logger.debug("Indexed %d operations", added)
    return root


def _index_path_item(root: TagNode, path: str, path_item: dict[str, Any], webhook: bool) -> int:
    added = 0
    for method in HTTPMethod:
        operation = path_item.get(method.value)
        if not isinstance(operation, dict):
            continue
        for chain in operation_tag_chains(operation, webhook):
            node = root
            for segment in chain:
                node = node.child(segment)
            entry = OperationEntry(
                method=method.value.upper(),
                path=path,
                operation=operation,
                webhook=webhook,
            )
            if node.add_operation(entry):
                added += 1
    return added


def merge_trees(target: TagNode, source: TagNode) -> TagNode:
    """Merge *source* into *target* in place and return *target*.

    Children are unioned recursively by name and operations by
    :attr:`OperationEntry.key`.  Full paths of nodes created in *target* are
    derived from *target*'s own path, so grafting re-prefixes them.
    """
    for entry in source.operations:
        target.add_operation(entry)
    for name, child in source.children.items():
        merge_trees(target.child(name), child)
    return target


def index_documents(documents: Iterable[tuple[str, dict[str, Any]]]) -> TagNode:
    """Index several documents under one synthetic node per title.

    Args:
        documents: ``(title, document)`` pairs.  Use :func:`document_title`
            to derive titles from ``info.title``.

    Returns:
        A root whose children are the title nodes.
    """
    root = new_root()
    for title, document in documents:
        merge_trees(root.child(title), index_document(document))
    return root
