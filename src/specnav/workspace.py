"""Session context owning loaded documents and everything derived from them.

A :class:`Workspace` is the one place where documents, their resolvers, the
combined tag tree and the privacy cache live together.  Any change to the set
of documents discards the tree and the privacy cache, and a replaced document
gets a brand-new :class:`~specnav.parser.resolver.RefResolver`, so no value
computed from an old document can leak into answers about a new one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from specnav.indexer.tree import (
    OperationEntry,
    TagNode,
    document_title,
    index_document,
    index_documents,
    new_root,
)
from specnav.models import HTTPMethod, SecurityMode
from specnav.parser.resolver import RefResolver
from specnav.query.filters import filter_tree_by_security_and_methods
from specnav.query.lookup import find_operation
from specnav.query.search import filter_tree_by_query
from specnav.security import PrivacyCache, effective_security, find_path_item

logger = logging.getLogger(__name__)

ALL_METHODS = tuple(m.value.upper() for m in HTTPMethod)


@dataclass
class LoadedSpec:
    """A document plus the resolver bound to it."""

    source: str
    document: dict[str, Any] = field(repr=False)
    title: str = ""
    resolver: RefResolver = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.title:
            self.title = document_title(self.document)
        self.resolver = RefResolver(self.document)


class Workspace:
    """An ordered collection of loaded documents.

    Example::

        workspace = Workspace()
        workspace.add(load_spec("petstore.json"), source="petstore.json")
        tree = workspace.filtered_tree(query="pet", mode=SecurityMode.PRIVATE)
    """

    def __init__(self, specs: Optional[Iterable[LoadedSpec]] = None) -> None:
        self._specs: list[LoadedSpec] = list(specs or [])
        self._tree: Optional[TagNode] = None
        self._privacy = PrivacyCache()

    # ------------------------------------------------------------------ #
    # Document lifecycle
    # ------------------------------------------------------------------ #

    @property
    def specs(self) -> list[LoadedSpec]:
        """Loaded specs in insertion order (a copy)."""
        return list(self._specs)

    @property
    def documents(self) -> list[dict[str, Any]]:
        return [spec.document for spec in self._specs]

    def add(self, document: dict[str, Any], source: str = "", title: str = "") -> LoadedSpec:
        """Append a document and return its :class:`LoadedSpec`."""
        spec = LoadedSpec(source=source, document=document, title=title)
        self._specs.append(spec)
        logger.debug("Added spec %r from %s", spec.title, source or "<memory>")
        self._invalidate()
        return spec

    def replace(self, index: int, document: dict[str, Any], source: Optional[str] = None) -> LoadedSpec:
        """Swap the document at *index* for a new one with a fresh resolver."""
        old = self._specs[index]
        spec = LoadedSpec(source=old.source if source is None else source, document=document)
        self._specs[index] = spec
        logger.debug("Replaced spec %r with %r", old.title, spec.title)
        self._invalidate()
        return spec

    def remove(self, index: int) -> LoadedSpec:
        spec = self._specs.pop(index)
        self._invalidate()
        return spec

    def clear(self) -> None:
        self._specs.clear()
        self._invalidate()

    def _invalidate(self) -> None:
        self._tree = None
        self._privacy.clear()

    # ------------------------------------------------------------------ #
    # Derived views
    # ------------------------------------------------------------------ #

    @property
    def tree(self) -> TagNode:
        """The tag tree, rebuilt on first access after any change.

        One document yields its own tree; several are grafted under one node
        per title.
        """
        if self._tree is None:
            if not self._specs:
                self._tree = new_root()
            elif len(self._specs) == 1:
                self._tree = index_document(self._specs[0].document)
            else:
                self._tree = index_documents((s.title, s.document) for s in self._specs)
        return self._tree

    def resolver_for(
        self, path: Optional[str] = None, index: int = 0, method: Optional[str] = None
    ) -> RefResolver:
        """Return the resolver of the spec declaring *path* (and *method*), or of spec *index*."""
        if path is not None:
            for spec in self._specs:
                if find_path_item(path, [spec.document], method) is not None:
                    return spec.resolver
        return self._specs[index].resolver

    def find_path_item(
        self, path: str, method: Optional[str] = None
    ) -> Optional[tuple[dict[str, Any], dict[str, Any]]]:
        """``(document, path_item)`` of the first spec declaring *path*.

        With *method*, only specs that declare that operation count.
        """
        return find_path_item(path, self.documents, method)

    def find_operation(self, method: str, path: str) -> Optional[OperationEntry]:
        return find_operation(self.tree, method, path)

    def is_private(self, method: str, path: str) -> bool:
        """Whether ``METHOD path`` requires authentication (memoized)."""
        return self._privacy.is_private(method, path, self.documents)

    def effective_security(self, method: str, path: str) -> Optional[list[dict[str, list[str]]]]:
        """Effective security requirements for ``METHOD path``, or ``None``."""
        located = self.find_path_item(path, method)
        if located is None:
            return None
        document, path_item = located
        return effective_security(path_item[method.lower()], path_item, document)

    def filtered_tree(
        self,
        query: str = "",
        methods: Iterable[str] = ALL_METHODS,
        mode: SecurityMode | str = SecurityMode.ALL,
    ) -> Optional[TagNode]:
        """Apply the search filter, then the method/security filter."""
        node = filter_tree_by_query(self.tree, query)
        if node is None:
            return None
        return filter_tree_by_security_and_methods(node, methods, mode, self.is_private)
