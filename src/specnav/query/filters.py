"""Filter a tag tree by HTTP method and security.

Filtering never mutates its input.  Surviving nodes are rebuilt as new
:class:`~specnav.indexer.tree.TagNode` objects, so a caller holding the
unfiltered tree is unaffected.  Nodes left with no operations and no children
are dropped; when nothing survives the result is ``None``.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from specnav.indexer.tree import OperationEntry, TagNode
from specnav.models import SecurityMode

PrivacyCheck = Callable[[str, str], bool]


def prune_tree(node: TagNode, keep: Callable[[OperationEntry], bool]) -> Optional[TagNode]:
    """Return a copy of *node* holding only entries accepted by *keep*.

    Ancestors of surviving entries are kept; every other node is dropped.
    """
    operations = [entry for entry in node.operations if keep(entry)]
    children: dict[str, TagNode] = {}
    for name, child in node.children.items():
        pruned = prune_tree(child, keep)
        if pruned is not None:
            children[name] = pruned

    if not operations and not children:
        return None
    return TagNode(
        name=node.name,
        full_path=node.full_path,
        children=children,
        operations=operations,
    )


def filter_tree_by_security_and_methods(
    node: TagNode,
    methods: Iterable[str],
    mode: SecurityMode | str = SecurityMode.ALL,
    is_private: Optional[PrivacyCheck] = None,
) -> Optional[TagNode]:
    """Keep operations whose method is selected and whose privacy matches *mode*.

    Args:
        node: The tree (or subtree) to filter.
        methods: Allowed HTTP methods, any case.
        mode: ``all``, ``private`` or ``public``.
        is_private: ``(method, path) -> bool``; required unless *mode* is
            ``all``.  :meth:`specnav.workspace.Workspace.is_private` fits.

    Returns:
        The pruned copy, or ``None`` if nothing matches.

    Raises:
        ValueError: If *mode* needs a privacy check and none was given.
    """
    mode = SecurityMode(mode)
    if mode is not SecurityMode.ALL and is_private is None:
        raise ValueError(f"security mode {mode.value!r} requires a privacy check")
    allowed = {m.upper() for m in methods}

    def keep(entry: OperationEntry) -> bool:
        if entry.method not in allowed:
            return False
        if mode is SecurityMode.ALL:
            return True
        private = is_private(entry.method, entry.path)
        return private if mode is SecurityMode.PRIVATE else not private

    return prune_tree(node, keep)
