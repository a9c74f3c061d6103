"""Tree query and filter layer.

Everything here reads a :class:`~specnav.indexer.tree.TagNode` tree and
returns new values; nothing mutates the tree.

Sub-modules:

* :mod:`~specnav.query.search` -- free-text search.
* :mod:`~specnav.query.filters` -- method and security filters.
* :mod:`~specnav.query.slugs` -- endpoint and tag path slug codecs.
* :mod:`~specnav.query.lookup` -- node and operation lookup.
"""

from specnav.query.filters import filter_tree_by_security_and_methods, prune_tree
from specnav.query.lookup import (
    find_node_by_path,
    find_node_by_slug,
    find_operation,
    find_operation_by_id,
    iter_nodes,
    iter_operations,
)
from specnav.query.search import (
    SearchResult,
    filter_tree_by_query,
    operation_matches,
    search_operations,
)
from specnav.query.slugs import endpoint_path_to_slug, slug_to_endpoint_path, tag_path_to_slug

__all__ = [
    "SearchResult",
    "endpoint_path_to_slug",
    "filter_tree_by_query",
    "filter_tree_by_security_and_methods",
    "find_node_by_path",
    "find_node_by_slug",
    "find_operation",
    "find_operation_by_id",
    "iter_nodes",
    "iter_operations",
    "operation_matches",
    "prune_tree",
    "search_operations",
    "slug_to_endpoint_path",
    "tag_path_to_slug",
]
