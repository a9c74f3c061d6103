"""Specification indexer -- derive the tag tree from OpenAPI documents.

Typical usage::

    from specnav.indexer import index_document, index_documents, document_title

    root = index_document(document)
    combined = index_documents((document_title(d), d) for d in documents)

Sub-modules:

* :mod:`~specnav.indexer.tags` -- the ``|``-delimited tag string parser.
* :mod:`~specnav.indexer.tree` -- :class:`~specnav.indexer.tree.TagNode`,
  single- and multi-document indexing, and tree merging.
"""

from specnav.indexer.tags import join_tag, split_tag
from specnav.indexer.tree import (
    OperationEntry,
    TagNode,
    document_title,
    index_document,
    index_documents,
    merge_trees,
)

__all__ = [
    "OperationEntry",
    "TagNode",
    "document_title",
    "index_document",
    "index_documents",
    "join_tag",
    "merge_trees",
    "split_tag",
]
