"""Parse hierarchical tag strings.

Tags encode a hierarchy with ``|``: ``"Pet Store | Pets"`` places an operation
under ``Pet Store`` -> ``Pets``.  Whitespace around the separator is
insignificant (``"auth|login"``, ``"auth | login"`` and ``"auth  |login"``
are the same chain); whitespace inside a segment name is kept.

This is the only place the convention lives.  The indexer, the lookup layer
and the CLI all go through :func:`split_tag` and :func:`join_tag`.
"""

from __future__ import annotations

import re
from typing import Any

SEPARATOR = "|"
DISPLAY_SEPARATOR = " | "

UNTAGGED = "Untagged"
WEBHOOKS = "Webhooks"

_SEPARATOR_RE = re.compile(r"\s*\|\s*")


def split_tag(tag: str, fallback: str = UNTAGGED) -> list[str]:
    """Split *tag* into trimmed, non-empty segments.

    Args:
        tag: A raw tag string such as ``"Pet Store | Pets"``.
        fallback: Segment used when the tag has no non-empty segment.

    Returns:
        The segment chain, never empty.

    Example::

        >>> split_tag(" Pet Store |Pets ")
        ['Pet Store', 'Pets']
        >>> split_tag(" | ")
        ['Untagged']
    """
    normalized = _SEPARATOR_RE.sub(SEPARATOR, tag)
    segments = [part.strip() for part in normalized.split(SEPARATOR)]
    segments = [part for part in segments if part]
    return segments or [fallback]


def join_tag(segments: list[str]) -> str:
    """Join segments into the display form used for ``TagNode.full_path``."""
    return DISPLAY_SEPARATOR.join(segments)


def operation_tag_chains(operation: dict[str, Any], webhook: bool = False) -> list[list[str]]:
    """Return the distinct segment chains an operation is filed under.

    Operations without tags (missing or empty list) go under ``Untagged``.
    Webhook operations are prefixed with a ``Webhooks`` segment; a webhook tag
    that is empty after normalization collapses to just ``Webhooks``.
    Non-string tags are ignored.
    """
    raw_tags = operation.get("tags")
    if isinstance(raw_tags, str):
        raw_tags = [raw_tags]
    elif not isinstance(raw_tags, list):
        raw_tags = []
    tags = [t for t in raw_tags if isinstance(t, str)]
    if not tags:
        tags = [UNTAGGED]

    fallback = WEBHOOKS if webhook else UNTAGGED
    chains: list[list[str]] = []
    for tag in tags:
        raw = f"{WEBHOOKS} {SEPARATOR} {tag}" if webhook else tag
        chain = split_tag(raw, fallback)
        if chain not in chains:
            chains.append(chain)
    return chains
