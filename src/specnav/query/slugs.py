"""Convert endpoint paths and tag paths to URL-friendly slugs.

Endpoint slugs drop the leading ``/``, lower-case static text, turn
whitespace into ``-`` and write whole-segment path parameters as ``:name``::

    /users/{id}/posts/{postId}   <->   users/:id/posts/:postId

Parameter names keep their case but static text does not, so the round trip
is exact only for paths whose static segments are already lower-case.
For those, made of alphanumeric, ``-``, ``_`` and ``{param}`` segments,
:func:`slug_to_endpoint_path` is an exact inverse of
:func:`endpoint_path_to_slug`.  ``/Users/{id}`` comes back as ``/users/{id}``.

Tag slugs identify tree nodes: ``"Pet Store | Pets"`` -> ``"pet-store/pets"``.
"""

from __future__ import annotations

import re

from specnav.indexer.tags import split_tag

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_BRACE_RE = re.compile(r"(\{[^{}]*\})")


def _is_param_segment(segment: str) -> bool:
    return len(segment) > 2 and segment.startswith("{") and segment.endswith("}")


def _segment_to_slug(segment: str) -> str:
    if _is_param_segment(segment):
        return ":" + segment[1:-1]
    # Partial templates such as "{name}.json" keep their braces verbatim.
    parts = _BRACE_RE.split(segment)
    return "".join(
        part if _BRACE_RE.fullmatch(part) else _WHITESPACE_RE.sub("-", part).lower()
        for part in parts
    )


def endpoint_path_to_slug(path: str) -> str:
    """Slugify an endpoint path template.

    Example::

        >>> endpoint_path_to_slug("/Users/{userId}/Order History")
        'users/:userId/order-history'
    """
    body = path[1:] if path.startswith("/") else path
    return "/".join(_segment_to_slug(segment) for segment in body.split("/"))


def slug_to_endpoint_path(slug: str) -> str:
    """Turn an endpoint slug back into a path template.

    Example::

        >>> slug_to_endpoint_path("users/:id/posts/:postId")
        '/users/{id}/posts/{postId}'
    """
    body = slug[1:] if slug.startswith("/") else slug
    segments = [
        "{" + segment[1:] + "}" if len(segment) > 1 and segment.startswith(":") else segment
        for segment in body.split("/")
    ]
    return "/" + "/".join(segments)


def tag_segment_slug(segment: str) -> str:
    """Slugify one tag segment (``"Pet Store"`` -> ``"pet-store"``)."""
    return _NON_ALNUM_RE.sub("-", segment.lower()).strip("-") or "-"


def tag_path_to_slug(full_path: str) -> str:
    """Slugify a node ``full_path`` (``"Pet Store | Pets"`` -> ``"pet-store/pets"``)."""
    if not full_path.strip():
        return ""
    return "/".join(tag_segment_slug(segment) for segment in split_tag(full_path))
