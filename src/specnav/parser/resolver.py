"""Resolve ``$ref`` JSON Reference pointers in OpenAPI documents.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  A
:class:`RefResolver` is bound to one document and replaces every ``$ref`` in
a value, at any depth, with the fragment it points to.

Resolution never raises for problems in the document.  Instead a small
*marker* mapping is returned in place of the value:

* ``{"$ref": ref, "circular": True}`` -- the ref is already being resolved
  further up the stack (e.g. a ``Node`` schema whose ``children`` are
  ``Node`` items).
* ``{"$ref": ref, "notFound": True}`` -- the pointer does not lead anywhere.
* ``{"$ref": ref, "external": True}`` -- the ref is not document-local
  (does not start with ``#``).  External documents are not fetched.

Resolved refs are memoized by ref string and resolved containers by
identity, both for the lifetime of the resolver.  A resolver must not outlive
its document: when the document is replaced, create a new resolver (or call
:meth:`RefResolver.clear`).  Returned values may be shared between calls and
must be treated as read-only.
"""

from __future__ import annotations

import logging
from typing import Any, Generator
from urllib.parse import unquote

logger = logging.getLogger(__name__)

CIRCULAR = "circular"
NOT_FOUND = "notFound"
EXTERNAL = "external"

_MARKER_KINDS = (CIRCULAR, NOT_FOUND, EXTERNAL)


def has_ref(value: Any) -> bool:
    """Return ``True`` if *value* is a mapping carrying a string ``$ref``."""
    return isinstance(value, dict) and isinstance(value.get("$ref"), str)


def ref_name(ref: str) -> str:
    """Return the last segment of a pointer (``"#/components/schemas/Pet"`` -> ``"Pet"``)."""
    return ref.rsplit("/", 1)[-1]


def marker_kind(value: Any) -> str | None:
    """Return ``"circular"``, ``"notFound"`` or ``"external"`` for a marker, else ``None``."""
    if not has_ref(value):
        return None
    for kind in _MARKER_KINDS:
        if value.get(kind) is True:
            return kind
    return None


def is_marker(value: Any) -> bool:
    """Return ``True`` if *value* is a resolution marker."""
    return marker_kind(value) is not None


def _marker(ref: str, kind: str) -> dict[str, Any]:
    return {"$ref": ref, kind: True}


def _unescape(segment: str) -> str:
    """Decode one pointer segment (URI percent-encoding, then RFC 6901 escapes)."""
    return unquote(segment).replace("~1", "/").replace("~0", "~")


def _is_index(segment: str, items: list[Any]) -> bool:
    """ASCII decimal digits naming an existing list slot."""
    return segment.isascii() and segment.isdigit() and int(segment) < len(items)


class RefResolver:
    """Resolve ``$ref`` pointers against a single OpenAPI document.

    Args:
        document: The root document every pointer is looked up in.

    Example::

        resolver = RefResolver(document)
        schema = resolver.resolve(operation["requestBody"])
        pet = resolver.resolve_ref("#/components/schemas/Pet")
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = document
        # Refs currently on the resolution stack (the cycle guard).
        self._resolving: set[str] = set()
        # Container ids on the stack; guards against self-containing YAML aliases.
        self._active: set[int] = set()
        self._ref_cache: dict[str, Any] = {}
        # id(source) -> (source, resolved); holding the source pins its id.
        self._object_cache: dict[int, tuple[Any, Any]] = {}
        self._circular_hits: list[str] = []

    @property
    def document(self) -> dict[str, Any]:
        """The document this resolver is bound to."""
        return self._document

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def resolve(self, value: Any) -> Any:
        """Return *value* with every ``$ref`` at any depth replaced by its target.

        Primitives are returned unchanged.  A mapping with a ``$ref`` is a
        pure pointer: sibling keys are ignored and the resolved target is
        returned.  Subtrees without refs are returned by identity rather than
        copied.
        """
        if not self._resolving:
            self._circular_hits.clear()
        return self._resolve(value)

    def resolve_ref(self, ref: str) -> Any:
        """Resolve a single pointer string and everything its target references."""
        if not self._resolving:
            self._circular_hits.clear()
        return self._resolve_ref(ref)

    def clear(self) -> None:
        """Drop both caches.  Call when the underlying document changes."""
        self._ref_cache.clear()
        self._object_cache.clear()
        self._circular_hits.clear()

    def cache_info(self) -> dict[str, int]:
        """Return the number of memoized refs and containers."""
        return {"refs": len(self._ref_cache), "objects": len(self._object_cache)}

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    #
    # Each step below is a generator that yields a child value whenever it
    # needs that value resolved and receives the resolved child back.
    # ``_run`` drives them from an explicit stack, so the depth of a ref
    # chain is bounded by memory rather than the interpreter recursion limit.

    def _resolve(self, value: Any) -> Any:
        return self._run(self._visit(value))

    def _resolve_ref(self, ref: str) -> Any:
        return self._run(self._visit_ref(ref))

    def _run(self, root: Generator[Any, Any, Any]) -> Any:
        stack = [root]
        result: Any = None
        try:
            while stack:
                try:
                    child = stack[-1].send(result)
                except StopIteration as stop:
                    stack.pop()
                    result = stop.value
                else:
                    stack.append(self._visit(child))
                    result = None
        finally:
            for frame in reversed(stack):
                frame.close()
        return result

    def _visit(self, value: Any) -> Generator[Any, Any, Any]:
        if isinstance(value, dict):
            ref = value.get("$ref")
            if isinstance(ref, str):
                return (yield from self._visit_ref(ref))
            return (yield from self._visit_container(value))
        if isinstance(value, list):
            return (yield from self._visit_container(value))
        return value

    def _visit_ref(self, ref: str) -> Generator[Any, Any, Any]:
        if ref in self._resolving:
            self._circular_hits.append(ref)
            logger.debug("Circular $ref %s", ref)
            return _marker(ref, CIRCULAR)

        if ref in self._ref_cache:
            return self._ref_cache[ref]

        mark, outer = self._checkpoint()
        self._resolving.add(ref)
        try:
            target = self._lookup(ref)
            result = target if is_marker(target) else (yield target)
        finally:
            self._resolving.discard(ref)

        if self._cacheable(mark, outer):
            self._ref_cache[ref] = result
        return result

    def _visit_container(self, value: dict[str, Any] | list[Any]) -> Generator[Any, Any, Any]:
        key = id(value)
        cached = self._object_cache.get(key)
        if cached is not None and cached[0] is value:
            return cached[1]
        if key in self._active:
            return value

        mark, outer = self._checkpoint()
        self._active.add(key)
        try:
            if isinstance(value, list):
                items = []
                for item in value:
                    items.append((yield item) if isinstance(item, (dict, list)) else item)
                changed = any(new is not old for new, old in zip(items, value))
                result: Any = items if changed else value
            else:
                resolved = {}
                for k, v in value.items():
                    resolved[k] = (yield v) if isinstance(v, (dict, list)) else v
                changed = any(resolved[k] is not v for k, v in value.items())
                result = resolved if changed else value
        finally:
            self._active.discard(key)

        if self._cacheable(mark, outer):
            self._object_cache[key] = (value, result)
        return result

    def _lookup(self, ref: str) -> Any:
        """Walk *ref* from the document root, returning the raw target or a marker."""
        parts = ref.split("/")
        if parts[0] != "#":
            logger.debug("External $ref %s is not supported", ref)
            return _marker(ref, EXTERNAL)

        current: Any = self._document
        for raw in parts[1:]:
            segment = _unescape(raw)
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            elif isinstance(current, list) and _is_index(segment, current):
                current = current[int(segment)]
            else:
                current = None
            if current is None:
                logger.debug("Unresolvable $ref %s (missing segment %r)", ref, segment)
                return _marker(ref, NOT_FOUND)
        return current

    def _checkpoint(self) -> tuple[int, frozenset[str]]:
        return len(self._circular_hits), frozenset(self._resolving)

    def _cacheable(self, mark: int, outer: frozenset[str]) -> bool:
        """A result is reusable unless it was cut short by a ref from an enclosing frame."""
        if not outer:
            return True
        return not any(ref in outer for ref in self._circular_hits[mark:])


def iter_markers(value: Any) -> list[dict[str, Any]]:
    """Collect the markers left in a resolved value, each distinct ref once."""
    found: dict[tuple[str, str], dict[str, Any]] = {}
    seen: set[int] = set()
    stack = [value]
    while stack:
        current = stack.pop()
        kind = marker_kind(current)
        if kind is not None:
            found.setdefault((current["$ref"], kind), current)
            continue
        if isinstance(current, (dict, list)):
            if id(current) in seen:
                continue
            seen.add(id(current))
            stack.extend(reversed(list(current.values() if isinstance(current, dict) else current)))
    return list(found.values())


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Resolve every ``$ref`` in a whole document.

    Convenience wrapper around :class:`RefResolver`; circular and dangling
    refs are left as markers.  The input is never mutated.
    """
    return RefResolver(document).resolve(document)
