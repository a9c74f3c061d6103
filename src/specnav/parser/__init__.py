"""OpenAPI document parser -- load documents and resolve ``$ref`` pointers.

Typical usage::

    from specnav.parser import RefResolver, load_spec, validate_document

    document = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    validate_document(document)
    resolver = RefResolver(document)
    pet = resolver.resolve_ref("#/components/schemas/Pet")

Sub-modules:

* :mod:`~specnav.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and the minimal document shape check.
* :mod:`~specnav.parser.resolver` -- Lazy ``$ref`` resolution with cycle
  detection, sentinel markers and per-document memoization.
"""

from specnav.parser.loader import load_spec, validate_document
from specnav.parser.resolver import RefResolver, iter_markers, marker_kind, resolve_refs

__all__ = [
    "RefResolver",
    "iter_markers",
    "load_spec",
    "marker_kind",
    "resolve_refs",
    "validate_document",
]
