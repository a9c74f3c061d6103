"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries.  It supports both JSON and YAML formats with
automatic format detection.  Remote documents can be served from a
:class:`~specnav.cache.SpecCache` to avoid refetching on every invocation.

The two public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_document` -- Minimal shape check (version marker and a
  ``paths`` mapping) performed before a document is handed to the indexer.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import httpx
import yaml

from specnav.exceptions import SpecLoadError

if TYPE_CHECKING:
    from specnav.cache import SpecCache

logger = logging.getLogger(__name__)


def load_spec(source: str, cache: Optional[SpecCache] = None) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        cache: Optional spec cache consulted for URL sources.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        if cache is not None:
            cached = cache.get(source)
            if cached is not None:
                logger.debug("Spec cache hit for %s", source)
                return cached
        document = _load_from_url(source)
        if cache is not None:
            cache.set(source, document)
        return document
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin.

    Raises:
        SpecLoadError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL.  The content-type header is used as a format hint.

    Raises:
        SpecLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    logger.debug("Fetching spec from %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    ``.json``, ``.yaml`` and ``.yml`` extensions select the parser; anything
    else falls back to content-based detection.

    Raises:
        SpecLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecLoadError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecLoadError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        SpecLoadError: If the content cannot be parsed as either format, or
            parses to something other than a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecLoadError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise SpecLoadError(
                    f"Spec must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise SpecLoadError(
                "Spec must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecLoadError(msg)


def validate_document(document: dict[str, Any]) -> str:
    """Check the minimal shape of an OpenAPI document and return its version.

    A document needs an ``openapi`` (or legacy ``swagger``) version marker and
    a ``paths`` mapping.  Nothing deeper is validated: the indexer and
    resolver tolerate malformed content below the top level.

    Args:
        document: The parsed document.

    Returns:
        The version string (e.g. ``"3.0.3"``).

    Raises:
        SpecLoadError: If the version marker or ``paths`` is missing.
    """
    version = document.get("openapi", document.get("swagger"))
    if version is None:
        raise SpecLoadError(
            "Missing 'openapi' field. Is this an OpenAPI document?"
        )

    paths = document.get("paths")
    if not isinstance(paths, dict):
        raise SpecLoadError("Invalid OpenAPI spec: missing required 'paths' object")

    version_str = str(version)
    if not version_str.startswith("3."):
        logger.warning(
            "OpenAPI version %s is not 3.x; indexing may be incomplete", version_str
        )
    return version_str
