"""Helpers shared by the command modules."""

from __future__ import annotations

from typing import NoReturn, Optional, Sequence

import typer

from specnav.exceptions import InvalidUsageError, SpecnavError
from specnav.models import GlobalConfig, HTTPMethod
from specnav.output import debug, error
from specnav.workspace import Workspace

_URL_PREFIXES = ("http://", "https://")


def fail(exc: SpecnavError) -> NoReturn:
    """Report *exc* on stderr and exit with its code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code) from None


def get_config(ctx: Optional[typer.Context]) -> GlobalConfig:
    """Return the config resolved by the root callback, or resolve it now."""
    if ctx is not None and ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]
    from specnav.config import resolve_config

    try:
        return resolve_config()
    except SpecnavError as exc:
        fail(exc)


def parse_method(value: str) -> str:
    """Validate an HTTP method name and return it upper-cased.

    Raises:
        InvalidUsageError: If *value* is not an OpenAPI operation method.
    """
    try:
        return HTTPMethod(value.lower()).value.upper()
    except ValueError:
        valid = ", ".join(m.value.upper() for m in HTTPMethod)
        raise InvalidUsageError(
            f"Unknown HTTP method {value!r}. Expected one of: {valid}"
        ) from None


def load_workspace(ctx: Optional[typer.Context], sources: Sequence[str]) -> Workspace:
    """Load every source into a new :class:`~specnav.workspace.Workspace`.

    Remote sources go through the spec cache unless caching is disabled.
    Any load or validation failure exits the command.
    """
    from specnav.cache import SpecCache
    from specnav.config import get_cache_dir
    from specnav.parser import load_spec, validate_document

    config = get_config(ctx)
    cache: Optional[SpecCache] = None
    if config.cache.enabled and any(s.startswith(_URL_PREFIXES) for s in sources):
        cache = SpecCache(get_cache_dir(), config.cache)

    workspace = Workspace()
    try:
        for source in sources:
            document = load_spec(source, cache=cache)
            version = validate_document(document)
            spec = workspace.add(document, source=source)
            debug(f"Loaded {spec.title!r} (OpenAPI {version}) from {source}")
    except SpecnavError as exc:
        fail(exc)
    finally:
        if cache is not None:
            cache.close()
    return workspace
