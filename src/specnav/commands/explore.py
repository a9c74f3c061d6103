"""Explore commands -- browse, search and inspect OpenAPI documents.

Every command loads the given specs into a fresh
:class:`~specnav.workspace.Workspace` and prints to stdout in the active
output format. Diagnostics go to stderr. Missing operations, nodes and refs
exit with :data:`~specnav.exit_codes.EXIT_NOT_FOUND`.
"""

from __future__ import annotations

from typing import Optional

import typer

from specnav.commands.common import fail, get_config, load_workspace, parse_method
from specnav.exceptions import InvalidUsageError, NotFoundError, SpecnavError
from specnav.indexer.tree import new_root
from specnav.models import SecurityMode
from specnav.output import (
    format_response,
    get_output,
    info,
    print_table,
    print_tree,
    suggest,
    warning,
)
from specnav.parser.resolver import EXTERNAL, NOT_FOUND, iter_markers, marker_kind
from specnav.query.lookup import find_node_by_path, find_node_by_slug
from specnav.query.search import search_operations
from specnav.query.slugs import endpoint_path_to_slug, slug_to_endpoint_path, tag_path_to_slug
from specnav.security import security_scheme_names


def tree_command(
    ctx: typer.Context,
    specs: list[str] = typer.Argument(help="Spec files, URLs, or '-' for stdin."),
    search: str = typer.Option("", "--search", "-s", help="Only operations matching this text."),
    method: Optional[list[str]] = typer.Option(
        None, "--method", "-m", help="HTTP method to show (repeatable)."
    ),
    security: Optional[SecurityMode] = typer.Option(
        None, "--security", help="Security filter: all, private or public."
    ),
) -> None:
    """Print the tag tree of one or more specs.

    Tags containing ``|`` become nested groups. With several specs each one
    is placed under a node named after its title. Filters default to the
    ``explorer`` section of the global config.

    Example::

        specnav tree petstore.json
        specnav tree petstore.json --search pet -m GET -m POST --security private
    """
    config = get_config(ctx)
    try:
        methods = [parse_method(m) for m in method] if method else config.explorer.methods
    except SpecnavError as exc:
        fail(exc)
    mode = security or config.explorer.security

    workspace = load_workspace(ctx, specs)
    root = workspace.filtered_tree(query=search, methods=methods, mode=mode)
    if root is None:
        info("No operations match the current filters.")
        suggest("Broaden --search, or pass --security all and more --method flags.")
        root = new_root()

    if len(workspace.specs) == 1:
        title = workspace.specs[0].title
    else:
        title = f"{len(workspace.specs)} specs"
    print_tree(root, title=title)


def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Text to look for."),
    specs: list[str] = typer.Argument(help="Spec files, URLs, or '-' for stdin."),
) -> None:
    """List every operation whose text contains QUERY.

    Method, path, summary, description, operationId, tags, parameters,
    request body description and responses are searched, case-insensitively.

    Example::

        specnav search "find by status" petstore.json
    """
    workspace = load_workspace(ctx, specs)
    results = search_operations(workspace.documents, query)
    if not results:
        info(f"No operations match {query!r}.")
        return

    rows = [
        [
            result.method,
            result.path,
            str(result.operation.get("summary") or "-"),
            result.spec_title,
        ]
        for result in results
    ]
    print_table(["Method", "Path", "Summary", "Spec"], rows, title=f"Matches for {query!r} ({len(rows)})")


def show_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Spec file, URL, or '-' for stdin."),
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Path template (/pets/{petId}) or slug (pets/:petId)."),
    raw: bool = typer.Option(False, "--raw", help="Do not resolve $ref pointers."),
) -> None:
    """Show one operation with its refs resolved and its effective security.

    Refs that could not be resolved stay in place as markers
    (``{"$ref": ..., "circular": true}`` and similar) and are listed under
    ``unresolved``.

    Example::

        specnav show petstore.json GET /pets/{petId}
        specnav show petstore.json get pets/:petId --raw
    """
    workspace = load_workspace(ctx, [spec])
    try:
        verb = parse_method(method)
        located = workspace.find_path_item(path, verb)
        if located is None and not path.startswith("/"):
            path = slug_to_endpoint_path(path)
            located = workspace.find_path_item(path, verb)
        operation = located[1].get(verb.lower()) if located is not None else None
        if not isinstance(operation, dict):
            raise NotFoundError(f"No operation {verb} {path} in {spec}")
    except SpecnavError as exc:
        fail(exc)

    body = operation if raw else workspace.resolver_for(path, method=verb).resolve(operation)
    requirements = workspace.effective_security(verb, path)
    format_response(
        {
            "method": verb,
            "path": path,
            "slug": endpoint_path_to_slug(path),
            "operationId": operation.get("operationId"),
            "private": workspace.is_private(verb, path),
            "securitySchemes": security_scheme_names(requirements),
            "effectiveSecurity": requirements,
            "operation": body,
            "unresolved": [] if raw else iter_markers(body),
        }
    )


def resolve_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Spec file, URL, or '-' for stdin."),
    ref: str = typer.Argument(help="Pointer such as '#/components/schemas/Pet'."),
) -> None:
    """Resolve a ``$ref`` pointer and print its fully resolved target.

    Example::

        specnav resolve petstore.json '#/components/schemas/Pet'
    """
    workspace = load_workspace(ctx, [spec])
    result = workspace.resolver_for().resolve_ref(ref)
    kind = marker_kind(result)
    if kind == NOT_FOUND:
        fail(NotFoundError(f"Reference {ref!r} does not resolve in {spec}"))
    if kind == EXTERNAL:
        warning(f"External reference {ref!r} is not fetched.")
    format_response(result)


def node_command(
    ctx: typer.Context,
    specs: list[str] = typer.Argument(help="Spec files, URLs, or '-' for stdin."),
    slug: Optional[str] = typer.Option(None, "--slug", help="Node slug, e.g. 'pet-store/pets'."),
    full_path: Optional[str] = typer.Option(
        None, "--path", help="Node full path, e.g. 'Pet Store | Pets'."
    ),
) -> None:
    """Print the subtree of one tag node.

    Example::

        specnav node petstore.json --slug pet-store/pets
        specnav node petstore.json --path "Pet Store | Pets"
    """
    try:
        if (slug is None) == (full_path is None):
            raise InvalidUsageError("Pass exactly one of --slug or --path.")
    except SpecnavError as exc:
        fail(exc)

    workspace = load_workspace(ctx, specs)
    if slug is not None:
        node = find_node_by_slug(workspace.tree, slug)
        wanted = slug
    else:
        node = find_node_by_path(workspace.tree, full_path or "")
        wanted = full_path or ""
    if node is None:
        fail(NotFoundError(f"No tag node {wanted!r}"))

    info(f"slug: {tag_path_to_slug(node.full_path)}")
    print_tree(node, title=node.full_path or node.name)


def slug_command(
    value: str = typer.Argument(help="Endpoint path, slug or tag path."),
    reverse: bool = typer.Option(False, "--reverse", "-r", help="Turn a slug back into a path."),
    tag: bool = typer.Option(False, "--tag", help="Slugify a tag path such as 'Pet Store | Pets'."),
) -> None:
    """Convert between endpoint paths and slugs.

    Example::

        specnav slug /users/{id}/posts/{postId}      # users/:id/posts/:postId
        specnav slug --reverse users/:id/posts/:postId
        specnav slug --tag "Pet Store | Pets"        # pet-store/pets
    """
    if tag and reverse:
        fail(InvalidUsageError("--tag and --reverse cannot be combined."))
    if tag:
        result = tag_path_to_slug(value)
    elif reverse:
        result = slug_to_endpoint_path(value)
    else:
        result = endpoint_path_to_slug(value)
    get_output().print_data(result)
