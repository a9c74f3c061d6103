"""Favorites commands -- bookmark endpoints across specs.

Bookmarks live in ``favorites.json`` under the data directory and are keyed
by method, path and spec source, so the same path can be bookmarked in two
specs independently.
"""

from __future__ import annotations

from typing import Optional

import typer

from specnav.commands.common import fail, load_workspace, parse_method
from specnav.exceptions import NotFoundError, SpecnavError
from specnav.favorites import FavoritesStore
from specnav.output import info, print_table, success, suggest

favorites_app = typer.Typer(no_args_is_help=True)


@favorites_app.command("add")
def favorites_add(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Spec file or URL the endpoint belongs to."),
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Path template, e.g. /pets/{petId}."),
) -> None:
    """Bookmark an operation.

    The operation must exist in SPEC; its summary and the spec title are
    stored alongside the bookmark.

    Example::

        specnav favorites add petstore.json GET /pets/{petId}
    """
    workspace = load_workspace(ctx, [spec])
    try:
        verb = parse_method(method)
        located = workspace.find_path_item(path, verb)
        operation = located[1].get(verb.lower()) if located is not None else None
        if not isinstance(operation, dict):
            raise NotFoundError(f"No operation {verb} {path} in {spec}")
    except SpecnavError as exc:
        fail(exc)

    summary = operation.get("summary")
    favorite = FavoritesStore().add(
        verb,
        path,
        source=spec,
        spec_title=workspace.specs[0].title,
        summary=summary if isinstance(summary, str) else None,
    )
    success(f"Added {favorite.method} {favorite.path} to favorites.")
    suggest("specnav favorites list")


@favorites_app.command("remove")
def favorites_remove(
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Path template, e.g. /pets/{petId}."),
    source: Optional[str] = typer.Option(
        None, "--source", help="Only the bookmark added with this spec source."
    ),
) -> None:
    """Remove a bookmark.

    Without --source the endpoint is removed for every spec it was
    bookmarked in.

    Example::

        specnav favorites remove GET /pets/{petId}
        specnav favorites remove GET /pets/{petId} --source petstore.json
    """
    store = FavoritesStore()
    try:
        verb = parse_method(method)
        if source is None:
            removed = store.remove_all(verb, path)
        else:
            removed = int(store.remove(verb, path, source))
        if not removed:
            raise NotFoundError(f"{verb} {path} is not a favorite")
    except SpecnavError as exc:
        fail(exc)
    noun = "favorite" if removed == 1 else "favorites"
    success(f"Removed {verb} {path} ({removed} {noun}).")


@favorites_app.command("list")
def favorites_list(
    source: Optional[str] = typer.Option(None, "--source", help="Only bookmarks for this spec."),
) -> None:
    """List bookmarks, newest first.

    Example::

        specnav favorites list
        specnav --json favorites list --source petstore.json
    """
    entries = FavoritesStore().entries(source)
    if not entries:
        info("No favorites yet.")
        return
    rows = [
        [
            item.method,
            item.path,
            item.summary or "-",
            item.spec_title or "-",
            item.source or "-",
        ]
        for item in entries
    ]
    print_table(["Method", "Path", "Summary", "Spec", "Source"], rows, title=f"Favorites ({len(rows)})")


@favorites_app.command("clear")
def favorites_clear(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Delete every bookmark.

    Example::

        specnav favorites clear --force
    """
    store = FavoritesStore()
    if not len(store):
        info("No favorites to clear.")
        return
    if not force:
        confirmed = typer.confirm(f"Remove all {len(store)} favorites?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()
    store.clear()
    success("Favorites cleared.")
