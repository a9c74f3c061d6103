"""Typer application and CLI entry point for specnav.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``tree``, ``search``, ``show``, ``resolve``, ``node``,
``slug`` and ``favorites``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`specnav.config`: Global configuration resolution.
    :mod:`specnav.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from specnav import __version__
from specnav.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specnav",
    help="Explore OpenAPI 3.x specifications: tag tree, search, filters and $ref resolution.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specnav {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr through Rich."""
    logger = logging.getLogger("specnav")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Do not read or write the remote spec cache."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the global config, installs the
    :class:`~specnav.output.OutputManager` and stores the config in
    ``ctx.obj`` for sub-commands.
    """
    from specnav.config import resolve_config
    from specnav.exceptions import ConfigError
    from specnav.output import OutputFormat, OutputManager, error, set_output

    _configure_logging(verbose)

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format, cli_no_cache=no_cache)
    except ConfigError as exc:
        set_output(OutputManager(no_color=no_color))
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specnav.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


_registered = False


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app` (idempotent)."""
    global _registered
    if _registered:
        return
    from specnav.commands.explore import (
        node_command,
        resolve_command,
        search_command,
        show_command,
        slug_command,
        tree_command,
    )
    from specnav.commands.favorites import favorites_app

    app.command("tree")(tree_command)
    app.command("search")(search_command)
    app.command("show")(show_command)
    app.command("resolve")(resolve_command)
    app.command("node")(node_command)
    app.command("slug")(slug_command)
    app.add_typer(favorites_app, name="favorites", help="Bookmarked endpoints.")
    _registered = True


def main() -> None:
    """CLI entry point invoked by the ``specnav`` console script.

    Unhandled :class:`~specnav.exceptions.SpecnavError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specnav.exceptions import SpecnavError
        from specnav.output import error

        if isinstance(exc, SpecnavError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
