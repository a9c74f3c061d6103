"""Built-in CLI sub-commands for specnav.

This package groups the Typer command modules registered on the root app by
:func:`~specnav.app.register_commands`:

* :mod:`~specnav.commands.explore` -- ``tree``, ``search``, ``show``,
  ``resolve``, ``node`` and ``slug``.
* :mod:`~specnav.commands.favorites` -- the ``favorites`` group.
* :mod:`~specnav.commands.common` -- spec loading and error reporting shared
  by both.

Explore commands are plain callbacks registered directly on the root app;
``favorites`` is a :class:`typer.Typer` sub-application.
"""
