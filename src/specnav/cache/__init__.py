"""Disk-based caching of remote OpenAPI documents.

This package provides :class:`SpecCache`, consulted by
:func:`~specnav.parser.loader.load_spec` for ``http(s)://`` sources and
controlled by the ``cache`` section of :class:`~specnav.models.GlobalConfig`.
"""

from specnav.cache.cache import SpecCache

__all__ = ["SpecCache"]
