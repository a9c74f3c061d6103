"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specnav:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specnav/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir` and :func:`get_data_dir`.
* **Global config** -- A single :class:`~specnav.models.GlobalConfig`
  JSON file storing defaults (output format, cache settings, tree filters).
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables and CLI flags over the stored config.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`); the favorites store shares it.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from specnav.exceptions import ConfigError
from specnav.models import GlobalConfig

_APP_NAME = "specnav"
_CONFIG_FILENAME = "config.json"
_FAVORITES_FILENAME = "favorites.json"

_TRUTHY = {"1", "true", "yes", "on"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specnav/`` (default ``~/.config/specnav/``).
    On macOS/Windows: ``~/.specnav/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory (remote spec cache), creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/specnav/`` (default ``~/.cache/specnav/``).
    On macOS/Windows: ``~/.specnav/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (favorites, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specnav/`` (default ``~/.local/share/specnav/``).
    On macOS/Windows: ``~/.specnav/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_favorites_path() -> Path:
    """Path of the favorites JSON file under the data directory."""
    return get_data_dir() / _FAVORITES_FILENAME


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~specnav.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve config with its precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_no_cache``)
        2. Environment variables (``SPECNAV_FORMAT``, ``SPECNAV_NO_CACHE``)
        3. User config (``~/.config/specnav/config.json``)
        4. Defaults
    """
    config = load_global_config()

    env_format = os.environ.get("SPECNAV_FORMAT")
    if env_format:
        config.output.format = env_format
    if os.environ.get("SPECNAV_NO_CACHE", "").lower() in _TRUTHY:
        config.cache.enabled = False

    if cli_format is not None:
        config.output.format = cli_format
    if cli_no_cache:
        config.cache.enabled = False

    return config
