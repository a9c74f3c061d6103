"""Exception hierarchy for specnav.

All exceptions inherit from :class:`SpecnavError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specnav.exit_codes`.
The top-level error handler in :func:`specnav.app.main` catches
``SpecnavError`` and exits with the appropriate code.

The indexing, resolution and query layers never raise these for problems in
the document itself (dangling refs, missing tags); they degrade to sentinel
markers or ``None``. Only the loader, configuration and CLI layers raise.

Subclass hierarchy::

    SpecnavError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- SpecLoadError       (exit 7)
    +-- ConfigError         (exit 1)
"""

from specnav.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_LOAD_ERROR,
)


class SpecnavError(Exception):
    """Base exception for all specnav errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecnavError):
    """Raised for invalid CLI arguments (unknown method, bad filter mode)."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(SpecnavError):
    """Raised by the CLI when a requested operation, node or ref does not exist."""

    exit_code = EXIT_NOT_FOUND


class SpecLoadError(SpecnavError):
    """Raised when an OpenAPI document cannot be read, parsed, or fails the shape check."""

    exit_code = EXIT_SPEC_LOAD_ERROR


class ConfigError(SpecnavError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
