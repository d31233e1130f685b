"""Exception hierarchy for apium.

All exceptions inherit from :class:`ApiumError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apium.exit_codes`.
The top-level error handler in :func:`apium.app.main` catches
``ApiumError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ApiumError (exit 1)
    +-- SpecParseError   (exit 3)
    +-- TerminalError    (exit 2)
    +-- ConfigError      (exit 1)
"""

from apium.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class ApiumError(Exception):
    """Base exception for all apium errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apium.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SpecParseError(ApiumError):
    """Raised when the OpenAPI document cannot be read, parsed, or validated."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class TerminalError(ApiumError):
    """Raised when no interactive terminal can be opened for key input."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ApiumError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
