"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apium.exceptions.ApiumError` subclass.

Example::

    $ echo 'not: [valid' | apium
    $ echo $?
    3   # EXIT_SPEC_PARSE_ERROR -- the document could not be parsed
"""

EXIT_SUCCESS = 0
"""The session ended normally (quit key or completed listing)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, or no interactive terminal is available."""

EXIT_SPEC_PARSE_ERROR = 3
"""The OpenAPI document could not be read, parsed, or validated."""
