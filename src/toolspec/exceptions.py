"""Exception hierarchy for toolspec.

All exceptions inherit from :class:`ToolspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`toolspec.exit_codes`.
The CLI entry point catches ``ToolspecError`` and exits with the matching
code; library callers can catch the narrower subclasses instead.

Only *fatal* problems are raised. Local problems inside a document (a
missing ``$ref`` target, a cyclic ``$ref``, an operation with no usable
name) are absorbed into the parse result as placeholder schemas or
:class:`~toolspec.models.Diagnostic` entries.

Subclass hierarchy::

    ToolspecError (exit 1)
    +-- InvalidUsageError           (exit 2)
    +-- ToolNotFoundError           (exit 4)
    +-- SpecParseError              (exit 7)
    |   +-- UnsupportedVersionError
    |   +-- MissingVersionFieldError
    |   +-- RefLookupError
    +-- ConfigError                 (exit 1)
"""

from toolspec.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class ToolspecError(Exception):
    """Base exception for all toolspec errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ToolspecError):
    """Raised for invalid CLI arguments or option combinations."""

    exit_code = EXIT_INVALID_USAGE


class ToolNotFoundError(ToolspecError):
    """Raised when a named tool is not present in a parsed specification."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(ToolspecError):
    """Raised when a spec document cannot be loaded, decoded, or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedVersionError(SpecParseError):
    """Raised when the ``swagger`` or ``openapi`` field holds an unsupported value."""


class MissingVersionFieldError(SpecParseError):
    """Raised when a document has neither a ``swagger`` nor an ``openapi`` field."""


class RefLookupError(SpecParseError):
    """Raised when a ``$ref`` pointer cannot be located in the document.

    The resolver catches this internally and substitutes a placeholder
    schema; it only escapes from direct calls to
    :func:`~toolspec.parser.resolver.lookup_ref`.
    """


class ConfigError(ToolspecError):
    """Raised for configuration problems (unreadable or malformed ``toolspec.json``)."""

    exit_code = EXIT_GENERIC_FAILURE
