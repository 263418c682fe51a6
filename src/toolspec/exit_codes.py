"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~toolspec.exceptions.ToolspecError` subclass.

Example::

    $ toolspec tools broken.yaml
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document could not be parsed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""A requested tool does not exist in the parsed specification."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API specification could not be loaded, parsed, or recognised."""
