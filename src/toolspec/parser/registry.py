"""Parser registry -- choose the parser that understands a document.

:class:`ParserRegistry` holds an ordered list of
:class:`~toolspec.parser.base.SpecParser` instances. Lookups probe them in
registration order and return the first whose
:meth:`~toolspec.parser.base.SpecParser.can_parse` accepts the document, so
more specific parsers must be registered before more general ones.

The built-in :class:`~toolspec.parser.openapi.OpenAPIParser` is registered
first unless the registry is created with ``register_builtin=False``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from toolspec.exceptions import SpecParseError
from toolspec.models import ApiSpecification
from toolspec.parser.base import SpecParser
from toolspec.parser.openapi import OpenAPIParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Registry of spec format parsers, probed in registration order.

    Example:
        Typical usage::

            registry = ParserRegistry()
            registry.register(PostmanParser())
            spec = registry.parse(document)
    """

    def __init__(self, register_builtin: bool = True) -> None:
        self._parsers: list[SpecParser] = []
        if register_builtin:
            self.register(OpenAPIParser())

    def register(self, parser: SpecParser) -> None:
        """Append *parser* to the probe order."""
        self._parsers.append(parser)
        logger.debug("Registered %s parser", parser.format_name)

    def find_parser(self, document: dict[str, Any]) -> Optional[SpecParser]:
        """Return the first registered parser that accepts *document*, or ``None``."""
        for parser in self._parsers:
            if parser.can_parse(document):
                return parser
        return None

    def parse(
        self,
        document: dict[str, Any],
        base_url: Optional[str] = None,
        include_resources: Optional[list[str]] = None,
        path_prefix: Optional[str] = None,
    ) -> ApiSpecification:
        """Parse *document* with the first parser that accepts it.

        Raises:
            SpecParseError: If no registered parser recognises the document.
                Errors raised by the chosen parser propagate unchanged.
        """
        parser = self.find_parser(document)
        if parser is None:
            formats = ", ".join(self.supported_formats) or "none"
            raise SpecParseError(
                f"Unrecognised spec format (supported formats: {formats})"
            )
        logger.debug("Parsing document with %s parser", parser.format_name)
        return parser.parse(document, base_url, include_resources, path_prefix)

    @property
    def supported_formats(self) -> list[str]:
        """Format names of every registered parser, in probe order."""
        return [parser.format_name for parser in self._parsers]

    def __len__(self) -> int:
        return len(self._parsers)
