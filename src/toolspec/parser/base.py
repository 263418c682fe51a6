"""Abstract base class for API specification parsers.

Each supported specification format is handled by a :class:`SpecParser`
subclass. The :class:`~toolspec.parser.registry.ParserRegistry` probes the
registered parsers in order and hands a document to the first one whose
:meth:`SpecParser.can_parse` accepts it.

Writing a parser for another format (Postman collections, Google Discovery
documents, ...) means implementing the three abstract members below and
registering an instance::

    class PostmanParser(SpecParser):
        def can_parse(self, document):
            return "_postman_id" in document.get("info", {})

        def parse(self, document, base_url=None, include_resources=None,
                  path_prefix=None):
            ...

        @property
        def format_name(self):
            return "Postman Collection"

    registry.register(PostmanParser())
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from toolspec.models import ApiSpecification


class SpecParser(ABC):
    """Abstract base class that all spec format parsers must extend."""

    @abstractmethod
    def can_parse(self, document: dict[str, Any]) -> bool:
        """Return ``True`` if this parser understands *document*.

        Must be cheap and side-effect free: the registry may call it on
        documents meant for other parsers.
        """

    @abstractmethod
    def parse(
        self,
        document: dict[str, Any],
        base_url: Optional[str] = None,
        include_resources: Optional[list[str]] = None,
        path_prefix: Optional[str] = None,
    ) -> ApiSpecification:
        """Parse *document* and extract its tools.

        Args:
            document: The decoded specification.
            base_url: Optional override for the API base URL.
            include_resources: Optional resource allow-list.
            path_prefix: Optional prefix stripped before resource matching.

        Returns:
            The parsed :class:`~toolspec.models.ApiSpecification`.
        """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable name of the format (e.g., ``"OpenAPI"``)."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} format={self.format_name!r}>"
