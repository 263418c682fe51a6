"""Parser for OpenAPI 2.0 (Swagger) and OpenAPI 3.x documents."""

from __future__ import annotations

from typing import Any, Optional

from toolspec.models import ApiSpecification
from toolspec.parser.base import SpecParser
from toolspec.parser.extractor import extract_spec


class OpenAPIParser(SpecParser):
    """Handles any document carrying a ``swagger`` or ``openapi`` field.

    :meth:`can_parse` only checks for the field; whether the version is
    actually supported is decided by :meth:`parse`, which raises
    :class:`~toolspec.exceptions.UnsupportedVersionError` for values such
    as ``openapi: 4.0.0``.
    """

    def can_parse(self, document: dict[str, Any]) -> bool:
        return isinstance(document, dict) and (
            "swagger" in document or "openapi" in document
        )

    def parse(
        self,
        document: dict[str, Any],
        base_url: Optional[str] = None,
        include_resources: Optional[list[str]] = None,
        path_prefix: Optional[str] = None,
    ) -> ApiSpecification:
        spec = extract_spec(document, base_url, include_resources, path_prefix)
        spec.format_name = self.format_name
        return spec

    @property
    def format_name(self) -> str:
        return "OpenAPI"
