"""Spec parser -- load documents, resolve ``$ref`` pointers, and extract tools.

This sub-package turns a decoded OpenAPI 2.0 (Swagger) or 3.x document into
a :class:`~toolspec.models.ApiSpecification` whose tools are ready to be
exposed to an agent.

Typical usage::

    from toolspec.parser import ParserRegistry, load_spec

    document = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    spec = ParserRegistry().parse(document, include_resources=["pet"])

Sub-modules:

* :mod:`~toolspec.parser.loader` -- I/O layer (URL, file, stdin) and
  JSON/YAML decoding.
* :mod:`~toolspec.parser.version` -- Swagger/OpenAPI version detection.
* :mod:`~toolspec.parser.resolver` -- Memoised ``$ref`` resolution with
  cycle detection.
* :mod:`~toolspec.parser.naming` -- camelCase tool name generation.
* :mod:`~toolspec.parser.extractor` -- Walks ``paths`` and builds
  :class:`~toolspec.models.ToolDefinition` objects.
* :mod:`~toolspec.parser.filters` -- Resource, tag, and text filters.
* :mod:`~toolspec.parser.registry` -- Format dispatch across parsers.
"""

from toolspec.parser.base import SpecParser
from toolspec.parser.extractor import extract_spec
from toolspec.parser.filters import (
    filter_tools_by_resources,
    get_tools_by_tag,
    search_tools,
)
from toolspec.parser.loader import load_spec
from toolspec.parser.naming import is_valid_tool_name, normalize_tool_name
from toolspec.parser.openapi import OpenAPIParser
from toolspec.parser.registry import ParserRegistry
from toolspec.parser.resolver import ResolutionContext, resolve_refs, resolve_schema
from toolspec.parser.version import detect_spec_version

__all__ = [
    "OpenAPIParser",
    "ParserRegistry",
    "ResolutionContext",
    "SpecParser",
    "detect_spec_version",
    "extract_spec",
    "filter_tools_by_resources",
    "get_tools_by_tag",
    "is_valid_tool_name",
    "load_spec",
    "normalize_tool_name",
    "resolve_refs",
    "resolve_schema",
    "search_tools",
]
