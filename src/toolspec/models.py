"""Canonical Pydantic models shared across all toolspec modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Parse output models** -- produced by the parser and consumed by callers
that expose the API as tools:
    :class:`SpecVersion`, :class:`HTTPMethod`, :class:`ParameterLocation`,
    :class:`ParameterSpec`, :class:`ToolDefinition`, :class:`Diagnostic`,
    and :class:`ApiSpecification`.

**Configuration models** -- resolved from CLI flags, environment variables,
and the project-local ``toolspec.json``:
    :class:`ParseOptions`.

All models use Pydantic v2. Schema fragments (``response_schema``,
``raw_document``) are kept as plain JSON-compatible Python values rather
than modelled, since OpenAPI schemas are open-ended.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# --- Parse Output Models ---


class SpecVersion(str, Enum):
    """Document dialect detected by :func:`~toolspec.parser.version.detect_spec_version`.

    Every version-specific extraction step (base URL, request body,
    response schema) branches on this tag.
    """

    SWAGGER_2 = "swagger_2"
    OPENAPI_3_0 = "openapi_3.0"
    OPENAPI_3_1 = "openapi_3.1"
    OPENAPI_3_2 = "openapi_3.2"

    @property
    def is_swagger(self) -> bool:
        """``True`` for Swagger 2.0 documents."""
        return self is SpecVersion.SWAGGER_2


class HTTPMethod(str, Enum):
    """HTTP methods that produce tools.

    OpenAPI also allows ``head``, ``options`` and ``trace`` operations;
    those are not callable tools and are ignored by the operation mapper.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def from_key(cls, key: str) -> Optional[HTTPMethod]:
        """Return the method for a path-item key (case-insensitive), or ``None``."""
        try:
            return cls(key.upper())
        except ValueError:
            return None


BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})
"""Methods whose request body is decomposed into tool parameters."""


class ParameterLocation(str, Enum):
    """Where a tool parameter is sent, per the OpenAPI ``in`` field.

    ``body`` is used both for the Swagger 2.0 body parameter and for each
    property decomposed out of an object-typed request body. ``querystring``
    (OpenAPI 3.2) describes the whole query string as one parameter.
    """

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    BODY = "body"
    COOKIE = "cookie"
    FORM_DATA = "formData"
    QUERYSTRING = "querystring"


class ParameterSpec(BaseModel):
    """A single tool parameter.

    One is produced per named OpenAPI parameter and per property of an
    object-typed request body.
    """

    description: str = ""
    required: bool = False
    location: ParameterLocation = ParameterLocation.QUERY
    type: str = Field(default="string", description="JSON Schema type")
    enum: Optional[list[Any]] = None
    format: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict, omitting unset ``enum``/``format``."""
        return self.model_dump(mode="json", exclude_none=True)


class ToolDefinition(BaseModel):
    """A callable tool flattened from one OpenAPI operation.

    ``path`` keeps its ``{param}`` placeholders; callers substitute
    ``path``-located parameters when building the request URL.
    """

    name: str
    description: str
    method: HTTPMethod
    path: str
    parameters: dict[str, ParameterSpec] = Field(default_factory=dict)
    response_schema: Optional[Any] = None
    operation_id: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @property
    def required_parameters(self) -> list[str]:
        """Names of the parameters marked as required, in declaration order."""
        return [name for name, param in self.parameters.items() if param.required]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dict of this tool."""
        data = self.model_dump(mode="json", exclude={"parameters"})
        data["parameters"] = {
            name: param.to_dict() for name, param in self.parameters.items()
        }
        return data


class DiagnosticKind(str, Enum):
    """Categories of non-fatal problems recorded during a parse."""

    SKIPPED_OPERATION = "skipped_operation"
    SKIPPED_PARAMETER = "skipped_parameter"
    NAME_COLLISION = "name_collision"


class Diagnostic(BaseModel):
    """A non-fatal problem found while parsing a document.

    Diagnostics never abort a parse. They let callers see which operations
    were dropped and which tool names were produced more than once.
    """

    kind: DiagnosticKind
    message: str
    method: Optional[str] = None
    path: Optional[str] = None
    tool_name: Optional[str] = None


class ApiSpecification(BaseModel):
    """Complete parsed representation of an API specification.

    Produced by :func:`~toolspec.parser.extractor.extract_spec` and owned by
    the caller afterwards. ``tools`` may contain more than one entry with the
    same name; each such collision is reported in ``diagnostics``.

    See Also:
        :class:`ToolDefinition`: Individual tool within the spec.
    """

    base_url: str = ""
    title: str
    version: str
    description: str = ""
    tools: list[ToolDefinition] = Field(default_factory=list)
    raw_document: dict[str, Any] = Field(
        default_factory=dict, description="Original document, unmodified"
    )
    spec_version: SpecVersion
    format_name: str = "OpenAPI"
    name: Optional[str] = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Return the first tool called *name*, or ``None``."""
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def tool_names(self) -> list[str]:
        """Return every tool name in document order (duplicates included)."""
        return [tool.name for tool in self.tools]


# --- Configuration Models ---


class ParseOptions(BaseModel):
    """Options forwarded to :func:`~toolspec.parser.extractor.extract_spec`.

    Resolved by :func:`~toolspec.config.resolve_options` from CLI flags,
    environment variables, and the project-local ``toolspec.json``.
    """

    base_url: Optional[str] = Field(
        default=None, description="Override the base URL declared by the document"
    )
    include_resources: list[str] = Field(
        default_factory=list,
        description="Keep only tools whose first path segment is one of these",
    )
    path_prefix: Optional[str] = Field(
        default=None, description="Prefix stripped from paths before resource matching"
    )
