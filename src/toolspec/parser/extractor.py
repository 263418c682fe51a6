"""Extract tool definitions from a decoded OpenAPI/Swagger document.

This module walks the ``paths`` object of a document and builds one
:class:`~toolspec.models.ToolDefinition` per supported HTTP operation,
assembling the result into an :class:`~toolspec.models.ApiSpecification`.

The single public entry point is :func:`extract_spec`. Internally it
delegates to helpers that each handle one part of the document:

* :func:`extract_base_url` -- ``host``/``basePath``/``schemes`` (Swagger 2)
  or ``servers`` (OpenAPI 3).
* :func:`extract_tools` -- the ``paths`` object, iterating over every
  path + HTTP method combination.
* :func:`extract_parameters`, :func:`extract_request_body`, and
  :func:`extract_response_schema` -- the per-operation pieces.

Schemas are resolved lazily through a single
:class:`~toolspec.parser.resolver.ResolutionContext` per call, so a
component referenced by many operations is expanded only once.

Malformed pieces of the document never abort the parse: operations that
cannot be named are skipped, and parameters of the wrong shape are dropped.
Both are recorded as :class:`~toolspec.models.Diagnostic` entries.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from toolspec.models import (
    BODY_METHODS,
    ApiSpecification,
    Diagnostic,
    DiagnosticKind,
    HTTPMethod,
    ParameterLocation,
    ParameterSpec,
    SpecVersion,
    ToolDefinition,
)
from toolspec.parser.filters import filter_tools_by_resources
from toolspec.parser.naming import generate_tool_name
from toolspec.parser.resolver import ResolutionContext, resolve_refs
from toolspec.parser.version import detect_spec_version

logger = logging.getLogger(__name__)

DEFAULT_API_TITLE = "Unknown API"
DEFAULT_API_VERSION = "1.0.0"
DEFAULT_TOOL_DESCRIPTION = "No description provided"
JSON_CONTENT_TYPE = "application/json"


def extract_spec(
    document: dict[str, Any],
    base_url: Optional[str] = None,
    include_resources: Optional[list[str]] = None,
    path_prefix: Optional[str] = None,
) -> ApiSpecification:
    """Compile a decoded OpenAPI/Swagger document into an :class:`ApiSpecification`.

    This is a pure function: it performs no I/O and never mutates
    *document*.

    Args:
        document: The decoded spec (e.g., from
            :func:`~toolspec.parser.loader.load_spec`).
        base_url: Overrides the base URL declared by the document.
        include_resources: When non-empty, keep only tools whose first path
            segment matches one of these names (see
            :func:`~toolspec.parser.filters.filter_tools_by_resources`).
        path_prefix: Prefix stripped from paths before resource matching.

    Returns:
        The parsed specification. ``raw_document`` holds *document*.

    Raises:
        UnsupportedVersionError: If the version field holds an unsupported
            value.
        MissingVersionFieldError: If the document declares no version.

    Example::

        spec = extract_spec(document, include_resources=["users"])
        for tool in spec.tools:
            print(f"{tool.method.value} {tool.path} -> {tool.name}")
    """
    spec_version = detect_spec_version(document)
    context = ResolutionContext(root=document)

    info = document.get("info")
    if not isinstance(info, dict):
        info = {}

    tools, diagnostics = extract_tools(document, spec_version, context)
    if include_resources:
        tools = filter_tools_by_resources(tools, include_resources, path_prefix)

    logger.debug(
        "Extracted %d tools from %s document (%d diagnostics)",
        len(tools),
        spec_version.value,
        len(diagnostics),
    )

    return ApiSpecification(
        base_url=base_url or extract_base_url(document, spec_version),
        title=_text(info.get("title"), default=DEFAULT_API_TITLE),
        version=str(info.get("version") or DEFAULT_API_VERSION),
        description=_text(info.get("description")),
        tools=tools,
        raw_document=document,
        spec_version=spec_version,
        diagnostics=diagnostics,
    )


def extract_base_url(document: dict[str, Any], spec_version: SpecVersion) -> str:
    """Return the API base URL declared by *document*.

    Swagger 2.0 builds it from the first entry of ``schemes`` (default
    ``https``), ``host`` and ``basePath``; without a ``host`` there is no
    base URL. OpenAPI 3.x uses the first ``servers`` entry.

    Returns:
        The base URL, or ``""`` when the document declares none.
    """
    if spec_version.is_swagger:
        host = document.get("host") or ""
        if not host:
            return ""
        schemes = document.get("schemes")
        if not isinstance(schemes, list) or not schemes:
            schemes = ["https"]
        base_path = document.get("basePath") or ""
        return f"{schemes[0]}://{host}{base_path}"

    servers = document.get("servers") or []
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        return _text(servers[0].get("url"))
    return ""


def extract_tools(
    document: dict[str, Any],
    spec_version: SpecVersion,
    context: ResolutionContext,
) -> tuple[list[ToolDefinition], list[Diagnostic]]:
    """Build one tool per supported operation in the document's ``paths``.

    Paths and methods are visited in document order. Method keys are
    matched case-insensitively against GET, POST, PUT, PATCH, and DELETE;
    other keys (``parameters``, ``summary``, ``head``, ...) are ignored.

    Tools whose name repeats an earlier tool's name are kept as-is; each
    repeat is recorded as a ``name_collision`` diagnostic.

    Returns:
        A ``(tools, diagnostics)`` tuple.
    """
    tools: list[ToolDefinition] = []
    diagnostics: list[Diagnostic] = []
    seen_names: set[str] = set()

    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        return tools, diagnostics

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        for method_key, operation in path_item.items():
            method = HTTPMethod.from_key(str(method_key))
            if method is None:
                continue

            tool = build_tool(
                str(path), method, operation, spec_version, context, diagnostics
            )
            if tool is None:
                continue

            if tool.name in seen_names:
                logger.warning(
                    "Tool name '%s' for %s %s collides with an earlier operation",
                    tool.name,
                    method.value,
                    path,
                )
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.NAME_COLLISION,
                        message=f"Tool name '{tool.name}' is used by more than one operation",
                        method=method.value,
                        path=str(path),
                        tool_name=tool.name,
                    )
                )
            seen_names.add(tool.name)
            tools.append(tool)

    return tools, diagnostics


def build_tool(
    path: str,
    method: HTTPMethod,
    operation: Any,
    spec_version: SpecVersion,
    context: ResolutionContext,
    diagnostics: list[Diagnostic],
) -> Optional[ToolDefinition]:
    """Map a single operation to a :class:`ToolDefinition`.

    Body parameters (POST/PUT/PATCH only) are merged over the named
    parameters, so a body property wins when both share a name.

    Returns:
        The tool, or ``None`` when the operation is malformed or no valid
        tool name can be generated for it.
    """
    if not isinstance(operation, dict):
        logger.warning("Skipping operation %s %s: not an object", method.value, path)
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.SKIPPED_OPERATION,
                message="Operation is not an object",
                method=method.value,
                path=path,
            )
        )
        return None

    operation_id = operation.get("operationId")
    if not isinstance(operation_id, str):
        operation_id = None

    name = generate_tool_name(operation_id, method.value, path)
    if name is None:
        logger.warning(
            "Skipping operation %s %s: unable to generate valid tool name",
            method.value,
            path,
        )
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.SKIPPED_OPERATION,
                message="Unable to generate a valid tool name",
                method=method.value,
                path=path,
            )
        )
        return None

    raw_parameters = operation.get("parameters") or []
    parameters = extract_parameters(
        raw_parameters, context, diagnostics, method=method.value, path=path
    )
    if method in BODY_METHODS:
        parameters.update(extract_request_body(operation, spec_version, context))

    tags = operation.get("tags") or []

    return ToolDefinition(
        name=name,
        description=_text(
            operation.get("summary"),
            operation.get("description"),
            default=DEFAULT_TOOL_DESCRIPTION,
        ),
        method=method,
        path=path,
        parameters=parameters,
        response_schema=extract_response_schema(
            operation.get("responses") or {}, spec_version, context
        ),
        operation_id=operation_id,
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
    )


def extract_parameters(
    parameters: Any,
    context: ResolutionContext,
    diagnostics: Optional[list[Diagnostic]] = None,
    method: Optional[str] = None,
    path: Optional[str] = None,
) -> dict[str, ParameterSpec]:
    """Convert an operation's ``parameters`` array into :class:`ParameterSpec` entries.

    ``location`` comes from ``in`` (default ``query``), ``required`` defaults
    to ``False``, and ``type``/``enum``/``format`` are read from the
    ref-resolved ``schema`` (``type`` defaults to ``string``), or from the
    parameter itself when it has no ``schema`` (Swagger 2.0). Parameters
    that describe their value with ``content`` instead (such as the OpenAPI
    3.2 ``querystring`` parameter) use the schema of its JSON media type, or
    of the first media type declaring one. Parameter entries that are
    themselves pure ``$ref`` pointers are resolved first.

    Entries that are not objects, have no ``name``, or use an unknown ``in``
    location are skipped; *method* and *path* identify the operation in the
    diagnostics recorded for them. The Swagger 2.0 ``in: body`` parameter
    is kept under its own name with location ``body``.

    Returns:
        A dict mapping parameter name to spec, in declaration order.
    """
    result: dict[str, ParameterSpec] = {}
    if not isinstance(parameters, list):
        return result

    for param in parameters:
        if isinstance(param, dict) and "$ref" in param:
            param = resolve_refs(param, context)
        if not isinstance(param, dict):
            continue

        name = param.get("name")
        if not name or not isinstance(name, str):
            continue

        try:
            location = ParameterLocation(param.get("in") or "query")
        except ValueError:
            logger.debug("Skipping parameter '%s' with unknown location %r", name, param.get("in"))
            if diagnostics is not None:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.SKIPPED_PARAMETER,
                        message=f"Parameter '{name}' has unknown location {param.get('in')!r}",
                        method=method,
                        path=path,
                    )
                )
            continue

        if "schema" in param:
            schema = resolve_refs(param.get("schema") or {}, context)
        elif isinstance(param.get("content"), dict):
            schema = resolve_refs(_content_schema(param) or {}, context)
        else:
            # Swagger 2.0 non-body parameters declare type/enum/format inline
            schema = param
        if not isinstance(schema, dict):
            schema = {}

        result[name] = _parameter_spec(
            schema,
            location,
            required=bool(param.get("required", False)),
            description=param.get("description"),
        )

    return result


def extract_request_body(
    operation: dict[str, Any],
    spec_version: SpecVersion,
    context: ResolutionContext,
) -> dict[str, ParameterSpec]:
    """Decompose an operation's JSON request body into body parameters.

    Swagger 2.0 reads the ``schema`` of the first ``in: body`` parameter;
    OpenAPI 3.x reads ``requestBody.content["application/json"].schema``.
    Only object-typed schemas are decomposed -- one parameter per property,
    required when listed in the schema's ``required`` array.

    Returns:
        A dict mapping property name to spec; empty when there is no JSON
        object body.
    """
    if spec_version.is_swagger:
        raw_schema = _swagger2_body_schema(operation.get("parameters") or [])
    else:
        request_body = operation.get("requestBody")
        if isinstance(request_body, dict) and "$ref" in request_body:
            request_body = resolve_refs(request_body, context)
        raw_schema = _json_content_schema(request_body)

    if raw_schema is None:
        return {}

    schema = resolve_refs(raw_schema, context)
    if not isinstance(schema, dict) or schema.get("type") != "object":
        return {}

    properties = schema.get("properties") or {}
    required = schema.get("required") or []
    if not isinstance(properties, dict):
        return {}

    result: dict[str, ParameterSpec] = {}
    for name, prop in properties.items():
        if not isinstance(prop, dict):
            continue
        result[str(name)] = _parameter_spec(
            prop,
            ParameterLocation.BODY,
            required=isinstance(required, list) and name in required,
            description=prop.get("description"),
        )
    return result


def extract_response_schema(
    responses: Any,
    spec_version: SpecVersion,
    context: ResolutionContext,
) -> Optional[Any]:
    """Return the resolved schema of the first 2xx response.

    Response keys are scanned in document order; the first key starting
    with ``"2"`` whose entry is an object is used. Swagger 2.0 reads
    ``schema`` directly; OpenAPI 3.x reads
    ``content["application/json"].schema``.

    Returns:
        The resolved schema, or ``None`` when no success response declares
        one.
    """
    if not isinstance(responses, dict):
        return None

    for status_code, response in responses.items():
        if not str(status_code).startswith("2") or not isinstance(response, dict):
            continue
        if "$ref" in response:
            response = resolve_refs(response, context)
            if not isinstance(response, dict):
                continue

        if spec_version.is_swagger:
            schema = response.get("schema")
        else:
            schema = _json_content_schema(response)

        if schema is not None:
            return resolve_refs(schema, context)

    return None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _swagger2_body_schema(parameters: Any) -> Optional[Any]:
    """Return the ``schema`` of the first Swagger 2.0 ``in: body`` parameter."""
    if not isinstance(parameters, list):
        return None
    for param in parameters:
        if isinstance(param, dict) and param.get("in") == "body" and param.get("schema") is not None:
            return param["schema"]
    return None


def _text(*values: Any, default: str = "") -> str:
    """Return the first non-empty string among *values*, else *default*."""
    for value in values:
        if isinstance(value, str) and value:
            return value
    return default


def _json_content_schema(container: Any) -> Optional[Any]:
    """Return ``container.content["application/json"].schema``, if present."""
    if not isinstance(container, dict):
        return None
    content = container.get("content")
    if not isinstance(content, dict):
        return None
    json_content = content.get(JSON_CONTENT_TYPE)
    if not isinstance(json_content, dict):
        return None
    return json_content.get("schema")


def _content_schema(param: dict[str, Any]) -> Optional[Any]:
    """Schema of a ``content``-style parameter, preferring ``application/json``."""
    json_schema = _json_content_schema(param)
    if json_schema is not None:
        return json_schema
    for media in param["content"].values():
        if isinstance(media, dict) and media.get("schema") is not None:
            return media["schema"]
    return None


def _schema_type(schema: dict[str, Any]) -> str:
    """Extract the type string from a schema object.

    OpenAPI 3.1 allows ``type`` to be an array (e.g., ``["string", "null"]``);
    the first non-null entry is used. Falls back to ``"string"``.
    """
    type_value = schema.get("type") or "string"

    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else "string"

    return str(type_value)


def _parameter_spec(
    schema: dict[str, Any],
    location: ParameterLocation,
    required: bool,
    description: Any,
) -> ParameterSpec:
    """Build a :class:`ParameterSpec`, ignoring ``enum``/``format`` of the wrong shape."""
    enum_values = schema.get("enum")
    schema_format = schema.get("format")
    return ParameterSpec(
        description=description if isinstance(description, str) else "",
        required=required,
        location=location,
        type=_schema_type(schema),
        enum=enum_values if isinstance(enum_values, list) else None,
        format=schema_format if isinstance(schema_format, str) else None,
    )
