"""toolspec -- Compile OpenAPI 2.0/3.x documents into callable tool definitions.

This package turns an already-decoded OpenAPI or Swagger document into a
flat list of :class:`~toolspec.models.ToolDefinition` objects, one per HTTP
operation, with parameter and response schemas fully resolved. The result
is suitable for exposing an HTTP API to an agent as a set of named tools.

Typical usage::

    from toolspec.parser import extract_spec, load_spec

    spec = extract_spec(load_spec("https://api.example.com/openapi.json"))
    for tool in spec.tools:
        print(tool.name, tool.method.value, tool.path)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: Parse option resolution from flags, env vars, and project config.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    docs: Markdown documentation for individual tools.
"""

__version__ = "0.3.0"
