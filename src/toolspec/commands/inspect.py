"""Inspect commands -- examine the tools compiled from a spec.

Every command takes a ``SOURCE`` (URL, file path, or ``-`` for stdin),
loads and parses it through the
:class:`~toolspec.parser.registry.ParserRegistry`, and prints the result
in table or structured form.
"""

from __future__ import annotations

from typing import Optional

import typer

from toolspec.exceptions import InvalidUsageError, ToolNotFoundError, ToolspecError
from toolspec.models import ApiSpecification, ToolDefinition
from toolspec.output import OutputFormat, debug, error, get_output, info, warning


def _load_and_parse(
    source: str,
    base_url: Optional[str] = None,
    resources: Optional[list[str]] = None,
    path_prefix: Optional[str] = None,
) -> ApiSpecification:
    """Load *source* and parse it with the resolved options.

    Options are resolved with :func:`~toolspec.config.resolve_options`, so
    unset flags fall back to environment variables and ``toolspec.json``.

    Raises:
        typer.Exit: With the error's exit code when loading, config
            resolution, or parsing fails, or with code 2 when
            *path_prefix* is given without any resource filter.
    """
    from toolspec.config import resolve_options
    from toolspec.parser import ParserRegistry, load_spec

    try:
        options = resolve_options(
            cli_base_url=base_url,
            cli_resources=resources,
            cli_path_prefix=path_prefix,
        )
        if path_prefix is not None and not options.include_resources:
            raise InvalidUsageError("--path-prefix only applies together with --resource")
        document = load_spec(source)
        spec = ParserRegistry().parse(
            document,
            base_url=options.base_url,
            include_resources=options.include_resources,
            path_prefix=options.path_prefix,
        )
    except ToolspecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(
        f"Parsed {spec.title} {spec.version} ({spec.spec_version.value}): "
        f"{len(spec.tools)} tools, {len(spec.diagnostics)} diagnostics"
    )
    return spec


def _summary(text: str, width: int = 60) -> str:
    """First line of *text*, truncated for table display."""
    line = text.strip().splitlines()[0] if text.strip() else ""
    return line if len(line) <= width else line[: width - 3] + "..."


def tools_command(
    source: str = typer.Argument(..., help="Spec URL, file path, or '-' for stdin."),
    resource: Optional[list[str]] = typer.Option(
        None, "--resource", "-r", help="Keep only tools for this resource (repeatable)."
    ),
    path_prefix: Optional[str] = typer.Option(
        None, "--path-prefix", help="Prefix stripped before resource matching."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the spec's base URL."
    ),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Keep only tools with this tag."),
    search: Optional[str] = typer.Option(
        None, "--search", "-s", help="Keep only tools whose name or description match."
    ),
) -> None:
    """List the tools compiled from a spec.

    Example::

        toolspec tools ./openapi.json
        toolspec tools https://api.github.com/openapi.json -r repos -r user/repos
        toolspec --json tools ./openapi.yaml --tag pets
    """
    from toolspec.parser import get_tools_by_tag, search_tools

    spec = _load_and_parse(source, base_url, resource, path_prefix)
    if spec.diagnostics:
        info(f"{len(spec.diagnostics)} parse diagnostics; run 'toolspec info' to list them")

    tools: list[ToolDefinition] = spec.tools
    if tag:
        tools = get_tools_by_tag(tools, tag)
    if search:
        tools = search_tools(tools, search)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data([tool.to_dict() for tool in tools])
        return

    headers = ["Name", "Method", "Path", "Description"]
    rows = [
        [tool.name, tool.method.value, tool.path, _summary(tool.description)]
        for tool in tools
    ]
    output.print_table(headers, rows, title=f"{spec.title} -- Tools ({len(rows)})")


def show_command(
    source: str = typer.Argument(..., help="Spec URL, file path, or '-' for stdin."),
    name: str = typer.Argument(..., help="Tool name."),
) -> None:
    """Show the documentation of a single tool.

    Example::

        toolspec show ./openapi.json listUsers
    """
    from toolspec.docs import generate_tool_documentation

    spec = _load_and_parse(source)
    tool = spec.get_tool(name)
    if tool is None:
        exc = ToolNotFoundError(f"No tool named '{name}' in {spec.title}")
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    duplicates = sum(1 for candidate in spec.tools if candidate.name == name)
    if duplicates > 1:
        warning(
            f"{duplicates} tools are named '{name}'; "
            f"showing the first ({tool.method.value} {tool.path})"
        )

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(tool.to_dict())
    else:
        output.print_markdown(generate_tool_documentation(tool))


def info_command(
    source: str = typer.Argument(..., help="Spec URL, file path, or '-' for stdin."),
) -> None:
    """Show general API information and parse diagnostics.

    Example::

        toolspec info ./openapi.json
    """
    spec = _load_and_parse(source)
    data = {
        "title": spec.title,
        "version": spec.version,
        "description": spec.description,
        "base_url": spec.base_url,
        "spec_version": spec.spec_version.value,
        "format": spec.format_name,
        "tools": len(spec.tools),
        "diagnostics": [diag.model_dump(mode="json") for diag in spec.diagnostics],
    }
    get_output().format_data(data)


def formats_command() -> None:
    """List the spec formats the parser registry understands."""
    from toolspec.parser import ParserRegistry

    get_output().format_data(ParserRegistry().supported_formats)
