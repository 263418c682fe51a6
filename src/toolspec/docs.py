"""Render human-readable Markdown documentation for tools."""

from __future__ import annotations

from toolspec.models import ToolDefinition


def generate_tool_documentation(tool: ToolDefinition) -> str:
    """Return a Markdown description of *tool*.

    Lists the method, path, and description, then every parameter with its
    required flag and location, then the tags.

    Example::

        ## listUsers
        **Method:** GET
        **Path:** /users
        **Description:** List users

        ### Parameters:
        - **limit** (optional) [query]: Page size
    """
    lines = [
        f"## {tool.name}",
        f"**Method:** {tool.method.value}",
        f"**Path:** {tool.path}",
        f"**Description:** {tool.description}",
        "",
    ]

    if tool.parameters:
        lines.append("### Parameters:")
        for name, param in tool.parameters.items():
            required = " (required)" if param.required else " (optional)"
            lines.append(
                f"- **{name}**{required} [{param.location.value}]: {param.description}"
            )
        lines.append("")

    if tool.tags:
        lines.append(f"**Tags:** {', '.join(tool.tags)}")
        lines.append("")

    return "\n".join(lines)
