"""Narrow a tool list down to the tools a caller cares about.

Large APIs (GitHub, Stripe, Twilio) expose hundreds of operations. Handing
all of them to an agent is wasteful, so callers usually restrict the set:

* :func:`filter_tools_by_resources` -- keep tools whose *first* path
  segment names one of the requested resources.
* :func:`get_tools_by_tag` -- keep tools carrying a given OpenAPI tag.
* :func:`search_tools` -- keep tools whose name or description contains a
  query string.

Resource matching is segment-exact: ``"payment"`` does not match
``/payments``, and ``"repos"`` does not match ``/user/repos``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from toolspec.models import ToolDefinition


def filter_tools_by_resources(
    tools: list[ToolDefinition],
    resources: Optional[Iterable[str]],
    path_prefix: Optional[str] = None,
) -> list[ToolDefinition]:
    """Keep tools whose first resource segment is one of *resources*.

    For each tool, *path_prefix* is stripped from the path when it matches
    case-insensitively, dots are treated as segment separators, and path
    parameter placeholders (``{id}``) and empty segments are ignored. The
    first remaining segment must equal one of *resources*, compared
    case-insensitively.

    Args:
        tools: The tools to filter.
        resources: Resource names to keep. ``None`` or empty keeps every
            tool.
        path_prefix: Optional prefix (e.g., ``"/v1"``) stripped before
            matching.

    Returns:
        The matching tools, in their original order. When no filtering
        applies, *tools* itself is returned.

    Example::

        >>> [t.path for t in filter_tools_by_resources(tools, ["payments"], "/v1")]
        ['/v1/payments']
    """
    if not resources:
        return tools

    wanted = {resource.lower() for resource in resources}
    if not wanted:
        return tools

    return [
        tool
        for tool in tools
        if _first_resource_segment(tool.path, path_prefix) in wanted
    ]


def _first_resource_segment(path: str, path_prefix: Optional[str]) -> Optional[str]:
    """Return the lower-cased first non-parameter segment of *path*.

    ``"/repos/{owner}/{repo}"`` -> ``"repos"``; ``"/{id}"`` -> ``None``.
    """
    if path_prefix and path.lower().startswith(path_prefix.lower()):
        path = path[len(path_prefix):]

    segments = [
        segment
        for segment in path.lower().replace(".", "/").split("/")
        if segment and not segment.startswith("{")
    ]
    return segments[0] if segments else None


def get_tools_by_tag(tools: list[ToolDefinition], tag: str) -> list[ToolDefinition]:
    """Return the tools whose ``tags`` include *tag* (exact match)."""
    return [tool for tool in tools if tag in tool.tags]


def search_tools(tools: list[ToolDefinition], query: str) -> list[ToolDefinition]:
    """Return the tools whose name or description contains *query*.

    Matching is a case-insensitive substring test.
    """
    needle = query.lower()
    return [
        tool
        for tool in tools
        if needle in tool.name.lower() or needle in tool.description.lower()
    ]
