"""Resolve ``$ref`` JSON Reference pointers in OpenAPI schemas.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to share schema fragments. This
module expands them lazily: only the subtrees an extractor actually reads
(parameter schemas, request bodies, success responses) are resolved, and
every pointer is expanded at most once per parse thanks to a memo held in a
:class:`ResolutionContext`.

Resolution rules, by node shape:

1. A mapping holding a composition keyword (``anyOf``, ``oneOf``, ``allOf``,
   checked in that order, first match wins) has its branches resolved in
   *polymorphic* mode. Its other keys are resolved in the caller's mode.
2. A *pure* ``$ref`` mapping (``$ref`` is its only key and holds a string)
   is expanded:

   * external pointers (not starting with ``#/``) are returned unchanged;
   * in polymorphic mode, pointers to object schemas (``type: object`` or a
     ``properties`` key) stay unexpanded so discriminated unions remain
     readable, as do pointers that cannot be located;
   * otherwise the memo is consulted, then the resolution stack: a pointer
     already on the stack is a cycle and becomes :data:`CIRCULAR_REFERENCE`.
     A pointer missing from the document becomes
     :data:`UNRESOLVED_REFERENCE`.

3. Other mappings and sequences are resolved element-wise; scalars pass
   through.

The input document is never mutated. Resolved values may be shared between
several places in the output (memo hits return the same object), so callers
must treat results as read-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from toolspec.exceptions import RefLookupError

logger = logging.getLogger(__name__)

COMPOSITION_KEYWORDS = ("anyOf", "oneOf", "allOf")
"""Composition keywords, in the priority order used when several are present."""

CIRCULAR_REFERENCE: dict[str, str] = {
    "type": "object",
    "description": "Circular reference",
}
"""Placeholder substituted for a ``$ref`` that points back into its own expansion."""

UNRESOLVED_REFERENCE: dict[str, str] = {
    "type": "object",
    "description": "Unresolved reference",
}
"""Placeholder substituted for a ``$ref`` whose target does not exist."""


@dataclass
class ResolutionContext:
    """Per-parse state for :func:`resolve_refs`.

    Create one per top-level parse and discard it afterwards. Memo entries
    are keyed by pointer string, which is only meaningful against a single
    ``root`` document, so a context must never be reused for another
    document or shared between concurrent parses.

    Attributes:
        root: The document every pointer is resolved against.
        memo: Pointer -> resolved schema cache.
    """

    root: Any
    memo: dict[str, Any] = field(default_factory=dict)


def resolve_schema(node: Any, root: Any) -> Any:
    """Resolve *node* against *root* with a fresh :class:`ResolutionContext`.

    Convenience wrapper for one-off resolution outside a full parse.

    Example::

        schema = resolve_schema({"$ref": "#/definitions/Pet"}, document)
    """
    return resolve_refs(node, ResolutionContext(root=root))


def resolve_refs(
    node: Any,
    context: ResolutionContext,
    stack: tuple[str, ...] = (),
    inside_polymorphic: bool = False,
) -> Any:
    """Recursively expand the ``$ref`` pointers within *node*.

    Args:
        node: The subtree to resolve -- a mapping, a sequence, or a scalar.
        context: The per-parse :class:`ResolutionContext`.
        stack: Pointers currently being expanded on this branch, outermost
            first. Never contains duplicates: a pointer is checked against
            the stack before it is pushed.
        inside_polymorphic: ``True`` while resolving the branches of a
            composition keyword.

    Returns:
        A new structure with every expandable ``$ref`` replaced. Scalars are
        returned as-is.
    """
    if isinstance(node, dict):
        keyword = _composition_keyword(node)
        if keyword is not None:
            return _resolve_composition(node, keyword, context, stack, inside_polymorphic)

        if _is_pure_ref(node):
            return _resolve_pointer(node, context, stack, inside_polymorphic)

        return {
            key: resolve_refs(value, context, stack, inside_polymorphic)
            for key, value in node.items()
        }

    if isinstance(node, list):
        return [resolve_refs(item, context, stack, inside_polymorphic) for item in node]

    return node


def lookup_ref(root: Any, ref: str) -> Any:
    """Locate the value an internal ``$ref`` pointer names within *root*.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``) and
    numeric indices into sequences.

    Args:
        root: The document to navigate.
        ref: The pointer string (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The value found at the pointer path.

    Raises:
        RefLookupError: If the pointer is not internal, or if any segment
            does not exist in the document.
    """
    if not ref.startswith("#/"):
        raise RefLookupError(f"Not an internal $ref: {ref}")

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise RefLookupError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise RefLookupError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise RefLookupError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _composition_keyword(node: dict[str, Any]) -> Optional[str]:
    """Return the first composition keyword present in *node*, if any."""
    for keyword in COMPOSITION_KEYWORDS:
        if keyword in node:
            return keyword
    return None


def _is_pure_ref(node: dict[str, Any]) -> bool:
    """Return ``True`` if *node* is ``{"$ref": "<string>"}`` and nothing else."""
    return len(node) == 1 and isinstance(node.get("$ref"), str)


def _is_object_schema(schema: Any) -> bool:
    """Return ``True`` if *schema* describes an object (by type or properties)."""
    return isinstance(schema, dict) and (
        schema.get("type") == "object" or "properties" in schema
    )


def _resolve_composition(
    node: dict[str, Any],
    keyword: str,
    context: ResolutionContext,
    stack: tuple[str, ...],
    inside_polymorphic: bool,
) -> dict[str, Any]:
    """Resolve a node holding ``anyOf``/``oneOf``/``allOf``.

    Branches are resolved in polymorphic mode; sibling keys keep the
    caller's mode. A malformed (non-list) keyword value is resolved as an
    ordinary value.
    """
    branches = node[keyword]
    if isinstance(branches, list):
        resolved_branches: Any = [
            resolve_refs(branch, context, stack, inside_polymorphic=True)
            for branch in branches
        ]
    else:
        resolved_branches = resolve_refs(branches, context, stack, inside_polymorphic=True)

    result: dict[str, Any] = {keyword: resolved_branches}
    for key, value in node.items():
        if key != keyword:
            result[key] = resolve_refs(value, context, stack, inside_polymorphic)
    return result


def _resolve_pointer(
    node: dict[str, Any],
    context: ResolutionContext,
    stack: tuple[str, ...],
    inside_polymorphic: bool,
) -> Any:
    """Expand a pure ``$ref`` node according to the module-level rules."""
    ref: str = node["$ref"]

    if not ref.startswith("#/"):
        logger.debug("Leaving external $ref unresolved: %s", ref)
        return node

    if inside_polymorphic:
        try:
            target = lookup_ref(context.root, ref)
        except RefLookupError:
            return node
        if _is_object_schema(target):
            return node

    if ref in context.memo:
        return context.memo[ref]

    if ref in stack:
        logger.debug("Circular $ref detected: %s", ref)
        placeholder = dict(CIRCULAR_REFERENCE)
        context.memo[ref] = placeholder
        return placeholder

    try:
        target = lookup_ref(context.root, ref)
    except RefLookupError as exc:
        logger.debug("%s", exc)
        placeholder = dict(UNRESOLVED_REFERENCE)
        context.memo[ref] = placeholder
        return placeholder

    resolved = resolve_refs(target, context, stack + (ref,), inside_polymorphic)
    context.memo[ref] = resolved
    return resolved
