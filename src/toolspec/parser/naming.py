"""Turn operation identifiers into camelCase tool names.

Operation ids in the wild come in every style -- ``FetchAccount``,
``admin_apps_approve``, ``repos/disable-vulnerability-alerts`` -- and some
documents have none at all. :func:`generate_tool_name` applies one policy to
all of them:

1. normalise the ``operationId`` when it is present;
2. otherwise (or when that result is invalid) synthesise a name from the
   HTTP method and path and normalise that;
3. give up (return ``None``) when neither yields a valid name.
"""

from __future__ import annotations

import re
from typing import Optional

_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[/_.\-]+")
_LEADING_LETTER = re.compile(r"^[a-zA-Z]")
_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]")


def normalize_tool_name(name: str) -> str:
    """Normalise *name* to camelCase.

    PascalCase and camelCase compounds are split first, then runs of ``/``,
    ``_``, ``-`` and ``.`` act as word separators. The first word is
    lower-cased; every following word is capitalised.

    If nothing but separators remain, *name* is returned unchanged so the
    caller can detect the failure with :func:`is_valid_tool_name`.

    Example::

        >>> normalize_tool_name("FetchAccount")
        'fetchAccount'
        >>> normalize_tool_name("repos/disable-vulnerability-alerts")
        'reposDisableVulnerabilityAlerts'
        >>> normalize_tool_name("SMS/send")
        'smsSend'
    """
    if not name:
        return name

    split = _CASE_BOUNDARY.sub(r"\1 \2", name)
    words = [word for word in _SEPARATORS.sub(" ", split).split(" ") if word]
    if not words:
        return name

    return words[0].lower() + "".join(
        word[0].upper() + word[1:].lower() for word in words[1:]
    )


def is_valid_tool_name(name: Optional[str]) -> bool:
    """Return ``True`` if *name* is non-empty, starts with an ASCII letter, and
    contains an alphanumeric character."""
    if not name:
        return False
    if not _LEADING_LETTER.match(name):
        return False
    return bool(_ALPHANUMERIC.search(name))


def fallback_tool_name(method: str, path: str) -> str:
    """Synthesise a raw name from *method* and *path*.

    Slashes and braces are removed from the path and the lower-cased method
    is prepended: ``GET /users/{id}`` gives ``getusersid``.
    """
    clean_path = path.replace("/", "").replace("{", "").replace("}", "")
    return f"{method.lower()}{clean_path}"


def generate_tool_name(
    operation_id: Optional[str], method: str, path: str
) -> Optional[str]:
    """Choose the tool name for one operation.

    Args:
        operation_id: The operation's ``operationId``, if any.
        method: The HTTP method key (any case).
        path: The path template (e.g., ``"/users/{id}"``).

    Returns:
        A valid camelCase name, or ``None`` when the operation cannot be
        named and should be skipped.
    """
    if isinstance(operation_id, str) and operation_id:
        candidate = normalize_tool_name(operation_id)
        if is_valid_tool_name(candidate):
            return candidate

    candidate = normalize_tool_name(fallback_tool_name(method, path))
    if is_valid_tool_name(candidate):
        return candidate

    return None
