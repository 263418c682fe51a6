"""Load spec documents from a URL, local file, or stdin.

This module is the I/O layer in front of the pure parser: it fetches raw
bytes and decodes them into the ``dict`` that
:func:`~toolspec.parser.extractor.extract_spec` consumes. JSON and YAML
are both accepted; the format is guessed from the response content type or
the file extension and falls back to trying both.

Nothing here is cached. Callers that want to reuse a document should keep
the returned ``dict`` (or the parsed
:class:`~toolspec.models.ApiSpecification`) themselves.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from toolspec.exceptions import SpecParseError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def load_spec(source: str, timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Load a spec document from a URL, a file path, or stdin (``"-"``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``"-"``.
        timeout: Network timeout in seconds for URL sources.

    Returns:
        The decoded document.

    Raises:
        SpecParseError: If the source cannot be read or decoded, or does not
            hold a JSON/YAML object.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return parse_content(content)


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    """Fetch a document over HTTP(S), using the content type as a format hint."""
    logger.debug("Fetching spec from %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a document from disk, using the file extension as a format hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; with a ``"json"`` hint a
    JSON syntax error is final. Otherwise YAML is tried next, since every
    JSON document is also YAML.

    Args:
        content: The raw text.
        hint: ``"json"``, ``"yaml"``, or ``""`` for no preference.

    Returns:
        The decoded mapping.

    Raises:
        SpecParseError: If the content is neither valid JSON nor valid YAML,
            or does not decode to a mapping.
    """
    json_error: Optional[Exception] = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc


def _require_mapping(result: Any) -> dict[str, Any]:
    """Return *result* if it is a mapping, else raise :class:`SpecParseError`."""
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result
