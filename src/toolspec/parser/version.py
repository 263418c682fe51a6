"""Detect which OpenAPI dialect a decoded document is written in.

Swagger 2.0 and OpenAPI 3.x place the base URL, request bodies, and
response schemas in different parts of an operation, so every extractor
branches on the :class:`~toolspec.models.SpecVersion` returned here.
"""

from __future__ import annotations

from typing import Any

from toolspec.exceptions import (
    MissingVersionFieldError,
    SpecParseError,
    UnsupportedVersionError,
)
from toolspec.models import SpecVersion

_OPENAPI_PREFIXES = (
    ("3.0", SpecVersion.OPENAPI_3_0),
    ("3.1", SpecVersion.OPENAPI_3_1),
    ("3.2", SpecVersion.OPENAPI_3_2),
)


def detect_spec_version(document: Any) -> SpecVersion:
    """Classify *document* as Swagger 2.0 or OpenAPI 3.0/3.1/3.2.

    A ``swagger`` field takes precedence over an ``openapi`` field. Version
    values must be strings; a YAML-decoded ``swagger: 2.0`` (a float) is
    rejected just like any other unsupported value.

    Args:
        document: The decoded spec document.

    Returns:
        The detected :class:`~toolspec.models.SpecVersion`.

    Raises:
        UnsupportedVersionError: If the ``swagger`` value does not start with
            ``"2."`` or the ``openapi`` value matches no supported 3.x line.
        MissingVersionFieldError: If neither field is present.
        SpecParseError: If *document* is not a mapping.

    Example::

        >>> detect_spec_version({"openapi": "3.1.2"})
        <SpecVersion.OPENAPI_3_1: 'openapi_3.1'>
    """
    if not isinstance(document, dict):
        raise SpecParseError(
            f"Spec must be a JSON/YAML object (got {type(document).__name__})"
        )

    if "swagger" in document:
        swagger_version = document["swagger"]
        if isinstance(swagger_version, str) and swagger_version.startswith("2."):
            return SpecVersion.SWAGGER_2
        raise UnsupportedVersionError(f"Unsupported Swagger version: {swagger_version}")

    if "openapi" in document:
        openapi_version = document["openapi"]
        if isinstance(openapi_version, str):
            for prefix, version in _OPENAPI_PREFIXES:
                if openapi_version.startswith(prefix):
                    return version
        raise UnsupportedVersionError(f"Unsupported OpenAPI version: {openapi_version}")

    raise MissingVersionFieldError(
        'Unable to detect spec version: missing "swagger" or "openapi" field'
    )
