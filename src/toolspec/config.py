"""Parse option resolution with a CLI > env > project > default precedence.

The parser itself takes plain arguments; this module gathers them for the
CLI from three places:

* **Project config** -- an optional ``toolspec.json`` in the working
  directory, e.g.::

      {"base_url": "https://staging.example.com",
       "include_resources": ["repos", "issues"],
       "path_prefix": "/api/v3"}

* **Environment variables** -- ``TOOLSPEC_BASE_URL``,
  ``TOOLSPEC_RESOURCES`` (comma-separated), and ``TOOLSPEC_PATH_PREFIX``.
* **CLI flags** -- passed to :func:`resolve_options` by the command.

See :func:`resolve_options` for the full precedence chain.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from toolspec.exceptions import ConfigError
from toolspec.models import ParseOptions

_PROJECT_CONFIG_FILENAME = "toolspec.json"

ENV_BASE_URL = "TOOLSPEC_BASE_URL"
ENV_RESOURCES = "TOOLSPEC_RESOURCES"
ENV_PATH_PREFIX = "TOOLSPEC_PATH_PREFIX"


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``toolspec.json`` from *directory* (default: the working directory).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read project config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


def _split_resources(value: str) -> list[str]:
    """Split a comma-separated resource list, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_options(
    cli_base_url: Optional[str] = None,
    cli_resources: Optional[list[str]] = None,
    cli_path_prefix: Optional[str] = None,
    directory: Optional[Path] = None,
) -> ParseOptions:
    """Resolve parse options with the full precedence chain.

    Precedence (high to low), applied per field:
        1. CLI flags (``cli_base_url``, ``cli_resources``, ``cli_path_prefix``)
        2. Environment variables (``TOOLSPEC_BASE_URL``,
           ``TOOLSPEC_RESOURCES``, ``TOOLSPEC_PATH_PREFIX``)
        3. Project config (``./toolspec.json``)
        4. Defaults (no override, no filtering)

    An empty ``cli_resources`` list counts as "not given".

    Raises:
        ConfigError: If the project config is unreadable or has fields of
            the wrong type.
    """
    # 4 + 3. Defaults, then project config
    project = load_project_config(directory) or {}
    try:
        options = ParseOptions.model_validate(project)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        options.base_url = env_base_url
    env_resources = os.environ.get(ENV_RESOURCES)
    if env_resources:
        options.include_resources = _split_resources(env_resources)
    env_path_prefix = os.environ.get(ENV_PATH_PREFIX)
    if env_path_prefix:
        options.path_prefix = env_path_prefix

    # 1. CLI flags (highest precedence)
    if cli_base_url is not None:
        options.base_url = cli_base_url
    if cli_resources:
        options.include_resources = list(cli_resources)
    if cli_path_prefix is not None:
        options.path_prefix = cli_path_prefix

    return options
