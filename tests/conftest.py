"""Shared test fixtures for toolspec.

Provides reusable fixtures for loading spec documents, building small
tool lists, isolating the environment from ``TOOLSPEC_*`` variables, and
managing output state. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from toolspec.models import HTTPMethod, ToolDefinition
from toolspec.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_toolspec_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove TOOLSPEC_* variables so the developer's shell cannot leak in."""
    for var in ("TOOLSPEC_BASE_URL", "TOOLSPEC_RESOURCES", "TOOLSPEC_PATH_PREFIX"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def users_30_raw() -> dict[str, Any]:
    """Load the raw Users API (OpenAPI 3.0) spec dict."""
    with open(FIXTURES_DIR / "users_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_20_raw() -> dict[str, Any]:
    """Load the raw Swagger Petstore (Swagger 2.0) spec dict."""
    with open(FIXTURES_DIR / "petstore_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def users_30_path() -> Path:
    """Path to the Users API fixture file."""
    return FIXTURES_DIR / "users_3.0.json"


@pytest.fixture
def petstore_20_path() -> Path:
    """Path to the Swagger Petstore fixture file."""
    return FIXTURES_DIR / "petstore_2.0.json"


# ---------------------------------------------------------------------------
# Tool fixtures
# ---------------------------------------------------------------------------


def _make_tool(
    path: str,
    name: str = "tool",
    method: HTTPMethod = HTTPMethod.GET,
    description: str = "No description provided",
    tags: list[str] | None = None,
) -> ToolDefinition:
    """Build a minimal ToolDefinition for filter and docs tests."""
    return ToolDefinition(
        name=name,
        description=description,
        method=method,
        path=path,
        tags=tags or [],
    )


@pytest.fixture
def make_tool():
    """Factory fixture returning the ToolDefinition builder."""
    return _make_tool


@pytest.fixture
def github_tools() -> list[ToolDefinition]:
    """Tools shaped like a slice of the GitHub REST API."""
    return [
        _make_tool("/repos/{owner}/{repo}", name="reposGet", tags=["repos"]),
        _make_tool(
            "/repos/{owner}/{repo}/issues",
            name="issuesListForRepo",
            description="List repository issues",
            tags=["issues"],
        ),
        _make_tool(
            "/user/repos",
            name="reposListForAuthenticatedUser",
            description="List repositories for the authenticated user",
            tags=["repos"],
        ),
    ]
