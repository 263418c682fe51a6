"""Integration tests for the toolspec CLI.

Runs the real root app through Typer's CliRunner against the JSON
fixtures, checking stdout data, stderr diagnostics, and exit codes.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from toolspec import __version__
from toolspec.app import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def duplicates_path(tmp_path: Path) -> Path:
    """A document whose two operations normalize to the same tool name."""
    spec_file = tmp_path / "dupes.json"
    spec_file.write_text(
        json.dumps(
            {
                "openapi": "3.0.0",
                "paths": {
                    "/a": {"get": {"operationId": "fetch"}},
                    "/b": {"get": {"operationId": "Fetch"}},
                },
            }
        ),
        encoding="utf-8",
    )
    return spec_file


# ---------------------------------------------------------------------------
# Global flags
# ---------------------------------------------------------------------------


class TestGlobalFlags:
    """Root callback options."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"toolspec {__version__}" in result.output

    def test_no_args_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, [])
        assert "tools" in result.output
        assert "formats" in result.output


# ---------------------------------------------------------------------------
# tools
# ---------------------------------------------------------------------------


class TestToolsCommand:
    """toolspec tools SOURCE."""

    def test_plain_table(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--plain", "tools", str(users_30_path)])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert lines[0] == "Name\tMethod\tPath\tDescription"
        assert lines[1] == "listUsers\tGET\t/users\tList users"
        assert lines[2] == "createUser\tPOST\t/users\tCreate a new user"

    def test_json_output(self, runner: CliRunner, petstore_20_path: Path) -> None:
        result = runner.invoke(app, ["--json", "tools", str(petstore_20_path)])
        assert result.exit_code == 0, result.output
        tools = json.loads(result.stdout)
        assert [tool["name"] for tool in tools] == [
            "findPets",
            "addPet",
            "getpetspetId",
            "deletePet",
        ]
        assert tools[0]["parameters"]["status"]["enum"] == ["available", "pending", "sold"]
        assert "format" not in tools[0]["parameters"]["status"]

    def test_resource_filter(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--json", "tools", str(users_30_path), "-r", "orders"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []

    def test_tag_and_search(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--json", "tools", str(users_30_path), "--tag", "admin"])
        assert [t["name"] for t in json.loads(result.stdout)] == ["createUser"]

        result = runner.invoke(app, ["--json", "tools", str(users_30_path), "--search", "LIST"])
        assert [t["name"] for t in json.loads(result.stdout)] == ["listUsers"]

    def test_resources_from_env(
        self, runner: CliRunner, users_30_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TOOLSPEC_RESOURCES", "orders")
        result = runner.invoke(app, ["--json", "tools", str(users_30_path)])
        assert json.loads(result.stdout) == []

    def test_from_url(self, runner: CliRunner, users_30_path: Path) -> None:
        response = httpx.Response(
            200,
            text=users_30_path.read_text(encoding="utf-8"),
            headers={"content-type": "application/json"},
            request=httpx.Request("GET", "https://users.example.com/openapi.json"),
        )
        with patch("toolspec.parser.loader.httpx.get", return_value=response):
            result = runner.invoke(
                app, ["--json", "tools", "https://users.example.com/openapi.json"]
            )
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 2

    def test_path_prefix_with_resource(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(
            app, ["--json", "tools", str(users_30_path), "-r", "users", "--path-prefix", "/api"]
        )
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 2

    def test_path_prefix_without_resource(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "tools", str(users_30_path), "--path-prefix", "/v1"])
        assert result.exit_code == 2
        assert "--path-prefix only applies together with --resource" in result.output

    def test_missing_file_exit_code(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "tools", str(tmp_path / "missing.json")])
        assert result.exit_code == 7
        assert "Spec file not found" in result.output

    def test_unsupported_version_exit_code(self, runner: CliRunner, tmp_path: Path) -> None:
        spec_file = tmp_path / "future.json"
        spec_file.write_text(json.dumps({"openapi": "4.0.0", "paths": {}}), encoding="utf-8")
        result = runner.invoke(app, ["--no-color", "tools", str(spec_file)])
        assert result.exit_code == 7
        assert "Unsupported OpenAPI version: 4.0.0" in result.output

    def test_bad_project_config_exit_code(
        self, runner: CliRunner, users_30_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "toolspec.json").write_text("[]", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["--no-color", "tools", str(users_30_path)])
        assert result.exit_code == 1
        assert "must be a JSON object" in result.output

    def test_diagnostics_noted_on_stderr(self, runner: CliRunner, duplicates_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "--plain", "tools", str(duplicates_path)])
        assert result.exit_code == 0, result.output
        assert "1 parse diagnostics; run 'toolspec info' to list them" in result.output

    def test_quiet_hides_diagnostics_note(self, runner: CliRunner, duplicates_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "--plain", "-q", "tools", str(duplicates_path)])
        assert result.exit_code == 0, result.output
        assert "parse diagnostics" not in result.output


# ---------------------------------------------------------------------------
# show / info / formats
# ---------------------------------------------------------------------------


class TestShowCommand:
    """toolspec show SOURCE NAME."""

    def test_markdown(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--plain", "show", str(users_30_path), "createUser"])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("## createUser\n**Method:** POST\n")
        assert "- **name** (required) [body]: Display name" in result.stdout
        assert "**Tags:** users, admin" in result.stdout

    def test_json(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--json", "show", str(users_30_path), "listUsers"])
        tool = json.loads(result.stdout)
        assert tool["method"] == "GET"
        assert tool["parameters"]["limit"] == {
            "description": "Page size",
            "required": False,
            "location": "query",
            "type": "integer",
            "format": "int32",
        }

    def test_unknown_tool(self, runner: CliRunner, users_30_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "show", str(users_30_path), "deleteUser"])
        assert result.exit_code == 4
        assert "No tool named 'deleteUser'" in result.output

    def test_duplicate_name_warns(self, runner: CliRunner, duplicates_path: Path) -> None:
        result = runner.invoke(app, ["--no-color", "--plain", "show", str(duplicates_path), "fetch"])
        assert result.exit_code == 0, result.output
        assert "Warning: 2 tools are named 'fetch'; showing the first (GET /a)" in result.output
        assert "**Path:** /a" in result.output


class TestInfoCommand:
    """toolspec info SOURCE."""

    def test_info(self, runner: CliRunner, petstore_20_path: Path) -> None:
        result = runner.invoke(app, ["--json", "info", str(petstore_20_path)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["title"] == "Swagger Petstore"
        assert data["base_url"] == "https://api.example.com/v1"
        assert data["spec_version"] == "swagger_2"
        assert data["format"] == "OpenAPI"
        assert data["tools"] == 4
        assert data["diagnostics"] == []

    def test_info_reports_collisions(self, runner: CliRunner, duplicates_path: Path) -> None:
        result = runner.invoke(app, ["--json", "info", str(duplicates_path)])
        data = json.loads(result.stdout)
        assert data["tools"] == 2
        assert data["diagnostics"][0]["kind"] == "name_collision"
        assert data["diagnostics"][0]["tool_name"] == "fetch"


class TestFormatsCommand:
    """toolspec formats."""

    def test_formats(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "formats"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OpenAPI"
