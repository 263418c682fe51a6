"""Tests for toolspec.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from toolspec.exceptions import SpecParseError
from toolspec.parser.loader import load_spec, parse_content


def _response(text: str, content_type: str = "application/json", status: int = 200) -> httpx.Response:
    request = httpx.Request("GET", "https://api.example.com/openapi.json")
    return httpx.Response(
        status, text=text, headers={"content-type": content_type}, request=request
    )


# ---------------------------------------------------------------------------
# load_spec dispatch
# ---------------------------------------------------------------------------


class TestLoadSpecFile:
    """Loading from local files."""

    def test_loads_json_file(self, users_30_path: Path) -> None:
        result = load_spec(str(users_30_path))
        assert result["openapi"] == "3.0.3"
        assert result["info"]["title"] == "Users API"

    def test_loads_yaml_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "spec.yaml"
        yaml_file.write_text(
            textwrap.dedent("""\
                openapi: "3.1.0"
                info:
                  title: YAML Test
                  version: "1.0.0"
                paths: {}
            """),
            encoding="utf-8",
        )
        result = load_spec(str(yaml_file))
        assert result["info"]["title"] == "YAML Test"

    def test_yaml_without_extension(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "spec"
        spec_file.write_text("swagger: '2.0'\npaths: {}\n", encoding="utf-8")
        assert load_spec(str(spec_file))["swagger"] == "2.0"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            load_spec(str(tmp_path / "nope.json"))

    def test_empty_file(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("  \n", encoding="utf-8")
        with pytest.raises(SpecParseError, match="empty"):
            load_spec(str(empty))

    def test_invalid_json_file_is_final(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("openapi: '3.0.0'", encoding="utf-8")
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            load_spec(str(bad))


class TestLoadSpecStdin:
    """Loading from stdin with "-"."""

    def test_reads_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"openapi": "3.0.0"})))
        assert load_spec("-") == {"openapi": "3.0.0"}

    def test_empty_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(SpecParseError, match="stdin"):
            load_spec("-")


class TestLoadSpecUrl:
    """Loading over HTTP with httpx mocked."""

    def test_fetches_json(self) -> None:
        body = json.dumps({"openapi": "3.1.0", "info": {"title": "Remote"}})
        with patch("toolspec.parser.loader.httpx.get", return_value=_response(body)) as mock_get:
            result = load_spec("https://api.example.com/openapi.json", timeout=5.0)

        assert result["info"]["title"] == "Remote"
        mock_get.assert_called_once_with(
            "https://api.example.com/openapi.json", timeout=5.0, follow_redirects=True
        )

    def test_fetches_yaml(self) -> None:
        body = "openapi: 3.0.0\ninfo:\n  title: Remote YAML\n"
        with patch(
            "toolspec.parser.loader.httpx.get",
            return_value=_response(body, content_type="application/yaml"),
        ):
            result = load_spec("https://api.example.com/openapi.yaml")
        assert result["info"]["title"] == "Remote YAML"

    def test_http_error(self) -> None:
        with patch(
            "toolspec.parser.loader.httpx.get",
            return_value=_response("nope", content_type="text/plain", status=404),
        ):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                load_spec("https://api.example.com/missing.json")

    def test_network_error(self) -> None:
        mock_get = MagicMock(side_effect=httpx.ConnectError("connection refused"))
        with patch("toolspec.parser.loader.httpx.get", mock_get):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                load_spec("http://localhost:1/openapi.json")


# ---------------------------------------------------------------------------
# parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """JSON/YAML decoding."""

    def test_json_first(self) -> None:
        assert parse_content('{"a": 1}') == {"a": 1}

    def test_yaml_fallback(self) -> None:
        assert parse_content("a: 1\nb: [x, y]\n") == {"a": 1, "b": ["x", "y"]}

    def test_yaml_hint_skips_json(self) -> None:
        assert parse_content('{"a": 1}', hint="yaml") == {"a": 1}

    def test_neither_json_nor_yaml(self) -> None:
        with pytest.raises(SpecParseError, match="JSON or YAML"):
            parse_content("a: [unclosed")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            parse_content("[1, 2, 3]")

    def test_empty_yaml_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="empty document"):
            parse_content("# just a comment\n", hint="yaml")
