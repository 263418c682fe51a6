"""Tests for toolspec.parser.registry and the parser classes."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from toolspec.exceptions import SpecParseError, UnsupportedVersionError
from toolspec.models import ApiSpecification, SpecVersion
from toolspec.parser.base import SpecParser
from toolspec.parser.openapi import OpenAPIParser
from toolspec.parser.registry import ParserRegistry


class _PostmanParser(SpecParser):
    """Minimal second format used to exercise registration order."""

    def can_parse(self, document: dict[str, Any]) -> bool:
        return "_postman_id" in document.get("info", {})

    def parse(
        self,
        document: dict[str, Any],
        base_url: Optional[str] = None,
        include_resources: Optional[list[str]] = None,
        path_prefix: Optional[str] = None,
    ) -> ApiSpecification:
        return ApiSpecification(
            title=document["info"].get("name", "Collection"),
            version="1.0.0",
            spec_version=SpecVersion.OPENAPI_3_0,
            format_name=self.format_name,
        )

    @property
    def format_name(self) -> str:
        return "Postman Collection"


class _GreedyParser(_PostmanParser):
    """Accepts everything."""

    def can_parse(self, document: dict[str, Any]) -> bool:
        return True

    @property
    def format_name(self) -> str:
        return "Greedy"


class TestOpenAPIParser:
    """The built-in OpenAPI/Swagger parser."""

    def test_can_parse(self) -> None:
        parser = OpenAPIParser()
        assert parser.can_parse({"openapi": "3.0.0"})
        assert parser.can_parse({"swagger": "2.0"})
        assert not parser.can_parse({"info": {"_postman_id": "x"}})

    def test_can_parse_does_not_validate_version(self) -> None:
        parser = OpenAPIParser()
        assert parser.can_parse({"openapi": "4.0.0"})
        with pytest.raises(UnsupportedVersionError):
            parser.parse({"openapi": "4.0.0"})

    def test_parse_sets_format_name(self, users_30_raw: dict[str, Any]) -> None:
        spec = OpenAPIParser().parse(users_30_raw, include_resources=["users"])
        assert spec.format_name == "OpenAPI"
        assert len(spec.tools) == 2

    def test_repr(self) -> None:
        assert repr(OpenAPIParser()) == "<OpenAPIParser format='OpenAPI'>"


class TestParserRegistry:
    """Ordered format dispatch."""

    def test_builtin_registered_first(self) -> None:
        registry = ParserRegistry()
        assert len(registry) == 1
        assert registry.supported_formats == ["OpenAPI"]

    def test_empty_registry(self) -> None:
        registry = ParserRegistry(register_builtin=False)
        assert len(registry) == 0
        assert registry.find_parser({"openapi": "3.0.0"}) is None

    def test_find_parser(self) -> None:
        registry = ParserRegistry()
        registry.register(_PostmanParser())
        assert isinstance(registry.find_parser({"swagger": "2.0"}), OpenAPIParser)
        assert isinstance(registry.find_parser({"info": {"_postman_id": "1"}}), _PostmanParser)
        assert registry.find_parser({"info": {}}) is None

    def test_registration_order_wins(self) -> None:
        registry = ParserRegistry(register_builtin=False)
        registry.register(_GreedyParser())
        registry.register(OpenAPIParser())
        assert registry.find_parser({"openapi": "3.0.0"}).format_name == "Greedy"
        assert registry.supported_formats == ["Greedy", "OpenAPI"]

    def test_parse_dispatches(self, petstore_20_raw: dict[str, Any]) -> None:
        registry = ParserRegistry()
        registry.register(_PostmanParser())
        assert registry.parse(petstore_20_raw).spec_version is SpecVersion.SWAGGER_2
        postman = registry.parse({"info": {"_postman_id": "1", "name": "Coll"}})
        assert postman.format_name == "Postman Collection"
        assert postman.title == "Coll"

    def test_parse_passes_options(self, users_30_raw: dict[str, Any]) -> None:
        spec = ParserRegistry().parse(
            users_30_raw, base_url="http://local", include_resources=["nothing"]
        )
        assert spec.base_url == "http://local"
        assert spec.tools == []

    def test_unrecognised_document(self) -> None:
        with pytest.raises(SpecParseError, match="supported formats: OpenAPI"):
            ParserRegistry().parse({"info": {"title": "?"}})
