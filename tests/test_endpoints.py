"""Tests for apidoc.endpoints."""

from __future__ import annotations

from pathlib import Path

import pytest

from apidoc.config import ApiDocConfig, OutputConfig
from apidoc.endpoints import (
    DEFAULT_HTTP_METHOD,
    DOCUMENT_SEPARATOR,
    EndpointAssembler,
    content_type,
    controller_name,
    discover_application_name,
    http_method,
    join_paths,
    method_title,
    parse_request_methods,
    read_application_name,
)
from apidoc.types.resolver import InMemoryTypeResolver
from tests._fixtures.types import LONG, STRING, ann, method, param, ref, struct


def _controller(source_file: str | None = None):  # type: ignore[no-untyped-def]
    return struct(
        "com.shop.web.UserController",
        annotations=(ann("RestController"), ann("RequestMapping", value='"/users"')),
        methods=(
            method(
                "get",
                param("id", LONG, ann("PathVariable")),
                returns=ref("com.shop.Result", ref("com.shop.Address")),
                annotations=(ann("GetMapping", value='"/{id}"'),),
                doc="Fetch one user\nReturns the stored address.",
            ),
            method(
                "create",
                param("address", ref("com.shop.Address"), ann("RequestBody")),
                returns=None,
                annotations=(ann("PostMapping"),),
            ),
            method("helper", param("value", STRING)),
        ),
        source_file=source_file,
    )


@pytest.mark.parametrize(
    ("prefix", "route", "expected"),
    [
        ("", "", "/"),
        ("/users", "", "/users"),
        ("users", "list", "/users/list"),
        ("/users/", "/list", "/users/list"),
        ("/users", "/{id:\\d+}", "/users/{id}"),
    ],
)
def test_join_paths(prefix: str, route: str, expected: str) -> None:
    assert join_paths(prefix, route) == expected


def test_http_method_from_mapping_markers() -> None:
    assert http_method(method("a", annotations=(ann("GetMapping"),))) == "GET"
    assert http_method(method("b", annotations=(ann("DeleteMapping"),))) == "DELETE"
    assert http_method(method("c", annotations=(ann("RequestMapping"),))) == DEFAULT_HTTP_METHOD
    multi = method(
        "d",
        annotations=(ann("RequestMapping", method="{RequestMethod.PUT, RequestMethod.PATCH}"),),
    )
    assert http_method(multi) == "PUT/PATCH"


def test_parse_request_methods_ignores_unknown_tokens() -> None:
    assert parse_request_methods("RequestMethod.GET") == "GET"
    assert parse_request_methods("{GET, FOO, GET}") == "GET"
    assert parse_request_methods("") == ""


def test_content_type_depends_on_request_body() -> None:
    assert content_type(method("a", param("x", STRING, ann("RequestBody")))) == "JSON"
    assert content_type(method("b", param("x", STRING, ann("RequestParam")))) == "FormData"


def test_method_title_and_controller_name() -> None:
    controller = _controller()

    assert method_title(controller.methods[0]) == "Fetch one user"
    assert method_title(controller.methods[1]) == "create"
    assert controller_name(controller) == "User"
    documented = struct("com.shop.web.OrderController", doc="Order <b>management</b>\n   API")
    assert controller_name(documented) == "Order management API"


def test_read_application_name_prefers_context_path(tmp_path: Path) -> None:
    props = tmp_path / "application.properties"
    props.write_text(
        "# settings\nspring.application.name=orders\nserver.servlet.context-path=/order-api\n",
        encoding="utf-8",
    )
    yml = tmp_path / "application.yml"
    yml.write_text("spring:\n  application:\n    name: billing\n", encoding="utf-8")
    flat = tmp_path / "bootstrap.yml"
    flat.write_text("spring.application.name: gateway\n", encoding="utf-8")

    assert read_application_name(props) == "order-api"
    assert read_application_name(yml) == "billing"
    assert read_application_name(flat) == "gateway"


def test_discover_application_name_walks_up_to_resources(tmp_path: Path) -> None:
    module = tmp_path / "order-service"
    resources = module / "src" / "main" / "resources"
    resources.mkdir(parents=True)
    (resources / "application.yml").write_text(
        "server:\n  port: 8080\nspring:\n  application:\n    name: order-service\n", encoding="utf-8"
    )
    source_dir = module / "src" / "main" / "java" / "com" / "shop" / "web"
    source_dir.mkdir(parents=True)

    assert discover_application_name(source_dir) == "order-service"
    assert discover_application_name(source_dir, max_levels=2) is None


def test_assembler_describes_mapped_methods_only(domain_resolver: InMemoryTypeResolver) -> None:
    config = ApiDocConfig(root=Path("."), application_name="shop")
    assembler = EndpointAssembler(domain_resolver, config)

    endpoints = assembler.endpoints(_controller())

    assert [e.method for e in endpoints] == ["get", "create"]
    get, create = endpoints
    assert get.url == "/shop/users/{id}"
    assert (get.http_method, get.content_type) == ("GET", "FormData")
    assert [f.name for f in get.request_fields] == ["id"]
    assert [f.name for f in get.response_fields] == ["code", "message", "city", "street"]
    assert (create.path, create.http_method, create.content_type) == ("/users", "POST", "JSON")
    assert create.response_fields == []


def test_assembler_renders_markdown_document(domain_resolver: InMemoryTypeResolver) -> None:
    assembler = EndpointAssembler(domain_resolver, ApiDocConfig(root=Path("."), application_name="shop"))

    documents = assembler.documents(_controller(), "get")

    assert len(documents) == 1
    assert documents[0].name == "Fetch one user"
    content = documents[0].content
    assert content.startswith("# Fetch one user\n\n**Call location:**\n- User -> Fetch one user\n")
    assert "- `/shop/users/{id}`" in content
    assert "- GET\n- FormData" in content
    assert "|id|Yes|Long||" in content
    assert '   "city" : "String"' in content
    assert content.index("### Request parameters") < content.index("### Response parameters")
    assert content.endswith("```\n")


def test_output_switches_hide_optional_sections(domain_resolver: InMemoryTypeResolver) -> None:
    output = OutputConfig(show_call_location=False, show_request_json=False, show_response_json=False)
    assembler = EndpointAssembler(domain_resolver, ApiDocConfig(root=Path("."), output=output))

    content = assembler.documents(_controller(), "get")[0].content

    assert "Call location" not in content
    assert "```json" not in content
    assert "- `/users/{id}`" in content


def test_render_controller_joins_documents(domain_resolver: InMemoryTypeResolver) -> None:
    assembler = EndpointAssembler(domain_resolver)

    rendered = assembler.render_controller(_controller())

    assert rendered.count(DOCUMENT_SEPARATOR) == 2
    assert rendered.endswith(DOCUMENT_SEPARATOR)


def test_controller_without_endpoints_yields_nothing(domain_resolver: InMemoryTypeResolver) -> None:
    empty = struct("com.shop.web.EmptyController", annotations=(ann("RestController"),))

    assert EndpointAssembler(domain_resolver).documents(empty) == []
