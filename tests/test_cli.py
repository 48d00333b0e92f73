"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from apidoc.cli import _build_parser, main
from apidoc.java.parser import TREE_SITTER_AVAILABLE
from tests._fixtures.project_builder import ProjectBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "endpoints", "."])
    assert args.verbose is True
    assert args.command == "endpoints"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", ".", "--controller", "UserController", "-v"])
    assert args.verbose is True
    assert args.controller == "UserController"
    assert args.method is None


def test_cli_generate_requires_controller() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "."])


def test_cli_fields_format_choices() -> None:
    parser = _build_parser()
    args = parser.parse_args(["fields", "src", "User", "--format", "json"])
    assert (args.root, args.type, args.format) == ("src", "User", "json")
    with pytest.raises(SystemExit):
        parser.parse_args(["fields", "src", "User", "--format", "yaml"])


def test_cli_missing_root_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["endpoints", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


_CONTROLLER = """
    package com.shop.web;

    import com.shop.model.User;

    /**
     * User management
     */
    @RestController
    @RequestMapping("/users")
    public class UserController {

        /**
         * Create a user
         */
        @PostMapping("/create")
        public User create(@RequestBody User user) {
            return user;
        }
    }
"""

_USER = """
    package com.shop.model;

    public class User {
        /** User id */
        @NotNull
        private Long id;
        private String name;
    }
"""


def _project(project_builder: ProjectBuilder) -> Path:
    project_builder.write(
        {
            "src/main/java/com/shop/web/UserController.java": _CONTROLLER,
            "src/main/java/com/shop/model/User.java": _USER,
            "src/main/resources/application.properties": "spring.application.name=shop\n",
        }
    )
    return project_builder.path()


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter-java not installed")
def test_cli_generate_prints_markdown(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder)

    main(["generate", str(root), "--controller", "UserController"])

    out = capsys.readouterr().out
    assert out.startswith("# Create a user\n")
    assert "- User management -> Create a user" in out
    assert "- `/shop/users/create`" in out
    assert "- POST\n- JSON" in out
    assert "|id|Yes|Long|User id|" in out
    assert out.endswith("\n---\n\n")


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter-java not installed")
def test_cli_fields_and_endpoints(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder)

    main(["fields", str(root), "User", "--format", "json"])
    assert capsys.readouterr().out == '{\n   "id" : "Long", //User id\n   "name" : "String"\n}\n'

    main(["endpoints", str(root)])
    listing = capsys.readouterr().out
    assert "POST" in listing
    assert "/shop/users/create" in listing
    assert "com.shop.web.UserController#create" in listing


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter-java not installed")
def test_cli_unknown_controller_exits_with_error(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder)

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(root), "--controller", "OrderController"])

    assert excinfo.value.code == 1
    assert "Controller not found: OrderController" in capsys.readouterr().err
