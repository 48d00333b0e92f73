from __future__ import annotations

from pathlib import Path

import pytest

from apidoc.types.resolver import InMemoryTypeResolver
from tests._fixtures.project_builder import ProjectBuilder
from tests._fixtures.types import (
    DATE,
    INT,
    LONG,
    STRING,
    ann,
    decl,
    list_of,
    ref,
    struct,
    var,
)


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable Java project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def domain_resolver() -> InMemoryTypeResolver:
    """A small user/order domain covering nesting, generics and inheritance."""
    return InMemoryTypeResolver(
        [
            struct(
                "com.shop.BaseEntity",
                decl("serialVersionUID", ref("long"), static=True),
                decl("createTime", DATE, doc="Created at"),
                decl("updateTime", DATE),
            ),
            struct(
                "com.shop.User",
                decl("id", LONG, ann("NotNull"), doc="User id"),
                decl("name", STRING, comment="display name"),
                decl("address", ref("com.shop.Address")),
                decl("tags", list_of(STRING)),
                decl("roles", list_of(ref("com.shop.Role"))),
                superclass=ref("com.shop.BaseEntity"),
            ),
            struct(
                "com.shop.Address",
                decl("city", STRING),
                decl("street", STRING),
            ),
            struct("com.shop.Role", decl("code", STRING)),
            struct(
                "com.shop.Result",
                decl("code", INT),
                decl("message", STRING),
                decl("data", var("T")),
                type_parameters=("T",),
            ),
            struct(
                "com.shop.Holder",
                decl("value", var("T")),
                decl("items", list_of(var("T"))),
                type_parameters=("T",),
            ),
            struct(
                "com.shop.Node",
                decl("name", STRING),
                decl("parent", ref("com.shop.Node")),
                decl("children", list_of(ref("com.shop.Node"))),
            ),
            struct(
                "com.shop.Pair",
                decl("left", ref("com.shop.Address")),
                decl("right", ref("com.shop.Address")),
            ),
            struct("com.shop.Status", kind="enum"),
            struct(
                "com.shop.Order",
                decl("orderNo", STRING, ann("JsonProperty", value='"order_no"')),
                decl("status", ref("com.shop.Status")),
                decl("amount", ref("java.math.BigDecimal"), ann("ApiModelProperty", value='"Total amount"')),
                decl("attributes", ref("java.util.Map", STRING, STRING)),
            ),
        ]
    )
