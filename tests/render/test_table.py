"""Tests for apidoc.render.table."""

from __future__ import annotations

from apidoc.models import Field
from apidoc.render.table import TABLE_ALIGNMENT, TABLE_HEADER, TableRenderer, generate_parameter_table


def test_generate_parameter_table_renders_prefixed_rows_in_order() -> None:
    fields = [
        Field("id", "Long", True, "User id", 0),
        Field("address", "Address", False, "", 0),
        Field("city", "String", False, "City name", 1),
    ]

    table = generate_parameter_table(fields)

    assert table == "\n".join(
        [
            TABLE_HEADER,
            TABLE_ALIGNMENT,
            "|id|Yes|Long|User id|",
            "|address|No|Address||",
            "|--city|No|String|City name|",
        ]
    ) + "\n"


def test_cells_escape_pipes_and_flatten_newlines() -> None:
    fields = [Field("status", "String", False, "either a | b\nor c", 0)]

    rows = TableRenderer().rows(fields)

    assert rows == ["|status|No|String|either a \\| b or c|"]


def test_custom_required_labels_and_headerless_render() -> None:
    renderer = TableRenderer(required_labels=("Y", "N"))

    rendered = renderer.render([Field("id", "Long", True), Field("name", "String")], header=False)

    assert rendered == "|id|Y|Long||\n|name|N|String||\n"


def test_empty_table_keeps_header() -> None:
    assert generate_parameter_table([]) == f"{TABLE_HEADER}\n{TABLE_ALIGNMENT}\n"
