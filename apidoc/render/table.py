"""Markdown parameter table rendering."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from ..models import Field

TABLE_HEADER = "|Parameter|Required|Type|Description|"
TABLE_ALIGNMENT = "|:----    |:---|:----- |-----   |"


def _cell(value: str) -> str:
    return " ".join(value.replace("|", "\\|").split())


class TableRenderer:
    """Renders one Markdown row per field, preserving input order."""

    def __init__(self, required_labels: Tuple[str, str] = ("Yes", "No")) -> None:
        self.required_labels = required_labels

    def rows(self, fields: Iterable[Field]) -> List[str]:
        yes, no = self.required_labels
        return [
            "|{name}|{required}|{type}|{description}|".format(
                name=_cell(field.prefix + field.name),
                required=yes if field.required else no,
                type=_cell(field.type_name),
                description=_cell(field.description),
            )
            for field in fields
        ]

    def render(self, fields: Iterable[Field], *, header: bool = True) -> str:
        lines = [TABLE_HEADER, TABLE_ALIGNMENT] if header else []
        lines.extend(self.rows(fields))
        return "\n".join(lines) + "\n" if lines else ""


def generate_parameter_table(fields: Iterable[Field]) -> str:
    """Render ``fields`` as a Markdown table with the default labels."""
    return TableRenderer().render(fields)


__all__ = ["TABLE_ALIGNMENT", "TABLE_HEADER", "TableRenderer", "generate_parameter_table"]
