"""Commented JSON template rendering."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models import Field, FieldNode
from .tree import build_tree

VALUE_STYLES = ("type", "example")


class JsonTemplateRenderer:
    """Renders fields as an indented JSON template with ``//`` comments.

    Array-typed fields become a one-element array holding their children,
    other fields with children become nested objects, and leaves show either
    the quoted type name or the type's example literal.
    """

    def __init__(self, indent: str = "   ", value_style: str = "type") -> None:
        if value_style not in VALUE_STYLES:
            raise ValueError(f"Unknown JSON value style: {value_style!r}")
        self.indent = indent
        self.value_style = value_style

    def render(self, fields: Iterable[Field]) -> str:
        return self.render_tree(build_tree(fields))

    def render_tree(self, nodes: Sequence[FieldNode]) -> str:
        return self._object(nodes, 0)

    def _object(self, nodes: Sequence[FieldNode], level: int) -> str:
        indent = self.indent * level
        child_indent = self.indent * (level + 1)
        lines: List[str] = ["{"]
        for index, node in enumerate(nodes):
            separator = "," if index < len(nodes) - 1 else ""
            entry = f'{child_indent}"{node.field.name}" : '
            if node.is_array:
                if node.children:
                    entry += "[" + self._object(node.children, level + 1) + "]"
                else:
                    entry += "[]"
                entry += separator
            elif node.children:
                entry += self._object(node.children, level + 1) + separator
            else:
                entry += self._leaf(node.field) + separator
                description = " ".join(node.field.description.split())
                if description:
                    entry += " //" + description
            lines.append(entry)
        lines.append(indent + "}")
        return "\n".join(lines)

    def _leaf(self, field: Field) -> str:
        if self.value_style == "example" and field.example:
            return field.example
        return f'"{field.type_name}"'


def generate_json_template(fields: Iterable[Field]) -> str:
    """Render ``fields`` as a JSON template with the default settings."""
    return JsonTemplateRenderer().render(fields)


__all__ = ["JsonTemplateRenderer", "VALUE_STYLES", "generate_json_template"]
