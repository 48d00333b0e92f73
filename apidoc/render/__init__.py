"""Table and JSON template renderers for extracted fields."""

from .json_template import JsonTemplateRenderer, generate_json_template
from .table import TableRenderer, generate_parameter_table
from .tree import build_tree, flatten

__all__ = [
    "JsonTemplateRenderer",
    "TableRenderer",
    "build_tree",
    "flatten",
    "generate_json_template",
    "generate_parameter_table",
]
