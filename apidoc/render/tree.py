"""Conversion between flat depth-annotated field lists and explicit trees."""

from __future__ import annotations

from typing import Iterable, List

from ..logging import get_logger
from ..models import Field, FieldNode

_LOGGER = get_logger("render.tree")


def build_tree(fields: Iterable[Field]) -> List[FieldNode]:
    """Rebuild the nesting encoded by field depths.

    The children of a depth-``d`` field are the contiguous run of depth
    ``d + 1`` fields that follow it, bounded by the next field at depth
    ``d`` or shallower. Fields that skip a level have no parent and are
    dropped.
    """
    roots: List[FieldNode] = []
    stack: List[FieldNode] = []
    for field in fields:
        node = FieldNode(field)
        while stack and stack[-1].field.depth >= field.depth:
            stack.pop()
        if field.depth == 0:
            roots.append(node)
        elif stack and stack[-1].field.depth == field.depth - 1:
            stack[-1].children.append(node)
        else:
            _LOGGER.debug("Dropping orphaned field %s at depth %d", field.name, field.depth)
            continue
        stack.append(node)
    return roots


def flatten(nodes: Iterable[FieldNode]) -> List[Field]:
    """Inverse of :func:`build_tree`: pre-order fields with their depths."""
    result: List[Field] = []
    for node in nodes:
        result.append(node.field)
        result.extend(flatten(node.children))
    return result


__all__ = ["build_tree", "flatten"]
