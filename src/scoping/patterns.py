"""Decompose binding patterns into the names they declare."""

from __future__ import annotations

from typing import Set

from .nodes import AnalysisInvariantError, Node, NodeType


def declare_pattern(pattern: Node, table: Set[str]) -> None:
    """
    Add every name bound by `pattern` to `table`.

    Property keys and default values are not binding sites: for
    `{a, b: [c, ...d] = x}` only `a`, `c` and `d` are declared.

    Raises:
        AnalysisInvariantError: If `pattern` is not a binding pattern.
    """
    kind = pattern.get("type")
    if kind == NodeType.IDENTIFIER.value:
        table.add(pattern["name"])
    elif kind == NodeType.OBJECT_PATTERN.value:
        for prop in pattern.get("properties", []):
            # Rest properties carry their target in `argument`.
            declare_pattern(prop.get("value") or prop["argument"], table)
    elif kind == NodeType.ARRAY_PATTERN.value:
        for element in pattern.get("elements", []):
            if element is not None:
                declare_pattern(element, table)
    elif kind == NodeType.REST_ELEMENT.value:
        declare_pattern(pattern["argument"], table)
    elif kind == NodeType.ASSIGNMENT_PATTERN.value:
        declare_pattern(pattern["left"], table)
    else:
        raise AnalysisInvariantError(f"Unrecognized pattern type: {kind}", pattern)


__all__ = ["declare_pattern"]
