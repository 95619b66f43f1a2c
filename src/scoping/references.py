"""
Free-reference classification.

Runs after `build_scopes` and resolves every identifier reference and `this`
expression against the binding tables of its ancestors. References nothing
binds are returned as `GlobalReference`s, in the order the walk finds them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .nodes import (
    Node,
    NodeType,
    SourcePosition,
    binding_table,
    declares_arguments,
    declares_this,
    node_position,
)
from .walk import walk_ancestors

THIS_NAME = "this"

# Never reported, whether or not anything declares it.
_ALWAYS_BOUND = frozenset({"undefined"})


@dataclass(frozen=True, eq=False)
class GlobalReference:
    """An identifier or `this` use that no enclosing scope binds."""

    node: Node
    ancestors: Tuple[Node, ...]

    @property
    def is_this(self) -> bool:
        return self.node.get("type") == NodeType.THIS_EXPRESSION.value

    @property
    def name(self) -> str:
        return THIS_NAME if self.is_this else self.node["name"]

    @property
    def position(self) -> SourcePosition:
        return node_position(self.node)


class ReferenceClassifier:
    def __init__(self) -> None:
        self._found: List[GlobalReference] = []

    def classify(self, program: Node) -> List[GlobalReference]:
        self._found = []
        walk_ancestors(
            program,
            {
                NodeType.IDENTIFIER.value: self._visit_Identifier,
                NodeType.THIS_EXPRESSION.value: self._visit_ThisExpression,
            },
        )
        return self._found

    def _visit_Identifier(self, node: Node, ancestors: Sequence[Node]) -> None:
        name = node["name"]
        if name in _ALWAYS_BOUND:
            return
        for ancestor in reversed(ancestors):
            if name == "arguments" and declares_arguments(ancestor):
                return
            table = binding_table(ancestor)
            if table is not None and name in table:
                return
        self._record(node, ancestors)

    def _visit_ThisExpression(self, node: Node, ancestors: Sequence[Node]) -> None:
        if any(declares_this(ancestor) for ancestor in ancestors):
            return
        self._record(node, ancestors)

    def _record(self, node: Node, ancestors: Sequence[Node]) -> None:
        self._found.append(GlobalReference(node=node, ancestors=tuple(ancestors)))


def classify_references(program: Node) -> List[GlobalReference]:
    """
    Collect the unbound identifier and `this` references of `program`.

    `program` must already carry the binding tables from `build_scopes`.
    """
    return ReferenceClassifier().classify(program)


__all__ = ["GlobalReference", "ReferenceClassifier", "THIS_NAME", "classify_references"]
