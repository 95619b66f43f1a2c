"""
Binding-table construction for JavaScript ASTs.

The builder walks an esprima-compatible AST once and records, on every node
that introduces a scope, the set of names declared there (under the `locals`
key). `var` and function declarations hoist to the nearest function-like
scope; `let`, `const` and class declarations stay in the nearest block;
catch parameters belong to their catch clause; imports always land on the
program. The tables are what the reference classifier later resolves against.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Set

from .nodes import (
    LOCALS_KEY,
    AnalysisInvariantError,
    Node,
    NodeType,
    is_block_scope,
    is_scope,
)
from .patterns import declare_pattern
from .walk import walk_ancestors

logger = logging.getLogger(__name__)


class ScopeBuilder:
    def __init__(self, program: Node) -> None:
        self._program = program
        # ids of scope nodes whose table was created during this pass
        self._fresh: Set[int] = set()

    def build(self) -> Node:
        visitors = {
            NodeType.VARIABLE_DECLARATION.value: self._visit_VariableDeclaration,
            NodeType.FUNCTION_DECLARATION.value: self._visit_FunctionDeclaration,
            NodeType.FUNCTION_EXPRESSION.value: self._visit_function,
            NodeType.ARROW_FUNCTION_EXPRESSION.value: self._visit_function,
            NodeType.CLASS_DECLARATION.value: self._visit_ClassDeclaration,
            NodeType.CLASS_EXPRESSION.value: self._visit_class,
            NodeType.TRY_STATEMENT.value: self._visit_TryStatement,
            NodeType.IMPORT_SPECIFIER.value: self._visit_import_specifier,
            NodeType.IMPORT_DEFAULT_SPECIFIER.value: self._visit_import_specifier,
            NodeType.IMPORT_NAMESPACE_SPECIFIER.value: self._visit_import_specifier,
        }
        walk_ancestors(self._program, visitors)
        return self._program

    # ------------------------------------------------------------------ helpers

    def _table(self, scope: Node) -> Set[str]:
        """Binding table of `scope`, created on first use in this pass."""
        key = id(scope)
        if key not in self._fresh:
            self._fresh.add(key)
            scope[LOCALS_KEY] = set()
        return scope[LOCALS_KEY]

    def _declare(self, name: str, scope: Node) -> None:
        logger.debug("declare %s in %s", name, scope.get("type"))
        self._table(scope).add(name)

    @staticmethod
    def _nearest(
        node: Node, ancestors: Sequence[Node], accepts: Callable[[Node], bool]
    ) -> Node:
        for ancestor in reversed(ancestors):
            if accepts(ancestor):
                return ancestor
        raise AnalysisInvariantError(
            f"No enclosing scope found for {node.get('type')}", node
        )

    @staticmethod
    def _own_name(node: Node) -> Optional[str]:
        identifier = node.get("id")
        if identifier is None:
            return None
        return identifier["name"]

    # ----------------------------------------------------------------- visitors

    def _visit_VariableDeclaration(self, node: Node, ancestors: Sequence[Node]) -> None:
        accepts = is_scope if node.get("kind") == "var" else is_block_scope
        target = self._nearest(node, ancestors, accepts)
        logger.debug("%s declaration bound in %s", node.get("kind"), target.get("type"))
        table = self._table(target)
        for declarator in node.get("declarations", []):
            declare_pattern(declarator["id"], table)

    def _visit_FunctionDeclaration(self, node: Node, ancestors: Sequence[Node]) -> None:
        # The name belongs to the scope containing the declaration, not to the
        # function's own scope.
        name = self._own_name(node)
        if name is not None:
            self._declare(name, self._nearest(node, ancestors, is_scope))
        self._visit_function(node, ancestors)

    def _visit_function(self, node: Node, ancestors: Sequence[Node]) -> None:
        table = self._table(node)
        for param in node.get("params", []):
            declare_pattern(param, table)
        name = self._own_name(node)
        if name is not None:
            # Named function expressions can refer to themselves.
            table.add(name)

    def _visit_ClassDeclaration(self, node: Node, ancestors: Sequence[Node]) -> None:
        name = self._own_name(node)
        if name is not None:
            self._declare(name, self._nearest(node, ancestors, is_block_scope))
        self._visit_class(node, ancestors)

    def _visit_class(self, node: Node, ancestors: Sequence[Node]) -> None:
        table = self._table(node)
        name = self._own_name(node)
        if name is not None:
            table.add(name)

    def _visit_TryStatement(self, node: Node, ancestors: Sequence[Node]) -> None:
        handler = node.get("handler")
        if handler is None:
            return
        table = self._table(handler)
        param = handler.get("param")
        if param is not None:
            declare_pattern(param, table)

    def _visit_import_specifier(self, node: Node, ancestors: Sequence[Node]) -> None:
        # Imports are program-scoped wherever the declaration appears.
        self._declare(node["local"]["name"], self._program)


def build_scopes(program: Node) -> Node:
    """
    Attach binding tables to every scope node of `program`, in place.

    Args:
        program: esprima AST dict rooted at a `Program` node.

    Returns:
        The same `program`, with a `locals` set on every scope node this pass
        declared into. Functions, classes and catch clauses always get one,
        possibly empty.

    Raises:
        AnalysisInvariantError: If a pattern or node shape is not recognised.
    """
    return ScopeBuilder(program).build()


__all__ = ["ScopeBuilder", "build_scopes"]
