"""Node kinds, scope predicates and shared types for the scope analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Set

Node = Dict[str, Any]

LOCALS_KEY = "locals"


class NodeType(str, Enum):
    PROGRAM = "Program"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    BLOCK_STATEMENT = "BlockStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_EXPRESSION = "ClassExpression"
    TRY_STATEMENT = "TryStatement"
    CATCH_CLAUSE = "CatchClause"
    IMPORT_SPECIFIER = "ImportSpecifier"
    IMPORT_DEFAULT_SPECIFIER = "ImportDefaultSpecifier"
    IMPORT_NAMESPACE_SPECIFIER = "ImportNamespaceSpecifier"
    IDENTIFIER = "Identifier"
    THIS_EXPRESSION = "ThisExpression"
    OBJECT_PATTERN = "ObjectPattern"
    ARRAY_PATTERN = "ArrayPattern"
    REST_ELEMENT = "RestElement"
    ASSIGNMENT_PATTERN = "AssignmentPattern"


def _kinds(*kinds: NodeType) -> frozenset:
    # Compared against the raw `type` strings found in the AST dicts.
    return frozenset(kind.value for kind in kinds)


_FUNCTION_SCOPES = _kinds(
    NodeType.PROGRAM,
    NodeType.FUNCTION_DECLARATION,
    NodeType.FUNCTION_EXPRESSION,
    NodeType.ARROW_FUNCTION_EXPRESSION,
)

_BLOCK_SCOPES = _FUNCTION_SCOPES | _kinds(NodeType.BLOCK_STATEMENT, NodeType.CATCH_CLAUSE)

# Plain functions bind `arguments` and `this`; arrows and the program do not.
_BINDS_RECEIVER = _kinds(NodeType.FUNCTION_DECLARATION, NodeType.FUNCTION_EXPRESSION)


class AnalysisInvariantError(RuntimeError):
    """Raised when the AST has a shape the analysis does not recognise."""

    def __init__(self, message: str, node: Optional[Node] = None):
        position = node_position(node) if isinstance(node, dict) else None
        loc = ""
        if position is not None and position.line is not None:
            loc = f" (line {position.line}, column {position.column})"
        super().__init__(f"{message}{loc}")
        self.node = node


@dataclass(frozen=True)
class SourcePosition:
    line: Optional[int]
    column: Optional[int]


def node_position(node: Node) -> SourcePosition:
    loc = node.get("loc") or {}
    start = loc.get("start") or {}
    return SourcePosition(line=start.get("line"), column=start.get("column"))


def node_type(node: Node) -> Optional[str]:
    return node.get("type")


def is_scope(node: Node) -> bool:
    return node_type(node) in _FUNCTION_SCOPES


def is_block_scope(node: Node) -> bool:
    return node_type(node) in _BLOCK_SCOPES


def declares_arguments(node: Node) -> bool:
    return node_type(node) in _BINDS_RECEIVER


def declares_this(node: Node) -> bool:
    return node_type(node) in _BINDS_RECEIVER


def binding_table(node: Node) -> Optional[Set[str]]:
    """Names declared directly in `node`, or None when it declares nothing."""
    return node.get(LOCALS_KEY)


__all__ = [
    "AnalysisInvariantError",
    "LOCALS_KEY",
    "Node",
    "NodeType",
    "SourcePosition",
    "binding_table",
    "declares_arguments",
    "declares_this",
    "is_block_scope",
    "is_scope",
    "node_position",
    "node_type",
]
