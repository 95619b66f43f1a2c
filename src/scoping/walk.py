"""
Ancestor-tracking traversal over esprima ASTs.

`walk_ancestors` visits nodes pre-order and hands each visitor the chain of
nodes enclosing the current one. Only positions that can hold a binding or a
reference are entered: non-computed keys, member properties, labels and the
names inside import/export specifiers are skipped, so every `Identifier` a
visitor sees is either a declaration site or a variable reference.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .nodes import AnalysisInvariantError, Node

Visitor = Callable[[Node, Sequence[Node]], None]

# Child fields entered for every node kind esprima produces, in source order.
_CHILDREN: Dict[str, Tuple[str, ...]] = {
    "Program": ("body",),
    "EmptyStatement": (),
    "DebuggerStatement": (),
    "ExpressionStatement": ("expression",),
    "BlockStatement": ("body",),
    "WithStatement": ("object", "body"),
    "ReturnStatement": ("argument",),
    "LabeledStatement": ("body",),
    "BreakStatement": (),
    "ContinueStatement": (),
    "IfStatement": ("test", "consequent", "alternate"),
    "SwitchStatement": ("discriminant", "cases"),
    "SwitchCase": ("test", "consequent"),
    "ThrowStatement": ("argument",),
    "TryStatement": ("block", "handler", "finalizer"),
    "CatchClause": ("param", "body"),
    "WhileStatement": ("test", "body"),
    "DoWhileStatement": ("body", "test"),
    "ForStatement": ("init", "test", "update", "body"),
    "ForInStatement": ("left", "right", "body"),
    "ForOfStatement": ("left", "right", "body"),
    "FunctionDeclaration": ("id", "params", "body"),
    "FunctionExpression": ("id", "params", "body"),
    "ArrowFunctionExpression": ("params", "body"),
    "VariableDeclaration": ("declarations",),
    "VariableDeclarator": ("id", "init"),
    "ClassDeclaration": ("id", "superClass", "body"),
    "ClassExpression": ("id", "superClass", "body"),
    "ClassBody": ("body",),
    "MethodDefinition": ("key", "value"),
    "FieldDefinition": ("key", "value"),
    "Property": ("key", "value"),
    "ObjectExpression": ("properties",),
    "ObjectPattern": ("properties",),
    "ArrayExpression": ("elements",),
    "ArrayPattern": ("elements",),
    "RestElement": ("argument",),
    "SpreadElement": ("argument",),
    "AssignmentPattern": ("left", "right"),
    "AssignmentExpression": ("left", "right"),
    "UnaryExpression": ("argument",),
    "UpdateExpression": ("argument",),
    "AwaitExpression": ("argument",),
    "YieldExpression": ("argument",),
    "BinaryExpression": ("left", "right"),
    "LogicalExpression": ("left", "right"),
    "ConditionalExpression": ("test", "consequent", "alternate"),
    "CallExpression": ("callee", "arguments"),
    "NewExpression": ("callee", "arguments"),
    "SequenceExpression": ("expressions",),
    "MemberExpression": ("object", "property"),
    "TemplateLiteral": ("quasis", "expressions"),
    "TaggedTemplateExpression": ("tag", "quasi"),
    "TemplateElement": (),
    "Literal": (),
    "Identifier": (),
    "ThisExpression": (),
    "Super": (),
    "MetaProperty": (),
    "Import": (),
    "ImportDeclaration": ("specifiers", "source"),
    "ImportSpecifier": (),
    "ImportDefaultSpecifier": (),
    "ImportNamespaceSpecifier": (),
    "ExportNamedDeclaration": ("declaration", "source"),
    "ExportDefaultDeclaration": ("declaration",),
    "ExportAllDeclaration": ("source",),
}

# Fields that only hold a reference when the node is `computed`.
_COMPUTED_ONLY: Dict[str, str] = {
    "Property": "key",
    "MethodDefinition": "key",
    "FieldDefinition": "key",
    "MemberExpression": "property",
}


class AncestorWalker:
    """Pre-order walk calling `visitors[node type](node, ancestors)`."""

    def __init__(self, visitors: Mapping[str, Visitor]) -> None:
        self._visitors = visitors
        self._ancestors: List[Node] = []

    def walk(self, root: Node) -> None:
        # Iterative: operator chains can nest deeper than the recursion limit.
        # A None entry closes the node on top of the ancestor chain.
        self._ancestors = []
        stack: List[Optional[Node]] = [root]
        while stack:
            node = stack.pop()
            if node is None:
                self._ancestors.pop()
                continue
            fields = self._enter(node)
            self._ancestors.append(node)
            stack.append(None)
            stack.extend(reversed(self._children(node, fields)))

    def _enter(self, node: Node) -> Sequence[str]:
        kind = node.get("type")
        fields = _CHILDREN.get(kind)
        if fields is None:
            raise AnalysisInvariantError(f"Unrecognized node type: {kind}", node)

        visitor = self._visitors.get(kind)
        if visitor is not None:
            visitor(node, self._ancestors)
        return fields

    @staticmethod
    def _children(node: Node, fields: Sequence[str]) -> List[Node]:
        skipped = None if node.get("computed") else _COMPUTED_ONLY.get(node["type"])
        children: List[Node] = []
        for name in fields:
            if name == skipped:
                continue
            child = node.get(name)
            if child is None:
                continue
            if isinstance(child, list):
                # Holes in array literals and patterns are None.
                children.extend(element for element in child if element is not None)
            else:
                children.append(child)
        return children


def walk_ancestors(root: Node, visitors: Mapping[str, Visitor]) -> None:
    """
    Walk `root` pre-order, calling the visitor registered for each node type.

    Visitors receive the node and the live chain of its ancestors, outermost
    first, excluding the node itself. The chain is only valid during the call;
    copy it to keep it.

    Raises:
        AnalysisInvariantError: If a node type outside the ESTree subset
            esprima produces is encountered.
    """
    AncestorWalker(visitors).walk(root)


__all__ = ["AncestorWalker", "Visitor", "walk_ancestors"]
