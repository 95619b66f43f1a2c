"""Lexical scope construction and free-reference analysis for JavaScript ASTs."""

from .nodes import (
    AnalysisInvariantError,
    NodeType,
    SourcePosition,
    binding_table,
    is_block_scope,
    is_scope,
    node_position,
)
from .patterns import declare_pattern
from .references import THIS_NAME, GlobalReference, ReferenceClassifier, classify_references
from .scope_builder import ScopeBuilder, build_scopes
from .walk import AncestorWalker, walk_ancestors

__all__ = [
    "AnalysisInvariantError",
    "AncestorWalker",
    "GlobalReference",
    "NodeType",
    "ReferenceClassifier",
    "ScopeBuilder",
    "SourcePosition",
    "THIS_NAME",
    "binding_table",
    "build_scopes",
    "classify_references",
    "declare_pattern",
    "is_block_scope",
    "is_scope",
    "node_position",
    "walk_ancestors",
]
