"""
Front-end integration stitching together parsing and global detection.

`parse_with_globals` accepts raw JavaScript source or an already-parsed
esprima AST, attaches binding tables to the scope nodes, classifies every
reference and returns the unbound ones grouped by name. When the caller opts
into the tolerant fallback, a source with syntax errors is still analysed and
the strict parser's message is reported alongside the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from jsparser import ParseDiagnostic, ParseOptions, ParseOutcome, parse_source
from scoping import build_scopes, classify_references
from scoping.nodes import Node, NodeType

from .grouping import GlobalGroup, group_globals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalsResult:
    """AST with binding tables attached, plus its globals grouped by name."""

    ast: Node
    globals: List[GlobalGroup]
    parsing_error: Optional[str] = None
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [group.name for group in self.globals]

    def get(self, name: str) -> Optional[GlobalGroup]:
        for group in self.globals:
            if group.name == name:
                return group
        return None


def parse(
    source: str,
    options: Optional[ParseOptions] = None,
    *,
    fallback_to_loose: bool = False,
    source_name: str = "<input>",
) -> ParseOutcome:
    """
    Parse source with the options global analysis requires.

    Raises:
        esprima.Error: On a syntax error, unless `fallback_to_loose` is set.
    """
    return parse_source(
        source,
        options,
        fallback_to_loose=fallback_to_loose,
        source_name=source_name,
    )


def _is_program(value: Any) -> bool:
    return isinstance(value, dict) and value.get("type") == NodeType.PROGRAM.value


def parse_with_globals(
    source: Any,
    options: Optional[ParseOptions] = None,
    *,
    fallback_to_loose: bool = False,
    source_name: str = "<input>",
) -> GlobalsResult:
    """
    Find the free variables and unbound `this` uses of a JavaScript program.

    Args:
        source: JavaScript source text, or an esprima AST dict rooted at a
            `Program` node. An AST is annotated in place.
        options: Parser behaviours, used for string input only.
        fallback_to_loose: Retry with the tolerant parser on a syntax error
            instead of raising.
        source_name: Label used in logs and diagnostics.

    Returns:
        GlobalsResult with the annotated AST and the globals sorted by name.

    Raises:
        TypeError: If `source` is neither a string nor a Program AST.
        esprima.Error: On a syntax error when `fallback_to_loose` is False.
        AnalysisInvariantError: If the AST contains a shape the analysis
            does not support.
    """
    parsing_error: Optional[str] = None
    diagnostics: List[ParseDiagnostic] = []
    if isinstance(source, str):
        outcome = parse(
            source,
            options,
            fallback_to_loose=fallback_to_loose,
            source_name=source_name,
        )
        ast = outcome.ast
        parsing_error = outcome.parsing_error
        diagnostics = outcome.diagnostics
    else:
        ast = source

    if not _is_program(ast):
        raise TypeError("Source must be either a string of JavaScript or an esprima AST")

    build_scopes(ast)
    groups = group_globals(classify_references(ast))
    logger.info("%s: %d global name(s)", source_name, len(groups))
    return GlobalsResult(
        ast=ast,
        globals=groups,
        parsing_error=parsing_error,
        diagnostics=diagnostics,
    )


__all__ = ["GlobalsResult", "parse", "parse_with_globals"]
