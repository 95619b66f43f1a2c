"""Detect the global (free) variables of JavaScript programs."""

from jsparser import ParseDiagnostic, ParseOptions, ParseOutcome
from scoping import THIS_NAME, AnalysisInvariantError, GlobalReference

from .grouping import GlobalGroup, group_globals
from .pipeline import GlobalsResult, parse, parse_with_globals

__all__ = [
    "AnalysisInvariantError",
    "GlobalGroup",
    "GlobalReference",
    "GlobalsResult",
    "ParseDiagnostic",
    "ParseOptions",
    "ParseOutcome",
    "THIS_NAME",
    "group_globals",
    "parse",
    "parse_with_globals",
]
