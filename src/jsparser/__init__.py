"""Interfaces for parsing JavaScript source code."""

from .esprima_parser import (
    ParseDiagnostic,
    ParsedSource,
    ParseOutcome,
    StrictParser,
    TolerantParser,
    parse_source,
)
from .options import ParseOptions

__all__ = [
    "ParseDiagnostic",
    "ParseOptions",
    "ParseOutcome",
    "ParsedSource",
    "StrictParser",
    "TolerantParser",
    "parse_source",
]
