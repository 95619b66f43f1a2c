"""
JavaScript parsing strategies built on top of the Python `esprima` port.

Two strategies share one interface: `StrictParser` raises `esprima.Error` on
the first syntax error, `TolerantParser` runs esprima's error-recovering mode
and returns a best-effort AST together with the errors it skipped over.
`parse_source` runs the strict strategy and, when the caller opts in, falls
back to the tolerant one, keeping the strict error message for diagnostics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import esprima
from esprima.messages import Messages
from esprima.parser import Parser as EsprimaParser

from .options import ParseOptions

logger = logging.getLogger(__name__)

_HASH_BANG = "#!"


@dataclass(frozen=True)
class ParseDiagnostic:
    """A syntax error the tolerant parser recovered from."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParsedSource:
    """AST produced by a single strategy run."""

    ast: Dict[str, Any]
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class ParseOutcome:
    """Aggregate of the output AST plus metadata about the parse run."""

    ast: Dict[str, Any]
    source_name: str
    parsing_error: Optional[str] = None
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)


class _PermissiveParser(EsprimaParser):
    """esprima parser that lets through the errors `ParseOptions` permits."""

    def __init__(self, code: str, options: Dict[str, Any], parse_options: ParseOptions):
        self._parse_options = parse_options
        super().__init__(code, options=options)

    def tolerateError(self, messageFormat, *args):
        if (
            messageFormat == Messages.IllegalReturn
            and self._parse_options.allow_return_outside_function
        ):
            return
        super().tolerateError(messageFormat, *args)

    def tolerateUnexpectedToken(self, token=None, message=None):
        # Raised for import/export declarations in script source.
        if self._parse_options.allow_import_export_everywhere and message in (
            Messages.IllegalImportDeclaration,
            Messages.IllegalExportDeclaration,
        ):
            return
        super().tolerateUnexpectedToken(token, message)

    def parseImportDeclaration(self):
        if not self._parse_options.allow_import_export_everywhere:
            return super().parseImportDeclaration()
        previous = self.context.inFunctionBody
        self.context.inFunctionBody = False
        try:
            return super().parseImportDeclaration()
        finally:
            self.context.inFunctionBody = previous

    def parseExportDeclaration(self):
        if not self._parse_options.allow_import_export_everywhere:
            return super().parseExportDeclaration()
        previous = self.context.inFunctionBody
        self.context.inFunctionBody = False
        try:
            return super().parseExportDeclaration()
        finally:
            self.context.inFunctionBody = previous


class _EsprimaStrategy:
    tolerant = False

    def __init__(self, options: Optional[ParseOptions] = None) -> None:
        self.options = options or ParseOptions()

    def _prepare(self, source: str) -> str:
        if self.options.allow_hash_bang and source.startswith(_HASH_BANG):
            # Same length, so every offset and column stays put.
            return "//" + source[len(_HASH_BANG):]
        return source

    def parse(self, source: str) -> ParsedSource:
        """
        Parse JavaScript source text into an esprima AST dict.

        Raises:
            esprima.Error: If parsing fails (tolerant mode raises only on
            errors it cannot recover from).
        """
        parser = _PermissiveParser(
            self._prepare(source),
            self.options.to_esprima(tolerant=self.tolerant),
            self.options,
        )
        if self.options.source_type == "module":
            program = parser.parseModule()
        else:
            program = parser.parseScript()

        diagnostics = [
            ParseDiagnostic(
                description=error.get("message"),
                line=error.get("lineNumber"),
                column=error.get("column"),
            )
            for error in parser.errorHandler.errors
        ]
        return ParsedSource(ast=program.toDict(), diagnostics=diagnostics)


class StrictParser(_EsprimaStrategy):
    """Fails on the first syntax error the options do not permit."""


class TolerantParser(_EsprimaStrategy):
    """Recovers from syntax errors where esprima can, recording each one."""

    tolerant = True


def parse_source(
    source: str,
    options: Optional[ParseOptions] = None,
    *,
    fallback_to_loose: bool = False,
    source_name: str = "<input>",
) -> ParseOutcome:
    """
    Parse JavaScript source, optionally falling back to tolerant parsing.

    Args:
        source: Raw JavaScript source code.
        options: Parser behaviours; the `allow_*` flags and `locations` are
            always forced on.
        fallback_to_loose: When True, a strict syntax error triggers a second,
            tolerant parse instead of propagating. esprima cannot recover
            from every error; when the tolerant parse raises as well, the
            strict error is re-raised unchanged and the tolerant one is only
            logged.
        source_name: Label used for diagnostics (defaults to `<input>`).

    Returns:
        ParseOutcome with the AST and, after a fallback, the strict error message.

    Raises:
        esprima.Error: If strict parsing fails and `fallback_to_loose` is False,
            or if tolerant parsing fails as well. In both cases the error is
            the one the strict parser raised.
    """
    options = (options or ParseOptions()).for_analysis()
    try:
        parsed = StrictParser(options).parse(source)
    except esprima.Error as exc:
        if not fallback_to_loose:
            raise
        logger.warning(
            "Strict parse of %s failed (%s); retrying in tolerant mode", source_name, exc
        )
        try:
            parsed = TolerantParser(options).parse(source)
        except esprima.Error as loose_exc:
            logger.warning("Tolerant parse of %s failed too (%s)", source_name, loose_exc)
            raise exc from None
        return ParseOutcome(
            ast=parsed.ast,
            source_name=source_name,
            parsing_error=str(exc),
            diagnostics=parsed.diagnostics,
        )

    return ParseOutcome(
        ast=parsed.ast,
        source_name=source_name,
        diagnostics=parsed.diagnostics,
    )


__all__ = [
    "ParseDiagnostic",
    "ParseOutcome",
    "ParsedSource",
    "StrictParser",
    "TolerantParser",
    "parse_source",
]
