"""
Command-line interface for listing the global variables of JavaScript files.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

import esprima

from jsglobals import GlobalsResult, ParseOptions, parse_with_globals


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f"{line}"
    return f"{line}:{column}"


def _render_text(result: GlobalsResult, source_name: str) -> List[str]:
    lines: List[str] = []
    for group in result.globals:
        sites = ", ".join(
            _format_location(position.line, position.column) for position in group.positions
        )
        lines.append(f"{group.name}\t{sites}")
    if result.parsing_error:
        lines.append(f"WARNING {source_name}: parsed loosely after: {result.parsing_error}")
    return lines


def _render_json(result: GlobalsResult, source_name: str) -> str:
    payload = {
        "source": source_name,
        "parsing_error": result.parsing_error,
        "globals": [
            {
                "name": group.name,
                "sites": [
                    {"line": position.line, "column": position.column}
                    for position in group.positions
                ],
            }
            for group in result.globals
        ],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def scan_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    options = ParseOptions(source_type="module" if args.module else "script")
    try:
        result = parse_with_globals(
            source,
            options,
            fallback_to_loose=args.loose,
            source_name=str(input_path),
        )
    except esprima.Error as exc:
        sys.stderr.write(f"ERROR {input_path}: {exc}\n")
        return 1

    if args.json:
        sys.stdout.write(_render_json(result, str(input_path)) + "\n")
    else:
        for line in _render_text(result, str(input_path)):
            sys.stdout.write(line + "\n")

    if args.fail_on_globals:
        allowed = set(args.allow or [])
        unexpected = [name for name in result.names if name not in allowed]
        if unexpected:
            sys.stderr.write(f"ERROR: unexpected globals: {', '.join(unexpected)}\n")
            return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsglobals", description="Find the global variables a JavaScript file uses"
    )
    parser.add_argument("--verbose", action="store_true", help="Log analysis details.")
    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser("scan", help="List the globals of a single JS file")
    scan_parser.add_argument("input", help="Path to the JavaScript file")
    scan_parser.add_argument(
        "--module",
        action="store_true",
        help="Parse the input as an ES module (strict mode semantics).",
    )
    scan_parser.add_argument(
        "--loose",
        action="store_true",
        help="Fall back to tolerant parsing when the file has syntax errors.",
    )
    scan_parser.add_argument("--json", action="store_true", help="Emit a JSON report.")
    scan_parser.add_argument(
        "--allow",
        action="append",
        metavar="NAME",
        help="Global name that --fail-on-globals accepts (repeatable).",
    )
    scan_parser.add_argument(
        "--fail-on-globals",
        action="store_true",
        help="Exit with status 1 when a global outside --allow is found.",
    )
    scan_parser.set_defaults(func=scan_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
