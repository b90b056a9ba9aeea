#!/usr/bin/env python3
"""
CLI for the Monkey interpreter.

Usage:
    python -m monkeylang run FILE
    python -m monkeylang check FILE [--json]
    python -m monkeylang parse FILE [--tree]
    python -m monkeylang repl

Global options go before the subcommand:
    python -m monkeylang --config monkey.yaml --log-level DEBUG run FILE

Examples:
    # Evaluate a program and print its value
    python -m monkeylang run examples/arith.mk

    # Report syntax errors as JSON for editor tooling
    python -m monkeylang check examples/arith.mk --json

    # Show how a program was parsed
    python -m monkeylang parse examples/arith.mk --tree
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .ast import Program, format_ast
from .config import InterpreterConfig, LOG_LEVELS, configure_logging
from .errors import NESTING_ERROR, ConfigError, render_diagnostic, render_error
from .lexer import Lexer
from .parser import Parser
from .runtime import run

logger = logging.getLogger(__name__)


def _error(message: str, config: InterpreterConfig) -> int:
    print(render_error(message, config.color), file=sys.stderr)
    return 1


def _print_diagnostics(diagnostics, config: InterpreterConfig) -> None:
    for diag in diagnostics:
        print(render_diagnostic(diag, config.color), file=sys.stderr)
        print(file=sys.stderr)
    print(f"{len(diagnostics)} error(s)", file=sys.stderr)


def _read_source(path_str: str) -> str:
    """Read a source file; raises OSError if it cannot be read."""
    return Path(path_str).read_text(encoding="utf-8")


def _parse_file(path: str, config: InterpreterConfig) -> Tuple[Program, Parser]:
    source = _read_source(path)
    parser = Parser(Lexer(source, path), path, source, config.max_errors)
    return parser.parse_program(), parser


def cmd_run(args, config: InterpreterConfig) -> int:
    """Evaluate a Monkey file and print the resulting value."""
    source = _read_source(args.file)
    result = run(source, filename=args.file, max_errors=config.max_errors)

    if result.diagnostics:
        _print_diagnostics(result.diagnostics, config)
        return 1
    if result.is_error:
        return _error(result.value.message, config)

    print(result.value.inspect())
    return 0


def cmd_check(args, config: InterpreterConfig) -> int:
    """Check a Monkey file for syntax errors."""
    program, parser = _parse_file(args.file, config)
    diagnostics = parser.diagnostics

    if args.json:
        print(json.dumps(diagnostics.to_json(), indent=2))
        return 1 if diagnostics.has_errors else 0

    if diagnostics.has_errors:
        _print_diagnostics(diagnostics.diagnostics, config)
        return 1

    name = Path(args.file).name
    print(f"OK: {name} - {len(program.statements)} statement(s), no errors")
    return 0


def cmd_parse(args, config: InterpreterConfig) -> int:
    """Print the canonical form (or debug tree) of a Monkey file."""
    program, parser = _parse_file(args.file, config)
    if parser.diagnostics.has_errors:
        _print_diagnostics(parser.diagnostics.diagnostics, config)
        return 1

    if args.tree:
        print(format_ast(program))
    else:
        print(program)
    return 0


def cmd_repl(args, config: InterpreterConfig) -> int:
    """Start the interactive shell."""
    from .repl import Shell

    Shell(config).cmdloop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='monkeylang',
        description='Monkey language interpreter',
    )
    parser.add_argument('--config', metavar='FILE',
                        help='YAML config file (default: $MONKEYLANG_CONFIG)')
    parser.add_argument('--log-level', choices=LOG_LEVELS, type=str.upper,
                        help='Logging level (overrides the config file)')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable coloured error output')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Evaluate a Monkey file')
    run_parser.add_argument('file', help='Monkey source file')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a Monkey file for syntax errors')
    check_parser.add_argument('file', help='Monkey source file')
    check_parser.add_argument('--json', action='store_true',
                              help='Print diagnostics as JSON')

    # parse command
    parse_parser = subparsers.add_parser('parse', help='Print the parsed program')
    parse_parser.add_argument('file', help='Monkey source file')
    parse_parser.add_argument('--tree', action='store_true',
                              help='Print the AST as an indented tree')

    # repl command
    subparsers.add_parser('repl', help='Start the interactive shell')

    return parser


COMMANDS = {
    'run': cmd_run,
    'check': cmd_check,
    'parse': cmd_parse,
    'repl': cmd_repl,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = InterpreterConfig.load(args.config)
    except ConfigError as e:
        return _error(str(e), InterpreterConfig(color=not args.no_color))

    if args.log_level:
        config.log_level = args.log_level
    if args.no_color:
        config.color = False
    configure_logging(config.log_level)
    logger.debug("running '%s' with %s", args.action, config)

    try:
        return COMMANDS[args.action](args, config)
    except OSError as e:
        return _error(f"cannot read {e.filename}: {e.strerror}", config)
    except RecursionError:
        return _error(NESTING_ERROR, config)


if __name__ == '__main__':
    sys.exit(main())
