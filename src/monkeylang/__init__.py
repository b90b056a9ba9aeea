"""
Monkey language interpreter.

This module provides:
- Lexer: Tokenizes Monkey source code
- Parser: Builds an AST from tokens, collecting syntax errors
- Evaluator: Walks the AST to produce runtime values
- Config: YAML interpreter settings and logging setup

Usage:
    from monkeylang import parse, run, Environment

    program, errors = parse('let x = 5 * (2 + 3);')
    if not errors:
        print(program)          # let x = (5 * (2 + 3));

    env = Environment()
    run('let a = 10;', env)
    result = run('if (a > 5) { a * 2 } else { 0 }', env)
    print(result.value.inspect())   # 20
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    lookup_identifier,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    Precedence,
    parse,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    # Expressions
    Expression,
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    # Statements
    Statement,
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
    # Helpers
    format_ast,
    print_ast,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    MonkeyError,
    ParserError,
    ConfigError,
)

from .runtime import (
    ObjectType,
    Value,
    Integer,
    Boolean,
    Null,
    ReturnSignal,
    Error,
    TRUE,
    FALSE,
    NULL,
    Environment,
    Evaluator,
    ExecutionResult,
    run,
)

from .config import (
    InterpreterConfig,
    configure_logging,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    'lookup_identifier',
    # Lexer
    'Lexer',
    'tokenize',
    # Parser
    'Parser',
    'Precedence',
    'parse',
    # AST
    'AstNode',
    'AstVisitor',
    'Expression',
    'Identifier',
    'IntegerLiteral',
    'BooleanLiteral',
    'PrefixExpression',
    'InfixExpression',
    'IfExpression',
    'Statement',
    'LetStatement',
    'ReturnStatement',
    'ExpressionStatement',
    'BlockStatement',
    'Program',
    'format_ast',
    'print_ast',
    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'MonkeyError',
    'ParserError',
    'ConfigError',
    # Runtime
    'ObjectType',
    'Value',
    'Integer',
    'Boolean',
    'Null',
    'ReturnSignal',
    'Error',
    'TRUE',
    'FALSE',
    'NULL',
    'Environment',
    'Evaluator',
    'ExecutionResult',
    'run',
    # Config
    'InterpreterConfig',
    'configure_logging',
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("monkeylang")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"
