"""
Pratt (precedence climbing) parser for the Monkey language.

Converts a token stream into an Abstract Syntax Tree (AST). Syntax errors are
collected rather than raised: ``parse_program`` always returns a ``Program``
and the caller checks ``parser.errors`` before trusting it.

The parser is recursive descent, so nesting depth is bounded by Python's
recursion limit. Input nested deeper than that (a few hundred levels of
parentheses, prefix operators or blocks) raises ``RecursionError``; callers
that accept untrusted input catch it, as the CLI and REPL do.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .tokens import Token, TokenType, SourceSpan
from .lexer import Lexer
from .ast import (
    INT64_MAX,
    # Expressions
    Expression, Identifier, IntegerLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression,
    # Statements
    Statement, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Program,
)
from .errors import (
    ParserError,
    DiagnosticCollector,
    error_unexpected_token,
    error_no_prefix_parser,
    error_invalid_integer,
)

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Binding power of operators, lowest to highest."""
    LOWEST = 1
    EQUALS = 2          # == !=
    LESSGREATER = 3     # < >
    SUM = 4             # + -
    PRODUCT = 5         # * /
    PREFIX = 6          # -x !x
    CALL = 7            # reserved, no call expressions yet


PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    """
    Pratt parser for Monkey source.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            ...

    Every token type that can start an expression has a prefix parse
    function; every binary operator has an infix parse function and an entry
    in ``PRECEDENCES``. Both registries belong to the parser instance.
    """

    PRECEDENCES = {
        TokenType.EQ: Precedence.EQUALS,
        TokenType.NE: Precedence.EQUALS,
        TokenType.LT: Precedence.LESSGREATER,
        TokenType.GT: Precedence.LESSGREATER,
        TokenType.PLUS: Precedence.SUM,
        TokenType.MINUS: Precedence.SUM,
        TokenType.STAR: Precedence.PRODUCT,
        TokenType.SLASH: Precedence.PRODUCT,
    }

    def __init__(self, tokens: Union[Lexer, Iterable[Token]], filename: Optional[str] = None,
                 source: Optional[str] = None, max_errors: int = 20):
        if source is None and isinstance(tokens, Lexer):
            source = tokens.source
        self.filename = filename
        self.source = source
        self._lines = source.splitlines() if source else []
        self.diagnostics = DiagnosticCollector(max_errors)

        self._tokens = iter(tokens)
        self._eof = Token(TokenType.EOF, "")
        self._previous: Optional[Token] = None
        self._token = self._pull()
        self._block_depth = 0

        self._prefix_parse_fns: Dict[TokenType, PrefixParseFn] = {}
        self._infix_parse_fns: Dict[TokenType, InfixParseFn] = {}

        self._register_prefix(TokenType.IDENTIFIER, self._parse_identifier)
        self._register_prefix(TokenType.INT_LITERAL, self._parse_integer_literal)
        self._register_prefix(TokenType.TRUE, self._parse_boolean)
        self._register_prefix(TokenType.FALSE, self._parse_boolean)
        self._register_prefix(TokenType.BANG, self._parse_prefix_expression)
        self._register_prefix(TokenType.MINUS, self._parse_prefix_expression)
        self._register_prefix(TokenType.LPAREN, self._parse_grouped_expression)
        self._register_prefix(TokenType.IF, self._parse_if_expression)

        for token_type in self.PRECEDENCES:
            self._register_infix(token_type, self._parse_infix_expression)

    @property
    def errors(self) -> List[str]:
        """Syntax error messages collected so far, in source order."""
        return self.diagnostics.messages

    def _register_prefix(self, token_type: TokenType, fn: PrefixParseFn) -> None:
        self._prefix_parse_fns[token_type] = fn

    def _register_infix(self, token_type: TokenType, fn: InfixParseFn) -> None:
        self._infix_parse_fns[token_type] = fn

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _pull(self) -> Token:
        """Take the next token from the source, repeating EOF once it runs dry."""
        token = next(self._tokens, None)
        if token is None:
            return self._eof
        if token.type == TokenType.EOF:
            self._eof = token
        return token

    def _current(self) -> Token:
        """Get current token."""
        return self._token

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._token.type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._token.type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._token
        if not self._is_at_end():
            self._previous = token
            self._token = self._pull()
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._token.type in token_types:
            return self._advance()
        return None

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        token = self._current()
        raise error_unexpected_token(
            token_type.name, token.type.name, token.span, self._source_line(token)
        )

    def _current_precedence(self) -> Precedence:
        return self.PRECEDENCES.get(self._token.type, Precedence.LOWEST)

    def _source_line(self, token: Token) -> Optional[str]:
        if token.span is None:
            return None
        line_num = token.span.start.line
        if 1 <= line_num <= len(self._lines):
            return self._lines[line_num - 1]
        return None

    def _span_from(self, start: Optional[SourceSpan]) -> Optional[SourceSpan]:
        """Create a span from start to the end of the last consumed token."""
        end = self._previous.span if self._previous is not None else None
        if start is None or end is None:
            return None
        return SourceSpan(start.start, end.end)

    # =========================================================================
    # Expression Parsing (Precedence Climbing)
    # =========================================================================

    def _parse_expression(self, precedence: Precedence) -> Expression:
        """Parse an expression whose operators bind tighter than precedence."""
        prefix = self._prefix_parse_fns.get(self._token.type)
        if prefix is None:
            token = self._current()
            raise error_no_prefix_parser(token.type.name, token.span, self._source_line(token))

        left = prefix()

        while not self._check(TokenType.SEMICOLON) and precedence < self._current_precedence():
            infix = self._infix_parse_fns.get(self._token.type)
            if infix is None:
                return left
            left = infix(left)

        return left

    def _parse_identifier(self) -> Expression:
        token = self._advance()
        return Identifier(name=token.literal, span=token.span)

    def _parse_integer_literal(self) -> Expression:
        token = self._advance()
        try:
            value = int(token.literal)
        except ValueError:
            value = None
        if value is None or value > INT64_MAX:
            raise error_invalid_integer(token.literal, token.span, self._source_line(token))
        return IntegerLiteral(value=value, span=token.span)

    def _parse_boolean(self) -> Expression:
        token = self._advance()
        return BooleanLiteral(value=token.type == TokenType.TRUE, span=token.span)

    def _parse_prefix_expression(self) -> Expression:
        """Parse unary expressions (!, -)."""
        op = self._advance()
        operand = self._parse_expression(Precedence.PREFIX)
        return PrefixExpression(
            operator=op.literal,
            operand=operand,
            span=self._span_from(op.span)
        )

    def _parse_infix_expression(self, left: Expression) -> Expression:
        """Parse a binary operator and its right operand.

        The right operand is parsed at the operator's own precedence, so an
        operator of equal precedence is left for the caller's loop and chains
        group to the left: ``a - b - c`` is ``(a - b) - c``.
        """
        op = self._advance()
        precedence = self.PRECEDENCES[op.type]
        right = self._parse_expression(precedence)
        return InfixExpression(
            operator=op.literal,
            left=left,
            right=right,
            span=self._span_from(left.span)
        )

    def _parse_grouped_expression(self) -> Expression:
        self._advance()  # consume '('
        expression = self._parse_expression(Precedence.LOWEST)
        self._consume(TokenType.RPAREN)
        return expression

    def _parse_if_expression(self) -> Expression:
        """Parse ``if (<condition>) { ... } [else { ... }]``."""
        start = self._advance()  # consume 'if'
        self._consume(TokenType.LPAREN)
        condition = self._parse_expression(Precedence.LOWEST)
        self._consume(TokenType.RPAREN)
        consequence = self._parse_block_statement()

        alternative = None
        if self._match(TokenType.ELSE):
            alternative = self._parse_block_statement()

        return IfExpression(
            condition=condition,
            consequence=consequence,
            alternative=alternative,
            span=self._span_from(start.span)
        )

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse a statement."""
        if self._check(TokenType.LET):
            return self._parse_let_statement()
        if self._check(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement:
        start = self._advance()  # consume 'let'
        name_token = self._consume(TokenType.IDENTIFIER)
        name = Identifier(name=name_token.literal, span=name_token.span)
        self._consume(TokenType.ASSIGN)
        value = self._parse_expression(Precedence.LOWEST)
        self._match(TokenType.SEMICOLON)
        return LetStatement(name=name, value=value, span=self._span_from(start.span))

    def _parse_return_statement(self) -> ReturnStatement:
        start = self._advance()  # consume 'return'
        value = self._parse_expression(Precedence.LOWEST)
        self._match(TokenType.SEMICOLON)
        return ReturnStatement(value=value, span=self._span_from(start.span))

    def _parse_expression_statement(self) -> ExpressionStatement:
        start = self._current()
        expression = self._parse_expression(Precedence.LOWEST)
        self._match(TokenType.SEMICOLON)
        return ExpressionStatement(expression=expression, span=self._span_from(start.span))

    def _parse_block_statement(self) -> BlockStatement:
        """Parse ``{ ... }``; an unterminated block ends at end of input."""
        start = self._consume(TokenType.LBRACE)
        statements = []

        self._block_depth += 1
        try:
            while not self._check(TokenType.RBRACE) and not self._is_at_end():
                stmt = self._parse_statement_or_recover()
                if stmt is not None:
                    statements.append(stmt)
        finally:
            self._block_depth -= 1

        self._match(TokenType.RBRACE)
        return BlockStatement(statements=statements, span=self._span_from(start.span))

    # =========================================================================
    # Error Recovery
    # =========================================================================

    def _parse_statement_or_recover(self) -> Optional[Statement]:
        """Parse one statement; on a syntax error record it and drop the statement."""
        try:
            return self._parse_statement()
        except ParserError as e:
            self.diagnostics.add_error(e)
            logger.debug("syntax error: %s", e.diagnostic.message)
            if self.diagnostics.should_stop:
                logger.debug("stopping after %d syntax errors", self.diagnostics.error_count)
                while not self._is_at_end():
                    self._advance()
            else:
                self._synchronize()
            return None

    def _synchronize(self) -> None:
        """Skip to just past the next ';', or to the '}' closing the current block."""
        while not self._is_at_end():
            if self._match(TokenType.SEMICOLON):
                return
            if self._block_depth > 0 and self._check(TokenType.RBRACE):
                return
            self._advance()

    # =========================================================================
    # Program
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse the whole token stream into a Program.

        Syntax errors never raise; they are collected in ``diagnostics``.

        Raises:
            RecursionError: If the input nests deeper than the interpreter's
                recursion limit allows
        """
        start = self._current()
        statements = []

        while not self._is_at_end():
            stmt = self._parse_statement_or_recover()
            if stmt is not None:
                statements.append(stmt)

        return Program(statements=statements, span=self._span_from(start.span))


def parse(source: str, filename: Optional[str] = None,
          max_errors: int = 20) -> Tuple[Program, List[str]]:
    """
    Convenience function to lex and parse source text.

    Args:
        source: Monkey source code
        filename: Optional filename for error messages
        max_errors: Stop parsing after this many syntax errors

    Returns:
        The parsed Program and the list of syntax error messages

    Raises:
        RecursionError: If the input is nested too deeply to parse
    """
    parser = Parser(Lexer(source, filename), filename, source, max_errors)
    program = parser.parse_program()
    return program, parser.errors
