"""
Lexer for the Monkey language.

Converts source text into a stream of tokens for the parser.
Supports:
- Identifiers and the keyword table in ``tokens.KEYWORDS``
- Decimal integer literals
- One- and two-character operators (``==``, ``!=``)
- Line/column tracking for diagnostics

Unknown characters never raise: they come out as ``ILLEGAL`` tokens and the
parser reports them.
"""

from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, lookup_identifier,
)


SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    '=': TokenType.ASSIGN,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '!': TokenType.BANG,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '<': TokenType.LT,
    '>': TokenType.GT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
}


class Lexer:
    """
    Tokenizer for Monkey source text.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        token = lexer.next_token()   # EOF forever once input is exhausted
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self) -> str:
        """Look at the current character without consuming."""
        if self.pos >= len(self.source):
            return '\0'
        return self.source[self.pos]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek() in ' \t\r\n':
            self._advance()

    def _make_token(self, token_type: TokenType, start: SourceLocation) -> Token:
        """Create a token whose literal is the source text since start."""
        return Token(token_type, self.source[start.offset:self.pos], self._span(start))

    def _scan_number(self, start: SourceLocation) -> Token:
        while '0' <= self._peek() <= '9':
            self._advance()
        return self._make_token(TokenType.INT_LITERAL, start)

    def _scan_identifier_or_keyword(self, start: SourceLocation) -> Token:
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        return self._make_token(lookup_identifier(lexeme), start)

    def next_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace()

        start = self._location()
        if self._is_at_end():
            return Token(TokenType.EOF, "", self._span(start))

        ch = self._peek()

        if '0' <= ch <= '9':
            return self._scan_number(start)

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword(start)

        self._advance()

        # Two-character operators
        if ch == '=' and self._match('='):
            return self._make_token(TokenType.EQ, start)
        if ch == '!' and self._match('='):
            return self._make_token(TokenType.NE, start)

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], start)

        return self._make_token(TokenType.ILLEGAL, start)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, always ending with a single EOF
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
