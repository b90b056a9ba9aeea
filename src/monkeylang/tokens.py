"""
Token types for the Monkey lexer.

Every lexeme the lexer can produce maps onto one member of ``TokenType``.
The set is closed: keywords are recognised by exact lookup in ``KEYWORDS``
and anything else shaped like a name is an identifier.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Special ---
    EOF = auto()                # end of input (repeated forever)
    ILLEGAL = auto()            # any character the lexer does not know

    # --- Identifiers and literals ---
    IDENTIFIER = auto()         # user-defined names
    INT_LITERAL = auto()        # 42

    # --- Operators ---
    ASSIGN = auto()             # =
    EQ = auto()                 # ==
    NE = auto()                 # !=
    PLUS = auto()               # +
    MINUS = auto()              # -
    BANG = auto()               # !
    STAR = auto()               # *
    SLASH = auto()              # /
    GT = auto()                 # >
    LT = auto()                 # <

    # --- Delimiters ---
    COMMA = auto()              # ,
    SEMICOLON = auto()          # ;
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }

    # --- Keywords ---
    FN = auto()                 # fn (reserved, no function values)
    LET = auto()                # let
    TRUE = auto()               # true
    FALSE = auto()              # false
    IF = auto()                 # if
    ELSE = auto()               # else
    RETURN = auto()             # return


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    literal: str            # The original source text
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.type in (TokenType.INT_LITERAL, TokenType.IDENTIFIER, TokenType.ILLEGAL):
            return f"{self.type.name}({self.literal!r})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FN,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_identifier(text: str) -> TokenType:
    """Return the keyword token type for text, or IDENTIFIER."""
    return KEYWORDS.get(text, TokenType.IDENTIFIER)
