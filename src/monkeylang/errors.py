"""
Interpreter exceptions and syntax diagnostics.

Syntax errors are collected as ``Diagnostic`` records, never raised to the
caller of the parser. Runtime errors are ordinary values (see
``runtime.values.Error``) and do not appear here.

Error code ranges:
- E1xx: Parser errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from termcolor import colored

from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E101, E102, ...
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        loc = f"{self.span.start}: " if self.span is not None else ""
        parts.append(f"{loc}{self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.source_line is not None and self.span is not None:
            parts.append("    |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            data["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return data


class MonkeyError(Exception):
    """Base exception for interpreter errors."""
    pass


class ParserError(MonkeyError):
    """A syntax error that abandons the statement being parsed (E1xx)."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class ConfigError(MonkeyError):
    """Invalid interpreter configuration."""
    pass


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: Optional[SourceSpan],
                           source_line: Optional[str] = None) -> ParserError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected next token to be {expected}, got {found} instead",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParserError(diag)


def error_no_prefix_parser(found: str, span: Optional[SourceSpan],
                           source_line: Optional[str] = None) -> ParserError:
    """E102: Token cannot start an expression."""
    diag = Diagnostic(
        code="E102",
        message=f"no prefix parse function for {found} found",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    if found == "FN":
        diag.hints.append("function literals are not supported")
    return ParserError(diag)


def error_invalid_integer(text: str, span: Optional[SourceSpan],
                          source_line: Optional[str] = None) -> ParserError:
    """E103: Integer literal outside the signed 64-bit range."""
    diag = Diagnostic(
        code="E103",
        message=f"could not parse {text} as integer",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["integers are signed 64-bit values"],
    )
    return ParserError(diag)


class DiagnosticCollector:
    """Collects diagnostics during parsing."""

    def __init__(self, max_errors: int = 20):
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    def add_error(self, error: ParserError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    @property
    def should_stop(self) -> bool:
        """Check if we've hit the max error limit."""
        return self._error_count >= self.max_errors

    @property
    def messages(self) -> List[str]:
        """Plain diagnostic messages, in the order they were collected."""
        return [d.message for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
        }


# --- Terminal rendering ---

def render_error(message: str, color: bool = True) -> str:
    """Render a one-line error for the terminal, with a red ``error:`` prefix."""
    prefix = "error:"
    if color:
        prefix = colored(prefix, "red", attrs=["bold"])
    return f"{prefix} {message}"


def render_diagnostic(diagnostic: Diagnostic, color: bool = True) -> str:
    """Render a formatted diagnostic, highlighting its header line."""
    text = diagnostic.format()
    if not color:
        return text
    header, sep, rest = text.partition("\n")
    return colored(header, "red", attrs=["bold"]) + sep + rest


# Reported by the command line tools when input exceeds the recursion limit
NESTING_ERROR = "input is nested too deeply"
