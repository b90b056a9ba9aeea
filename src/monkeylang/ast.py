"""
Abstract Syntax Tree (AST) node definitions for the Monkey language.

The node set is closed: four statement kinds, six expression kinds and the
``Program`` root. Nodes are plain dataclasses; the source span rides along as
a keyword-only field that is ignored by ``==`` so that two parses of the same
text compare equal.

``str(node)`` renders canonical source text, e.g. ``let myVar = anotherVar;``.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
from abc import ABC
from .tokens import SourceSpan


# Integers are signed 64-bit throughout parsing and evaluation
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    # Source location for error reporting
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False, kw_only=True)

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class Identifier(Expression):
    """A variable name reference."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class IntegerLiteral(Expression):
    """An integer literal."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class BooleanLiteral(Expression):
    """``true`` or ``false``."""
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass
class PrefixExpression(Expression):
    """A unary operation (e.g., !x, -n)."""
    operator: str
    operand: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.operand})"


@dataclass
class InfixExpression(Expression):
    """A binary operation (e.g., a + b, x == y)."""
    operator: str
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Expression):
    """An if-else expression (returns a value)."""
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self) -> str:
        text = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class LetStatement(Statement):
    """``let <name> = <value>;``"""
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Statement):
    """``return <value>;``"""
    value: Expression

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Statement):
    """An expression used in statement position."""
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass
class BlockStatement(Statement):
    """A brace-delimited sequence of statements."""
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(str(s) for s in self.statements) + " }"


# =============================================================================
# Root
# =============================================================================

@dataclass
class Program(AstNode):
    """The root of every parse."""
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return " ".join(str(s) for s in self.statements)


# =============================================================================
# Visitor Helpers
# =============================================================================

class PrintVisitor(AstVisitor):
    """Debug visitor that renders the AST structure as indented lines."""

    def __init__(self, indent: int = 0, lines: Optional[List[str]] = None):
        self.indent = indent
        self.lines = lines if lines is not None else []

    def _emit(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def generic_visit(self, node: AstNode) -> List[str]:
        self._emit(f"{node.__class__.__name__}")
        for name, value in node.__dict__.items():
            if name == "span":
                continue
            if isinstance(value, AstNode):
                self._emit(f"  {name}:")
                PrintVisitor(self.indent + 2, self.lines).generic_visit(value)
            elif isinstance(value, list):
                self._emit(f"  {name}: [")
                for item in value:
                    PrintVisitor(self.indent + 2, self.lines).generic_visit(item)
                self._emit("  ]")
            else:
                self._emit(f"  {name}: {value!r}")
        return self.lines


def format_ast(node: AstNode) -> str:
    """Render an AST node as an indented debug tree."""
    return "\n".join(node.accept(PrintVisitor()))


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
