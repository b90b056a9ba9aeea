"""
Runtime values produced by the evaluator.

The value domain is closed: ``Integer``, ``Boolean``, ``Null`` plus the two
control-flow carriers ``ReturnSignal`` and ``Error``. Carriers only exist to
unwind the evaluator's recursion; ``Evaluator.eval`` on a ``Program`` never
hands a ``ReturnSignal`` back to its caller.

``TRUE``, ``FALSE`` and ``NULL`` are shared immutable instances, so identity
comparison against them is always valid.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class ObjectType(Enum):
    """Runtime type tags; the names appear verbatim in error messages."""
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


class Value(ABC):
    """Base class for all runtime values."""

    @property
    @abstractmethod
    def type(self) -> ObjectType:
        """The runtime type tag."""

    @abstractmethod
    def inspect(self) -> str:
        """Render the value the way the REPL prints it."""

    def is_truthy(self) -> bool:
        """Check if this value is truthy in a conditional context."""
        return True


@dataclass(frozen=True)
class Integer(Value):
    """A signed 64-bit integer."""
    value: int

    @property
    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def is_truthy(self) -> bool:
        return self.value != 0


@dataclass(frozen=True)
class Boolean(Value):
    """A boolean; only ``TRUE`` and ``FALSE`` should ever exist."""
    value: bool

    @property
    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def is_truthy(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Null(Value):
    """The absence of a value (e.g. an if without a taken branch)."""

    @property
    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"

    def is_truthy(self) -> bool:
        return False


@dataclass(frozen=True)
class ReturnSignal(Value):
    """Wraps the value of a ``return`` while it unwinds enclosing blocks."""
    value: Value

    @property
    def type(self) -> ObjectType:
        return ObjectType.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Value):
    """A runtime error; propagates unchanged to the top of the evaluation."""
    message: str

    @property
    def type(self) -> ObjectType:
        return ObjectType.ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def int_val(n: int) -> Integer:
    """Create an integer value."""
    return Integer(int(n))


def bool_val(b: bool) -> Boolean:
    """Return the shared boolean constant for b."""
    return TRUE if b else FALSE


def is_error(value: Value) -> bool:
    return isinstance(value, Error)
