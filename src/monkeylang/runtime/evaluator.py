"""
Tree-walking evaluator for Monkey programs.

Evaluates AST nodes against an Environment to produce a runtime Value.
Runtime errors are ``Error`` values and ``return`` produces a
``ReturnSignal``. Every composite rule checks its sub-results and passes
either carrier through untouched, so the first error or return decides the
result. Only the program unwraps a ``ReturnSignal``; neither carrier is ever
bound in an Environment or used as an operand.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .values import (
    Value, Integer, Boolean, Null, ReturnSignal, Error,
    NULL, int_val, bool_val,
)
from .environment import Environment

from ..ast import (
    INT64_MIN, INT64_MAX,
    AstNode, Program,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression,
)
from ..errors import Diagnostic
from ..lexer import Lexer
from ..parser import Parser

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Tree-walking evaluator.

    Holds no state of its own; the same instance can evaluate any number of
    programs against any number of environments.
    """

    def eval(self, node: AstNode, env: Environment) -> Value:
        """Evaluate an AST node to produce a Value."""
        if isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, ExpressionStatement):
            return self.eval(node.expression, env)
        elif isinstance(node, BlockStatement):
            return self._eval_block(node, env)
        elif isinstance(node, LetStatement):
            return self._eval_let(node, env)
        elif isinstance(node, ReturnStatement):
            return self._eval_return(node, env)
        elif isinstance(node, IntegerLiteral):
            return int_val(node.value)
        elif isinstance(node, BooleanLiteral):
            return bool_val(node.value)
        elif isinstance(node, PrefixExpression):
            return self._eval_prefix(node, env)
        elif isinstance(node, InfixExpression):
            return self._eval_infix(node, env)
        elif isinstance(node, IfExpression):
            return self._eval_if(node, env)
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    @staticmethod
    def _is_unwinding(value: Value) -> bool:
        """True for the control-flow carriers that must pass outward untouched."""
        return isinstance(value, (ReturnSignal, Error))

    def _error(self, message: str) -> Error:
        logger.debug("runtime error: %s", message)
        return Error(message)

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> Value:
        """Evaluate top-level statements; a return ends the program with its value."""
        result: Value = NULL
        for stmt in program.statements:
            result = self.eval(stmt, env)
            if isinstance(result, ReturnSignal):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _eval_block(self, block: BlockStatement, env: Environment) -> Value:
        """Evaluate a block; errors and return signals stop it and pass outward."""
        result: Value = NULL
        for stmt in block.statements:
            result = self.eval(stmt, env)
            if isinstance(result, (ReturnSignal, Error)):
                return result
        return result

    def _eval_let(self, stmt: LetStatement, env: Environment) -> Value:
        value = self.eval(stmt.value, env)
        if self._is_unwinding(value):
            return value
        return env.set(stmt.name.name, value)

    def _eval_return(self, stmt: ReturnStatement, env: Environment) -> Value:
        value = self.eval(stmt.value, env)
        if self._is_unwinding(value):
            return value
        return ReturnSignal(value)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_identifier(self, ident: Identifier, env: Environment) -> Value:
        value, found = env.get(ident.name)
        if not found:
            return self._error(f"identifier not found: {ident.name}")
        return value

    def _eval_prefix(self, expr: PrefixExpression, env: Environment) -> Value:
        operand = self.eval(expr.operand, env)
        if self._is_unwinding(operand):
            return operand

        if expr.operator == "!":
            return self._eval_bang(operand)
        if expr.operator == "-":
            return self._eval_minus(operand)
        return self._error(f"unknown operator: {expr.operator}{operand.type}")

    def _eval_bang(self, operand: Value) -> Value:
        """Logical not: null and false negate to true, everything else to false."""
        if isinstance(operand, Boolean):
            return bool_val(not operand.value)
        if isinstance(operand, Null):
            return bool_val(True)
        return bool_val(False)

    def _eval_minus(self, operand: Value) -> Value:
        if not isinstance(operand, Integer):
            return self._error(f"unknown operator: -{operand.type}")
        result = -operand.value
        if result > INT64_MAX:
            return self._error(f"integer overflow: -{operand.value}")
        return int_val(result)

    def _eval_infix(self, expr: InfixExpression, env: Environment) -> Value:
        left = self.eval(expr.left, env)
        if self._is_unwinding(left):
            return left
        right = self.eval(expr.right, env)
        if self._is_unwinding(right):
            return right

        operator = expr.operator
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(operator, left, right)
        if isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator == "==":
                return bool_val(left.value == right.value)
            if operator == "!=":
                return bool_val(left.value != right.value)
        if left.type != right.type:
            return self._error(f"type mismatch: {left.type} {operator} {right.type}")
        return self._error(f"unknown operator: {left.type} {operator} {right.type}")

    def _eval_integer_infix(self, operator: str, left: Integer, right: Integer) -> Value:
        a, b = left.value, right.value

        # Comparison operators
        if operator == "<":
            return bool_val(a < b)
        if operator == ">":
            return bool_val(a > b)
        if operator == "==":
            return bool_val(a == b)
        if operator == "!=":
            return bool_val(a != b)

        # Arithmetic operators
        if operator == "+":
            result = a + b
        elif operator == "-":
            result = a - b
        elif operator == "*":
            result = a * b
        elif operator == "/":
            if b == 0:
                return self._error(f"division by zero: {a} / {b}")
            # Truncate toward zero
            result = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                result = -result
        else:
            return self._error(f"unknown operator: {left.type} {operator} {right.type}")

        if not INT64_MIN <= result <= INT64_MAX:
            return self._error(f"integer overflow: {a} {operator} {b}")
        return int_val(result)

    def _eval_if(self, expr: IfExpression, env: Environment) -> Value:
        condition = self.eval(expr.condition, env)
        if self._is_unwinding(condition):
            return condition

        if condition.is_truthy():
            return self.eval(expr.consequence, env)
        if expr.alternative is not None:
            return self.eval(expr.alternative, env)
        return NULL


# =============================================================================
# Running source text
# =============================================================================

@dataclass
class ExecutionResult:
    """Result of running a piece of source text."""
    value: Optional[Value] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        """Syntax error messages; evaluation was skipped if there are any."""
        return [d.message for d in self.diagnostics]

    @property
    def is_error(self) -> bool:
        """True when evaluation ran and produced a runtime Error."""
        return isinstance(self.value, Error)

    @property
    def success(self) -> bool:
        return not self.diagnostics and self.value is not None and not self.is_error


def run(
    source: str,
    env: Optional[Environment] = None,
    filename: Optional[str] = None,
    max_errors: int = 20,
) -> ExecutionResult:
    """
    Lex, parse and evaluate source text.

    Evaluation only happens when parsing produced no errors, so a partial
    tree is never evaluated.

    Args:
        source: Monkey source code
        env: Environment to evaluate in; a fresh one when omitted
        filename: Optional filename for diagnostics
        max_errors: Stop parsing after this many syntax errors

    Returns:
        ExecutionResult holding either the diagnostics or the value

    Raises:
        RecursionError: If the input is nested too deeply to parse or evaluate
    """
    parser = Parser(Lexer(source, filename), filename, source, max_errors)
    program = parser.parse_program()
    if parser.diagnostics.has_errors:
        logger.debug("skipping evaluation: %d syntax error(s)", parser.diagnostics.error_count)
        return ExecutionResult(diagnostics=list(parser.diagnostics.diagnostics))

    if env is None:
        env = Environment()
    return ExecutionResult(value=Evaluator().eval(program, env))
