"""
Monkey runtime - Tree-walking evaluator.

This module provides:
- Evaluator: Evaluates AST nodes to runtime values
- Value: The closed set of runtime values (Integer, Boolean, Null, ...)
- Environment: Name bindings with outer-scope lookup
- run: Lex, parse and evaluate source text in one call
"""

from .values import (
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
    int_val,
    bool_val,
    is_error,
)

from .environment import (
    Environment,
)

from .evaluator import (
    Evaluator,
    ExecutionResult,
    run,
)

__all__ = [
    # Values
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
    'int_val',
    'bool_val',
    'is_error',

    # Environment
    'Environment',

    # Evaluator
    'Evaluator',
    'ExecutionResult',
    'run',
]
