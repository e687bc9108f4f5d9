"""
Let-language runtime - tree-walking interpreter.

This module provides:
- Interpreter: Evaluates expressions to values
- Value: Integer or boolean result with its type tag
- Environment: Persistent lexical bindings
"""

from .values import (
    Value,
    ValueType,
    int_val,
    bool_val,
    wrap_i32,
)

from .environment import (
    Environment,
    new_empty,
    extend,
    lookup,
    is_empty,
)

from .interpreter import (
    Interpreter,
    evaluate,
    run,
)

__all__ = [
    # Values
    'Value',
    'ValueType',
    'int_val',
    'bool_val',
    'wrap_i32',

    # Environment
    'Environment',
    'new_empty',
    'extend',
    'lookup',
    'is_empty',

    # Interpreter
    'Interpreter',
    'evaluate',
    'run',
]
