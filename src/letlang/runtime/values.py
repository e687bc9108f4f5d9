"""
Runtime values for the Let-language interpreter.

A value is a tagged union (IntBool): a signed 32-bit integer or a boolean.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..tokens import I32_MIN, I32_MAX


class ValueType(Enum):
    """Runtime type tag of a Value."""
    INTEGER = "int"
    BOOLEAN = "bool"


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its type tag.

    The `data` field holds the Python int or bool.
    """
    data: Union[int, bool]
    type: ValueType

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.type.name})"

    def __str__(self) -> str:
        if self.type == ValueType.BOOLEAN:
            return "true" if self.data else "false"
        return str(self.data)

    @property
    def is_integer(self) -> bool:
        return self.type == ValueType.INTEGER

    @property
    def is_boolean(self) -> bool:
        return self.type == ValueType.BOOLEAN


# Convenience constructors

def int_val(n: int) -> Value:
    """Create an integer value. Raises ValueError outside the 32-bit range."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"integer value expected, got {n!r}")
    if not I32_MIN <= n <= I32_MAX:
        raise ValueError(f"integer {n} does not fit in 32 bits")
    return Value(n, ValueType.INTEGER)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), ValueType.BOOLEAN)


def wrap_i32(n: int) -> int:
    """Wrap an arbitrary int to signed 32-bit two's complement."""
    return (n - I32_MIN) % 2**32 + I32_MIN
