"""
Abstract Syntax Tree (AST) node definitions for the Let-language.

Nodes are frozen dataclasses: the parser builds each tree bottom-up and
nothing mutates it afterwards. ``str(node)`` renders concrete syntax that
parses back to an equal tree.
"""

from dataclasses import dataclass, fields
from typing import Any, List
from abc import ABC


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode(ABC):
    """Base class for all AST nodes."""

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

@dataclass(frozen=True)
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class ConstExp(Expression):
    """An integer literal."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Expression):
    """A boolean literal."""
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class DiffExp(Expression):
    """Subtraction: -(left, right)."""
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"-({self.left}, {self.right})"


@dataclass(frozen=True)
class IsZeroExp(Expression):
    """Zero test: iszero(operand)."""
    operand: Expression

    def __str__(self) -> str:
        return f"iszero({self.operand})"


@dataclass(frozen=True)
class IfExp(Expression):
    """Conditional: if condition then then_branch else else_branch."""
    condition: Expression
    then_branch: Expression
    else_branch: Expression

    def __str__(self) -> str:
        return f"if {self.condition} then {self.then_branch} else {self.else_branch}"


@dataclass(frozen=True)
class VarExp(Expression):
    """A variable reference."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LetExp(Expression):
    """Lexically scoped binding: let name = bound in body.

    The binding is visible in ``body`` only, not in ``bound``.
    """
    name: str
    bound: Expression
    body: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.bound} in {self.body}"


# =============================================================================
# Visitor Helpers
# =============================================================================

class FormatVisitor(AstVisitor):
    """Debug visitor that lays out the AST structure, one node per line."""

    def __init__(self, indent: int = 0):
        self.indent = indent
        self.lines: List[str] = []

    def _emit(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def generic_visit(self, node: AstNode) -> List[str]:
        self._emit(f"{node.__class__.__name__}")
        for f in fields(node):
            value = getattr(node, f.name)
            if isinstance(value, AstNode):
                self._emit(f"  {f.name}:")
                child = FormatVisitor(self.indent + 2)
                value.accept(child)
                self.lines.extend(child.lines)
            else:
                self._emit(f"  {f.name}: {value!r}")
        return self.lines


def format_ast(node: AstNode) -> str:
    """Return an indented dump of an AST node for debugging."""
    return "\n".join(node.accept(FormatVisitor()))


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
