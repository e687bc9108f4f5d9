"""
Tree-walking interpreter for the Let-language.

Evaluation is a structural recursion over the immutable AST. A failed
evaluation returns None; the caller is not told which rule failed
(unbound variable, iszero on a boolean, or a failed sub-expression). The
reason is only logged at DEBUG level.

Two rules are deliberately loose and must stay that way:
- DiffExp treats a boolean operand as 0.
- IfExp takes the else branch for any condition other than Boolean(true),
  including integers and failed conditions.
"""

import logging
from typing import Optional

from .values import Value, ValueType, int_val, bool_val, wrap_i32
from .environment import Environment

from ..ast import (
    Expression, ConstExp, Boolean, DiffExp, IsZeroExp, IfExp, VarExp, LetExp,
)

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Tree-walking interpreter.

    Evaluates AST nodes by dispatching to type-specific methods.
    """

    def evaluate(self, expr: Expression, env: Optional[Environment] = None) -> Optional[Value]:
        """
        Evaluate an expression under an environment.

        Args:
            expr: The expression to evaluate
            env: Bindings visible to the expression (default: empty)

        Returns:
            The resulting Value, or None if evaluation is undefined
        """
        if env is None:
            env = Environment()
        return self._evaluate(expr, env)

    def _evaluate(self, expr: Expression, env: Environment) -> Optional[Value]:
        """Evaluate an expression to produce a Value."""
        if isinstance(expr, ConstExp):
            return int_val(expr.value)
        elif isinstance(expr, Boolean):
            return bool_val(expr.value)
        elif isinstance(expr, VarExp):
            return self._eval_var(expr, env)
        elif isinstance(expr, DiffExp):
            return self._eval_diff(expr, env)
        elif isinstance(expr, IsZeroExp):
            return self._eval_iszero(expr, env)
        elif isinstance(expr, IfExp):
            return self._eval_if(expr, env)
        elif isinstance(expr, LetExp):
            return self._eval_let(expr, env)
        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_var(self, var: VarExp, env: Environment) -> Optional[Value]:
        """Evaluate a variable reference (environment lookup)."""
        value = env.lookup(var.name)
        if value is None:
            logger.debug("unbound variable '%s'", var.name)
        return value

    def _eval_diff(self, diff: DiffExp, env: Environment) -> Optional[Value]:
        """Evaluate -(left, right)."""
        left = self._evaluate(diff.left, env)
        right = self._evaluate(diff.right, env)
        if left is None or right is None:
            return None
        return int_val(wrap_i32(_as_int(left) - _as_int(right)))

    def _eval_iszero(self, iszero: IsZeroExp, env: Environment) -> Optional[Value]:
        """Evaluate iszero(operand)."""
        operand = self._evaluate(iszero.operand, env)
        if operand is None:
            return None
        if operand.type == ValueType.BOOLEAN:
            logger.debug("iszero applied to boolean %s", operand)
            return None
        return bool_val(operand.data == 0)

    def _eval_if(self, if_expr: IfExp, env: Environment) -> Optional[Value]:
        """Evaluate if condition then then_branch else else_branch."""
        condition = self._evaluate(if_expr.condition, env)
        if condition is not None and condition.type == ValueType.BOOLEAN and condition.data:
            return self._evaluate(if_expr.then_branch, env)
        return self._evaluate(if_expr.else_branch, env)

    def _eval_let(self, let: LetExp, env: Environment) -> Optional[Value]:
        """Evaluate let name = bound in body."""
        bound = self._evaluate(let.bound, env)
        if bound is None:
            return None
        return self._evaluate(let.body, env.extend(let.name, bound))


def _as_int(value: Value) -> int:
    """Integer payload of a value; booleans count as 0."""
    if value.type == ValueType.INTEGER:
        return value.data
    return 0


def evaluate(expr: Expression, env: Optional[Environment] = None) -> Optional[Value]:
    """
    Evaluate an expression.

    This is a convenience wrapper around Interpreter.evaluate().
    """
    return Interpreter().evaluate(expr, env)


def run(
    source: str,
    env: Optional[Environment] = None,
    filename: Optional[str] = None,
) -> Optional[Value]:
    """
    Tokenize, parse and evaluate source code in one call.

        from letlang import run

        value = run("let x = 7 in -(x, 2)")
        if value is not None:
            print(value)   # 5

    Args:
        source: Let-language source code
        env: Initial environment (default: empty)
        filename: Optional filename for error messages

    Returns:
        The resulting Value, or None if evaluation is undefined

    Raises:
        LexError: If the source cannot be tokenized
        ParseError: If the tokens do not form an expression
    """
    from ..lexer import tokenize
    from ..parser import parse

    tokens = tokenize(source, filename)
    expr = parse(tokens, source=source)
    return evaluate(expr, env)
