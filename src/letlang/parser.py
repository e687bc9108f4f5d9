"""
Recursive descent parser for the Let-language.

Converts a token list into an Abstract Syntax Tree (AST).

Grammar (LL(1), each production is chosen by its leading token):

    Expr  := Integer | Boolean
           | '-' '(' Expr ',' Expr ')'              DiffExp
           | 'iszero' '(' Expr ')'                   IsZeroExp
           | 'if' Expr 'then' Expr 'else' Expr       IfExp
           | Identifier                              VarExp
           | 'let' Identifier '=' Expr 'in' Expr     LetExp
"""

import logging
from typing import List, Optional
from .tokens import Token, TokenType, describe_token, describe_token_type
from .ast import (
    Expression, ConstExp, Boolean, DiffExp, IsZeroExp, IfExp, VarExp, LetExp,
)
from .errors import (
    ParseError,
    error_unexpected_token,
    error_unexpected_eof,
    error_extra_input,
    error_expected_identifier,
    error_nesting_too_deep,
    source_lines,
)

logger = logging.getLogger(__name__)

LPAREN = Token(TokenType.LPAREN)
RPAREN = Token(TokenType.RPAREN)
COMMA = Token(TokenType.COMMA)
MINUS = Token(TokenType.MINUS)
ASSIGN = Token(TokenType.ASSIGN)
ISZERO = Token(TokenType.ISZERO)
IF = Token(TokenType.IF)
THEN = Token(TokenType.THEN)
ELSE = Token(TokenType.ELSE)
LET = Token(TokenType.LET)
IN = Token(TokenType.IN)

# Deepest nesting of sub-expressions a program may have
MAX_NESTING_DEPTH = 200


class Parser:
    """
    Recursive descent parser for the Let-language.

    Usage:
        parser = Parser(tokens)
        expr = parser.parse()

    The first error is terminal: a ParseError propagates out of every
    enclosing production and no partial tree is returned.
    """

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.source = source  # Original source code for error display
        self.pos = 0
        self.depth = 0         # Sub-expressions currently open

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _peek(self) -> Optional[Token]:
        """Look at the next unconsumed token, or None at end of input."""
        if self.pos >= len(self.tokens):
            return None
        return self.tokens[self.pos]

    def _advance(self, expected: str) -> Token:
        """Consume and return the next token; running out is an error."""
        token = self._peek()
        if token is None:
            raise error_unexpected_eof(expected)
        self.pos += 1
        return token

    def _source_line(self, token: Token) -> Optional[str]:
        """Source line a token came from, when both are known."""
        if self.source is None or token.span is None:
            return None
        lines = source_lines(self.source)
        line_num = token.span.start.line
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def match_token(self, expected: Token) -> None:
        """Consume one token, requiring it to equal expected."""
        description = describe_token_type(expected.type)
        token = self._advance(description)
        if token != expected:
            raise error_unexpected_token(
                description, describe_token(token), token.span, self._source_line(token)
            )

    def get_identifier_name(self) -> str:
        """Consume an identifier token and return its name."""
        token = self._advance("identifier")
        if token.type != TokenType.IDENTIFIER:
            raise error_expected_identifier(
                describe_token(token), token.span, self._source_line(token)
            )
        return token.value

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse_expression(self) -> Expression:
        """Parse one expression, dispatching on the leading token."""
        token = self._peek()
        if token is None:
            raise error_unexpected_eof("expression")
        if self.depth >= MAX_NESTING_DEPTH:
            raise error_nesting_too_deep(
                MAX_NESTING_DEPTH, token.span, self._source_line(token)
            )

        self.depth += 1
        try:
            return self._parse_form(token)
        finally:
            self.depth -= 1

    def _parse_form(self, token: Token) -> Expression:
        """Parse the production selected by token."""
        if token.type == TokenType.INTEGER:
            self.pos += 1
            return ConstExp(token.value)
        if token.type == TokenType.BOOLEAN:
            self.pos += 1
            return Boolean(token.value)
        if token.type == TokenType.IDENTIFIER:
            self.pos += 1
            return VarExp(token.value)
        if token.type == TokenType.MINUS:
            return self._parse_diff()
        if token.type == TokenType.ISZERO:
            return self._parse_iszero()
        if token.type == TokenType.IF:
            return self._parse_if()
        if token.type == TokenType.LET:
            return self._parse_let()

        raise error_unexpected_token(
            "expression", describe_token(token), token.span, self._source_line(token)
        )

    def _parse_diff(self) -> DiffExp:
        """Parse -(left, right)."""
        self.match_token(MINUS)
        self.match_token(LPAREN)
        left = self.parse_expression()
        self.match_token(COMMA)
        right = self.parse_expression()
        self.match_token(RPAREN)
        return DiffExp(left, right)

    def _parse_iszero(self) -> IsZeroExp:
        """Parse iszero(operand)."""
        self.match_token(ISZERO)
        self.match_token(LPAREN)
        operand = self.parse_expression()
        self.match_token(RPAREN)
        return IsZeroExp(operand)

    def _parse_if(self) -> IfExp:
        """Parse if condition then then_branch else else_branch."""
        self.match_token(IF)
        condition = self.parse_expression()
        self.match_token(THEN)
        then_branch = self.parse_expression()
        self.match_token(ELSE)
        else_branch = self.parse_expression()
        return IfExp(condition, then_branch, else_branch)

    def _parse_let(self) -> LetExp:
        """Parse let name = bound in body."""
        self.match_token(LET)
        name = self.get_identifier_name()
        self.match_token(ASSIGN)
        bound = self.parse_expression()
        self.match_token(IN)
        body = self.parse_expression()
        return LetExp(name, bound, body)

    def parse(self) -> Expression:
        """Parse a complete program; every token must be consumed."""
        expr = self.parse_expression()
        extra = self._peek()
        if extra is not None:
            raise error_extra_input(
                describe_token(extra), extra.span, self._source_line(extra)
            )
        logger.debug("parsed %d token(s) into %s", len(self.tokens), type(expr).__name__)
        return expr


def parse(tokens: List[Token], source: Optional[str] = None) -> Expression:
    """
    Convenience function to parse tokens into an expression.

    Args:
        tokens: List of tokens from the lexer
        source: Optional original source code for error display

    Returns:
        Parsed Expression AST

    Raises:
        ParseError: If parsing fails
    """
    parser = Parser(tokens, source)
    return parser.parse()
