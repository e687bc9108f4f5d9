"""
Token types for the Let-language lexer.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Optional


# Integer literals and values are signed 32-bit
I32_MIN = -2**31
I32_MAX = 2**31 - 1


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Punctuation ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    COMMA = auto()              # ,
    MINUS = auto()              # - or minus
    ASSIGN = auto()             # =

    # --- Keywords ---
    ISZERO = auto()             # iszero
    IF = auto()                 # if
    THEN = auto()               # then
    ELSE = auto()               # else
    LET = auto()                # let
    IN = auto()                 # in

    # --- Parameterized ---
    IDENTIFIER = auto()         # user-defined names
    INTEGER = auto()            # 42, -7, +3
    BOOLEAN = auto()            # true, false


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """
    A single token from the lexer.

    Tokens compare structurally on type and value. The lexeme and span are
    carried for diagnostics only, so a hand-built ``Token(TokenType.INTEGER, 24)``
    equals the token scanned from ``24``.
    """
    type: TokenType
    value: Any = None       # str for identifiers, int or bool for literals
    lexeme: str = field(default="", compare=False, repr=False)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if self.type in (TokenType.IDENTIFIER, TokenType.INTEGER, TokenType.BOOLEAN):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict[str, TokenType] = {
    "iszero": TokenType.ISZERO,
    "minus": TokenType.MINUS,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "let": TokenType.LET,
    "in": TokenType.IN,

    # Boolean literals
    "true": TokenType.BOOLEAN,
    "false": TokenType.BOOLEAN,
}

_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.COMMA: "','",
    TokenType.MINUS: "'-'",
    TokenType.ASSIGN: "'='",
    TokenType.ISZERO: "'iszero'",
    TokenType.IF: "'if'",
    TokenType.THEN: "'then'",
    TokenType.ELSE: "'else'",
    TokenType.LET: "'let'",
    TokenType.IN: "'in'",
    TokenType.IDENTIFIER: "identifier",
    TokenType.INTEGER: "integer literal",
    TokenType.BOOLEAN: "boolean literal",
}


def describe_token_type(token_type: TokenType) -> str:
    """Human-readable name of a token type for error messages."""
    return _DESCRIPTIONS[token_type]


def describe_token(token: Token) -> str:
    """Human-readable form of a concrete token, preferring its source text."""
    if token.lexeme:
        return f"'{token.lexeme}'"
    if token.type in (TokenType.IDENTIFIER, TokenType.INTEGER):
        return f"'{token.value}'"
    if token.type == TokenType.BOOLEAN:
        return "'true'" if token.value else "'false'"
    return describe_token_type(token.type)


def is_keyword(word: str) -> bool:
    """Check if a word is reserved (keyword or boolean literal)."""
    return word in KEYWORDS
