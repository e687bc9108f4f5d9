"""
Let-language exceptions and error handling.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors

Evaluation failures are not exceptions: the evaluator returns ``None``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


def source_lines(source: str) -> List[str]:
    """Split source into lines at newline characters only, as the lexer counts them."""
    return [line.rstrip("\r") for line in source.split("\n")]


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        if self.span is not None:
            parts.append(f"{self.span.start}: {self.severity.value}[{self.code}]: {self.message}")
        else:
            parts.append(f"{self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append(f"  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return result


class LetLangError(Exception):
    """Base exception for Let-language errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexError(LetLangError):
    """Error during lexical analysis (E0xx). Always carries a position."""

    @property
    def line(self) -> int:
        return self.diagnostic.span.start.line

    @property
    def column(self) -> int:
        return self.diagnostic.span.start.column


class ParseError(LetLangError):
    """Error during parsing (E1xx)."""

    @property
    def span(self) -> Optional[SourceSpan]:
        return self.diagnostic.span


class ConfigError(ValueError):
    """Malformed binding file or NAME=VALUE argument."""
    pass


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message=f"unexpected character '{char}'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return LexError(diag)


def error_isolated_plus(span: SourceSpan, source_line: str = None) -> LexError:
    """E002: '+' not followed by a digit."""
    diag = Diagnostic(
        code="E002",
        message="isolated '+'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["'+' is only allowed as the sign of an integer literal, e.g. +31"],
    )
    return LexError(diag)


def error_missing_separator(previous: str, char: str, span: SourceSpan,
                            source_line: str = None) -> LexError:
    """E003: Token glued to the following character."""
    diag = Diagnostic(
        code="E003",
        message=f"unexpected character '{char}' after '{previous}', expected whitespace, '(', ')' or ','",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return LexError(diag)


# The span starts at the first character of the literal, sign included.
def error_invalid_integer_literal(text: str, span: SourceSpan, source_line: str = None) -> LexError:
    """E004: Integer literal outside the signed 32-bit range."""
    diag = Diagnostic(
        code="E004",
        message=f"invalid integer literal '{text}'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["integer literals must lie between -2147483648 and 2147483647"],
    )
    return LexError(diag)


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: Optional[SourceSpan] = None,
                           source_line: str = None) -> ParseError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected {expected}, found {found}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParseError(diag)


def error_unexpected_eof(expected: str) -> ParseError:
    """E102: Unexpected end of input."""
    diag = Diagnostic(
        code="E102",
        message=f"unexpected end of input, expected {expected}",
        severity=ErrorSeverity.ERROR,
    )
    return ParseError(diag)


def error_extra_input(found: str, span: Optional[SourceSpan] = None,
                      source_line: str = None) -> ParseError:
    """E103: Tokens left over after a complete expression."""
    diag = Diagnostic(
        code="E103",
        message=f"extra input after a complete expression: {found}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParseError(diag)


def error_expected_identifier(found: str, span: Optional[SourceSpan] = None,
                              source_line: str = None) -> ParseError:
    """E104: Identifier expected (let binding name)."""
    diag = Diagnostic(
        code="E104",
        message=f"expected identifier, found {found}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["keywords and literals cannot be used as variable names"],
    )
    return ParseError(diag)


def error_nesting_too_deep(limit: int, span: Optional[SourceSpan] = None,
                           source_line: str = None) -> ParseError:
    """E105: Expressions nested deeper than the parser allows."""
    diag = Diagnostic(
        code="E105",
        message=f"expression nested too deeply (limit {limit})",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return ParseError(diag)
