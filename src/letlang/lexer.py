"""
Lexer for the Let-language.

Converts source text into a list of tokens for the parser.
Supports:
- Punctuation: ( ) , - =
- Keywords: iszero minus if then else let in
- Boolean literals: true false
- Signed 32-bit integer literals: 42, -7, +31
- Identifiers made of ASCII letters

An identifier, keyword or literal must be followed by whitespace, '(', ')',
',' or the end of input, so ``12abc`` or ``x=1`` never scan silently as two
tokens.
"""

import logging
import string
from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS, I32_MIN, I32_MAX,
)
from .errors import (
    LexError,
    error_unexpected_character,
    error_isolated_plus,
    error_missing_separator,
    error_invalid_integer_literal,
    source_lines,
)

logger = logging.getLogger(__name__)

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
SEPARATORS = frozenset("(),")

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
    '=': TokenType.ASSIGN,
}


class Lexer:
    """
    Tokenizer for the Let-language.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = source_lines(self.source)
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _char_span(self) -> SourceSpan:
        """Span covering just the current character."""
        start = self._location()
        end = SourceLocation(self.line, self.column + 1, self.pos + 1, self.filename)
        return SourceSpan(start, end)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self, offset: int = 0) -> bool:
        """Check if position + offset is past the end of source."""
        return self.pos + offset >= len(self.source)

    def _is_digit_at(self, offset: int) -> bool:
        return not self._is_at_end(offset) and self._peek(offset) in DIGITS

    def _skip_whitespace(self) -> None:
        """Skip whitespace, including newlines."""
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _make_token(self, token_type: TokenType, value, start: SourceLocation) -> Token:
        """Create a token spanning from start to the current position."""
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _expect_separator(self, token: Token) -> None:
        """Require whitespace, '(', ')', ',' or end of input after token."""
        if self._is_at_end():
            return
        ch = self._peek()
        if ch.isspace() or ch in SEPARATORS:
            return
        raise error_missing_separator(
            token.lexeme, ch, self._char_span(), self.get_source_line(self.line)
        )

    def _scan_word(self) -> Token:
        """Scan an identifier, keyword or boolean literal."""
        start = self._location()

        while not self._is_at_end() and self._peek() in LETTERS:
            self._advance()

        lexeme = self.source[start.offset:self.pos]

        if lexeme in KEYWORDS:
            token_type = KEYWORDS[lexeme]
            if token_type == TokenType.BOOLEAN:
                return self._make_token(token_type, lexeme == "true", start)
            return self._make_token(token_type, None, start)

        return self._make_token(TokenType.IDENTIFIER, lexeme, start)

    def _scan_integer(self) -> Token:
        """Scan an optionally signed decimal integer literal."""
        start = self._location()
        sign = 1
        if self._peek() in '+-':
            sign = -1 if self._advance() == '-' else 1

        digits_start = self.pos
        while not self._is_at_end() and self._peek() in DIGITS:
            self._advance()

        value = sign * int(self.source[digits_start:self.pos])
        if not I32_MIN <= value <= I32_MAX:
            lexeme = self.source[start.offset:self.pos]
            raise error_invalid_integer_literal(
                lexeme, self._span(start), self.get_source_line(start.line)
            )
        return self._make_token(TokenType.INTEGER, value, start)

    def _scan_token(self) -> Optional[Token]:
        """Scan the next token, or return None at end of input."""
        self._skip_whitespace()
        if self._is_at_end():
            return None

        ch = self._peek()

        if ch in SINGLE_CHAR_TOKENS:
            start = self._location()
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[ch], None, start)

        # Identifiers, keywords and booleans
        if ch in LETTERS:
            token = self._scan_word()
            self._expect_separator(token)
            return token

        # '-' is a sign only when a digit follows immediately
        if ch == '-':
            if self._is_digit_at(1):
                token = self._scan_integer()
                self._expect_separator(token)
                return token
            start = self._location()
            self._advance()
            return self._make_token(TokenType.MINUS, None, start)

        # There is no '+' operator, only a sign
        if ch == '+':
            if self._is_digit_at(1):
                token = self._scan_integer()
                self._expect_separator(token)
                return token
            raise error_isolated_plus(self._char_span(), self.get_source_line(self.line))

        if ch in DIGITS:
            token = self._scan_integer()
            self._expect_separator(token)
            return token

        raise error_unexpected_character(
            ch, self._char_span(), self.get_source_line(self.line)
        )

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = list(self)
        logger.debug("scanned %d token(s) from %s", len(tokens), self.filename or "<input>")
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self._scan_token()
            if token is None:
                break
            yield token


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens (no end-of-input marker)

    Raises:
        LexError: If tokenization fails
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
