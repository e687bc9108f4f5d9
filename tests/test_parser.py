"""
Unit tests for the Let-language parser.
"""

import pytest
from letlang import (
    tokenize, parse, Parser, Token, TokenType, ParseError,
    ConstExp, Boolean, DiffExp, IsZeroExp, IfExp, VarExp, LetExp, format_ast, print_ast,
)
from letlang.parser import MAX_NESTING_DEPTH


def parse_source(source):
    return parse(tokenize(source), source=source)


MILESTONE = """let x = 7
 in let y = 2
    in let y = let x = -(x, 1)
               in -(x, y)
       in -(-(x, 8), y)"""


class TestExpressions:
    """Test each kind of expression."""

    def test_integer(self):
        assert parse_source("42") == ConstExp(42)

    def test_negative_integer(self):
        assert parse_source("-7") == ConstExp(-7)

    def test_boolean(self):
        assert parse_source("true") == Boolean(True)
        assert parse_source("false") == Boolean(False)

    def test_variable(self):
        assert parse_source("myVar") == VarExp("myVar")

    def test_difference(self):
        assert parse_source("-(24, +31)") == DiffExp(ConstExp(24), ConstExp(31))

    def test_minus_keyword(self):
        """'minus(...)' parses exactly like '-(...)'."""
        assert parse_source("minus(x, 1)") == parse_source("-(x, 1)")

    def test_iszero(self):
        assert parse_source("iszero(x)") == IsZeroExp(VarExp("x"))

    def test_if(self):
        assert parse_source("if true then 1 else -1") == IfExp(
            Boolean(True), ConstExp(1), ConstExp(-1)
        )

    def test_let(self):
        assert parse_source("let temp = 3 in -(temp, 103)") == LetExp(
            "temp", ConstExp(3), DiffExp(VarExp("temp"), ConstExp(103))
        )

    def test_nested_let(self):
        """Let bodies extend as far right as possible."""
        expr = parse_source("let x = 1 in let y = 2 in -(x, y)")
        assert expr == LetExp(
            "x", ConstExp(1),
            LetExp("y", ConstExp(2), DiffExp(VarExp("x"), VarExp("y"))),
        )

    def test_milestone_program(self):
        expr = parse_source(MILESTONE)
        assert expr == LetExp(
            "x", ConstExp(7),
            LetExp(
                "y", ConstExp(2),
                LetExp(
                    "y",
                    LetExp(
                        "x", DiffExp(VarExp("x"), ConstExp(1)),
                        DiffExp(VarExp("x"), VarExp("y")),
                    ),
                    DiffExp(DiffExp(VarExp("x"), ConstExp(8)), VarExp("y")),
                ),
            ),
        )

    def test_hand_built_tokens(self):
        """The parser accepts tokens that did not come from the lexer."""
        tokens = [
            Token(TokenType.ISZERO),
            Token(TokenType.LPAREN),
            Token(TokenType.INTEGER, 0),
            Token(TokenType.RPAREN),
        ]
        assert parse(tokens) == IsZeroExp(ConstExp(0))


class TestRendering:
    """Test printing expressions back as source."""

    @pytest.mark.parametrize("source", [
        "-(24, 31)",
        "if iszero(-(x, 11)) then -(y, 2) else -(y, 4)",
        "let x = -5 in iszero(x)",
        "if false then true else let a = b in a",
    ])
    def test_print_then_parse(self, source):
        """Printing an expression gives text that parses to the same tree."""
        expr = parse_source(source)
        assert str(expr) == source
        assert parse_source(str(expr)) == expr

    @pytest.mark.parametrize("expr", [
        DiffExp(ConstExp(-5), ConstExp(-2147483648)),
        DiffExp(LetExp("a", ConstExp(1), VarExp("a")), LetExp("b", ConstExp(-2), VarExp("b"))),
        LetExp("x", ConstExp(-1), DiffExp(VarExp("x"), ConstExp(-1))),
        LetExp("x", LetExp("y", Boolean(False), VarExp("y")), IsZeroExp(VarExp("x"))),
        IfExp(LetExp("c", Boolean(True), VarExp("c")), ConstExp(1), ConstExp(2)),
        IfExp(
            IsZeroExp(DiffExp(ConstExp(2147483647), ConstExp(-7))),
            IfExp(Boolean(False), Boolean(True), VarExp("q")),
            LetExp("z", ConstExp(0), DiffExp(ConstExp(-3), LetExp("z", VarExp("z"), VarExp("z")))),
        ),
    ])
    def test_constructed_tree_round_trip(self, expr):
        """A tree built from constructors prints as text that parses back to it."""
        assert parse_source(str(expr)) == expr

    def test_print_ast(self, capsys):
        print_ast(IsZeroExp(Boolean(True)))
        assert capsys.readouterr().out.splitlines() == [
            "IsZeroExp",
            "  operand:",
            "    Boolean",
            "      value: True",
        ]

    def test_format_ast(self):
        text = format_ast(parse_source("-(x, 1)"))
        assert text.splitlines() == [
            "DiffExp",
            "  left:",
            "    VarExp",
            "      name: 'x'",
            "  right:",
            "    ConstExp",
            "      value: 1",
        ]


class TestParseErrors:
    """Test parser error reporting."""

    def test_ungrammatical_let(self):
        """'minus' must be followed by '('."""
        with pytest.raises(ParseError) as exc:
            parse_source("let x = 21 in minus)")
        assert exc.value.diagnostic.code == "E101"
        assert exc.value.message == "expected '(', found ')'"
        assert exc.value.span.start.column == 20

    def test_extra_input(self):
        with pytest.raises(ParseError) as exc:
            parse_source("1 2")
        assert exc.value.diagnostic.code == "E103"
        assert exc.value.span.start.column == 3

    def test_extra_input_hand_built_tokens(self):
        """Tokens without positions give errors without positions."""
        with pytest.raises(ParseError) as exc:
            parse([Token(TokenType.INTEGER, 1), Token(TokenType.INTEGER, 2)])
        assert exc.value.diagnostic.code == "E103"
        assert exc.value.span is None
        assert "'2'" in exc.value.message

    def test_empty_input(self):
        with pytest.raises(ParseError) as exc:
            parse([])
        assert exc.value.diagnostic.code == "E102"

    def test_missing_comma(self):
        with pytest.raises(ParseError) as exc:
            parse_source("-(1 2)")
        assert exc.value.diagnostic.code == "E101"
        assert exc.value.message == "expected ',', found '2'"

    def test_keyword_as_let_name(self):
        with pytest.raises(ParseError) as exc:
            parse_source("let in = 1 in 2")
        assert exc.value.diagnostic.code == "E104"

    def test_literal_as_let_name(self):
        with pytest.raises(ParseError) as exc:
            parse_source("let 5 = 1 in 2")
        assert exc.value.diagnostic.code == "E104"

    def test_let_without_body(self):
        with pytest.raises(ParseError) as exc:
            parse_source("let x = 1")
        assert exc.value.diagnostic.code == "E102"
        assert "'in'" in exc.value.message

    def test_unexpected_leading_token(self):
        with pytest.raises(ParseError) as exc:
            parse_source(")")
        assert exc.value.diagnostic.code == "E101"
        assert "expression" in exc.value.message

    def test_if_without_else(self):
        with pytest.raises(ParseError):
            parse_source("if true then 1")

    def test_formatted_message_has_source_line(self):
        with pytest.raises(ParseError) as exc:
            parse_source("let x = 21 in minus)")
        text = str(exc.value)
        assert "1:20" in text
        assert "let x = 21 in minus)" in text


class TestParserHelpers:
    """Test the token-level helpers used by each production."""

    def test_match_token(self):
        parser = Parser(tokenize("( x"))
        parser.match_token(Token(TokenType.LPAREN))
        assert parser.get_identifier_name() == "x"

    def test_match_token_mismatch(self):
        parser = Parser(tokenize(","))
        with pytest.raises(ParseError) as exc:
            parser.match_token(Token(TokenType.RPAREN))
        assert exc.value.message == "expected ')', found ','"

    def test_match_token_end_of_input(self):
        parser = Parser([])
        with pytest.raises(ParseError) as exc:
            parser.match_token(Token(TokenType.THEN))
        assert exc.value.diagnostic.code == "E102"

    def test_get_identifier_name_rejects_literal(self):
        parser = Parser(tokenize("true"))
        with pytest.raises(ParseError) as exc:
            parser.get_identifier_name()
        assert exc.value.diagnostic.code == "E104"


class TestNestingLimit:
    """Test the bound on expression depth."""

    def nested_diff(self, depth):
        return "-(" * depth + "1" + ", 1)" * depth

    def test_deepest_allowed(self):
        expr = parse_source(self.nested_diff(MAX_NESTING_DEPTH - 1))
        assert isinstance(expr, DiffExp)

    def test_one_level_too_deep(self):
        with pytest.raises(ParseError) as exc:
            parse_source(self.nested_diff(MAX_NESTING_DEPTH))
        assert exc.value.diagnostic.code == "E105"
        # Reported at the innermost literal
        assert exc.value.span.start.column == 2 * MAX_NESTING_DEPTH + 1

    def test_far_too_deep(self):
        with pytest.raises(ParseError) as exc:
            parse_source(self.nested_diff(3 * MAX_NESTING_DEPTH))
        assert exc.value.diagnostic.code == "E105"

    def test_nested_let_counts(self):
        source = "let x = 1 in " * MAX_NESTING_DEPTH + "x"
        with pytest.raises(ParseError) as exc:
            parse_source(source)
        assert exc.value.diagnostic.code == "E105"

    def test_depth_resets_between_siblings(self):
        """Only open sub-expressions count, not every expression seen."""
        half = self.nested_diff(MAX_NESTING_DEPTH // 2)
        expr = parse_source(f"-({half}, {half})")
        assert isinstance(expr.right, DiffExp)


class TestParseDiagnostics:
    """Test the machine-readable form of parse errors."""

    def test_to_json_with_position(self):
        with pytest.raises(ParseError) as exc:
            parse_source("1 2")
        data = exc.value.diagnostic.to_json()
        assert data["code"] == "E103"
        assert data["range"]["start"] == {"line": 1, "column": 3, "offset": 2}

    def test_to_json_end_of_input(self):
        """End-of-input errors have no range."""
        with pytest.raises(ParseError) as exc:
            parse_source("iszero(")
        data = exc.value.diagnostic.to_json()
        assert data["code"] == "E102"
        assert "range" not in data
        assert data["message"] == "unexpected end of input, expected expression"
