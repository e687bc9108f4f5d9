"""
Tests for the Let-language command line interface.
"""

import io

import pytest

from letlang.__main__ import main
from letlang.config import LETLANG_BINDINGS, clear_cache


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's own binding files out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(LETLANG_BINDINGS, raising=False)
    clear_cache()
    yield
    clear_cache()


class TestTokensCommand:
    """Test 'tokens'."""

    def test_expression(self, capsys):
        assert main(["tokens", "--expr=-(24, +31)"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines() == [
            "MINUS", "LPAREN", "INTEGER(24)", "COMMA", "INTEGER(31)", "RPAREN",
        ]

    def test_lex_error(self, capsys):
        assert main(["tokens", "--expr=12abc"]) == 1
        err = capsys.readouterr().err
        assert "E003" in err
        assert "1:3" in err


class TestParseCommand:
    """Test 'parse'."""

    def test_prints_expression(self, capsys):
        assert main(["parse", "--expr=let x = 1 in minus(x, 2)"]) == 0
        assert capsys.readouterr().out.strip() == "let x = 1 in -(x, 2)"

    def test_tree(self, capsys):
        assert main(["parse", "--tree", "--expr=iszero(0)"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "IsZeroExp"
        assert "ConstExp" in out

    def test_parse_error(self, capsys):
        assert main(["parse", "--expr=let x = 21 in minus)"]) == 1
        err = capsys.readouterr().err
        assert "E101" in err
        assert "expected '('" in err


class TestRunCommand:
    """Test 'run'."""

    def test_value(self, capsys):
        assert main(["run", "--expr=let x = 7 in -(x, 2)"]) == 0
        assert capsys.readouterr().out.strip() == "5"

    def test_boolean_value(self, capsys):
        assert main(["run", "--expr=iszero(0)"]) == 0
        assert capsys.readouterr().out.strip() == "true"

    def test_bind(self, capsys):
        code = main([
            "run", "--expr=if iszero(-(x, 11)) then -(y, 2) else -(y, 4)",
            "-b", "x=33", "-b", "y=22",
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "18"

    def test_show_env(self, capsys):
        code = main(["run", "--expr=x", "-b", "y=22", "-b", "x=33", "--show-env"])
        assert code == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["env: [x, 33 [y, 22 []]]", "33"]

    def test_bindings_file(self, tmp_path, capsys):
        path = tmp_path / "vars.yaml"
        path.write_text('schema_version: "1.0"\nbindings:\n  x: 11\n  y: 22\n')
        code = main([
            "run", "--expr=if iszero(-(x, 11)) then -(y, 2) else -(y, 4)",
            "--bindings", str(path),
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "20"

    def test_bind_overrides_file(self, tmp_path, capsys):
        path = tmp_path / "vars.yaml"
        path.write_text("bindings:\n  x: 1\n")
        assert main(["run", "--expr=x", "--bindings", str(path), "-b", "x=2"]) == 0
        assert capsys.readouterr().out.strip() == "2"

    def test_default_bindings(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "env.yaml"
        path.write_text("bindings:\n  x: 3\n")
        monkeypatch.setenv(LETLANG_BINDINGS, str(path))
        clear_cache()
        assert main(["run", "--expr=x"]) == 0
        assert capsys.readouterr().out.strip() == "3"

        assert main(["run", "--expr=x", "--no-default-bindings"]) == 1
        assert "evaluation failed" in capsys.readouterr().err

    def test_evaluation_failure(self, capsys):
        assert main(["run", "--expr=-(1, z)"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: evaluation failed" in captured.err

    def test_bad_binding(self, capsys):
        assert main(["run", "--expr=x", "-b", "x"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_file(self, tmp_path, capsys):
        path = tmp_path / "prog.let"
        path.write_text("let x = 7\n in -(x, 8)\n")
        assert main(["run", str(path)]) == 0
        assert capsys.readouterr().out.strip() == "-1"

    def test_error_names_file(self, tmp_path, capsys):
        path = tmp_path / "prog.let"
        path.write_text("let x = 7\n in $\n")
        assert main(["run", str(path)]) == 1
        err = capsys.readouterr().err
        assert f"{path}:2:5" in err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "nope.let")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("-(10, 3)"))
        assert main(["run", "-"]) == 0
        assert capsys.readouterr().out.strip() == "7"

    def test_no_program(self, capsys):
        assert main(["run"]) == 1
        assert "no program given" in capsys.readouterr().err


class TestDemoCommand:
    """Test 'demo'."""

    def test_demo(self, capsys):
        assert main(["demo"]) == 0
        out = capsys.readouterr().out
        assert "milestone = -5" in out
        assert "if_value = 18  env: [x, 33 [y, 22 []]]" in out
        assert "Syntax error:" in out
        assert "e6: let x = 64 in myVar  (LetExp)" in out


class TestArguments:
    """Test argument handling."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestSourceInput:
    """Test unreadable and oversized programs."""

    def test_invalid_utf8_file(self, tmp_path, capsys):
        path = tmp_path / "prog.let"
        path.write_bytes(b"let x = 1 in \xff")
        assert main(["run", str(path)]) == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "not valid UTF-8" in err

    def test_deep_nesting_within_limit(self, capsys):
        source = "-(" * 199 + "1" + ", 1)" * 199
        assert main(["run", f"--expr={source}"]) == 0
        assert capsys.readouterr().out.strip() == "-198"

    def test_nesting_too_deep(self, capsys):
        """Very deep programs are reported as a diagnostic, not a crash."""
        source = "-(" * 600 + "1" + ", 1)" * 600
        assert main(["run", f"--expr={source}"]) == 1
        assert "E105" in capsys.readouterr().err
