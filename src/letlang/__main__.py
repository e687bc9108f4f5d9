#!/usr/bin/env python3
"""
CLI for the Let-language.

Usage:
    python -m letlang tokens (FILE | -e EXPR)
    python -m letlang parse (FILE | -e EXPR) [--tree]
    python -m letlang run (FILE | -e EXPR) [--bind NAME=VALUE ...] [--bindings FILE ...]
    python -m letlang demo

FILE may be '-' to read from standard input.

Examples:
    # Show the tokens of a program
    python -m letlang tokens -e "-(24, +31)"

    # Evaluate with variables bound on the command line
    python -m letlang run -e "if iszero(-(x, 11)) then -(y, 2) else -(y, 4)" \
        --bind x=33 --bind y=22

    # Evaluate with bindings from a YAML file
    python -m letlang run program.let --bindings vars.yaml --show-env
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import LetLangError, ConfigError


class SourceError(Exception):
    """The program text could not be read."""
    pass


def read_source(args) -> Tuple[str, str]:
    """Return (source, filename) from -e EXPR, FILE or stdin."""
    if args.expr is not None:
        if args.file is not None:
            raise SourceError("give either FILE or -e EXPR, not both")
        return args.expr, "<expr>"
    if args.file is None:
        raise SourceError("no program given (FILE or -e EXPR)")
    if args.file == '-':
        try:
            return sys.stdin.read(), "<stdin>"
        except UnicodeDecodeError as e:
            raise SourceError(f"<stdin> could not be decoded: {e}") from e

    source_path = Path(args.file)
    if not source_path.exists():
        raise SourceError(f"File not found: {source_path}")
    try:
        return source_path.read_text(encoding='utf-8'), str(source_path)
    except UnicodeDecodeError as e:
        raise SourceError(f"{source_path} is not valid UTF-8: {e}") from e


def cmd_tokens(args) -> int:
    """Print the tokens of a program, one per line."""
    from . import tokenize

    source, filename = read_source(args)
    for token in tokenize(source, filename):
        print(token)
    return 0


def cmd_parse(args) -> int:
    """Parse a program and print it back, or its tree with --tree."""
    from . import tokenize, parse, format_ast

    source, filename = read_source(args)
    expr = parse(tokenize(source, filename), source=source)
    if args.tree:
        print(format_ast(expr))
    else:
        print(expr)
    return 0


def cmd_run(args) -> int:
    """Evaluate a program and print its value."""
    from . import run
    from .config import initial_environment, parse_binding

    source, filename = read_source(args)

    overrides = {}
    for binding in args.bind or []:
        name, value = parse_binding(binding)
        overrides[name] = value

    env = initial_environment(
        paths=[Path(p) for p in args.bindings or []],
        overrides=overrides,
        use_defaults=not args.no_default_bindings,
    )
    if args.show_env:
        print(f"env: {env}")

    value = run(source, env, filename)
    if value is None:
        print("error: evaluation failed", file=sys.stderr)
        return 1

    print(value)
    return 0


# Programs replayed by the demo command
DEMO_TOKENIZE = [
    "-(24, +31)",
    "if true then 1 else -1",
    "let temp = 3 in -(temp, 103)",
    "if iszero(TextId) then let x = -571 in false",
]

DEMO_MILESTONE = """let x = 7
 in let y = 2
    in let y = let x = -(x, 1)
               in -(x, y)
       in -(-(x, 8), y)"""

DEMO_IF = """if iszero(-(x, 11))
then -(y, 2)
else -(y, 4)"""

DEMO_UNGRAMMATICAL = "let x = 21 in minus)"


def cmd_demo(args) -> int:
    """Replay the demonstration programs."""
    from . import (
        tokenize, parse, evaluate, format_ast,
        ConstExp, DiffExp, IsZeroExp, IfExp, VarExp, LetExp,
        new_empty, extend, int_val,
    )

    for text in DEMO_TOKENIZE:
        print(f"{text}  =>  [{', '.join(str(t) for t in tokenize(text))}]")

    e1 = ConstExp(64)
    e2 = DiffExp(e1, e1)
    e3 = IsZeroExp(e1)
    e4 = IfExp(e3, e1, e2)
    e5 = VarExp("myVar")
    e6 = LetExp("x", e1, e5)
    print()
    for label, expr in [("e1", e1), ("e2", e2), ("e3", e3), ("e4", e4), ("e5", e5), ("e6", e6)]:
        print(f"{label}: {expr}  ({type(expr).__name__})")

    print("\nmilestone let:")
    milestone = parse(tokenize(DEMO_MILESTONE), source=DEMO_MILESTONE)
    print(milestone)
    print(format_ast(milestone))
    print(f"milestone = {evaluate(milestone, new_empty())}")

    print("\nif under x = 33, y = 22:")
    env = extend(extend(new_empty(), "y", int_val(22)), "x", int_val(33))
    if_tokens = tokenize(DEMO_IF)
    print(f"tokens: [{', '.join(str(t) for t in if_tokens)}]")
    if_expr = parse(if_tokens, source=DEMO_IF)
    print(if_expr)
    print(f"if_value = {evaluate(if_expr, env)}  env: {env}")

    print("\nungrammatical input:")
    try:
        print(parse(tokenize(DEMO_UNGRAMMATICAL), source=DEMO_UNGRAMMATICAL))
    except LetLangError as e:
        print(f"Syntax error: {e}")

    return 0


def add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('file', nargs='?', help="Source file ('-' for stdin)")
    parser.add_argument('-e', '--expr', metavar='EXPR', help='Program text')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m letlang',
        description='Let-language lexer, parser and evaluator',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging (overrides LOGLEVEL)')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Print the tokens of a program')
    add_source_arguments(tokens_parser)

    # parse command
    parse_parser = subparsers.add_parser('parse', help='Parse a program and print it')
    add_source_arguments(parse_parser)
    parse_parser.add_argument('--tree', action='store_true',
                              help='Print the syntax tree instead of the program text')

    # run command
    run_parser = subparsers.add_parser('run', help='Evaluate a program')
    add_source_arguments(run_parser)
    run_parser.add_argument('-b', '--bind', action='append', metavar='NAME=VALUE',
                            help='Initial binding (can be repeated)')
    run_parser.add_argument('--bindings', action='append', metavar='FILE',
                            help='YAML binding file (can be repeated)')
    run_parser.add_argument('--no-default-bindings', action='store_true',
                            help='Ignore LETLANG_BINDINGS and the user config file')
    run_parser.add_argument('--show-env', action='store_true',
                            help='Print the initial environment')

    # demo command
    subparsers.add_parser('demo', help='Run the demonstration programs')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from .config import get_log_level

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_log_level(),
        format='%(message)s',
        stream=sys.stderr,
    )

    commands = {
        'tokens': cmd_tokens,
        'parse': cmd_parse,
        'run': cmd_run,
        'demo': cmd_demo,
    }

    try:
        return commands[args.action](args)
    except LetLangError as e:
        print(e, file=sys.stderr)
        return 1
    except (SourceError, ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
