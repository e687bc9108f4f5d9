"""
Let-language: a small expression language with lexically scoped ``let``.

This module provides:
- Lexer: Tokenizes source code
- Parser: Builds an AST from tokens
- Interpreter: Evaluates an AST under an environment
- Environment: Persistent lexical bindings

Usage:
    from letlang import tokenize, parse, evaluate, new_empty, extend, int_val

    tokens = tokenize("if iszero(-(x, 11)) then -(y, 2) else -(y, 4)")
    expr = parse(tokens)
    env = extend(extend(new_empty(), "y", int_val(22)), "x", int_val(33))
    value = evaluate(expr, env)     # Value(18, INTEGER)

    # Or in one call
    value = run("let x = 7 in -(x, 2)")

Evaluation returns None when a program has no value (unbound variable,
iszero applied to a boolean).
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    I32_MIN,
    I32_MAX,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    # Expressions
    Expression,
    ConstExp,
    Boolean,
    DiffExp,
    IsZeroExp,
    IfExp,
    VarExp,
    LetExp,
    # Helpers
    format_ast,
    print_ast,
)

from .errors import (
    LetLangError,
    LexError,
    ParseError,
    ConfigError,
    Diagnostic,
    ErrorSeverity,
)

from .runtime import (
    # Interpreter
    Interpreter,
    evaluate,
    run,
    # Values
    Value,
    ValueType,
    int_val,
    bool_val,
    # Environment
    Environment,
    new_empty,
    extend,
    lookup,
    is_empty,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    'I32_MIN',
    'I32_MAX',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'parse',

    # AST nodes
    'AstNode',
    'AstVisitor',
    'Expression',
    'ConstExp',
    'Boolean',
    'DiffExp',
    'IsZeroExp',
    'IfExp',
    'VarExp',
    'LetExp',
    'format_ast',
    'print_ast',

    # Errors
    'LetLangError',
    'LexError',
    'ParseError',
    'ConfigError',
    'Diagnostic',
    'ErrorSeverity',

    # Runtime
    'Interpreter',
    'evaluate',
    'run',
    'Value',
    'ValueType',
    'int_val',
    'bool_val',
    'Environment',
    'new_empty',
    'extend',
    'lookup',
    'is_empty',
]
