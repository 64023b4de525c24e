"""
constparser expression language.

Tokenizer, precedence-climbing builder, evaluator and variable environment
for ``name = expression ;`` statements.

Usage:
    from constparser.core.expression_lang import VariableEnvironment, evaluate, parse_expr

    expr = parse_expr("2 + 3 * x")
    result = evaluate(expr, VariableEnvironment({"x": 4}))
    # result == 14.0
"""

from constparser.core.expression_lang.evaluator import evaluate
from constparser.core.expression_lang.parser import ExpressionBuilder, parse_expr, precedence
from constparser.core.expression_lang.tokenizer import (
    Token,
    TokenKind,
    Tokenizer,
    to_number,
    tokenize,
)
from constparser.core.expression_lang.variables import VariableEnvironment

__all__ = [
    "ExpressionBuilder",
    "Token",
    "TokenKind",
    "Tokenizer",
    "VariableEnvironment",
    "evaluate",
    "parse_expr",
    "precedence",
    "to_number",
    "tokenize",
]
