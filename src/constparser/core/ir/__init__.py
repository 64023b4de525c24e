"""
Intermediate representation for constparser expressions.

The expression tree is the only IR: the parser produces it and the
evaluator consumes it.
"""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Expr",
    "Literal",
    "UnaryExpr",
    "UnaryOp",
    "VariableRef",
]
