"""
Expression evaluator for constparser.

Walks an expression tree and computes its value, resolving variable
references against a VariableEnvironment at the moment of evaluation.
The tree and the environment are only read, never modified.
"""

from __future__ import annotations

import math

from constparser.core.errors import Diagnostics, DiagnosticKind, ExpressionEvalError
from constparser.core.expression_lang.variables import VariableEnvironment
from constparser.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

UNDEFINED_VARIABLE_VALUE = 0.0


def evaluate(
    expr: Expr,
    variables: VariableEnvironment,
    diagnostics: Diagnostics | None = None,
) -> float:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression tree.
        variables: Environment used to resolve variable references.
        diagnostics: Collector for undefined-variable reports.

    Returns:
        The computed value. Undefined variables count as 0.0 and division
        by zero follows IEEE rules (inf, -inf or nan).

    Raises:
        ExpressionEvalError: If ``expr`` contains something that is not a node.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    return _interpret(expr, variables, diagnostics)


def _interpret(expr: Expr, variables: VariableEnvironment, diagnostics: Diagnostics) -> float:
    """Post-order walk with an explicit stack, so tree depth is not bounded by recursion."""
    # (node, children_done) pairs; operand values pile up on ``values``
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    values: list[float] = []

    while pending:
        node, children_done = pending.pop()

        if isinstance(node, Literal):
            values.append(node.value)

        elif isinstance(node, VariableRef):
            values.append(_lookup(node, variables, diagnostics))

        elif isinstance(node, UnaryExpr):
            if children_done:
                values.append(_apply_unary(node.op, values.pop()))
            else:
                pending.append((node, True))
                pending.append((node.operand, False))

        elif isinstance(node, BinaryExpr):
            if children_done:
                right = values.pop()
                left = values.pop()
                values.append(_apply_binary(node.op, left, right))
            else:
                # Left is popped first, so diagnostics come out in source order
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))

        else:
            raise ExpressionEvalError(f"Unknown expression type: {type(node).__name__}")

    return values.pop()


def _lookup(expr: VariableRef, variables: VariableEnvironment, diagnostics: Diagnostics) -> float:
    value = variables.get(expr.name)
    if value is None:
        diagnostics.report(DiagnosticKind.UNDEFINED_VARIABLE, f"Invalid variable {expr.name}")
        return UNDEFINED_VARIABLE_VALUE
    return value


def _apply_unary(op: UnaryOp, operand: float) -> float:
    if op == UnaryOp.NEG:
        return -operand
    return operand


def _apply_binary(op: BinaryOp, left: float, right: float) -> float:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return _divide(left, right)

    raise ExpressionEvalError(f"Unknown binary op: {op}")


def _divide(left: float, right: float) -> float:
    """IEEE 754 division; Python raises where the hardware would not."""
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    # Sign of zero matters: 1 / -0.0 is -inf
    return math.copysign(math.inf, left) * math.copysign(1.0, right)
