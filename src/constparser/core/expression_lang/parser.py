"""
Precedence-climbing expression builder for constparser.

Grammar:
    expr    → unary (binop unary)*
    unary   → ("+" | "-") unary | primary
    primary → NUMBER | IDENT

Precedence (higher binds tighter, all left-associative):
    2: "*" "/"
    1: "+" "-"
    0: everything else, which ends the expression

The builder never aborts on bad input. Problems are reported to the
diagnostics collector. A missing operand stands in as 0, stray tokens are
dropped, and parsing carries on until ";" or end of input.
"""

from __future__ import annotations

from typing import TextIO

from constparser.core.errors import Diagnostics, DiagnosticKind
from constparser.core.expression_lang.tokenizer import (
    INVALID_NUMBER,
    Token,
    TokenKind,
    Tokenizer,
    to_number,
)
from constparser.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    Literal,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

_PRECEDENCE: dict[TokenKind, int] = {
    TokenKind.STAR: 2,
    TokenKind.SLASH: 2,
    TokenKind.PLUS: 1,
    TokenKind.MINUS: 1,
}

_BINARY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}

_UNARY_OPS: dict[TokenKind, UnaryOp] = {
    TokenKind.PLUS: UnaryOp.POS,
    TokenKind.MINUS: UnaryOp.NEG,
}

_TERMINATORS = (TokenKind.SEMICOLON, TokenKind.EOF)


def precedence(kind: TokenKind) -> int:
    """Binding strength of a token used as a binary operator (0 = not an operator)."""
    return _PRECEDENCE.get(kind, 0)


class _EndOfInput(Exception):
    """Input ended where an operand was required."""


class ExpressionBuilder:
    """Builds expression trees from a tokenizer."""

    def __init__(self, tokenizer: Tokenizer, diagnostics: Diagnostics | None = None) -> None:
        self.tokenizer = tokenizer
        self.diagnostics = diagnostics if diagnostics is not None else tokenizer.diagnostics
        # Token already reported in operand position, dropped without a second report
        self._reported: Token | None = None

    # -- Grammar rules --

    def parse_expression(self) -> Expr:
        """Top level: one operand, then any operator tail.

        If the input ends where an operand is needed, the whole expression
        is replaced by the -1 sentinel.
        """
        try:
            lhs = self.parse_primary()
            if self.tokenizer.peek_token().kind == TokenKind.SEMICOLON:
                return lhs
            return self.parse_rhs(lhs, 0)
        except _EndOfInput:
            return Literal(value=INVALID_NUMBER)

    def parse_primary(self) -> Expr:
        """("+" | "-")* (NUMBER | IDENT)

        Any other leading token is reported and stands in as 0; it is left
        in place for ``parse_rhs`` to drop.
        """
        signs: list[UnaryOp] = []
        while (tok := self.tokenizer.peek_token()).kind in _UNARY_OPS:
            self.tokenizer.consume()
            signs.append(_UNARY_OPS[tok.kind])

        operand = self._parse_leaf(tok)
        for op in reversed(signs):
            operand = UnaryExpr(op=op, operand=operand)
        return operand

    def _parse_leaf(self, tok: Token) -> Expr:
        if tok.kind == TokenKind.NUMBER:
            self.tokenizer.consume()
            return Literal(value=to_number(tok.value, self.diagnostics, tok))

        if tok.kind == TokenKind.IDENT:
            self.tokenizer.consume()
            return VariableRef(name=tok.value)

        if tok.kind == TokenKind.EOF:
            self._report(
                DiagnosticKind.END_OF_INPUT,
                "Unexpected end of input, expected a number or variable",
                tok,
            )
            raise _EndOfInput()

        if tok.kind == TokenKind.SEMICOLON:
            self._report(DiagnosticKind.SYNTAX, "Expected a number or variable before ';'", tok)
        elif tok.kind == TokenKind.EQUALS:
            self._report(
                DiagnosticKind.UNEXPECTED_ASSIGNMENT,
                "Unexpected '=' where a number or variable was expected, using 0",
                tok,
            )
        else:
            self._report(
                DiagnosticKind.SYNTAX,
                f"Unexpected {tok.describe()} where a number or variable was expected, using 0",
                tok,
            )
        self._reported = tok
        return Literal(value=0.0)

    def parse_rhs(self, lhs: Expr, min_precedence: int) -> Expr:
        """Extend ``lhs`` with every operator binding at least ``min_precedence``."""
        while True:
            tok = self.tokenizer.peek_token()
            if tok.kind in _TERMINATORS:
                return lhs

            prec = precedence(tok.kind)
            if prec == 0:
                # Nested levels leave stray tokens to the outermost one
                if min_precedence > 0:
                    return lhs
                self._discard(tok, "where an operator was expected")
                continue
            if prec < min_precedence:
                return lhs

            self.tokenizer.consume()
            rhs = self.parse_primary()

            # A tighter operator after rhs takes rhs as its left operand
            if prec < precedence(self.tokenizer.peek_token().kind):
                rhs = self.parse_rhs(rhs, prec + 1)

            lhs = BinaryExpr(op=_BINARY_OPS[tok.kind], left=lhs, right=rhs)

    # -- Helpers --

    def _discard(self, tok: Token, where: str) -> None:
        if tok is self._reported:
            self.tokenizer.consume()
            return
        if tok.kind == TokenKind.EQUALS:
            self._report(
                DiagnosticKind.UNEXPECTED_ASSIGNMENT,
                f"Unexpected '=' {where}, ignoring it",
                tok,
            )
        else:
            self._report(DiagnosticKind.SYNTAX, f"Unexpected {tok.describe()} {where}, ignoring it", tok)
        self.tokenizer.consume()

    def _report(self, kind: DiagnosticKind, message: str, tok: Token) -> None:
        self.diagnostics.report(kind, message, tok.line, tok.column)


def parse_expr(source: str | TextIO, diagnostics: Diagnostics | None = None) -> Expr:
    """Parse a single expression.

    Args:
        source: Expression text (e.g., "a + b * 2"); a trailing ";" is allowed.
        diagnostics: Collector for reported problems.

    Returns:
        Parsed expression tree. Problems in the input are reported to
        ``diagnostics`` rather than raised.
    """
    tokenizer = Tokenizer(source, diagnostics)
    return ExpressionBuilder(tokenizer).parse_expression()
