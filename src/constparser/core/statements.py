"""
Statement driver for constparser.

Processes a stream of ``name = expression ;`` statements: each expression
is built into a tree, evaluated against the variable environment, and the
result is stored under ``name``.

Usage:
    from constparser.core.statements import run_source

    results = run_source("a = 5 ; b = a + 1 ;")
    # [StatementResult(name='a', value=5.0, ...), StatementResult(name='b', value=6.0, ...)]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TextIO

from constparser.core.errors import (
    Diagnostic,
    Diagnostics,
    DiagnosticKind,
    ErrorContext,
    ExpressionParseError,
)
from constparser.core.expression_lang.evaluator import evaluate
from constparser.core.expression_lang.parser import ExpressionBuilder
from constparser.core.expression_lang.tokenizer import Token, TokenKind, Tokenizer
from constparser.core.expression_lang.variables import VariableEnvironment
from constparser.core.ir.expressions import Expr

logger = logging.getLogger(__name__)


@dataclass
class StatementResult:
    """Outcome of one committed assignment."""

    name: str
    value: float
    expr: Expr
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name} = {self.value:.15g}"


class StatementRunner:
    """Drives the tokenizer and expression builder one statement at a time."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        variables: VariableEnvironment | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.tokenizer = tokenizer
        self.variables = variables if variables is not None else VariableEnvironment()
        self.diagnostics = diagnostics if diagnostics is not None else tokenizer.diagnostics
        self.builder = ExpressionBuilder(tokenizer, self.diagnostics)

    def run(self) -> Iterator[StatementResult]:
        """Yield a result per committed statement until end of input."""
        while True:
            mark = self.diagnostics.mark()

            name_tok = self.tokenizer.next_token()
            if name_tok.kind == TokenKind.EOF:
                return
            if name_tok.kind != TokenKind.IDENT:
                self._expected("a variable name", name_tok)
                self._skip_statement(name_tok)
                continue

            eq_tok = self.tokenizer.next_token()
            if eq_tok.kind == TokenKind.EOF:
                self.diagnostics.report(
                    DiagnosticKind.END_OF_INPUT,
                    f"Unexpected end of input after {name_tok.value!r}, expected '='",
                    eq_tok.line,
                    eq_tok.column,
                )
                return
            if eq_tok.kind != TokenKind.EQUALS:
                self._expected("'='", eq_tok)
                self._skip_statement(eq_tok)
                continue

            expr = self.builder.parse_expression()

            end_tok = self.tokenizer.next_token()
            if end_tok.kind not in (TokenKind.SEMICOLON, TokenKind.EOF):
                raise ExpressionParseError(
                    f"Expression ended before {end_tok.describe()}",
                    ErrorContext(end_tok.line, end_tok.column),
                )

            value = evaluate(expr, self.variables, self.diagnostics)
            self.variables.set(name_tok.value, value)
            logger.debug("%s -> %r", name_tok.value, value)
            yield StatementResult(name_tok.value, value, expr, self.diagnostics.since(mark))

    def _expected(self, what: str, tok: Token) -> None:
        self.diagnostics.report(
            DiagnosticKind.SYNTAX,
            f"Expected {what}, got {tok.describe()}",
            tok.line,
            tok.column,
        )

    def _skip_statement(self, tok: Token) -> None:
        """Drop tokens through the next ';' (or up to end of input)."""
        while tok.kind not in (TokenKind.SEMICOLON, TokenKind.EOF):
            tok = self.tokenizer.next_token()


def run_source(
    source: str | TextIO,
    variables: VariableEnvironment | None = None,
    diagnostics: Diagnostics | None = None,
    on_token: Callable[[Token], None] | None = None,
) -> list[StatementResult]:
    """Run every statement in ``source`` and return the committed results."""
    tokenizer = Tokenizer(source, diagnostics, on_token=on_token)
    return list(StatementRunner(tokenizer, variables).run())
