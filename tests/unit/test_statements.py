"""Tests for the statement driver."""

from __future__ import annotations

import io

import pytest

from constparser.core.errors import DiagnosticKind, Diagnostics, ExpressionParseError
from constparser.core.expression_lang.tokenizer import Token, TokenKind, Tokenizer
from constparser.core.expression_lang.variables import VariableEnvironment
from constparser.core.ir.expressions import Literal
from constparser.core.statements import StatementResult, StatementRunner, run_source


def _values(results) -> list[tuple[str, float]]:
    return [(r.name, r.value) for r in results]


class TestAssignments:
    def test_single_statement(self) -> None:
        results = run_source("a = 2 + 3 * 4 ;")
        assert _values(results) == [("a", 14.0)]

    def test_variable_round_trip(self) -> None:
        variables = VariableEnvironment()
        results = run_source("a = 5 ; b = a + 1 ;", variables)
        assert _values(results) == [("a", 5.0), ("b", 6.0)]
        assert variables.snapshot() == {"a": 5.0, "b": 6.0}

    def test_reassignment_is_seen_by_later_statements(self) -> None:
        results = run_source("a = 5 ; a = 10 ; c = a * 2 ;")
        assert _values(results)[-1] == ("c", 20.0)

    def test_self_reference_uses_previous_value(self) -> None:
        results = run_source("n = 1 ; n = n + 1 ; n = n * 10 ;")
        assert [r.value for r in results] == [1.0, 2.0, 20.0]

    def test_environment_shared_across_runs(self) -> None:
        variables = VariableEnvironment()
        run_source("x = 4 ;", variables)
        results = run_source("y = x / 2 ;", variables)
        assert _values(results) == [("y", 2.0)]

    def test_multiline_stream(self) -> None:
        source = io.StringIO("a = 1 ;\nb = a\n  + 2 ;\n")
        assert _values(run_source(source)) == [("a", 1.0), ("b", 3.0)]

    def test_last_statement_without_semicolon(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("x = 1 + 2", diagnostics=diagnostics)
        assert _values(results) == [("x", 3.0)]
        assert diagnostics.issues == []

    def test_result_keeps_tree(self) -> None:
        (result,) = run_source("r = 1 - 2 - 3 ;")
        assert str(result.expr) == "((1 - 2) - 3)"
        assert str(result) == "r = -4"

    def test_result_str_keeps_full_precision(self) -> None:
        (result,) = run_source("t = 2 / 3 ;")
        assert str(result) == "t = 0.666666666666667"
        assert str(StatementResult("u", 0.1 + 0.2, Literal(value=0.0))) == "u = 0.3"

    def test_long_sum(self) -> None:
        source = "a = " + " + ".join(["1"] * 5000) + " ;"
        (result,) = run_source(source)
        assert result.value == 5000.0

    def test_long_mixed_chain(self) -> None:
        source = "a = 0" + " - 1 * 2 + 3 / 3" * 2500 + " ;"
        (result,) = run_source(source)
        assert result.value == -2500.0

    def test_long_sign_chains(self) -> None:
        results = run_source("m = " + "-" * 5001 + "5 ; p = " + "+" * 5000 + "7 ;")
        assert _values(results) == [("m", -5.0), ("p", 7.0)]

    def test_empty_input(self) -> None:
        assert run_source("") == []


class TestRecoveredErrors:
    def test_undefined_variable(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("c = unknown + 1 ;", diagnostics=diagnostics)
        assert _values(results) == [("c", 1.0)]
        assert diagnostics.kinds() == [DiagnosticKind.UNDEFINED_VARIABLE]

    def test_number_followed_by_name(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("d = 12abc ;", diagnostics=diagnostics)
        assert _values(results) == [("d", 12.0)]
        assert diagnostics.kinds() == [DiagnosticKind.SYNTAX]

    def test_end_of_input_mid_expression(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("e = 1 +", diagnostics=diagnostics)
        assert _values(results) == [("e", -1.0)]
        assert diagnostics.kinds() == [DiagnosticKind.END_OF_INPUT]

    def test_stray_assignment(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("f = = 3 ;", diagnostics=diagnostics)
        assert _values(results) == [("f", 0.0)]
        assert diagnostics.kinds() == [DiagnosticKind.UNEXPECTED_ASSIGNMENT, DiagnosticKind.SYNTAX]

    def test_parenthesis_in_operand_position(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("g = ( 4 ; h = 1 ;", diagnostics=diagnostics)
        assert _values(results) == [("g", 0.0), ("h", 1.0)]
        assert diagnostics.kinds() == [DiagnosticKind.SYNTAX, DiagnosticKind.SYNTAX]
        assert [d.column for d in diagnostics.issues] == [5, 7]

    def test_unrecognized_character(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("g = 4 # 2 ;", diagnostics=diagnostics)
        assert diagnostics.kinds()[0] == DiagnosticKind.LEXICAL
        assert _values(results) == [("g", 4.0)]

    def test_statement_not_starting_with_name_is_skipped(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("5 = 3 ; y = 2 ;", diagnostics=diagnostics)
        assert _values(results) == [("y", 2.0)]
        assert diagnostics.kinds() == [DiagnosticKind.SYNTAX]

    def test_missing_equals_is_skipped(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("x 3 ; y = 1 ;", diagnostics=diagnostics)
        assert _values(results) == [("y", 1.0)]
        assert diagnostics.kinds() == [DiagnosticKind.SYNTAX]
        assert "'='" in diagnostics.issues[0].message

    def test_name_then_end_of_input(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("a = 1 ; x", diagnostics=diagnostics)
        assert _values(results) == [("a", 1.0)]
        assert diagnostics.kinds() == [DiagnosticKind.END_OF_INPUT]

    def test_later_statements_still_run(self) -> None:
        diagnostics = Diagnostics()
        results = run_source("a = b ; c = 2 ) ; d = c * 3 ;", diagnostics=diagnostics)
        assert _values(results) == [("a", 0.0), ("c", 2.0), ("d", 6.0)]
        assert diagnostics.count() == 2

    def test_diagnostics_attached_to_their_statement(self) -> None:
        results = run_source("a = 1 ; b = zz ; c = 2 ;")
        assert [len(r.diagnostics) for r in results] == [0, 1, 0]
        assert results[1].diagnostics[0].kind == DiagnosticKind.UNDEFINED_VARIABLE


class TestRunner:
    def test_trace_sees_every_consumed_token(self) -> None:
        seen: list[Token] = []
        run_source("a = 1 ;", on_token=seen.append)
        assert [t.kind for t in seen] == [
            TokenKind.IDENT,
            TokenKind.EQUALS,
            TokenKind.NUMBER,
            TokenKind.SEMICOLON,
            TokenKind.EOF,
        ]

    def test_results_are_produced_lazily(self) -> None:
        variables = VariableEnvironment()
        runner = StatementRunner(Tokenizer("a = 1 ; b = 2 ;"), variables)
        results = runner.run()
        first = next(results)
        assert first.name == "a"
        assert "b" not in variables
        assert next(results).name == "b"
        with pytest.raises(StopIteration):
            next(results)

    def test_listener_called_as_problems_occur(self) -> None:
        reported: list[str] = []
        diagnostics = Diagnostics(listener=lambda d: reported.append(d.message))
        run_source("a = x ;", diagnostics=diagnostics)
        assert reported == ["Invalid variable x"]

    def test_unterminated_expression_raises_with_position(self, monkeypatch: pytest.MonkeyPatch) -> None:
        runner = StatementRunner(Tokenizer("a = ) ;"))
        monkeypatch.setattr(runner.builder, "parse_expression", lambda: Literal(value=1.0))
        with pytest.raises(ExpressionParseError, match=r"^1:5: ") as exc_info:
            list(runner.run())
        assert (exc_info.value.context.line, exc_info.value.context.column) == (1, 5)
