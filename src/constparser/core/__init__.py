"""Core constparser functionality: IR, tokenizer, builder, evaluator, statement driver."""

from . import ir
from .errors import (
    ConstParserError,
    Diagnostic,
    DiagnosticKind,
    Diagnostics,
    ErrorContext,
    ExpressionEvalError,
    ExpressionParseError,
    TokenizerStateError,
)
from .statements import StatementResult, StatementRunner, run_source

__all__ = [
    "ir",
    "ConstParserError",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "ErrorContext",
    "ExpressionEvalError",
    "ExpressionParseError",
    "TokenizerStateError",
    "StatementResult",
    "StatementRunner",
    "run_source",
]
