"""
constparser - a small assignment-statement calculator.

Reads ``name = expression ;`` statements, builds each expression into a
tree with correct operator precedence, evaluates it and stores the result.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import ConstParserError, Diagnostic, DiagnosticKind, Diagnostics
from .core.expression_lang import VariableEnvironment, evaluate, parse_expr
from .core.statements import StatementResult, run_source

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "ConstParserError",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "StatementResult",
    "VariableEnvironment",
    "evaluate",
    "parse_expr",
    "run_source",
]
