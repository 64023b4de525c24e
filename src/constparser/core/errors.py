"""
Error types and diagnostics for constparser.

Two channels are kept apart here:

- Exceptions (``ConstParserError`` and subclasses) signal internal faults,
  i.e. states the tokenizer, builder or evaluator should never reach.
- Diagnostics (``Diagnostic`` records gathered by a ``Diagnostics``
  collector) describe recoverable problems in the input. Every one of them
  has a substitute value or a skip rule, so processing always continues.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ConstParserError(Exception):
    """Base exception for all constparser errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class TokenizerStateError(ConstParserError):
    """
    Raised when the tokenizer lookahead is misused.

    Examples:
    - Pushing back a token while another one is already buffered
    """

    pass


class ExpressionParseError(ConstParserError):
    """
    Raised when the expression builder reaches a state it cannot recover from.

    Syntax problems in the input are diagnostics, not this exception.
    """

    pass


class ExpressionEvalError(ConstParserError):
    """Raised when the evaluator is handed something that is not an expression node."""

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    line: int
    column: int

    def format(self) -> str:
        return f"{self.line}:{self.column}"


# =============================================================================
# Diagnostics
# =============================================================================


class DiagnosticKind(Enum):
    """Recoverable error conditions reported while processing input."""

    LEXICAL = "lexical"  # unrecognized character, skipped
    NUMERIC_FORMAT = "numeric_format"  # number text did not convert, -1.0 used
    UNDEFINED_VARIABLE = "undefined_variable"  # lookup miss, 0.0 used
    SYNTAX = "syntax"  # token in a forbidden position, discarded
    UNEXPECTED_ASSIGNMENT = "unexpected_assignment"  # stray '=', discarded
    END_OF_INPUT = "end_of_input"  # EOF where an operand was expected, -1.0 used


@dataclass
class Diagnostic:
    """A single reported problem."""

    kind: DiagnosticKind
    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        loc = f"{self.line}:{self.column}: " if self.line is not None else ""
        return f"{loc}{self.kind.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass
class Diagnostics:
    """
    Collector for diagnostics reported by the tokenizer, builder and evaluator.

    The optional ``listener`` is called synchronously for each report, which
    lets an interactive front end print problems in the order they occur.
    """

    issues: list[Diagnostic] = field(default_factory=list)
    listener: Callable[[Diagnostic], None] | None = None

    def report(
        self,
        kind: DiagnosticKind,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind, message, line, column)
        self.issues.append(diagnostic)
        logger.debug("diagnostic: %s", diagnostic)
        if self.listener is not None:
            self.listener(diagnostic)
        return diagnostic

    def count(self, kind: DiagnosticKind | None = None) -> int:
        if kind is None:
            return len(self.issues)
        return sum(1 for d in self.issues if d.kind == kind)

    @property
    def has_errors(self) -> bool:
        return bool(self.issues)

    def kinds(self) -> list[DiagnosticKind]:
        return [d.kind for d in self.issues]

    def mark(self) -> int:
        """Return a position that ``since`` can later slice from."""
        return len(self.issues)

    def since(self, mark: int) -> list[Diagnostic]:
        return self.issues[mark:]

    def clear(self) -> None:
        self.issues.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count(),
            "issues": [d.to_dict() for d in self.issues],
        }
