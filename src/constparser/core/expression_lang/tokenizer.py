"""
Tokenizer for the constparser statement language.

Reads characters from a string or text stream and produces classified
tokens one at a time, with a single token of lookahead.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Callable
from enum import StrEnum, auto
from typing import TextIO

from constparser.core.errors import Diagnostics, DiagnosticKind, TokenizerStateError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the statement language."""

    # Literals and names
    IDENT = auto()
    NUMBER = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    EQUALS = auto()
    SEMICOLON = auto()

    # End of input
    EOF = auto()

    # Never produced by the scanner
    INVALID = auto()


class Token:
    """A single token from the tokenizer."""

    __slots__ = ("kind", "value", "line", "column")

    def __init__(self, kind: TokenKind, value: str = "", line: int = 0, column: int = 0) -> None:
        self.kind = kind
        self.value = value
        self.line = line
        self.column = column

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, {self.line}:{self.column})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.line, self.column) == (
            other.kind,
            other.value,
            other.line,
            other.column,
        )

    def describe(self) -> str:
        """Human-readable form used in diagnostics."""
        if self.kind in (TokenKind.IDENT, TokenKind.NUMBER):
            return f"{self.kind} {self.value!r}"
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.value:
            return repr(self.value)
        return str(self.kind)


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQUALS,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMICOLON,
}

# Plain decimal: digits with an optional fractional part
_DECIMAL_RE = re.compile(r"[0-9]+(\.[0-9]+)?")

INVALID_NUMBER = -1.0


class Tokenizer:
    """
    Streaming tokenizer with one token of lookahead.

    ``peek_token`` scans the next token and keeps it buffered, ``consume``
    drops the buffered token and ``next_token`` does both. Unrecognized
    characters are reported to ``diagnostics`` and skipped.
    """

    def __init__(
        self,
        source: str | TextIO,
        diagnostics: Diagnostics | None = None,
        on_token: Callable[[Token], None] | None = None,
    ) -> None:
        """
        Initialize tokenizer.

        Args:
            source: Source text, or a text stream read one character at a time
            diagnostics: Collector for lexical errors
            on_token: Called with every consumed token (verbose tracing)
        """
        self.stream: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.on_token = on_token
        self.line = 1
        self.column = 1
        self._pushback_char: str | None = None
        self._prev_position: tuple[int, int] = (1, 1)
        self._lookahead: Token | None = None

    # -- Character level --

    def _read_char(self) -> str:
        """Read one character, or "" at end of input."""
        if self._pushback_char is not None:
            ch, self._pushback_char = self._pushback_char, None
        else:
            ch = self.stream.read(1)
        if ch:
            self._prev_position = (self.line, self.column)
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return ch

    def _unread_char(self, ch: str) -> None:
        if ch:
            self._pushback_char = ch
            self.line, self.column = self._prev_position

    def _read_while(self, first: str, predicate: Callable[[str], bool]) -> str:
        chars = [first]
        while True:
            ch = self._read_char()
            if ch and predicate(ch):
                chars.append(ch)
                continue
            self._unread_char(ch)
            return "".join(chars)

    def _scan(self) -> Token:
        """Scan the next token from the stream, skipping whitespace."""
        while True:
            line, column = self.line, self.column
            ch = self._read_char()

            if not ch:
                return Token(TokenKind.EOF, "", line, column)

            if ch.isspace():
                continue

            if ch.isalpha():
                return Token(TokenKind.IDENT, self._read_while(ch, str.isalnum), line, column)

            if ch.isdigit():
                return Token(TokenKind.NUMBER, self._read_while(ch, str.isdigit), line, column)

            kind = _SINGLE_CHAR.get(ch)
            if kind is not None:
                return Token(kind, ch, line, column)

            self.diagnostics.report(
                DiagnosticKind.LEXICAL,
                f"Unrecognized character {ch!r}, skipping it",
                line,
                column,
            )

    # -- Token level --

    def peek_token(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._scan()
        return self._lookahead

    def consume(self) -> None:
        """Discard the buffered token."""
        if self._lookahead is None:
            self.peek_token()
        token = self._lookahead
        assert token is not None
        logger.debug("consumed %r", token)
        if self.on_token is not None:
            self.on_token(token)
        # EOF stays buffered so it keeps being returned
        if token.kind != TokenKind.EOF:
            self._lookahead = None

    def next_token(self) -> Token:
        """Return and consume the next token."""
        token = self.peek_token()
        self.consume()
        return token

    def push_back(self, token: Token) -> None:
        """Re-present an already consumed token as the next one."""
        if self._lookahead is not None and self._lookahead.kind != TokenKind.EOF:
            raise TokenizerStateError(f"Cannot push back {token!r}: {self._lookahead!r} is buffered")
        self._lookahead = token

    def __iter__(self):
        """Yield tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return


def tokenize(source: str | TextIO, diagnostics: Diagnostics | None = None) -> list[Token]:
    """Tokenize the whole input into a list ending with a single EOF token."""
    return list(Tokenizer(source, diagnostics))


def to_number(text: str, diagnostics: Diagnostics | None = None, token: Token | None = None) -> float:
    """
    Convert number token text to a float.

    Text that is not a plain decimal is reported and replaced with -1.0.
    """
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if diagnostics is not None:
        diagnostics.report(
            DiagnosticKind.NUMERIC_FORMAT,
            f"Invalid number {text!r}, replacing with {INVALID_NUMBER:g}",
            token.line if token else None,
            token.column if token else None,
        )
    return INVALID_NUMBER
