"""
constparser CLI - entry point.

Reads ``name = expression ;`` statements from standard input, prints each
committed value on stdout and every diagnostic on stderr.
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.console import Console
from rich.text import Text

from constparser._version import get_version
from constparser.core.config import load_settings
from constparser.core.errors import ConstParserError, Diagnostic, Diagnostics
from constparser.core.expression_lang.tokenizer import Token, Tokenizer
from constparser.core.expression_lang.variables import VariableEnvironment
from constparser.core.statements import StatementRunner

logger = logging.getLogger(__name__)

err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        typer.echo(f"constparser version {get_version()}")
        raise typer.Exit()


def _print_diagnostic(diagnostic: Diagnostic) -> None:
    text = Text()
    if diagnostic.line is not None:
        text.append(f"{diagnostic.line}:{diagnostic.column}: ", style="dim")
    text.append(f"{diagnostic.kind.value}: ", style="bold red")
    text.append(diagnostic.message)
    err_console.print(text)


def _log_level(verbose: bool) -> int:
    """INFO when verbose, WARNING otherwise."""
    return logging.INFO if verbose else logging.WARNING


def _print_token(token: Token) -> None:
    err_console.print(Text(f"Token: {token.kind.name} value: {token.value}", style="dim"))


app = typer.Typer(
    help="""constparser – evaluate `name = expression ;` statements

Reads statements from standard input, e.g.

  echo "a = 2 + 3 * 4 ; b = a / 2 ;" | constparser
""",
    add_completion=False,
)


@app.command()
def run(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Report every token as it is consumed (default from CONSTPARSER_VERBOSE)",
        show_default=False,
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Evaluate statements read from standard input."""
    settings = load_settings()
    verbose = verbose or settings.verbose
    logging.basicConfig(
        level=_log_level(verbose),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    diagnostics = Diagnostics(listener=_print_diagnostic)
    tokenizer = Tokenizer(sys.stdin, diagnostics, on_token=_print_token if verbose else None)
    runner = StatementRunner(tokenizer, VariableEnvironment(), diagnostics)

    count = 0
    try:
        for result in runner.run():
            typer.echo(f"{result.name} = {settings.format_value(result.value)}")
            count += 1
    except ConstParserError as e:
        typer.echo(f"Internal error: {e}", err=True)
        raise typer.Exit(code=1)

    logger.info("Processed %d statements with %d diagnostics", count, diagnostics.count())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
