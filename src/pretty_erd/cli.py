"""Typer CLI application."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from . import render_erd
from .errors import ErdError

app = typer.Typer(
    help="Translate an ERD document to Graphviz DOT.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def setup_logging(verbose: bool = False) -> None:
    """Send pretty_erd log records to stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger("pretty_erd")
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)
    root_logger.propagate = False


@app.command()
def convert(
    input_file: Optional[Path] = typer.Option(
        None,
        "-i",
        "--input",
        metavar="FILE",
        exists=True,
        dir_okay=False,
        readable=True,
        help="When set, input will be read from the given file, otherwise from stdin.",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        metavar="FILE",
        dir_okay=False,
        help="When set, output will be written to the given file, otherwise to stdout.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug output to stderr."),
) -> None:
    """Read an ERD document and write it as a Graphviz DOT graph."""
    setup_logging(verbose)
    logger = logging.getLogger("pretty_erd.cli")

    if input_file is None:
        logger.debug("reading document from stdin")
        data = sys.stdin.buffer.read()
    else:
        logger.debug("reading document from %s", input_file)
        data = input_file.read_bytes()

    try:
        # utf-8-sig drops a leading byte-order mark
        dot = render_erd(data.decode("utf-8-sig"))
    except (ErdError, UnicodeDecodeError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1)

    if output_file is None:
        typer.echo(dot, nl=False)
    else:
        logger.debug("writing DOT to %s", output_file)
        output_file.write_text(dot, encoding="utf-8")


def main() -> None:
    app()
