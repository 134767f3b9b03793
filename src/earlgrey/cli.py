"""
Command line filter: extracts the documentation comments from a file or standard input.
"""

from __future__ import annotations
from typing import Optional

from pathlib import Path
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from earlgrey.doc import parse
from earlgrey.main import ParseError


logger = logging.getLogger(__name__)

cli = typer.Typer(add_completion=False)


def configure_logging(verbose: bool) -> None:
    # stdout carries the extracted text
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s - %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@cli.command()
def extract(
    source: typer.FileText = typer.Argument("-", help="File to read, `-` for standard input."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write here instead of standard output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages."),
):
    """Print the contents of every /** */ comment, without the * banners."""
    configure_logging(verbose)
    name = getattr(source, "name", "<stdin>")
    text = source.read()
    logger.debug("Read %d characters from %s.", len(text), name)
    try:
        doc = parse(text, name)
    except ParseError as e:
        typer.echo(f"{e}\n" + "\n".join(getattr(e, "__notes__", [])), err=True)
        raise typer.Exit(1)
    if output is None:
        typer.echo(doc, nl=False)
    else:
        output.write_text(doc)
        logger.debug("Wrote %d characters to %s.", len(doc), output)


def main() -> None:
    cli()
