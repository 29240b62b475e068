"""
pgexplain CLI - cost alerts and index recommendations for PostgreSQL plans.

The plan text is captured beforehand, e.g. with psql:

    psql -c "EXPLAIN SELECT ..." > plan.txt

Usage:
    pgexplain analyze plan.txt --threshold 1000 --recommend-indexes
    psql -c "EXPLAIN SELECT ..." | pgexplain analyze -i
    pgexplain compare before.txt after.txt
    pgexplain batch "plans/*.txt" --format csv --output report.csv
    pgexplain config init
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pgexplain import __version__
from pgexplain.cli.commands import analyze, batch, compare, config

app = typer.Typer(
    name="pgexplain",
    help="Cost alerts and index recommendations from PostgreSQL EXPLAIN output",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pgexplain version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log analysis details to stderr."),
    ] = False,
) -> None:
    """pgexplain - PostgreSQL execution plan analyzer."""
    configure_logging(verbose)


analyze.register(app)
compare.register(app)
batch.register(app)
config.register(app)


if __name__ == "__main__":
    app()
