"""Compare command: which of two plans is cheaper."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from pgexplain.cli.display import emit, resolve_format, show_comparison
from pgexplain.config import get_config
from pgexplain.engine import AnalysisService
from pgexplain.exceptions import PgExplainError
from pgexplain.output.renderers import OutputFormat, render_comparison
from pgexplain.parser import load_plan_file

console = Console()
error_console = Console(stderr=True)


def register(app: typer.Typer) -> None:
    """Register the compare command on the given Typer app."""

    @app.command()
    def compare(
        plan1: Annotated[
            Path,
            typer.Argument(help="EXPLAIN output of the first query", resolve_path=True),
        ],
        plan2: Annotated[
            Path,
            typer.Argument(help="EXPLAIN output of the second query", resolve_path=True),
        ],
        format: Annotated[
            Optional[OutputFormat],
            typer.Option("--format", "-f", help="Output format", case_sensitive=False),
        ] = None,
        output: Annotated[
            Optional[Path],
            typer.Option("--output", "-o", help="Write the comparison to this file"),
        ] = None,
    ) -> None:
        """
        Compare the total cost of two plans for the same intent.

        Examples:

            $ pgexplain compare subquery.txt join.txt
            $ pgexplain compare before.txt after.txt --format markdown -o diff.md
        """
        config = get_config()
        fmt = resolve_format(format, config)

        try:
            first = load_plan_file(plan1)
            second = load_plan_file(plan2)
        except PgExplainError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        for path, plan in ((plan1, first), (plan2, second)):
            if not plan.is_analyzable:
                error_console.print(
                    f"[red]Error:[/red] {escape(path.name)} is empty or "
                    "contains psql error output"
                )
                raise typer.Exit(code=1)

        comparison = AnalysisService(config).compare(first, second)

        if fmt == OutputFormat.TEXT and output is None:
            show_comparison(console, comparison)
            return

        emit(console, render_comparison(comparison, fmt), output)
