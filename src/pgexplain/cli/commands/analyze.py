"""Core analysis command: analyze."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from pgexplain.cli.display import emit, resolve_format, show_report
from pgexplain.config import get_config
from pgexplain.engine import AnalysisService
from pgexplain.exceptions import PgExplainError
from pgexplain.output.renderers import OutputFormat, render
from pgexplain.parser import load_plan_file, load_plan_stream

console = Console()
error_console = Console(stderr=True)


def register(app: typer.Typer) -> None:
    """Register the analyze command on the given Typer app."""

    @app.command()
    def analyze(
        plan_file: Annotated[
            Optional[Path],
            typer.Argument(
                help="File holding EXPLAIN text output (reads stdin when omitted)",
                resolve_path=True,
            ),
        ] = None,
        threshold: Annotated[
            Optional[float],
            typer.Option(
                "--threshold",
                "-t",
                help="Cost alert threshold; 0 disables the alert",
            ),
        ] = None,
        recommend_indexes: Annotated[
            bool,
            typer.Option(
                "--recommend-indexes",
                "-i",
                help="Generate index recommendations",
            ),
        ] = False,
        index_threshold: Annotated[
            Optional[float],
            typer.Option(
                "--index-threshold",
                help="Minimum operation cost considered for indexing",
            ),
        ] = None,
        format: Annotated[
            Optional[OutputFormat],
            typer.Option("--format", "-f", help="Output format", case_sensitive=False),
        ] = None,
        output: Annotated[
            Optional[Path],
            typer.Option("--output", "-o", help="Write the report to this file"),
        ] = None,
        query: Annotated[
            Optional[str],
            typer.Option("--query", "-q", help="SQL text to include in the report"),
        ] = None,
    ) -> None:
        """
        Analyze a captured EXPLAIN plan for cost and missing indexes.

        Examples:

            $ psql -c "EXPLAIN SELECT * FROM users WHERE status = 'active'" > plan.txt
            $ pgexplain analyze plan.txt --threshold 1000 --recommend-indexes

            $ psql -c "EXPLAIN ..." | pgexplain analyze -i --format json
        """
        config = get_config()
        fmt = resolve_format(format, config)

        try:
            if plan_file is None:
                plan = load_plan_stream()
                source = "stdin"
            else:
                plan = load_plan_file(plan_file)
                source = str(plan_file)

            service = AnalysisService(config)
            report = service.analyze(
                plan,
                threshold=threshold,
                index_threshold=index_threshold,
                recommend_indexes=recommend_indexes or None,
                title=plan_file.stem if plan_file else "stdin",
                query=query,
                source=source,
            )
        except PgExplainError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        if not report.ok:
            error_console.print(f"[red]Error:[/red] {escape(report.error)}")
            raise typer.Exit(code=1)

        if fmt == OutputFormat.TEXT and output is None:
            show_report(console, report)
            return

        emit(console, render(report, fmt), output)
