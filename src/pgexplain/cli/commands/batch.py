"""Batch command: analyze many captured plans at once."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from pgexplain.cli.display import emit, resolve_format, show_batch, write_report
from pgexplain.config import get_config
from pgexplain.engine import AnalysisService, BatchReport
from pgexplain.exceptions import PgExplainError
from pgexplain.output.renderers import OutputFormat, render, render_batch

console = Console()
error_console = Console(stderr=True)

FILE_EXTENSIONS = {
    OutputFormat.TEXT: "txt",
    OutputFormat.JSON: "json",
    OutputFormat.MARKDOWN: "md",
    OutputFormat.CSV: "csv",
}


def expand_patterns(patterns: list[str]) -> list[Path]:
    """Expand glob patterns into a sorted, duplicate-free list of files."""
    found: dict[str, Path] = {}
    for pattern in patterns:
        for match in glob.glob(pattern, recursive=True):
            path = Path(match)
            if path.is_file():
                found.setdefault(str(path.resolve()), path)
    return sorted(found.values())


def write_plan_reports(batch: BatchReport, fmt: OutputFormat, directory: Path) -> list[Path]:
    """
    Write one report file per plan into directory, created if missing.

    Files are named after the plan title; a repeated title gets a numeric
    suffix (orders.json, orders-2.json).
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error_console.print(
            f"[red]Error:[/red] Cannot create {escape(str(directory))}: {escape(str(e))}"
        )
        raise typer.Exit(code=1)

    extension = FILE_EXTENSIONS[fmt]
    used: dict[str, int] = {}
    written: list[Path] = []
    for report in batch.reports:
        stem = report.title or "plan"
        used[stem] = used.get(stem, 0) + 1
        name = stem if used[stem] == 1 else f"{stem}-{used[stem]}"
        path = directory / f"{name}.{extension}"
        write_report(path, render(report, fmt))
        written.append(path)
    return written


def register(app: typer.Typer) -> None:
    """Register the batch command on the given Typer app."""

    @app.command()
    def batch(
        patterns: Annotated[
            list[str],
            typer.Argument(help="Plan files or glob patterns, e.g. 'plans/*.txt'"),
        ],
        threshold: Annotated[
            Optional[float],
            typer.Option("--threshold", "-t", help="Cost alert threshold; 0 disables it"),
        ] = None,
        recommend_indexes: Annotated[
            bool,
            typer.Option("--recommend-indexes", "-i", help="Generate index recommendations"),
        ] = False,
        index_threshold: Annotated[
            Optional[float],
            typer.Option("--index-threshold", help="Minimum operation cost considered for indexing"),
        ] = None,
        format: Annotated[
            Optional[OutputFormat],
            typer.Option("--format", "-f", help="Output format", case_sensitive=False),
        ] = None,
        output: Annotated[
            Optional[Path],
            typer.Option("--output", "-o", help="Write the combined report to this file"),
        ] = None,
        output_dir: Annotated[
            Optional[Path],
            typer.Option(
                "--output-dir", "-d", help="Write one report per plan into this directory"
            ),
        ] = None,
        continue_on_error: Annotated[
            bool,
            typer.Option(
                "--continue-on-error/--stop-on-error",
                help="Keep going after a plan fails",
            ),
        ] = True,
    ) -> None:
        """
        Analyze every plan matching the given patterns.

        With --output-dir each plan gets its own report file; otherwise a
        combined report is printed or written to --output. Exits with code 1
        when any plan fails.

        Examples:

            $ pgexplain batch "plans/*.txt" -t 1000
            $ pgexplain batch "plans/**/*.txt" -i --format csv -o report.csv
            $ pgexplain batch "plans/*.txt" -f markdown --output-dir reports/
        """
        config = get_config()
        fmt = resolve_format(format, config)

        files = expand_patterns(patterns)
        if not files:
            matched = escape(", ".join(patterns))
            error_console.print(f"[red]Error:[/red] No plan files match {matched}")
            raise typer.Exit(code=1)

        try:
            report = AnalysisService(config).analyze_batch(
                [(path.stem, path) for path in files],
                threshold=threshold,
                index_threshold=index_threshold,
                recommend_indexes=recommend_indexes or None,
                continue_on_error=continue_on_error,
            )
        except PgExplainError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        if output_dir is not None:
            written = write_plan_reports(report, fmt, output_dir)
            console.print(
                f"📁 Generated {len(written)} file(s) in {escape(str(output_dir.resolve()))}"
            )
            if output is not None:
                emit(console, render_batch(report, fmt), output)
        elif fmt == OutputFormat.TEXT and output is None:
            show_batch(console, report)
        else:
            emit(console, render_batch(report, fmt), output)

        if report.has_failures:
            raise typer.Exit(code=1)
