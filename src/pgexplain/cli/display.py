"""Rich terminal display for analysis results (the TEXT format on a TTY)."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pgexplain.analyzer.models import CostInfo, IndexRecommendationInfo, PlanComparison, Winner
from pgexplain.config import Config
from pgexplain.engine import AnalysisReport, BatchReport
from pgexplain.output.renderers import (
    OutputFormat,
    performance_multiplier,
    priority_heading,
    winner_icon,
)

PRIORITY_STYLES = {5: "red bold", 4: "dark_orange", 3: "yellow", 2: "blue", 1: "dim"}

error_console = Console(stderr=True)


def show_report(console: Console, report: AnalysisReport) -> None:
    """Print the cost alert and index recommendations of one report."""
    if report.cost_info is not None:
        show_cost_alert(console, report.cost_info)
    if report.index_info is not None:
        show_index_recommendations(console, report.index_info)
    if report.cost_info is None and report.index_info is None:
        console.print(
            "[dim]Nothing to report: cost alert disabled and index "
            "recommendations not requested.[/dim]"
        )


def show_cost_alert(console: Console, cost: CostInfo) -> None:
    if not cost.alert_enabled:
        return

    if not cost.should_alert:
        console.print(
            f"✨ Great! Query cost ({cost.total_cost:.2f}) is below "
            f"threshold ({cost.threshold_value:.0f})\n"
        )
        return

    body = (
        f"Total cost: [bold]{cost.total_cost:.2f}[/bold]\n"
        f"Threshold: {cost.threshold_value:.2f}\n"
        f"Exceeded by: [red]{cost.exceeded_by:.2f}[/red]"
    )
    console.print(Panel(body, title="⚠️  Cost Alert", border_style="red"))

    if cost.expensive_ops:
        table = Table(title="Expensive Operations")
        table.add_column("Operation", style="cyan")
        table.add_column("Cost", justify="right")
        table.add_column("Line", style="dim")
        for op in cost.expensive_ops:
            table.add_row(escape(op.operation_type), f"{op.cost:.2f}", escape(op.line))
        console.print(table)
    console.print()


def show_index_recommendations(console: Console, info: IndexRecommendationInfo) -> None:
    if not info.recommendations:
        console.print(
            "✨ No index recommendations (all operations below threshold "
            f"of {info.threshold_used:.0f})\n"
        )
        return

    console.print(
        f"[bold]💡 {info.total_found} index recommendation(s)[/bold] "
        f"([red]{info.high_priority} high priority[/red])\n"
    )

    for priority in range(5, 0, -1):
        recs = info.by_priority(priority)
        if not recs:
            continue

        style = PRIORITY_STYLES[priority]
        console.print(f"[{style}]{priority_heading(priority)}[/{style}]")
        for rec in recs:
            console.print(f"   {escape(rec.reason)}")
            console.print(
                f"   [dim]{escape(rec.operation_type)} (cost {rec.operation_cost:.2f})[/dim]"
            )
            console.print(f"   [green]{escape(rec.create_statement)}[/green]")
        console.print()


def show_comparison(console: Console, comparison: PlanComparison) -> None:
    table = Table(title="Query Comparison")
    table.add_column("Metric")
    table.add_column("Query 1", justify="right")
    table.add_column("Query 2", justify="right")
    table.add_row(
        "Total Cost",
        f"{comparison.cost1.total_cost:.2f}",
        f"{comparison.cost2.total_cost:.2f}",
    )
    table.add_row(
        "Operations",
        str(len(comparison.cost1.expensive_ops)),
        str(len(comparison.cost2.expensive_ops)),
    )
    console.print(table)

    style = "yellow" if comparison.winner == Winner.TIE else "green"
    console.print(
        f"\n[{style}]Winner: {comparison.winner.value} {winner_icon(comparison)}[/{style}]"
    )
    if comparison.cost_diff != 0:
        console.print(
            f"Cost Difference: {comparison.cost_diff:.2f} ({comparison.cost_diff_pct:.2f}%)"
        )
    multiplier = performance_multiplier(comparison)
    if multiplier:
        console.print(multiplier)
    console.print(f"\n{comparison.recommendation}")


def show_batch(console: Console, batch: BatchReport) -> None:
    table = Table(title="Batch Analysis")
    table.add_column("Plan", style="cyan")
    table.add_column("Status")
    table.add_column("Total Cost", justify="right")
    table.add_column("Recommendations", justify="right")

    for report in batch.reports:
        name = escape(report.title or report.source or "")
        if report.error:
            table.add_row(name, f"[red]failed[/red] {escape(report.error)}", "", "")
            continue
        cost = f"{report.cost_info.total_cost:.2f}" if report.cost_info else "n/a"
        status = "[red]exceeds[/red]" if report.exceeds_threshold else "[green]ok[/green]"
        table.add_row(name, status, cost, str(report.recommendation_count))

    console.print(table)
    console.print(
        f"\nTotal: {batch.total}  Success: {batch.success_count}  "
        f"Failed: {batch.failure_count}  Exceeding: {batch.exceeding_count}"
    )


def resolve_format(format: OutputFormat | None, config: Config) -> OutputFormat:
    """Command-line --format wins over the configured default."""
    return format if format is not None else OutputFormat(config.default_format)


def emit(console: Console, rendered: str, output: Path | None) -> None:
    """
    Write rendered text to output, or to stdout without rich markup.

    Exactly one trailing newline is written either way.
    """
    rendered = rendered.rstrip("\n")
    if output is None:
        typer.echo(rendered)
        return
    write_report(output, rendered)
    console.print(f"📁 Saved to {escape(str(output.resolve()))}")


def write_report(path: Path, rendered: str) -> None:
    """Write a report file; failures print an error and exit with code 1."""
    try:
        path.write_text(rendered.rstrip("\n") + "\n", encoding="utf-8")
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Cannot write {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(code=1)
