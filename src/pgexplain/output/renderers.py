"""
Output renderers for different formats.

Separates presentation logic from analysis logic.
Uses schema.py Pydantic models as the single source of truth
for JSON serialization; no manual dict construction.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import TYPE_CHECKING

from pgexplain.output.schema import (
    AnalysisReportSchema,
    BatchReportSchema,
    BatchSummarySchema,
    ComparisonSchema,
    CostAnalysisSchema,
    ExpensiveOperationSchema,
    IndexAnalysisSchema,
    IndexRecommendationSchema,
)

if TYPE_CHECKING:
    from pgexplain.analyzer.models import (
        CostInfo,
        ExpensiveOperation,
        IndexRecommendationInfo,
        PlanComparison,
    )
    from pgexplain.engine import AnalysisReport, BatchReport


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"
    CSV = "csv"


PRIORITY_ICONS = {5: "🔴", 4: "🟠", 3: "🟡", 2: "🔵", 1: "⚪"}
PRIORITY_LABELS = {
    5: "(Critical - Very High Cost)",
    4: "(High - Significant Impact)",
    3: "(Medium - Moderate Impact)",
    2: "(Low - Minor Impact)",
    1: "(Minimal Impact)",
}

REPORT_CSV_HEADER = [
    "title",
    "query",
    "total_cost",
    "exceeds_threshold",
    "threshold_value",
    "expensive_ops_count",
    "recommendations_count",
    "generated_at",
]
BATCH_CSV_HEADER = REPORT_CSV_HEADER[:-1] + ["status", "error", "generated_at"]
COMPARISON_CSV_HEADER = [
    "cost1",
    "cost2",
    "winner",
    "cost_diff",
    "cost_diff_pct",
    "recommendation",
]

ALERT_DISABLED = "alert disabled"


def render(report: "AnalysisReport", format: OutputFormat = OutputFormat.TEXT) -> str:
    """
    Render a single-plan report in the specified format.

    Args:
        report: Analysis report to render
        format: Output format (text, json, markdown, csv)
    """
    if format == OutputFormat.TEXT:
        return render_text(report)
    elif format == OutputFormat.JSON:
        return render_json(report)
    elif format == OutputFormat.MARKDOWN:
        return render_markdown(report)
    elif format == OutputFormat.CSV:
        return render_csv(report)
    else:
        raise ValueError(f"Unknown output format: {format}")


def render_batch(batch: "BatchReport", format: OutputFormat = OutputFormat.TEXT) -> str:
    """Render a batch report in the specified format."""
    if format == OutputFormat.TEXT:
        return render_batch_text(batch)
    elif format == OutputFormat.JSON:
        return json.dumps(_batch_to_schema(batch).model_dump(mode="json"), indent=2)
    elif format == OutputFormat.MARKDOWN:
        return render_batch_markdown(batch)
    elif format == OutputFormat.CSV:
        return render_batch_csv(batch)
    else:
        raise ValueError(f"Unknown output format: {format}")


def render_comparison(
    comparison: "PlanComparison", format: OutputFormat = OutputFormat.TEXT
) -> str:
    """Render a plan comparison in the specified format."""
    if format == OutputFormat.TEXT:
        return render_comparison_text(comparison)
    elif format == OutputFormat.JSON:
        return json.dumps(_comparison_to_schema(comparison).model_dump(mode="json"), indent=2)
    elif format == OutputFormat.MARKDOWN:
        return render_comparison_markdown(comparison)
    elif format == OutputFormat.CSV:
        return render_comparison_csv(comparison)
    else:
        raise ValueError(f"Unknown output format: {format}")


# =============================================================================
# Schema-based serialization (single source of truth)
# =============================================================================


def _ops_to_schema(ops: tuple["ExpensiveOperation", ...]) -> list[ExpensiveOperationSchema]:
    return [
        ExpensiveOperationSchema(operation_type=op.operation_type, cost=op.cost, line=op.line)
        for op in ops
    ]


def _cost_to_schema(cost: "CostInfo") -> CostAnalysisSchema:
    return CostAnalysisSchema(
        total_cost=cost.total_cost,
        exceeds_threshold=cost.should_alert,
        threshold_value=cost.threshold_value,
        expensive_operations=_ops_to_schema(cost.expensive_ops),
    )


def _index_to_schema(info: "IndexRecommendationInfo") -> IndexAnalysisSchema:
    return IndexAnalysisSchema(
        threshold_used=info.threshold_used,
        total_found=info.total_found,
        high_priority=info.high_priority,
        recommendations=[
            IndexRecommendationSchema(
                table_name=rec.table_name,
                columns=list(rec.columns),
                index_type=rec.index_type,
                priority=rec.priority,
                rule=rec.rule.value,
                reason=rec.reason,
                operation_type=rec.operation_type,
                operation_cost=rec.operation_cost,
                create_statement=rec.create_statement,
            )
            for rec in info.recommendations
        ],
    )


def _report_to_schema(report: "AnalysisReport") -> AnalysisReportSchema:
    return AnalysisReportSchema(
        title=report.title,
        query=report.query,
        source=report.source,
        generated_at=report.generated_at.isoformat(),
        error=report.error,
        cost_analysis=_cost_to_schema(report.cost_info) if report.cost_info else None,
        index_analysis=_index_to_schema(report.index_info) if report.index_info else None,
    )


def _batch_to_schema(batch: "BatchReport") -> BatchReportSchema:
    return BatchReportSchema(
        summary=BatchSummarySchema(**batch.to_summary_dict()),
        reports=[_report_to_schema(r) for r in batch.reports],
    )


def _comparison_to_schema(comparison: "PlanComparison") -> ComparisonSchema:
    return ComparisonSchema(
        winner=comparison.winner.value,
        cost1=comparison.cost1.total_cost,
        cost2=comparison.cost2.total_cost,
        cost_diff=comparison.cost_diff,
        cost_diff_pct=comparison.cost_diff_pct,
        recommendation=comparison.recommendation,
        expensive_operations1=_ops_to_schema(comparison.cost1.expensive_ops),
        expensive_operations2=_ops_to_schema(comparison.cost2.expensive_ops),
    )


# =============================================================================
# Text renderer
# =============================================================================


def render_text(report: "AnalysisReport") -> str:
    """Render a report as plain terminal text."""
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"pgexplain Report: {report.title}" if report.title else "pgexplain Report")
    lines.append("=" * 60)
    lines.append("")

    if report.error:
        lines.append(f"❌ {report.error}")
        return "\n".join(lines)

    lines.extend(_cost_text_lines(report.cost_info))
    lines.append("")

    if report.index_info is not None:
        lines.extend(_index_text_lines(report.index_info))
        lines.append("")

    lines.append("=" * 60)
    return "\n".join(lines)


def _cost_text_lines(cost: "CostInfo | None") -> list[str]:
    if cost is None or not cost.alert_enabled:
        return [f"Cost alert: {ALERT_DISABLED}"]

    lines = [f"Total Cost: {cost.total_cost:.2f} (threshold {cost.threshold_value:.0f})"]
    if not cost.should_alert:
        lines.append("✨ Query cost is below threshold")
        return lines

    lines.append(f"⚠️  Exceeds threshold by {cost.exceeded_by:.2f}")
    if cost.expensive_ops:
        lines.append("")
        lines.append("Expensive Operations:")
        for op in cost.expensive_ops:
            lines.append(f"  • {op.operation_type} (cost {op.cost:.2f})")
            lines.append(f"    {op.line}")
    return lines


def _index_text_lines(info: "IndexRecommendationInfo") -> list[str]:
    if not info.recommendations:
        return [
            "✨ No index recommendations "
            f"(all operations below threshold of {info.threshold_used:.0f})"
        ]

    lines = [
        f"Index Recommendations: {info.total_found} found, "
        f"{info.high_priority} high priority"
    ]
    for priority in range(5, 0, -1):
        recs = info.by_priority(priority)
        if not recs:
            continue
        lines.append("")
        lines.append(f"{priority_heading(priority)}:")
        for rec in recs:
            lines.append(f"  • {rec.reason}")
            lines.append(f"    Operation: {rec.operation_type} (cost {rec.operation_cost:.2f})")
            lines.append(f"    {rec.create_statement}")
    return lines


def render_batch_text(batch: "BatchReport") -> str:
    """Render a batch summary plus one line per plan."""
    lines = [
        "Batch Analysis",
        "=" * 60,
        f"Total: {batch.total}  Success: {batch.success_count}  "
        f"Failed: {batch.failure_count}  Exceeding: {batch.exceeding_count}",
        "",
    ]
    for report in batch.reports:
        name = report.title or report.source or "<plan>"
        if report.error:
            lines.append(f"❌ {name}: {report.error}")
            continue
        cost = f"{report.cost_info.total_cost:.2f}" if report.cost_info else "n/a"
        flag = "⚠️ " if report.exceeds_threshold else "✅"
        lines.append(
            f"{flag} {name}: cost {cost}, {report.recommendation_count} recommendation(s)"
        )
    return "\n".join(lines)


def render_comparison_text(comparison: "PlanComparison") -> str:
    """Render a comparison as plain text."""
    lines = [
        f"Winner: {comparison.winner.value} {winner_icon(comparison)}",
        f"Query 1 cost: {comparison.cost1.total_cost:.2f}",
        f"Query 2 cost: {comparison.cost2.total_cost:.2f}",
    ]
    if comparison.cost_diff != 0:
        lines.append(
            f"Cost Difference: {comparison.cost_diff:.2f} ({comparison.cost_diff_pct:.2f}%)"
        )
        multiplier = performance_multiplier(comparison)
        if multiplier:
            lines.append(multiplier)
    lines.append("")
    lines.append(comparison.recommendation)
    return "\n".join(lines)


# =============================================================================
# JSON renderer (uses schema models)
# =============================================================================


def render_json(report: "AnalysisReport", indent: int = 2) -> str:
    """
    Render a report as stable JSON.

    Uses Pydantic schema models for guaranteed consistency.
    """
    return json.dumps(_report_to_schema(report).model_dump(mode="json"), indent=indent)


# =============================================================================
# Markdown renderer
# =============================================================================


def escape_markdown(text: str) -> str:
    """Escape characters that break Markdown tables or emphasis."""
    for char in ("\\", "*", "_", "[", "]", "|"):
        text = text.replace(char, "\\" + char)
    return text


def render_markdown(report: "AnalysisReport") -> str:
    """
    Render a report as Markdown.

    Suitable for GitHub comments, wikis and documentation.
    """
    lines: list[str] = []

    lines.append("# Query Execution Plan")
    lines.append("")
    if report.title:
        lines.append(f"**Title:** {escape_markdown(report.title)}  ")
    lines.append(f"**Generated:** {report.generated_at:%B %d, %Y %H:%M:%S}  ")
    if report.query:
        lines.append(f"**Query:** {escape_markdown(report.query)}")
    lines.append("")
    lines.append("---")
    lines.append("")

    if report.error:
        lines.append(f"❌ **Analysis failed:** {escape_markdown(report.error)}")
        return "\n".join(lines)

    lines.append("## Cost Analysis")
    lines.append("")
    cost = report.cost_info
    if cost is None or not cost.alert_enabled:
        lines.append(f"_Cost {ALERT_DISABLED} (threshold not set)_")
    else:
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Total Cost | {cost.total_cost:.2f} |")
        lines.append(f"| Exceeds Threshold | {str(cost.should_alert).lower()} |")
        lines.append(f"| Threshold Value | {cost.threshold_value:.2f} |")
        if cost.expensive_ops:
            lines.append("")
            lines.append("### Expensive Operations")
            lines.append("")
            lines.extend(_ops_markdown_table(cost.expensive_ops))
    lines.append("")

    if report.index_info is not None:
        lines.append("## Index Recommendations")
        lines.append("")
        info = report.index_info
        if not info.recommendations:
            lines.append("_No index recommendations_")
        else:
            lines.append("| Priority | Table | Columns | Reason |")
            lines.append("|----------|-------|---------|--------|")
            for rec in info.recommendations:
                lines.append(
                    f"| {PRIORITY_ICONS[rec.priority]} {rec.priority} "
                    f"| {escape_markdown(rec.table_name)} "
                    f"| {escape_markdown(', '.join(rec.columns))} "
                    f"| {escape_markdown(rec.reason)} |"
                )
            lines.append("")
            lines.append("```sql")
            lines.extend(rec.create_statement for rec in info.recommendations)
            lines.append("```")
        lines.append("")

    lines.append("## Execution Plan")
    lines.append("")
    lines.append("```")
    lines.append(report.plan.text)
    lines.append("```")

    return "\n".join(lines)


def _ops_markdown_table(ops: tuple["ExpensiveOperation", ...]) -> list[str]:
    lines = ["| Operation | Cost | Details |", "|-----------|------|---------|"]
    for op in ops:
        lines.append(
            f"| {escape_markdown(op.operation_type)} | {op.cost:.2f} | {escape_markdown(op.line)} |"
        )
    return lines


def render_batch_markdown(batch: "BatchReport") -> str:
    """Render a batch report as a Markdown summary table."""
    lines = [
        "# Batch Analysis Report",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total | {batch.total} |",
        f"| Success | {batch.success_count} |",
        f"| Failed | {batch.failure_count} |",
        f"| Exceeding Threshold | {batch.exceeding_count} |",
        "",
        "## Plans",
        "",
        "| Plan | Status | Total Cost | Recommendations |",
        "|------|--------|------------|-----------------|",
    ]
    for report in batch.reports:
        name = escape_markdown(report.title or report.source or "")
        if report.error:
            lines.append(f"| {name} | ❌ {escape_markdown(report.error)} | | |")
            continue
        cost = f"{report.cost_info.total_cost:.2f}" if report.cost_info else "n/a"
        status = "⚠️ exceeds" if report.exceeds_threshold else "✅ ok"
        lines.append(f"| {name} | {status} | {cost} | {report.recommendation_count} |")
    return "\n".join(lines)


def render_comparison_markdown(comparison: "PlanComparison") -> str:
    """Render a comparison as Markdown."""
    lines = [
        "# Query Comparison Report",
        "",
        f"## Winner: {comparison.winner.value} {winner_icon(comparison)}",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Query 1 Cost | {comparison.cost1.total_cost:.2f} |",
        f"| Query 2 Cost | {comparison.cost2.total_cost:.2f} |",
        f"| Cost Difference | {comparison.cost_diff:.2f} |",
        f"| Percentage Difference | {comparison.cost_diff_pct:.2f}% |",
    ]
    multiplier = performance_multiplier(comparison)
    if multiplier:
        lines.append(f"| Performance Multiplier | {multiplier} |")
    lines.append("")
    lines.append(f"**Recommendation:** {escape_markdown(comparison.recommendation)}")

    for label, cost in (("Query 1", comparison.cost1), ("Query 2", comparison.cost2)):
        if cost.expensive_ops:
            lines.append("")
            lines.append(f"## {label} Operations")
            lines.append("")
            lines.extend(_ops_markdown_table(cost.expensive_ops))
    return "\n".join(lines)


# =============================================================================
# CSV renderer
# =============================================================================


def _csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _report_csv_fields(report: "AnalysisReport") -> list[str]:
    cost = report.cost_info
    return [
        report.title or "",
        report.query or "",
        f"{cost.total_cost:.2f}" if cost else "",
        str(report.exceeds_threshold).lower(),
        f"{cost.threshold_value:.2f}" if cost else "0.00",
        str(len(cost.expensive_ops)) if cost else "0",
        str(report.recommendation_count),
    ]


def render_csv(report: "AnalysisReport") -> str:
    """Render a report as a header row plus one data row."""
    row = _report_csv_fields(report) + [report.generated_at.isoformat()]
    return _csv([REPORT_CSV_HEADER, row])


def render_batch_csv(batch: "BatchReport") -> str:
    """Render a batch report with one data row per plan."""
    rows = [BATCH_CSV_HEADER]
    for report in batch.reports:
        rows.append(
            _report_csv_fields(report)
            + [
                "success" if report.ok else "failed",
                report.error or "",
                report.generated_at.isoformat(),
            ]
        )
    return _csv(rows)


def render_comparison_csv(comparison: "PlanComparison") -> str:
    """Render a comparison as a header row plus one data row."""
    row = [
        f"{comparison.cost1.total_cost:.2f}",
        f"{comparison.cost2.total_cost:.2f}",
        comparison.winner.value,
        f"{comparison.cost_diff:.2f}",
        f"{comparison.cost_diff_pct:.2f}",
        comparison.recommendation,
    ]
    return _csv([COMPARISON_CSV_HEADER, row])


# =============================================================================
# Helpers
# =============================================================================


def priority_heading(priority: int) -> str:
    """e.g. '🔴 Priority 5 (Critical - Very High Cost)'."""
    return f"{PRIORITY_ICONS[priority]} Priority {priority} {PRIORITY_LABELS[priority]}"


def winner_icon(comparison: "PlanComparison") -> str:
    return "🤝" if comparison.winner.value == "Tie" else "🏆"


def performance_multiplier(comparison: "PlanComparison") -> str | None:
    """'Query N is X.XXx faster', or None when either cost is 0 or they tie."""
    cost1 = comparison.cost1.total_cost
    cost2 = comparison.cost2.total_cost
    if comparison.cost_diff == 0 or cost1 == 0 or cost2 == 0:
        return None
    if comparison.cost_diff > 0:
        return f"Query 2 is {cost1 / cost2:.2f}x faster"
    return f"Query 1 is {cost2 / cost1:.2f}x faster"
