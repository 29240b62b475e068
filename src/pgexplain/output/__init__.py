"""
Output module - Separates rendering from analysis.

Provides multiple output formats:
- render_text: Plain terminal text
- render_json: Stable JSON schema
- render_markdown: GitHub-friendly format
- render_csv: Spreadsheet-friendly rows

Usage:
    from pgexplain.output import OutputFormat, render

    report = AnalysisService().analyze(plan_text, threshold=1000)
    print(render(report, OutputFormat.MARKDOWN))
"""

from pgexplain.output.renderers import (
    OutputFormat,
    escape_markdown,
    render,
    render_batch,
    render_comparison,
    render_csv,
    render_json,
    render_markdown,
    render_text,
)
from pgexplain.output.schema import (
    AnalysisReportSchema,
    BatchReportSchema,
    ComparisonSchema,
    get_json_schema,
)

__all__ = [
    "OutputFormat",
    "escape_markdown",
    "render",
    "render_batch",
    "render_comparison",
    "render_text",
    "render_json",
    "render_markdown",
    "render_csv",
    "AnalysisReportSchema",
    "BatchReportSchema",
    "ComparisonSchema",
    "get_json_schema",
]
