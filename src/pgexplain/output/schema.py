"""
JSON Schema definitions for stable report output.

Provides a versioned schema for:
- Single-plan analysis reports
- Batch reports
- Plan comparisons

The schema is stable across minor versions.
Breaking changes only in major versions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Schema version - increment on breaking changes
SCHEMA_VERSION = "1.0"


class ExpensiveOperationSchema(BaseModel):
    """Schema for one plan line at or above the cost threshold."""

    model_config = ConfigDict(frozen=True)

    operation_type: str = Field(..., description="Short operation label")
    cost: float = Field(..., description="Upper-bound cost of the line")
    line: str = Field(..., description="The plan line, trimmed")


class CostAnalysisSchema(BaseModel):
    """Schema for cost metrics of one plan."""

    model_config = ConfigDict(frozen=True)

    total_cost: float = Field(0.0, description="Maximum single-line cost")
    exceeds_threshold: bool = Field(False, description="Whether the cost alert fires")
    threshold_value: float = Field(0.0, description="Alert threshold (0 = disabled)")
    expensive_operations: list[ExpensiveOperationSchema] = Field(
        default_factory=list, description="Lines at or above the threshold"
    )


class IndexRecommendationSchema(BaseModel):
    """Schema for a single CREATE INDEX suggestion."""

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(..., description="Target table")
    columns: list[str] = Field(..., description="Index columns, in order")
    index_type: str = Field("BTREE", description="Index access method")
    priority: int = Field(..., description="Urgency 1-5")
    rule: str = Field(..., description="Rule that produced it (filter/join/sort)")
    reason: str = Field(..., description="Why this index is suggested")
    operation_type: str = Field(..., description="Triggering operation")
    operation_cost: float = Field(..., description="Cost of the triggering operation")
    create_statement: str = Field(..., description="Ready-to-run DDL")


class IndexAnalysisSchema(BaseModel):
    """Schema for the recommendation set of one plan."""

    model_config = ConfigDict(frozen=True)

    threshold_used: float = Field(..., description="Index cost threshold")
    total_found: int = Field(0, description="Number of recommendations")
    high_priority: int = Field(0, description="Recommendations with priority >= 4")
    recommendations: list[IndexRecommendationSchema] = Field(default_factory=list)


class AnalysisReportSchema(BaseModel):
    """
    Top-level schema for a single-plan report.

    cost_analysis and index_analysis are null when that analysis was not
    requested; error is set when the plan could not be analysed.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(SCHEMA_VERSION, description="Schema version")
    title: str | None = Field(None, description="Report title")
    query: str | None = Field(None, description="SQL text, if provided")
    source: str | None = Field(None, description="Plan file or 'stdin'")
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    error: str | None = Field(None, description="Why the plan was not analysed")
    cost_analysis: CostAnalysisSchema | None = None
    index_analysis: IndexAnalysisSchema | None = None


class BatchSummarySchema(BaseModel):
    """Schema for batch counts."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(0, description="Plans processed")
    success_count: int = Field(0, description="Plans analysed")
    failure_count: int = Field(0, description="Plans that failed")
    exceeding_count: int = Field(0, description="Plans whose cost alert fired")


class BatchReportSchema(BaseModel):
    """Top-level schema for a batch run."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(SCHEMA_VERSION, description="Schema version")
    summary: BatchSummarySchema
    reports: list[AnalysisReportSchema] = Field(default_factory=list)


class ComparisonSchema(BaseModel):
    """Top-level schema for a two-plan comparison."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(SCHEMA_VERSION, description="Schema version")
    winner: str = Field(..., description="'Query 1', 'Query 2' or 'Tie'")
    cost1: float = Field(..., description="Total cost of the first plan")
    cost2: float = Field(..., description="Total cost of the second plan")
    cost_diff: float = Field(..., description="cost1 - cost2")
    cost_diff_pct: float = Field(..., description="cost_diff relative to cost2, percent")
    recommendation: str
    expensive_operations1: list[ExpensiveOperationSchema] = Field(default_factory=list)
    expensive_operations2: list[ExpensiveOperationSchema] = Field(default_factory=list)


def get_json_schema() -> dict[str, Any]:
    """Get the JSON Schema of the single-plan report."""
    return AnalysisReportSchema.model_json_schema()
