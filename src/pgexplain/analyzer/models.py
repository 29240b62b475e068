"""
Data models for the analyzer module.

These models represent what the analyzers derive from plan text. They're
designed to be:
- Immutable (frozen=True): results don't change after creation
- Serializable: model_dump() feeds the JSON/CSV/Markdown renderers
- Fresh per call: nothing is cached or shared between analyses
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pgexplain.parser.patterns import SYSTEM_SCHEMAS


class RecommendationRule(str, Enum):
    """Which rule produced an index recommendation."""

    FILTER = "filter"
    JOIN = "join"
    SORT = "sort"


class Winner(str, Enum):
    """Outcome of a two-plan cost comparison."""

    QUERY_1 = "Query 1"
    QUERY_2 = "Query 2"
    TIE = "Tie"


# =============================================================================
# Cost analysis
# =============================================================================


class ExpensiveOperation(BaseModel):
    """A plan line whose upper-bound cost met the alert threshold."""

    model_config = ConfigDict(frozen=True)

    operation_type: str = Field(..., description="Short operation label (e.g. 'Seq Scan')")
    cost: float = Field(..., ge=0, description="Upper-bound cost parsed from the line")
    line: str = Field(..., description="The plan line, trimmed")


class CostInfo(BaseModel):
    """
    Aggregate cost metrics for one plan.

    Attributes:
        total_cost: Maximum upper-bound cost on any single line (not a sum).
        expensive_ops: Lines with cost >= threshold, in plan order.
        exceeds_limit: total_cost >= threshold_value.
        threshold_value: The threshold used.

    Note:
        A threshold of 0 means "alert disabled", yet exceeds_limit is then
        always true. Check alert_enabled before displaying an alert.
    """

    model_config = ConfigDict(frozen=True)

    total_cost: float = Field(default=0.0, ge=0)
    expensive_ops: tuple[ExpensiveOperation, ...] = Field(default_factory=tuple)
    exceeds_limit: bool = Field(default=False)
    threshold_value: float = Field(default=0.0, ge=0)

    @property
    def alert_enabled(self) -> bool:
        return self.threshold_value > 0

    @property
    def should_alert(self) -> bool:
        """exceeds_limit, honoring the threshold-0 "disabled" sentinel."""
        return self.alert_enabled and self.exceeds_limit

    @property
    def exceeded_by(self) -> float:
        return self.total_cost - self.threshold_value


# =============================================================================
# Index analysis
# =============================================================================


@dataclass(frozen=True)
class OperationContext:
    """
    Everything the context walker learned about one costly plan line.

    Built from local accumulators while the lookahead window is open and
    frozen once it closes.

    Attributes:
        line: The anchor line, trimmed.
        operation_type: Classified operation label.
        table_name: Scanned table, for "<ScanKind> on <table>" lines.
        filter_columns: Filter identifiers, deduplicated, first-seen order.
        join_columns: "table.column" strings from Hash/Merge Cond.
        sort_columns: Sort key columns, table prefix and direction removed.
        cost: Upper-bound cost of the anchor line.
        rows_estimate: Planner row estimate (0 if absent).
    """

    line: str
    operation_type: str
    table_name: str | None = None
    filter_columns: tuple[str, ...] = ()
    join_columns: tuple[str, ...] = ()
    sort_columns: tuple[str, ...] = ()
    cost: float = 0.0
    rows_estimate: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "line": self.line,
            "operation_type": self.operation_type,
            "table_name": self.table_name,
            "filter_columns": list(self.filter_columns),
            "join_columns": list(self.join_columns),
            "sort_columns": list(self.sort_columns),
            "cost": self.cost,
            "rows_estimate": self.rows_estimate,
        }


class IndexRecommendation(BaseModel):
    """
    A single CREATE INDEX suggestion.

    create_statement is derived from table_name, columns and index_type by
    the recommender; it is stored rather than computed so renderers and
    JSON consumers see exactly what was validated.
    """

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(..., description="Target table")
    columns: tuple[str, ...] = Field(..., description="Index columns, in order")
    index_type: str = Field(default="BTREE", description="Index access method")
    reason: str = Field(..., description="Why this index is suggested")
    operation_type: str = Field(..., description="Operation that triggered the suggestion")
    operation_cost: float = Field(..., ge=0, description="Cost of that operation")
    create_statement: str = Field(..., description="Ready-to-run CREATE INDEX statement")
    priority: int = Field(..., ge=1, le=5, description="Urgency, 1 (minimal) to 5 (critical)")
    rule: RecommendationRule = Field(..., description="Rule that produced the suggestion")

    @property
    def key(self) -> str:
        """Deduplication key: 'table:col1,col2'."""
        return f"{self.table_name}:{','.join(self.columns)}"

    @property
    def targets_system_schema(self) -> bool:
        return self.table_name.startswith(SYSTEM_SCHEMAS)


class IndexRecommendationInfo(BaseModel):
    """Sorted recommendations plus aggregate counts."""

    model_config = ConfigDict(frozen=True)

    recommendations: tuple[IndexRecommendation, ...] = Field(default_factory=tuple)
    threshold_used: float = Field(default=0.0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_found(self) -> int:
        return len(self.recommendations)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def high_priority(self) -> int:
        return sum(1 for rec in self.recommendations if rec.priority >= 4)

    def by_priority(self, priority: int) -> list[IndexRecommendation]:
        return [rec for rec in self.recommendations if rec.priority == priority]


# =============================================================================
# Plan comparison
# =============================================================================


class PlanComparison(BaseModel):
    """Total-cost comparison of two plans for the same intent."""

    model_config = ConfigDict(frozen=True)

    cost1: CostInfo
    cost2: CostInfo
    winner: Winner
    cost_diff: float = Field(..., description="cost1.total_cost - cost2.total_cost")
    cost_diff_pct: float = Field(
        default=0.0,
        description="cost_diff relative to cost2, in percent (0 when cost2 is 0)",
    )
    recommendation: str
