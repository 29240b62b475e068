"""
Index Recommendation Engine.

Turns the operation contexts found by the context walker into ranked
CREATE INDEX suggestions.

Technical approach:
1. Apply three independent rules per context:
   - filter: Seq Scan with Filter columns -> one index per column
   - join: Hash/Merge Join conditions -> one index per joined column
   - sort: Sort with keys on a known table -> one composite index
2. Validate each candidate (table present, no system schema, strict
   identifier columns)
3. Deduplicate on (table, columns); the first valid candidate wins
4. Score priority 1-5 and sort by priority, then operation cost

Priority is a monotone heuristic over cost tiers, row estimate and rule
kind. It is not a calibrated cost model: it orders suggestions, it does
not predict speedups.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pgexplain.analyzer.context import walk_plan
from pgexplain.analyzer.models import (
    IndexRecommendation,
    IndexRecommendationInfo,
    OperationContext,
    RecommendationRule,
)
from pgexplain.exceptions import check_threshold
from pgexplain.parser.models import PlanInput
from pgexplain.parser.patterns import IDENTIFIER_PATTERN, SYSTEM_SCHEMAS

logger = logging.getLogger(__name__)

DEFAULT_INDEX_TYPE = "BTREE"

# (exclusive lower bound on cost, priority), checked from the top down
COST_TIERS: tuple[tuple[float, int], ...] = (
    (10_000, 5),
    (5_000, 4),
    (1_000, 3),
    (500, 2),
)
HIGH_ROW_ESTIMATE = 100_000
MAX_PRIORITY = 5


def calculate_priority(cost: float, rows: int, rule: RecommendationRule) -> int:
    """
    Score a recommendation from 1 (minimal) to 5 (critical).

    Starts from the cost tier, then adds one for large row estimates and
    one for join-derived suggestions, capped at 5.

    Example:
        >>> calculate_priority(850.25, 10_000, RecommendationRule.JOIN)
        3
    """
    priority = 1
    for bound, tier in COST_TIERS:
        if cost > bound:
            priority = tier
            break

    if rows > HIGH_ROW_ESTIMATE:
        priority = min(MAX_PRIORITY, priority + 1)

    if rule == RecommendationRule.JOIN:
        priority = min(MAX_PRIORITY, priority + 1)

    return priority


def format_create_statement(
    table: str,
    columns: Iterable[str],
    index_type: str = DEFAULT_INDEX_TYPE,
) -> str:
    """
    Generate the CREATE INDEX statement: idx_<table>_<col1>_<col2>.

    Example:
        >>> format_create_statement("users", ["status"])
        'CREATE INDEX idx_users_status ON users USING BTREE (status);'
    """
    columns = list(columns)
    index_name = f"idx_{table}_{'_'.join(columns)}"
    return (
        f"CREATE INDEX {index_name} ON {table} "
        f"USING {index_type} ({', '.join(columns)});"
    )


def is_valid_recommendation(table: str, columns: Iterable[str]) -> bool:
    """Reject empty targets, system schemas and non-identifier columns."""
    columns = list(columns)
    if not table or not columns:
        return False
    if table.startswith(SYSTEM_SCHEMAS):
        return False
    return all(IDENTIFIER_PATTERN.match(col) for col in columns)


def sort_recommendations(recs: Iterable[IndexRecommendation]) -> list[IndexRecommendation]:
    """
    Order by priority, then operation cost, both descending.

    sorted() is stable, so exact ties keep their discovery order and a
    given input always yields the same ordering.
    """
    return sorted(recs, key=lambda r: (-r.priority, -r.operation_cost))


class IndexRecommender:
    """
    Generates index recommendations from operation contexts.

    Usage:
        recommender = IndexRecommender()
        info = recommender.analyze(walk_plan(plan, 100), threshold=100)

        for rec in info.recommendations:
            print(rec.create_statement)
    """

    def __init__(self, index_type: str = DEFAULT_INDEX_TYPE) -> None:
        self.index_type = index_type

    def analyze(
        self,
        contexts: Iterable[OperationContext],
        threshold: float = 100.0,
    ) -> IndexRecommendationInfo:
        """
        Apply the rules to every context and aggregate the result.

        The seen-key set lives only for this call; running the same
        contexts twice yields the same recommendations in the same order.
        """
        check_threshold(threshold, "index_threshold")

        seen: set[str] = set()
        accepted: list[IndexRecommendation] = []

        for ctx in contexts:
            for rec in self.analyze_context(ctx):
                if not is_valid_recommendation(rec.table_name, rec.columns):
                    logger.debug("Rejected invalid recommendation %s", rec.key)
                    continue
                if rec.key in seen:
                    logger.debug("Dropped duplicate recommendation %s", rec.key)
                    continue
                seen.add(rec.key)
                accepted.append(rec)

        return IndexRecommendationInfo(
            recommendations=tuple(sort_recommendations(accepted)),
            threshold_used=threshold,
        )

    def analyze_context(self, ctx: OperationContext) -> Iterator[IndexRecommendation]:
        """Yield unvalidated candidates for a single context, rule by rule."""
        yield from self._filter_rule(ctx)
        yield from self._join_rule(ctx)
        yield from self._sort_rule(ctx)

    def _filter_rule(self, ctx: OperationContext) -> Iterator[IndexRecommendation]:
        if "Seq Scan" not in ctx.operation_type or not ctx.filter_columns:
            return
        for column in ctx.filter_columns:
            yield self._recommend(
                ctx,
                table=ctx.table_name or "",
                columns=(column,),
                reason=f"Sequential scan with filter on '{column}'",
                rule=RecommendationRule.FILTER,
            )

    def _join_rule(self, ctx: OperationContext) -> Iterator[IndexRecommendation]:
        op = ctx.operation_type
        if ("Hash Join" not in op and "Merge Join" not in op) or not ctx.join_columns:
            return
        for pair in ctx.join_columns:
            table, sep, column = pair.partition(".")
            if not sep:
                continue
            yield self._recommend(
                ctx,
                table=table,
                columns=(column,),
                reason=f"Join condition on '{table}.{column}'",
                rule=RecommendationRule.JOIN,
            )

    def _sort_rule(self, ctx: OperationContext) -> Iterator[IndexRecommendation]:
        if "Sort" not in ctx.operation_type or not ctx.sort_columns or not ctx.table_name:
            return
        yield self._recommend(
            ctx,
            table=ctx.table_name,
            columns=ctx.sort_columns,
            reason=f"Expensive sort operation on {', '.join(ctx.sort_columns)}",
            rule=RecommendationRule.SORT,
        )

    def _recommend(
        self,
        ctx: OperationContext,
        table: str,
        columns: tuple[str, ...],
        reason: str,
        rule: RecommendationRule,
    ) -> IndexRecommendation:
        return IndexRecommendation(
            table_name=table,
            columns=columns,
            index_type=self.index_type,
            reason=reason,
            operation_type=ctx.operation_type,
            operation_cost=ctx.cost,
            create_statement=format_create_statement(table, columns, self.index_type),
            priority=calculate_priority(ctx.cost, ctx.rows_estimate, rule),
            rule=rule,
        )


def generate_recommendations(
    contexts: Iterable[OperationContext],
    threshold: float = 100.0,
) -> IndexRecommendationInfo:
    """Convenience function: run IndexRecommender over contexts."""
    return IndexRecommender().analyze(contexts, threshold)


def analyze_index_opportunities(plan: PlanInput, threshold: float = 100.0) -> IndexRecommendationInfo:
    """
    Walk a plan and generate recommendations in one step.

    Args:
        plan: Plan text, line sequence or PlanText.
        threshold: Minimum operation cost considered for indexing.
    """
    return generate_recommendations(walk_plan(plan, threshold), threshold)
