"""
AnalysisService - orchestration layer for pgexplain.

This is the single entry point for analysing plans. The CLI and any
embedding application use this service rather than wiring the cost
extractor and the index recommender together themselves.

Usage:
    from pgexplain.engine import AnalysisService

    service = AnalysisService()

    # Single plan, thresholds from config
    report = service.analyze(plan_text)

    # Explicit thresholds
    report = service.analyze(plan_text, threshold=1000, recommend_indexes=True)

    # Several captured plans
    batch = service.analyze_batch([("q1", Path("q1.txt")), ("q2", plan_text)])

    # Two plans for the same intent
    comparison = service.compare(plan_a, plan_b)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pgexplain.analyzer.comparator import compare_plans
from pgexplain.analyzer.cost import extract_costs
from pgexplain.analyzer.index_advisor import analyze_index_opportunities
from pgexplain.analyzer.models import CostInfo, IndexRecommendationInfo, PlanComparison
from pgexplain.config import Config, get_config
from pgexplain.exceptions import PlanSourceError, check_threshold
from pgexplain.parser.models import PlanInput, PlanText, as_plan_text
from pgexplain.parser.parser import load_plan

logger = logging.getLogger(__name__)

NOT_ANALYZABLE = "Plan is empty or contains psql/server error output"


@dataclass(frozen=True)
class AnalysisReport:
    """
    Result of analysing one plan.

    cost_info is None when the cost alert was disabled (threshold 0) and
    index_info is None when recommendations were not requested. error is
    set instead of both when the plan could not be analysed.
    """

    plan: PlanText
    cost_info: CostInfo | None = None
    index_info: IndexRecommendationInfo | None = None
    title: str | None = None
    query: str | None = None
    source: str | None = None
    error: str | None = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exceeds_threshold(self) -> bool:
        """Whether the cost alert fires (never when the alert is disabled)."""
        return self.cost_info is not None and self.cost_info.should_alert

    @property
    def recommendation_count(self) -> int:
        return self.index_info.total_found if self.index_info else 0


@dataclass(frozen=True)
class BatchReport:
    """
    Report for a batch of analyses.

    Reports are independent; this class only aggregates them.
    """

    reports: tuple[AnalysisReport, ...] = ()

    @property
    def total(self) -> int:
        return len(self.reports)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.reports if r.ok)

    @property
    def failure_count(self) -> int:
        return self.total - self.success_count

    @property
    def exceeding_count(self) -> int:
        return sum(1 for r in self.reports if r.exceeds_threshold)

    @property
    def has_failures(self) -> bool:
        return self.failure_count > 0

    def to_summary_dict(self) -> dict[str, Any]:
        """Export summary as dictionary for JSON output."""
        return {
            "total": self.total,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "exceeding_count": self.exceeding_count,
        }


class AnalysisService:
    """
    Orchestrates cost and index analysis for plans.

    Arguments left as None fall back to the configuration, so command-line
    flags can override config values simply by being passed.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def analyze(
        self,
        plan: PlanInput,
        threshold: float | None = None,
        index_threshold: float | None = None,
        recommend_indexes: bool | None = None,
        title: str | None = None,
        query: str | None = None,
        source: str | None = None,
    ) -> AnalysisReport:
        """
        Analyse a single plan.

        Cost analysis runs only for a threshold above 0; index analysis
        runs only when enabled. A non-analyzable plan yields a report with
        error set rather than raising.

        Raises:
            InvalidArgumentError: If a threshold is negative.
        """
        threshold = check_threshold(
            self.config.threshold if threshold is None else threshold
        )
        index_threshold = check_threshold(
            self.config.index_threshold if index_threshold is None else index_threshold,
            "index_threshold",
        )
        if recommend_indexes is None:
            recommend_indexes = self.config.recommend_indexes

        plan_text = as_plan_text(plan)

        if not plan_text.is_analyzable:
            logger.debug("Skipping non-analyzable plan %s", source or "<input>")
            return AnalysisReport(
                plan=plan_text, title=title, query=query, source=source, error=NOT_ANALYZABLE
            )

        cost_info = extract_costs(plan_text, threshold) if threshold > 0 else None
        index_info = (
            analyze_index_opportunities(plan_text, index_threshold)
            if recommend_indexes
            else None
        )

        return AnalysisReport(
            plan=plan_text,
            cost_info=cost_info,
            index_info=index_info,
            title=title,
            query=query,
            source=source,
        )

    def analyze_batch(
        self,
        plans: Iterable[tuple[str, PlanInput | Path]],
        threshold: float | None = None,
        index_threshold: float | None = None,
        recommend_indexes: bool | None = None,
        continue_on_error: bool = True,
    ) -> BatchReport:
        """
        Analyse several plans independently.

        Args:
            plans: (plan_id, plan) pairs; a Path value is read from disk.
            continue_on_error: When False, stop after the first failed plan.
        """
        reports: list[AnalysisReport] = []

        for plan_id, plan in plans:
            if isinstance(plan, Path):
                try:
                    plan = load_plan(plan)
                except PlanSourceError as e:
                    logger.warning("Failed to load %s: %s", plan_id, e.message)
                    reports.append(
                        AnalysisReport(plan=PlanText(), title=plan_id, source=plan_id, error=e.message)
                    )
                    if not continue_on_error:
                        break
                    continue

            report = self.analyze(
                plan,
                threshold=threshold,
                index_threshold=index_threshold,
                recommend_indexes=recommend_indexes,
                title=plan_id,
                source=plan_id,
            )
            reports.append(report)

            if not report.ok:
                logger.warning("Failed to analyze %s: %s", plan_id, report.error)
                if not continue_on_error:
                    break

        batch = BatchReport(reports=tuple(reports))
        logger.debug("Batch finished: %s", batch.to_summary_dict())
        return batch

    def compare(self, plan1: PlanInput, plan2: PlanInput) -> PlanComparison:
        """Compare the total cost of two plans."""
        return compare_plans(plan1, plan2)
