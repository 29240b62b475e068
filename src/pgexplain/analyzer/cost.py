"""
Cost extraction from EXPLAIN text output.

Scans every line for a ``cost=<startup>..<total>`` annotation and keeps:
- the running maximum total cost (the query's cost, since the root node
  carries the largest estimate; this is a max, never a sum)
- every line whose total cost meets the threshold, in plan order

Lines without an annotation, or with one whose numbers do not parse, are
skipped. Nothing here raises on plan content.
"""

from __future__ import annotations

import logging

from pgexplain.analyzer.classifier import classify_operation
from pgexplain.analyzer.models import CostInfo, ExpensiveOperation
from pgexplain.exceptions import check_threshold
from pgexplain.parser.models import PlanInput, as_plan_text, parse_line_cost

logger = logging.getLogger(__name__)


def extract_costs(plan: PlanInput, threshold: float = 0.0) -> CostInfo:
    """
    Build CostInfo for a plan.

    Args:
        plan: Plan text, line sequence or PlanText.
        threshold: Non-negative alert threshold. 0 means "alert disabled",
            but exceeds_limit is still computed as total_cost >= 0, i.e.
            always true; use CostInfo.should_alert for display decisions.

    Raises:
        InvalidArgumentError: If threshold is negative.

    Example:
        >>> info = extract_costs("Seq Scan on t  (cost=0.00..35.50 rows=2550 width=4)", 10)
        >>> info.total_cost, info.exceeds_limit
        (35.5, True)
    """
    check_threshold(threshold)
    lines = as_plan_text(plan)

    total_cost = 0.0
    expensive_ops: list[ExpensiveOperation] = []

    for line in lines:
        cost = parse_line_cost(line)
        if cost is None:
            continue

        total_cost = max(total_cost, cost)

        if cost >= threshold:
            expensive_ops.append(
                ExpensiveOperation(
                    operation_type=classify_operation(line),
                    cost=cost,
                    line=line.strip(),
                )
            )

    logger.debug(
        "Cost scan: %d lines, total_cost=%.2f, %d expensive op(s) at threshold %.2f",
        len(lines), total_cost, len(expensive_ops), threshold,
    )

    return CostInfo(
        total_cost=total_cost,
        expensive_ops=tuple(expensive_ops),
        exceeds_limit=total_cost >= threshold,
        threshold_value=threshold,
    )
