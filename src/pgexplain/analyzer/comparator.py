"""Total-cost comparison of two plans for the same query intent."""

from __future__ import annotations

import logging

from pgexplain.analyzer.cost import extract_costs
from pgexplain.analyzer.models import PlanComparison, Winner
from pgexplain.parser.models import PlanInput

logger = logging.getLogger(__name__)

WINNER_ADVICE = "{winner} is more efficient. Consider using this approach."
TIE_ADVICE = "Both queries have similar costs. Choose based on readability and maintainability."


def compare_plans(plan1: PlanInput, plan2: PlanInput) -> PlanComparison:
    """
    Compare two plans by total cost; the cheaper one wins.

    Both plans are scored with threshold 0, so every costed line is listed
    in expensive_ops. cost_diff_pct is relative to plan2 and is 0 when
    plan2 has no cost at all.

    Example:
        >>> result = compare_plans("Seq Scan on t  (cost=0.00..200.00 rows=1 width=4)",
        ...                        "Index Scan on t  (cost=0.00..50.00 rows=1 width=4)")
        >>> result.winner.value, result.cost_diff, result.cost_diff_pct
        ('Query 2', 150.0, 300.0)
    """
    cost1 = extract_costs(plan1, threshold=0.0)
    cost2 = extract_costs(plan2, threshold=0.0)

    diff = cost1.total_cost - cost2.total_cost
    pct = diff / cost2.total_cost * 100 if cost2.total_cost > 0 else 0.0

    if cost1.total_cost < cost2.total_cost:
        winner = Winner.QUERY_1
    elif cost2.total_cost < cost1.total_cost:
        winner = Winner.QUERY_2
    else:
        winner = Winner.TIE

    advice = TIE_ADVICE if winner == Winner.TIE else WINNER_ADVICE.format(winner=winner.value)
    logger.debug("Compared plans: %.2f vs %.2f -> %s", cost1.total_cost, cost2.total_cost, winner.value)

    return PlanComparison(
        cost1=cost1,
        cost2=cost2,
        winner=winner,
        cost_diff=diff,
        cost_diff_pct=pct,
        recommendation=advice,
    )
