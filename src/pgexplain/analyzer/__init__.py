"""
Plan analyzers: cost extraction, context walking, index recommendations.

The cost path and the index path share no state:

    PlanText -> extract_costs -> CostInfo
    PlanText -> walk_plan -> generate_recommendations -> IndexRecommendationInfo
"""

from pgexplain.analyzer.classifier import UNKNOWN_OPERATION, classify_operation
from pgexplain.analyzer.comparator import compare_plans
from pgexplain.analyzer.context import walk_plan
from pgexplain.analyzer.cost import extract_costs
from pgexplain.analyzer.index_advisor import (
    IndexRecommender,
    analyze_index_opportunities,
    calculate_priority,
    format_create_statement,
    generate_recommendations,
)
from pgexplain.analyzer.models import (
    CostInfo,
    ExpensiveOperation,
    IndexRecommendation,
    IndexRecommendationInfo,
    OperationContext,
    PlanComparison,
    RecommendationRule,
    Winner,
)

__all__ = [
    "UNKNOWN_OPERATION",
    "classify_operation",
    "compare_plans",
    "walk_plan",
    "extract_costs",
    "IndexRecommender",
    "analyze_index_opportunities",
    "calculate_priority",
    "format_create_statement",
    "generate_recommendations",
    "CostInfo",
    "ExpensiveOperation",
    "IndexRecommendation",
    "IndexRecommendationInfo",
    "OperationContext",
    "PlanComparison",
    "RecommendationRule",
    "Winner",
]
