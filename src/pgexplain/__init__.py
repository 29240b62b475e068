"""pgexplain - cost alerts and index recommendations from PostgreSQL EXPLAIN text."""

__version__ = "0.1.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from pgexplain.exceptions import (
    PgExplainError,
    InvalidArgumentError,
    ConfigurationError,
    PlanSourceError,
)

# Public API exports
from pgexplain.analyzer import (
    CostInfo,
    ExpensiveOperation,
    IndexRecommendation,
    IndexRecommendationInfo,
    OperationContext,
    PlanComparison,
    RecommendationRule,
    Winner,
    analyze_index_opportunities,
    classify_operation,
    compare_plans,
    extract_costs,
    generate_recommendations,
    walk_plan,
)
from pgexplain.config import Config, get_config, reset_config
from pgexplain.engine import AnalysisReport, AnalysisService, BatchReport
from pgexplain.parser import PlanText, load_plan, load_plan_file

__all__ = [
    "__version__",
    # Exceptions
    "PgExplainError",
    "InvalidArgumentError",
    "ConfigurationError",
    "PlanSourceError",
    # Plan input
    "PlanText",
    "load_plan",
    "load_plan_file",
    # Analysis
    "extract_costs",
    "classify_operation",
    "walk_plan",
    "generate_recommendations",
    "analyze_index_opportunities",
    "compare_plans",
    # Models
    "CostInfo",
    "ExpensiveOperation",
    "OperationContext",
    "IndexRecommendation",
    "IndexRecommendationInfo",
    "PlanComparison",
    "RecommendationRule",
    "Winner",
    # Orchestration
    "AnalysisService",
    "AnalysisReport",
    "BatchReport",
    # Configuration
    "Config",
    "get_config",
    "reset_config",
]
