"""EXPLAIN text loading and line-level extraction."""

from pgexplain.parser.config import DEFAULT_CONFIG, STRICT_CONFIG, ParserConfig
from pgexplain.parser.models import PlanInput, PlanText, as_plan_text
from pgexplain.parser.parser import load_plan, load_plan_file, load_plan_stream

__all__ = [
    "PlanText",
    "PlanInput",
    "as_plan_text",
    "load_plan",
    "load_plan_file",
    "load_plan_stream",
    "ParserConfig",
    "DEFAULT_CONFIG",
    "STRICT_CONFIG",
]
