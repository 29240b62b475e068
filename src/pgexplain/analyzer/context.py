"""
Plan context walker: gathers index-relevant annotations per costly node.

For every plan line whose cost meets the index threshold, the walker reads
the following lines looking for the node's annotations:

    ->  Seq Scan on users  (cost=0.00..425.50 rows=1000 width=100)   <- anchor
          Filter: (status = 'active'::text)                          <- window
    ->  Hash  (cost=...)

The window is a heuristic stand-in for a real tree parse. It covers at
most LOOKAHEAD_LINES lines and closes at the first line that is not
indented (two spaces or a tab). Annotations that belong to a child node
inside the window are attributed to the anchor; that imprecision is
accepted in exchange for exact parity with the line-based output.
"""

from __future__ import annotations

import logging

from pgexplain.analyzer.classifier import classify_operation
from pgexplain.analyzer.models import OperationContext
from pgexplain.exceptions import check_threshold
from pgexplain.parser.models import (
    PlanInput,
    as_plan_text,
    is_indented,
    parse_line_cost,
    parse_line_rows,
    parse_table_name,
)
from pgexplain.parser.patterns import (
    FILTER_COLUMN_PATTERN,
    FILTER_PATTERN,
    HASH_COND_PATTERN,
    JOIN_COLUMN_PATTERN,
    MERGE_COND_PATTERN,
    SORT_KEY_PATTERN,
)

logger = logging.getLogger(__name__)

LOOKAHEAD_LINES = 4


def walk_plan(plan: PlanInput, threshold: float = 100.0) -> tuple[OperationContext, ...]:
    """
    Collect an OperationContext for every line with cost >= threshold.

    Args:
        plan: Plan text, line sequence or PlanText.
        threshold: Non-negative minimum cost for a line to be analyzed.

    Returns:
        Contexts in the scan order of their anchor lines.

    Raises:
        InvalidArgumentError: If threshold is negative.
    """
    check_threshold(threshold, "index_threshold")
    lines = as_plan_text(plan).lines
    contexts: list[OperationContext] = []

    for i, line in enumerate(lines):
        if not line.strip():
            continue

        cost = parse_line_cost(line)
        if cost is None or cost < threshold:
            continue

        window = lines[i + 1 : i + 1 + LOOKAHEAD_LINES]
        contexts.append(_build_context(line, cost, window))

    logger.debug(
        "Context walk: %d lines, %d context(s) at threshold %.2f",
        len(lines), len(contexts), threshold,
    )
    return tuple(contexts)


def _build_context(line: str, cost: float, window: tuple[str, ...]) -> OperationContext:
    filter_columns: list[str] = []
    join_columns: list[str] = []
    sort_columns: list[str] = []

    for child in window:
        if not is_indented(child):
            break

        for column in extract_filter_columns(child):
            if column not in filter_columns:
                filter_columns.append(column)

        join_columns.extend(extract_join_columns(child))
        sort_columns.extend(extract_sort_columns(child))

    return OperationContext(
        line=line.strip(),
        operation_type=classify_operation(line),
        table_name=parse_table_name(line),
        filter_columns=tuple(filter_columns),
        join_columns=tuple(join_columns),
        sort_columns=tuple(sort_columns),
        cost=cost,
        rows_estimate=parse_line_rows(line),
    )


def extract_filter_columns(line: str) -> list[str]:
    """
    Identifiers compared inside a ``Filter: (...)`` annotation.

    May contain duplicates; the caller deduplicates across the window.
    """
    match = FILTER_PATTERN.search(line)
    if not match:
        return []
    return FILTER_COLUMN_PATTERN.findall(match.group(1))


def extract_join_columns(line: str) -> list[str]:
    """
    "table.column" pairs from a Hash Cond or Merge Cond of the form a.b = c.d.

    Both condition kinds are checked independently, matching how the
    planner never prints both on one line.
    """
    columns: list[str] = []
    for pattern in (HASH_COND_PATTERN, MERGE_COND_PATTERN):
        cond = pattern.search(line)
        if not cond:
            continue
        pair = JOIN_COLUMN_PATTERN.search(cond.group(1))
        if pair:
            left_table, left_col, right_table, right_col = pair.groups()
            columns.append(f"{left_table}.{left_col}")
            columns.append(f"{right_table}.{right_col}")
    return columns


def extract_sort_columns(line: str) -> list[str]:
    """
    Column names from a ``Sort Key:`` annotation, in listed order.

    Trailing " DESC"/" ASC" is stripped and "table.column" keeps only the
    column. Anything else (expressions, NULLS FIRST) is passed through and
    later rejected by identifier validation.
    """
    match = SORT_KEY_PATTERN.search(line)
    if not match:
        return []

    columns: list[str] = []
    for key in match.group(1).split(","):
        key = key.strip().removesuffix(" DESC").removesuffix(" ASC")
        if "." in key:
            columns.append(key.split(".")[1])
        else:
            columns.append(key)
    return columns
