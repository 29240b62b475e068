"""
Line-level model for PostgreSQL EXPLAIN text output.

The planner's text format is a tree drawn with indentation:

     QUERY PLAN
    ----------------------------------------------------------------
     Hash Join  (cost=125.00..850.25 rows=10000 width=100)
       Hash Cond: (orders.user_id = users.id)
       ->  Seq Scan on orders  (cost=0.00..500.00 rows=20000 width=50)

PlanText keeps the lines exactly as given (leading whitespace is the only
depth signal) and offers the per-line extractors shared by the cost
extractor and the context walker. Nothing here builds a tree.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pgexplain.parser.patterns import (
    COST_PATTERN,
    ERROR_PREFIXES,
    INDENT_PREFIXES,
    ROWS_PATTERN,
    TABLE_NAME_PATTERN,
)


@dataclass(frozen=True)
class PlanText:
    """
    Immutable, ordered sequence of plan lines.

    Attributes:
        lines: Raw lines, leading whitespace preserved.
    """

    lines: tuple[str, ...] = ()

    @classmethod
    def from_string(cls, text: str) -> "PlanText":
        """Split raw plan text on newlines (a trailing "\\r" is dropped)."""
        return cls(lines=tuple(line.rstrip("\r") for line in text.split("\n")))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "PlanText":
        return cls(lines=tuple(lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_analyzable(self) -> bool:
        """
        False for empty input or psql/server error output.

        Consumers must treat a non-analyzable plan as "no content" and
        never hand it to the analyzers.
        """
        for line in self.lines:
            stripped = line.strip()
            if not stripped:
                continue
            return not stripped.startswith(ERROR_PREFIXES)
        return False


PlanInput = PlanText | str | Iterable[str]


def as_plan_text(plan: PlanInput) -> PlanText:
    """Coerce a string, line sequence or PlanText into PlanText."""
    if isinstance(plan, PlanText):
        return plan
    if isinstance(plan, str):
        return PlanText.from_string(plan)
    return PlanText.from_lines(plan)


def parse_line_cost(line: str) -> float | None:
    """
    Return the upper-bound cost of a line, or None.

    None covers both "no cost annotation" and "annotation whose number
    does not parse"; either way the line contributes nothing.
    """
    match = COST_PATTERN.search(line)
    if not match:
        return None
    try:
        return float(match.group(2))
    except ValueError:
        return None


def parse_line_rows(line: str) -> int:
    """Planner row estimate from ``rows=<n>``, 0 when absent."""
    match = ROWS_PATTERN.search(line)
    if not match:
        return 0
    return int(match.group(1))


def parse_table_name(line: str) -> str | None:
    """Table name from a ``<ScanKind> on <table>`` line."""
    match = TABLE_NAME_PATTERN.search(line)
    return match.group(1) if match else None


def is_indented(line: str) -> bool:
    """
    Whether a line still belongs to the current node's child block.

    Two spaces or a tab count as indented; a single leading space does not.
    """
    return line.startswith(INDENT_PREFIXES)
