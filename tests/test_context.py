"""
Tests for the plan context walker.

The lookahead window is a heuristic: at most four following lines, closed
by the first line not indented with two spaces or a tab. These tests pin
that boundary down exactly.
"""

from __future__ import annotations

import pytest

from pgexplain.analyzer.context import (
    LOOKAHEAD_LINES,
    extract_filter_columns,
    extract_join_columns,
    extract_sort_columns,
    walk_plan,
)
from pgexplain.exceptions import InvalidArgumentError

from plans import HASH_JOIN_PLAN, SEQ_SCAN_PLAN

ANCHOR = "Seq Scan on items  (cost=0.00..200.00 rows=500 width=8)"


def plan(*lines: str) -> str:
    return "\n".join(lines)


class TestWalk:
    """Which lines become contexts, and what they carry."""

    def test_seq_scan_context(self) -> None:
        (ctx,) = walk_plan(SEQ_SCAN_PLAN, threshold=100)

        assert ctx.operation_type == "Seq Scan"
        assert ctx.table_name == "users"
        assert ctx.filter_columns == ("status",)
        assert ctx.cost == 425.50
        assert ctx.rows_estimate == 1000
        assert ctx.line.startswith("Seq Scan on users")

    def test_threshold_filters_anchors(self) -> None:
        contexts = walk_plan(HASH_JOIN_PLAN, threshold=500)

        assert [c.operation_type for c in contexts] == ["Hash Join", "Seq Scan"]

    def test_anchor_order(self) -> None:
        contexts = walk_plan(HASH_JOIN_PLAN, threshold=100)

        assert [c.cost for c in contexts] == [850.25, 500.0, 100.0, 100.0]

    def test_join_context(self) -> None:
        ctx = walk_plan(HASH_JOIN_PLAN, threshold=100)[0]

        assert ctx.join_columns == ("orders.user_id", "users.id")
        assert ctx.table_name is None

    def test_no_costs_no_contexts(self) -> None:
        assert walk_plan("QUERY PLAN\n  Filter: (a = 1)", threshold=0) == ()

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            walk_plan(SEQ_SCAN_PLAN, threshold=-5)

        assert exc_info.value.argument == "index_threshold"

    def test_nan_threshold_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            walk_plan(SEQ_SCAN_PLAN, threshold=float("nan"))

    def test_missing_rows_estimate(self) -> None:
        (ctx,) = walk_plan("Seq Scan on t  (cost=0.00..200.00)", threshold=100)

        assert ctx.rows_estimate == 0


class TestWindowBoundary:
    """Indentation rules for the lookahead window."""

    def test_two_spaces_are_indented(self) -> None:
        (ctx,) = walk_plan(plan(ANCHOR, "  Filter: (price > 10)"), threshold=100)

        assert ctx.filter_columns == ("price",)

    def test_tab_is_indented(self) -> None:
        (ctx,) = walk_plan(plan(ANCHOR, "\tFilter: (price > 10)"), threshold=100)

        assert ctx.filter_columns == ("price",)

    def test_single_space_closes_window(self) -> None:
        (ctx,) = walk_plan(plan(ANCHOR, " Filter: (price > 10)"), threshold=100)

        assert ctx.filter_columns == ()

    def test_unindented_line_closes_window(self) -> None:
        contexts = walk_plan(
            plan(ANCHOR, "Limit", "  Filter: (price > 10)"),
            threshold=100,
        )

        assert contexts[0].filter_columns == ()

    def test_fourth_line_is_inside(self) -> None:
        padding = ["  Output: id"] * (LOOKAHEAD_LINES - 1)
        (ctx,) = walk_plan(plan(ANCHOR, *padding, "  Filter: (price > 10)"), threshold=100)

        assert ctx.filter_columns == ("price",)

    def test_fifth_line_is_outside(self) -> None:
        padding = ["  Output: id"] * LOOKAHEAD_LINES
        (ctx,) = walk_plan(plan(ANCHOR, *padding, "  Filter: (price > 10)"), threshold=100)

        assert ctx.filter_columns == ()

    def test_window_shorter_at_end_of_plan(self) -> None:
        (ctx,) = walk_plan(ANCHOR, threshold=100)

        assert ctx.filter_columns == ()

    def test_filter_columns_deduplicated_across_window(self) -> None:
        (ctx,) = walk_plan(
            plan(ANCHOR, "  Filter: (price > 10)", "  Filter: (qty < 5 AND price <> 0)"),
            threshold=100,
        )

        assert ctx.filter_columns == ("price", "qty")

    def test_blank_lines_never_anchor(self) -> None:
        contexts = walk_plan(plan("", "   ", ANCHOR), threshold=0)

        assert len(contexts) == 1


class TestFilterColumns:
    """Identifiers followed by a comparison operator."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("  Filter: (status = 'active'::text)", ["status"]),
            ("  Filter: (age >= 18)", ["age"]),
            ("  Filter: (name ~~ 'A%'::text)", ["name"]),
            ("  Filter: (deleted_at IS NULL)", ["deleted_at"]),
            ("  Filter: (a = 1 AND b < 2)", ["a", "b"]),
        ],
    )
    def test_columns(self, line: str, expected: list[str]) -> None:
        assert extract_filter_columns(line) == expected

    def test_duplicates_kept_per_line(self) -> None:
        assert extract_filter_columns("  Filter: (a > 1 AND a < 9)") == ["a", "a"]

    def test_rows_removed_is_not_a_filter(self) -> None:
        assert extract_filter_columns("  Rows Removed by Filter: 1234") == []

    def test_no_filter(self) -> None:
        assert extract_filter_columns("  Output: id, name") == []


class TestJoinColumns:
    """Hash Cond and Merge Cond of the form a.b = c.d."""

    def test_hash_cond(self) -> None:
        assert extract_join_columns("  Hash Cond: (orders.user_id = users.id)") == [
            "orders.user_id",
            "users.id",
        ]

    def test_merge_cond(self) -> None:
        assert extract_join_columns("  Merge Cond: (a.id = b.a_id)") == ["a.id", "b.a_id"]

    def test_unqualified_condition_ignored(self) -> None:
        assert extract_join_columns("  Hash Cond: (user_id = id)") == []


class TestSortColumns:
    """Sort Key lists."""

    def test_prefix_and_direction_removed(self) -> None:
        line = "  Sort Key: orders.created_at DESC, orders.id"

        assert extract_sort_columns(line) == ["created_at", "id"]

    def test_asc(self) -> None:
        assert extract_sort_columns("  Sort Key: name ASC") == ["name"]

    def test_mixed_directions(self) -> None:
        line = "  Sort Key: t.created_at DESC, t.updated_at ASC, description"

        assert extract_sort_columns(line) == ["created_at", "updated_at", "description"]

    def test_expression_passed_through(self) -> None:
        assert extract_sort_columns("  Sort Key: (lower(name))") == ["(lower(name))"]

    def test_sort_key_collected_by_walker(self) -> None:
        (ctx,) = walk_plan(
            plan("Sort  (cost=1200.00..1250.00 rows=20000 width=50)", "  Sort Key: a.x, a.y DESC"),
            threshold=100,
        )

        assert ctx.operation_type == "Sort"
        assert ctx.sort_columns == ("x", "y")
