"""
Tests for cost extraction.

Covers the aggregate (running maximum, never a sum), the expensive
operation list and the threshold semantics, including the threshold-0
quirk where exceeds_limit is always true.
"""

from __future__ import annotations

import pytest

from pgexplain.analyzer.cost import extract_costs
from pgexplain.exceptions import InvalidArgumentError
from pgexplain.parser import PlanText

from plans import HASH_JOIN_PLAN, SEQ_SCAN_PLAN


class TestTotalCost:
    """total_cost is the largest upper-bound cost on any line."""

    def test_single_node(self) -> None:
        info = extract_costs(SEQ_SCAN_PLAN, threshold=100)

        assert info.total_cost == 425.50

    def test_maximum_not_sum(self) -> None:
        """Child costs never add up into the total."""
        info = extract_costs(HASH_JOIN_PLAN, threshold=100)

        assert info.total_cost == 850.25

    def test_startup_cost_ignored(self) -> None:
        info = extract_costs(" Sort  (cost=9000.00..10.00 rows=1 width=4)", threshold=1)

        assert info.total_cost == 10.0

    def test_no_cost_annotations(self) -> None:
        info = extract_costs("QUERY PLAN\n----------\n(0 rows)", threshold=10)

        assert info.total_cost == 0
        assert info.expensive_ops == ()
        assert info.exceeds_limit is False

    def test_integer_costs(self) -> None:
        info = extract_costs(" Result  (cost=0..42 rows=1 width=4)", threshold=1)

        assert info.total_cost == 42.0


class TestExpensiveOperations:
    """Lines at or above the threshold, in plan order."""

    def test_all_ops_meet_threshold(self) -> None:
        threshold = 150
        info = extract_costs(HASH_JOIN_PLAN, threshold=threshold)

        assert info.expensive_ops
        assert all(op.cost >= threshold for op in info.expensive_ops)

    def test_plan_order_preserved(self) -> None:
        info = extract_costs(HASH_JOIN_PLAN, threshold=100)

        assert [op.cost for op in info.expensive_ops] == [850.25, 500.0, 100.0, 100.0]
        assert [op.operation_type for op in info.expensive_ops] == [
            "Hash Join",
            "Seq Scan",
            "Hash",
            "Seq Scan",
        ]

    def test_boundary_is_inclusive(self) -> None:
        info = extract_costs(HASH_JOIN_PLAN, threshold=500)

        assert [op.cost for op in info.expensive_ops] == [850.25, 500.0]

    def test_lines_are_trimmed(self) -> None:
        info = extract_costs(SEQ_SCAN_PLAN, threshold=1)

        assert info.expensive_ops[0].line == (
            "Seq Scan on users  (cost=0.00..425.50 rows=1000 width=100)"
        )


class TestThreshold:
    """exceeds_limit and the alert helpers."""

    def test_exceeds(self) -> None:
        info = extract_costs(HASH_JOIN_PLAN, threshold=800)

        assert info.exceeds_limit is True
        assert info.should_alert is True
        assert info.exceeded_by == pytest.approx(50.25)

    def test_below(self) -> None:
        info = extract_costs(HASH_JOIN_PLAN, threshold=1000)

        assert info.exceeds_limit is False
        assert info.should_alert is False
        assert info.threshold_value == 1000

    def test_equal_total_exceeds(self) -> None:
        info = extract_costs(SEQ_SCAN_PLAN, threshold=425.5)

        assert info.exceeds_limit is True

    def test_zero_threshold_always_exceeds(self) -> None:
        """Threshold 0 reports exceeds_limit even for an empty plan."""
        info = extract_costs("", threshold=0)

        assert info.exceeds_limit is True
        assert info.alert_enabled is False
        assert info.should_alert is False

    def test_zero_threshold_lists_every_costed_line(self) -> None:
        info = extract_costs(HASH_JOIN_PLAN, threshold=0)

        assert len(info.expensive_ops) == 4

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            extract_costs(SEQ_SCAN_PLAN, threshold=-1)

        assert exc_info.value.argument == "threshold"

    def test_nan_threshold_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            extract_costs(SEQ_SCAN_PLAN, threshold=float("nan"))

        assert exc_info.value.argument == "threshold"


class TestInputs:
    """Strings, line sequences and PlanText all work the same."""

    def test_line_list(self) -> None:
        lines = SEQ_SCAN_PLAN.splitlines()

        assert extract_costs(lines, 100) == extract_costs(SEQ_SCAN_PLAN, 100)

    def test_plan_text(self) -> None:
        plan = PlanText.from_string(HASH_JOIN_PLAN)

        assert extract_costs(plan, 100) == extract_costs(HASH_JOIN_PLAN, 100)

    def test_idempotent(self) -> None:
        assert extract_costs(HASH_JOIN_PLAN, 100) == extract_costs(HASH_JOIN_PLAN, 100)
