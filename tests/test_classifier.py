"""Tests for operation-type classification."""

from __future__ import annotations

import pytest

from pgexplain.analyzer.classifier import UNKNOWN_OPERATION, classify_operation


class TestVocabulary:
    """Known node types, matched by substring in fixed order."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("Seq Scan on users  (cost=0.00..1.00 rows=1 width=4)", "Seq Scan"),
            ("  ->  Hash Join  (cost=1.00..2.00 rows=1 width=4)", "Hash Join"),
            ("Merge Join  (cost=1.00..2.00 rows=1 width=4)", "Merge Join"),
            ("Nested Loop Left Join  (cost=1.00..2.00 rows=1 width=4)", "Nested Loop"),
            ("Index Only Scan using users_pkey on users", "Index Only Scan"),
            ("Finalize Aggregate  (cost=1.00..2.00 rows=1 width=8)", "Aggregate"),
            ("->  Hash  (cost=1.00..1.00 rows=1 width=4)", "Hash"),
            ("Materialize  (cost=0.00..1.00 rows=1 width=4)", "Materialize"),
        ],
    )
    def test_known_types(self, line: str, expected: str) -> None:
        assert classify_operation(line) == expected

    def test_earlier_entry_wins(self) -> None:
        """'Bitmap Index Scan' contains 'Index Scan', which is listed first."""
        assert classify_operation("->  Bitmap Index Scan on idx_users_status") == "Index Scan"

    def test_parallel_seq_scan_reports_seq_scan(self) -> None:
        assert classify_operation("->  Parallel Seq Scan on events") == "Seq Scan"

    def test_incremental_sort(self) -> None:
        assert classify_operation("Incremental Sort  (cost=1.00..2.00 rows=1 width=4)") == "Sort"

    def test_case_sensitive(self) -> None:
        assert classify_operation("seq scan on users") == "seq scan"


class TestFallback:
    """Unrecognized lines fall back to their leading words."""

    def test_first_two_tokens(self) -> None:
        assert classify_operation("Limit  (cost=0.00..1.00 rows=1 width=4)") == (
            "Limit (cost=0.00..1.00"
        )

    def test_single_token(self) -> None:
        assert classify_operation("  Result  ") == "Result"

    def test_empty_line(self) -> None:
        assert classify_operation("") == UNKNOWN_OPERATION

    def test_whitespace_line(self) -> None:
        assert classify_operation(" \t ") == UNKNOWN_OPERATION
