"""
Tests for AnalysisService orchestration.

Covers config fallbacks, the threshold-0 "disabled" convention,
non-analyzable input and batch aggregation.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pgexplain.config import Config
from pgexplain.engine import NOT_ANALYZABLE, AnalysisService, BatchReport
from pgexplain.exceptions import InvalidArgumentError

from plans import HASH_JOIN_PLAN, PSQL_ERROR_OUTPUT, SEQ_SCAN_PLAN


@pytest.fixture
def service() -> AnalysisService:
    return AnalysisService(Config())


class TestAnalyze:
    """Single-plan analysis."""

    def test_defaults_run_nothing(self, service: AnalysisService) -> None:
        """Threshold 0 and no --recommend-indexes: nothing to compute."""
        report = service.analyze(HASH_JOIN_PLAN)

        assert report.ok
        assert report.cost_info is None
        assert report.index_info is None
        assert report.exceeds_threshold is False

    def test_cost_analysis(self, service: AnalysisService) -> None:
        report = service.analyze(HASH_JOIN_PLAN, threshold=800)

        assert report.cost_info is not None
        assert report.cost_info.total_cost == 850.25
        assert report.exceeds_threshold is True

    def test_index_analysis(self, service: AnalysisService) -> None:
        report = service.analyze(HASH_JOIN_PLAN, recommend_indexes=True)

        assert report.index_info is not None
        assert report.index_info.threshold_used == 100.0
        assert report.recommendation_count == 2

    def test_config_fallbacks(self) -> None:
        service = AnalysisService(
            Config(threshold=1000, index_threshold=50, recommend_indexes=True)
        )
        report = service.analyze(SEQ_SCAN_PLAN)

        assert report.cost_info is not None
        assert report.cost_info.threshold_value == 1000
        assert report.exceeds_threshold is False
        assert report.index_info is not None
        assert report.index_info.threshold_used == 50

    def test_arguments_override_config(self) -> None:
        service = AnalysisService(Config(threshold=1000, recommend_indexes=True))
        report = service.analyze(SEQ_SCAN_PLAN, threshold=0, recommend_indexes=False)

        assert report.cost_info is None
        assert report.index_info is None

    def test_metadata_carried(self, service: AnalysisService) -> None:
        report = service.analyze(
            SEQ_SCAN_PLAN, title="active_users", query="SELECT 1", source="plan.txt"
        )

        assert report.title == "active_users"
        assert report.query == "SELECT 1"
        assert report.source == "plan.txt"
        assert report.generated_at.tzinfo is not None

    def test_psql_error_output(self, service: AnalysisService) -> None:
        report = service.analyze(PSQL_ERROR_OUTPUT, threshold=100, recommend_indexes=True)

        assert not report.ok
        assert report.error == NOT_ANALYZABLE
        assert report.cost_info is None
        assert report.index_info is None

    def test_empty_plan(self, service: AnalysisService) -> None:
        assert service.analyze("   \n\n").error == NOT_ANALYZABLE

    def test_negative_threshold(self, service: AnalysisService) -> None:
        with pytest.raises(InvalidArgumentError):
            service.analyze(SEQ_SCAN_PLAN, threshold=-1)

    def test_negative_index_threshold(self, service: AnalysisService) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.analyze(SEQ_SCAN_PLAN, index_threshold=-1, recommend_indexes=True)

        assert exc_info.value.argument == "index_threshold"

    @pytest.mark.parametrize("argument", ["threshold", "index_threshold"])
    def test_nan_thresholds_rejected(self, service: AnalysisService, argument: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.analyze(SEQ_SCAN_PLAN, recommend_indexes=True, **{argument: float("nan")})

        assert exc_info.value.argument == argument

    def test_uses_global_config_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGEXPLAIN_THRESHOLD", "250")

        assert AnalysisService().config.threshold == 250


class TestBatch:
    """Independent analyses merged into a BatchReport."""

    PLANS = [
        ("join", HASH_JOIN_PLAN),
        ("broken", PSQL_ERROR_OUTPUT),
        ("scan", SEQ_SCAN_PLAN),
    ]

    def test_continue_on_error(self, service: AnalysisService) -> None:
        batch = service.analyze_batch(self.PLANS, threshold=500)

        assert batch.total == 3
        assert batch.success_count == 2
        assert batch.failure_count == 1
        assert batch.exceeding_count == 1
        assert batch.has_failures
        assert [r.title for r in batch.reports] == ["join", "broken", "scan"]

    def test_stop_on_error(self, service: AnalysisService) -> None:
        batch = service.analyze_batch(self.PLANS, continue_on_error=False)

        assert [r.title for r in batch.reports] == ["join", "broken"]

    def test_paths_loaded(self, service: AnalysisService, write_plan) -> None:
        path = write_plan("scan.txt", SEQ_SCAN_PLAN)
        batch = service.analyze_batch([("scan", path)], recommend_indexes=True)

        assert batch.success_count == 1
        assert batch.reports[0].recommendation_count == 1

    def test_missing_file_is_a_failure(self, service: AnalysisService, tmp_path: Path) -> None:
        batch = service.analyze_batch(
            [("missing", tmp_path / "nope.txt"), ("scan", SEQ_SCAN_PLAN)]
        )

        assert batch.failure_count == 1
        assert "File not found" in batch.reports[0].error
        assert batch.reports[1].ok

    def test_failures_logged(self, service: AnalysisService, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="pgexplain.engine"):
            service.analyze_batch([("broken", PSQL_ERROR_OUTPUT)])

        assert "broken" in caplog.text

    def test_summary_dict(self) -> None:
        assert BatchReport().to_summary_dict() == {
            "total": 0,
            "success_count": 0,
            "failure_count": 0,
            "exceeding_count": 0,
        }
