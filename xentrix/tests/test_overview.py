"""
Pytest test module for the Overview Composer.

Covers field merging, the injected insight builder (default, None, failing,
wrong return type) and settings-driven policy.
"""

from typing import Any, Dict, List

import pytest

from xentrix.core.config import Settings
from xentrix.models import InsightsOutput, Overview, RangeKey
from xentrix.services.overview import compose_overview, no_insights
from xentrix.services.summary import build_summary


class TestComposeOverview:

    def test_merges_summary_and_insights(self, mixed_rows: List[Dict[str, Any]]) -> None:
        overview = compose_overview(mixed_rows, "week")

        assert isinstance(overview, Overview)
        assert overview.range == RangeKey.WEEK

        summary = build_summary(mixed_rows).model_dump()
        merged = overview.model_dump()
        for key, value in summary.items():
            assert merged[key] == value, key

        # CSAT 81.7 is a warning, FCR 50.0 is critical; no agent reaches 30 calls
        assert overview.problems == ["CSAT may be below target", "FCR may be low"]
        assert [i.id for i in overview.insights] == [
            "ins_center_csat_low_week",
            "ins_center_fcr_low_week",
        ]
        assert len(overview.recommendTasks) == 2

    def test_rows_are_not_sliced(self, mixed_rows: List[Dict[str, Any]]) -> None:
        assert compose_overview(mixed_rows, RangeKey.TODAY).rowCount == 6

    def test_none_builder_is_no_op(self, mixed_rows: List[Dict[str, Any]]) -> None:
        overview = compose_overview(mixed_rows, "month", insight_builder=None)

        assert overview.problems == []
        assert overview.insights == []
        assert overview.recommendTasks == []
        assert overview.avgCsat == 81.7

    def test_no_insights_builder(self) -> None:
        assert no_insights(window="today") == InsightsOutput()

    def test_failing_builder_degrades(
        self,
        mixed_rows: List[Dict[str, Any]],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def broken(**kwargs: Any) -> InsightsOutput:
            raise RuntimeError("rule table unavailable")

        with caplog.at_level("ERROR"):
            overview = compose_overview(mixed_rows, "week", insight_builder=broken)

        assert overview.insights == []
        assert overview.problems == []
        assert overview.fcrRate == 50.0
        assert "Insight engine failed" in caplog.text

    def test_wrong_return_type_degrades(self, mixed_rows: List[Dict[str, Any]]) -> None:
        overview = compose_overview(mixed_rows, "week", insight_builder=lambda **kwargs: {"insights": []})
        assert overview.insights == []

    def test_builder_receives_inputs(self, mixed_rows: List[Dict[str, Any]]) -> None:
        seen: Dict[str, Any] = {}

        def spy(**kwargs: Any) -> InsightsOutput:
            seen.update(kwargs)
            return InsightsOutput(problems=["custom"])

        overview = compose_overview(mixed_rows, "today", insight_builder=spy)

        assert overview.problems == ["custom"]
        assert seen["window"] == RangeKey.TODAY
        assert seen["summary"].rowCount == 6
        assert [a.agentName for a in seen["agent_stats"]] == ["Akari", "Kenji", "Unknown"]
        assert seen["min_sample_calls"] == 30

    def test_settings_policy(self, mixed_rows: List[Dict[str, Any]]) -> None:
        settings = Settings(csat_target=80.0, fcr_target=40.0)
        overview = compose_overview(mixed_rows, "week", settings=settings)

        assert overview.problems == []
        assert overview.insights[0].id == "ins_no_findings_week"

    def test_empty_rows(self) -> None:
        overview = compose_overview([], "today")

        assert overview.rowCount == 0
        assert overview.avgCsat is None
        assert [i.id for i in overview.insights] == ["ins_no_findings_today"]

    def test_invalid_range(self, mixed_rows: List[Dict[str, Any]]) -> None:
        with pytest.raises(ValueError):
            compose_overview(mixed_rows, "year")

    def test_deterministic(self, mock_rows: List[Dict[str, Any]]) -> None:
        first = compose_overview(mock_rows, "month")
        second = compose_overview(mock_rows, "month")
        assert first.model_dump_json() == second.model_dump_json()
