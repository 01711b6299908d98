"""
Overview Composer - one response object per time range.

Runs the Agent Aggregator, the Summary Builder and the Insight Engine, in that
order, over the same ingested records and merges their outputs into an
Overview.

The insight builder is an injected callable with the build_insights
signature. Passing None selects the no-op fallback (empty problems, insights
and tasks). If the builder raises, the failure is logged and the overview
degrades to the same empty lists; the metric part stays valid.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from xentrix.core.config import Settings, get_settings
from xentrix.models.enums import RangeKey
from xentrix.models.schemas import AgentStat, InsightsOutput, Overview, Summary
from xentrix.services.ingestion import ingest_rows
from xentrix.services.insights import InsightPolicy, build_insights
from xentrix.services.summary import build_agent_stats, build_summary

logger = logging.getLogger(__name__)


InsightBuilder = Callable[..., InsightsOutput]


def no_insights(*args: Any, **kwargs: Any) -> InsightsOutput:
    """No-op insight builder: empty problems, insights and tasks."""
    return InsightsOutput()


def _run_insights(
    insight_builder: Optional[InsightBuilder],
    window: RangeKey,
    summary: Summary,
    agent_stats: Sequence[AgentStat],
    policy: InsightPolicy,
) -> InsightsOutput:
    builder = insight_builder or no_insights
    try:
        result = builder(
            window=window,
            summary=summary,
            agent_stats=agent_stats,
            min_sample_calls=policy.min_sample_calls,
            policy=policy,
        )
    except Exception:
        logger.exception(f"Insight engine failed for range {window.value}; returning empty insights")
        return InsightsOutput()

    if not isinstance(result, InsightsOutput):
        logger.warning(
            f"Insight engine returned {type(result).__name__}, expected InsightsOutput; "
            "returning empty insights"
        )
        return InsightsOutput()
    return result


def compose_overview(
    rows: Any,
    range_key: Union[RangeKey, str],
    insight_builder: Optional[InsightBuilder] = build_insights,
    settings: Optional[Settings] = None,
) -> Overview:
    """
    Compose the Overview for a row set and time-range key.

    The rows are used as given; slice them with filter_rows_by_range first
    when the caller wants the range applied to the data as well as to the
    insight window.

    Args:
        rows: Raw rows (or CallRecords) for the window.
        range_key: 'today', 'week' or 'month'.
        insight_builder: Callable with the build_insights signature, or None.
        settings: Policy source; defaults to the cached application settings.

    Returns:
        Overview with Summary fields, range, problems, insights, recommendTasks.
    """
    window = RangeKey(range_key)
    settings = settings or get_settings()
    policy = InsightPolicy.from_settings(settings)

    records = ingest_rows(rows)

    agent_stats = build_agent_stats(
        records,
        many_nulls_min_rows=settings.aht_many_nulls_min_rows,
        many_nulls_rate=settings.aht_many_nulls_rate,
    )
    summary = build_summary(
        records,
        many_nulls_min_rows=settings.aht_many_nulls_min_rows,
        many_nulls_rate=settings.aht_many_nulls_rate,
    )
    out = _run_insights(insight_builder, window, summary, agent_stats, policy)

    return Overview(
        **summary.model_dump(),
        range=window,
        problems=list(out.problems),
        insights=list(out.insights),
        recommendTasks=list(out.recommendTasks),
    )
