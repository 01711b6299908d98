"""
FastAPI router module for KPI endpoints.

Thin adapter over the KPI engine: every endpoint takes the cleaned rows as a
JSON array in the request body and returns the engine's plain result model.
No rendering, no persistence.

Endpoints:
- POST /kpi/summary: Summary over all rows
- POST /kpi/agents: AgentStat per agent, sorted by average AHT
- POST /kpi/rank: Quantile top/bottom agents for one metric
- POST /kpi/overview: Summary + insights + recommended tasks for a range
- POST /kpi/daily: Daily CSAT / AHT trend series
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, Query

from xentrix.core.dependencies import InsightBuilderDep, SettingsDep
from xentrix.models import (
    AgentStat,
    DailyKpi,
    Overview,
    RangeKey,
    RankMetric,
    RankResult,
    Summary,
)
from xentrix.services.ingestion import filter_records_by_range, ingest_rows
from xentrix.services.overview import compose_overview
from xentrix.services.ranking import rank_agents
from xentrix.services.summary import build_agent_stats, build_daily_kpis, build_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kpi", tags=["kpi"])


# =============================================================================
# Helper Functions
# =============================================================================


def _parse_range(range_str: str) -> RangeKey:
    """
    Convert a query string to RangeKey, case-insensitively.

    Raises:
        HTTPException 400: If the value is not a known range
    """
    for r in RangeKey:
        if r.value == range_str.strip().lower():
            return r
    raise HTTPException(
        status_code=400,
        detail=f"Invalid range: {range_str}. Valid values: {[r.value for r in RangeKey]}",
    )


def _parse_metric(metric_str: str) -> RankMetric:
    """
    Convert a query string to RankMetric.

    Raises:
        HTTPException 400: If the metric cannot be ranked
    """
    try:
        return RankMetric(metric_str)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid metric: {metric_str}. Valid values: {[m.value for m in RankMetric]}",
        )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/summary", response_model=Summary)
async def compute_summary(
    settings: SettingsDep,
    rows: List[Dict[str, Any]] = Body(..., description="Cleaned call rows"),
) -> Summary:
    """Compute the aggregate Summary over all rows."""
    logger.info(f"Computing summary for {len(rows)} rows")
    return build_summary(
        rows,
        many_nulls_min_rows=settings.aht_many_nulls_min_rows,
        many_nulls_rate=settings.aht_many_nulls_rate,
    )


@router.post("/agents", response_model=List[AgentStat])
async def compute_agent_stats(
    settings: SettingsDep,
    rows: List[Dict[str, Any]] = Body(..., description="Cleaned call rows"),
) -> List[AgentStat]:
    """Compute per-agent stats, shortest average AHT first."""
    logger.info(f"Computing agent stats for {len(rows)} rows")
    return build_agent_stats(
        rows,
        many_nulls_min_rows=settings.aht_many_nulls_min_rows,
        many_nulls_rate=settings.aht_many_nulls_rate,
    )


@router.post("/rank", response_model=RankResult)
async def rank_agents_by_quantile(
    settings: SettingsDep,
    rows: List[Dict[str, Any]] = Body(..., description="Cleaned call rows"),
    metric: str = Query("avgAht", description="AgentStat field to rank on"),
    ratio: Optional[float] = Query(None, ge=0.0, le=1.0, description="Quantile ratio per side"),
    min_items: Optional[int] = Query(None, ge=0, description="Minimum agents per side"),
    min_sample: Optional[int] = Query(None, ge=0, description="Minimum calls per agent"),
) -> RankResult:
    """
    Select top and bottom agents for one metric by quantile thresholds.

    Defaults for ratio, min_items and min_sample come from settings.
    """
    rank_metric = _parse_metric(metric)
    agent_stats = build_agent_stats(
        rows,
        many_nulls_min_rows=settings.aht_many_nulls_min_rows,
        many_nulls_rate=settings.aht_many_nulls_rate,
    )
    return rank_agents(
        agent_stats,
        rank_metric,
        ratio=settings.rank_ratio if ratio is None else ratio,
        min_items=settings.rank_min_items if min_items is None else min_items,
        min_sample=settings.rank_min_sample if min_sample is None else min_sample,
    )


@router.post("/overview", response_model=Overview)
async def compute_overview(
    settings: SettingsDep,
    insight_builder: InsightBuilderDep,
    rows: List[Dict[str, Any]] = Body(..., description="Cleaned call rows"),
    range_str: str = Query("today", alias="range", description="today, week or month"),
    filter_range: bool = Query(
        True,
        description="Slice rows to the range (anchored on the latest date) before computing",
    ),
) -> Overview:
    """Compose Summary, insights and recommended tasks for a time range."""
    range_key = _parse_range(range_str)

    records = ingest_rows(rows)
    if filter_range:
        records = filter_records_by_range(records, range_key)

    logger.info(f"Composing {range_key.value} overview over {len(records)} of {len(rows)} rows")
    return compose_overview(records, range_key, insight_builder=insight_builder, settings=settings)


@router.post("/daily", response_model=List[DailyKpi])
async def compute_daily_kpis(
    rows: List[Dict[str, Any]] = Body(..., description="Cleaned call rows"),
) -> List[DailyKpi]:
    """Daily average CSAT / AHT series, oldest first."""
    return build_daily_kpis(rows)
