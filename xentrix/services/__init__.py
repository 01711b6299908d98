"""
Services package for the Xentrix KPI engine.

Every service is stateless and synchronous: each call recomputes from the
in-memory rows it is given.

Services:
- normalizer: Raw value -> canonical scalar (number, seconds, ISO date, string, bool)
- ingestion: Alias resolution into CallRecords, row-set boundary checks, range slicing
- metrics: CSAT, AHT, FCR, SLA and Escalation metric computers
- summary: Summary Builder, Agent Aggregator, daily trend
- ranking: Interpolated quantiles and top/bottom selection
- insights: Rule-based insights and recommended tasks
- overview: Summary + agent stats + insights for one time range
"""

# =============================================================================
# Normalizer / Ingestion
# =============================================================================

from xentrix.services.normalizer import normalize
from xentrix.services.ingestion import (
    CallRecord,
    InvalidRowsError,
    coerce_rows,
    filter_records_by_range,
    filter_rows_by_range,
    ingest_rows,
    resolve_agent_name,
)

# =============================================================================
# Metric Computers / Aggregation
# =============================================================================

from xentrix.services.metrics import (
    compute_aht,
    compute_csat,
    compute_escalation,
    compute_fcr,
    compute_sla,
)
from xentrix.services.summary import (
    build_agent_stats,
    build_daily_kpis,
    build_summary,
)

# =============================================================================
# Ranking / Insights / Overview
# =============================================================================

from xentrix.services.ranking import quantile, rank_agents, rank_by_quantile
from xentrix.services.insights import InsightPolicy, build_insights
from xentrix.services.overview import compose_overview, no_insights

__all__ = [
    'normalize',
    'CallRecord',
    'InvalidRowsError',
    'coerce_rows',
    'filter_records_by_range',
    'filter_rows_by_range',
    'ingest_rows',
    'resolve_agent_name',
    'compute_aht',
    'compute_csat',
    'compute_escalation',
    'compute_fcr',
    'compute_sla',
    'build_agent_stats',
    'build_daily_kpis',
    'build_summary',
    'quantile',
    'rank_agents',
    'rank_by_quantile',
    'InsightPolicy',
    'build_insights',
    'compose_overview',
    'no_insights',
]
