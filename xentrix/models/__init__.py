"""
Models package for the Xentrix KPI backend.

Re-exports the enums and Pydantic schemas so callers can write:

    from xentrix.models import Summary, AgentStat, RangeKey
"""

from xentrix.models.enums import (
    InsightLevel,
    InsightScope,
    MetricDirection,
    MetricFlag,
    MetricStatus,
    NormalizeKind,
    OwnerType,
    RangeKey,
    RankMetric,
    ResolutionClass,
    TaskDuration,
    TaskPriority,
    TaskWithin,
)
from xentrix.models.schemas import (
    AgentStat,
    AhtBlock,
    CsatBlock,
    DailyKpi,
    Insight,
    InsightsOutput,
    MetricBlock,
    Overview,
    RankItem,
    RankMeta,
    RankResult,
    RecommendTask,
    Summary,
)

__all__ = [
    # Enums
    'InsightLevel',
    'InsightScope',
    'MetricDirection',
    'MetricFlag',
    'MetricStatus',
    'NormalizeKind',
    'OwnerType',
    'RangeKey',
    'RankMetric',
    'ResolutionClass',
    'TaskDuration',
    'TaskPriority',
    'TaskWithin',
    # Schemas
    'AgentStat',
    'AhtBlock',
    'CsatBlock',
    'DailyKpi',
    'Insight',
    'InsightsOutput',
    'MetricBlock',
    'Overview',
    'RankItem',
    'RankMeta',
    'RankResult',
    'RecommendTask',
    'Summary',
]
