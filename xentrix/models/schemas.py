"""
Pydantic models for the Xentrix KPI engine and its API contracts.

This module provides type-safe, immutable result objects for every engine
output: metric blocks, summaries, per-agent stats, quantile rankings,
insights, recommended tasks and the composed overview.

Field names are camelCase so the JSON contract consumed by the dashboard
(tables, charts, per-agent drill-down and CSV/JSON export) stays unchanged.

All models use Pydantic v2 syntax and are frozen: an engine result is never
mutated after construction.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from xentrix.models.enums import (
    InsightLevel,
    InsightScope,
    MetricStatus,
    OwnerType,
    RangeKey,
    TaskDuration,
    TaskPriority,
    TaskWithin,
)


# =============================================================================
# Metric Blocks
# =============================================================================


class MetricBlock(BaseModel):
    """
    Result of one metric computer over a row set.

    Invariants:
    - eligibleCount + unknownCount == number of rows considered for the metric
    - rate is None iff eligibleCount == 0 or status == missing_columns
    - percentage rates are within [0, 100], rounded to one decimal
    """
    model_config = ConfigDict(frozen=True)

    rate: Optional[float] = Field(
        default=None,
        description="Metric value (percentage, or seconds for AHT)"
    )
    eligibleCount: int = Field(
        default=0,
        ge=0,
        description="Rows included in the denominator"
    )
    resolvedOrMetCount: int = Field(
        default=0,
        ge=0,
        description="Rows counted in the numerator (resolved, met, escalated)"
    )
    unknownCount: int = Field(
        default=0,
        ge=0,
        description="Rows excluded because the value was absent or unparseable"
    )
    status: MetricStatus = Field(
        default=MetricStatus.OK,
        description="Column availability for the metric"
    )
    definition: str = Field(
        default="",
        description="Human-readable formula, shown in the UI for debugging"
    )


class CsatBlock(MetricBlock):
    """CSAT block with the bucket side-view and null-rate flagging."""

    buckets: Dict[str, int] = Field(
        default_factory=lambda: {"90-100": 0, "80-89": 0, "0-79": 0, "unknown": 0},
        description="Score buckets; partitions the row count exactly"
    )
    nullRate: float = Field(default=0.0, ge=0.0, le=1.0)
    flags: List[str] = Field(default_factory=list)


class AhtBlock(MetricBlock):
    """AHT block; rate holds the mean handle time in seconds."""

    median: Optional[float] = Field(default=None, description="Median AHT in seconds")
    p90: Optional[float] = Field(default=None, description="Rank-based 90th percentile")
    nullRate: float = Field(default=0.0, ge=0.0, le=1.0)
    flags: List[str] = Field(default_factory=list)


# =============================================================================
# Summary / AgentStat
# =============================================================================


class Summary(BaseModel):
    """
    Aggregate KPIs over one row set, with every metric block flattened.

    A call is one row in v1, so totalCalls always equals rowCount.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "rowCount": 2,
                "totalCalls": 2,
                "avgCsat": 75.0,
                "avgAht": 350.0,
                "fcrRate": 50.0,
                "fcrEligibleCount": 2,
                "fcrResolvedCount": 1,
                "slaStatus": "missing_columns",
                "escalationRate": 50.0,
            }
        }
    )

    rowCount: int = Field(default=0, ge=0)
    totalCalls: int = Field(default=0, ge=0)

    # CSAT
    avgCsat: Optional[float] = None
    csatEligibleCount: int = 0
    csatUnknownCount: int = 0
    csatStatus: MetricStatus = MetricStatus.OK
    csatDefinition: str = ""
    csatBuckets: Dict[str, int] = Field(default_factory=dict)

    # AHT
    avgAht: Optional[float] = None
    medianAht: Optional[float] = None
    p90Aht: Optional[float] = None
    ahtEligibleCount: int = 0
    ahtUnknownCount: int = 0
    ahtNullRate: float = 0.0
    ahtStatus: MetricStatus = MetricStatus.OK
    ahtDefinition: str = ""

    # Data-quality flags raised by CSAT and AHT
    flags: List[str] = Field(default_factory=list)

    # FCR
    fcrRate: Optional[float] = None
    fcrEligibleCount: int = 0
    fcrResolvedCount: int = 0
    fcrUnknownCount: int = 0
    fcrStatus: MetricStatus = MetricStatus.OK
    fcrDefinition: str = ""

    # SLA
    slaRate: Optional[float] = None
    slaEligibleCount: int = 0
    slaMetCount: int = 0
    slaUnknownCount: int = 0
    slaStatus: MetricStatus = MetricStatus.MISSING_COLUMNS
    slaDefinition: str = ""

    # Escalation
    escalationRate: Optional[float] = None
    escalationEligibleCount: int = 0
    escalationCount: int = 0
    escalationUnknownCount: int = 0
    escalationStatus: MetricStatus = MetricStatus.MISSING_COLUMNS
    escalationDefinition: str = ""

    def metric_blocks(self) -> Dict[str, MetricBlock]:
        """Rebuild the per-metric blocks from the flattened fields."""
        return {
            "csat": MetricBlock(
                rate=self.avgCsat,
                eligibleCount=self.csatEligibleCount,
                unknownCount=self.csatUnknownCount,
                status=self.csatStatus,
                definition=self.csatDefinition,
            ),
            "aht": MetricBlock(
                rate=self.avgAht,
                eligibleCount=self.ahtEligibleCount,
                unknownCount=self.ahtUnknownCount,
                status=self.ahtStatus,
                definition=self.ahtDefinition,
            ),
            "fcr": MetricBlock(
                rate=self.fcrRate,
                eligibleCount=self.fcrEligibleCount,
                resolvedOrMetCount=self.fcrResolvedCount,
                unknownCount=self.fcrUnknownCount,
                status=self.fcrStatus,
                definition=self.fcrDefinition,
            ),
            "sla": MetricBlock(
                rate=self.slaRate,
                eligibleCount=self.slaEligibleCount,
                resolvedOrMetCount=self.slaMetCount,
                unknownCount=self.slaUnknownCount,
                status=self.slaStatus,
                definition=self.slaDefinition,
            ),
            "escalation": MetricBlock(
                rate=self.escalationRate,
                eligibleCount=self.escalationEligibleCount,
                resolvedOrMetCount=self.escalationCount,
                unknownCount=self.escalationUnknownCount,
                status=self.escalationStatus,
                definition=self.escalationDefinition,
            ),
        }


class AgentStat(Summary):
    """Summary computed over the rows of a single agent."""

    agentName: str = Field(
        ...,
        min_length=1,
        description="Resolved agent identifier ('Unknown' when absent)"
    )


class DailyKpi(BaseModel):
    """One point of the daily CSAT/AHT trend series."""
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="ISO date YYYY-MM-DD")
    rowCount: int = Field(default=0, ge=0)
    avgCsat: Optional[float] = None
    avgAht: Optional[float] = None


# =============================================================================
# Quantile Ranking
# =============================================================================


class RankItem(BaseModel):
    """An (id, value, sample-size) triple to be ranked."""
    model_config = ConfigDict(frozen=True)

    id: str
    value: Optional[float] = None
    sample: int = Field(default=0, description="Sample size, e.g. calls handled")


class RankMeta(BaseModel):
    """Parameters and thresholds used for a ranking."""
    model_config = ConfigDict(frozen=True)

    ratio: float
    minItems: int
    minSample: int
    eligible: int
    thresholdTop: Optional[float] = None
    thresholdBottom: Optional[float] = None
    reason: Optional[str] = Field(
        default=None,
        description="Why the selection is empty (no_eligible_items, ratio_zero_or_threshold_null)"
    )


class RankResult(BaseModel):
    """Top and bottom selections, each sorted from the extreme inward."""
    model_config = ConfigDict(frozen=True)

    top: List[RankItem] = Field(default_factory=list)
    bottom: List[RankItem] = Field(default_factory=list)
    meta: RankMeta


# =============================================================================
# Insights
# =============================================================================


class Insight(BaseModel):
    """A diagnosed condition with severity and rationale."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Deterministic id: <prefix>_<slug>_<window>")
    level: InsightLevel
    title: str
    why: str
    impact: Optional[str] = None
    scope: InsightScope
    who: str = Field(..., description="'center' or the agent name")
    window: RangeKey
    metrics: Optional[Dict[str, Optional[float]]] = None


class RecommendTask(BaseModel):
    """An actionable, prioritized follow-up derived from insights."""
    model_config = ConfigDict(frozen=True)

    id: str
    priority: TaskPriority
    ownerType: OwnerType
    owner: str
    within: TaskWithin
    duration: TaskDuration
    task: str
    howMany: Optional[int] = None
    evidence: Optional[str] = None


class InsightsOutput(BaseModel):
    """Output of one insight engine invocation."""
    model_config = ConfigDict(frozen=True)

    problems: List[str] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)
    recommendTasks: List[RecommendTask] = Field(default_factory=list)


# =============================================================================
# Overview
# =============================================================================


class Overview(Summary):
    """Summary plus the insight engine output for one time range."""

    range: RangeKey
    problems: List[str] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)
    recommendTasks: List[RecommendTask] = Field(default_factory=list)
