"""
Enumeration definitions for the Xentrix KPI backend.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
inside Pydantic models and API responses.
"""

from enum import Enum


class NormalizeKind(str, Enum):
    """
    Target scalar forms understood by the normalizer.

    - number: finite float (percent signs, second suffixes, commas stripped)
    - duration: seconds; accepts mm:ss and hh:mm:ss
    - date: ISO calendar date string YYYY-MM-DD
    - string: non-empty trimmed string
    - bool: boolean-like flags (yes/no, within/out, met/miss, 1/0)
    """
    NUMBER = "number"
    DURATION = "duration"
    DATE = "date"
    STRING = "string"
    BOOL = "bool"


class MetricStatus(str, Enum):
    """
    Column availability for a metric block.

    A metric whose input column is absent from the probed row reports
    MISSING_COLUMNS and a null rate instead of raising.
    """
    OK = "ok"
    MISSING_COLUMNS = "missing_columns"


class ResolutionClass(str, Enum):
    """First-contact resolution classification of a resolution status text."""
    RESOLVED = "resolved"
    NOT_RESOLVED = "not_resolved"
    UNKNOWN = "unknown"


class MetricDirection(str, Enum):
    """Which side of a metric's distribution is favorable."""
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"


class RankMetric(str, Enum):
    """AgentStat fields that can be ranked by quantile."""
    AVG_AHT = "avgAht"
    AVG_CSAT = "avgCsat"
    FCR_RATE = "fcrRate"
    SLA_RATE = "slaRate"
    ESCALATION_RATE = "escalationRate"


class RangeKey(str, Enum):
    """
    Time windows used by the dashboard.

    - today: the latest day present in the data
    - week: the 7 days ending on the latest day
    - month: the 30 days ending on the latest day
    """
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class InsightLevel(str, Enum):
    """Severity of an insight."""
    INFO = "info"
    WARN = "warn"
    CRITICAL = "critical"


class InsightScope(str, Enum):
    """Whether an insight concerns the whole center or one agent."""
    CENTER = "center"
    AGENT = "agent"


class TaskPriority(str, Enum):
    """Recommended task priority (P0 is most urgent)."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"


class OwnerType(str, Enum):
    """Role expected to carry out a recommended task."""
    CENTER = "center"
    SUPERVISOR = "supervisor"
    AGENT = "agent"


class TaskWithin(str, Enum):
    """Deadline for a recommended task."""
    H24 = "24h"
    D3 = "3d"
    D7 = "7d"
    D14 = "14d"


class TaskDuration(str, Enum):
    """Expected effort for a recommended task."""
    M15 = "15m"
    M30 = "30m"
    M60 = "60m"
    M90 = "90m"
    M120 = "120m"


class MetricFlag(str, Enum):
    """Data-quality flags raised by metric computers."""
    AHT_MANY_NULLS = "AHT_MANY_NULLS"
    CSAT_MANY_NULLS = "CSAT_MANY_NULLS"
