"""
Metric computers for the Xentrix KPI engine.

Each computer consumes a sequence of CallRecords (see xentrix.services.ingestion)
and returns one metric block with rate, eligible/unknown counts and a column
status. Unknown or unparseable values are never guessed: they are counted in
unknownCount and excluded from the denominator.

Metric Definitions (v1):
- CSAT: mean of scores within [0, 100]; out-of-range scores are unknown
- AHT: mean / median / rank-based p90 of non-negative handle times (seconds)
- FCR: resolved / (resolved + not_resolved) * 100, keyword-classified status
- SLA: met / eligible * 100 from a boolean flag column, else mean of a
  percentage column; missing_columns when neither exists in the probe row
- Escalation: escalated / eligible * 100 from the resolution status text;
  missing_columns when no status column exists in the probe row

Column presence for SLA and Escalation is probed on the first record of the
row set. An empty row set probes an empty record and therefore reports
missing_columns.

Rounding: all rates are rounded half-up to one decimal.
"""

import math
from typing import List, Optional, Sequence

from xentrix.models.enums import MetricFlag, MetricStatus, ResolutionClass
from xentrix.models.schemas import AhtBlock, CsatBlock, MetricBlock
from xentrix.services.ingestion import CallRecord


DEFAULT_MANY_NULLS_MIN_ROWS = 10
DEFAULT_MANY_NULLS_RATE = 0.3

AHT_P90 = 0.9

RESOLVED_KEYWORDS = frozenset({
    "resolved",
    "solved",
    "complete",
    "completed",
    "done",
    "closed",
})

NOT_RESOLVED_KEYWORDS = frozenset({
    "open",
    "pending",
    "in progress",
    "escalated",
    "transferred",
    "unresolved",
})

ESCALATION_MARKERS = ("transfer to l2", "escalation", "escalated")

CSAT_DEFINITION = "CSAT(v1)=mean of scores in [0,100]. Out-of-range or missing scores are unknown"
AHT_DEFINITION = "AHT(v1)=mean of non-negative handle times (sec). mm:ss and hh:mm:ss accepted"
FCR_DEFINITION = "FCR(v1)=Resolved / (Resolved + NotResolved). Unknown excluded from denominator"
SLA_FLAG_DEFINITION = "SLA(v1)=WithinSLA(true) / eligible. Unknown excluded from denominator"
SLA_PCT_DEFINITION = "SLA(v1)=mean of SLA/ServiceLevel (%) values"
SLA_MISSING_DEFINITION = "SLA(v1)=missing input columns (no SLA/ServiceLevel/WithinSLA)"
ESCALATION_DEFINITION = (
    "Escalation(v1)=count(Transfer to L2 or Escalation) / eligible. "
    "Unknown excluded from denominator"
)
ESCALATION_MISSING_DEFINITION = "Escalation(v1)=missing input columns (no Resolution_Status)"


# =============================================================================
# Statistical Helpers
# =============================================================================


def round1(value: float) -> float:
    """
    Round half-up to one decimal.

    Python's round() uses banker's rounding; dashboards expect 0.05 -> 0.1.

    Example:
        >>> round1(72.25)
        72.3
    """
    return math.floor(value * 10 + 0.5) / 10


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def median(sorted_values: Sequence[float]) -> Optional[float]:
    """Median of an ascending sequence, or None if empty."""
    n = len(sorted_values)
    if n == 0:
        return None
    mid = n // 2
    if n % 2 == 1:
        return sorted_values[mid]
    return (sorted_values[mid - 1] + sorted_values[mid]) / 2


def rank_percentile(sorted_values: Sequence[float], p: float) -> Optional[float]:
    """
    Rank-based (non-interpolated) percentile of an ascending sequence.

    index = ceil(p * n) - 1, clamped to [0, n - 1].
    """
    n = len(sorted_values)
    if n == 0:
        return None
    idx = math.ceil(p * n) - 1
    idx = min(max(idx, 0), n - 1)
    return sorted_values[idx]


def _rate(numerator: int, denominator: int) -> Optional[float]:
    if denominator <= 0:
        return None
    return round1(numerator / denominator * 100)


def _null_flags(
    total: int,
    null_rate: float,
    flag: MetricFlag,
    min_rows: int,
    rate_threshold: float,
) -> List[str]:
    if total >= min_rows and null_rate >= rate_threshold:
        return [flag.value]
    return []


# =============================================================================
# CSAT
# =============================================================================


def compute_csat(
    records: Sequence[CallRecord],
    many_nulls_min_rows: int = DEFAULT_MANY_NULLS_MIN_ROWS,
    many_nulls_rate: float = DEFAULT_MANY_NULLS_RATE,
) -> CsatBlock:
    """
    Compute the CSAT block.

    Scores outside [0, 100] are unknown, not clamped. Buckets partition the
    row count: 90-100, 80-89 (80 <= v < 90), 0-79 (v < 80), unknown.
    """
    total = len(records)
    buckets = {"90-100": 0, "80-89": 0, "0-79": 0, "unknown": 0}
    values: List[float] = []

    for record in records:
        v = record.csat
        if v is None or v < 0 or v > 100:
            buckets["unknown"] += 1
            continue
        values.append(v)
        if v >= 90:
            buckets["90-100"] += 1
        elif v >= 80:
            buckets["80-89"] += 1
        else:
            buckets["0-79"] += 1

    eligible = len(values)
    avg = mean(values)
    null_rate = (total - eligible) / total if total > 0 else 0.0

    return CsatBlock(
        rate=round1(avg) if avg is not None else None,
        eligibleCount=eligible,
        unknownCount=total - eligible,
        status=MetricStatus.OK,
        definition=CSAT_DEFINITION,
        buckets=buckets,
        nullRate=null_rate,
        flags=_null_flags(
            total, null_rate, MetricFlag.CSAT_MANY_NULLS, many_nulls_min_rows, many_nulls_rate
        ),
    )


# =============================================================================
# AHT
# =============================================================================


def compute_aht(
    records: Sequence[CallRecord],
    many_nulls_min_rows: int = DEFAULT_MANY_NULLS_MIN_ROWS,
    many_nulls_rate: float = DEFAULT_MANY_NULLS_RATE,
) -> AhtBlock:
    """
    Compute the AHT block (seconds).

    Negative handle times are invalid and counted as unknown. AHT_MANY_NULLS
    is raised when the row set has at least many_nulls_min_rows rows and the
    share of unusable values reaches many_nulls_rate.
    """
    total = len(records)
    values = sorted(r.aht for r in records if r.aht is not None and r.aht >= 0)

    eligible = len(values)
    avg = mean(values)
    mid = median(values)
    p90 = rank_percentile(values, AHT_P90)
    null_rate = (total - eligible) / total if total > 0 else 0.0

    return AhtBlock(
        rate=round1(avg) if avg is not None else None,
        eligibleCount=eligible,
        unknownCount=total - eligible,
        status=MetricStatus.OK,
        definition=AHT_DEFINITION,
        median=round1(mid) if mid is not None else None,
        p90=round1(p90) if p90 is not None else None,
        nullRate=null_rate,
        flags=_null_flags(
            total, null_rate, MetricFlag.AHT_MANY_NULLS, many_nulls_min_rows, many_nulls_rate
        ),
    )


# =============================================================================
# FCR
# =============================================================================


def classify_resolution(status: Optional[str]) -> ResolutionClass:
    """
    Classify a resolution status text for first-contact resolution.

    Matching is exact on the trimmed, lower-cased text. Absent or unexpected
    values are UNKNOWN.

    Example:
        >>> classify_resolution(" Resolved ")
        <ResolutionClass.RESOLVED: 'resolved'>
        >>> classify_resolution("Partially Resolved")
        <ResolutionClass.UNKNOWN: 'unknown'>
    """
    if status is None:
        return ResolutionClass.UNKNOWN
    token = status.strip().lower()
    if token in RESOLVED_KEYWORDS:
        return ResolutionClass.RESOLVED
    if token in NOT_RESOLVED_KEYWORDS:
        return ResolutionClass.NOT_RESOLVED
    return ResolutionClass.UNKNOWN


def compute_fcr(records: Sequence[CallRecord]) -> MetricBlock:
    """Compute the FCR block; unknown statuses are excluded from the denominator."""
    resolved = 0
    not_resolved = 0
    unknown = 0

    for record in records:
        cls = classify_resolution(record.resolution_status)
        if cls == ResolutionClass.RESOLVED:
            resolved += 1
        elif cls == ResolutionClass.NOT_RESOLVED:
            not_resolved += 1
        else:
            unknown += 1

    eligible = resolved + not_resolved
    return MetricBlock(
        rate=_rate(resolved, eligible),
        eligibleCount=eligible,
        resolvedOrMetCount=resolved,
        unknownCount=unknown,
        status=MetricStatus.OK,
        definition=FCR_DEFINITION,
    )


# =============================================================================
# SLA
# =============================================================================


def _probe(records: Sequence[CallRecord]) -> CallRecord:
    return records[0] if records else CallRecord()


def compute_sla(records: Sequence[CallRecord]) -> MetricBlock:
    """
    Compute the SLA block.

    A boolean flag column takes precedence over a percentage column. In
    percentage mode eligibleCount is the number of valid percentages
    (0 to 100) and resolvedOrMetCount is not tracked.
    """
    probe = _probe(records)

    if probe.has_within_sla:
        met = 0
        eligible = 0
        unknown = 0
        for record in records:
            if record.within_sla is None:
                unknown += 1
                continue
            eligible += 1
            if record.within_sla:
                met += 1
        return MetricBlock(
            rate=_rate(met, eligible),
            eligibleCount=eligible,
            resolvedOrMetCount=met,
            unknownCount=unknown,
            status=MetricStatus.OK,
            definition=SLA_FLAG_DEFINITION,
        )

    if probe.has_sla_pct:
        values = [
            r.sla_pct for r in records
            if r.sla_pct is not None and 0 <= r.sla_pct <= 100
        ]
        avg = mean(values)
        return MetricBlock(
            rate=round1(avg) if avg is not None else None,
            eligibleCount=len(values),
            resolvedOrMetCount=0,
            unknownCount=len(records) - len(values),
            status=MetricStatus.OK,
            definition=SLA_PCT_DEFINITION,
        )

    return MetricBlock(
        rate=None,
        status=MetricStatus.MISSING_COLUMNS,
        definition=SLA_MISSING_DEFINITION,
    )


# =============================================================================
# Escalation
# =============================================================================


def is_escalation(status: Optional[str]) -> Optional[bool]:
    """
    Return True if a resolution status marks an escalation, None if absent.

    Example:
        >>> is_escalation("Transfer to L2 - billing")
        True
        >>> is_escalation("Resolved")
        False
    """
    if status is None:
        return None
    text = status.strip().lower()
    if not text:
        return None
    return any(marker in text for marker in ESCALATION_MARKERS)


def compute_escalation(records: Sequence[CallRecord]) -> MetricBlock:
    """Compute the escalation block from the resolution status column."""
    if not _probe(records).has_resolution:
        return MetricBlock(
            rate=None,
            status=MetricStatus.MISSING_COLUMNS,
            definition=ESCALATION_MISSING_DEFINITION,
        )

    escalated = 0
    eligible = 0
    unknown = 0
    for record in records:
        flag = is_escalation(record.resolution_status)
        if flag is None:
            unknown += 1
            continue
        eligible += 1
        if flag:
            escalated += 1

    return MetricBlock(
        rate=_rate(escalated, eligible),
        eligibleCount=eligible,
        resolvedOrMetCount=escalated,
        unknownCount=unknown,
        status=MetricStatus.OK,
        definition=ESCALATION_DEFINITION,
    )
