"""
Row ingestion and alias resolution for the Xentrix KPI engine.

Raw rows are open key/value mappings whose logical fields may appear under
several column names (exports from different ACD/CRM tools). This module
resolves every logical field once, against an ordered alias table, into an
immutable CallRecord. Metric computers read CallRecords only and never
re-probe aliases.

Key Functions:
- coerce_rows: Boundary check turning the caller's input into a list of rows
- ingest_rows: Resolve aliases and normalize values into CallRecords
- resolve_agent_name: Agent identity with the 'Unknown' fallback bucket
- filter_rows_by_range: today / week / month slices anchored on the latest date

Alias resolution uses key presence, not value presence: a column that exists
with a null value still counts as "the column exists" for SLA / Escalation
probing, and its value is normalized to None (counted as unknown).
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from xentrix.models.enums import RangeKey
from xentrix.services.normalizer import (
    normalize_bool,
    normalize_date,
    normalize_duration,
    normalize_number,
    normalize_string,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Alias Tables (probed in order, first present key wins)
# =============================================================================

DATE_ALIASES: Tuple[str, ...] = ("Date", "date", "DATE", "CallDate", "call_date")

AGENT_ALIASES: Tuple[str, ...] = ("Agent", "AgentName", "agentName", "agent_name", "agent")

CSAT_ALIASES: Tuple[str, ...] = ("CSAT", "csat", "Csat", "csat_score", "csatScore")

AHT_ALIASES: Tuple[str, ...] = (
    "AHT",
    "aht",
    "Aht",
    "aht_sec",
    "ahtSec",
    "AHT_sec",
    "AHTSeconds",
    "aht_seconds",
    "AvgHandleTimeSeconds",
    "handle_time_sec",
    "HandleTimeSec",
    "Handle_Time_Sec",
    "Handle Time (sec)",
    "Handle Time",
)

RESOLUTION_ALIASES: Tuple[str, ...] = (
    "Resolution_Status",
    "resolution_status",
    "resolutionStatus",
    "status",
    "Status",
)

WITHIN_SLA_ALIASES: Tuple[str, ...] = ("WithinSLA", "within_sla", "withinSla")

SLA_PCT_ALIASES: Tuple[str, ...] = ("SLA", "sla", "ServiceLevel", "service_level", "serviceLevel")

UNKNOWN_AGENT = "Unknown"

# Inclusive day spans per range, ending on the anchor date
RANGE_DAYS: Dict[RangeKey, int] = {
    RangeKey.TODAY: 1,
    RangeKey.WEEK: 7,
    RangeKey.MONTH: 30,
}


class InvalidRowsError(TypeError):
    """Raised when the row set is not iterable at all."""


# =============================================================================
# Canonical Record
# =============================================================================


@dataclass(frozen=True)
class CallRecord:
    """
    One contact, with every logical field resolved and normalized.

    Attributes:
        date: ISO date (YYYY-MM-DD) or None.
        agent_name: Resolved agent name, UNKNOWN_AGENT when absent.
        csat: CSAT score as a float (range checks happen in the metric).
        aht: Handle time in seconds (negative values are kept here).
        resolution_status: Trimmed resolution status text.
        within_sla: Boolean SLA flag.
        sla_pct: SLA / service level percentage.
        has_resolution: Row exposes a resolution-status column.
        has_within_sla: Row exposes a boolean SLA column.
        has_sla_pct: Row exposes a percentage SLA column.
        source: The untouched input row.
    """
    date: Optional[str] = None
    agent_name: str = UNKNOWN_AGENT
    csat: Optional[float] = None
    aht: Optional[float] = None
    resolution_status: Optional[str] = None
    within_sla: Optional[bool] = None
    sla_pct: Optional[float] = None
    has_resolution: bool = False
    has_within_sla: bool = False
    has_sla_pct: bool = False
    source: Mapping = field(default_factory=dict, repr=False, compare=False)


def pick(row: Mapping, aliases: Sequence[str]) -> Tuple[bool, Any]:
    """
    Return (found, value) for the first alias present as a key in row.

    Example:
        >>> pick({"csat": 90}, CSAT_ALIASES)
        (True, 90)
        >>> pick({}, CSAT_ALIASES)
        (False, None)
    """
    for key in aliases:
        if key in row:
            return True, row[key]
    return False, None


def resolve_agent_name(row: Mapping) -> str:
    """
    Resolve the agent identity of a row.

    Returns the first alias whose value normalizes to a non-empty string, or
    UNKNOWN_AGENT when none does.
    """
    for key in AGENT_ALIASES:
        name = normalize_string(row.get(key))
        if name is not None:
            return name
    return UNKNOWN_AGENT


def to_call_record(row: Mapping) -> CallRecord:
    """Resolve aliases and normalize one raw row."""
    _, raw_date = pick(row, DATE_ALIASES)
    _, raw_csat = pick(row, CSAT_ALIASES)
    _, raw_aht = pick(row, AHT_ALIASES)
    has_resolution, raw_status = pick(row, RESOLUTION_ALIASES)
    has_within_sla, raw_within = pick(row, WITHIN_SLA_ALIASES)
    has_sla_pct, raw_pct = pick(row, SLA_PCT_ALIASES)

    return CallRecord(
        date=normalize_date(raw_date),
        agent_name=resolve_agent_name(row),
        csat=normalize_number(raw_csat),
        aht=normalize_duration(raw_aht),
        resolution_status=normalize_string(raw_status),
        within_sla=normalize_bool(raw_within),
        sla_pct=normalize_number(raw_pct),
        has_resolution=has_resolution,
        has_within_sla=has_within_sla,
        has_sla_pct=has_sla_pct,
        source=row,
    )


# =============================================================================
# Boundary
# =============================================================================


def coerce_rows(rows: Any) -> List[Union[Mapping, CallRecord]]:
    """
    Turn the caller's row set into a list of mappings (or CallRecords).

    - None is an empty row set.
    - A pandas DataFrame is converted with to_dict('records').
    - A string, bytes or a single mapping is not an array of rows; it is
      treated as an empty row set and a warning is logged.
    - CallRecords are kept as they are.
    - Other items that are not mappings become empty rows, so they still
      count toward rowCount but expose no columns.

    Raises:
        InvalidRowsError: If rows is not iterable at all.
    """
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict("records")
    if isinstance(rows, (str, bytes, bytearray, Mapping)):
        logger.warning(
            f"Expected an array of rows, got {type(rows).__name__}; treating as empty"
        )
        return []
    if not isinstance(rows, Iterable):
        raise InvalidRowsError(
            f"rows must be an iterable of mappings, got {type(rows).__name__}"
        )
    return [r if isinstance(r, (Mapping, CallRecord)) else {} for r in rows]


def ingest_rows(rows: Any) -> List[CallRecord]:
    """
    Coerce and resolve a raw row set into CallRecords, preserving order.

    CallRecords in the row set are kept as they are, so callers that already
    ingested (all or part of the rows) can hand records straight to the
    builders.
    """
    return [
        r if isinstance(r, CallRecord) else to_call_record(r)
        for r in coerce_rows(rows)
    ]


# =============================================================================
# Time-range slicing
# =============================================================================


def _parse_iso(value: Optional[str]) -> Optional[date]:
    # Zero-padded prefixes such as 2024-13-40 are not calendar dates
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def filter_records_by_range(
    records: Sequence[CallRecord],
    range_key: RangeKey,
) -> List[CallRecord]:
    """
    Keep the records that fall inside a time window.

    The window is anchored on the latest parseable date in the records, not on
    the wall clock, so uploaded historical exports still show data. 'today'
    is the anchor day, 'week' the 7 days and 'month' the 30 days ending on it.
    Records without a parseable date are outside every window.
    """
    dated = [(r, _parse_iso(r.date)) for r in records]
    dated = [(r, d) for r, d in dated if d is not None]
    if not dated:
        return []

    anchor = max(d for _, d in dated)
    start = anchor - timedelta(days=RANGE_DAYS[RangeKey(range_key)] - 1)
    return [r for r, d in dated if start <= d <= anchor]


def filter_rows_by_range(rows: Any, range_key: RangeKey) -> List[Mapping]:
    """Raw-row variant of filter_records_by_range; returns the source rows."""
    records = filter_records_by_range(ingest_rows(rows), range_key)
    return [r.source for r in records]
