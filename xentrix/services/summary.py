"""
Summary Builder and Agent Aggregator for the Xentrix KPI engine.

Key Functions:
- build_summary: Run every metric computer once over a row set
- build_agent_stats: Group rows by agent and summarize each group
- build_daily_kpis: Daily CSAT / AHT trend series for charts

Inputs may be raw rows (mappings, a DataFrame) or CallRecords that were
already ingested; aliases are resolved once either way.

A call is one row in v1: totalCalls == rowCount and no call-count column is
consulted.
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from xentrix.models.schemas import AgentStat, DailyKpi, Summary
from xentrix.services.ingestion import CallRecord, ingest_rows
from xentrix.services.metrics import (
    DEFAULT_MANY_NULLS_MIN_ROWS,
    DEFAULT_MANY_NULLS_RATE,
    compute_aht,
    compute_csat,
    compute_escalation,
    compute_fcr,
    compute_sla,
    round1,
)


def summarize_records(
    records: Sequence[CallRecord],
    many_nulls_min_rows: int = DEFAULT_MANY_NULLS_MIN_ROWS,
    many_nulls_rate: float = DEFAULT_MANY_NULLS_RATE,
) -> Dict[str, Any]:
    """
    Run all five metric computers and flatten their blocks into Summary fields.

    Returns a plain dict so Summary, AgentStat and Overview can all be built
    from it.
    """
    csat = compute_csat(records, many_nulls_min_rows, many_nulls_rate)
    aht = compute_aht(records, many_nulls_min_rows, many_nulls_rate)
    fcr = compute_fcr(records)
    sla = compute_sla(records)
    escalation = compute_escalation(records)

    row_count = len(records)

    return {
        "rowCount": row_count,
        "totalCalls": row_count,
        # CSAT
        "avgCsat": csat.rate,
        "csatEligibleCount": csat.eligibleCount,
        "csatUnknownCount": csat.unknownCount,
        "csatStatus": csat.status,
        "csatDefinition": csat.definition,
        "csatBuckets": dict(csat.buckets),
        # AHT
        "avgAht": aht.rate,
        "medianAht": aht.median,
        "p90Aht": aht.p90,
        "ahtEligibleCount": aht.eligibleCount,
        "ahtUnknownCount": aht.unknownCount,
        "ahtNullRate": aht.nullRate,
        "ahtStatus": aht.status,
        "ahtDefinition": aht.definition,
        "flags": list(aht.flags) + list(csat.flags),
        # FCR
        "fcrRate": fcr.rate,
        "fcrEligibleCount": fcr.eligibleCount,
        "fcrResolvedCount": fcr.resolvedOrMetCount,
        "fcrUnknownCount": fcr.unknownCount,
        "fcrStatus": fcr.status,
        "fcrDefinition": fcr.definition,
        # SLA
        "slaRate": sla.rate,
        "slaEligibleCount": sla.eligibleCount,
        "slaMetCount": sla.resolvedOrMetCount,
        "slaUnknownCount": sla.unknownCount,
        "slaStatus": sla.status,
        "slaDefinition": sla.definition,
        # Escalation
        "escalationRate": escalation.rate,
        "escalationEligibleCount": escalation.eligibleCount,
        "escalationCount": escalation.resolvedOrMetCount,
        "escalationUnknownCount": escalation.unknownCount,
        "escalationStatus": escalation.status,
        "escalationDefinition": escalation.definition,
    }


def build_summary(
    rows: Any,
    many_nulls_min_rows: int = DEFAULT_MANY_NULLS_MIN_ROWS,
    many_nulls_rate: float = DEFAULT_MANY_NULLS_RATE,
) -> Summary:
    """
    Build the aggregate Summary for a row set.

    The row set may be the whole dataset or any slice of it (one agent's rows,
    one time window). An empty row set yields rowCount=0 and null rates.

    Example:
        >>> s = build_summary([
        ...     {"CSAT": 90, "AHT": 200, "Resolution_Status": "Resolved"},
        ...     {"CSAT": 60, "AHT": 500, "Resolution_Status": "Escalated"},
        ... ])
        >>> (s.avgCsat, s.avgAht, s.fcrRate)
        (75.0, 350.0, 50.0)
    """
    records = ingest_rows(rows)
    return Summary(**summarize_records(records, many_nulls_min_rows, many_nulls_rate))


def _aht_sort_key(stat: AgentStat):
    # Null AHT last, then ascending AHT, then agent name
    return (stat.avgAht is None, stat.avgAht if stat.avgAht is not None else 0.0, stat.agentName)


def build_agent_stats(
    rows: Any,
    many_nulls_min_rows: int = DEFAULT_MANY_NULLS_MIN_ROWS,
    many_nulls_rate: float = DEFAULT_MANY_NULLS_RATE,
) -> List[AgentStat]:
    """
    Group rows by agent and build one AgentStat per agent.

    Rows with no agent identifier fall into the 'Unknown' bucket. The result
    is sorted for display: shortest average AHT first, agents without a valid
    AHT last, ties broken by agent name.
    """
    records = ingest_rows(rows)

    groups: Dict[str, List[CallRecord]] = {}
    for record in records:
        groups.setdefault(record.agent_name, []).append(record)

    stats = [
        AgentStat(
            agentName=agent_name,
            **summarize_records(agent_records, many_nulls_min_rows, many_nulls_rate),
        )
        for agent_name, agent_records in groups.items()
    ]
    stats.sort(key=_aht_sort_key)
    return stats


def build_daily_kpis(rows: Any) -> List[DailyKpi]:
    """
    Build the daily average CSAT / AHT series used by trend charts.

    Uses the same validity rules as the metric computers: CSAT within
    [0, 100], non-negative AHT. Rows without a parseable date are skipped.
    Dates are returned in ascending order.
    """
    records = [r for r in ingest_rows(rows) if r.date is not None]
    if not records:
        return []

    df = pd.DataFrame({
        "date": [r.date for r in records],
        "csat": [
            r.csat if r.csat is not None and 0 <= r.csat <= 100 else None
            for r in records
        ],
        "aht": [r.aht if r.aht is not None and r.aht >= 0 else None for r in records],
    })
    df["csat"] = pd.to_numeric(df["csat"], errors="coerce")
    df["aht"] = pd.to_numeric(df["aht"], errors="coerce")

    # mean() skips NaN; an all-NaN day yields NaN
    daily = df.groupby("date", sort=True).agg(
        rowCount=("csat", "size"),
        avgCsat=("csat", "mean"),
        avgAht=("aht", "mean"),
    )

    out: List[DailyKpi] = []
    for day, row in daily.iterrows():
        out.append(DailyKpi(
            date=str(day),
            rowCount=int(row["rowCount"]),
            avgCsat=None if pd.isna(row["avgCsat"]) else round1(float(row["avgCsat"])),
            avgAht=None if pd.isna(row["avgAht"]) else round1(float(row["avgAht"])),
        ))
    return out
