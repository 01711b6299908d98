"""
Insight Engine (v1) - rule-based insights and recommended tasks.

Converts a center Summary and per-agent stats into:
- problems: short, deduplicated problem labels (at most max_problems)
- insights: severity-leveled diagnoses with rationale
- recommendTasks: prioritized, owner-assigned follow-ups

Rules, evaluated in this fixed order:
1. Center CSAT below csat_target -> warn insight (critical below
   csat_critical) + P0 supervisor listening task
2. Center FCR below fcr_target -> warn insight (critical below
   fcr_critical) + P0 first-contact checklist task
3. Each eligible agent with average AHT below aht_too_low_sec -> quality-risk
   insight + P0 listening task + P1 knowledge-speed review task
4. Each eligible agent with average AHT above aht_too_high_sec ->
   efficiency-risk insight + P0 coaching task
5. No insight from any rule -> one 'info' no-findings insight

An agent is eligible when totalCalls >= min_sample_calls.

Ids are derived as <prefix>_<slug(seed)>_<window>; identical input always
yields byte-identical output.
"""

import hashlib
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from xentrix.core.config import Settings
from xentrix.models.enums import (
    InsightLevel,
    InsightScope,
    OwnerType,
    RangeKey,
    TaskDuration,
    TaskPriority,
    TaskWithin,
)
from xentrix.models.schemas import (
    AgentStat,
    Insight,
    InsightsOutput,
    RecommendTask,
    Summary,
)


CENTER = "center"


# =============================================================================
# Policy
# =============================================================================


@dataclass(frozen=True)
class InsightPolicy:
    """
    Thresholds used by the v1 rule set.

    Defaults match the Settings defaults; use from_settings() to pick up
    environment overrides.
    """
    min_sample_calls: int = 30
    csat_target: float = 85.0
    csat_critical: float = 80.0
    fcr_target: float = 80.0
    fcr_critical: float = 70.0
    aht_too_low_sec: float = 300.0
    aht_too_high_sec: float = 900.0
    max_problems: int = 8

    @classmethod
    def from_settings(cls, settings: Settings) -> "InsightPolicy":
        return cls(
            min_sample_calls=settings.min_sample_calls,
            csat_target=settings.csat_target,
            csat_critical=settings.csat_critical,
            fcr_target=settings.fcr_target,
            fcr_critical=settings.fcr_critical,
            aht_too_low_sec=settings.aht_too_low_sec,
            aht_too_high_sec=settings.aht_too_high_sec,
            max_problems=settings.max_problems,
        )


# =============================================================================
# Helpers
# =============================================================================


def slug(seed: str) -> str:
    """
    Make an id-safe token from a seed such as an agent name.

    Whitespace runs become '_'; case and punctuation are kept, so agents that
    are grouped separately ('Ann' / 'ann', 'Mei.Tanaka' / 'MeiTanaka') keep
    separate ids. When whitespace was replaced, the first 8 hex digits of the
    seed's SHA-256 are appended so 'Mei Tanaka' cannot collide with a literal
    'Mei_Tanaka'.

    Example:
        >>> slug("Akari")
        'Akari'
        >>> slug("Mei Tanaka")[:11]
        'Mei_Tanaka-'
    """
    raw = str(seed)
    text = re.sub(r"\s+", "_", raw)
    if text == raw:
        return text
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:8]
    return f"{text}-{digest}"


def make_id(prefix: str, seed: str, window: Union[RangeKey, str]) -> str:
    """Deterministic id: <prefix>_<slug(seed)>_<window>."""
    return f"{prefix}_{slug(seed)}_{RangeKey(window).value}"


def _field(obj: Any, name: str) -> Any:
    # Summary / AgentStat models or plain dicts from JSON callers
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _round_seconds(value: float) -> int:
    return int(math.floor(value + 0.5))


def _dedupe(labels: Sequence[str], limit: int) -> List[str]:
    seen = set()
    out: List[str] = []
    for label in labels:
        if label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out[:limit]


# =============================================================================
# Rules
# =============================================================================


def _center_csat_rule(window, avg_csat, policy, problems, insights, tasks) -> None:
    if avg_csat is None or avg_csat >= policy.csat_target:
        return

    problems.append("CSAT may be below target")
    insights.append(Insight(
        id=make_id("ins", "center_csat_low", window),
        level=InsightLevel.CRITICAL if avg_csat < policy.csat_critical else InsightLevel.WARN,
        title="Low CSAT (center)",
        why=(
            f"Average CSAT is {avg_csat}%, below the target of "
            f"{policy.csat_target:g}%."
        ),
        impact="Lower satisfaction drives repeat contacts and churn risk.",
        scope=InsightScope.CENTER,
        who=CENTER,
        window=window,
        metrics={"CSAT": avg_csat},
    ))
    tasks.append(RecommendTask(
        id=make_id("task", "center_csat_review", window),
        priority=TaskPriority.P0,
        ownerType=OwnerType.SUPERVISOR,
        owner=CENTER,
        within=TaskWithin.D3,
        duration=TaskDuration.M60,
        task="Listen to 10 low-CSAT calls and summarize the three most common causes",
        howMany=10,
        evidence="CSAT is below target; call review is the fastest way to find the cause",
    ))


def _center_fcr_rule(window, fcr_rate, policy, problems, insights, tasks) -> None:
    if fcr_rate is None or fcr_rate >= policy.fcr_target:
        return

    problems.append("FCR may be low")
    insights.append(Insight(
        id=make_id("ins", "center_fcr_low", window),
        level=InsightLevel.CRITICAL if fcr_rate < policy.fcr_critical else InsightLevel.WARN,
        title="Low FCR (center)",
        why=f"FCR is {fcr_rate}%; repeat contacts are likely to increase.",
        impact="Repeat calls compound into higher AHT, higher cost and lower CSAT.",
        scope=InsightScope.CENTER,
        who=CENTER,
        window=window,
        metrics={"FCR": fcr_rate},
    ))
    tasks.append(RecommendTask(
        id=make_id("task", "center_fcr_checklist", window),
        priority=TaskPriority.P0,
        ownerType=OwnerType.CENTER,
        owner=CENTER,
        within=TaskWithin.D7,
        duration=TaskDuration.M120,
        task="Draft a v1 first-contact resolution checklist and roll it into daily operations",
        evidence="Low FCR increases repeat calls",
    ))


def _agent_metrics(agent: Any, avg_aht: float) -> Dict[str, Optional[float]]:
    return {
        "AHT": avg_aht,
        "CSAT": _number(_field(agent, "avgCsat")),
        "FCR": _number(_field(agent, "fcrRate")),
    }


def _aht_too_low_rule(window, agent, avg_aht, policy, problems, insights, tasks) -> None:
    name = str(_field(agent, "agentName"))
    low = f"{policy.aht_too_low_sec:g}"

    problems.append(f"AHT may be too short: {name}")
    insights.append(Insight(
        id=make_id("ins", f"aht_too_low_{name}", window),
        level=InsightLevel.WARN,
        title="AHT too short (quality risk)",
        why=(
            f"{name} has an average AHT of {_round_seconds(avg_aht)}s, below the "
            f"{low}s floor (possible rushed handling or skipped checks)."
        ),
        impact="Skipped checks lead to wrong guidance, repeat calls and lower CSAT.",
        scope=InsightScope.AGENT,
        who=name,
        window=window,
        metrics=_agent_metrics(agent, avg_aht),
    ))
    tasks.append(RecommendTask(
        id=make_id("task", f"listen_too_low_{name}", window),
        priority=TaskPriority.P0,
        ownerType=OwnerType.SUPERVISOR,
        owner=name,
        within=TaskWithin.D3,
        duration=TaskDuration.M30,
        task=(
            "Listen to 3 recent calls and check for skipped steps "
            "(identity check, need confirmation, read-back, next action)"
        ),
        howMany=3,
        evidence="AHT is too short; possible quality degradation",
    ))
    tasks.append(RecommendTask(
        id=make_id("task", f"knowledge_speed_{name}", window),
        priority=TaskPriority.P1,
        ownerType=OwnerType.AGENT,
        owner=name,
        within=TaskWithin.D7,
        duration=TaskDuration.M60,
        task="Review the knowledge-base search routine and bookmark the most used articles",
        evidence="Separates shortcuts taken from missing knowledge versus genuine mastery",
    ))


def _aht_too_high_rule(window, agent, avg_aht, policy, problems, insights, tasks) -> None:
    name = str(_field(agent, "agentName"))
    high = f"{policy.aht_too_high_sec:g}"

    problems.append(f"AHT may be too long: {name}")
    insights.append(Insight(
        id=make_id("ins", f"aht_too_high_{name}", window),
        level=InsightLevel.WARN,
        title="AHT too long (efficiency risk)",
        why=(
            f"{name} has an average AHT of {_round_seconds(avg_aht)}s, above the "
            f"{high}s ceiling (possible knowledge search, hold or processing bottlenecks)."
        ),
        impact="Lower productivity and longer queues degrade CSAT.",
        scope=InsightScope.AGENT,
        who=name,
        window=window,
        metrics=_agent_metrics(agent, avg_aht),
    ))
    tasks.append(RecommendTask(
        id=make_id("task", f"coach_too_high_{name}", window),
        priority=TaskPriority.P0,
        ownerType=OwnerType.SUPERVISOR,
        owner=name,
        within=TaskWithin.D7,
        duration=TaskDuration.M60,
        task=(
            "Listen to 2 calls, locate where time is lost (search, hold, explanation, "
            "wrap-up) and agree on one improvement"
        ),
        howMany=2,
        evidence="AHT exceeds the ceiling; find the bottleneck first",
    ))


# =============================================================================
# Entry point
# =============================================================================


def build_insights(
    window: Union[RangeKey, str],
    summary: Union[Summary, Dict[str, Any]],
    agent_stats: Optional[Sequence[Union[AgentStat, Dict[str, Any]]]] = None,
    min_sample_calls: Optional[int] = None,
    policy: Optional[InsightPolicy] = None,
) -> InsightsOutput:
    """
    Apply the v1 rule set to a summary and per-agent stats.

    Args:
        window: Time range the inputs were computed over.
        summary: Center-wide Summary (or an equivalent dict).
        agent_stats: Per-agent stats, in display order.
        min_sample_calls: Overrides policy.min_sample_calls when given.
        policy: Rule thresholds; defaults to InsightPolicy().

    Returns:
        InsightsOutput with problems, insights and recommendTasks. insights is
        never empty.
    """
    window = RangeKey(window)
    policy = policy or InsightPolicy()
    min_sample = policy.min_sample_calls if min_sample_calls is None else min_sample_calls

    problems: List[str] = []
    insights: List[Insight] = []
    tasks: List[RecommendTask] = []

    eligible_agents = [
        a for a in (agent_stats or [])
        if (_number(_field(a, "totalCalls")) or 0) >= min_sample
    ]

    # ---------- Center-wide checks ----------
    _center_csat_rule(window, _number(_field(summary, "avgCsat")), policy, problems, insights, tasks)
    _center_fcr_rule(window, _number(_field(summary, "fcrRate")), policy, problems, insights, tasks)

    # ---------- Agent-level AHT band ----------
    with_aht = [(a, _number(_field(a, "avgAht"))) for a in eligible_agents]
    too_low = [(a, v) for a, v in with_aht if v is not None and v < policy.aht_too_low_sec]
    too_high = [(a, v) for a, v in with_aht if v is not None and v > policy.aht_too_high_sec]

    for agent, avg_aht in too_low:
        _aht_too_low_rule(window, agent, avg_aht, policy, problems, insights, tasks)

    for agent, avg_aht in too_high:
        _aht_too_high_rule(window, agent, avg_aht, policy, problems, insights, tasks)

    if not insights:
        insights.append(Insight(
            id=make_id("ins", "no_findings", window),
            level=InsightLevel.INFO,
            title="No major issues detected (v1)",
            why="No item matches the current rule conditions.",
            scope=InsightScope.CENTER,
            who=CENTER,
            window=window,
        ))

    return InsightsOutput(
        problems=_dedupe(problems, policy.max_problems),
        insights=insights,
        recommendTasks=tasks,
    )
