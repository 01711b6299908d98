"""
Quantile Ranker - top/bottom selection by interpolated quantile thresholds.

Selects extreme-performing entities (agents) by statistical threshold rather
than by a fixed rank count, with a guaranteed minimum membership on each side.

Algorithm (rank_by_quantile):
1. eligible = items with a finite value and sample >= min_sample
2. no eligible items -> empty selections, reason 'no_eligible_items'
3. ratio == 0 -> empty selections, reason 'ratio_zero_or_threshold_null'
4. thresholds are linearly interpolated quantiles of the eligible values:
   higher_is_better: top at 1 - ratio, bottom at ratio; lower_is_better swaps
5. top = values at or beyond the top threshold on the favorable side,
   bottom = values at or beyond the bottom threshold on the unfavorable side
6. a side with fewer than min_items members is replaced by the first
   min_items items of the eligible list sorted for that side

Ties at a threshold are all included, so a side may exceed the nominal ratio.
"""

import math
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from xentrix.models.enums import MetricDirection, RankMetric
from xentrix.models.schemas import AgentStat, RankItem, RankMeta, RankResult


MAX_RATIO = 0.5
DEFAULT_MIN_ITEMS = 2

REASON_NO_ELIGIBLE = "no_eligible_items"
REASON_RATIO_ZERO = "ratio_zero_or_threshold_null"

METRIC_DIRECTIONS = {
    RankMetric.AVG_AHT: MetricDirection.LOWER_IS_BETTER,
    RankMetric.AVG_CSAT: MetricDirection.HIGHER_IS_BETTER,
    RankMetric.FCR_RATE: MetricDirection.HIGHER_IS_BETTER,
    RankMetric.SLA_RATE: MetricDirection.HIGHER_IS_BETTER,
    RankMetric.ESCALATION_RATE: MetricDirection.LOWER_IS_BETTER,
}


def quantile(values: Iterable[float], q: float) -> Optional[float]:
    """
    Linear-interpolated quantile of values, or None if no finite values.

    q is clamped to [0, 1]. Position (n - 1) * q is blended between the two
    bracketing order statistics.

    Example:
        >>> quantile([1.0, 2.0, 3.0, 4.0], 0.5)
        2.5
    """
    xs = np.array([v for v in values if v is not None and math.isfinite(v)], dtype=float)
    if xs.size == 0:
        return None
    qq = min(1.0, max(0.0, q))
    return float(np.quantile(xs, qq, method="linear"))


def _finite(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def rank_by_quantile(
    items: Sequence[RankItem],
    ratio: float,
    direction: Union[MetricDirection, str],
    min_items: int = DEFAULT_MIN_ITEMS,
    min_sample: int = 0,
) -> RankResult:
    """
    Select top and bottom items by quantile thresholds.

    Args:
        items: Candidates as (id, value, sample) triples.
        ratio: Share of the distribution on each side, clamped to [0, 0.5].
        direction: Which side of the metric is favorable.
        min_items: Minimum members guaranteed on each side when possible.
        min_sample: Items with a smaller sample are not eligible.

    Returns:
        RankResult with 'top' sorted best-first and 'bottom' worst-first.
    """
    direction = MetricDirection(direction)
    ratio = min(MAX_RATIO, max(0.0, float(ratio)))
    higher_is_better = direction == MetricDirection.HIGHER_IS_BETTER

    eligible: List[RankItem] = []
    for item in items or []:
        value = _finite(item.value)
        sample = item.sample or 0
        if value is None or sample < min_sample:
            continue
        eligible.append(RankItem(id=item.id, value=value, sample=sample))

    def meta(threshold_top=None, threshold_bottom=None, reason=None) -> RankMeta:
        return RankMeta(
            ratio=ratio,
            minItems=min_items,
            minSample=min_sample,
            eligible=len(eligible),
            thresholdTop=threshold_top,
            thresholdBottom=threshold_bottom,
            reason=reason,
        )

    if not eligible:
        return RankResult(top=[], bottom=[], meta=meta(reason=REASON_NO_ELIGIBLE))

    values = [item.value for item in eligible]
    q_top = 1 - ratio if higher_is_better else ratio
    q_bottom = ratio if higher_is_better else 1 - ratio

    threshold_top = None if ratio == 0 else quantile(values, q_top)
    threshold_bottom = None if ratio == 0 else quantile(values, q_bottom)

    if ratio == 0 or threshold_top is None or threshold_bottom is None:
        return RankResult(
            top=[],
            bottom=[],
            meta=meta(threshold_top, threshold_bottom, REASON_RATIO_ZERO),
        )

    if higher_is_better:
        top = [x for x in eligible if x.value >= threshold_top]
        bottom = [x for x in eligible if x.value <= threshold_bottom]
    else:
        top = [x for x in eligible if x.value <= threshold_top]
        bottom = [x for x in eligible if x.value >= threshold_bottom]

    # Stable sorts: equal values keep input order
    top.sort(key=lambda x: x.value, reverse=higher_is_better)
    bottom.sort(key=lambda x: x.value, reverse=not higher_is_better)

    sorted_all = sorted(eligible, key=lambda x: x.value, reverse=higher_is_better)
    take = min(min_items, len(sorted_all))

    if len(top) < min_items:
        top = sorted_all[:take]
    if len(bottom) < min_items:
        bottom = list(reversed(sorted_all))[:take]

    return RankResult(top=top, bottom=bottom, meta=meta(threshold_top, threshold_bottom))


def rank_agents(
    agent_stats: Sequence[AgentStat],
    metric: Union[RankMetric, str],
    ratio: float,
    min_items: int = DEFAULT_MIN_ITEMS,
    min_sample: int = 0,
) -> RankResult:
    """
    Rank agents on one AgentStat metric.

    Each agent becomes a RankItem (id=agentName, value=<metric>,
    sample=totalCalls); the direction comes from METRIC_DIRECTIONS.
    """
    metric = RankMetric(metric)
    items = [
        RankItem(
            id=stat.agentName,
            value=getattr(stat, metric.value),
            sample=stat.totalCalls,
        )
        for stat in agent_stats
    ]
    return rank_by_quantile(
        items,
        ratio=ratio,
        direction=METRIC_DIRECTIONS[metric],
        min_items=min_items,
        min_sample=min_sample,
    )
