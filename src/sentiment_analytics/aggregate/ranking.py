"""Rankings and bounded normalizations for display.

Rankings sort with a secondary key (company title, ascending) so identical
input always yields identical output. Normalizations never emit NaN or
infinities: degenerate ranges fall back to a neutral position or a padded
axis.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from sentiment_analytics.aggregate.build_series import activity_counts, aggregate
from sentiment_analytics.aggregate.compare import resolve_end
from sentiment_analytics.aggregate.frame import companies_by_isin
from sentiment_analytics.models import (
    AxisExtent,
    DateWindow,
    EntityChange,
    GroupStat,
    HeatCell,
    MostRated,
    ScoredEntity,
)

log = logging.getLogger(__name__)

TOP_MOVERS_N = 10
TOP_SCORED_N = 5
MOST_RATED_N = 10
SCORE_LOOKBACK_DAYS = 180

NEUTRAL_POSITION = 0.5
AXIS_PAD_RATIO = 0.1


# =========================================================
# TOP-N RANKINGS
# =========================================================

def top_risers(changes: Iterable[EntityChange], n: int = TOP_MOVERS_N) -> list[EntityChange]:
    """Return the `n` largest deltas, descending."""
    return sorted(changes, key=lambda c: (-c.delta, c.entity.title))[:n]


def top_fallers(changes: Iterable[EntityChange], n: int = TOP_MOVERS_N) -> list[EntityChange]:
    """Return the `n` smallest deltas, ascending."""
    return sorted(changes, key=lambda c: (c.delta, c.entity.title))[:n]


def score_entities(
    frame: pd.DataFrame,
    end: date | datetime | str | None = None,
    lookback_days: int = SCORE_LOOKBACK_DAYS,
    n: int = TOP_SCORED_N,
) -> list[ScoredEntity]:
    """Score companies by their mean value over a trailing lookback.

    The scoring window is `[end - lookback_days, end]`, where `end` defaults
    to the latest answer in the frame. Companies without counted answers in
    the window are left out rather than given a placeholder score.

    Args:
        frame: Observation frame.
        end: End of the scoring window.
        lookback_days: Window length in days.
        n: Number of companies to keep.

    Returns:
        Up to `n` `ScoredEntity` items, score descending, title ascending.
    """
    end_ts = resolve_end(frame, end)
    if end_ts is None:
        return []
    start_ts = end_ts - pd.Timedelta(days=lookback_days)

    stats = aggregate(
        frame,
        "isin",
        where=lambda r: (r["created"] >= start_ts) & (r["created"] <= end_ts),
    )
    companies = companies_by_isin(frame)
    scored = [
        ScoredEntity(entity=companies[str(isin)], score=float(avg))
        for isin, avg in zip(stats.index, stats["avg"])
    ]
    scored.sort(key=lambda s: (-s.score, s.entity.title))
    return scored[:n]


def most_rated(
    frame: pd.DataFrame,
    window: DateWindow | None = None,
    n: int = MOST_RATED_N,
) -> list[MostRated]:
    """Return the `n` companies with the most counted answers in `window`."""
    items = activity_counts(frame, window)
    items.sort(key=lambda m: (-m.count, m.entity.title))
    return items[:n]


# =========================================================
# HEAT NORMALIZATION
# =========================================================

def heat_position(value: float, lo: float, hi: float) -> float:
    """Map `value` onto [0, 1] with zero at the centre.

    The scale is symmetric around zero: `absMax = max(|lo|, |hi|)` and the
    position is `(value + absMax) / (2 * absMax)`, clamped. A degenerate range
    (`lo == hi`, including all zeros) or a non-finite input returns
    `NEUTRAL_POSITION`.
    """
    if not np.isfinite([value, lo, hi]).all() or lo == hi:
        return NEUTRAL_POSITION
    abs_max = max(abs(lo), abs(hi))
    norm = (value + abs_max) / (2 * abs_max)
    return min(1.0, max(0.0, norm))


def heat_map(stats: Sequence[GroupStat]) -> list[HeatCell]:
    """Attach a heat position to each group stat, preserving order."""
    if not stats:
        return []
    avgs = [s.avg for s in stats]
    lo, hi = min(avgs), max(avgs)
    neutral = lo == hi
    return [
        HeatCell(
            key=s.key,
            label=s.label,
            avg=s.avg,
            count=s.count,
            position=heat_position(s.avg, lo, hi),
            neutral=neutral or not math.isfinite(s.avg),
        )
        for s in stats
    ]


# =========================================================
# AXIS / SCALE
# =========================================================

def axis_extent(values: Iterable[float], include_zero: bool = False) -> AxisExtent:
    """Return a value axis range that never collapses to a point.

    Args:
        values: Series values; non-finite entries are ignored.
        include_zero: Widen the range so that 0 is on the axis.

    Returns:
        `(min, max)` of the values, or `value ± max(1, |value|) * 0.1` when all
        values are equal. No values yields `(-0.1, 0.1)`.
    """
    finite = [float(v) for v in values if math.isfinite(v)]
    if not finite:
        return AxisExtent(lo=-AXIS_PAD_RATIO, hi=AXIS_PAD_RATIO)

    lo, hi = min(finite), max(finite)
    if include_zero:
        lo, hi = min(lo, 0.0), max(hi, 0.0)
    if lo == hi:
        pad = max(1.0, abs(hi)) * AXIS_PAD_RATIO
        return AxisExtent(lo=lo - pad, hi=hi + pad)
    return AxisExtent(lo=lo, hi=hi)


def radar_scale(stats: Sequence[GroupStat], max_abs: float | None = None) -> float:
    """Return the outer radius value of an attribute radar.

    A fixed `max_abs` wins; otherwise the largest absolute average, at least 1.
    """
    if max_abs is not None:
        return float(max_abs)
    return max([1.0] + [abs(s.avg) for s in stats])
