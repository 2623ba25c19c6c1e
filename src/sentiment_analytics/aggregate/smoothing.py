"""Trailing moving average over a daily series."""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from sentiment_analytics.models import DailyPoint


def smooth(points: Sequence[DailyPoint], window: int) -> list[DailyPoint]:
    """Apply a trailing rolling mean of daily averages.

    Point `i` becomes the mean of `avg` over points `max(0, i - window + 1)`
    through `i`. The first `window - 1` points average over what exists so far
    instead of padding with zeros. Each day weighs the same regardless of how
    many answers it holds.

    Args:
        points: Daily points; re-sorted by date before smoothing.
        window: Window length in points, at least 1.

    Returns:
        A list of the same length. `window == 1` returns the points unchanged.

    Raises:
        ValueError: if `window < 1`.
    """
    if window < 1:
        raise ValueError(f"smoothing window must be >= 1, got {window}")
    if window == 1 or not points:
        return list(points)

    ordered = sorted(points, key=lambda p: p.date)
    rolled = pd.Series([p.avg for p in ordered], dtype=float).rolling(window=window, min_periods=1).mean()
    return [p.model_copy(update={"avg": float(v)}) for p, v in zip(ordered, rolled)]
