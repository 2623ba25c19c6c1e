"""Sum/count aggregation and the series built on it.

`aggregate` is the single accumulation primitive: it drops skipped answers,
applies an optional row filter, groups by a key and emits total, count and
average per key. The builders below turn its output into the pydantic
models consumed by the dashboard.

Expectations:
- Input: a frame from `answers_to_frame`
- Outputs: lists of models in a deterministic order (documented per function)
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, Mapping, Sequence, Union

import pandas as pd

from sentiment_analytics.aggregate.frame import companies_by_isin, in_window
from sentiment_analytics.aggregate.sector_names import SECTOR_BY_TID, sector_label
from sentiment_analytics.config import DEFAULT_VIEW_DAYS
from sentiment_analytics.models import DailyPoint, DateWindow, GroupStat, MostRated, SeriesBounds

log = logging.getLogger(__name__)

RowFn = Callable[[pd.DataFrame], pd.Series]
KeySpec = Union[str, RowFn]


def _empty_stats() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "total": pd.Series(dtype=float),
            "count": pd.Series(dtype="int64"),
            "avg": pd.Series(dtype=float),
        }
    )


def aggregate(
    frame: pd.DataFrame,
    key: KeySpec,
    value: KeySpec = "value",
    where: RowFn | None = None,
) -> pd.DataFrame:
    """Accumulate total and count per key and derive the average.

    Skipped answers and rows failing `where` are removed before accumulation.
    Keys that end up with no rows never appear, so `avg` is always finite.

    Args:
        frame: Observation frame.
        key: Column name or function returning the grouping key per row.
        value: Column name or function returning the value per row.
        where: Optional row predicate returning a boolean Series.

    Returns:
        DataFrame indexed by key (sorted ascending) with columns
        `total`, `count`, `avg`.
    """
    rows = frame[~frame["skip"]]
    if where is not None and not rows.empty:
        rows = rows[where(rows)]
    if rows.empty:
        return _empty_stats()

    keys = rows[key] if isinstance(key, str) else key(rows)
    values = rows[value] if isinstance(value, str) else value(rows)

    out = values.astype(float).groupby(keys, sort=True).agg(total="sum", count="count")
    out = out[out["count"] > 0].copy()
    out["avg"] = out["total"] / out["count"]
    return out


def window_filter(window: DateWindow | None) -> RowFn | None:
    """Return a row predicate for `window`, or None when it is fully open."""
    if window is None or (window.start is None and window.end is None):
        return None
    return lambda rows: in_window(rows, window)


def _to_points(stats: pd.DataFrame) -> list[DailyPoint]:
    return [
        DailyPoint(date=day, avg=float(avg), count=int(count))
        for day, avg, count in zip(stats.index, stats["avg"], stats["count"])
    ]


def daily_series(frame: pd.DataFrame, window: DateWindow | None = None) -> list[DailyPoint]:
    """Return the average value per UTC day, date ascending.

    Only days with at least one counted answer appear; gaps are not filled.
    """
    return _to_points(aggregate(frame, "day", where=window_filter(window)))


def daily_series_by_tag(
    frame: pd.DataFrame,
    window: DateWindow | None = None,
) -> dict[str, list[DailyPoint]]:
    """Return one daily series per question tag, tags in ascending order."""
    out: dict[str, list[DailyPoint]] = {}
    for tag, rows in frame.groupby("tag", sort=True):
        points = daily_series(rows, window)
        if points:
            out[str(tag)] = points
    return out


def sector_stats(
    frame: pd.DataFrame,
    window: DateWindow | None = None,
    overrides: Mapping[int, str] | None = None,
    fallback: Mapping[int, str] = SECTOR_BY_TID,
) -> list[GroupStat]:
    """Average value per sector (company `tid`) within a date window.

    Returns:
        One `GroupStat` per sector with answers, sorted by label then key.
    """
    stats = aggregate(frame, "tid", where=window_filter(window))
    out = [
        GroupStat(
            key=str(int(tid)),
            label=sector_label(int(tid), overrides, fallback),
            avg=float(avg),
            count=int(count),
        )
        for tid, avg, count in zip(stats.index, stats["avg"], stats["count"])
    ]
    out.sort(key=lambda s: (s.label, s.key))
    log.debug("Computed %d sector stats", len(out))
    return out


def attribute_stats(frame: pd.DataFrame, window: DateWindow | None = None) -> list[GroupStat]:
    """Average value per question tag, sorted by tag."""
    stats = aggregate(frame, "tag", where=window_filter(window))
    return [
        GroupStat(key=str(tag), label=str(tag), avg=float(avg), count=int(count))
        for tag, avg, count in zip(stats.index, stats["avg"], stats["count"])
    ]


def activity_counts(frame: pd.DataFrame, window: DateWindow | None = None) -> list[MostRated]:
    """Number of counted answers per company within `window`, ordered by ISIN."""
    stats = aggregate(frame, "isin", where=window_filter(window))
    companies = companies_by_isin(frame)
    return [
        MostRated(entity=companies[str(isin)], count=int(count))
        for isin, count in zip(stats.index, stats["count"])
    ]


# =========================================================
# SERIES WINDOW HELPERS
# =========================================================

def series_bounds(points: Sequence[DailyPoint]) -> SeriesBounds:
    """Return the first and last day of a series (both None when empty)."""
    if not points:
        return SeriesBounds()
    days = [p.date for p in points]
    return SeriesBounds(min=min(days), max=max(days))


def filter_series(points: Sequence[DailyPoint], window: DateWindow | None) -> list[DailyPoint]:
    """Keep the points whose day lies inside `window` (inclusive, open ends pass)."""
    if window is None:
        return list(points)
    return [
        p
        for p in points
        if (window.start is None or p.date >= window.start)
        and (window.end is None or p.date <= window.end)
    ]


def default_date_window(points: Sequence[DailyPoint], days: int = DEFAULT_VIEW_DAYS) -> DateWindow:
    """Return the default view: the last `days` days of data, bounded by the first day."""
    bounds = series_bounds(points)
    if bounds.min is None or bounds.max is None:
        return DateWindow()
    start = max(bounds.min, bounds.max - timedelta(days=days))
    return DateWindow(start=start, end=bounds.max)
