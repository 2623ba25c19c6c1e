"""Aggregation and comparison core.

This package turns validated answers into the derived series, stats and
rankings a dashboard draws: UTC day bucketing, sum/count aggregation,
trailing smoothing, window-over-window movers, top-N rankings and the
bounded normalizations used for heat and axis scales. Every function is a
pure transformation of its inputs.
"""

from sentiment_analytics.aggregate.build_series import (
    activity_counts,
    aggregate,
    attribute_stats,
    daily_series,
    daily_series_by_tag,
    sector_stats,
)
from sentiment_analytics.aggregate.compare import compare_windows
from sentiment_analytics.aggregate.frame import answers_to_frame, day_key
from sentiment_analytics.aggregate.overview import build_company_profile, build_market_overview
from sentiment_analytics.aggregate.ranking import (
    axis_extent,
    heat_map,
    heat_position,
    most_rated,
    score_entities,
    top_fallers,
    top_risers,
)
from sentiment_analytics.aggregate.smoothing import smooth

__all__ = [
    "activity_counts",
    "aggregate",
    "answers_to_frame",
    "attribute_stats",
    "axis_extent",
    "build_company_profile",
    "build_market_overview",
    "compare_windows",
    "daily_series",
    "daily_series_by_tag",
    "day_key",
    "heat_map",
    "heat_position",
    "most_rated",
    "score_entities",
    "sector_stats",
    "smooth",
    "top_fallers",
    "top_risers",
]
