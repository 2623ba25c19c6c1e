"""Compose the derived outputs for the market overview and company profile.

Both builders are pure: callers invoke them again whenever the answers or
the configuration change. Each accepts either validated answers or a frame
already built by `answers_to_frame`.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence, Union

import pandas as pd

from sentiment_analytics.aggregate.build_series import (
    attribute_stats,
    daily_series,
    daily_series_by_tag,
    default_date_window,
    filter_series,
    sector_stats,
    series_bounds,
)
from sentiment_analytics.aggregate.compare import compare_windows
from sentiment_analytics.aggregate.frame import answers_to_frame, companies_by_isin, derive_companies
from sentiment_analytics.aggregate.ranking import (
    axis_extent,
    heat_map,
    most_rated,
    radar_scale,
    score_entities,
    top_fallers,
    top_risers,
)
from sentiment_analytics.aggregate.smoothing import smooth
from sentiment_analytics.config import DEFAULT_SMOOTHING_DAYS
from sentiment_analytics.models import (
    AnalyticsConfig,
    Answer,
    CompanyProfile,
    DailyPoint,
    DateWindow,
    MarketOverview,
)

log = logging.getLogger(__name__)

AnswerData = Union[pd.DataFrame, Iterable[Answer]]


def _as_frame(data: AnswerData) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    return answers_to_frame(data)


def effective_window(window: DateWindow, points: Sequence[DailyPoint]) -> DateWindow:
    """Return `window`, or the default trailing view when both ends are open."""
    if window.start is None and window.end is None:
        return default_date_window(points)
    return window


def build_market_overview(data: AnswerData, config: AnalyticsConfig | None = None) -> MarketOverview:
    """Build every market overview output for one configuration.

    Args:
        data: Answers or an observation frame.
        config: Date window, smoothing and comparison settings.

    Returns:
        `MarketOverview` with series, sector heat, movers and rankings.
    """
    config = config or AnalyticsConfig()
    frame = _as_frame(data)

    full_series = daily_series(frame)
    window = effective_window(config.date_window, full_series)
    series = filter_series(full_series, window)
    smoothed = smooth(series, config.smoothing_window_days)

    sectors = sector_stats(frame, window, config.sector_name_overrides)

    # Movers end at the caller's end day when one was chosen, else at the latest answer.
    changes = compare_windows(
        frame,
        end=config.date_window.end,
        window_days=config.comparison_window_days,
    )

    companies = sorted(derive_companies(frame), key=lambda c: (c.title, c.isin))

    log.info(
        "Overview: %d answers, %d companies, %d days in window, %d movers",
        len(frame),
        len(companies),
        len(series),
        len(changes),
    )

    return MarketOverview(
        companies=companies,
        series_bounds=series_bounds(full_series),
        date_window=window,
        daily_series=series,
        smoothed_series=smoothed,
        series_extent=axis_extent((p.avg for p in smoothed), include_zero=True),
        sector_stats=sectors,
        sector_heat=heat_map(sectors),
        comparison_window_days=config.comparison_window_days,
        top_risers=top_risers(changes),
        top_fallers=top_fallers(changes),
        top_companies=score_entities(frame),
        most_rated=most_rated(frame, window),
    )


def build_company_profile(
    data: AnswerData,
    isin: str,
    smoothing_window_days: int = DEFAULT_SMOOTHING_DAYS,
    tags: Sequence[str] = (),
) -> CompanyProfile:
    """Build the attribute radar and trend series for one company.

    Args:
        data: Answers or an observation frame (all companies are fine).
        isin: Company to profile.
        smoothing_window_days: Trailing window applied to every trend series.
        tags: Attribute tags to include as extra trend series.

    Returns:
        `CompanyProfile`; an unknown ISIN gives `company=None` and empty outputs.
    """
    frame = _as_frame(data)
    rows = frame[frame["isin"] == isin]
    company = companies_by_isin(rows).get(isin)

    attrs = attribute_stats(rows)
    overall = daily_series(rows)
    smoothed = smooth(overall, smoothing_window_days)

    by_tag = daily_series_by_tag(rows)
    tag_series = {t: smooth(by_tag.get(t, []), smoothing_window_days) for t in tags}

    values = [p.avg for p in smoothed] + [p.avg for pts in tag_series.values() for p in pts]

    if company is None:
        log.warning("No answers found for ISIN %s", isin)

    return CompanyProfile(
        isin=isin,
        company=company,
        attribute_stats=attrs,
        radar_scale=radar_scale(attrs),
        daily_series=overall,
        smoothed_series=smoothed,
        tag_series=tag_series,
        series_extent=axis_extent(values),
    )
