"""Window-over-window comparison of per-company averages.

For an end instant `E` and window length `w` days:
- recent window:   E - w  <= t <= E
- previous window: E - 2w <= t <  E - w

A company is reported only when both windows hold at least one counted
answer; a delta against an empty window is undefined, not zero.
"""
from __future__ import annotations

import logging
from datetime import date, datetime

import pandas as pd

from sentiment_analytics.aggregate.build_series import aggregate
from sentiment_analytics.aggregate.frame import companies_by_isin, latest_timestamp, to_utc
from sentiment_analytics.models import EntityChange

log = logging.getLogger(__name__)


def resolve_end(frame: pd.DataFrame, end: date | datetime | str | None = None) -> pd.Timestamp | None:
    """Return the comparison end instant.

    `None` means the latest `created` timestamp in the whole frame (skipped
    answers included), never the wall clock. A calendar day resolves to its
    UTC midnight.
    """
    if end is None:
        return latest_timestamp(frame)
    return to_utc(end)


def compare_windows(
    frame: pd.DataFrame,
    end: date | datetime | str | None = None,
    window_days: int = 7,
) -> list[EntityChange]:
    """Compare each company's recent-window average with the preceding window.

    Args:
        frame: Observation frame.
        end: End of the recent window (inclusive); defaults to the latest answer.
        window_days: Length of each window in days, at least 1.

    Returns:
        One `EntityChange` per company present in both windows, ordered by ISIN.

    Raises:
        ValueError: if `window_days < 1`.
    """
    if window_days < 1:
        raise ValueError(f"comparison window must be >= 1 day, got {window_days}")

    end_ts = resolve_end(frame, end)
    if end_ts is None:
        return []

    recent_start = end_ts - pd.Timedelta(days=window_days)
    prev_start = end_ts - pd.Timedelta(days=2 * window_days)

    recent = aggregate(
        frame,
        "isin",
        where=lambda r: (r["created"] >= recent_start) & (r["created"] <= end_ts),
    )
    prev = aggregate(
        frame,
        "isin",
        where=lambda r: (r["created"] >= prev_start) & (r["created"] < recent_start),
    )

    # inner join keeps companies counted in both windows
    both = recent.join(prev, how="inner", lsuffix="_recent", rsuffix="_prev")
    if both.empty:
        return []

    companies = companies_by_isin(frame)
    out: list[EntityChange] = []
    for isin, row in both.iterrows():
        recent_avg = float(row["avg_recent"])
        prev_avg = float(row["avg_prev"])
        out.append(
            EntityChange(
                entity=companies[str(isin)],
                delta=recent_avg - prev_avg,
                recent_avg=recent_avg,
                prev_avg=prev_avg,
                recent_count=int(row["count_recent"]),
                prev_count=int(row["count_prev"]),
            )
        )

    log.debug(
        "Compared %d companies over %d-day windows ending %s",
        len(out),
        window_days,
        end_ts.isoformat(),
    )
    return out
