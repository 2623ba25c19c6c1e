"""Flatten validated answers into a pandas frame and bucket them by UTC day.

Every aggregate in this package works on the frame built here. Columns:
- `value`, `created` (tz-aware UTC), `day` (UTC calendar date), `skip`
- `isin`, `title`, `tid`, `company_id`, `standby` (company fields)
- `tag` (question tag, blank tags become "Other")
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable

import pandas as pd

from sentiment_analytics.models import Answer, Company, DateWindow

log = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "value",
    "created",
    "day",
    "skip",
    "isin",
    "title",
    "tid",
    "company_id",
    "standby",
    "tag",
]


def to_utc(ts: Any) -> pd.Timestamp:
    """Return `ts` as a UTC `pd.Timestamp`; naive input is taken to be UTC."""
    t = pd.Timestamp(ts)
    if t.tzinfo is None:
        return t.tz_localize("UTC")
    return t.tz_convert("UTC")


def day_key(ts: Any) -> date:
    """Truncate a timestamp to its UTC calendar day.

    Args:
        ts: Anything `pd.Timestamp` accepts (ISO string, datetime, date).

    Returns:
        The `date` of the timestamp in UTC, independent of the local timezone.
    """
    return to_utc(ts).date()


def day_keys(created: pd.Series) -> pd.Series:
    """Vectorized `day_key` for a tz-aware `created` column."""
    return created.dt.tz_convert("UTC").dt.date


def _empty_frame() -> pd.DataFrame:
    frame = pd.DataFrame({c: pd.Series(dtype="object") for c in FRAME_COLUMNS})
    frame["value"] = frame["value"].astype(float)
    frame["created"] = pd.to_datetime(frame["created"], utc=True)
    frame["skip"] = frame["skip"].astype(bool)
    return frame


def answers_to_frame(answers: Iterable[Answer]) -> pd.DataFrame:
    """Flatten `Answer` models into one row per observation.

    Skipped answers are kept; each aggregate filters them itself.

    Args:
        answers: Validated answers.

    Returns:
        DataFrame with `FRAME_COLUMNS`, in input order.
    """
    rows = [
        {
            "value": a.value,
            "created": a.created,
            "skip": a.skip,
            "isin": a.company.isin,
            "title": a.company.title,
            "tid": a.company.tid,
            "company_id": a.company.id,
            "standby": a.company.standby,
            "tag": a.tag,
        }
        for a in answers
    ]
    if not rows:
        return _empty_frame()

    frame = pd.DataFrame(rows)
    frame["value"] = frame["value"].astype(float)
    frame["created"] = pd.to_datetime(frame["created"], utc=True)
    frame["skip"] = frame["skip"].astype(bool)
    frame["day"] = day_keys(frame["created"])
    log.debug("Built frame with %d answers (%d skipped)", len(frame), int(frame["skip"].sum()))
    return frame[FRAME_COLUMNS]


def in_window(frame: pd.DataFrame, window: DateWindow | None) -> pd.Series:
    """Return a boolean mask of rows whose UTC day lies inside `window`.

    Both ends are inclusive calendar days; a missing end is open.
    """
    mask = pd.Series(True, index=frame.index)
    if window is None:
        return mask
    if window.start is not None:
        mask &= frame["created"] >= to_utc(window.start)
    if window.end is not None:
        mask &= frame["created"] < to_utc(window.end) + pd.Timedelta(days=1)
    return mask


def latest_timestamp(frame: pd.DataFrame) -> pd.Timestamp | None:
    """Return the newest `created` value of the whole frame, skipped rows included."""
    if frame.empty:
        return None
    return frame["created"].max()


def _company_from_row(row: Any) -> Company:
    return Company(
        id=int(row.company_id),
        isin=str(row.isin),
        title=str(row.title),
        tid=int(row.tid),
        standby=bool(row.standby),
    )


def companies_by_isin(frame: pd.DataFrame) -> dict[str, Company]:
    """Map ISIN to its company; the first answer for an ISIN wins."""
    firsts = frame.drop_duplicates(subset="isin", keep="first")
    return {str(row.isin): _company_from_row(row) for row in firsts.itertuples(index=False)}


def derive_companies(frame: pd.DataFrame) -> list[Company]:
    """Return the unique companies present in the frame, in first-seen order."""
    return list(companies_by_isin(frame).values())

