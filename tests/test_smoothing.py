from __future__ import annotations

from datetime import date

import pytest

from sentiment_analytics.aggregate.smoothing import smooth
from sentiment_analytics.models import DailyPoint


def _points(*avgs: float) -> list[DailyPoint]:
    return [DailyPoint(date=date(2024, 1, i + 1), avg=a, count=1) for i, a in enumerate(avgs)]


def test_window_one_is_identity() -> None:
    points = _points(3, -1, 2)
    assert smooth(points, 1) == points


def test_trailing_mean_without_zero_padding() -> None:
    out = smooth(_points(1, 2, 3, 4), 3)
    assert [p.avg for p in out] == pytest.approx([1.0, 1.5, 2.0, 3.0])
    assert [p.date for p in out] == [date(2024, 1, d) for d in (1, 2, 3, 4)]


def test_window_wider_than_series() -> None:
    out = smooth(_points(2, 4), 30)
    assert [p.avg for p in out] == pytest.approx([2.0, 3.0])


def test_unsorted_input_is_sorted_first() -> None:
    points = _points(1, 2, 3)
    out = smooth(list(reversed(points)), 2)
    assert [p.date.day for p in out] == [1, 2, 3]
    assert [p.avg for p in out] == pytest.approx([1.0, 1.5, 2.5])


def test_counts_are_kept() -> None:
    points = [DailyPoint(date=date(2024, 1, 1), avg=1.0, count=4), DailyPoint(date=date(2024, 1, 2), avg=3.0, count=2)]
    out = smooth(points, 2)
    assert [p.count for p in out] == [4, 2]


def test_empty_series() -> None:
    assert smooth([], 7) == []


def test_invalid_window_raises() -> None:
    with pytest.raises(ValueError):
        smooth(_points(1), 0)
