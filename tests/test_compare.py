from __future__ import annotations

from datetime import date

import pytest

from sentiment_analytics.aggregate.compare import compare_windows, resolve_end
from sentiment_analytics.aggregate.frame import answers_to_frame


def test_compare_windows_delta(make_answer) -> None:
    frame = answers_to_frame(
        [
            make_answer(7, "2024-01-08T10:00:00Z"),
            make_answer(8, "2024-01-10T10:00:00Z"),
            make_answer(9, "2024-01-12T10:00:00Z"),
            make_answer(4, "2024-01-01T10:00:00Z"),
            make_answer(6, "2024-01-03T10:00:00Z"),
            make_answer(100, "2024-01-11T10:00:00Z", skip=True),
        ]
    )
    changes = compare_windows(frame, end=date(2024, 1, 14), window_days=7)
    assert len(changes) == 1
    c = changes[0]
    assert c.entity.isin == "A"
    assert c.delta == pytest.approx(3.0)
    assert c.recent_avg == pytest.approx(8.0)
    assert c.prev_avg == pytest.approx(5.0)
    assert (c.recent_count, c.prev_count) == (3, 2)


def test_company_in_one_window_is_excluded(make_answer) -> None:
    frame = answers_to_frame(
        [
            make_answer(1, "2024-01-10", isin="A"),
            make_answer(2, "2024-01-03", isin="A"),
            make_answer(5, "2024-01-10", isin="B"),
            make_answer(5, "2024-01-03", isin="C"),
        ]
    )
    changes = compare_windows(frame, end=date(2024, 1, 14), window_days=7)
    assert [c.entity.isin for c in changes] == ["A"]


def test_boundary_instant_counts_only_in_recent(make_answer) -> None:
    frame = answers_to_frame(
        [
            make_answer(10, "2024-01-07T00:00:00Z"),
            make_answer(2, "2024-01-01T00:00:00Z"),
        ]
    )
    changes = compare_windows(frame, end=date(2024, 1, 14), window_days=7)
    assert len(changes) == 1
    assert changes[0].recent_count == 1
    assert changes[0].prev_count == 1
    assert changes[0].recent_avg == 10.0
    assert changes[0].prev_avg == 2.0


def test_default_end_uses_latest_answer_even_if_skipped(make_answer) -> None:
    frame = answers_to_frame(
        [
            make_answer(4, "2024-01-02T12:00:00Z"),
            make_answer(6, "2024-01-09T00:00:00Z"),
            make_answer(0, "2024-01-15T00:00:00Z", isin="Z", skip=True),
        ]
    )
    assert resolve_end(frame).isoformat() == "2024-01-15T00:00:00+00:00"
    changes = compare_windows(frame, window_days=7)
    assert len(changes) == 1
    assert changes[0].delta == pytest.approx(2.0)


def test_results_ordered_by_isin(make_answer) -> None:
    answers = []
    for isin in ("C", "A", "B"):
        answers.append(make_answer(1, "2024-01-03", isin=isin))
        answers.append(make_answer(2, "2024-01-10", isin=isin))
    changes = compare_windows(answers_to_frame(answers), end=date(2024, 1, 14), window_days=7)
    assert [c.entity.isin for c in changes] == ["A", "B", "C"]


def test_empty_frame_has_no_changes() -> None:
    assert compare_windows(answers_to_frame([])) == []


def test_invalid_window_raises(make_answer) -> None:
    frame = answers_to_frame([make_answer(1, "2024-01-01")])
    with pytest.raises(ValueError):
        compare_windows(frame, window_days=0)
