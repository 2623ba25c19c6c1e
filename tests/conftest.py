from __future__ import annotations

import itertools
from typing import Any, Callable

import pytest

from sentiment_analytics.models import Answer

_ids = itertools.count(1)


def build_answer(
    value: float,
    created: str,
    isin: str = "A",
    skip: bool = False,
    tid: int = 1,
    tag: str = "growth",
    title: str | None = None,
) -> Answer:
    rec: dict[str, Any] = {
        "value": value,
        "source": "web",
        "created": created,
        "skip": skip,
        "id": f"ans-{next(_ids)}",
        "user": "u1",
        "company": {
            "id": sum(map(ord, isin)),
            "isin": isin,
            "title": title or f"Company {isin}",
            "tid": tid,
        },
        "question": {
            "fullText": f"How do you rate {tag}?",
            "shortText": tag,
            "tag": tag,
            "id": f"q-{tag}",
        },
    }
    return Answer.model_validate(rec)


@pytest.fixture
def make_answer() -> Callable[..., Answer]:
    return build_answer
