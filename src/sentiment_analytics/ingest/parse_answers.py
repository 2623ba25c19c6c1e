"""Validation of decoded answer records.

Each record is validated against the Pydantic `Answer` model. Malformed
records are counted and skipped so one bad row does not make the whole
dataset unavailable.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from sentiment_analytics.ingest.fetch_dataset import fetch_records, read_dataset
from sentiment_analytics.models import Answer

log = logging.getLogger(__name__)


def validate_records(records: Iterable[dict[str, Any]]) -> tuple[list[Answer], int]:
    """Validate raw answer dicts using Pydantic.

    Args:
        records: Decoded JSON objects.

    Returns:
        A tuple of (list_of_answers, bad_count).
    """
    good: list[Answer] = []
    bad = 0

    for rec in records:
        try:
            good.append(Answer.model_validate(rec))
        except ValidationError as e:
            bad += 1
            log.debug("Rejected answer %r: %s", rec.get("id") if isinstance(rec, dict) else None, e)

    if bad:
        log.warning("Skipped %d malformed answers (kept %d)", bad, len(good))
    return good, bad


def load_answers(path: Path) -> list[Answer]:
    """Read a local dataset file and return its valid answers.

    Raises:
        DataUnavailableError: if the file cannot be read or decoded.
    """
    answers, _ = validate_records(read_dataset(path))
    return answers


def fetch_answers(url: str, out_dir: Path, timeout: float = 60.0, force: bool = False) -> list[Answer]:
    """Retrieve the remote dataset through the disk cache and return its valid answers."""
    answers, _ = validate_records(fetch_records(url, out_dir, timeout, force=force))
    return answers
