"""Sector labels for company group ids (`tid`).

Resolution order: caller overrides, then the static table below, then a
synthesized "Group {tid}" label.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

log = logging.getLogger(__name__)

# Simple static mapping; empty until sectors are curated
SECTOR_BY_TID: dict[int, str] = {}


def sector_label(
    tid: int,
    overrides: Mapping[int, str] | None = None,
    fallback: Mapping[int, str] = SECTOR_BY_TID,
) -> str:
    """Return the display label for a sector tid.

    Args:
        tid: Sector / group id of a company.
        overrides: Optional caller-supplied tid -> name mapping.
        fallback: Static mapping consulted when no override exists.

    Returns:
        The label; never empty.
    """
    if overrides and tid in overrides:
        return overrides[tid]
    if tid in fallback:
        return fallback[tid]
    return f"Group {tid}"


def load_sector_names(path: Path | None) -> dict[int, str]:
    """Load a JSON object mapping sector tid -> name.

    Best effort: a missing or malformed file logs a warning and returns an
    empty mapping so fallback labels are used.

    Args:
        path: JSON file such as `{"12": "Industrials"}`.

    Returns:
        Mapping with integer keys.
    """
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Could not read sector names from %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Sector names in %s are not a JSON object; ignoring", path)
        return {}

    names: dict[int, str] = {}
    for k, v in data.items():
        try:
            names[int(k)] = str(v)
        except (TypeError, ValueError):
            log.warning("Skipping sector name with non-integer key %r", k)
    log.info("Loaded %d sector names from %s", len(names), path)
    return names
