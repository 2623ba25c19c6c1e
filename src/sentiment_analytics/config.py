"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables for dataset retrieval, plus the window presets
surfaced by callers when choosing smoothing and comparison lengths.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

SMOOTHING_PRESETS: tuple[int, ...] = (1, 3, 7, 14, 30)
COMPARISON_PRESETS: tuple[int, ...] = (7, 30)

DEFAULT_SMOOTHING_DAYS = 7
DEFAULT_COMPARISON_DAYS = 7
MAX_COMPARISON_DAYS = 3650
DEFAULT_VIEW_DAYS = 180


class MissingSettingError(RuntimeError):
    """A required environment variable is not set."""


@dataclass(frozen=True)
class Settings:
    """Container for retrieval configuration read from the environment.

    Attributes:
        answers_data_url: URL of the answers dataset (JSON array, may be gzip).
        sector_names_path: Optional JSON file mapping sector tid -> name.
        data_cache_dir: Local cache directory for the downloaded dataset.
        fetch_timeout: Request timeout in seconds.
    """
    answers_data_url: str
    sector_names_path: Path | None
    data_cache_dir: Path
    fetch_timeout: float


def get_settings(require_url: bool = True) -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Args:
        require_url: When True, a missing `ANSWERS_DATA_URL` is an error.

    Raises:
        MissingSettingError: if `ANSWERS_DATA_URL` is required but not set.
    """
    answers_data_url = os.getenv("ANSWERS_DATA_URL", "").strip()
    sector_names = os.getenv("SECTOR_NAMES_PATH", "").strip()
    data_cache_dir = Path(os.getenv("DATA_CACHE_DIR", "data/cache"))
    fetch_timeout = float(os.getenv("FETCH_TIMEOUT", "60"))

    if require_url and not answers_data_url:
        raise MissingSettingError(
            "ANSWERS_DATA_URL is required. Set it in .env "
            "(example: 'https://example.com/data.json.gz')."
        )

    return Settings(
        answers_data_url=answers_data_url,
        sector_names_path=Path(sector_names) if sector_names else None,
        data_cache_dir=data_cache_dir,
        fetch_timeout=fetch_timeout,
    )
