"""Logging setup shared by the analytics commands.

Records go to stderr (stdout carries the JSON the CLI emits) and, when a
path is given, to a log file. The level comes from the caller, else from
`LOG_LEVEL`, else INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# HTTP stack loggers are held at WARNING or above
NOISY_LOGGERS = ("urllib3",)


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level number or name (e.g. "debug") into a logging level.

    Raises:
        ValueError: if the name is not a known logging level.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(log_path: Path | None = None, level: int | str | None = None) -> None:
    """Install the stderr handler (and optional file handler) on the root logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_path: Optional file that receives the same records.
        level: Level number or name; see `resolve_level`.
    """
    resolved = resolve_level(level)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=resolved, format=LOG_FORMAT, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
