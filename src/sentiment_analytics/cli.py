"""Command-line interface for the analytics.

Provides subcommands: `fetch`, `overview`, and `company`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
Derived outputs are printed (or written with `--out`) as JSON.
"""
from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from pydantic import BaseModel

from sentiment_analytics.config import (
    COMPARISON_PRESETS,
    DEFAULT_COMPARISON_DAYS,
    DEFAULT_SMOOTHING_DAYS,
    SMOOTHING_PRESETS,
    MissingSettingError,
    get_settings,
)
from sentiment_analytics.logging_config import configure_logging

# INGEST
from sentiment_analytics.ingest.dataset_cache import DatasetCache
from sentiment_analytics.ingest.fetch_dataset import DataUnavailableError
from sentiment_analytics.ingest.parse_answers import fetch_answers, load_answers

# AGGREGATE
from sentiment_analytics.aggregate.overview import build_company_profile, build_market_overview
from sentiment_analytics.aggregate.sector_names import load_sector_names
from sentiment_analytics.models import AnalyticsConfig, Answer, DateWindow

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _dataset_cache(input_path: Path | None, force: bool = False) -> DatasetCache[list[Answer]]:
    """Return a cache whose loader reads `input_path` or the configured URL.

    Args:
        input_path: Local dataset file; when None the dataset is downloaded.
        force: Re-download even if a cached file exists.
    """
    def _load() -> list[Answer]:
        if input_path is not None:
            return load_answers(input_path)
        s = get_settings()
        return fetch_answers(s.answers_data_url, s.data_cache_dir, s.fetch_timeout, force=force)

    return DatasetCache(_load)


def _emit(model: BaseModel, out: Path | None) -> None:
    """Write a model as JSON to `out`, or print it."""
    text = model.model_dump_json(indent=2)
    if out is None:
        print(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    log.info("Wrote %s", out)


# --------------------------------------------------
# FETCH
# --------------------------------------------------
def cmd_fetch(args: argparse.Namespace) -> None:
    """Download the dataset into the cache directory and report its size.

    Args:
        args: argparse namespace with `force`.
    """
    s = get_settings()
    answers = fetch_answers(s.answers_data_url, s.data_cache_dir, s.fetch_timeout, force=args.force)
    log.info("Dataset in %s holds %d valid answers.", s.data_cache_dir, len(answers))


# --------------------------------------------------
# OVERVIEW
# --------------------------------------------------
def cmd_overview(args: argparse.Namespace) -> None:
    """Build the market overview and emit it as JSON.

    Args:
        args: argparse namespace with `input`, `start`, `end`, `smoothing`,
            `window`, `sector_names`, `out`.
    """
    sector_path = args.sector_names
    if sector_path is None:
        sector_path = get_settings(require_url=False).sector_names_path

    config = AnalyticsConfig(
        date_window=DateWindow(start=args.start, end=args.end),
        smoothing_window_days=args.smoothing,
        comparison_window_days=args.window,
        sector_name_overrides=load_sector_names(sector_path),
    )

    answers = _dataset_cache(args.input).get()
    overview = build_market_overview(answers, config)
    _emit(overview, args.out)


# --------------------------------------------------
# COMPANY
# --------------------------------------------------
def cmd_company(args: argparse.Namespace) -> None:
    """Build one company's profile and emit it as JSON.

    Args:
        args: argparse namespace with `isin`, `input`, `smoothing`, `tag`, `out`.
    """
    answers = _dataset_cache(args.input).get()
    profile = build_company_profile(answers, args.isin, args.smoothing, tags=args.tag)
    _emit(profile, args.out)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `fetch`, `overview` and `company`.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="sentiment-analytics")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="defaults to $LOG_LEVEL, else INFO",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_fetch = sub.add_parser("fetch")
    p_fetch.add_argument("--force", action="store_true")

    p_over = sub.add_parser("overview")
    p_over.add_argument("--input", type=Path, default=None)
    p_over.add_argument("--start", type=date.fromisoformat, default=None)
    p_over.add_argument("--end", type=date.fromisoformat, default=None)
    p_over.add_argument(
        "--smoothing",
        type=int,
        default=DEFAULT_SMOOTHING_DAYS,
        help=f"rolling window in days (presets: {', '.join(map(str, SMOOTHING_PRESETS))})",
    )
    p_over.add_argument(
        "--window",
        type=int,
        default=DEFAULT_COMPARISON_DAYS,
        help=f"comparison window in days (quick picks: {', '.join(map(str, COMPARISON_PRESETS))})",
    )
    p_over.add_argument("--sector-names", type=Path, default=None)
    p_over.add_argument("--out", type=Path, default=None)

    p_comp = sub.add_parser("company")
    p_comp.add_argument("isin")
    p_comp.add_argument("--input", type=Path, default=None)
    p_comp.add_argument("--smoothing", type=int, default=DEFAULT_SMOOTHING_DAYS)
    p_comp.add_argument("--tag", action="append", default=[])
    p_comp.add_argument("--out", type=Path, default=None)

    return p


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(Path("logs/analytics.log"), args.log_level)

    try:
        if args.cmd == "fetch":
            cmd_fetch(args)
        elif args.cmd == "overview":
            cmd_overview(args)
        elif args.cmd == "company":
            cmd_company(args)
        else:
            raise SystemExit(2)
    except DataUnavailableError as e:
        log.error("Data unavailable: %s", e)
        raise SystemExit(1) from e
    except MissingSettingError as e:
        log.error("Missing configuration: %s", e)
        raise SystemExit(2) from e
    except ValueError as e:
        log.error("Invalid options: %s", e)
        raise SystemExit(2) from e


if __name__ == "__main__":
    main()
