"""Download, cache and decode the answers dataset.

The dataset is a JSON array of answer objects, served either plain or
gzip-compressed (`data.json.gz`). Any retrieval or decode failure surfaces
as a single `DataUnavailableError`.
"""

from __future__ import annotations

import gzip
import json
import logging
import os
import zlib
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import certifi
import requests

log = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


class DataUnavailableError(RuntimeError):
    """The answers dataset could not be retrieved or decoded."""


def cache_path_for(url: str, out_dir: Path) -> Path:
    """Return the local cache file for a dataset URL.

    Args:
        url: Dataset URL.
        out_dir: Cache directory.

    Returns:
        Path named after the last URL path segment (default `data.json`).
    """
    name = Path(urlparse(url).path).name or "data.json"
    return out_dir / name


def download_dataset(url: str, out_dir: Path, timeout: float = 60.0, force: bool = False) -> Path:
    """Download or return the cached answers dataset.

    Args:
        url: Dataset URL.
        out_dir: Local directory to cache the downloaded file.
        timeout: Request timeout in seconds.
        force: Re-download even when a cached copy exists.

    Returns:
        Path to the downloaded (or cached) file.

    Raises:
        DataUnavailableError: if the request fails or returns a non-2xx status.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = cache_path_for(url, out_dir)

    if not force and out_path.exists() and out_path.stat().st_size > 0:
        log.info("Cache hit: %s", out_path)
        return out_path

    log.info("Downloading %s", url)
    try:
        r = requests.get(url, timeout=timeout, verify=certifi.where())
        r.raise_for_status()
    except requests.RequestException as e:
        raise DataUnavailableError(f"Failed to load dataset from {url}: {e}") from e

    # swap in atomically; readers never see a partial file
    tmp_path = out_path.with_name(out_path.name + ".part")
    tmp_path.write_bytes(r.content)
    os.replace(tmp_path, out_path)
    log.info("Saved: %s (%d bytes)", out_path, out_path.stat().st_size)
    return out_path


def decode_dataset(payload: bytes) -> list[dict[str, Any]]:
    """Decode raw dataset bytes (plain or gzip JSON) into answer records.

    Raises:
        DataUnavailableError: if the payload is corrupt, truncated or not a JSON array.
    """
    try:
        if payload[:2] == GZIP_MAGIC:
            payload = gzip.decompress(payload)
        data = json.loads(payload.decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError) as e:
        raise DataUnavailableError(f"Failed to decode dataset: {e}") from e

    if not isinstance(data, list):
        raise DataUnavailableError(f"Dataset must be a JSON array, got {type(data).__name__}")
    return data


def read_dataset(path: Path) -> list[dict[str, Any]]:
    """Read and decode a local dataset file.

    Raises:
        DataUnavailableError: if the file is missing or cannot be decoded.
    """
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise DataUnavailableError(f"Failed to read dataset {path}: {e}") from e
    records = decode_dataset(payload)
    log.info("Read %d records from %s", len(records), path)
    return records


def fetch_records(url: str, out_dir: Path, timeout: float = 60.0, force: bool = False) -> list[dict[str, Any]]:
    """Download (or reuse the cached copy of) the dataset and decode it.

    A cached file that cannot be decoded is deleted before the error is
    raised, so the next call downloads it again instead of failing on the
    same bytes.

    Raises:
        DataUnavailableError: if retrieval or decoding fails.
    """
    path = download_dataset(url, out_dir, timeout, force=force)
    try:
        return read_dataset(path)
    except DataUnavailableError:
        log.warning("Discarding unreadable cached dataset %s", path)
        path.unlink(missing_ok=True)
        raise
