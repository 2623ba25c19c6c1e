"""Retrieval of the answers dataset.

Downloads the dataset (plain or gzip JSON) into a local cache, validates the
records into `Answer` models, and offers a single-flight in-memory cache so
concurrent callers share one load.
"""

from sentiment_analytics.ingest.dataset_cache import DatasetCache
from sentiment_analytics.ingest.fetch_dataset import DataUnavailableError

__all__ = ["DataUnavailableError", "DatasetCache"]
