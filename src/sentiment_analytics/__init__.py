"""sentiment_analytics package.

Contains modules for retrieving the answers dataset (survey-style ratings of
companies), validating answers, and deriving the analytics consumed by a
dashboard: daily sentiment, sector aggregates, rolling smoothing, window
over window movers and activity rankings.

Architecture:
- Raw (JSON array, optionally gzip) → validated `Answer` models → derived outputs
- pandas is used for the grouping and rolling-window transforms
- Pydantic models validate both the input answers and the derived outputs
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
