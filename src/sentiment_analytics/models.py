"""Pydantic models used for answer validation and derived analytics.

Input models (`Company`, `Question`, `Answer`) mirror the camelCase JSON of
the answers dataset and ignore unknown keys. Output models are the plain
structures handed to a rendering layer; they forbid extra fields.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sentiment_analytics.config import (
    DEFAULT_COMPARISON_DAYS,
    DEFAULT_SMOOTHING_DAYS,
    MAX_COMPARISON_DAYS,
)

DEFAULT_TAG = "Other"


class Company(BaseModel):
    """A rated company (the entity), identified by its ISIN."""
    model_config = ConfigDict(extra="ignore", frozen=True)
    id: int
    isin: str
    title: str
    tid: int
    standby: bool = False


class QuestionText(BaseModel):
    """Partial question used for per-language translations."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
    full_text: str | None = Field(default=None, alias="fullText")
    short_text: str | None = Field(default=None, alias="shortText")
    tag: str | None = None
    id: str | None = None
    is_public: bool | None = Field(default=None, alias="isPublic")
    is_active: bool | None = Field(default=None, alias="isActive")


class Question(BaseModel):
    """Survey question; `tag` is the attribute an answer rates."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
    full_text: str = Field(..., alias="fullText")
    short_text: str = Field(..., alias="shortText")
    tag: str
    id: str
    is_public: bool = Field(default=True, alias="isPublic")
    is_active: bool = Field(default=True, alias="isActive")
    translations: dict[str, QuestionText] | None = None


class Answer(BaseModel):
    """A single observation: one user's rating of a company at a point in time.

    Attributes:
        value: Numeric rating.
        created: Creation timestamp, normalized to UTC.
        skip: Skipped answers stay in the dataset but never enter aggregates.
        company: The rated company (entity key `isin`, group key `tid`).
        question: The question answered (attribute `tag`).
    """
    model_config = ConfigDict(extra="ignore", frozen=True)
    value: float = Field(..., allow_inf_nan=False)
    source: str
    created: datetime
    skip: bool
    id: str
    user: str
    company: Company
    question: Question

    @field_validator("created", mode="before")
    @classmethod
    def _parse_created(cls, v: Any) -> Any:
        # Date-only strings mean midnight UTC.
        if isinstance(v, str) and len(v) == 10:
            return datetime.combine(date.fromisoformat(v), datetime.min.time(), tzinfo=timezone.utc)
        return v

    @field_validator("created")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def tag(self) -> str:
        return self.question.tag.strip() or DEFAULT_TAG


# ---------------------------------------------------------
# Configuration
# ---------------------------------------------------------

class DateWindow(BaseModel):
    """Calendar-day window; both ends inclusive, a missing end is open."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    start: date | None = None
    end: date | None = None

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindow":
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self


class AnalyticsConfig(BaseModel):
    """Caller-selected knobs for the market overview.

    Attributes:
        date_window: Window for daily series, sector stats and activity.
        smoothing_window_days: Trailing moving-average width.
        comparison_window_days: Length of each window in the movers comparison.
        sector_name_overrides: Sector tid -> display label, wins over defaults.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    date_window: DateWindow = Field(default_factory=DateWindow)
    smoothing_window_days: int = Field(default=DEFAULT_SMOOTHING_DAYS, ge=1)
    comparison_window_days: int = Field(default=DEFAULT_COMPARISON_DAYS, ge=1, le=MAX_COMPARISON_DAYS)
    sector_name_overrides: dict[int, str] = Field(default_factory=dict)


# ---------------------------------------------------------
# Derived outputs
# ---------------------------------------------------------

class DailyPoint(BaseModel):
    """Average value for one UTC calendar day."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    date: date
    avg: float
    count: int | None = Field(default=None, ge=1)


class GroupStat(BaseModel):
    """Average and count for one group (sector, attribute tag)."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    key: str
    label: str
    avg: float
    count: int = Field(..., ge=1)


class EntityChange(BaseModel):
    """Change in a company's average between two adjacent windows."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    entity: Company
    delta: float
    recent_avg: float
    prev_avg: float
    recent_count: int = Field(..., ge=1)
    prev_count: int = Field(..., ge=1)


class ScoredEntity(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    entity: Company
    score: float


class MostRated(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    entity: Company
    count: int = Field(..., ge=1)


class SeriesBounds(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    min: date | None = None
    max: date | None = None


class HeatCell(BaseModel):
    """A group stat with its normalized heat position in [0, 1]."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    key: str
    label: str
    avg: float
    count: int = Field(..., ge=1)
    position: float = Field(..., ge=0.0, le=1.0)
    neutral: bool = False


class AxisExtent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    lo: float
    hi: float


class MarketOverview(BaseModel):
    """Everything the market overview page draws, for one configuration."""
    model_config = ConfigDict(extra="forbid")
    companies: list[Company]
    series_bounds: SeriesBounds
    date_window: DateWindow
    daily_series: list[DailyPoint]
    smoothed_series: list[DailyPoint]
    series_extent: AxisExtent
    sector_stats: list[GroupStat]
    sector_heat: list[HeatCell]
    comparison_window_days: int
    top_risers: list[EntityChange]
    top_fallers: list[EntityChange]
    top_companies: list[ScoredEntity]
    most_rated: list[MostRated]


class CompanyProfile(BaseModel):
    """Per-company attribute breakdown and historical trends."""
    model_config = ConfigDict(extra="forbid")
    isin: str
    company: Company | None
    attribute_stats: list[GroupStat]
    radar_scale: float
    daily_series: list[DailyPoint]
    smoothed_series: list[DailyPoint]
    tag_series: dict[str, list[DailyPoint]]
    series_extent: AxisExtent
