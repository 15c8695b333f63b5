"""Stats Schemas — Pydantic models for the reading-session and dashboard endpoints.

Invariants:
    - ReadingSessionCreate.story_id: 1-200 chars, stripped, non-empty
    - duration_seconds >= 0
    - Responses mirror core dataclasses field for field
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from ntrl_stats.core.breakdown import StatsBreakdown
from ntrl_stats.core.domain_types import SpanReason, StoryId
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.stats_aggregate import StatsOverview
from ntrl_stats.core.weekly_insights import WeeklyInsights


class ReadingSessionCreate(BaseModel):
    """Reading session reported by the UI when the reader leaves an article."""
    story_id: str = Field(min_length=1, max_length=200)
    local_date: date
    duration_seconds: int = Field(ge=0)
    completed: bool = False
    started_at: datetime | None = None

    @field_validator("story_id")
    @classmethod
    def strip_story_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("story_id cannot be empty or whitespace")
        return v

    def to_domain(self) -> ReadingSession:
        started_at = self.started_at
        if started_at is not None and started_at.tzinfo is not None:
            started_at = started_at.replace(tzinfo=None)  # keep wall-clock hour
        return ReadingSession(
            story_id=StoryId(self.story_id),
            local_date=self.local_date,
            duration_seconds=self.duration_seconds,
            completed=self.completed,
            started_at=started_at,
        )


class OverviewResponse(BaseModel):
    ntrl_days: int
    total_sessions: int
    ntrl_minutes: int
    phrases_avoided: int

    @classmethod
    def from_domain(cls, overview: StatsOverview) -> "OverviewResponse":
        return cls(
            ntrl_days=overview.ntrl_days,
            total_sessions=overview.total_sessions,
            ntrl_minutes=overview.ntrl_minutes,
            phrases_avoided=overview.phrases_avoided,
        )


class WeeklyInsightsResponse(BaseModel):
    weekly_minutes: int
    articles_completed: int
    terms_neutralized: int

    @classmethod
    def from_domain(cls, insights: WeeklyInsights) -> "WeeklyInsightsResponse":
        return cls(
            weekly_minutes=insights.weekly_minutes,
            articles_completed=insights.articles_completed,
            terms_neutralized=insights.terms_neutralized,
        )


class SeriesPointResponse(BaseModel):
    label: str
    value: int
    date: str  # ISO date, or ISO datetime for hourly buckets


class CategoryCountResponse(BaseModel):
    reason: SpanReason
    count: int
    label: str


class BreakdownResponse(BaseModel):
    range: str
    total: int
    series: list[SeriesPointResponse]
    categories: list[CategoryCountResponse]
    is_empty: bool

    @classmethod
    def from_domain(cls, stats_range: str, breakdown: StatsBreakdown) -> "BreakdownResponse":
        return cls(
            range=stats_range,
            total=breakdown.total,
            series=[
                SeriesPointResponse(label=p.label, value=p.value, date=p.date.isoformat())
                for p in breakdown.series
            ],
            categories=[
                CategoryCountResponse(reason=c.reason, count=c.count, label=c.label)
                for c in breakdown.categories
            ],
            is_empty=breakdown.is_empty,
        )
