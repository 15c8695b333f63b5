"""Weekly Insights — rolling seven-day reading figures for the Reading Insights card.

Invariants:
    - Window is the 7 x 24h ending at `now`: a session counts when it started
      at or after now - 7 days
    - Sessions without started_at are placed at local midnight of local_date
    - weekly_minutes sums every session in the window (completed or not)
    - articles_completed / terms_neutralized count completed sessions only
    - Completed sessions without a cached summary add zero terms
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, time, timedelta

from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.span_summary import SpanSummary
from ntrl_stats.core.stats_aggregate import round_half_up

WEEKLY_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class WeeklyInsights:
    weekly_minutes: int = 0
    articles_completed: int = 0
    terms_neutralized: int = 0


def session_start(session: ReadingSession) -> datetime:
    return session.started_at or datetime.combine(session.local_date, time())


def compute_weekly_insights(
    sessions: Iterable[ReadingSession],
    span_lookup: Mapping[str, SpanSummary],
    now: datetime,
) -> WeeklyInsights:
    """Figures for the last seven days. Pure, no IO."""
    window_start = now - WEEKLY_WINDOW
    weekly = [s for s in sessions if session_start(s) >= window_start]

    completed = [s for s in weekly if s.completed]
    terms = 0
    for session in completed:
        summary = span_lookup.get(session.story_id)
        if summary is not None:
            terms += summary.span_count

    return WeeklyInsights(
        weekly_minutes=round_half_up(sum(s.duration_seconds for s in weekly) / 60),
        articles_completed=len(completed),
        terms_neutralized=terms,
    )
