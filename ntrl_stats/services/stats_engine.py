"""Stats Engine — wires the store and span source into the stats services, once.

Invariants:
    - Exactly one engine per store per process (the aggregator lock is per engine)
    - The UI-facing surface is record_session / get_overview / get_breakdown /
      get_weekly_insights / reset

Design Decisions:
    - Explicit construction with injected collaborators instead of module state
"""

from collections.abc import Callable
from datetime import date, datetime

from ntrl_stats.core.breakdown import StatsBreakdown
from ntrl_stats.core.domain_types import StatsRange
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.repository_protocols import KeyValueStore, SpanSource
from ntrl_stats.core.stats_aggregate import StatsOverview
from ntrl_stats.core.weekly_insights import WeeklyInsights
from ntrl_stats.services.session_history import SessionHistory
from ntrl_stats.services.session_recorder import SessionRecorder
from ntrl_stats.services.span_cache import SpanCache
from ntrl_stats.services.stats_aggregator import StatsAggregator


class StatsEngine:
    """Facade over history, span cache, recorder and aggregator."""

    def __init__(
        self,
        store: KeyValueStore,
        span_source: SpanSource,
        *,
        span_timeout_seconds: float = 10.0,
        sessions_max: int = 200,
        span_cache_max: int = 100,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.history = SessionHistory(store, max_sessions=sessions_max)
        self.span_cache = SpanCache(
            store, span_source,
            timeout_seconds=span_timeout_seconds, max_entries=span_cache_max,
        )
        self.aggregator = StatsAggregator(
            store, self.history, self.span_cache, today=today, clock=clock,
        )
        self.recorder = SessionRecorder(self.history, self.span_cache, self.aggregator)

    async def record_session(self, session: ReadingSession) -> None:
        await self.recorder.record_session(session)

    async def get_overview(self) -> StatsOverview:
        return await self.aggregator.get_overview()

    async def get_breakdown(
        self, stats_range: StatsRange | str, anchor_date: date | None = None,
    ) -> StatsBreakdown:
        return await self.aggregator.get_breakdown(stats_range, anchor_date)

    async def get_weekly_insights(self) -> WeeklyInsights:
        return await self.aggregator.get_weekly_insights()

    async def reset(self) -> None:
        await self.aggregator.reset()
