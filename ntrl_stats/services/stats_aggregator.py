"""Stats Aggregator — running all-time totals plus range breakdowns for the dashboard.

Invariants:
    - Every UserStats read-modify-write runs under one asyncio.Lock
      (two concurrent sessions can never overwrite each other's increments)
    - get_overview() projects the stored aggregate only
    - get_breakdown() is re-derived from session history + span cache on every call
    - get_weekly_insights() likewise, over the seven days ending at clock()
    - Query methods never raise store failures (fallback: zeroed stats / empty history)

Design Decisions:
    - Lock lives on the aggregator instance: one StatsEngine per process owns the store
    - Clock injected (today / now / clock) so breakdown anchors and timestamps are testable
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime, timezone

from ntrl_stats.core.breakdown import StatsBreakdown, compute_breakdown
from ntrl_stats.core.domain_types import StatsRange
from ntrl_stats.core.errors import ErrorContext, InvalidRangeError, NtrlStatsError
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.repository_protocols import KeyValueStore, USER_STATS_KEY
from ntrl_stats.core.span_summary import SpanSummary
from ntrl_stats.core.stats_aggregate import (
    StatsOverview, UserStats, apply_completed_session, compute_overview,
)
from ntrl_stats.core.weekly_insights import WeeklyInsights, compute_weekly_insights
from ntrl_stats.services.session_history import SessionHistory
from ntrl_stats.services.span_cache import SpanCache

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_range(value: StatsRange | str) -> StatsRange:
    """Coerce a query value into StatsRange. Raises InvalidRangeError."""
    if isinstance(value, StatsRange):
        return value
    try:
        return StatsRange(str(value).strip().lower())
    except ValueError:
        raise InvalidRangeError(str(value), ErrorContext(stats_range=str(value)))


class StatsAggregator:
    """Owns the UserStats record and the dashboard query surface."""

    def __init__(
        self,
        store: KeyValueStore,
        history: SessionHistory,
        span_cache: SpanCache,
        today: Callable[[], date] = date.today,
        now: Callable[[], str] = _utc_now,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._history = history
        self._span_cache = span_cache
        self._today = today
        self._now = now
        self._clock = clock
        self._lock = asyncio.Lock()

    async def _read_stats(self) -> UserStats:
        return UserStats.from_dict(await self._store.get(USER_STATS_KEY))

    async def load_stats(self) -> UserStats:
        """Current aggregate; zeroed stats if the store cannot be read."""
        try:
            return await self._read_stats()
        except NtrlStatsError as e:
            logger.warning(
                f"Failed to read user stats: {e.message}",
                extra={"error_code": e.code},
            )
            return UserStats()

    async def apply_completed_session(
        self, session: ReadingSession, summary: SpanSummary,
    ) -> UserStats:
        """Merge a completed session into the running totals. Propagates DatabaseError."""
        async with self._lock:
            stats = await self._read_stats()
            updated = apply_completed_session(stats, session, summary, self._now())
            await self._store.set(USER_STATS_KEY, updated.to_dict())
        return updated

    async def get_overview(self) -> StatsOverview:
        return compute_overview(await self.load_stats())

    async def get_breakdown(
        self, stats_range: StatsRange | str, anchor_date: date | None = None,
    ) -> StatsBreakdown:
        """Range breakdown anchored at anchor_date (default: today)."""
        parsed = parse_range(stats_range)
        anchor = anchor_date or self._today()
        sessions = await self._history.load()
        lookup = await self._span_cache.all_entries()
        breakdown = compute_breakdown(sessions, lookup, parsed, anchor)
        logger.debug(
            f"Computed breakdown: total={breakdown.total} buckets={len(breakdown.series)}",
            extra={"range": parsed.value},
        )
        return breakdown

    async def get_weekly_insights(self) -> WeeklyInsights:
        """Rolling seven-day figures ending at the local clock's now."""
        sessions = await self._history.load()
        lookup = await self._span_cache.all_entries()
        return compute_weekly_insights(sessions, lookup, self._clock())

    async def reset(self) -> None:
        """Drop the aggregate, the session history and the span cache."""
        async with self._lock:
            await self._store.delete(USER_STATS_KEY)
            await self._history.clear()
            await self._span_cache.clear()
        logger.info("Stats reset")
