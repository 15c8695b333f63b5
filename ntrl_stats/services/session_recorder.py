"""Session Recorder — persists a finished reading session and folds it into the stats.

Invariants:
    - The session is appended to history whether or not it was completed
    - Only completed sessions resolve spans and touch the aggregate
    - record_session() never raises: store and bookkeeping failures are logged
      and the dependent step is skipped
    - A span source failure still counts the session (zero spans this time)
"""

import logging

from ntrl_stats.core.errors import NtrlStatsError
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.services.span_cache import SpanCache
from ntrl_stats.services.stats_aggregator import StatsAggregator
from ntrl_stats.services.session_history import SessionHistory

logger = logging.getLogger(__name__)


class SessionRecorder:
    """Entry point called when the reader leaves an article."""

    def __init__(
        self,
        history: SessionHistory,
        span_cache: SpanCache,
        aggregator: StatsAggregator,
    ):
        self._history = history
        self._span_cache = span_cache
        self._aggregator = aggregator

    async def record_session(self, session: ReadingSession) -> None:
        try:
            await self._history.append(session)
        except NtrlStatsError as e:
            logger.error(
                f"Failed to store reading session: {e.message}",
                extra={"story_id": session.story_id, "error_code": e.code},
            )

        if session.completed:
            await self._update_stats(session)

    async def _update_stats(self, session: ReadingSession) -> None:
        try:
            summary = await self._span_cache.get_or_fetch(session.story_id)
            await self._aggregator.apply_completed_session(session, summary)
        except NtrlStatsError as e:
            logger.error(
                f"Failed to update stats for session: {e.message}",
                extra={"story_id": session.story_id, "error_code": e.code},
            )
        except Exception as e:
            logger.error(
                f"Unexpected error updating stats: {e}",
                extra={"story_id": session.story_id}, exc_info=True,
            )
