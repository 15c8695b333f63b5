"""Span Cache — memoizes each story's span summary so the span source is hit at most once.

Invariants:
    - Hit: stored summary returned, span source never called
    - Miss + successful fetch: summary stored, then returned
    - Miss + failed/timed-out fetch: zero summary returned and NOT stored
      (the story is retried on its next completed session)
    - Store failures propagate as DatabaseError; span source failures never do
    - Entries are never invalidated; collection capped at max_entries, newest first
    - Writes serialized by an asyncio.Lock (read-modify-write on one blob)

Design Decisions:
    - asyncio.wait_for guard on top of the client's own timeout: any SpanSource
      implementation is bounded, not only the HTTP one
    - Concurrent misses for the same story may both fetch; the second write
      replaces the first with an identical summary
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ntrl_stats.core.domain_types import StoryId
from ntrl_stats.core.errors import NtrlStatsError
from ntrl_stats.core.repository_protocols import (
    ARTICLE_SPAN_CACHE_KEY, KeyValueStore, SpanSource,
)
from ntrl_stats.core.span_summary import (
    SpanSummary, summarize_spans, summary_from_cache_entry, to_cache_entry,
)

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SpanCache:
    """Per-story span summaries backed by the key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        span_source: SpanSource,
        timeout_seconds: float = 10.0,
        max_entries: int = 100,
        now: Callable[[], str] = _utc_now,
    ):
        self._store = store
        self._span_source = span_source
        self._timeout_seconds = timeout_seconds
        self._max_entries = max_entries
        self._now = now
        self._lock = asyncio.Lock()

    async def _read_raw(self) -> list:
        raw = await self._store.get(ARTICLE_SPAN_CACHE_KEY)
        return raw if isinstance(raw, list) else []

    async def get(self, story_id: StoryId) -> SpanSummary | None:
        """Cached summary for a story, or None on a miss."""
        for entry in await self._read_raw():
            if isinstance(entry, dict) and entry.get("story_id") == story_id:
                return summary_from_cache_entry(entry)
        return None

    async def get_or_fetch(self, story_id: StoryId) -> SpanSummary:
        cached = await self.get(story_id)
        if cached is not None:
            return cached

        spans = await self._fetch(story_id)
        if spans is None:
            return SpanSummary.zero()

        summary = summarize_spans(spans)
        await self._put(story_id, summary)
        logger.info(
            f"Cached {summary.span_count} spans", extra={"story_id": story_id},
        )
        return summary

    async def _fetch(self, story_id: StoryId) -> list | None:
        """Raw spans from the source, or None when the fetch failed."""
        try:
            return await asyncio.wait_for(
                self._span_source.fetch_spans(story_id), self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Span source timed out after {self._timeout_seconds}s",
                extra={"story_id": story_id, "error_code": "SPAN_SOURCE_TIMEOUT"},
            )
        except NtrlStatsError as e:
            logger.warning(
                f"Span source failed: {e.message}",
                extra={"story_id": story_id, "error_code": e.code},
            )
        except Exception as e:
            logger.warning(
                f"Span source failed unexpectedly: {e}",
                extra={"story_id": story_id}, exc_info=True,
            )
        return None

    async def _put(self, story_id: StoryId, summary: SpanSummary) -> None:
        async with self._lock:
            entries = [
                e for e in await self._read_raw()
                if not (isinstance(e, dict) and e.get("story_id") == story_id)
            ]
            entries.insert(0, to_cache_entry(story_id, summary, self._now()))
            await self._store.set(ARTICLE_SPAN_CACHE_KEY, entries[: self._max_entries])

    async def all_entries(self) -> dict[str, SpanSummary]:
        """story_id -> summary for every usable entry. Never raises (logs, returns {})."""
        try:
            entries = await self._read_raw()
        except NtrlStatsError as e:
            logger.warning(
                f"Failed to read span cache: {e.message}",
                extra={"error_code": e.code},
            )
            return {}

        lookup: dict[str, SpanSummary] = {}
        for entry in entries:
            summary = summary_from_cache_entry(entry)
            story_id = entry.get("story_id") if isinstance(entry, dict) else None
            if summary is not None and isinstance(story_id, str):
                lookup.setdefault(story_id, summary)
        return lookup

    async def clear(self) -> None:
        async with self._lock:
            await self._store.delete(ARTICLE_SPAN_CACHE_KEY)
