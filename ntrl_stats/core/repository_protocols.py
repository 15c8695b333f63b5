"""Boundary Protocols — contracts between the stats core and its IO collaborators.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection (StatsEngine)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE their results are never async themselves
"""

from typing import Any, Protocol

from ntrl_stats.core.domain_types import StoryId

# Fixed keys of the persistent key-value store
READING_SESSIONS_KEY = "reading_sessions"
ARTICLE_SPAN_CACHE_KEY = "article_span_cache"
USER_STATS_KEY = "user_stats"


class KeyValueStore(Protocol):
    """Contract for JSON blob persistence, implemented by shell.

    Failures raise DatabaseError (core/errors.py).
    """
    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any) -> None: ...
    async def delete(self, key: str) -> None: ...


class SpanSource(Protocol):
    """Contract for the article transparency lookup, implemented by shell.

    Returns raw span dicts ({category, start, end}). Failures raise
    SpanSourceError / SpanSourceTimeoutError.
    """
    async def fetch_spans(self, story_id: StoryId) -> list[dict]: ...
