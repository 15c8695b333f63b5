"""Session History — append-only reading-session log stored under one key.

Invariants:
    - Newest session first; capped at max_sessions (oldest dropped)
    - append() is serialized by an asyncio.Lock (read-modify-write on one blob)
    - append() propagates DatabaseError; load() never raises (logs, returns [])
    - Malformed stored records are skipped with a warning, never fatal
"""

import asyncio
import logging

from ntrl_stats.core.errors import NtrlStatsError, SessionValidationError
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.repository_protocols import KeyValueStore, READING_SESSIONS_KEY

logger = logging.getLogger(__name__)


class SessionHistory:
    """Reading sessions persisted as a JSON list."""

    def __init__(self, store: KeyValueStore, max_sessions: int = 200):
        self._store = store
        self._max_sessions = max_sessions
        self._lock = asyncio.Lock()

    async def _read_raw(self) -> list:
        raw = await self._store.get(READING_SESSIONS_KEY)
        return raw if isinstance(raw, list) else []

    async def append(self, session: ReadingSession) -> None:
        async with self._lock:
            records = await self._read_raw()
            records.insert(0, session.to_dict())
            await self._store.set(READING_SESSIONS_KEY, records[: self._max_sessions])

    async def load(self) -> list[ReadingSession]:
        """All parseable sessions, newest first."""
        try:
            records = await self._read_raw()
        except NtrlStatsError as e:
            logger.warning(
                f"Failed to read reading sessions: {e.message}",
                extra={"error_code": e.code},
            )
            return []

        sessions = []
        for record in records:
            try:
                sessions.append(ReadingSession.from_dict(record))
            except SessionValidationError as e:
                logger.warning(f"Skipping malformed session record: {e.message}")
        return sessions

    async def clear(self) -> None:
        async with self._lock:
            await self._store.delete(READING_SESSIONS_KEY)
