"""SQL Key-Value Store — KeyValueStore implementation over the kv_entries table.

Invariants:
    - get() returns None for a missing key, never raises KeyError
    - set() replaces the whole blob for a key (upsert)
    - Every failure surfaces as DatabaseError (mapped by DatabaseSessionManager)
    - One session per call: no cross-key transactions
"""

import logging
from typing import Any

from sqlalchemy import delete, select

from ntrl_stats.infrastructure.database import DatabaseSessionManager
from ntrl_stats.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """JSON blobs keyed by name, persisted through SQLAlchemy."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def get(self, key: str) -> Any | None:
        async with self._db.session() as db:
            result = await db.execute(
                select(KeyValueEntry.value).where(KeyValueEntry.key == key),
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: Any) -> None:
        async with self._db.session() as db:
            entry = await db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await db.commit()
        logger.debug(f"Stored key {key}")

    async def delete(self, key: str) -> None:
        async with self._db.session() as db:
            await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await db.commit()
