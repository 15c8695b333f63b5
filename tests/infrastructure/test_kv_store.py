"""SQL Key-Value Store — JSON blobs through SQLAlchemy on a throwaway SQLite file."""

import pytest

from ntrl_stats.core.errors import DatabaseError
from ntrl_stats.infrastructure.database import DatabaseSessionManager
from ntrl_stats.infrastructure.kv_store import SqlKeyValueStore


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'stats.db'}")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def kv(db_manager):
    return SqlKeyValueStore(db_manager)


async def test_missing_key_is_none(kv):
    """Unknown keys read as None."""
    assert await kv.get("user_stats") is None


async def test_set_then_get_roundtrips_json(kv):
    """JSON blobs come back unchanged."""
    blob = {"total_sessions": 2, "ntrl_days": ["2024-01-01"], "total_by_reason": {"clickbait": 1}}
    await kv.set("user_stats", blob)
    assert await kv.get("user_stats") == blob


async def test_set_replaces_existing_value(kv):
    """A second set overwrites the first."""
    await kv.set("reading_sessions", [{"story_id": "a"}])
    await kv.set("reading_sessions", [{"story_id": "b"}, {"story_id": "a"}])
    assert await kv.get("reading_sessions") == [{"story_id": "b"}, {"story_id": "a"}]


async def test_delete_removes_key(kv):
    """Deleted keys read as None."""
    await kv.set("article_span_cache", [])
    await kv.delete("article_span_cache")
    assert await kv.get("article_span_cache") is None


async def test_health_check(db_manager):
    """A reachable database reports healthy."""
    assert await db_manager.health_check() is True


async def test_missing_table_maps_to_database_error(tmp_path):
    """SQLAlchemy failures surface as DatabaseError."""
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        with pytest.raises(DatabaseError):
            await SqlKeyValueStore(manager).get("user_stats")
    finally:
        await manager.dispose()
