"""Settings — defaults and URL normalization."""

from ntrl_stats.config import Settings


def test_postgres_url_gets_asyncpg_driver():
    """postgresql:// URLs are switched to the asyncpg driver."""
    settings = Settings(database_url="postgresql://u:p@db:5432/ntrl")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/ntrl"


def test_collection_caps_default():
    """Default caps are 200 sessions and 100 cached stories."""
    settings = Settings()
    assert settings.reading_sessions_max == 200
    assert settings.span_cache_max == 100
    assert settings.span_source_timeout_seconds > 0
