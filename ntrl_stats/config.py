"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden by an environment variable (or .env)
    - get_settings() is cached (lru_cache): one instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: runs out-of-the-box against a local SQLite file
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database (key-value store)
    database_url: str = "sqlite+aiosqlite:///ntrl_stats.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Span source (article transparency API)
    span_source_base_url: str = "http://localhost:8000"
    span_source_timeout_seconds: float = 10.0

    # Collection caps
    reading_sessions_max: int = 200
    span_cache_max: int = 100

    # API
    cors_origins: list[str] = ["http://localhost:8081"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
