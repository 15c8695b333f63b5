"""ntrl Stats API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map NtrlStatsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store, span source and StatsEngine built once in the lifespan, kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Local SQLite schema created on startup; server databases use alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ntrl_stats.api.error_handlers import register_error_handlers
from ntrl_stats.api.routes import health, stats
from ntrl_stats.config import get_settings
from ntrl_stats.infrastructure.database import DatabaseSessionManager
from ntrl_stats.infrastructure.kv_store import SqlKeyValueStore
from ntrl_stats.infrastructure.observability import setup_logging
from ntrl_stats.infrastructure.span_source_client import HttpSpanSource
from ntrl_stats.services.stats_engine import StatsEngine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    db_manager = DatabaseSessionManager(settings.database_url)
    if settings.database_url.startswith("sqlite"):
        await db_manager.create_schema()
    span_source = HttpSpanSource(
        settings.span_source_base_url, settings.span_source_timeout_seconds,
    )
    app.state.db_manager = db_manager
    app.state.engine = StatsEngine(
        SqlKeyValueStore(db_manager),
        span_source,
        span_timeout_seconds=settings.span_source_timeout_seconds,
        sessions_max=settings.reading_sessions_max,
        span_cache_max=settings.span_cache_max,
    )
    logger.info("ntrl stats API started")
    yield
    logger.info("ntrl stats API shutting down")
    await span_source.aclose()
    await db_manager.dispose()


app = FastAPI(title="ntrl Stats API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(stats.router)

register_error_handlers(app)
