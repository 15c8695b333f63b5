"""Root conftest — shared test configuration and fakes."""

import os
from datetime import date, datetime

import pytest

# Never touch a real store or span source from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SPAN_SOURCE_BASE_URL", "http://span-source.test")
os.environ.setdefault("LOG_FORMAT", "text")

from ntrl_stats.services.stats_engine import StatsEngine  # noqa: E402
from tests.fakes import InMemoryKeyValueStore, StubSpanSource  # noqa: E402


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def span_source():
    return StubSpanSource()


@pytest.fixture
def engine(store, span_source):
    """StatsEngine over in-memory fakes; "today" pinned to 2024-01-02 (a Tuesday), clock to its noon."""
    return StatsEngine(
        store, span_source, span_timeout_seconds=0.5,
        today=lambda: date(2024, 1, 2),
        clock=lambda: datetime(2024, 1, 2, 12, 0),
    )
