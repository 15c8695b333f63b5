"""Key-Value Entry ORM — one JSON blob per fixed store key.

Invariants:
    - key is the primary key (reading_sessions, article_span_cache, user_stats)
    - value holds the whole collection / record as JSON
    - updated_at stamped on every write

Design Decisions:
    - JSON column over normalized tables: the engine reads and writes whole
      collections, never individual rows
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ntrl_stats.db.base import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
