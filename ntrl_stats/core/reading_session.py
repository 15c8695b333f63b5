"""Reading Session — one instance of reading an article, as stored in history.

Invariants:
    - local_date is the reader's calendar day (naive, no tz)
    - duration_seconds is never negative
    - History is append-only; sessions are never keyed or deduplicated by story
    - from_dict() raises SessionValidationError on malformed blobs (never KeyError/TypeError)
"""

from dataclasses import dataclass
from datetime import date, datetime

from ntrl_stats.core.date_helpers import local_date_string, parse_local_date
from ntrl_stats.core.domain_types import StoryId
from ntrl_stats.core.errors import SessionValidationError


@dataclass(frozen=True)
class ReadingSession:
    """A finished (or abandoned) article view."""
    story_id: StoryId
    local_date: date
    duration_seconds: int
    completed: bool
    started_at: datetime | None = None  # naive local time; drives hourly buckets

    def to_dict(self) -> dict:
        return {
            "story_id": self.story_id,
            "local_date": local_date_string(self.local_date),
            "duration_seconds": self.duration_seconds,
            "completed": self.completed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReadingSession":
        """Rebuild a session from its JSON blob."""
        if not isinstance(data, dict):
            raise SessionValidationError("Session record is not an object", "session")
        story_id = data.get("story_id")
        if not isinstance(story_id, str) or not story_id:
            raise SessionValidationError("story_id must be a non-empty string", "story_id")
        try:
            local_date = parse_local_date(str(data.get("local_date")))
        except ValueError:
            raise SessionValidationError(
                f"local_date '{data.get('local_date')}' is not YYYY-MM-DD", "local_date",
            )
        duration = data.get("duration_seconds", 0)
        if not isinstance(duration, (int, float)) or isinstance(duration, bool) or duration < 0:
            raise SessionValidationError(
                "duration_seconds must be a non-negative number", "duration_seconds",
            )
        started_at = None
        if data.get("started_at"):
            try:
                started_at = datetime.fromisoformat(data["started_at"]).replace(tzinfo=None)
            except (TypeError, ValueError):
                raise SessionValidationError(
                    f"started_at '{data['started_at']}' is not ISO-8601", "started_at",
                )
        return cls(
            story_id=StoryId(story_id),
            local_date=local_date,
            duration_seconds=int(duration),
            completed=bool(data.get("completed", False)),
            started_at=started_at,
        )
