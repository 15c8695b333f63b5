"""Reading Session — JSON blob round-trip and validation of stored records."""

from datetime import date, datetime

import pytest

from ntrl_stats.core.domain_types import StoryId
from ntrl_stats.core.errors import SessionValidationError
from ntrl_stats.core.reading_session import ReadingSession


def test_roundtrip_with_start_time():
    """Sessions with a start time survive to_dict / from_dict."""
    session = ReadingSession(
        StoryId("s1"), date(2024, 1, 2), 95, True, datetime(2024, 1, 2, 21, 5),
    )
    data = session.to_dict()
    assert data["local_date"] == "2024-01-02"
    assert data["started_at"] == "2024-01-02T21:05:00"
    assert ReadingSession.from_dict(data) == session


def test_completed_defaults_to_false():
    """Missing completed / started_at fields default sensibly."""
    session = ReadingSession.from_dict(
        {"story_id": "s1", "local_date": "2024-01-02", "duration_seconds": 3},
    )
    assert session.completed is False
    assert session.started_at is None


@pytest.mark.parametrize("data,field", [
    ({"local_date": "2024-01-02"}, "story_id"),
    ({"story_id": "s1", "local_date": "02/01/2024"}, "local_date"),
    ({"story_id": "s1", "local_date": "2024-01-02", "duration_seconds": -1}, "duration_seconds"),
    ({"story_id": "s1", "local_date": "2024-01-02", "started_at": "noon"}, "started_at"),
])
def test_malformed_records_raise_validation_error(data, field):
    """Each invalid field raises SessionValidationError naming that field."""
    with pytest.raises(SessionValidationError) as exc:
        ReadingSession.from_dict(data)
    assert exc.value.field == field


def test_offset_start_time_keeps_wall_clock_hour():
    """A stored start time with a UTC offset loads as naive local wall time."""
    session = ReadingSession.from_dict({
        "story_id": "s1", "local_date": "2024-01-02", "duration_seconds": 3,
        "started_at": "2024-01-02T21:05:00+02:00",
    })
    assert session.started_at == datetime(2024, 1, 2, 21, 5)
