"""Test Fakes — in-memory KeyValueStore and scriptable SpanSource.

Invariants:
    - InMemoryKeyValueStore round-trips values through JSON (same as the SQL store)
    - Every store call yields to the event loop once, so concurrent callers interleave
    - StubSpanSource records every fetch in .calls

Design Decisions:
    - Flat fake classes (no inheritance from the Protocols): structural typing is enough
"""

import asyncio
import json

from ntrl_stats.core.errors import DatabaseError, SpanSourceError


class InMemoryKeyValueStore:
    """Dict-backed store; set fail_reads / fail_writes to simulate outages."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[str] = []

    async def get(self, key):
        await asyncio.sleep(0)
        if self.fail_reads:
            raise DatabaseError("store offline", "execute")
        raw = self.data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key, value):
        await asyncio.sleep(0)
        if self.fail_writes:
            raise DatabaseError("store offline", "commit")
        self.data[key] = json.dumps(value)
        self.writes.append(key)

    async def delete(self, key):
        await asyncio.sleep(0)
        if self.fail_writes:
            raise DatabaseError("store offline", "commit")
        self.data.pop(key, None)


class StubSpanSource:
    """Span source returning configured spans per story.

    spans: story_id -> list of span dicts. Unknown stories return [].
    error: exception instance raised on every call (when set).
    delay: seconds to sleep before answering.
    """

    def __init__(self, spans=None, error=None, delay=0.0):
        self.spans = spans or {}
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def fetch_spans(self, story_id):
        self.calls.append(story_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.spans.get(story_id, []))


def spans_for(**counts) -> list[dict]:
    """spans_for(urgency_inflation=2, clickbait=1) -> three span dicts."""
    spans = []
    position = 0
    for category, count in counts.items():
        for _ in range(count):
            spans.append({"category": category, "start": position, "end": position + 5})
            position += 10
    return spans


def network_error() -> SpanSourceError:
    return SpanSourceError("Transport error: connection refused")
