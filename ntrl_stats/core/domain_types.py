"""Domain Types — rich types that replace bare primitives across the stats engine.

Invariants:
    - StoryId wraps str: never pass a bare article id through domain logic
    - Span categories are a closed set (SpanReason) with OTHER as the fallback
    - Every SpanReason has a human-readable label in REASON_LABELS
    - StatsRange values match the query-string values accepted by the API

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (store blobs are JSON)
"""

from datetime import date
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StoryId = NewType("StoryId", str)


# ─── Enums ───────────────────────────────────────────────────────

class SpanReason(str, Enum):
    """Manipulation categories reported by the span source (lower-cased)."""
    CLICKBAIT = "clickbait"
    URGENCY_INFLATION = "urgency_inflation"
    EMOTIONAL_TRIGGER = "emotional_trigger"
    SELLING = "selling"
    AGENDA_SIGNALING = "agenda_signaling"
    RHETORICAL_FRAMING = "rhetorical_framing"
    EDITORIAL_VOICE = "editorial_voice"
    OTHER = "other"


class StatsRange(str, Enum):
    """Time ranges offered by the breakdown view."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


# ─── Labels ──────────────────────────────────────────────────────

REASON_LABELS: dict[SpanReason, str] = {
    SpanReason.CLICKBAIT: "Clickbait",
    SpanReason.URGENCY_INFLATION: "Urgency & hype",
    SpanReason.EMOTIONAL_TRIGGER: "Emotional language",
    SpanReason.SELLING: "Promotional language",
    SpanReason.AGENDA_SIGNALING: "Agenda signaling",
    SpanReason.RHETORICAL_FRAMING: "Rhetorical framing",
    SpanReason.EDITORIAL_VOICE: "Editorial opinion",
    SpanReason.OTHER: "Other",
}


# ─── Constants ───────────────────────────────────────────────────

ALL_TIME_FLOOR = date(2020, 1, 1)  # earliest date the "all" range reaches back to
HOURS_PER_DAY = 24
USER_STATS_VERSION = 1
