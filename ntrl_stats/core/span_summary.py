"""Span Summary — reduces a story's manipulation spans into per-category counters.

Invariants:
    - Categories are trimmed and lower-cased before matching SpanReason
    - Short transformation-type names ("urgency", "emotional") resolve to their
      SpanReason before the OTHER fallback
    - Well-formed but unknown categories count as SpanReason.OTHER
    - Malformed categories (missing, non-string, blank) are dropped and not counted
    - span_count == sum(by_reason.values()) for every summary built here
    - Positions (start/end) are ignored

Design Decisions:
    - Normalization happens at the cache boundary: aggregation code only
      ever sees SpanReason keys
    - Cache entries are re-normalized on read (stored blobs are untyped JSON)
"""

from dataclasses import dataclass, field

from ntrl_stats.core.domain_types import SpanReason, StoryId

# Transformation-type names used by the reader UI
REASON_ALIASES = {
    "urgency": SpanReason.URGENCY_INFLATION,
    "emotional": SpanReason.EMOTIONAL_TRIGGER,
}


@dataclass(frozen=True)
class SpanSummary:
    """Span totals for one story."""
    span_count: int = 0
    by_reason: dict[SpanReason, int] = field(default_factory=dict)

    @classmethod
    def zero(cls) -> "SpanSummary":
        return cls()


def normalize_reason(raw: object) -> SpanReason | None:
    """Map a raw category onto SpanReason. None means malformed (drop it)."""
    if not isinstance(raw, str):
        return None
    key = raw.strip().lower()
    if not key:
        return None
    if key in REASON_ALIASES:
        return REASON_ALIASES[key]
    try:
        return SpanReason(key)
    except ValueError:
        return SpanReason.OTHER


def _span_category(span: object) -> object:
    # Span source payloads use "category"; older transparency payloads use "reason"
    if not isinstance(span, dict):
        return None
    return span.get("category", span.get("reason"))


def summarize_spans(spans: list) -> SpanSummary:
    """Count spans grouped by normalized category."""
    by_reason: dict[SpanReason, int] = {}
    for span in spans:
        reason = normalize_reason(_span_category(span))
        if reason is None:
            continue
        by_reason[reason] = by_reason.get(reason, 0) + 1
    return SpanSummary(span_count=sum(by_reason.values()), by_reason=by_reason)


def to_cache_entry(story_id: StoryId, summary: SpanSummary, cached_at: str) -> dict:
    """JSON blob stored in the article span cache collection."""
    return {
        "story_id": story_id,
        "span_count": summary.span_count,
        "by_reason": {reason.value: count for reason, count in summary.by_reason.items()},
        "cached_at": cached_at,
    }


def summary_from_cache_entry(entry: object) -> SpanSummary | None:
    """Rebuild a summary from a stored blob. None if the blob is unusable."""
    if not isinstance(entry, dict) or not isinstance(entry.get("by_reason"), dict):
        return None
    by_reason: dict[SpanReason, int] = {}
    for raw, count in entry["by_reason"].items():
        reason = normalize_reason(raw)
        if reason is None or not isinstance(count, int) or isinstance(count, bool):
            continue
        if count > 0:
            by_reason[reason] = by_reason.get(reason, 0) + count
    return SpanSummary(span_count=sum(by_reason.values()), by_reason=by_reason)
