"""Span Summary — category normalization and counting at the cache boundary."""

from ntrl_stats.core.domain_types import SpanReason, StoryId
from ntrl_stats.core.span_summary import (
    SpanSummary, normalize_reason, summarize_spans,
    summary_from_cache_entry, to_cache_entry,
)


def test_normalize_reason_lowercases_and_trims():
    """Case and surrounding whitespace are ignored."""
    assert normalize_reason("  ClickBait ") == SpanReason.CLICKBAIT
    assert normalize_reason("URGENCY_INFLATION") == SpanReason.URGENCY_INFLATION


def test_normalize_reason_unknown_string_is_other():
    """Unrecognized categories fall back to OTHER."""
    assert normalize_reason("fearmongering") == SpanReason.OTHER


def test_normalize_reason_malformed_is_none():
    """Missing, blank or non-string categories are rejected."""
    assert normalize_reason(None) is None
    assert normalize_reason("   ") is None
    assert normalize_reason(42) is None


def test_summarize_counts_by_reason():
    """Spans are counted per normalized category."""
    spans = [
        {"category": "clickbait", "start": 0, "end": 4},
        {"category": "Clickbait", "start": 10, "end": 14},
        {"category": "selling", "start": 20, "end": 24},
    ]
    summary = summarize_spans(spans)
    assert summary.span_count == 3
    assert summary.by_reason == {SpanReason.CLICKBAIT: 2, SpanReason.SELLING: 1}


def test_summarize_accepts_legacy_reason_key():
    """Older payloads carrying "reason" instead of "category" still count."""
    summary = summarize_spans([{"reason": "editorial_voice", "start": 0, "end": 1}])
    assert summary.by_reason == {SpanReason.EDITORIAL_VOICE: 1}


def test_summarize_drops_malformed_spans_from_count():
    """Malformed spans are excluded from both the total and the breakdown."""
    spans = [
        {"category": "clickbait"},
        {"category": ""},
        {"start": 1, "end": 2},
        "not-a-span",
    ]
    summary = summarize_spans(spans)
    assert summary.span_count == 1
    assert summary.span_count == sum(summary.by_reason.values())


def test_summarize_empty_is_zero():
    """No spans gives the zero summary."""
    assert summarize_spans([]) == SpanSummary.zero()


def test_cache_entry_roundtrip_keeps_counts():
    """A summary survives storage as a cache entry."""
    summary = summarize_spans([{"category": "selling"}, {"category": "selling"}])
    entry = to_cache_entry(StoryId("s1"), summary, "2024-01-01T00:00:00+00:00")
    assert entry["by_reason"] == {"selling": 2}
    assert entry["span_count"] == 2
    assert summary_from_cache_entry(entry) == summary


def test_cache_entry_renormalizes_stored_keys():
    """Stored category keys are normalized again and the count recomputed."""
    entry = {
        "story_id": "s1", "span_count": 9,
        "by_reason": {"ClickBait": 2, "mystery": 1, "selling": "x", "agenda_signaling": 0},
        "cached_at": "2024-01-01T00:00:00+00:00",
    }
    summary = summary_from_cache_entry(entry)
    assert summary.by_reason == {SpanReason.CLICKBAIT: 2, SpanReason.OTHER: 1}
    assert summary.span_count == 3  # recomputed, stored span_count ignored


def test_cache_entry_unusable_blob_is_none():
    """Entries without by_reason, or not dicts, are unusable."""
    assert summary_from_cache_entry({"story_id": "s1"}) is None
    assert summary_from_cache_entry("garbage") is None


def test_normalize_reason_resolves_transformation_type_aliases():
    """Short UI names land on their full reason instead of OTHER."""
    assert normalize_reason("urgency") == SpanReason.URGENCY_INFLATION
    assert normalize_reason(" Emotional ") == SpanReason.EMOTIONAL_TRIGGER
