"""Breakdown — range-filtered stats re-derived from session history and the span cache.

Invariants:
    - Only completed sessions inside [start, end] (inclusive, date-only) count
    - Sessions without a cached summary contribute zero, never an error
    - Bucket enumeration is shared by the empty and populated paths: for a given
      range and anchor both yield the same bucket count and labels
    - day: 24 hourly buckets; week: 7 (Sun-Sat); month: every day of the month;
      all: one per populated month, ascending (empty list when nothing matches)
    - Categories are non-zero only, sorted by count descending (stable)

Design Decisions:
    - Week and month axes cover the whole calendar period even though the filter
      stops at the anchor day: the chart skeleton never changes shape mid-week
    - Two passes: enumerate buckets, then fill values from a key -> total map
"""

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time

from ntrl_stats.core.date_helpers import (
    add_days, date_range, format_day_of_month, format_hour, format_month,
    format_weekday, is_within_range, start_of_month, start_of_week,
)
from ntrl_stats.core.domain_types import (
    ALL_TIME_FLOOR, HOURS_PER_DAY, REASON_LABELS, SpanReason, StatsRange,
)
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.span_summary import SpanSummary

BucketKey = int | date  # hour of day for DAY, calendar day or first-of-month otherwise


@dataclass(frozen=True)
class SeriesPoint:
    label: str
    value: int
    date: date | datetime


@dataclass(frozen=True)
class CategoryCount:
    reason: SpanReason
    count: int
    label: str


@dataclass(frozen=True)
class StatsBreakdown:
    total: int
    series: list[SeriesPoint]
    categories: list[CategoryCount]
    is_empty: bool


@dataclass(frozen=True)
class _Bucket:
    key: BucketKey
    label: str
    date: date | datetime


# ─── Range & Buckets ────────────────────────────────────────────

def range_bounds(stats_range: StatsRange, anchor: date) -> tuple[date, date]:
    """Inclusive [start, end] filter window anchored at the given day."""
    if stats_range == StatsRange.DAY:
        return anchor, anchor
    if stats_range == StatsRange.WEEK:
        return start_of_week(anchor), anchor
    if stats_range == StatsRange.MONTH:
        return start_of_month(anchor), anchor
    return ALL_TIME_FLOOR, anchor


def _end_of_month(value: date) -> date:
    _, last_day = calendar.monthrange(value.year, value.month)
    return value.replace(day=last_day)


def enumerate_buckets(
    stats_range: StatsRange, anchor: date, populated_months: Iterable[date] = (),
) -> list[_Bucket]:
    """Chart buckets for a range. Values are filled in by the caller."""
    if stats_range == StatsRange.DAY:
        return [
            _Bucket(hour, format_hour(hour), datetime.combine(anchor, time(hour)))
            for hour in range(HOURS_PER_DAY)
        ]
    if stats_range == StatsRange.WEEK:
        week_start = start_of_week(anchor)
        return [
            _Bucket(day, format_weekday(day), day)
            for day in date_range(week_start, add_days(week_start, 6))
        ]
    if stats_range == StatsRange.MONTH:
        return [
            _Bucket(day, format_day_of_month(day), day)
            for day in date_range(start_of_month(anchor), _end_of_month(anchor))
        ]
    return [
        _Bucket(month, format_month(month), month)
        for month in sorted(set(populated_months))
    ]


def bucket_key(session: ReadingSession, stats_range: StatsRange) -> BucketKey:
    """Bucket a session falls into. Sessions without started_at land in hour 0."""
    if stats_range == StatsRange.DAY:
        return session.started_at.hour if session.started_at else 0
    if stats_range == StatsRange.ALL:
        return start_of_month(session.local_date)
    return session.local_date


# ─── Breakdown ───────────────────────────────────────────────────

def filter_sessions(
    sessions: Iterable[ReadingSession], stats_range: StatsRange, anchor: date,
) -> list[ReadingSession]:
    start, end = range_bounds(stats_range, anchor)
    return [
        s for s in sessions
        if s.completed and is_within_range(s.local_date, start, end)
    ]


def _build_series(buckets: list[_Bucket], totals: Mapping[BucketKey, int]) -> list[SeriesPoint]:
    return [SeriesPoint(b.label, totals.get(b.key, 0), b.date) for b in buckets]


def _build_categories(category_totals: Mapping[SpanReason, int]) -> list[CategoryCount]:
    categories = [
        CategoryCount(reason, count, REASON_LABELS.get(reason, reason.value))
        for reason, count in category_totals.items()
        if count > 0
    ]
    return sorted(categories, key=lambda c: c.count, reverse=True)


def compute_breakdown(
    sessions: Iterable[ReadingSession],
    span_lookup: Mapping[str, SpanSummary],
    stats_range: StatsRange,
    anchor: date,
) -> StatsBreakdown:
    """Re-derive a range breakdown from history + cache. Pure, no IO."""
    matching = filter_sessions(sessions, stats_range, anchor)

    if not matching:
        return StatsBreakdown(
            total=0,
            series=_build_series(enumerate_buckets(stats_range, anchor), {}),
            categories=[],
            is_empty=True,
        )

    total = 0
    category_totals: dict[SpanReason, int] = {}
    bucket_totals: dict[BucketKey, int] = {}
    populated_months: set[date] = set()

    for session in matching:
        summary = span_lookup.get(session.story_id)
        if summary is None:
            continue
        total += summary.span_count
        for reason, count in summary.by_reason.items():
            category_totals[reason] = category_totals.get(reason, 0) + count
        key = bucket_key(session, stats_range)
        bucket_totals[key] = bucket_totals.get(key, 0) + summary.span_count
        if stats_range == StatsRange.ALL:
            populated_months.add(start_of_month(session.local_date))

    buckets = enumerate_buckets(stats_range, anchor, populated_months)
    return StatsBreakdown(
        total=total,
        series=_build_series(buckets, bucket_totals),
        categories=_build_categories(category_totals),
        is_empty=False,
    )
