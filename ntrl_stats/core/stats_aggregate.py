"""Stats Aggregate — the all-time running totals and their overview projection.

Invariants:
    - total_spans == sum(total_by_reason.values()) after every apply
    - total_sessions == number of completed sessions ever applied
    - ntrl_days holds each calendar day at most once (insertion order kept)
    - apply_completed_session never mutates its input; returns a new UserStats
    - Never raises on a malformed stored blob; from_dict() falls back to zeroes

Design Decisions:
    - Pure function over a method on the service: the service owns the lock and
      the store round-trip, this module owns the arithmetic
    - Overview is a projection of the aggregate only (never recomputed from history)
"""

import math
from dataclasses import dataclass, field, replace

from ntrl_stats.core.date_helpers import local_date_string
from ntrl_stats.core.domain_types import SpanReason, USER_STATS_VERSION
from ntrl_stats.core.reading_session import ReadingSession
from ntrl_stats.core.span_summary import SpanSummary, normalize_reason


@dataclass(frozen=True)
class UserStats:
    """Singleton running aggregate, persisted as one JSON blob."""
    version: int = USER_STATS_VERSION
    ntrl_days: tuple[str, ...] = ()
    total_sessions: int = 0
    total_duration_seconds: int = 0
    total_spans: int = 0
    total_by_reason: dict[SpanReason, int] = field(default_factory=dict)
    first_session_date: str | None = None
    last_updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "ntrl_days": list(self.ntrl_days),
            "total_sessions": self.total_sessions,
            "total_duration_seconds": self.total_duration_seconds,
            "total_spans": self.total_spans,
            "total_by_reason": {r.value: c for r, c in self.total_by_reason.items()},
            "first_session_date": self.first_session_date,
            "last_updated_at": self.last_updated_at,
        }

    @classmethod
    def from_dict(cls, data: object) -> "UserStats":
        if not isinstance(data, dict):
            return cls()
        by_reason: dict[SpanReason, int] = {}
        raw_by_reason = data.get("total_by_reason")
        if isinstance(raw_by_reason, dict):
            for raw, count in raw_by_reason.items():
                reason = normalize_reason(raw)
                if reason is not None and _is_count(count):
                    by_reason[reason] = by_reason.get(reason, 0) + count
        days = data.get("ntrl_days")
        return cls(
            version=data.get("version", USER_STATS_VERSION),
            ntrl_days=tuple(dict.fromkeys(d for d in days if isinstance(d, str)))
            if isinstance(days, list) else (),
            total_sessions=_count_or_zero(data.get("total_sessions")),
            total_duration_seconds=_count_or_zero(data.get("total_duration_seconds")),
            total_spans=sum(by_reason.values()),
            total_by_reason=by_reason,
            first_session_date=data.get("first_session_date"),
            last_updated_at=data.get("last_updated_at"),
        )


@dataclass(frozen=True)
class StatsOverview:
    """Figures shown on the My Stats card."""
    ntrl_days: int
    total_sessions: int
    ntrl_minutes: int
    phrases_avoided: int


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _count_or_zero(value: object) -> int:
    return value if _is_count(value) else 0


def apply_completed_session(
    stats: UserStats, session: ReadingSession, summary: SpanSummary, now: str,
) -> UserStats:
    """Merge one completed session into the running totals. Pure, no IO."""
    day = local_date_string(session.local_date)
    days = stats.ntrl_days if day in stats.ntrl_days else (*stats.ntrl_days, day)

    by_reason = dict(stats.total_by_reason)
    for reason, count in summary.by_reason.items():
        by_reason[reason] = by_reason.get(reason, 0) + count

    return replace(
        stats,
        ntrl_days=days,
        total_sessions=stats.total_sessions + 1,
        total_duration_seconds=stats.total_duration_seconds + session.duration_seconds,
        total_spans=stats.total_spans + summary.span_count,
        total_by_reason=by_reason,
        first_session_date=stats.first_session_date or day,
        last_updated_at=now,
    )


def round_half_up(value: float) -> int:
    """Round .5 upward (builtin round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def compute_overview(stats: UserStats) -> StatsOverview:
    """Project the aggregate onto the overview card. Pure, no IO."""
    return StatsOverview(
        ntrl_days=len(stats.ntrl_days),
        total_sessions=stats.total_sessions,
        ntrl_minutes=round_half_up(stats.total_duration_seconds / 60),
        phrases_avoided=stats.total_spans,
    )
