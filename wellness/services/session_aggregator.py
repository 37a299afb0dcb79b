"""
Per-therapy session statistics.

The aggregator is stateless and window-agnostic: callers narrow the records to
a time window first (filter_window / period_window) and then aggregate.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, datetime, tzinfo

from wellness.domain.models import (
    GoalProgress,
    Granularity,
    SessionRecord,
    SessionStats,
    TherapyType,
)
from wellness.services.dates import period_window
from wellness.services.goal_store import GoalStore


def aggregate(records: Iterable[SessionRecord]) -> dict[TherapyType, SessionStats]:
    """
    Count sessions and sum durations per therapy type.

    Records with an unknown therapy identifier are skipped. Types without any
    records do not appear in the result.
    """
    counts: dict[TherapyType, int] = defaultdict(int)
    durations: dict[TherapyType, float] = defaultdict(float)

    for record in records:
        therapy = record.therapy
        if therapy is None:
            continue
        counts[therapy] += 1
        durations[therapy] += record.duration

    return {
        therapy: SessionStats(count=count, total_duration=durations[therapy])
        for therapy, count in counts.items()
    }


def filter_window(
    records: Iterable[SessionRecord], start: datetime, end: datetime
) -> list[SessionRecord]:
    """Records dated within the half-open window [start, end)."""
    return [record for record in records if start <= record.date < end]


def goal_progress(
    goals: GoalStore,
    records: Iterable[SessionRecord],
    granularity: Granularity,
    now: datetime | None = None,
    tz: tzinfo = UTC,
) -> dict[TherapyType, GoalProgress]:
    """Session counts for the current week/month/year against each therapy's goal."""
    now = now or datetime.now(UTC)
    start, end = period_window(granularity, now, tz)
    stats = aggregate(filter_window(records, start, end))

    return {
        therapy: GoalProgress(
            therapy_type=therapy,
            granularity=granularity,
            completed=stats[therapy].count if therapy in stats else 0,
            goal=goals.get_goal(granularity, therapy),
        )
        for therapy in TherapyType
    }
