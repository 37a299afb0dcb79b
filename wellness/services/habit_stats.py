"""Streak and frequency statistics for a single habit."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta, tzinfo

from wellness.domain.models import Granularity, HabitStats, SessionRecord, TherapyType
from wellness.services.dates import local_day, period_window
from wellness.services.session_aggregator import filter_window

AVERAGE_WINDOW_WEEKS = 12


def _current_streak(days: set[date], today: date) -> int:
    streak = 0
    check = today
    while check in days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def _best_streak(days: set[date]) -> int:
    best = 0
    run = 0
    previous: date | None = None
    for day in sorted(days):
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def calculate_habit_stats(
    therapy_type: TherapyType,
    records: Iterable[SessionRecord],
    now: datetime | None = None,
    tz: tzinfo = UTC,
) -> HabitStats:
    """
    Compute streaks and period counts for one therapy type.

    Streaks count distinct calendar days; several sessions on one day extend a
    streak by one. The current streak is zero when there is no session today.
    """
    now = now or datetime.now(UTC)
    sessions = [r for r in records if r.therapy is therapy_type]
    days = {local_day(r.date, tz) for r in sessions}
    today = local_day(now, tz)

    week_start, week_end = period_window(Granularity.WEEKLY, now, tz)
    last_week_start = week_start - timedelta(days=7)
    month_start, month_end = period_window(Granularity.MONTHLY, now, tz)

    this_month_count = len(filter_window(sessions, month_start, month_end))
    consistency = int(this_month_count / today.day * 100)

    recent = [r for r in sessions if r.date >= now - timedelta(weeks=AVERAGE_WINDOW_WEEKS)]

    return HabitStats(
        current_streak=_current_streak(days, today),
        best_streak=_best_streak(days),
        total_sessions=len(sessions),
        this_week_count=len(filter_window(sessions, week_start, week_end)),
        last_week_count=len(filter_window(sessions, last_week_start, week_start)),
        this_month_count=this_month_count,
        monthly_consistency=min(consistency, 100),
        average_per_week=len(recent) / AVERAGE_WINDOW_WEEKS,
    )
