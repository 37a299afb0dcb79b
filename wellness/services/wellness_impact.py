"""
Relating wellness ratings to habits.

Compares the average rating on days a habit was practiced against the other
rated days, and summarizes recent rating history.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta, tzinfo
from statistics import mean

from wellness.domain.models import (
    SessionRecord,
    TherapyType,
    TrendPoint,
    WellnessImpact,
    WellnessRating,
)
from wellness.services.dates import local_day

MIN_HABIT_DAYS = 3
MIN_SAMPLES_PER_SIDE = 3
TREND_WINDOW_DAYS = 30


def calculate_impacts(
    ratings: Sequence[WellnessRating],
    records: Iterable[SessionRecord],
    therapy_types: Iterable[TherapyType] | None = None,
    tz: tzinfo = UTC,
) -> list[WellnessImpact]:
    """
    Impact of each habit on the daily rating, highest impact first.

    A habit needs sessions on at least three distinct days, and at least three
    ratings on each side of the split, before an impact is reported.
    """
    types = list(therapy_types) if therapy_types is not None else list(TherapyType)
    records = list(records)

    session_days: dict[TherapyType, set] = {
        therapy: {local_day(r.date, tz) for r in records if r.therapy is therapy}
        for therapy in types
    }

    impacts: list[WellnessImpact] = []
    for therapy in types:
        habit_days = session_days[therapy]
        if len(habit_days) < MIN_HABIT_DAYS:
            continue

        with_habit: list[float] = []
        without_habit: list[float] = []
        for rating in ratings:
            bucket = with_habit if local_day(rating.day, tz) in habit_days else without_habit
            bucket.append(float(rating.rating))

        if len(with_habit) < MIN_SAMPLES_PER_SIDE or len(without_habit) < MIN_SAMPLES_PER_SIDE:
            continue

        average_with = mean(with_habit)
        average_without = mean(without_habit)
        impacts.append(
            WellnessImpact(
                therapy_type=therapy,
                average_rating_with_habit=average_with,
                average_rating_without_habit=average_without,
                impact=average_with - average_without,
                sample_size=len(with_habit),
            )
        )

    return sorted(impacts, key=lambda impact: impact.impact, reverse=True)


def _average_between(
    ratings: Iterable[WellnessRating], start: datetime, end: datetime | None = None
) -> float | None:
    values = [
        float(r.rating) for r in ratings if r.day >= start and (end is None or r.day < end)
    ]
    return mean(values) if values else None


def weekly_average(ratings: Iterable[WellnessRating], now: datetime | None = None) -> float | None:
    """Average rating over the last seven days, None without ratings."""
    now = now or datetime.now(UTC)
    return _average_between(ratings, now - timedelta(days=7))


def previous_week_average(
    ratings: Iterable[WellnessRating], now: datetime | None = None
) -> float | None:
    """Average rating between fourteen and seven days ago."""
    now = now or datetime.now(UTC)
    return _average_between(ratings, now - timedelta(days=14), now - timedelta(days=7))


def trend_data(ratings: Iterable[WellnessRating], now: datetime | None = None) -> list[TrendPoint]:
    """Ratings of the last thirty days in chronological order."""
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(days=TREND_WINDOW_DAYS)
    recent = sorted((r for r in ratings if r.day >= cutoff), key=lambda r: r.day)
    return [TrendPoint(day=r.day, value=float(r.rating)) for r in recent]
