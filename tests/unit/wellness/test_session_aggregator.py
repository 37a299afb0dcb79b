"""Tests for session aggregation, windows and goal progress."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from hypothesis import given
from hypothesis import strategies as st

from wellness.domain.models import Granularity, SessionRecord, TherapyType
from wellness.services.dates import day_window, period_window
from wellness.services.goal_store import GoalStore
from wellness.services.session_aggregator import aggregate, filter_window, goal_progress
from wellness.storage import InMemoryKeyValueStore

NOW = datetime(2025, 3, 12, 15, 30, tzinfo=UTC)  # a Wednesday


def session(
    therapy: TherapyType | str, duration: float = 600, when: datetime = NOW
) -> SessionRecord:
    identifier = therapy.identifier if isinstance(therapy, TherapyType) else therapy
    return SessionRecord(date=when, duration=duration, therapy_type=identifier)


def test_empty_input_gives_empty_result() -> None:
    assert aggregate([]) == {}


def test_counts_and_durations_skip_unknown_types() -> None:
    records = [
        session(TherapyType.DRY_SAUNA, 100),
        session(TherapyType.DRY_SAUNA, 200),
        session(TherapyType.DRY_SAUNA, 300),
        session("Infrared Blanket", 999),
    ]

    result = aggregate(records)

    assert set(result) == {TherapyType.DRY_SAUNA}
    assert result[TherapyType.DRY_SAUNA].count == 3
    assert result[TherapyType.DRY_SAUNA].total_duration == 600


def test_types_without_records_are_absent() -> None:
    result = aggregate([session(TherapyType.COLD_PLUNGE)])
    assert TherapyType.DRY_SAUNA not in result


@given(
    entries=st.lists(
        st.tuples(
            st.sampled_from([t.identifier for t in TherapyType] + ["Unknown", ""]),
            st.integers(min_value=0, max_value=7200),
        ),
        max_size=30,
    ),
    seed=st.randoms(),
)
def test_aggregation_is_order_independent(entries: list[tuple[str, int]], seed) -> None:
    records = [session(identifier, duration) for identifier, duration in entries]
    shuffled = list(records)
    seed.shuffle(shuffled)

    result = aggregate(records)

    assert result == aggregate(shuffled)
    assert sum(stats.count for stats in result.values()) == sum(
        1 for identifier, _ in entries if TherapyType.from_identifier(identifier) is not None
    )


def test_filter_window_is_half_open() -> None:
    start = datetime(2025, 3, 10, tzinfo=UTC)
    end = start + timedelta(days=7)
    records = [
        session(TherapyType.RUNNING, when=start),
        session(TherapyType.RUNNING, when=end - timedelta(seconds=1)),
        session(TherapyType.RUNNING, when=end),
        session(TherapyType.RUNNING, when=start - timedelta(seconds=1)),
    ]

    assert len(filter_window(records, start, end)) == 2


def test_period_windows() -> None:
    week = period_window(Granularity.WEEKLY, NOW, UTC)
    month = period_window(Granularity.MONTHLY, NOW, UTC)
    year = period_window(Granularity.YEARLY, NOW, UTC)

    assert week == (datetime(2025, 3, 10, tzinfo=UTC), datetime(2025, 3, 17, tzinfo=UTC))
    assert month == (datetime(2025, 3, 1, tzinfo=UTC), datetime(2025, 4, 1, tzinfo=UTC))
    assert year == (datetime(2025, 1, 1, tzinfo=UTC), datetime(2026, 1, 1, tzinfo=UTC))


def test_december_month_window_rolls_into_next_year() -> None:
    start, end = period_window(Granularity.MONTHLY, datetime(2024, 12, 31, tzinfo=UTC), UTC)
    assert (start.date().isoformat(), end.date().isoformat()) == ("2024-12-01", "2025-01-01")


def test_day_window_uses_calendar_timezone() -> None:
    tz = ZoneInfo("America/Los_Angeles")
    # 02:00 UTC on the 12th is still the evening of the 11th in Los Angeles
    start, end = day_window(datetime(2025, 3, 12, 2, 0, tzinfo=UTC), tz)

    assert start == datetime(2025, 3, 11, tzinfo=tz)
    assert end == datetime(2025, 3, 12, tzinfo=tz)


def test_goal_progress_counts_current_week_only() -> None:
    goals = GoalStore(InMemoryKeyValueStore())
    goals.set_weekly_goal(TherapyType.DRY_SAUNA, 2)
    records = [
        session(TherapyType.DRY_SAUNA, when=NOW),
        session(TherapyType.DRY_SAUNA, when=NOW - timedelta(days=1)),
        session(TherapyType.DRY_SAUNA, when=NOW - timedelta(days=8)),
        session(TherapyType.COLD_PLUNGE, when=NOW),
    ]

    progress = goal_progress(goals, records, Granularity.WEEKLY, now=NOW)

    assert set(progress) == set(TherapyType)
    sauna = progress[TherapyType.DRY_SAUNA]
    assert (sauna.completed, sauna.goal, sauna.achieved) == (2, 2, True)
    plunge = progress[TherapyType.COLD_PLUNGE]
    assert (plunge.completed, plunge.goal, plunge.remaining) == (1, 3, 2)
    assert progress[TherapyType.SLEEP].completed == 0
