"""Tests for wiring the services from configuration."""

from datetime import UTC, datetime
from pathlib import Path

from wellness.config import AppConfig, CalendarConfig, StorageConfig
from wellness.domain.models import Granularity, SessionRecord, TherapyType
from wellness.services import aggregate, build_services
from wellness.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


def test_memory_backend_by_default() -> None:
    services = build_services(AppConfig())

    assert isinstance(services.preferences, InMemoryKeyValueStore)
    assert services.goals.get_goal(Granularity.WEEKLY, TherapyType.DRY_SAUNA) == 3
    assert services.step_goal.get_goal() == 10_000
    assert services.ratings.has_rated_today() is False


def test_json_backend_persists_across_rebuilds(tmp_path: Path) -> None:
    config = AppConfig(
        storage=StorageConfig(backend="json", data_dir=str(tmp_path)),
        calendar=CalendarConfig(timezone="Europe/London"),
    )
    clock = lambda: datetime(2025, 6, 1, 12, 0, tzinfo=UTC)  # noqa: E731

    first = build_services(config, clock=clock)
    assert isinstance(first.preferences, JsonFileKeyValueStore)
    first.goals.set_goal(Granularity.YEARLY, TherapyType.SLEEP, 300)
    first.step_goal.update_goal(7_500)
    first.ratings.set_today_rating(6)
    first.sessions.insert(
        SessionRecord(date=clock(), duration=300, therapy_type=TherapyType.SLEEP.identifier)
    )
    first.sessions.save()

    second = build_services(config, clock=clock)

    assert second.goals.get_goal(Granularity.YEARLY, TherapyType.SLEEP) == 300
    assert second.step_goal.get_goal() == 7_500
    today = second.ratings.get_today_rating()
    assert today is not None and today.rating == 6
    assert aggregate(second.sessions.fetch())[TherapyType.SLEEP].count == 1
