"""
Service wiring.

The stores are built once at application start from configuration and passed
to consumers explicitly; nothing here is a module-level singleton.
"""

from dataclasses import dataclass
from pathlib import Path

import structlog

from wellness.config import AppConfig, get_config
from wellness.domain.models import SessionRecord, WellnessRating
from wellness.services.goal_store import GoalStore
from wellness.services.health_metrics import HealthMetricsSource, InMemoryHealthMetricsSource
from wellness.services.step_goal import StepGoalPolicy
from wellness.services.wellness_ratings import Clock, WellnessRatingStore, utc_now
from wellness.storage import (
    InMemoryKeyValueStore,
    InMemoryRecordStore,
    JsonFileKeyValueStore,
    JsonFileRecordStore,
    KeyValueStore,
    RecordStore,
)

logger = structlog.get_logger(__name__)


@dataclass
class WellnessServices:
    """Everything a UI layer needs, constructed together."""

    config: AppConfig
    preferences: KeyValueStore
    sessions: RecordStore[SessionRecord]
    goals: GoalStore
    step_goal: StepGoalPolicy
    ratings: WellnessRatingStore
    health: HealthMetricsSource


def build_services(
    config: AppConfig | None = None,
    health: HealthMetricsSource | None = None,
    clock: Clock = utc_now,
) -> WellnessServices:
    config = config or get_config()
    storage = config.storage

    preferences: KeyValueStore
    sessions: RecordStore[SessionRecord]
    rating_records: RecordStore[WellnessRating]
    if storage.backend == "json":
        data_dir = Path(storage.data_dir)
        preferences = JsonFileKeyValueStore(data_dir / storage.preferences_file)
        sessions = JsonFileRecordStore(data_dir / storage.sessions_file, SessionRecord)
        rating_records = JsonFileRecordStore(data_dir / storage.ratings_file, WellnessRating)
    else:
        preferences = InMemoryKeyValueStore()
        sessions = InMemoryRecordStore()
        rating_records = InMemoryRecordStore()

    services = WellnessServices(
        config=config,
        preferences=preferences,
        sessions=sessions,
        goals=GoalStore(preferences, config.goals),
        step_goal=StepGoalPolicy(preferences, config.step_goal),
        ratings=WellnessRatingStore(rating_records, tz=config.calendar.tzinfo, clock=clock),
        health=health or InMemoryHealthMetricsSource(),
    )
    logger.info(
        "services_built",
        storage_backend=storage.backend,
        timezone=config.calendar.timezone,
        environment=config.environment,
    )
    return services
