"""
Per-therapy goals at weekly, monthly and yearly granularity.

Each granularity is an independent mapping of therapy identifier to goal,
persisted as one JSON object under its own preferences key. Lookups for a
therapy without an entry resolve to the granularity default, never to zero.
"""

import structlog
from pydantic import TypeAdapter, ValidationError

from wellness.config import GoalConfig
from wellness.domain.models import Granularity, TherapyType
from wellness.result import Result
from wellness.storage.base import KeyValueStore, StorageError

logger = structlog.get_logger(__name__)

_GOAL_MAPPING = TypeAdapter(dict[str, int])


class GoalStore:
    """
    Resolves and persists per-therapy goals.

    Construct once at application start and pass it to consumers.
    Not synchronized: callers must stay on a single thread.
    """

    def __init__(self, store: KeyValueStore, config: GoalConfig | None = None) -> None:
        self.store = store
        self.config = config or GoalConfig()
        self.logger = logger.bind(component="goal_store")
        self._goals: dict[Granularity, dict[str, int]] | None = None

    def default_for(self, granularity: Granularity) -> int:
        return {
            Granularity.WEEKLY: self.config.weekly_default,
            Granularity.MONTHLY: self.config.monthly_default,
            Granularity.YEARLY: self.config.yearly_default,
        }[granularity]

    def get_goal(self, granularity: Granularity, therapy_type: TherapyType) -> int:
        goals = self._loaded()[granularity]
        return goals.get(therapy_type.identifier, self.default_for(granularity))

    def set_goal(
        self, granularity: Granularity, therapy_type: TherapyType, value: int
    ) -> Result[int, StorageError]:
        """
        Set a goal and persist the whole mapping for its granularity.

        Values below the configured minimum are clamped up to it. The in-memory
        value is kept even when the write fails; the failure is only reported
        through the returned Result.
        """
        goal = max(self.config.minimum, int(value))
        goals = self._loaded()[granularity]
        goals[therapy_type.identifier] = goal

        if goal != value:
            self.logger.info(
                "goal_clamped",
                granularity=granularity.value,
                therapy_type=therapy_type.identifier,
                requested=value,
                stored=goal,
            )

        error = self._persist(granularity)
        if error is not None:
            return Result.err(error)
        return Result.ok(goal)

    def goals(self, granularity: Granularity) -> dict[str, int]:
        """Return a copy of the explicitly stored goals for a granularity."""
        return dict(self._loaded()[granularity])

    def get_weekly_goal(self, therapy_type: TherapyType) -> int:
        return self.get_goal(Granularity.WEEKLY, therapy_type)

    def get_monthly_goal(self, therapy_type: TherapyType) -> int:
        return self.get_goal(Granularity.MONTHLY, therapy_type)

    def get_yearly_goal(self, therapy_type: TherapyType) -> int:
        return self.get_goal(Granularity.YEARLY, therapy_type)

    def set_weekly_goal(self, therapy_type: TherapyType, value: int) -> Result[int, StorageError]:
        return self.set_goal(Granularity.WEEKLY, therapy_type, value)

    def set_monthly_goal(self, therapy_type: TherapyType, value: int) -> Result[int, StorageError]:
        return self.set_goal(Granularity.MONTHLY, therapy_type, value)

    def set_yearly_goal(self, therapy_type: TherapyType, value: int) -> Result[int, StorageError]:
        return self.set_goal(Granularity.YEARLY, therapy_type, value)

    def _loaded(self) -> dict[Granularity, dict[str, int]]:
        if self._goals is None:
            self._goals = {granularity: self._load(granularity) for granularity in Granularity}
        return self._goals

    def _load(self, granularity: Granularity) -> dict[str, int]:
        key = granularity.storage_key
        try:
            raw = self.store.get(key)
        except StorageError as e:
            self.logger.warning("goal_mapping_read_failed", key=key, error=str(e))
            return {}
        if raw is None:
            return {}
        try:
            return _GOAL_MAPPING.validate_json(raw)
        except ValidationError as e:
            # A corrupt mapping only resets this granularity to its default
            self.logger.warning("goal_mapping_decode_failed", key=key, error=str(e))
            return {}

    def _persist(self, granularity: Granularity) -> StorageError | None:
        key = granularity.storage_key
        payload = _GOAL_MAPPING.dump_json(self._loaded()[granularity])
        try:
            self.store.set(key, payload)
        except StorageError as e:
            self.logger.error("goal_mapping_write_failed", key=key, error=str(e))
            return e
        self.logger.debug("goal_mapping_written", key=key)
        return None
