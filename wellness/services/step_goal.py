"""Daily step goal with silent clamping."""

import structlog
from pydantic import TypeAdapter, ValidationError

from wellness.config import StepGoalConfig
from wellness.result import Result
from wellness.storage.base import KeyValueStore, StorageError

logger = structlog.get_logger(__name__)

STEP_GOAL_KEY = "dailyStepGoal"

_STEP_GOAL = TypeAdapter(int)


class StepGoalPolicy:
    """
    Single daily step target, loaded once at construction.

    Out-of-range updates are clamped into [minimum, maximum], never rejected.
    """

    def __init__(self, store: KeyValueStore, config: StepGoalConfig | None = None) -> None:
        self.store = store
        self.config = config or StepGoalConfig()
        self.logger = logger.bind(component="step_goal")
        self._goal = self._load()

    def get_goal(self) -> int:
        return self._goal

    def clamp(self, value: int) -> int:
        return max(self.config.minimum, min(int(value), self.config.maximum))

    def update_goal(self, new_value: int) -> Result[int, StorageError]:
        self._goal = self.clamp(new_value)
        try:
            self.store.set(STEP_GOAL_KEY, _STEP_GOAL.dump_json(self._goal))
        except StorageError as e:
            self.logger.error("step_goal_write_failed", error=str(e))
            return Result.err(e)
        self.logger.debug("step_goal_updated", requested=new_value, stored=self._goal)
        return Result.ok(self._goal)

    def _load(self) -> int:
        try:
            raw = self.store.get(STEP_GOAL_KEY)
        except StorageError as e:
            self.logger.warning("step_goal_read_failed", error=str(e))
            return self.config.default
        if raw is None:
            return self.config.default
        try:
            return _STEP_GOAL.validate_json(raw)
        except ValidationError as e:
            self.logger.warning("step_goal_decode_failed", error=str(e))
            return self.config.default
