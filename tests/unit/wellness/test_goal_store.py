"""Tests for per-therapy goal resolution and persistence."""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wellness.config import GoalConfig
from wellness.domain.models import Granularity, TherapyType
from wellness.services.goal_store import GoalStore
from wellness.storage import InMemoryKeyValueStore, StorageError

DEFAULTS = {Granularity.WEEKLY: 3, Granularity.MONTHLY: 12, Granularity.YEARLY: 150}


class FailingKeyValueStore(InMemoryKeyValueStore):
    def set(self, key: str, value: bytes) -> None:
        raise StorageError("disk full")


class CountingKeyValueStore(InMemoryKeyValueStore):
    def __init__(self) -> None:
        super().__init__()
        self.reads: list[str] = []

    def get(self, key: str) -> bytes | None:
        self.reads.append(key)
        return super().get(key)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv: InMemoryKeyValueStore) -> GoalStore:
    return GoalStore(kv)


@given(
    granularity=st.sampled_from(list(Granularity)),
    therapy=st.sampled_from(list(TherapyType)),
)
def test_absent_goal_resolves_to_granularity_default(
    granularity: Granularity, therapy: TherapyType
) -> None:
    store = GoalStore(InMemoryKeyValueStore())
    assert store.get_goal(granularity, therapy) == DEFAULTS[granularity]


def test_set_goal_then_get(store: GoalStore) -> None:
    result = store.set_goal(Granularity.WEEKLY, TherapyType.DRY_SAUNA, 5)

    assert result.is_ok()
    assert result.unwrap() == 5
    assert store.get_goal(Granularity.WEEKLY, TherapyType.DRY_SAUNA) == 5
    # Other granularities and types keep their defaults
    assert store.get_goal(Granularity.MONTHLY, TherapyType.DRY_SAUNA) == 12
    assert store.get_goal(Granularity.WEEKLY, TherapyType.COLD_PLUNGE) == 3


@given(
    granularity=st.sampled_from(list(Granularity)),
    therapy=st.sampled_from(list(TherapyType)),
    value=st.integers(min_value=1, max_value=10_000),
)
def test_goal_survives_reload(granularity: Granularity, therapy: TherapyType, value: int) -> None:
    kv = InMemoryKeyValueStore()
    GoalStore(kv).set_goal(granularity, therapy, value)

    reloaded = GoalStore(kv)

    assert reloaded.get_goal(granularity, therapy) == value


def test_mutation_persists_whole_mapping(store: GoalStore, kv: InMemoryKeyValueStore) -> None:
    store.set_monthly_goal(TherapyType.ICE_BATH, 8)
    store.set_monthly_goal(TherapyType.MEDITATION, 20)

    persisted = json.loads(kv.get("monthlyGoals") or b"{}")

    assert persisted == {"Ice Bath": 8, "Meditation": 20}
    assert kv.get("weeklyGoals") is None


def test_convenience_accessors(store: GoalStore) -> None:
    store.set_weekly_goal(TherapyType.RUNNING, 4)
    store.set_yearly_goal(TherapyType.RUNNING, 200)

    assert store.get_weekly_goal(TherapyType.RUNNING) == 4
    assert store.get_monthly_goal(TherapyType.RUNNING) == 12
    assert store.get_yearly_goal(TherapyType.RUNNING) == 200
    assert store.goals(Granularity.YEARLY) == {"Running": 200}


def test_corrupt_mapping_only_affects_its_granularity() -> None:
    kv = InMemoryKeyValueStore(
        {
            "weeklyGoals": b"not json at all",
            "monthlyGoals": json.dumps({"Sauna": 20}).encode(),
            "yearlyGoals": json.dumps({"Sauna": "many"}).encode(),
        }
    )
    store = GoalStore(kv)

    assert store.get_goal(Granularity.WEEKLY, TherapyType.DRY_SAUNA) == 3
    assert store.get_goal(Granularity.MONTHLY, TherapyType.DRY_SAUNA) == 20
    assert store.get_goal(Granularity.YEARLY, TherapyType.DRY_SAUNA) == 150


def test_loading_is_lazy() -> None:
    kv = CountingKeyValueStore()
    store = GoalStore(kv)
    assert kv.reads == []

    store.get_goal(Granularity.WEEKLY, TherapyType.SLEEP)
    store.get_goal(Granularity.YEARLY, TherapyType.SLEEP)

    assert sorted(kv.reads) == ["monthlyGoals", "weeklyGoals", "yearlyGoals"]


@pytest.mark.parametrize("requested", [0, -4])
def test_non_positive_goals_are_clamped(store: GoalStore, requested: int) -> None:
    result = store.set_goal(Granularity.WEEKLY, TherapyType.STRETCHING, requested)

    assert result.unwrap() == 1
    assert store.get_goal(Granularity.WEEKLY, TherapyType.STRETCHING) == 1


def test_configured_defaults_and_minimum() -> None:
    store = GoalStore(
        InMemoryKeyValueStore(), GoalConfig(weekly_default=2, minimum=0)
    )

    assert store.get_goal(Granularity.WEEKLY, TherapyType.HOT_YOGA) == 2
    assert store.set_goal(Granularity.WEEKLY, TherapyType.HOT_YOGA, 0).unwrap() == 0


def test_write_failure_is_reported_not_raised() -> None:
    store = GoalStore(FailingKeyValueStore())

    result = store.set_goal(Granularity.WEEKLY, TherapyType.COLD_SHOWER, 6)

    assert result.is_err()
    assert isinstance(result.unwrap_err(), StorageError)
    # The in-memory value still reflects the caller's change
    assert store.get_goal(Granularity.WEEKLY, TherapyType.COLD_SHOWER) == 6
