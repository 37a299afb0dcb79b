"""
Tests for configuration management in `wellness/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Goal and step goal overrides
- Calendar timezone validation
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from wellness.config import (
    AppConfig,
    CalendarConfig,
    StepGoalConfig,
    get_config,
    load_config_from_env,
)


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("WEEKLY_GOAL_DEFAULT", raising=False)
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.goals.weekly_default == 3
    assert config.goals.monthly_default == 12
    assert config.goals.yearly_default == 150
    assert config.storage.backend == "memory"


def test_production_uses_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    config = load_config_from_env()
    assert config.logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    config = load_config_from_env()
    assert config.logging.level == "ERROR"


def test_goal_and_storage_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEEKLY_GOAL_DEFAULT", "5")
    monkeypatch.setenv("STEP_GOAL_DEFAULT", "8000")
    monkeypatch.setenv("STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("STORAGE_DATA_DIR", "/tmp/wellness")
    monkeypatch.setenv("CALENDAR_TIMEZONE", "Europe/Berlin")

    config = load_config_from_env()

    assert config.goals.weekly_default == 5
    assert config.step_goal.default == 8000
    assert config.storage.backend == "json"
    assert config.storage.data_dir == "/tmp/wellness"
    assert config.calendar.timezone == "Europe/Berlin"


def test_unknown_timezone_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown timezone"):
        CalendarConfig(timezone="Mars/Olympus_Mons")


def test_step_goal_default_must_be_within_bounds() -> None:
    with pytest.raises(ValidationError, match="within"):
        StepGoalConfig(default=500)


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)
