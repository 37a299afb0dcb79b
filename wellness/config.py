"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
"""

import os
from functools import lru_cache
from typing import Literal, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class GoalConfig(BaseModel):
    """Per-therapy goal defaults for each granularity."""

    weekly_default: int = Field(default=3, gt=0, description="Default weekly session goal")
    monthly_default: int = Field(default=12, gt=0, description="Default monthly session goal")
    yearly_default: int = Field(default=150, gt=0, description="Default yearly session goal")
    minimum: int = Field(
        default=1, ge=0, description="Smallest goal accepted; lower values are clamped up"
    )


class StepGoalConfig(BaseModel):
    """Daily step goal bounds."""

    default: int = Field(default=10_000, gt=0)
    minimum: int = Field(default=1_000, gt=0)
    maximum: int = Field(default=50_000, gt=0)

    @model_validator(mode="after")
    def default_within_bounds(self) -> "StepGoalConfig":
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError("step goal default must lie within [minimum, maximum]")
        return self


class StorageConfig(BaseModel):
    """Where goals, sessions and ratings are persisted."""

    backend: Literal["memory", "json"] = Field(default="memory", description="Storage backend")
    data_dir: str = Field(default="./data", description="Directory for JSON storage files")
    preferences_file: str = Field(default="preferences.json")
    sessions_file: str = Field(default="sessions.json")
    ratings_file: str = Field(default="wellness_ratings.json")


class CalendarConfig(BaseModel):
    """Calendar reference used for every day/week/month boundary."""

    timezone: str = Field(default="UTC", description="IANA timezone name")

    @field_validator("timezone")
    def validate_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    goals: GoalConfig = Field(default_factory=GoalConfig)
    step_goal: StepGoalConfig = Field(default_factory=StepGoalConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _backend_to_literal(val: str) -> Literal["memory", "json"]:
        return "json" if val.strip().lower() == "json" else "memory"

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    goal_config = GoalConfig(
        weekly_default=int(os.getenv("WEEKLY_GOAL_DEFAULT", "3")),
        monthly_default=int(os.getenv("MONTHLY_GOAL_DEFAULT", "12")),
        yearly_default=int(os.getenv("YEARLY_GOAL_DEFAULT", "150")),
        minimum=int(os.getenv("GOAL_MINIMUM", "1")),
    )

    step_goal_config = StepGoalConfig(
        default=int(os.getenv("STEP_GOAL_DEFAULT", "10000")),
        minimum=int(os.getenv("STEP_GOAL_MINIMUM", "1000")),
        maximum=int(os.getenv("STEP_GOAL_MAXIMUM", "50000")),
    )

    storage_config = StorageConfig(
        backend=_backend_to_literal(os.getenv("STORAGE_BACKEND", "memory")),
        data_dir=os.getenv("STORAGE_DATA_DIR", "./data"),
    )

    calendar_config = CalendarConfig(timezone=os.getenv("CALENDAR_TIMEZONE", "UTC"))

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        goals=goal_config,
        step_goal=step_goal_config,
        storage=storage_config,
        calendar=calendar_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
