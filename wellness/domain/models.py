"""
Domain models for recovery-therapy tracking.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation but could be swapped to dataclasses if needed.
"""

from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# Manual session entry format used by the logbook
LOGBOOK_DATE_FORMAT = "%m/%d/%Y"

TherapyCategory = Literal["heat", "cold", "recovery"]


class TherapyType(str, Enum):
    """Supported recovery-session kinds. The value is the persistence identifier."""

    DRY_SAUNA = "Sauna"
    HOT_YOGA = "Hot Yoga"
    RUNNING = "Running"
    WEIGHT_TRAINING = "Lifting"
    COLD_PLUNGE = "Cold Plunge"
    COLD_SHOWER = "Cold Shower"
    ICE_BATH = "Ice Bath"
    COLD_YOGA = "Yoga"
    MEDITATION = "Meditation"
    STRETCHING = "Stretching"
    DEEP_BREATHING = "Deep Breathing"
    SLEEP = "Sleep"

    @property
    def identifier(self) -> str:
        return self.value

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def category(self) -> TherapyCategory:
        if self in _HEAT_TYPES:
            return "heat"
        if self in _COLD_TYPES:
            return "cold"
        return "recovery"

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self.category]

    @classmethod
    def from_identifier(cls, identifier: str | None) -> "TherapyType | None":
        """Resolve a stored identifier, returning None for anything unknown."""
        if identifier is None:
            return None
        try:
            return cls(identifier)
        except ValueError:
            return None


_ICONS: dict[TherapyType, str] = {
    TherapyType.DRY_SAUNA: "flame.fill",
    TherapyType.HOT_YOGA: "bolt.fill",
    TherapyType.RUNNING: "figure.walk",
    TherapyType.WEIGHT_TRAINING: "dumbbell.fill",
    TherapyType.COLD_PLUNGE: "snow",
    TherapyType.COLD_SHOWER: "drop.fill",
    TherapyType.ICE_BATH: "snowflake",
    TherapyType.COLD_YOGA: "leaf.arrow.circlepath",
    TherapyType.MEDITATION: "heart.fill",
    TherapyType.STRETCHING: "person.fill",
    TherapyType.DEEP_BREATHING: "wind",
    TherapyType.SLEEP: "moon.fill",
}

_HEAT_TYPES = frozenset(
    {TherapyType.DRY_SAUNA, TherapyType.HOT_YOGA, TherapyType.RUNNING, TherapyType.WEIGHT_TRAINING}
)
_COLD_TYPES = frozenset(
    {TherapyType.COLD_PLUNGE, TherapyType.COLD_SHOWER, TherapyType.ICE_BATH, TherapyType.COLD_YOGA}
)
_CATEGORY_COLORS: dict[str, str] = {"heat": "orange", "cold": "blue", "recovery": "green"}


class Granularity(str, Enum):
    """Time tier at which a per-therapy goal is defined."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def storage_key(self) -> str:
        return f"{self.value}Goals"


class SessionRecord(BaseModel):
    """One completed therapy session, as read from the record store."""

    model_config = ConfigDict(frozen=True)  # Sessions are never edited after logging

    id: UUID = Field(default_factory=uuid4)
    date: datetime
    duration: float = Field(ge=0.0, description="Elapsed seconds")
    temperature: int = 0
    humidity: int = 0
    therapy_type: str = Field(description="Raw therapy identifier, may be unknown")

    @field_validator("date", mode="before")
    @classmethod
    def parse_session_date(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return datetime.strptime(v, LOGBOOK_DATE_FORMAT)
            except ValueError:
                return datetime.fromisoformat(v)
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator("date")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        # Naive timestamps are treated as UTC so comparisons never mix kinds
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    @property
    def therapy(self) -> TherapyType | None:
        return TherapyType.from_identifier(self.therapy_type)

    @property
    def formatted_duration(self) -> str:
        minutes, seconds = divmod(int(self.duration), 60)
        return f"{minutes:02d}:{seconds:02d}"


class WellnessRating(BaseModel):
    """Daily wellness rating. At most one exists per calendar day."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    day: datetime = Field(description="Start of the rated calendar day")
    rating: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SessionStats(BaseModel):
    """Aggregated statistics for one therapy type."""

    count: int = Field(default=0, ge=0)
    total_duration: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_duration(self) -> float:
        return self.total_duration / self.count if self.count else 0.0


class GoalProgress(BaseModel):
    """Actual session count for the current period against its goal."""

    therapy_type: TherapyType
    granularity: Granularity
    completed: int = Field(ge=0)
    goal: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining(self) -> int:
        return max(0, self.goal - self.completed)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fraction(self) -> float:
        if self.goal <= 0:
            return 1.0
        return min(1.0, self.completed / self.goal)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def achieved(self) -> bool:
        return self.completed >= self.goal


class HabitStats(BaseModel):
    """Streak and frequency statistics for one habit."""

    current_streak: int = Field(ge=0)
    best_streak: int = Field(ge=0)
    total_sessions: int = Field(ge=0)
    this_week_count: int = Field(ge=0)
    last_week_count: int = Field(ge=0)
    this_month_count: int = Field(ge=0)
    monthly_consistency: int = Field(ge=0, le=100, description="Percent of days this month")
    average_per_week: float = Field(ge=0.0)


class WellnessImpact(BaseModel):
    """Difference in average rating between habit days and other days."""

    therapy_type: TherapyType
    average_rating_with_habit: float
    average_rating_without_habit: float
    impact: float
    sample_size: int = Field(gt=0)

    @property
    def is_positive(self) -> bool:
        return self.impact > 0.2

    @property
    def impact_description(self) -> str:
        sign = "+" if self.impact >= 0 else ""
        return f"{sign}{self.impact:.1f}★"


class TrendPoint(BaseModel):
    """Single point of a rating trend line."""

    day: datetime
    value: float


class HealthMetric(str, Enum):
    """Health metrics the external data source can summarize."""

    HEART_RATE = "heart_rate"
    RESTING_HEART_RATE = "resting_heart_rate"
    HRV = "hrv"
    SPO2 = "spo2"
    RESPIRATORY_RATE = "respiratory_rate"
    STEPS = "steps"


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class HealthMetricSummary(BaseModel):
    """Aggregate values of one metric over a set of calendar days."""

    model_config = ConfigDict(frozen=True)

    metric: HealthMetric
    days: list[date]
    average: float
    maximum: float
    minimum: float
    trend: Trend = Trend.STABLE
