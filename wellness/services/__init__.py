"""
Core services for the application.

This package contains the goal stores, session analytics, wellness ratings
and the health-metrics source protocol.
"""

from .container import WellnessServices, build_services
from .goal_store import GoalStore
from .habit_stats import calculate_habit_stats
from .health_metrics import (
    HealthMetricsSource,
    InMemoryHealthMetricsSource,
    SimulatedHealthMetricsSource,
    classify_trend,
)
from .session_aggregator import aggregate, filter_window, goal_progress
from .step_goal import StepGoalPolicy
from .wellness_impact import calculate_impacts, previous_week_average, trend_data, weekly_average
from .wellness_ratings import WellnessRatingStore

__all__ = [
    "GoalStore",
    "StepGoalPolicy",
    "WellnessRatingStore",
    "WellnessServices",
    "build_services",
    "aggregate",
    "filter_window",
    "goal_progress",
    "calculate_habit_stats",
    "calculate_impacts",
    "weekly_average",
    "previous_week_average",
    "trend_data",
    "HealthMetricsSource",
    "InMemoryHealthMetricsSource",
    "SimulatedHealthMetricsSource",
    "classify_trend",
]
