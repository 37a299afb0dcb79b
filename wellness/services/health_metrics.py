"""
Health-metrics data sources.

The engine treats the device health store as an opaque async source that
summarizes one metric over a set of calendar days. Two implementations:
an in-memory source fed with readings, and a simulated source for demos.
"""

import asyncio
import random
from collections.abc import Sequence
from datetime import date
from statistics import mean
from typing import Protocol

import structlog

from wellness.domain.models import HealthMetric, HealthMetricSummary, Trend
from wellness.result import Result

logger = structlog.get_logger(__name__)

# metric -> (minimum change that counts as a trend, whether higher is better)
TREND_RULES: dict[HealthMetric, tuple[float, bool]] = {
    HealthMetric.HEART_RATE: (3.0, False),
    HealthMetric.RESTING_HEART_RATE: (3.0, False),
    HealthMetric.HRV: (5.0, True),
    HealthMetric.SPO2: (1.0, True),
    HealthMetric.RESPIRATORY_RATE: (1.0, False),
    HealthMetric.STEPS: (1000.0, True),
}

# Plausible (low, high) reading ranges for the simulated source
SIMULATED_RANGES: dict[HealthMetric, tuple[float, float]] = {
    HealthMetric.HEART_RATE: (55.0, 110.0),
    HealthMetric.RESTING_HEART_RATE: (48.0, 72.0),
    HealthMetric.HRV: (25.0, 110.0),
    HealthMetric.SPO2: (94.0, 100.0),
    HealthMetric.RESPIRATORY_RATE: (11.0, 18.0),
    HealthMetric.STEPS: (2000.0, 16000.0),
}


def classify_trend(
    current: float | None,
    baseline: float | None,
    threshold: float,
    higher_is_better: bool = True,
) -> Trend:
    """Stable unless ``current`` moved at least ``threshold`` away from ``baseline``."""
    if current is None or baseline is None:
        return Trend.STABLE
    diff = current - baseline
    if abs(diff) < threshold:
        return Trend.STABLE
    improved = diff > 0 if higher_is_better else diff < 0
    return Trend.IMPROVING if improved else Trend.DECLINING


def summarize_readings(
    metric: HealthMetric, readings_by_day: dict[date, list[float]]
) -> HealthMetricSummary:
    """
    Build a summary from per-day readings.

    The trend compares the latest day's mean against the mean of the earlier days.
    """
    days = sorted(day for day, values in readings_by_day.items() if values)
    if not days:
        raise ValueError(f"No readings for {metric.value}")

    values = [value for day in days for value in readings_by_day[day]]
    daily_means = [mean(readings_by_day[day]) for day in days]
    baseline = mean(daily_means[:-1]) if len(daily_means) > 1 else None
    threshold, higher_is_better = TREND_RULES[metric]

    return HealthMetricSummary(
        metric=metric,
        days=days,
        average=mean(values),
        maximum=max(values),
        minimum=min(values),
        trend=classify_trend(daily_means[-1], baseline, threshold, higher_is_better),
    )


class HealthMetricsSource(Protocol):
    """Async source of aggregate health values for a set of calendar days."""

    source_name: str

    async def summarize(
        self, metric: HealthMetric, days: Sequence[date]
    ) -> Result[HealthMetricSummary, Exception]: ...


class InMemoryHealthMetricsSource:
    """Source backed by readings recorded in memory."""

    def __init__(self, source_name: str = "in-memory") -> None:
        self.source_name = source_name
        self.logger = logger.bind(source=source_name)
        self._readings: dict[tuple[HealthMetric, date], list[float]] = {}

    def record(self, metric: HealthMetric, day: date, *values: float) -> None:
        self._readings.setdefault((metric, day), []).extend(values)

    async def summarize(
        self, metric: HealthMetric, days: Sequence[date]
    ) -> Result[HealthMetricSummary, Exception]:
        readings = {day: self._readings.get((metric, day), []) for day in days}
        try:
            summary = summarize_readings(metric, readings)
        except ValueError as e:
            self.logger.info("health_metric_unavailable", metric=metric.value, days=len(days))
            return Result.err(e)
        return Result.ok(summary)


class SimulatedHealthMetricsSource:
    """
    Simulated health store with realistic latency and occasional failures.

    In production this would be backed by the device health database.
    """

    def __init__(self, source_name: str, failure_rate: float = 0.05) -> None:
        self.source_name = source_name
        self.failure_rate = failure_rate
        self.logger = logger.bind(source=source_name)

    async def summarize(
        self, metric: HealthMetric, days: Sequence[date]
    ) -> Result[HealthMetricSummary, Exception]:
        try:
            await asyncio.sleep(random.uniform(0.01, 0.1))

            if random.random() < self.failure_rate:
                raise ConnectionError(f"Health store {self.source_name} unavailable")

            low, high = SIMULATED_RANGES[metric]
            readings = {day: [random.uniform(low, high) for _ in range(3)] for day in days}
            summary = summarize_readings(metric, readings)

            self.logger.info("health_metric_summarized", metric=metric.value, days=len(days))
            return Result.ok(summary)

        except Exception as e:
            self.logger.exception("health_metric_summary_failed", error=str(e))
            return Result.err(e)
