"""
End-to-end walkthrough of the goal and analytics engine.

This script exercises:
1. Configuration loading
2. Goal store and step goal persistence
3. Session aggregation and goal progress
4. Daily wellness ratings
5. Health metric summaries from the simulated source

Run with: uv run python demo_system.py
"""

import asyncio
import random
from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wellness.config import get_config
from wellness.domain.models import Granularity, HealthMetric, SessionRecord, TherapyType
from wellness.observability import configure_logging
from wellness.services import (
    SimulatedHealthMetricsSource,
    WellnessServices,
    aggregate,
    build_services,
    calculate_habit_stats,
    goal_progress,
)

console = Console()


def seed_sessions(services: WellnessServices, now: datetime) -> None:
    """Log a few weeks of sessions, plus one with an identifier the engine doesn't know."""
    rng = random.Random(7)
    for offset in range(21):
        day = now - timedelta(days=offset)
        for therapy in (TherapyType.DRY_SAUNA, TherapyType.COLD_PLUNGE):
            if rng.random() < 0.6:
                services.sessions.insert(
                    SessionRecord(
                        date=day,
                        duration=rng.randint(180, 1500),
                        temperature=rng.randint(5, 90),
                        humidity=rng.randint(10, 40),
                        therapy_type=therapy.identifier,
                    )
                )
    services.sessions.insert(
        SessionRecord(date=now, duration=600, therapy_type="Infrared Blanket")
    )
    services.sessions.save()


def show_goals(services: WellnessServices) -> None:
    console.print(Panel("🎯 Goals", style="blue"))
    services.goals.set_goal(Granularity.WEEKLY, TherapyType.DRY_SAUNA, 4)
    services.step_goal.update_goal(120_000)

    table = Table(title="Weekly / Monthly / Yearly goals")
    table.add_column("Therapy", style="cyan")
    for granularity in Granularity:
        table.add_column(granularity.value, style="green")
    for therapy in (TherapyType.DRY_SAUNA, TherapyType.COLD_PLUNGE, TherapyType.MEDITATION):
        table.add_row(
            therapy.value, *(str(services.goals.get_goal(g, therapy)) for g in Granularity)
        )
    console.print(table)
    console.print(f"Daily step goal (requested 120000): {services.step_goal.get_goal()}")


def show_sessions(services: WellnessServices, now: datetime) -> None:
    console.print(Panel("📊 Sessions", style="blue"))
    records = services.sessions.fetch()
    stats = aggregate(records)

    table = Table(title="All-time statistics")
    table.add_column("Therapy", style="cyan")
    table.add_column("Sessions", style="magenta")
    table.add_column("Total minutes", style="green")
    table.add_column("Streak", style="yellow")
    for therapy, stat in stats.items():
        habit = calculate_habit_stats(therapy, records, now=now)
        table.add_row(
            therapy.value,
            str(stat.count),
            f"{stat.total_duration / 60:.1f}",
            f"{habit.current_streak} (best {habit.best_streak})",
        )
    console.print(table)

    progress = goal_progress(services.goals, records, Granularity.WEEKLY, now=now)
    for therapy in stats:
        item = progress[therapy]
        mark = "✅" if item.achieved else "⏳"
        console.print(f"{mark} {therapy.value}: {item.completed}/{item.goal} this week")


def show_ratings(services: WellnessServices) -> None:
    console.print(Panel("🙂 Wellness rating", style="blue"))
    console.print(f"Rated today before check-in: {services.ratings.has_rated_today()}")
    services.ratings.set_today_rating(5)
    services.ratings.set_today_rating(8)
    today = services.ratings.get_today_rating()
    console.print(
        f"Ratings stored: {len(services.ratings.ratings())}, today's value: "
        f"{today.rating if today else '-'}"
    )


async def show_health(services: WellnessServices, now: datetime) -> None:
    console.print(Panel("❤️ Health metrics", style="blue"))
    days = [(now - timedelta(days=offset)).date() for offset in range(7)]
    for metric in (HealthMetric.RESTING_HEART_RATE, HealthMetric.HRV):
        result = await services.health.summarize(metric, days)
        if result.is_err():
            console.print(f"❌ {metric.value}: {result.unwrap_err()}", style="red")
            continue
        summary = result.unwrap()
        console.print(
            f"{metric.value}: avg {summary.average:.1f}, "
            f"min {summary.minimum:.1f}, max {summary.maximum:.1f}, trend {summary.trend.value}"
        )


async def run_demo() -> None:
    config = get_config()
    configure_logging(config.logging)
    console.print(Panel("🧊 Recovery Wellness Engine - Demo", style="bold blue"))

    services = build_services(config, health=SimulatedHealthMetricsSource("demo-health"))
    now = datetime.now(UTC)

    seed_sessions(services, now)
    show_goals(services)
    show_sessions(services, now)
    show_ratings(services)
    await show_health(services, now)


if __name__ == "__main__":
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        console.print("\n👋 Demo stopped by user", style="yellow")
