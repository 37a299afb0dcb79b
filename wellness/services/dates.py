"""
Calendar helpers.

Every day, week, month and year boundary in the engine goes through these
functions with a single timezone, so "today" means the same thing everywhere.
"""

from datetime import UTC, date, datetime, time, timedelta, tzinfo

from wellness.domain.models import Granularity


def local_day(moment: datetime, tz: tzinfo) -> date:
    """Calendar day of ``moment`` in the given timezone. Naive values are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).date()


def start_of(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def start_of_day(moment: datetime, tz: tzinfo) -> datetime:
    return start_of(local_day(moment, tz), tz)


def day_window(moment: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open window [start of day, start of next day) containing ``moment``."""
    day = local_day(moment, tz)
    return start_of(day, tz), start_of(day + timedelta(days=1), tz)


def period_window(
    granularity: Granularity, moment: datetime, tz: tzinfo
) -> tuple[datetime, datetime]:
    """
    Half-open calendar window of the given granularity containing ``moment``.

    Weeks start on Monday (ISO), months and years on their first day.
    """
    day = local_day(moment, tz)
    if granularity is Granularity.WEEKLY:
        first = day - timedelta(days=day.weekday())
        last = first + timedelta(days=7)
    elif granularity is Granularity.MONTHLY:
        first = day.replace(day=1)
        last = (first + timedelta(days=32)).replace(day=1)
    else:
        first = day.replace(month=1, day=1)
        last = first.replace(year=first.year + 1)
    return start_of(first, tz), start_of(last, tz)
