"""
Daily wellness ratings with one-record-per-day semantics.

The uniqueness key is the start of the calendar day in the configured timezone.
A lookup searches the half-open window [start of day, start of next day), so
records written at any instant of that day are found.
"""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from uuid import uuid4

import structlog

from wellness.domain.models import WellnessRating
from wellness.result import Result
from wellness.services.dates import day_window
from wellness.storage.base import RecordStore, StorageError

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class WellnessRatingStore:
    """
    Create-or-update access to daily wellness ratings.

    Every write runs under one re-entrant lock, the store's single writer
    context, so two near-simultaneous first ratings of a day cannot create
    two records. Failed saves are rolled back and reported through Result.
    """

    def __init__(
        self,
        records: RecordStore[WellnessRating],
        tz: tzinfo = UTC,
        clock: Clock = utc_now,
    ) -> None:
        self.records = records
        self.tz = tz
        self.clock = clock
        self.logger = logger.bind(component="wellness_ratings")
        self._writer = threading.RLock()

    def get_rating(self, day: datetime) -> WellnessRating | None:
        start, end = day_window(day, self.tz)
        with self._writer:
            matches = self.records.fetch(lambda r: start <= r.day < end, limit=1)
        return matches[0] if matches else None

    def get_today_rating(self) -> WellnessRating | None:
        return self.get_rating(self.clock())

    def has_rated_today(self) -> bool:
        return self.get_today_rating() is not None

    def set_rating(self, rating: int, day: datetime) -> Result[WellnessRating, StorageError]:
        with self._writer:
            now = self.clock()
            existing = self.get_rating(day)
            try:
                if existing is not None:
                    existing.rating = rating
                    existing.timestamp = now
                    self.records.update(existing)
                    record = existing
                else:
                    start, _ = day_window(day, self.tz)
                    record = WellnessRating(id=uuid4(), day=start, rating=rating, timestamp=now)
                    self.records.insert(record)
                self.records.save()
            except StorageError as e:
                self.records.rollback()
                self.logger.error("wellness_rating_save_failed", day=str(day.date()), error=str(e))
                return Result.err(e)

        self.logger.info(
            "wellness_rating_saved",
            day=record.day.date().isoformat(),
            rating=rating,
            created=existing is None,
        )
        return Result.ok(record)

    def set_today_rating(self, rating: int) -> Result[WellnessRating, StorageError]:
        return self.set_rating(rating, self.clock())

    def delete_rating(self, day: datetime) -> Result[bool, StorageError]:
        """Delete the rating for a day. Ok(False) when there was nothing to delete."""
        with self._writer:
            existing = self.get_rating(day)
            if existing is None:
                return Result.ok(False)
            try:
                self.records.delete(existing)
                self.records.save()
            except StorageError as e:
                self.records.rollback()
                self.logger.error("wellness_rating_delete_failed", error=str(e))
                return Result.err(e)

        self.logger.info("wellness_rating_deleted", day=existing.day.date().isoformat())
        return Result.ok(True)

    def delete_today_rating(self) -> Result[bool, StorageError]:
        return self.delete_rating(self.clock())

    def ratings(self) -> list[WellnessRating]:
        """All ratings ordered by day."""
        with self._writer:
            records = self.records.fetch()
        return sorted(records, key=lambda r: r.day)
