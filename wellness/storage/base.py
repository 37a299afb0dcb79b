"""
Storage protocols consumed by the services.

Why Protocol over ABC: structural typing keeps test doubles trivial.
"""

from collections.abc import Callable
from typing import Protocol, TypeVar

RecordT = TypeVar("RecordT")


class StorageError(Exception):
    """A durable store failed to read or write."""


class KeyValueStore(Protocol):
    """Durable preferences store mapping string keys to raw bytes."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None:
        """Write a value. Raises StorageError when the write cannot be made durable."""
        ...


class RecordStore(Protocol[RecordT]):
    """
    Durable record store with unit-of-work semantics.

    insert/update/delete stage changes; fetch sees staged changes;
    save commits them and rollback discards them.
    """

    def insert(self, record: RecordT) -> None: ...

    def update(self, record: RecordT) -> None: ...

    def delete(self, record: RecordT) -> None: ...

    def fetch(
        self, predicate: Callable[[RecordT], bool] | None = None, limit: int | None = None
    ) -> list[RecordT]: ...

    def save(self) -> None:
        """Commit staged changes. Raises StorageError on failure."""
        ...

    def rollback(self) -> None: ...
