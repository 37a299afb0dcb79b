"""Record stores with staged changes and explicit save."""

import os
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Generic, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from wellness.storage.base import StorageError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class InMemoryRecordStore(Generic[ModelT]):
    """
    Record store holding pydantic models keyed by their ``id``.

    Records are copied on the way in and out, so callers mutating a fetched
    record must stage the change with update() for it to be saved.
    """

    def __init__(self, records: Iterable[ModelT] = ()) -> None:
        self._committed: dict[UUID, ModelT] = {
            r.id: r.model_copy(deep=True)  # type: ignore[attr-defined]
            for r in records
        }
        self._staged: dict[UUID, ModelT | None] = {}

    def insert(self, record: ModelT) -> None:
        key = record.id  # type: ignore[attr-defined]
        if key in self._view():
            raise StorageError(f"Record {key} already exists")
        self._staged[key] = record.model_copy(deep=True)

    def update(self, record: ModelT) -> None:
        key = record.id  # type: ignore[attr-defined]
        if key not in self._view():
            raise StorageError(f"Record {key} does not exist")
        self._staged[key] = record.model_copy(deep=True)

    def delete(self, record: ModelT) -> None:
        key = record.id  # type: ignore[attr-defined]
        if key in self._view():
            self._staged[key] = None

    def fetch(
        self, predicate: Callable[[ModelT], bool] | None = None, limit: int | None = None
    ) -> list[ModelT]:
        matches: list[ModelT] = []
        if limit is not None and limit <= 0:
            return matches
        for record in self._view().values():
            if predicate is not None and not predicate(record):
                continue
            matches.append(record.model_copy(deep=True))
            if limit is not None and len(matches) >= limit:
                break
        return matches

    @property
    def has_changes(self) -> bool:
        return bool(self._staged)

    def save(self) -> None:
        if not self._staged:
            return
        merged = self._view()
        self._persist(list(merged.values()))
        self._committed = merged
        self._staged = {}

    def rollback(self) -> None:
        self._staged = {}

    def _view(self) -> dict[UUID, ModelT]:
        view = dict(self._committed)
        for key, record in list(self._staged.items()):
            if record is None:
                view.pop(key, None)
            else:
                view[key] = record
        return view

    def _persist(self, records: list[ModelT]) -> None:
        """Hook for durable subclasses. Raise StorageError to abort the save."""


class JsonFileRecordStore(InMemoryRecordStore[ModelT]):
    """Record store whose committed state is mirrored to a JSON array on disk."""

    def __init__(self, path: str | Path, model: type[ModelT]) -> None:
        self.path = Path(path)
        self._adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
        self.logger = logger.bind(component="json_record_store", path=str(self.path))
        super().__init__(self._load())

    def _load(self) -> list[ModelT]:
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            self.logger.warning("record_file_unreadable", error=str(e))
            return []

    def _persist(self, records: list[ModelT]) -> None:
        payload = self._adapter.dump_json(records)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        self.logger.debug("records_persisted", count=len(records))
