"""Key-value preference stores."""

import base64
import json
import os
import tempfile
from pathlib import Path

import structlog

from wellness.storage.base import StorageError

logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore:
    """Process-local store. Durable only for the lifetime of the object."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileKeyValueStore:
    """
    Key-value store persisted as a single JSON document.

    Values are stored base64-encoded. Every write rewrites the whole file through
    a temporary file and os.replace, so readers never see a half-written document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.logger = logger.bind(component="json_kv_store", path=str(self.path))
        self._data: dict[str, bytes] = self._load()

    def _load(self) -> dict[str, bytes]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return {key: base64.b64decode(value) for key, value in raw.items()}
        except (OSError, ValueError, TypeError, AttributeError) as e:
            # An unreadable preferences file behaves like an empty one
            self.logger.warning("preferences_file_unreadable", error=str(e))
            return {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        updated = {**self._data, key: bytes(value)}
        document = {k: base64.b64encode(v).decode("ascii") for k, v in updated.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, sort_keys=True)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        self._data = updated
        self.logger.debug("preference_written", key=key)
