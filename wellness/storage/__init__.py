"""
Durable storage adapters.

The services only depend on the KeyValueStore and RecordStore protocols;
the in-memory and JSON-file implementations are interchangeable.
"""

from .base import KeyValueStore, RecordStore, StorageError
from .key_value import InMemoryKeyValueStore, JsonFileKeyValueStore
from .records import InMemoryRecordStore, JsonFileRecordStore

__all__ = [
    "KeyValueStore",
    "RecordStore",
    "StorageError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
]
