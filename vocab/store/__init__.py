"""
Record store and snapshot persistence.
"""

from vocab.store.backends import (
    SnapshotBackend,
    JsonFileSnapshot,
    SqlSnapshot,
    MemorySnapshot,
    build_backend,
)
from vocab.store.record_store import RecordStore


__all__ = [
    "RecordStore",
    "SnapshotBackend",
    "JsonFileSnapshot",
    "SqlSnapshot",
    "MemorySnapshot",
    "build_backend",
]
