"""
Snapshot Backends - Persisted Snapshot I/O

A snapshot is the whole record map serialized as a flat object keyed by
record id. It is read once at startup and rewritten whole on every mutation.

Backends:
- JsonFileSnapshot: single JSON file (default)
- SqlSnapshot: one row per record in a SQL table, via SQLAlchemy
- MemorySnapshot: in-process dict (tests, throwaway sessions)

Backends raise SnapshotError for any I/O or serialization failure; the
record store decides what to do about it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from vocab import config
from vocab.errors import SnapshotError
from vocab.store.models import Base, VocabRecordRow

logger = logging.getLogger(__name__)

SnapshotData = dict[str, dict]


class SnapshotBackend:
    """Interface for loading and saving the whole record map."""

    def load(self) -> SnapshotData:
        raise NotImplementedError

    def save(self, data: Mapping[str, dict]) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class MemorySnapshot(SnapshotBackend):
    """Keeps the last saved snapshot in memory (deep-copied through JSON)."""

    def __init__(self, initial: Optional[Mapping[str, dict]] = None):
        self._raw = json.dumps(dict(initial or {}))
        self.save_count = 0

    def load(self) -> SnapshotData:
        return json.loads(self._raw)

    def save(self, data: Mapping[str, dict]) -> None:
        try:
            self._raw = json.dumps(dict(data))
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Snapshot is not JSON-serializable: {exc}") from exc
        self.save_count += 1


class JsonFileSnapshot(SnapshotBackend):
    """
    Snapshot stored as one JSON object in a file.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def describe(self) -> str:
        return f"JsonFileSnapshot({self.path})"

    def load(self) -> SnapshotData:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise SnapshotError(f"Failed to read snapshot {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot {self.path} is not an object map")
        return data

    def save(self, data: Mapping[str, dict]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(dict(data), fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SnapshotError(f"Failed to write snapshot {self.path}: {exc}") from exc


class SqlSnapshot(SnapshotBackend):
    """
    Snapshot stored in the `vocab_records` table.

    The whole table is rewritten inside one transaction on every save.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self._engine = create_engine(url, pool_pre_ping=True, echo=echo)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self.init_db()

    def describe(self) -> str:
        return f"SqlSnapshot({self._engine.url.render_as_string(hide_password=True)})"

    def init_db(self) -> None:
        """
        Create the table if it doesn't exist.

        Safe to call multiple times.
        """
        try:
            if "vocab_records" not in inspect(self._engine).get_table_names():
                Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise SnapshotError(f"Failed to initialize database: {exc}") from exc

    def reset_db(self) -> None:
        """
        DANGEROUS: Drop and recreate the table.

        All records and their history will be lost!
        """
        Base.metadata.drop_all(self._engine)
        self.init_db()

    def load(self) -> SnapshotData:
        session = self._session_factory()
        try:
            rows = session.query(VocabRecordRow).all()
            return {row.id: json.loads(row.payload) for row in rows}
        except (SQLAlchemyError, ValueError) as exc:
            raise SnapshotError(f"Failed to load snapshot from database: {exc}") from exc
        finally:
            session.close()

    def save(self, data: Mapping[str, dict]) -> None:
        session = self._session_factory()
        try:
            session.query(VocabRecordRow).delete()
            for record_id, payload in data.items():
                session.add(VocabRecordRow(
                    id=record_id,
                    word=payload["word"],
                    state=payload["state"],
                    next_review_date=datetime.fromisoformat(payload["next_review_date"]),
                    version=payload.get("version", 0),
                    payload=json.dumps(payload, ensure_ascii=False),
                ))
            session.commit()
        except (SQLAlchemyError, KeyError, TypeError, ValueError) as exc:
            session.rollback()
            raise SnapshotError(f"Failed to save snapshot to database: {exc}") from exc
        finally:
            session.close()


def build_backend() -> SnapshotBackend:
    """Create the backend selected by VOCAB_STORE."""
    kind = config.get_store_kind()
    if kind == "sql":
        backend: SnapshotBackend = SqlSnapshot(config.get_database_url())
    else:
        backend = JsonFileSnapshot(config.get_snapshot_path())
    logger.info("Using snapshot backend %s", backend.describe())
    return backend
