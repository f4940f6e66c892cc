"""
Record Store - keyed map of vocabulary records plus persistence.

Pure CRUD, no scheduling logic. The in-memory map is authoritative: every
mutation updates it, rewrites the snapshot, then notifies subscribers, all
before returning.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from vocab.clock import Clock, SystemClock
from vocab.errors import SnapshotError, StaleRecordError
from vocab.schemas import (
    CONTENT_FIELDS,
    HistoryAction,
    HistoryEvent,
    VocabRecord,
    WordData,
    make_record_id,
)
from vocab.store.backends import MemorySnapshot, SnapshotBackend

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class RecordStore:
    """Vocabulary records keyed by id, persisted through a snapshot backend."""

    def __init__(self, backend: Optional[SnapshotBackend] = None, clock: Optional[Clock] = None):
        self.backend = backend if backend is not None else MemorySnapshot()
        self.clock = clock if clock is not None else SystemClock()
        self._records: dict[str, VocabRecord] = {}
        self._listeners: list[Listener] = []
        self._load()

    # ---- Loading / Persisting ----

    def _load(self) -> None:
        try:
            raw = self.backend.load()
        except SnapshotError:
            logger.exception("Failed to load vocabulary snapshot; starting empty")
            return

        for record_id, payload in raw.items():
            try:
                self._records[record_id] = VocabRecord.model_validate(payload)
            except ValidationError as exc:
                logger.warning("Skipping malformed record %r in snapshot: %s", record_id, exc)

        logger.info("Loaded %d records from %s", len(self._records), self.backend.describe())

    def _persist(self) -> None:
        data = {rid: record.model_dump(mode="json") for rid, record in self._records.items()}
        try:
            self.backend.save(data)
        except SnapshotError:
            logger.exception("Failed to persist vocabulary snapshot")

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _commit(self) -> None:
        self._persist()
        self._notify()

    # ---- Subscriptions ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener (called with no arguments after each mutation).

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- Reads ----

    def get(self, record_id: str) -> Optional[VocabRecord]:
        return self._records.get(record_id)

    def get_all(self) -> list[VocabRecord]:
        return list(self._records.values())

    def has(self, record_id: str) -> bool:
        return record_id in self._records

    def get_by_word(self, source: Optional[str], word: str, meaning: str) -> Optional[VocabRecord]:
        """Look a record up by its (source, word, meaning) identity."""
        return self._records.get(make_record_id(source, word, meaning))

    def __len__(self) -> int:
        return len(self._records)

    # ---- Writes ----

    def upsert(self, word_data: Union[WordData, Mapping]) -> VocabRecord:
        """
        Create a record for the word, or merge new content into the existing one.

        A new record starts in state `new`, due immediately, with a `created`
        history entry. An existing record keeps its scheduling state; content
        fields the caller supplied are overwritten, the rest are kept, and a
        `reviewed` entry is appended.
        """
        if not isinstance(word_data, WordData):
            word_data = WordData.model_validate(dict(word_data))

        now = self.clock.now()
        record_id = word_data.record_id
        existing = self._records.get(record_id)

        if existing is None:
            record = VocabRecord(
                id=record_id,
                **word_data.model_dump(),
                next_review_date=now,
                history=(HistoryEvent(timestamp=now, action=HistoryAction.CREATED),),
                created_at=now,
                updated_at=now,
            )
        else:
            # Only fields the caller supplied; omitted ones keep their stored value
            content = word_data.model_dump(include=set(CONTENT_FIELDS), exclude_unset=True)
            record = existing.evolve(
                (HistoryEvent(timestamp=now, action=HistoryAction.REVIEWED),),
                updated_at=now,
                version=existing.version + 1,
                **content,
            )

        self._records[record_id] = record
        self._commit()
        return record

    def save_record(self, record: VocabRecord) -> VocabRecord:
        """
        Write back a record computed from a previously read copy.

        Raises:
            StaleRecordError: if the stored version moved on since the read
        """
        current = self._records.get(record.id)
        found = current.version if current is not None else None
        if found != record.version:
            raise StaleRecordError(record.id, record.version, found)

        stored = record.model_copy(update={"version": record.version + 1})
        self._records[record.id] = stored
        self._commit()
        return stored

    def save_records(self, records: Iterable[VocabRecord]) -> list[VocabRecord]:
        """Batch form of save_record: all versions are checked before anything is written."""
        records = list(records)
        for record in records:
            current = self._records.get(record.id)
            found = current.version if current is not None else None
            if found != record.version:
                raise StaleRecordError(record.id, record.version, found)

        stored = [r.model_copy(update={"version": r.version + 1}) for r in records]
        for record in stored:
            self._records[record.id] = record
        if stored:
            self._commit()
        return stored

    def add_many(self, records: Iterable[VocabRecord]) -> int:
        """
        Insert records whose id is not yet present, in a single write.

        Returns:
            Number of records added (existing ids are skipped)
        """
        added = 0
        for record in records:
            if record.id in self._records:
                continue
            self._records[record.id] = record
            added += 1
        if added:
            self._commit()
        return added

    def delete(self, record_id: str) -> bool:
        if record_id not in self._records:
            return False
        del self._records[record_id]
        self._commit()
        return True

    def clear(self) -> None:
        self._records.clear()
        self._commit()
