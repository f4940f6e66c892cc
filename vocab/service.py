"""
Vocabulary Service - command/query façade over the store and the scheduler.

Every command follows the same shape: load the record, run one pure
scheduling step, save the result through the store (persist, then notify).
Commands addressed to an unknown id are no-ops that return None.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional, Union

from vocab import config
from vocab.calendar import aggregator
from vocab.clock import Clock, SystemClock
from vocab.importing import convert_legacy_entries
from vocab.schemas import RecordState, VocabRecord, WordData
from vocab.srs import scheduler, selection
from vocab.srs.policies import DifficultyScaled, PostSessionRecompute, QualityScored
from vocab.store.backends import SnapshotBackend, build_backend
from vocab.store.record_store import RecordStore

logger = logging.getLogger(__name__)


class VocabularyService:
    """Inbound commands and outbound queries of the vocabulary core."""

    def __init__(self, store: RecordStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock if clock is not None else store.clock

    def _update(
        self,
        record_id: str,
        step: Callable[[VocabRecord], VocabRecord],
    ) -> Optional[VocabRecord]:
        record = self.store.get(record_id)
        if record is None:
            logger.debug("Ignoring command for unknown record %r", record_id)
            return None
        return self.store.save_record(step(record))

    # ---- Commands ----

    def upsert(self, word_data: Union[WordData, Mapping]) -> VocabRecord:
        return self.store.upsert(word_data)

    def record_review(self, record_id: str, quality: int, was_correct: bool) -> Optional[VocabRecord]:
        """SM-2 review with a 0-5 quality (lapse rule applied first)."""
        policy = QualityScored(quality=quality, was_correct=was_correct)
        return self._update(record_id, lambda r: scheduler.process_review(r, policy, self.clock))

    def record_review_with_difficulty(
        self, record_id: str, difficulty: int, was_correct: bool
    ) -> Optional[VocabRecord]:
        """In-session review rated 1 (easy) to 4 (hard)."""
        policy = DifficultyScaled(difficulty=difficulty, was_correct=was_correct)
        return self._update(record_id, lambda r: scheduler.process_review(r, policy, self.clock))

    def apply_difficulty_and_recompute_schedule(
        self, record_id: str, difficulty: int
    ) -> Optional[VocabRecord]:
        """End-of-session rating: scale the previous interval by the difficulty."""
        policy = PostSessionRecompute(difficulty=difficulty)
        return self._update(record_id, lambda r: scheduler.process_review(r, policy, self.clock))

    def set_difficulty(self, record_id: str, difficulty: int) -> Optional[VocabRecord]:
        return self._update(record_id, lambda r: scheduler.set_difficulty(r, difficulty, self.clock))

    def reschedule(self, record_id: str, when: Union[datetime, date]) -> Optional[VocabRecord]:
        """Move the next review to the local day of `when` (a date means that day)."""
        if not isinstance(when, datetime):
            when = self.clock.noon_of(when)
        return self._update(record_id, lambda r: scheduler.reschedule(r, when, self.clock))

    def schedule_for_today(self, record_id: str, reason: Optional[str] = None) -> Optional[VocabRecord]:
        return self._update(record_id, lambda r: scheduler.schedule_for_today(r, self.clock, reason))

    def remove_from_schedule(self, record_id: str) -> Optional[VocabRecord]:
        return self._update(record_id, lambda r: scheduler.remove_from_schedule(r, self.clock))

    def delete(self, record_id: str) -> bool:
        return self.store.delete(record_id)

    def clear(self) -> None:
        self.store.clear()

    def reset_round_tracking(self, ids: Optional[Iterable[str]] = None) -> int:
        """
        Clear the sticky wrong-in-round flags.

        Args:
            ids: Records to reset (default: all); unknown ids are skipped

        Returns:
            Number of records reset
        """
        targets = self.store.get_all() if ids is None else [
            r for r in (self.store.get(rid) for rid in ids) if r is not None
        ]
        updated = [scheduler.reset_round_flags(r, self.clock) for r in targets]
        return len(self.store.save_records(updated))

    def import_legacy(self, old_store: Mapping[str, Mapping]) -> int:
        """Migrate entries of the legacy SRS snapshot; existing ids are kept as they are."""
        records = convert_legacy_entries(old_store, self.clock)
        added = self.store.add_many(records)
        logger.info("Imported %d of %d legacy entries", added, len(old_store))
        return added

    # ---- Queries ----

    def get(self, record_id: str) -> Optional[VocabRecord]:
        return self.store.get(record_id)

    def get_all(self) -> list[VocabRecord]:
        return self.store.get_all()

    def has(self, record_id: str) -> bool:
        return self.store.has(record_id)

    def get_by_word(self, source: Optional[str], word: str, meaning: str) -> Optional[VocabRecord]:
        return self.store.get_by_word(source, word, meaning)

    def get_due_cards(self) -> list[VocabRecord]:
        return selection.due_records(self.store.get_all(), self.clock)

    def get_overdue_cards(self) -> list[VocabRecord]:
        return selection.overdue_records(self.store.get_all(), self.clock)

    def get_new_cards(self) -> list[VocabRecord]:
        return selection.records_in_state(self.store.get_all(), RecordState.NEW)

    def get_by_state(self, state: Union[RecordState, str]) -> list[VocabRecord]:
        return selection.records_in_state(self.store.get_all(), RecordState(state))

    def get_words_needing_next_round(self) -> list[VocabRecord]:
        return [r for r in self.store.get_all() if r.needs_next_round]

    def get_calendar_data(self, days: int = 30) -> dict[date, list[VocabRecord]]:
        return aggregator.get_calendar_data(self.store.get_all(), self.clock, days)

    def get_stats(self) -> selection.ScheduleStats:
        return selection.compute_stats(self.store.get_all(), self.clock)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)


def build_service(
    backend: Optional[SnapshotBackend] = None,
    clock: Optional[Clock] = None,
) -> VocabularyService:
    """
    Wire a service from configuration.

    Args:
        backend: Snapshot backend (default: from VOCAB_STORE)
        clock: Clock (default: SystemClock in VOCAB_TIMEZONE)
    """
    if backend is None:
        backend = build_backend()
    if clock is None:
        clock = SystemClock(config.get_timezone())
    return VocabularyService(RecordStore(backend, clock), clock)
