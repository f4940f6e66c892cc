"""
Study tracks: custom study and smart review.

Custom study works on freshly chosen words; finishing it adds every touched
word to the schedule. Smart review works on due records only; finishing it
recomputes each schedule from the end-of-session rating.

Unrated words are not dropped: they are scheduled for today so they show up
again in the next smart review.
"""

from __future__ import annotations

import logging
import random
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Union

from vocab.errors import SessionStateError
from vocab.schemas import RecordState, VocabRecord, WordData
from vocab.sessions.round_queue import RoundQueue
from vocab.sessions.types import CardProgress, CustomMode, SessionSummary, StudyItem, TrackKind
from vocab.srs.intervals import clamp_difficulty
from vocab.srs.policies import (
    predict_difficulty_interval,
    predict_difficulty_scaled_interval,
    predict_post_session_interval,
)

if TYPE_CHECKING:
    from vocab.service import VocabularyService

logger = logging.getLogger(__name__)

UNRATED_CUSTOM = "unrated_custom"
UNRATED_SMART = "unrated_smart"

NO_WORDS_MESSAGE = "No words selected for study."
NOTHING_SCHEDULED_MESSAGE = "No words in the review schedule yet. Study new words with custom study first."
ALL_DONE_MESSAGE = "All caught up! Every due word has been reviewed today. Come back later."


class StudySession:
    """
    One study session: a round queue plus the rules for scheduling its words.
    """

    def __init__(
        self,
        track: TrackKind,
        items: list[StudyItem],
        custom_mode: CustomMode = CustomMode.POST_SESSION,
        rng: Optional[random.Random] = None,
    ):
        self.track = track
        self.custom_mode = custom_mode
        self.queue = RoundQueue(items, rng=rng)
        self.finished = False

    def rating_items(self) -> list[StudyItem]:
        """Words to rate once the queue is complete (first-pass order)."""
        return self.queue.touched_items()

    def preview_interval(self, service: "VocabularyService", item: StudyItem, difficulty: int) -> int:
        """Days until the next review if `item` were rated `difficulty`."""
        record = service.get(item.record_id or item.key)
        if self.track == TrackKind.CUSTOM and self.custom_mode == CustomMode.DIFFICULTY_SCALED:
            progress = self.queue.progress_for(item)
            was_correct = progress is None or not progress.ever_wrong
            return predict_difficulty_scaled_interval(record, difficulty, was_correct)
        if record is None or self.custom_mode == CustomMode.DIRECT and self.track == TrackKind.CUSTOM:
            return predict_difficulty_interval(record, difficulty)
        return predict_post_session_interval(record, difficulty)

    def finish(
        self,
        service: "VocabularyService",
        ratings: Mapping[str, int],
        manual_dates: Optional[Mapping[str, Union[date, datetime]]] = None,
    ) -> SessionSummary:
        """
        Schedule every touched word.

        Args:
            service: Vocabulary service to write through
            ratings: Difficulty (1-4) by item key; missing keys are unrated
            manual_dates: Smart review only; explicit next review day by item key

        Raises:
            SessionStateError: if the queue is not complete or finish was already called
        """
        if self.finished:
            raise SessionStateError("Session was already finished")
        if not self.queue.is_complete:
            raise SessionStateError("Cannot finish a session before its last round is complete")

        manual_dates = manual_dates or {}
        scheduled: list[VocabRecord] = []
        unrated: list[str] = []
        missing: list[str] = []

        for progress in self.queue.touched_progress():
            item = progress.item
            rating = ratings.get(item.key)
            if self.track == TrackKind.CUSTOM:
                record = self._finish_custom(service, progress, rating)
            else:
                record = self._finish_smart(service, item, rating, manual_dates.get(item.key))

            if record is None:
                missing.append(item.key)
                continue
            if rating is None and not (self.track == TrackKind.SMART and item.key in manual_dates):
                unrated.append(record.id)
            scheduled.append(record)

        self.finished = True
        logger.info(
            "Finished %s session: %d scheduled, %d unrated, %d missing",
            self.track.value, len(scheduled), len(unrated), len(missing),
        )
        return SessionSummary(
            track=self.track,
            scheduled=tuple(scheduled),
            unrated=tuple(unrated),
            missing=tuple(missing),
        )

    def _finish_custom(
        self,
        service: "VocabularyService",
        progress: CardProgress,
        rating: Optional[int],
    ) -> Optional[VocabRecord]:
        record = service.upsert(progress.item.to_word_data())
        if rating is None:
            return service.schedule_for_today(record.id, UNRATED_CUSTOM)

        difficulty = clamp_difficulty(rating)
        if self.custom_mode == CustomMode.DIFFICULTY_SCALED:
            return service.record_review_with_difficulty(
                record.id, difficulty, was_correct=not progress.ever_wrong
            )
        if self.custom_mode == CustomMode.DIRECT:
            return service.set_difficulty(record.id, difficulty)
        return service.apply_difficulty_and_recompute_schedule(record.id, difficulty)

    def _finish_smart(
        self,
        service: "VocabularyService",
        item: StudyItem,
        rating: Optional[int],
        manual_date: Optional[Union[date, datetime]],
    ) -> Optional[VocabRecord]:
        record_id = item.record_id or item.key
        if not service.has(record_id):
            logger.warning("Record %r disappeared during the session", record_id)
            return None

        record = None
        if rating is not None:
            record = service.apply_difficulty_and_recompute_schedule(record_id, rating)
        elif manual_date is None:
            record = service.schedule_for_today(record_id, UNRATED_SMART)

        # An explicit date wins over the computed one
        if manual_date is not None:
            if not isinstance(manual_date, datetime):
                manual_date = service.clock.midnight_of(manual_date)
            record = service.reschedule(record_id, manual_date)
        return record


def _unique_items(items: Iterable[StudyItem]) -> list[StudyItem]:
    seen: set[str] = set()
    unique = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        unique.append(item)
    return unique


def start_custom_session(
    words: Iterable[Union[WordData, Mapping]],
    mode: Union[CustomMode, str] = CustomMode.POST_SESSION,
    rng: Optional[random.Random] = None,
) -> tuple[Optional[StudySession], str]:
    """
    Build a custom study session from chosen words.

    Duplicate words (same record identity) are studied once.

    Returns:
        (session, message); session is None when there is nothing to study
    """
    items = _unique_items(
        StudyItem.from_word_data(w if isinstance(w, WordData) else WordData.model_validate(dict(w)))
        for w in words
    )
    if not items:
        return None, NO_WORDS_MESSAGE

    session = StudySession(TrackKind.CUSTOM, items, custom_mode=CustomMode(mode), rng=rng)
    return session, f"Custom study: {len(items)} words."


def start_smart_session(
    service: "VocabularyService",
    limit: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> tuple[Optional[StudySession], str]:
    """
    Build a smart review session from the records due now.

    Returns:
        (session, message); session is None when nothing is due
    """
    due = service.get_due_cards()
    if not due:
        if all(r.state == RecordState.NEW for r in service.get_all()):
            return None, NOTHING_SCHEDULED_MESSAGE
        return None, ALL_DONE_MESSAGE

    if limit is not None and limit > 0:
        due = due[:limit]

    items = [StudyItem.from_record(r) for r in due]
    session = StudySession(TrackKind.SMART, items, rng=rng)
    return session, f"Smart review: {len(items)} due words."
