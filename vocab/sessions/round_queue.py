"""
Round Queue - in-session sequencing of study items.

Rules:
- Round 1 shows the whole deck in shuffled order
- A wrong answer marks the item wrong for the rest of the round, even if a
  retry is then answered correctly
- Passing an item that is marked wrong queues it for the next round (once)
- When the queue runs out, the next round is the reshuffled review list and
  wrong marks are cleared; with an empty review list the session is complete
- An item is settled only after a pass with no wrong mark in that round

State lives in an arena of CardProgress entries keyed by deck index, so the
same word can be tracked across rounds without touching persisted records.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from vocab.errors import SessionStateError
from vocab.sessions.types import CardProgress, RoundOutcome, StudyItem


def normalize_answer(text: Optional[str]) -> str:
    return (text or "").strip().lower()


class RoundQueue:
    """Round-based queue over a fixed deck of study items."""

    def __init__(
        self,
        deck: Sequence[StudyItem],
        rng: Optional[random.Random] = None,
        shuffle: bool = True,
    ):
        if not deck:
            raise SessionStateError("Cannot start a session with an empty deck")

        self._rng = rng if rng is not None else random.Random()
        self._shuffle = shuffle
        self._arena = [CardProgress(index=i, item=item) for i, item in enumerate(deck)]

        self._queue: list[int] = self._shuffled(range(len(self._arena)))
        self._position = 0
        self._to_review: list[int] = []
        self._touched: list[int] = []
        self._round = 1
        self._complete = False
        self._last_answer: Optional[bool] = None

        self.correct_count = 0
        self.incorrect_count = 0

    def _shuffled(self, indices) -> list[int]:
        order = list(indices)
        if self._shuffle:
            self._rng.shuffle(order)
        return order

    def _require_active(self) -> CardProgress:
        if self._complete:
            raise SessionStateError("Session is already complete")
        return self._arena[self._queue[self._position]]

    # ---- Read-only views ----

    @property
    def round(self) -> int:
        return self._round

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def last_answer_correct(self) -> Optional[bool]:
        return self._last_answer

    @property
    def queue(self) -> list[StudyItem]:
        """Items of the current round, in presentation order."""
        return [self._arena[i].item for i in self._queue]

    @property
    def remaining(self) -> int:
        if self._complete:
            return 0
        return len(self._queue) - self._position

    @property
    def to_review(self) -> list[StudyItem]:
        """Items already queued for the next round."""
        return [self._arena[i].item for i in self._to_review]

    @property
    def deck_size(self) -> int:
        return len(self._arena)

    def current(self) -> Optional[StudyItem]:
        if self._complete:
            return None
        return self._arena[self._queue[self._position]].item

    def progress(self, index: int) -> CardProgress:
        return self._arena[index]

    def progress_for(self, item: StudyItem) -> Optional[CardProgress]:
        for entry in self._arena:
            if entry.item == item:
                return entry
        return None

    def is_settled(self, index: int) -> bool:
        return self._arena[index].settled

    @property
    def settled_count(self) -> int:
        return sum(1 for entry in self._arena if entry.settled)

    def touched_items(self) -> list[StudyItem]:
        """Distinct items passed at least once, in first-pass order."""
        return [self._arena[i].item for i in self._touched]

    def touched_progress(self) -> list[CardProgress]:
        return [self._arena[i] for i in self._touched]

    # ---- Commands ----

    def answer(self, correct: bool) -> bool:
        """Record an attempt on the current item."""
        entry = self._require_active()
        entry.attempts += 1
        if self._round not in entry.rounds_seen:
            entry.rounds_seen.append(self._round)

        if correct:
            entry.correct_attempts += 1
            self.correct_count += 1
        else:
            entry.wrong_in_round = True
            entry.ever_wrong = True
            self.incorrect_count += 1

        self._last_answer = bool(correct)
        return self._last_answer

    def check_answer(self, typed: str) -> bool:
        """Compare typed text with the current word (trimmed, case-insensitive)."""
        entry = self._require_active()
        return self.answer(normalize_answer(typed) == normalize_answer(entry.item.word))

    def retry(self) -> None:
        """Show the same item again; the wrong mark (if any) stays."""
        self._require_active()
        self._last_answer = None

    def pass_current(self) -> RoundOutcome:
        """
        Move past the current item.

        Returns:
            NEXT_ITEM, NEXT_ROUND (review list became the new queue) or COMPLETE
        """
        entry = self._require_active()
        if entry.index not in self._touched:
            self._touched.append(entry.index)

        if entry.wrong_in_round:
            if entry.index not in self._to_review:
                self._to_review.append(entry.index)
        else:
            entry.settled = True

        self._last_answer = None
        self._position += 1
        if self._position < len(self._queue):
            return RoundOutcome.NEXT_ITEM

        if self._to_review:
            self._queue = self._shuffled(self._to_review)
            self._to_review = []
            self._position = 0
            self._round += 1
            for progress in self._arena:
                progress.wrong_in_round = False
            return RoundOutcome.NEXT_ROUND

        self._complete = True
        return RoundOutcome.COMPLETE
