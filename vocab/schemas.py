"""
Pydantic models for vocabulary records.

A VocabRecord is the unit of scheduling: word content plus the learning
state the scheduler maintains. Its history is an append-only tuple of frozen
events; every change produces a new record object.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---- Enums ----

class RecordState(str, Enum):
    """Lifecycle state of a vocabulary record."""
    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"


class HistoryAction(str, Enum):
    """Kinds of entries in a record's audit trail."""
    CREATED = "created"
    REVIEWED = "reviewed"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    DIFFICULTY_SET = "difficulty_set"
    RESCHEDULED = "rescheduled"
    LAPSED = "lapsed"


# ---- Identity ----

_WHITESPACE = re.compile(r"\s+")


def normalize_key_text(value: Optional[str]) -> str:
    """Trim, lower-case and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", str(value or "").strip()).lower()


def make_record_id(source: Optional[str], word: str, meaning: str) -> str:
    """
    Deterministic record id for a (source, word, meaning) triple.

    Word and meaning are compared case- and whitespace-insensitively, so
    re-importing the same pair from the same source resolves to one record.
    """
    return f"{str(source or '').strip()}||{normalize_key_text(word)}||{normalize_key_text(meaning)}"


# ---- History ----

class HistoryEvent(BaseModel):
    """One immutable entry in a record's history log."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    action: HistoryAction
    data: dict[str, Any] = Field(default_factory=dict)


# ---- Word Data (import payload) ----

class WordData(BaseModel):
    """Content of a word as supplied by deck storage or the UI."""
    model_config = ConfigDict(str_strip_whitespace=True)

    word: str = Field(..., min_length=1)
    meaning: str = Field(..., min_length=1)
    pronunciation: str = ""
    part_of_speech: str = ""
    example: str = ""
    source: str = ""
    tags: list[str] = Field(default_factory=list)

    @property
    def record_id(self) -> str:
        return make_record_id(self.source, self.word, self.meaning)


CONTENT_FIELDS = ("word", "meaning", "pronunciation", "part_of_speech", "example", "source", "tags")


# ---- Main Record ----

class VocabRecord(BaseModel):
    """
    A single vocabulary record with its scheduling state.

    `next_review_date` is always a local-midnight instant. `version` is
    bumped by the store on every write and guards against stale saves.
    """
    # Identity and content
    id: str
    word: str
    meaning: str
    pronunciation: str = ""
    part_of_speech: str = ""
    example: str = ""
    source: str = ""
    tags: list[str] = Field(default_factory=list)

    # Learning state
    state: RecordState = RecordState.NEW

    # Scheduling
    next_review_date: datetime
    interval: int = Field(default=0, ge=0)  # days
    ease_factor: float = Field(default=2.5, ge=1.3)
    repetitions: int = Field(default=0, ge=0)  # consecutive qualifying reviews
    streak: int = Field(default=0, ge=0)  # consecutive correct answers
    times_reviewed: int = 0
    times_correct: int = 0
    last_review_date: Optional[datetime] = None
    last_lapse_at: Optional[datetime] = None

    # Sticky round flags, cleared only by an explicit round reset
    wrong_in_current_round: bool = False
    needs_next_round: bool = False

    difficulty_rating: Optional[int] = Field(default=None, ge=1, le=4)

    history: tuple[HistoryEvent, ...] = ()

    created_at: datetime
    updated_at: datetime
    version: int = 0

    def evolve(self, events: tuple[HistoryEvent, ...] = (), **changes: Any) -> "VocabRecord":
        """Return a copy with field changes applied and events appended to history."""
        if events:
            changes["history"] = self.history + tuple(events)
        return self.model_copy(update=changes)

    def last_event(self) -> Optional[HistoryEvent]:
        return self.history[-1] if self.history else None
