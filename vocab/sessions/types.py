"""
Session item types shared by the round queue and the study tracks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from vocab.schemas import VocabRecord, WordData


class TrackKind(str, Enum):
    """Where the session's words come from."""
    CUSTOM = "custom"  # freshly chosen words
    SMART = "smart"  # due records only


class CustomMode(str, Enum):
    """How a finished custom session schedules its words."""
    POST_SESSION = "post_session"  # scale previous interval by the rating
    DIFFICULTY_SCALED = "difficulty_scaled"  # SM-2 with in-session correctness
    DIRECT = "direct"  # fixed interval per difficulty


class RoundOutcome(str, Enum):
    """What happened after passing the current item."""
    NEXT_ITEM = "next_item"
    NEXT_ROUND = "next_round"
    COMPLETE = "complete"


@dataclass(frozen=True)
class StudyItem:
    """
    A single word shown during a session.

    `key` is the record identity of the word; `record_id` is only set when
    the item was built from an existing record (smart track).
    """
    key: str
    word: str
    meaning: str
    pronunciation: str = ""
    part_of_speech: str = ""
    example: str = ""
    source: str = ""
    tags: tuple[str, ...] = ()
    record_id: Optional[str] = None

    @classmethod
    def from_word_data(cls, data: WordData) -> "StudyItem":
        return cls(
            key=data.record_id,
            word=data.word,
            meaning=data.meaning,
            pronunciation=data.pronunciation,
            part_of_speech=data.part_of_speech,
            example=data.example,
            source=data.source,
            tags=tuple(data.tags),
        )

    @classmethod
    def from_record(cls, record: VocabRecord) -> "StudyItem":
        return cls(
            key=record.id,
            word=record.word,
            meaning=record.meaning,
            pronunciation=record.pronunciation,
            part_of_speech=record.part_of_speech,
            example=record.example,
            source=record.source,
            tags=tuple(record.tags),
            record_id=record.id,
        )

    def to_word_data(self) -> WordData:
        """Word data holding only the content this item carries (blank fields stay unset)."""
        payload = {"word": self.word, "meaning": self.meaning, "source": self.source}
        for name in ("pronunciation", "part_of_speech", "example"):
            value = getattr(self, name)
            if value:
                payload[name] = value
        if self.tags:
            payload["tags"] = list(self.tags)
        return WordData.model_validate(payload)


@dataclass
class CardProgress:
    """
    Session-local progress of one deck entry (never persisted).
    """
    index: int
    item: StudyItem
    attempts: int = 0
    correct_attempts: int = 0
    wrong_in_round: bool = False
    ever_wrong: bool = False
    settled: bool = False
    rounds_seen: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SessionSummary:
    """
    Result of finishing a session.
    """
    track: TrackKind
    scheduled: tuple[VocabRecord, ...]
    unrated: tuple[str, ...]
    missing: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return len(self.scheduled)
