"""
Scheduling Policies

Three ways of answering "when next?" for a record, each selected explicitly
by the caller:

- QualityScored: classic SM-2 review with a 0-5 quality and lapse detection
- DifficultyScaled: in-session review rated 1-4; SM-2 drives ease and
  repetitions, the difficulty scale drives the interval
- PostSessionRecompute: end-of-session rating; only the previous interval and
  the final difficulty matter, in-session correctness is ignored

Policies are pure: they take a record and the current instant and return a
new record. Persistence is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from vocab.clock import add_days, start_of_day
from vocab.schemas import HistoryAction, HistoryEvent, RecordState, VocabRecord
from vocab.srs import intervals
from vocab.srs.constants import (
    BASE_INTERVAL_DAYS,
    DEFAULT_EASE_FACTOR,
    QUALITY_FOR_DIFFICULTY,
    QUALITY_FOR_INCORRECT,
    Difficulty,
)


class SchedulingPolicy:
    """Interface: compute the next state of a record for one review outcome."""

    name = "policy"

    def apply(self, record: VocabRecord, now: datetime) -> VocabRecord:
        raise NotImplementedError


def _implied_quality(difficulty: Difficulty, was_correct: bool) -> int:
    return QUALITY_FOR_DIFFICULTY[difficulty] if was_correct else QUALITY_FOR_INCORRECT


def _round_flags(record: VocabRecord, was_correct: bool) -> dict:
    return {
        "wrong_in_current_round": (not was_correct) or record.wrong_in_current_round,
        "needs_next_round": (not was_correct) or record.needs_next_round,
    }


@dataclass(frozen=True)
class QualityScored(SchedulingPolicy):
    """SM-2 review with a 0-5 recall quality."""
    quality: int
    was_correct: bool
    name = "quality_scored"

    def apply(self, record: VocabRecord, now: datetime) -> VocabRecord:
        today_start = start_of_day(now)
        events: list[HistoryEvent] = []

        # Lapse: reset momentum on a stale card before scoring this review
        repetitions = record.repetitions
        streak = record.streak
        ease_factor = record.ease_factor
        last_lapse_at = record.last_lapse_at
        if intervals.is_lapsed(record.last_review_date, now, record.interval):
            gap = now - record.last_review_date
            repetitions = 0
            streak = 0
            ease_factor = intervals.lapsed_ease_factor(ease_factor)
            last_lapse_at = now
            events.append(HistoryEvent(
                timestamp=now,
                action=HistoryAction.LAPSED,
                data={
                    "gap_days": intervals.round_half_up(gap.total_seconds() / 86400.0),
                    "prev_interval": record.interval,
                    "threshold_days": intervals.lapse_threshold(record.interval).days,
                },
            ))

        update = intervals.apply_sm2(
            interval=record.interval,
            ease_factor=ease_factor,
            repetitions=repetitions,
            streak=streak,
            times_reviewed=record.times_reviewed,
            times_correct=record.times_correct,
            state=record.state,
            quality=self.quality,
        )

        events.append(HistoryEvent(
            timestamp=now,
            action=HistoryAction.CORRECT if self.was_correct else HistoryAction.INCORRECT,
            data={"quality": intervals.clamp_quality(self.quality)},
        ))

        return record.evolve(
            tuple(events),
            interval=update.interval,
            ease_factor=update.ease_factor,
            repetitions=update.repetitions,
            streak=update.streak,
            times_reviewed=update.times_reviewed,
            times_correct=update.times_correct,
            state=update.state,
            next_review_date=add_days(today_start, update.interval),
            last_review_date=now,
            last_lapse_at=last_lapse_at,
            updated_at=now,
            **_round_flags(record, self.was_correct),
        )


@dataclass(frozen=True)
class DifficultyScaled(SchedulingPolicy):
    """In-session review rated on the 1-4 difficulty scale."""
    difficulty: int
    was_correct: bool
    name = "difficulty_scaled"

    def apply(self, record: VocabRecord, now: datetime) -> VocabRecord:
        today_start = start_of_day(now)
        d = intervals.clamp_difficulty(self.difficulty)
        quality = _implied_quality(d, self.was_correct)

        update = intervals.apply_sm2(
            interval=record.interval,
            ease_factor=record.ease_factor,
            repetitions=record.repetitions,
            streak=record.streak,
            times_reviewed=record.times_reviewed,
            times_correct=record.times_correct,
            state=record.state,
            quality=quality,
        )

        # Interval comes from the difficulty scale, not from SM-2
        interval = intervals.difficulty_scaled_interval(
            previous_interval=record.interval,
            repetitions_before=record.repetitions,
            ease_factor=update.ease_factor,
            difficulty=d,
            was_correct=self.was_correct,
        )

        event = HistoryEvent(
            timestamp=now,
            action=HistoryAction.CORRECT if self.was_correct else HistoryAction.INCORRECT,
            data={"difficulty": int(d), "quality": quality, "interval": interval},
        )

        return record.evolve(
            (event,),
            interval=interval,
            ease_factor=update.ease_factor,
            repetitions=update.repetitions,
            streak=update.streak,
            times_reviewed=update.times_reviewed,
            times_correct=update.times_correct,
            state=update.state,
            difficulty_rating=int(d),
            next_review_date=add_days(today_start, interval),
            last_review_date=now,
            updated_at=now,
            **_round_flags(record, self.was_correct),
        )


@dataclass(frozen=True)
class PostSessionRecompute(SchedulingPolicy):
    """End-of-session difficulty rating; ignores in-session correctness."""
    difficulty: int
    name = "post_session"

    def apply(self, record: VocabRecord, now: datetime) -> VocabRecord:
        today_start = start_of_day(now)
        d = intervals.clamp_difficulty(self.difficulty)
        interval = intervals.post_session_interval(record.interval, d)

        event = HistoryEvent(
            timestamp=now,
            action=HistoryAction.DIFFICULTY_SET,
            data={"difficulty": int(d), "interval": interval, "recomputed": True},
        )

        return record.evolve(
            (event,),
            difficulty_rating=int(d),
            interval=interval,
            next_review_date=add_days(today_start, interval),
            state=RecordState.REVIEWING if record.state == RecordState.NEW else record.state,
            updated_at=now,
        )


def predict_post_session_interval(record: VocabRecord, difficulty: int) -> int:
    """Interval a post-session rating would produce, for display before saving."""
    return intervals.post_session_interval(record.interval, intervals.clamp_difficulty(difficulty))


def predict_difficulty_scaled_interval(
    record: Optional[VocabRecord],
    difficulty: int,
    was_correct: bool = True,
) -> int:
    """Interval a DifficultyScaled review would produce; a missing record counts as new."""
    d = intervals.clamp_difficulty(difficulty)
    quality = _implied_quality(d, was_correct)
    if record is None:
        return intervals.difficulty_scaled_interval(0, 0, DEFAULT_EASE_FACTOR, d, was_correct)
    ease_factor = intervals.update_ease_factor(record.ease_factor, quality)
    return intervals.difficulty_scaled_interval(
        record.interval, record.repetitions, ease_factor, d, was_correct
    )


def predict_difficulty_interval(record: Optional[VocabRecord], difficulty: int) -> int:
    """Interval of a direct difficulty assignment (see scheduler.set_difficulty)."""
    return BASE_INTERVAL_DAYS[intervals.clamp_difficulty(difficulty)]


__all__ = [
    "SchedulingPolicy",
    "QualityScored",
    "DifficultyScaled",
    "PostSessionRecompute",
    "predict_post_session_interval",
    "predict_difficulty_interval",
    "predict_difficulty_scaled_interval",
]
