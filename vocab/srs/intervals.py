"""
Interval and Ease Arithmetic

Pure SM-2 style computations shared by all scheduling policies.

Key principles:
- Ease factor is recomputed on every quality-scored review, win or lose
- Ease factor never drops below MIN_EASE_FACTOR
- A long gap since the last review is a lapse: momentum is reset first
- State is derived from repetitions/streak, never assigned freely
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from vocab.schemas import RecordState
from vocab.srs.constants import (
    BASE_INTERVAL_DAYS,
    DIFFICULTY_GROWTH,
    FIRST_INTERVAL_BY_QUALITY,
    LAPSE_EASE_PENALTY,
    LAPSE_INTERVAL_FACTOR,
    LAPSE_MIN_GAP,
    MASTERED_MIN_REPETITIONS,
    MASTERED_MIN_STREAK,
    MIN_EASE_FACTOR,
    PASSING_QUALITY,
    POST_SESSION_MULTIPLIER,
    QUALITY_MAX,
    QUALITY_MIN,
    SECOND_INTERVAL_DAYS,
    Difficulty,
)


@dataclass(frozen=True)
class Sm2Update:
    """Counters and state after one quality-scored review."""
    interval: int
    ease_factor: float
    repetitions: int
    streak: int
    times_reviewed: int
    times_correct: int
    state: RecordState


def round_half_up(value: float) -> int:
    """Round to the nearest whole day, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def clamp_quality(quality: float) -> int:
    return max(QUALITY_MIN, min(QUALITY_MAX, round_half_up(quality)))


def clamp_difficulty(difficulty: float) -> Difficulty:
    """Round and clamp legacy or out-of-range ratings to 1..4."""
    return Difficulty(max(1, min(4, round_half_up(difficulty))))


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """
    SM-2 ease update.

    Formula:
        EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))

    q = 5 raises EF by 0.1, q = 4 keeps it, q = 3 lowers it by 0.14.
    """
    miss = 5 - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def lapse_threshold(interval: int) -> timedelta:
    """Gap after which the previous learning progress counts as stale."""
    return max(LAPSE_MIN_GAP, timedelta(days=LAPSE_INTERVAL_FACTOR * max(1, interval or 1)))


def is_lapsed(last_review_date: Optional[datetime], now: datetime, interval: int) -> bool:
    """
    A review is a lapse when the gap since the last one reaches
    max(30 days, 3 * max(1, interval) days). Never-reviewed records cannot lapse.
    """
    if last_review_date is None:
        return False
    return now - last_review_date >= lapse_threshold(interval)


def lapsed_ease_factor(ease_factor: float) -> float:
    return max(MIN_EASE_FACTOR, ease_factor * LAPSE_EASE_PENALTY)


def next_state(previous: RecordState, repetitions: int, streak: int) -> RecordState:
    """
    State transition rule.

    mastered  if repetitions >= 5 and streak >= 3
    reviewing if repetitions >= 1
    learning  otherwise

    A record still in new/learning lands in reviewing first, so mastered is
    only reachable through reviewing.
    """
    if repetitions >= MASTERED_MIN_REPETITIONS and streak >= MASTERED_MIN_STREAK:
        if previous in (RecordState.NEW, RecordState.LEARNING):
            return RecordState.REVIEWING
        return RecordState.MASTERED
    if repetitions >= 1:
        return RecordState.REVIEWING
    return RecordState.LEARNING


def apply_sm2(
    interval: int,
    ease_factor: float,
    repetitions: int,
    streak: int,
    times_reviewed: int,
    times_correct: int,
    state: RecordState,
    quality: int,
) -> Sm2Update:
    """
    Apply one quality-scored review.

    Failed recall (q < 3): repetitions and streak reset, interval = 1 day.
    Successful recall: the first repetition is seeded by quality band
    (3 -> 1, 4 -> 3, 5 -> 7 days), the second is 6 days, later ones grow by
    the current ease factor.
    """
    q = clamp_quality(quality)
    times_reviewed += 1

    if q < PASSING_QUALITY:
        repetitions = 0
        interval = 1
        streak = 0
    else:
        times_correct += 1
        streak += 1
        if repetitions == 0:
            interval = FIRST_INTERVAL_BY_QUALITY.get(q, 1)
        elif repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = round_half_up(interval * ease_factor)
        repetitions += 1

    ease_factor = update_ease_factor(ease_factor, q)

    return Sm2Update(
        interval=interval,
        ease_factor=ease_factor,
        repetitions=repetitions,
        streak=streak,
        times_reviewed=times_reviewed,
        times_correct=times_correct,
        state=next_state(state, repetitions, streak),
    )


def difficulty_scaled_interval(
    previous_interval: int,
    repetitions_before: int,
    ease_factor: float,
    difficulty: Difficulty,
    was_correct: bool,
) -> int:
    """
    Interval for a review rated on the 1..4 difficulty scale.

    Incorrect -> 1 day. First qualifying repetition -> base interval.
    Later -> round(max(1, prev) * EF * growth[difficulty]), at least 1.
    """
    if not was_correct:
        return 1
    if repetitions_before <= 0:
        return BASE_INTERVAL_DAYS[difficulty]
    previous = max(1, previous_interval or 1)
    return max(1, round_half_up(previous * ease_factor * DIFFICULTY_GROWTH[difficulty]))


def post_session_interval(previous_interval: int, difficulty: Difficulty) -> int:
    """
    Interval from an end-of-session rating.

    No prior interval -> base interval; otherwise the previous interval is
    scaled by the difficulty multiplier (Hard shrinks it), at least 1 day.
    """
    previous = max(0, previous_interval or 0)
    if previous <= 0:
        return BASE_INTERVAL_DAYS[difficulty]
    return max(1, round_half_up(previous * POST_SESSION_MULTIPLIER[difficulty]))
