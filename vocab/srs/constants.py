"""
Scheduling Constants and Parameters

All configurable parameters for the review scheduler in one place.
"""

from datetime import timedelta
from enum import IntEnum


# ---- Difficulty Ratings ----

class Difficulty(IntEnum):
    """Subjective difficulty chosen by the user (1 = easiest)."""
    EASY = 1
    MEDIUM_EASY = 2
    MEDIUM = 3
    HARD = 4


# ---- Ease Factor (SM-2) ----

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3

QUALITY_MIN = 0
QUALITY_MAX = 5
PASSING_QUALITY = 3  # quality below this counts as a failed recall


# ---- First-repetition intervals by quality band (days) ----

FIRST_INTERVAL_BY_QUALITY = {
    3: 1,  # Hard
    4: 3,  # Good
    5: 7,  # Easy
}
SECOND_INTERVAL_DAYS = 6


# ---- Difficulty-driven intervals ----

# Base intervals for a first scheduling decision
BASE_INTERVAL_DAYS = {
    Difficulty.EASY: 7,
    Difficulty.MEDIUM_EASY: 4,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 1,
}

# Growth on top of the ease factor for in-session difficulty reviews
DIFFICULTY_GROWTH = {
    Difficulty.EASY: 1.6,
    Difficulty.MEDIUM_EASY: 1.35,
    Difficulty.MEDIUM: 1.15,
    Difficulty.HARD: 1.0,
}

# Multipliers on the previous interval for post-session ratings.
# Hard can shrink the interval.
POST_SESSION_MULTIPLIER = {
    Difficulty.EASY: 2.0,
    Difficulty.MEDIUM_EASY: 1.6,
    Difficulty.MEDIUM: 1.25,
    Difficulty.HARD: 0.8,
}

# Implied SM-2 quality for a correct answer at a given difficulty
QUALITY_FOR_DIFFICULTY = {
    Difficulty.EASY: 5,
    Difficulty.MEDIUM_EASY: 4,
    Difficulty.MEDIUM: 3,
    Difficulty.HARD: 3,
}
QUALITY_FOR_INCORRECT = 1


# ---- Lapse Detection ----

LAPSE_MIN_GAP = timedelta(days=30)
LAPSE_INTERVAL_FACTOR = 3  # gap must also exceed 3x the current interval
LAPSE_EASE_PENALTY = 0.9


# ---- State Transition ----

MASTERED_MIN_REPETITIONS = 5
MASTERED_MIN_STREAK = 3


# ---- Manual Scheduling ----

REMOVED_FROM_SCHEDULE_DAYS = 365 * 5
