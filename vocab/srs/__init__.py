"""
SRS - Spaced Repetition Scheduling

Pure scheduling engine for vocabulary records:
- SM-2 ease factor and repetition counting
- Three explicit review policies (quality-scored, difficulty-scaled,
  post-session recompute)
- Lapse detection after long gaps
- Day-anchored due dates (local midnight + interval days)

Quick start:
    from vocab import srs

    updated = srs.process_review(record, srs.QualityScored(quality=4, was_correct=True), clock)
    due = srs.due_records(records, clock)
"""

# Core scheduler API (algorithm logic)
from vocab.srs.scheduler import (
    process_review,
    set_difficulty,
    reschedule,
    schedule_for_today,
    remove_from_schedule,
    reset_round_flags,
)

# Policies
from vocab.srs.policies import (
    SchedulingPolicy,
    QualityScored,
    DifficultyScaled,
    PostSessionRecompute,
    predict_post_session_interval,
    predict_difficulty_interval,
    predict_difficulty_scaled_interval,
)

# Selection over snapshots
from vocab.srs.selection import (
    ScheduleStats,
    is_due,
    is_overdue,
    due_records,
    overdue_records,
    records_in_state,
    compute_stats,
)

# Constants and parameters
from vocab.srs.constants import (
    Difficulty,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    BASE_INTERVAL_DAYS,
    DIFFICULTY_GROWTH,
    POST_SESSION_MULTIPLIER,
    REMOVED_FROM_SCHEDULE_DAYS,
)


__all__ = [
    # Core algorithm
    "process_review",
    "set_difficulty",
    "reschedule",
    "schedule_for_today",
    "remove_from_schedule",
    "reset_round_flags",

    # Policies
    "SchedulingPolicy",
    "QualityScored",
    "DifficultyScaled",
    "PostSessionRecompute",
    "predict_post_session_interval",
    "predict_difficulty_interval",
    "predict_difficulty_scaled_interval",

    # Selection
    "ScheduleStats",
    "is_due",
    "is_overdue",
    "due_records",
    "overdue_records",
    "records_in_state",
    "compute_stats",

    # Parameters
    "Difficulty",
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "BASE_INTERVAL_DAYS",
    "DIFFICULTY_GROWTH",
    "POST_SESSION_MULTIPLIER",
    "REMOVED_FROM_SCHEDULE_DAYS",
]
