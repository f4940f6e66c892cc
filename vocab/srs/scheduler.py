"""
Scheduler - Review Scheduling Logic

Pure scheduling and state updates (no store calls).

Main workflow:
1. Load the record (caller's responsibility)
2. Pick a SchedulingPolicy for the review outcome
3. Apply it at the clock's current instant
4. Save the returned record (caller's responsibility)

Manual operations (set_difficulty, reschedule, schedule_for_today,
remove_from_schedule) live here too: they move the due date without touching
ease or repetitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from vocab.clock import Clock, add_days, whole_days_between
from vocab.schemas import HistoryAction, HistoryEvent, RecordState, VocabRecord
from vocab.srs import intervals
from vocab.srs.constants import BASE_INTERVAL_DAYS, REMOVED_FROM_SCHEDULE_DAYS
from vocab.srs.policies import SchedulingPolicy


def process_review(record: VocabRecord, policy: SchedulingPolicy, clock: Clock) -> VocabRecord:
    """
    Apply a review policy and return the updated record.

    Args:
        record: Record to update (not modified)
        policy: QualityScored, DifficultyScaled or PostSessionRecompute
        clock: Source of "now" and of the local day boundary

    Returns:
        New record with updated schedule and appended history
    """
    return policy.apply(record, clock.now())


def set_difficulty(record: VocabRecord, difficulty: int, clock: Clock) -> VocabRecord:
    """
    Direct difficulty -> interval mapping (1 -> 7, 2 -> 4, 3 -> 2, 4 -> 1 days).

    Ease factor and repetitions are left alone. A record that was not yet
    being reviewed enters the reviewing state.
    """
    now = clock.now()
    d = intervals.clamp_difficulty(difficulty)
    interval = BASE_INTERVAL_DAYS[d]

    state = record.state
    if state in (RecordState.NEW, RecordState.LEARNING):
        state = RecordState.REVIEWING

    return record.evolve(
        (HistoryEvent(
            timestamp=now,
            action=HistoryAction.DIFFICULTY_SET,
            data={"difficulty": int(d), "interval": interval},
        ),),
        difficulty_rating=int(d),
        interval=interval,
        next_review_date=add_days(clock.today_start(), interval),
        state=state,
        updated_at=now,
    )


def reschedule(record: VocabRecord, when: datetime, clock: Clock) -> VocabRecord:
    """
    Manual override of the next review date.

    The target is anchored to local midnight of the day containing `when`;
    a day in the past is clamped to today. The interval becomes the day
    distance from today (at least 1).
    """
    now = clock.now()
    today_start = clock.today_start()
    target = clock.midnight_of(clock.local_day(when))
    if target < today_start:
        target = today_start

    days = whole_days_between(today_start, target)

    return record.evolve(
        (HistoryEvent(
            timestamp=now,
            action=HistoryAction.RESCHEDULED,
            data={
                "new_date": target.isoformat(),
                "previous_date": record.next_review_date.isoformat(),
            },
        ),),
        next_review_date=target,
        interval=max(1, days),
        updated_at=now,
    )


def schedule_for_today(record: VocabRecord, clock: Clock, reason: Optional[str] = None) -> VocabRecord:
    """Force a record due today (used when a studied word went unrated)."""
    now = clock.now()
    today_start = clock.today_start()

    return record.evolve(
        (HistoryEvent(
            timestamp=now,
            action=HistoryAction.RESCHEDULED,
            data={"new_date": today_start.isoformat(), "scheduled_for_today": True, "reason": reason},
        ),),
        state=RecordState.LEARNING if record.state == RecordState.NEW else record.state,
        next_review_date=today_start,
        interval=1,
        updated_at=now,
    )


def remove_from_schedule(record: VocabRecord, clock: Clock) -> VocabRecord:
    """
    Non-destructive removal: push the due date five years out.

    The record and its history stay; rescheduling brings it back.
    """
    now = clock.now()
    new_date = add_days(clock.today_start(), REMOVED_FROM_SCHEDULE_DAYS)

    return record.evolve(
        (HistoryEvent(
            timestamp=now,
            action=HistoryAction.RESCHEDULED,
            data={"new_date": new_date.isoformat(), "removed_from_schedule": True},
        ),),
        state=RecordState.REVIEWING if record.state == RecordState.NEW else record.state,
        next_review_date=new_date,
        interval=REMOVED_FROM_SCHEDULE_DAYS,
        updated_at=now,
    )


def reset_round_flags(record: VocabRecord, clock: Clock) -> VocabRecord:
    """Clear the sticky wrong-in-round flags for a new study session."""
    return record.evolve(
        wrong_in_current_round=False,
        needs_next_round=False,
        updated_at=clock.now(),
    )
