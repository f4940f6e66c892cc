"""
Due-card selection over a snapshot of records (no store calls).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from vocab.clock import Clock
from vocab.schemas import RecordState, VocabRecord


@dataclass(frozen=True)
class ScheduleStats:
    """Counts shown on the study dashboard."""
    total: int
    new: int
    learning: int
    reviewing: int
    mastered: int
    due_today: int
    overdue: int


def is_due(record: VocabRecord, clock: Clock) -> bool:
    return record.state != RecordState.NEW and record.next_review_date <= clock.now()


def is_overdue(record: VocabRecord, clock: Clock) -> bool:
    return record.state != RecordState.NEW and record.next_review_date < clock.today_start()


def due_records(records: Iterable[VocabRecord], clock: Clock) -> list[VocabRecord]:
    """Scheduled records whose due date has passed, earliest first."""
    due = [r for r in records if is_due(r, clock)]
    due.sort(key=lambda r: r.next_review_date)
    return due


def overdue_records(records: Iterable[VocabRecord], clock: Clock) -> list[VocabRecord]:
    """Scheduled records due before today's midnight, sorted by word."""
    overdue = [r for r in records if is_overdue(r, clock)]
    overdue.sort(key=lambda r: r.word.lower())
    return overdue


def records_in_state(records: Iterable[VocabRecord], state: RecordState) -> list[VocabRecord]:
    return [r for r in records if r.state == state]


def compute_stats(records: Iterable[VocabRecord], clock: Clock) -> ScheduleStats:
    records = list(records)
    counts = {state: 0 for state in RecordState}
    for record in records:
        counts[record.state] += 1

    return ScheduleStats(
        total=len(records),
        new=counts[RecordState.NEW],
        learning=counts[RecordState.LEARNING],
        reviewing=counts[RecordState.REVIEWING],
        mastered=counts[RecordState.MASTERED],
        due_today=sum(1 for r in records if is_due(r, clock)),
        overdue=sum(1 for r in records if is_overdue(r, clock)),
    )
