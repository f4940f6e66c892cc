"""
Types for the review calendar.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal

from vocab.schemas import VocabRecord


CalendarView = Literal["month", "14days"]

# Drag source key for records dragged out of the overdue bucket
OVERDUE_KEY = "overdue"


@dataclass(frozen=True)
class DayCell:
    """
    One day of the calendar grid with the records due that day.
    """
    day: date
    records: tuple[VocabRecord, ...]
    is_today: bool
    is_past: bool
    in_month: bool = True

    @property
    def key(self) -> str:
        return self.day.isoformat()

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class CalendarSnapshot:
    """
    Derived calendar state for one render: day cells plus the overdue bucket.
    """
    view: CalendarView
    today: date
    cells: tuple[DayCell, ...]
    overdue: tuple[VocabRecord, ...]

    def cell_for(self, day: date) -> DayCell | None:
        for cell in self.cells:
            if cell.day == day:
                return cell
        return None

    @property
    def scheduled_count(self) -> int:
        return sum(cell.count for cell in self.cells)
