"""
Review calendar: due-day grouping, grids and manual rescheduling.
"""

from vocab.calendar.types import (
    CalendarSnapshot,
    CalendarView,
    DayCell,
    OVERDUE_KEY,
)
from vocab.calendar.aggregator import (
    build_month,
    build_window,
    daily_counts,
    get_calendar_data,
    group_by_day,
    month_grid_start,
    schedule_frame,
)
from vocab.calendar.rescheduler import CalendarRescheduler


__all__ = [
    # Types
    "CalendarSnapshot",
    "CalendarView",
    "DayCell",
    "OVERDUE_KEY",

    # Aggregation
    "build_month",
    "build_window",
    "daily_counts",
    "get_calendar_data",
    "group_by_day",
    "month_grid_start",
    "schedule_frame",

    # Manual rescheduling
    "CalendarRescheduler",
]
