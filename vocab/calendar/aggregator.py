"""
Calendar Aggregator - groups scheduled records by local due day.

Everything here is derived from a record snapshot and the clock at call
time; nothing is cached, so a day rollover moves records between buckets
on the next call.

Rules:
- `new` records are never on the calendar
- Records due before today's midnight go to the overdue bucket only
- The grouping key is the local calendar day of `next_review_date`
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from vocab.calendar.types import CalendarSnapshot, DayCell
from vocab.clock import Clock
from vocab.schemas import RecordState, VocabRecord
from vocab.srs.selection import is_overdue, overdue_records

WINDOW_DAYS = 14
MONTH_GRID_DAYS = 42  # 6 weeks


def _sort_key(record: VocabRecord):
    return (record.word.lower(), record.id)


def group_by_day(records: Iterable[VocabRecord], clock: Clock) -> dict[date, list[VocabRecord]]:
    """
    Bucket scheduled, not-overdue records by local due day.

    Records inside a day are sorted by word.
    """
    by_day: dict[date, list[VocabRecord]] = defaultdict(list)
    for record in records:
        if record.state == RecordState.NEW or is_overdue(record, clock):
            continue
        by_day[clock.local_day(record.next_review_date)].append(record)
    for bucket in by_day.values():
        bucket.sort(key=_sort_key)
    return dict(by_day)


def get_calendar_data(
    records: Iterable[VocabRecord],
    clock: Clock,
    days: int = 30,
) -> dict[date, list[VocabRecord]]:
    """
    Ordered map of the next `days` days (today first) to the records due then.

    Days without records map to an empty list.
    """
    by_day = group_by_day(records, clock)
    today = clock.today()
    result: dict[date, list[VocabRecord]] = {}
    for offset in range(max(0, days)):
        day = today + timedelta(days=offset)
        result[day] = by_day.get(day, [])
    return result


def month_grid_start(year: int, month: int) -> date:
    """Sunday on or before the first of the month."""
    first = date(year, month, 1)
    # weekday(): Monday=0 ... Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def build_window(records: Iterable[VocabRecord], clock: Clock, days: int = WINDOW_DAYS) -> CalendarSnapshot:
    """Look-ahead grid of `days` cells starting today."""
    records = list(records)
    today = clock.today()
    by_day = group_by_day(records, clock)

    cells = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        cells.append(DayCell(
            day=day,
            records=tuple(by_day.get(day, ())),
            is_today=offset == 0,
            is_past=False,
        ))

    return CalendarSnapshot(
        view="14days",
        today=today,
        cells=tuple(cells),
        overdue=tuple(overdue_records(records, clock)),
    )


def build_month(records: Iterable[VocabRecord], clock: Clock, year: int, month: int) -> CalendarSnapshot:
    """
    Six-week month grid (42 cells, weeks starting on Sunday).

    Leading and trailing days from neighbouring months are included with
    `in_month=False`.
    """
    records = list(records)
    today = clock.today()
    by_day = group_by_day(records, clock)
    start = month_grid_start(year, month)

    cells = []
    for offset in range(MONTH_GRID_DAYS):
        day = start + timedelta(days=offset)
        cells.append(DayCell(
            day=day,
            records=tuple(by_day.get(day, ())),
            is_today=day == today,
            is_past=day < today,
            in_month=day.month == month,
        ))

    return CalendarSnapshot(
        view="month",
        today=today,
        cells=tuple(cells),
        overdue=tuple(overdue_records(records, clock)),
    )


# ---- Tabular views ----

SCHEDULE_COLUMNS = ["id", "word", "meaning", "state", "due_day", "days_until", "interval", "ease_factor", "overdue"]


def schedule_frame(records: Iterable[VocabRecord], clock: Clock) -> pd.DataFrame:
    """
    One row per scheduled (non-new) record, ordered by due day then word.
    """
    today = clock.today()
    rows = []
    for record in records:
        if record.state == RecordState.NEW:
            continue
        due_day = clock.local_day(record.next_review_date)
        rows.append({
            "id": record.id,
            "word": record.word,
            "meaning": record.meaning,
            "state": record.state.value,
            "due_day": due_day,
            "days_until": (due_day - today).days,
            "interval": record.interval,
            "ease_factor": round(record.ease_factor, 2),
            "overdue": is_overdue(record, clock),
        })

    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)

    df = pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
    df["_word_key"] = df["word"].str.lower()
    df = df.sort_values(["due_day", "_word_key"]).drop(columns="_word_key")
    return df.reset_index(drop=True)


def daily_counts(snapshot: CalendarSnapshot) -> pd.Series:
    """
    Number of records due per grid day (heat-map input).
    """
    index = pd.DatetimeIndex([pd.Timestamp(cell.day) for cell in snapshot.cells], name="day")
    return pd.Series([cell.count for cell in snapshot.cells], index=index, dtype="int64")
