"""
Tests for calendar aggregation, month grids and drag rescheduling.
"""

from datetime import date, timedelta

import pandas as pd

from conftest import make_record
from vocab.calendar import (
    OVERDUE_KEY,
    CalendarRescheduler,
    build_month,
    build_window,
    daily_counts,
    get_calendar_data,
    month_grid_start,
    schedule_frame,
)
from vocab.clock import RolloverTracker, add_days
from vocab.schemas import HistoryAction, RecordState


def scheduled(clock, word, days, **overrides):
    """A reviewing record due `days` days from today (negative = overdue)."""
    return make_record(
        clock,
        word=word,
        meaning=f"{word} meaning",
        state=RecordState.REVIEWING,
        interval=max(1, days),
        next_review_date=add_days(clock.today_start(), days),
        **overrides,
    )


class TestGrouping:

    def test_new_and_overdue_records_are_not_on_the_grid(self, clock):
        records = [
            make_record(clock, word="fresh"),
            scheduled(clock, "late", -3),
            scheduled(clock, "today", 0),
        ]
        data = get_calendar_data(records, clock, days=5)
        assert [r.word for r in data[clock.today()]] == ["today"]
        assert sum(len(v) for v in data.values()) == 1

    def test_days_are_consecutive_from_today(self, clock):
        data = get_calendar_data([], clock, days=3)
        today = clock.today()
        assert list(data) == [today, today + timedelta(days=1), today + timedelta(days=2)]

    def test_records_in_a_day_sorted_by_word(self, clock):
        records = [scheduled(clock, w, 2) for w in ("zeal", "Apple", "mango")]
        data = get_calendar_data(records, clock, days=3)
        assert [r.word for r in data[clock.today() + timedelta(days=2)]] == ["Apple", "mango", "zeal"]


class TestWindow:

    def test_fourteen_cells_from_today(self, clock):
        snapshot = build_window([], clock)
        assert snapshot.view == "14days"
        assert len(snapshot.cells) == 14
        assert snapshot.cells[0].day == clock.today()
        assert snapshot.cells[0].is_today
        assert not any(c.is_past for c in snapshot.cells)

    def test_overdue_bucket(self, clock):
        late = scheduled(clock, "late", -1)
        soon = scheduled(clock, "soon", 3)
        snapshot = build_window([late, soon], clock)

        assert snapshot.overdue == (late,)
        assert snapshot.scheduled_count == 1
        assert snapshot.cell_for(clock.today() + timedelta(days=3)).records == (soon,)

    def test_out_of_window_records_are_dropped(self, clock):
        snapshot = build_window([scheduled(clock, "far", 30)], clock)
        assert snapshot.scheduled_count == 0


class TestMonthGrid:

    def test_grid_start_is_sunday(self):
        # 1 March 2026 is a Sunday
        assert month_grid_start(2026, 3) == date(2026, 3, 1)
        # 1 April 2026 is a Wednesday
        assert month_grid_start(2026, 4) == date(2026, 3, 29)

    def test_forty_two_cells(self, clock):
        snapshot = build_month([], clock, 2026, 4)
        assert len(snapshot.cells) == 42
        assert snapshot.cells[0].day == date(2026, 3, 29)
        assert not snapshot.cells[0].in_month
        assert snapshot.cell_for(date(2026, 4, 1)).in_month
        assert snapshot.cells[-1].day == date(2026, 5, 9)

    def test_today_and_past_flags(self, clock):
        snapshot = build_month([], clock, 2026, 3)
        assert snapshot.cell_for(date(2026, 3, 10)).is_today
        assert snapshot.cell_for(date(2026, 3, 9)).is_past
        assert not snapshot.cell_for(date(2026, 3, 11)).is_past

    def test_overdue_never_in_past_cells(self, clock):
        late = scheduled(clock, "late", -2)
        snapshot = build_month([late], clock, 2026, 3)
        assert snapshot.cell_for(date(2026, 3, 8)).count == 0
        assert snapshot.overdue == (late,)


class TestTables:

    def test_schedule_frame(self, clock):
        records = [
            make_record(clock, word="fresh"),
            scheduled(clock, "beta", 2),
            scheduled(clock, "alpha", 2),
            scheduled(clock, "late", -1),
        ]
        df = schedule_frame(records, clock)

        assert list(df["word"]) == ["late", "alpha", "beta"]
        assert list(df["days_until"]) == [-1, 2, 2]
        assert list(df["overdue"]) == [True, False, False]

    def test_schedule_frame_empty(self, clock):
        df = schedule_frame([], clock)
        assert df.empty
        assert "due_day" in df.columns

    def test_daily_counts(self, clock):
        records = [scheduled(clock, w, 1) for w in ("a", "b")]
        counts = daily_counts(build_window(records, clock))

        assert len(counts) == 14
        assert counts.dtype == "int64"
        assert counts[pd.Timestamp(clock.today() + timedelta(days=1))] == 2
        assert counts.sum() == 2


class TestRescheduler:

    def test_drop_on_same_cell_is_noop(self, service, clock, word):
        record = service.upsert(word)
        record = service.set_difficulty(record.id, 2)
        due = clock.local_day(record.next_review_date)

        rescheduler = CalendarRescheduler(service)
        assert rescheduler.move(record.id, due.isoformat(), due) is None
        assert rescheduler.move(record.id, due, due) is None
        assert service.get(record.id).version == record.version

    def test_move_to_another_day(self, service, clock, word):
        record = service.set_difficulty(service.upsert(word).id, 2)
        target = clock.today() + timedelta(days=6)

        moved = CalendarRescheduler(service).move(record.id, "2026-03-14", target)
        assert clock.local_day(moved.next_review_date) == target
        assert moved.interval == 6
        assert moved.last_event().action == HistoryAction.RESCHEDULED

    def test_move_out_of_overdue_onto_today(self, service, clock, word):
        record = service.set_difficulty(service.upsert(word).id, 4)
        clock.advance(days=3)

        moved = CalendarRescheduler(service).move(record.id, OVERDUE_KEY, clock.today())
        assert moved.next_review_date == clock.today_start()
        assert service.get_overdue_cards() == []

    def test_remove(self, service, clock, word):
        record = service.set_difficulty(service.upsert(word).id, 2)
        CalendarRescheduler(service).remove(record.id)
        assert build_window(service.get_all(), clock).scheduled_count == 0


class TestRollover:

    def test_detects_day_change_once(self, clock):
        tracker = RolloverTracker(clock)
        assert not tracker.check()

        clock.advance(hours=10)  # 19:30, same day
        assert not tracker.check()

        clock.advance(hours=5)  # past midnight
        assert tracker.check()
        assert tracker.last_day == date(2026, 3, 11)
        assert not tracker.check()
