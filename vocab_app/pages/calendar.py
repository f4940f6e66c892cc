"""
Review calendar page: 14-day window or month grid, overdue list and manual moves.
"""

from __future__ import annotations

from datetime import date

import streamlit as st

from vocab.calendar import (
    OVERDUE_KEY,
    CalendarRescheduler,
    CalendarSnapshot,
    build_month,
    build_window,
    daily_counts,
    schedule_frame,
)
from vocab.service import VocabularyService

OVERDUE_PREVIEW_LIMIT = 20
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def render_calendar_page(service: VocabularyService) -> None:
    st.title("🗓️ Review Calendar")

    view = st.radio(
        "View",
        ["14days", "month"],
        format_func=lambda v: "Next 14 days" if v == "14days" else "Month",
        horizontal=True,
        key="calendar_view",
    )

    records = service.get_all()
    if view == "month":
        year, month = _render_month_nav()
        snapshot = build_month(records, service.clock, year, month)
    else:
        snapshot = build_window(records, service.clock)

    _render_overdue(snapshot)
    _render_grid(snapshot)
    st.bar_chart(daily_counts(snapshot))
    _render_move_form(service, snapshot)

    with st.expander("All scheduled words"):
        st.dataframe(schedule_frame(records, service.clock), use_container_width=True, hide_index=True)


def _render_month_nav() -> tuple[int, int]:
    year, month = st.session_state.calendar_month
    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀", use_container_width=True):
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    with col3:
        if st.button("▶", use_container_width=True):
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    st.session_state.calendar_month = (year, month)
    col2.markdown(f"<h4 style='text-align: center;'>{date(year, month, 1):%B %Y}</h4>", unsafe_allow_html=True)
    return year, month


def _render_overdue(snapshot: CalendarSnapshot) -> None:
    if not snapshot.overdue:
        return
    st.error(f"{len(snapshot.overdue)} overdue words")
    words = [r.word for r in snapshot.overdue[:OVERDUE_PREVIEW_LIMIT]]
    extra = len(snapshot.overdue) - len(words)
    st.caption(", ".join(words) + (f" +{extra} more" if extra > 0 else ""))


def _render_grid(snapshot: CalendarSnapshot) -> None:
    cells = list(snapshot.cells)
    if snapshot.view == "month":
        header = st.columns(7)
        for col, name in zip(header, DAY_NAMES):
            col.markdown(f"**{name}**")

    for week_start in range(0, len(cells), 7):
        cols = st.columns(7)
        for col, cell in zip(cols, cells[week_start:week_start + 7]):
            label = f"{cell.day.day}" if snapshot.view == "month" else f"{cell.day:%a %d}"
            if cell.is_today:
                label = f"**{label}**"
            if not cell.in_month:
                label = f"<span style='color: #aaa'>{label}</span>"
            col.markdown(label, unsafe_allow_html=True)
            if cell.count:
                col.caption(f"{cell.count} word{'s' if cell.count != 1 else ''}")


def _render_move_form(service: VocabularyService, snapshot: CalendarSnapshot) -> None:
    """
    Form stand-in for drag-and-drop: pick a word and a target day.
    """
    options: dict[str, str] = {}
    sources: dict[str, str] = {}
    for record in snapshot.overdue:
        options[record.id] = f"{record.word} (overdue)"
        sources[record.id] = OVERDUE_KEY
    for cell in snapshot.cells:
        for record in cell.records:
            options[record.id] = f"{record.word} ({cell.day:%d %b})"
            sources[record.id] = cell.key
    if not options:
        st.info("Nothing scheduled in this range.")
        return

    rescheduler = CalendarRescheduler(service)
    with st.form("calendar_move"):
        record_id = st.selectbox("Word", list(options), format_func=options.get)
        target = st.date_input("Move to", value=snapshot.today, min_value=snapshot.today)
        col1, col2 = st.columns(2)
        move = col1.form_submit_button("Move", type="primary", use_container_width=True)
        remove = col2.form_submit_button("Remove from schedule", use_container_width=True)

    if move:
        if rescheduler.move(record_id, sources[record_id], target) is not None:
            st.rerun()
    elif remove:
        rescheduler.remove(record_id)
        st.rerun()
