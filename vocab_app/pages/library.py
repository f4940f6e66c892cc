"""
Library page: browse records, import decks and edit schedules.
"""

from __future__ import annotations

import json

import pandas as pd
import streamlit as st

from vocab.errors import InvalidWordDataError
from vocab.importing import parse_word_data, read_deck_frame
from vocab.schemas import RecordState
from vocab.service import VocabularyService
from vocab.srs import Difficulty

STATE_FILTERS = ["all"] + [state.value for state in RecordState]


def render_library_page(service: VocabularyService) -> None:
    st.title("📖 Library")

    stats = service.get_stats()
    cols = st.columns(5)
    cols[0].metric("Total", stats.total)
    cols[1].metric("New", stats.new)
    cols[2].metric("Learning", stats.learning)
    cols[3].metric("Reviewing", stats.reviewing)
    cols[4].metric("Mastered", stats.mastered)

    _render_record_table(service)
    _render_record_actions(service)

    with st.expander("Add a word"):
        _render_add_word(service)
    with st.expander("Import deck CSV"):
        _render_deck_import(service)
    with st.expander("Import legacy SRS store"):
        _render_legacy_import(service)


def _records_frame(service: VocabularyService, state_filter: str) -> pd.DataFrame:
    records = service.get_all() if state_filter == "all" else service.get_by_state(state_filter)
    rows = [{
        "word": r.word,
        "meaning": r.meaning,
        "state": r.state.value,
        "next review": service.clock.local_day(r.next_review_date),
        "interval": r.interval,
        "ease": round(r.ease_factor, 2),
        "reviews": r.times_reviewed,
        "source": r.source,
    } for r in sorted(records, key=lambda r: r.word.lower())]
    return pd.DataFrame(rows)


def _render_record_table(service: VocabularyService) -> None:
    state_filter = st.selectbox("State", STATE_FILTERS)
    df = _records_frame(service, state_filter)
    if df.empty:
        st.info("No words yet. Add some or import a deck.")
        return
    st.dataframe(df, use_container_width=True, hide_index=True)


def _render_record_actions(service: VocabularyService) -> None:
    records = sorted(service.get_all(), key=lambda r: r.word.lower())
    if not records:
        return
    labels = {r.id: f"{r.word}: {r.meaning}" for r in records}
    record_id = st.selectbox("Word", list(labels), format_func=labels.get)
    record = service.get(record_id)

    col1, col2, col3 = st.columns(3)
    with col1:
        difficulty = st.selectbox(
            "Difficulty",
            [d.value for d in Difficulty],
            format_func=lambda d: Difficulty(d).name.replace("_", " ").title(),
        )
        if st.button("Set difficulty", use_container_width=True):
            service.set_difficulty(record_id, difficulty)
            st.rerun()
    with col2:
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Due today", use_container_width=True):
            service.schedule_for_today(record_id, "manual")
            st.rerun()
    with col3:
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Delete", use_container_width=True):
            service.delete(record_id)
            st.rerun()

    with st.expander("History"):
        st.dataframe(
            pd.DataFrame([{
                "time": event.timestamp,
                "action": event.action.value,
                "data": json.dumps(event.data, ensure_ascii=False),
            } for event in record.history]),
            use_container_width=True,
            hide_index=True,
        )


def _render_add_word(service: VocabularyService) -> None:
    with st.form("add_word", clear_on_submit=True):
        word = st.text_input("Word")
        meaning = st.text_input("Meaning")
        pronunciation = st.text_input("Pronunciation")
        example = st.text_input("Example")
        source = st.text_input("Source")
        if st.form_submit_button("Save", type="primary"):
            try:
                data = parse_word_data({
                    "word": word,
                    "meaning": meaning,
                    "pronunciation": pronunciation,
                    "example": example,
                    "source": source,
                })
            except InvalidWordDataError as exc:
                st.error(str(exc))
            else:
                record = service.upsert(data)
                st.success(f"Saved '{record.word}'")


def _render_deck_import(service: VocabularyService) -> None:
    uploaded = st.file_uploader("Deck CSV", type=["csv"], key="library_deck")
    if uploaded is None:
        return
    try:
        df = pd.read_csv(uploaded, dtype=str, keep_default_na=False)
        result = read_deck_frame(df, default_source=uploaded.name.rsplit(".", 1)[0])
    except InvalidWordDataError as exc:
        st.error(str(exc))
        return

    st.write(f"{len(result.words)} valid rows, {len(result.skipped)} skipped")
    if result.skipped:
        st.dataframe(pd.DataFrame(result.skipped, columns=["line", "reason"]), hide_index=True)
    if st.button("Import", type="primary", disabled=not result.words):
        for data in result.words:
            service.upsert(data)
        st.success(f"Imported {len(result.words)} words")


def _render_legacy_import(service: VocabularyService) -> None:
    uploaded = st.file_uploader("Legacy store JSON", type=["json"], key="legacy_store")
    if uploaded is None:
        return
    try:
        old_store = json.load(uploaded)
    except ValueError as exc:
        st.error(f"Not a valid JSON file: {exc}")
        return
    if not isinstance(old_store, dict):
        st.error("Legacy store must be a JSON object")
        return
    if st.button("Migrate", type="primary"):
        added = service.import_legacy(old_store)
        st.success(f"Migrated {added} words")
