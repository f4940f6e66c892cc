"""
Study page rendering.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from vocab.errors import InvalidWordDataError
from vocab.importing import read_deck_frame
from vocab.schemas import WordData
from vocab.service import VocabularyService
from vocab.sessions import CustomMode
from vocab_app.session_controller import (
    current_session,
    finish_session,
    pass_current,
    quit_session,
    retry_current,
    start_custom,
    start_smart,
    submit_answer,
)
from vocab_app.ui import (
    render_card_back,
    render_card_front,
    render_difficulty_selector,
    render_session_complete,
    render_session_stats,
)

CUSTOM_MODE_LABELS = {
    CustomMode.POST_SESSION.value: "Rate after session",
    CustomMode.DIFFICULTY_SCALED.value: "Rate with in-session accuracy",
    CustomMode.DIRECT.value: "Fixed interval per rating",
}


def render_study_page(service: VocabularyService) -> None:
    """
    Render the study flow (intro, active round, or rating step).
    """
    session = current_session()
    if session is None:
        _render_intro_screen(service)
    elif session.queue.is_complete:
        _render_rating_step(service)
    else:
        _render_active_session()


def _render_intro_screen(service: VocabularyService) -> None:
    st.title("📚 Vocabulary Trainer")

    if st.session_state.last_summary is not None:
        render_session_complete(st.session_state.last_summary)

    stats = service.get_stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Due now", len(service.get_due_cards()))
    col2.metric("In schedule", stats.total - stats.new)
    col3.metric("Mastered", stats.mastered)

    st.markdown("### ⚡ Smart Review")
    st.markdown("Review every word that is due.")
    if st.button("Start smart review", type="primary", use_container_width=True):
        start_smart(service)
        st.rerun()

    st.markdown("### ✍️ Custom Study")
    words = _choose_custom_words(service)
    mode = st.selectbox(
        "Scheduling after the session",
        list(CUSTOM_MODE_LABELS),
        format_func=CUSTOM_MODE_LABELS.get,
        key="custom_mode",
    )
    if st.button("Start custom study", use_container_width=True, disabled=not words):
        start_custom(words, mode)
        st.rerun()


def _choose_custom_words(service: VocabularyService) -> list[WordData]:
    words: list[WordData] = []

    uploaded = st.file_uploader("Deck CSV (word, meaning, ...)", type=["csv"])
    if uploaded is not None:
        try:
            df = pd.read_csv(uploaded, dtype=str, keep_default_na=False)
            result = read_deck_frame(df, default_source=uploaded.name.rsplit(".", 1)[0])
        except InvalidWordDataError as exc:
            st.error(str(exc))
        else:
            if result.skipped:
                st.warning(f"Skipped {len(result.skipped)} rows without word or meaning.")
            words.extend(result.words)

    new_cards = service.get_new_cards()
    if new_cards:
        labels = {r.id: f"{r.word}: {r.meaning}" for r in new_cards}
        chosen = st.multiselect("Words not yet studied", list(labels), format_func=labels.get)
        for record in new_cards:
            if record.id in chosen:
                words.append(WordData.model_validate(record.model_dump(include={
                    "word", "meaning", "pronunciation", "part_of_speech", "example", "source", "tags",
                })))
    return words


def _render_active_session() -> None:
    session = current_session()
    queue = session.queue

    if render_session_stats(queue):
        quit_session()
        st.rerun()

    item = queue.current()
    if queue.last_answer_correct is None:
        render_card_front(item, queue.round)
        st.markdown("<br>", unsafe_allow_html=True)
        with st.form(key=f"answer_{queue.round}_{queue.position}", clear_on_submit=True):
            typed = st.text_input("Type the word")
            if st.form_submit_button("Check", type="primary", use_container_width=True):
                submit_answer(typed)
                st.rerun()
    else:
        render_card_back(item, queue.last_answer_correct)
        st.markdown("<br>", unsafe_allow_html=True)
        col1, col2 = st.columns(2)
        with col1:
            if st.button("🔁 Retry", use_container_width=True):
                retry_current()
                st.rerun()
        with col2:
            if st.button("➡️ Pass", type="primary", use_container_width=True):
                pass_current()
                st.rerun()


def _render_rating_step(service: VocabularyService) -> None:
    session = current_session()
    submitted = render_difficulty_selector(service, session)
    if submitted is not None:
        ratings, manual_dates = submitted
        finish_session(service, ratings, manual_dates)
        st.rerun()
