"""
Session lifecycle helpers for the Streamlit study page.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping, Optional

import streamlit as st

from vocab.schemas import WordData
from vocab.service import VocabularyService
from vocab.sessions import RoundOutcome, StudySession, start_custom_session, start_smart_session

logger = logging.getLogger(__name__)


def current_session() -> Optional[StudySession]:
    return st.session_state.study_session


def _start(session: Optional[StudySession], message: str) -> None:
    if session is None:
        st.error(message)
        return
    st.session_state.study_session = session
    st.session_state.session_message = message
    st.session_state.last_summary = None


def start_custom(words: Iterable[WordData], mode: str) -> None:
    """
    Start a custom study session over the chosen words.
    """
    session, message = start_custom_session(words, mode=mode)
    _start(session, message)


def start_smart(service: VocabularyService) -> None:
    """
    Start a smart review over the words due now.
    """
    session, message = start_smart_session(service)
    _start(session, message)


def submit_answer(typed: str) -> bool:
    session = current_session()
    return session.queue.check_answer(typed)


def retry_current() -> None:
    current_session().queue.retry()


def pass_current() -> RoundOutcome:
    outcome = current_session().queue.pass_current()
    if outcome == RoundOutcome.NEXT_ROUND:
        st.toast(f"Round {current_session().queue.round}: reviewing the words you missed")
    return outcome


def finish_session(
    service: VocabularyService,
    ratings: Mapping[str, int],
    manual_dates: Optional[Mapping[str, date]] = None,
) -> None:
    """
    Schedule the session's words and clear the active session.
    """
    session = current_session()
    summary = session.finish(service, ratings, manual_dates)
    st.session_state.last_summary = summary
    st.session_state.study_session = None
    st.session_state.session_message = None


def quit_session() -> None:
    """Abandon the active session; nothing is written to the store."""
    if current_session() is not None:
        logger.info("Study session abandoned")
    st.session_state.study_session = None
    st.session_state.session_message = None
