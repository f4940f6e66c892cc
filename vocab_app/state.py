"""
Streamlit session state and service initialization helpers.
"""

from __future__ import annotations

import streamlit as st

from vocab.clock import RolloverTracker
from vocab.service import VocabularyService, build_service


def get_service() -> VocabularyService:
    """
    Shared vocabulary service (created once per Streamlit server process).
    """
    @st.cache_resource
    def _build_service() -> VocabularyService:
        return build_service()

    return _build_service()


def ensure_session_state(service: VocabularyService) -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "study_session" not in st.session_state:
        st.session_state.study_session = None
    if "session_message" not in st.session_state:
        st.session_state.session_message = None
    if "last_summary" not in st.session_state:
        st.session_state.last_summary = None
    if "custom_mode" not in st.session_state:
        st.session_state.custom_mode = "post_session"
    if "calendar_view" not in st.session_state:
        st.session_state.calendar_view = "14days"
    if "calendar_month" not in st.session_state:
        today = service.clock.today()
        st.session_state.calendar_month = (today.year, today.month)
    if "rollover" not in st.session_state:
        st.session_state.rollover = RolloverTracker(service.clock)
