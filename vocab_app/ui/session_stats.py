"""
Session Statistics UI

Renders round progress and the summary of a finished session.
"""

import streamlit as st

from vocab.sessions import RoundQueue, SessionSummary


def render_session_stats(queue: RoundQueue) -> bool:
    """
    Render progress metrics and a quit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Round", queue.round)

    with col2:
        st.metric("Settled", f"{queue.settled_count}/{queue.deck_size}")

    with col3:
        attempts = queue.correct_count + queue.incorrect_count
        if attempts > 0:
            st.metric("Accuracy", f"{queue.correct_count / attempts * 100:.0f}%")

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Quit session", use_container_width=True):
            return True

    st.progress(1 - queue.remaining / max(1, len(queue.queue)))
    st.divider()
    return False


def render_session_complete(summary: SessionSummary) -> None:
    """Render the result of the last finished session."""
    st.success(f"🎉 Session complete! {summary.total} words scheduled.")
    if summary.unrated:
        st.info(f"{len(summary.unrated)} unrated words are due again today.")
    if summary.missing:
        st.warning(f"{len(summary.missing)} words were removed during the session and skipped.")
