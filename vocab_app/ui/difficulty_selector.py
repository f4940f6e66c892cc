"""
Difficulty Selector UI

End-of-session rating of every studied word (1 = easy ... 4 = hard).
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import streamlit as st

from vocab.service import VocabularyService
from vocab.sessions import StudySession, TrackKind

DIFFICULTY_LABELS = {
    1: "✨ Easy",
    2: "👍 Fairly easy",
    3: "😐 Medium",
    4: "😰 Hard",
}
UNRATED_LABEL = "Skip"


def render_difficulty_selector(
    service: VocabularyService,
    session: StudySession,
) -> Optional[tuple[dict[str, int], dict[str, date]]]:
    """
    Render one rating row per studied word.

    Returns:
        (ratings, manual_dates) once the user submits, otherwise None
    """
    is_smart = session.track == TrackKind.SMART
    st.markdown("### Rate each word")
    st.caption(
        "Unrated words come back today." if not is_smart
        else "Unrated words come back today unless you pick a date."
    )

    options = [UNRATED_LABEL] + list(DIFFICULTY_LABELS.values())
    ratings: dict[str, int] = {}
    manual_dates: dict[str, date] = {}
    today = service.clock.today()

    for position, item in enumerate(session.rating_items()):
        cols = st.columns([3, 3, 2] if is_smart else [3, 3])
        with cols[0]:
            st.markdown(f"**{item.word}**  \n{item.meaning}")
        with cols[1]:
            choice = st.selectbox(
                "Difficulty",
                options,
                key=f"rating_{position}",
                label_visibility="collapsed",
            )
        if choice != UNRATED_LABEL:
            difficulty = next(d for d, label in DIFFICULTY_LABELS.items() if label == choice)
            ratings[item.key] = difficulty
            days = session.preview_interval(service, item, difficulty)
            cols[0].caption(f"Next review in {days} day{'s' if days != 1 else ''}")
        if is_smart:
            with cols[2]:
                picked = st.date_input(
                    "Date",
                    value=None,
                    min_value=today,
                    key=f"manual_date_{position}",
                    label_visibility="collapsed",
                )
            if picked is not None:
                manual_dates[item.key] = picked

    if st.button("Save schedule", type="primary", use_container_width=True):
        return ratings, manual_dates
    return None
