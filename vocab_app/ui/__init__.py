"""UI Components for the vocabulary trainer"""

from vocab_app.ui.flashcard import render_card_front, render_card_back
from vocab_app.ui.session_stats import render_session_stats, render_session_complete
from vocab_app.ui.difficulty_selector import render_difficulty_selector

__all__ = [
    "render_card_front",
    "render_card_back",
    "render_session_stats",
    "render_session_complete",
    "render_difficulty_selector",
]
