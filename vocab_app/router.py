"""
Simple page router for the Streamlit sidebar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from vocab.service import VocabularyService
from vocab_app.pages.calendar import render_calendar_page
from vocab_app.pages.library import render_library_page
from vocab_app.pages.study import render_study_page


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[VocabularyService], None]


PAGES = [
    AppPage(title="Study", render=render_study_page),
    AppPage(title="Calendar", render=render_calendar_page),
    AppPage(title="Library", render=render_library_page),
]
