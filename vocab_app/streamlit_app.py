"""
Vocabulary Trainer - Main App

Run with: streamlit run vocab_app/streamlit_app.py
"""

import streamlit as st

from vocab import config
from vocab_app.router import PAGES
from vocab_app.state import ensure_session_state, get_service


# ---- Page Setup ----

st.set_page_config(
    page_title="Vocabulary Trainer",
    page_icon="📚",
    layout="centered"
)

config.configure_logging()

service = get_service()
ensure_session_state(service)

# Due/overdue buckets are derived per render; a new day only needs a note
if st.session_state.rollover.check():
    st.toast("A new day has started. Due words were refreshed.")


# ---- Navigation ----

titles = [page.title for page in PAGES]
selected = st.sidebar.radio("Go to", titles, label_visibility="collapsed")

if config.is_test_mode():
    st.sidebar.warning("TEST MODE - using the test snapshot")

stats = service.get_stats()
st.sidebar.metric("Due today", stats.due_today)
st.sidebar.metric("Overdue", stats.overdue)

PAGES[titles.index(selected)].render(service)
