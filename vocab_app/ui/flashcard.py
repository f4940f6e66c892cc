"""
Flashcard UI Component

Front shows the meaning (the prompt); back adds the word and its details.
"""

from __future__ import annotations

import html

import streamlit as st

from vocab.sessions import StudyItem

CARD_PADDING = "32px 24px"
CARD_MIN_HEIGHT = "190px"
FRONT_BG_COLOR = "#f0f2f6"
CORRECT_BG_COLOR = "#e7f6ec"
WRONG_BG_COLOR = "#fdecec"


def _card(main: str, subtitle: str, corner: str, bg_color: str) -> str:
    corner_html = ""
    if corner:
        corner_html = (
            '<div style="position: absolute; top: 12px; right: 18px; font-size: 0.85em; '
            f'color: #666; font-style: italic;">{html.escape(corner)}</div>'
        )
    subtitle_html = ""
    if subtitle:
        subtitle_html = (
            '<p style="font-size: 1.15em; color: #555; font-style: italic; margin: 14px 0 0 0;">'
            f"{html.escape(subtitle)}</p>"
        )
    return (
        f'<div style="background-color: {bg_color}; padding: {CARD_PADDING}; border-radius: 15px; '
        f'min-height: {CARD_MIN_HEIGHT}; display: flex; flex-direction: column; align-items: center; '
        'justify-content: center; text-align: center; position: relative; '
        'box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);">'
        f"{corner_html}"
        '<h1 style="font-size: 2.4em; margin: 0; overflow-wrap: anywhere;">'
        f"{html.escape(main)}</h1>{subtitle_html}</div>"
    )


def render_card_front(item: StudyItem, round_number: int) -> None:
    corner = f"Round {round_number}"
    if item.part_of_speech:
        corner = f"{item.part_of_speech} · {corner}"
    st.markdown(_card(item.meaning, "", corner, FRONT_BG_COLOR), unsafe_allow_html=True)


def render_card_back(item: StudyItem, correct: bool) -> None:
    subtitle = item.pronunciation or item.meaning
    bg_color = CORRECT_BG_COLOR if correct else WRONG_BG_COLOR
    st.markdown(_card(item.word, subtitle, item.source, bg_color), unsafe_allow_html=True)
    if item.example:
        st.caption(item.example)
