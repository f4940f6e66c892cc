"""
Study sessions: round-based queue and the custom / smart study tracks.
"""

from vocab.sessions.types import (
    CardProgress,
    CustomMode,
    RoundOutcome,
    SessionSummary,
    StudyItem,
    TrackKind,
)
from vocab.sessions.round_queue import RoundQueue
from vocab.sessions.tracks import (
    StudySession,
    start_custom_session,
    start_smart_session,
)


__all__ = [
    "CardProgress",
    "CustomMode",
    "RoundOutcome",
    "SessionSummary",
    "StudyItem",
    "TrackKind",
    "RoundQueue",
    "StudySession",
    "start_custom_session",
    "start_smart_session",
]
