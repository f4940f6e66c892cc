"""
Exception hierarchy for the vocabulary core.
"""

from __future__ import annotations


class VocabError(Exception):
    """Base class for all vocabulary-core errors."""


class SnapshotError(VocabError):
    """Reading or writing the persisted snapshot failed."""


class StaleRecordError(VocabError):
    """A computed record was saved on top of a newer stored version."""

    def __init__(self, record_id: str, expected: int, found: int):
        super().__init__(
            f"Record {record_id!r} changed underneath: expected version {expected}, found {found}"
        )
        self.record_id = record_id
        self.expected = expected
        self.found = found


class InvalidWordDataError(VocabError):
    """Imported word data is missing its word or meaning."""


class SessionStateError(VocabError):
    """A study-session command was issued in the wrong phase."""
