import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vocab.clock import FixedClock
from vocab.schemas import HistoryAction, HistoryEvent, RecordState, VocabRecord, make_record_id
from vocab.service import VocabularyService
from vocab.store import MemorySnapshot, RecordStore

# Tuesday morning, UTC
START = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def backend():
    return MemorySnapshot()


@pytest.fixture
def store(backend, clock):
    return RecordStore(backend, clock)


@pytest.fixture
def service(store, clock):
    return VocabularyService(store, clock)


@pytest.fixture
def word():
    return {"word": "abandon", "meaning": "to leave behind", "source": "IELTS"}


def make_record(clock, word="abandon", meaning="to leave behind", source="IELTS", **overrides):
    """Build a record directly, bypassing the store."""
    now = clock.now()
    fields = {
        "id": make_record_id(source, word, meaning),
        "word": word,
        "meaning": meaning,
        "source": source,
        "next_review_date": clock.today_start(),
        "history": (HistoryEvent(timestamp=now, action=HistoryAction.CREATED),),
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return VocabRecord(**fields)


def reviewed_record(clock, days_ago, interval, **overrides):
    """A reviewing-state record last seen `days_ago` days before now."""
    last = clock.now() - timedelta(days=days_ago)
    defaults = {
        "state": RecordState.REVIEWING,
        "interval": interval,
        "repetitions": 3,
        "streak": 3,
        "times_reviewed": 3,
        "times_correct": 3,
        "last_review_date": last,
        "next_review_date": clock.today_start() - timedelta(days=days_ago - interval),
    }
    defaults.update(overrides)
    return make_record(clock, **defaults)
