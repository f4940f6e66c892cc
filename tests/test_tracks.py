"""
Tests for custom study and smart review sessions.
"""

import random
from datetime import timedelta

import pytest

from vocab.errors import SessionStateError
from vocab.schemas import HistoryAction, RecordState, make_record_id
from vocab.sessions import CustomMode, TrackKind, start_custom_session, start_smart_session
from vocab.sessions.tracks import (
    ALL_DONE_MESSAGE,
    NO_WORDS_MESSAGE,
    NOTHING_SCHEDULED_MESSAGE,
    UNRATED_CUSTOM,
    UNRATED_SMART,
)

BENEFIT = {"word": "benefit", "meaning": "advantage", "source": "IELTS"}


def play(session, wrong=()):
    """Answer every card; words in `wrong` are missed once in round 1."""
    queue = session.queue
    while not queue.is_complete:
        current = queue.current()
        queue.answer(not (queue.round == 1 and current.word in wrong))
        queue.pass_current()


def key_of(data):
    return make_record_id(data.get("source"), data["word"], data["meaning"])


@pytest.fixture
def rng():
    return random.Random(42)


class TestStartCustom:

    def test_no_words(self):
        session, message = start_custom_session([])
        assert session is None
        assert message == NO_WORDS_MESSAGE

    def test_duplicates_studied_once(self, word, rng):
        session, _ = start_custom_session([word, {**word, "word": " ABANDON"}, BENEFIT], rng=rng)
        assert session.track == TrackKind.CUSTOM
        assert session.queue.deck_size == 2

    def test_mode_from_string(self, word, rng):
        session, _ = start_custom_session([word], mode="direct", rng=rng)
        assert session.custom_mode == CustomMode.DIRECT


class TestFinishCustom:

    def test_post_session_rating_and_unrated_word(self, service, clock, word, rng):
        session, _ = start_custom_session([word, BENEFIT], rng=rng)
        play(session)

        summary = session.finish(service, {key_of(word): 1})

        rated = service.get(key_of(word))
        assert rated.interval == 7
        assert rated.next_review_date == clock.today_start() + timedelta(days=7)
        assert rated.state == RecordState.REVIEWING

        unrated = service.get(key_of(BENEFIT))
        assert unrated.next_review_date == clock.today_start()
        assert unrated.state == RecordState.LEARNING
        assert unrated.last_event().data["reason"] == UNRATED_CUSTOM

        assert summary.total == 2
        assert summary.unrated == (key_of(BENEFIT),)

    def test_difficulty_scaled_uses_session_correctness(self, service, word, rng):
        session, _ = start_custom_session([word, BENEFIT], mode=CustomMode.DIFFICULTY_SCALED, rng=rng)
        play(session, wrong={"abandon"})

        session.finish(service, {key_of(word): 1, key_of(BENEFIT): 2})

        missed = service.get(key_of(word))
        assert missed.interval == 1
        assert missed.last_event().action == HistoryAction.INCORRECT
        assert missed.needs_next_round

        clean = service.get(key_of(BENEFIT))
        assert clean.interval == 4
        assert clean.last_event().action == HistoryAction.CORRECT

    def test_direct_mode(self, service, word, rng):
        session, _ = start_custom_session([word], mode=CustomMode.DIRECT, rng=rng)
        play(session)
        session.finish(service, {key_of(word): 3})
        assert service.get(key_of(word)).interval == 2

    def test_finish_before_complete_raises(self, service, word, rng):
        session, _ = start_custom_session([word, BENEFIT], rng=rng)
        with pytest.raises(SessionStateError):
            session.finish(service, {})
        assert service.get_all() == []

    def test_finish_twice_raises(self, service, word, rng):
        session, _ = start_custom_session([word], rng=rng)
        play(session)
        session.finish(service, {})
        with pytest.raises(SessionStateError):
            session.finish(service, {})

    def test_preview_interval(self, service, word, rng):
        session, _ = start_custom_session([word], mode=CustomMode.DIRECT, rng=rng)
        item = session.queue.current()
        assert session.preview_interval(service, item, 1) == 7
        assert session.preview_interval(service, item, 4) == 1

    def test_difficulty_scaled_preview_matches_schedule(self, service, word, rng):
        record = service.upsert(word)
        service.record_review_with_difficulty(record.id, 2, True)

        session, _ = start_custom_session([word], mode=CustomMode.DIFFICULTY_SCALED, rng=rng)
        play(session)
        item = session.rating_items()[0]
        # 4 days * ease 2.6 * growth 1.6 = 16.64
        assert session.preview_interval(service, item, 1) == 17

        session.finish(service, {key_of(word): 1})
        assert service.get(record.id).interval == 17

    def test_difficulty_scaled_preview_after_a_miss(self, service, word, rng):
        service.record_review_with_difficulty(service.upsert(word).id, 2, True)

        session, _ = start_custom_session([word], mode=CustomMode.DIFFICULTY_SCALED, rng=rng)
        play(session, wrong={"abandon"})
        assert session.preview_interval(service, session.rating_items()[0], 1) == 1

    def test_finish_keeps_stored_content(self, service, word, rng):
        service.upsert({**word, "pronunciation": "/əˈbændən/", "tags": ["b2"]})

        session, _ = start_custom_session([word], rng=rng)
        play(session)
        session.finish(service, {})

        record = service.get(key_of(word))
        assert record.pronunciation == "/əˈbændən/"
        assert record.tags == ["b2"]

    def test_finish_stores_session_tags(self, service, word, rng):
        session, _ = start_custom_session([{**word, "tags": ["b2", "verb"]}], rng=rng)
        assert session.queue.current().tags == ("b2", "verb")
        play(session)
        session.finish(service, {key_of(word): 2})
        assert service.get(key_of(word)).tags == ["b2", "verb"]


class TestSmartReview:

    def _scheduled(self, service, data, difficulty=2):
        record = service.upsert(data)
        return service.set_difficulty(record.id, difficulty)

    def test_empty_schedule_message(self, service, word):
        assert start_smart_session(service) == (None, NOTHING_SCHEDULED_MESSAGE)
        service.upsert(word)
        assert start_smart_session(service) == (None, NOTHING_SCHEDULED_MESSAGE)

    def test_all_done_message(self, service, clock, word):
        self._scheduled(service, word)
        assert start_smart_session(service) == (None, ALL_DONE_MESSAGE)

    def test_builds_session_from_due_records(self, service, clock, word, rng):
        record = self._scheduled(service, word)
        self._scheduled(service, BENEFIT, difficulty=1)
        clock.advance(days=4)

        session, _ = start_smart_session(service, rng=rng)
        assert session.track == TrackKind.SMART
        assert [i.record_id for i in session.queue.queue] == [record.id]

    def test_limit(self, service, clock, word, rng):
        self._scheduled(service, word)
        self._scheduled(service, BENEFIT)
        clock.advance(days=4)
        session, _ = start_smart_session(service, limit=1, rng=rng)
        assert session.queue.deck_size == 1

    def test_rating_recomputes_from_previous_interval(self, service, clock, word, rng):
        record = self._scheduled(service, word)
        clock.advance(days=4)
        session, _ = start_smart_session(service, rng=rng)
        play(session, wrong={"abandon"})

        item = session.rating_items()[0]
        assert session.preview_interval(service, item, 3) == 5

        summary = session.finish(service, {record.id: 3})
        updated = service.get(record.id)
        assert updated.interval == 5
        assert updated.next_review_date == clock.today_start() + timedelta(days=5)
        assert summary.unrated == ()

    def test_manual_date_wins(self, service, clock, word, rng):
        record = self._scheduled(service, word)
        clock.advance(days=4)
        session, _ = start_smart_session(service, rng=rng)
        play(session)

        target = clock.today() + timedelta(days=9)
        summary = session.finish(service, {record.id: 1}, manual_dates={record.id: target})

        updated = service.get(record.id)
        assert updated.next_review_date == clock.midnight_of(target)
        assert updated.interval == 9
        assert updated.last_event().action == HistoryAction.RESCHEDULED
        assert summary.unrated == ()

    def test_unrated_without_date_is_due_today(self, service, clock, word, rng):
        record = self._scheduled(service, word)
        clock.advance(days=4)
        session, _ = start_smart_session(service, rng=rng)
        play(session)

        summary = session.finish(service, {})
        updated = service.get(record.id)
        assert updated.next_review_date == clock.today_start()
        assert updated.last_event().data["reason"] == UNRATED_SMART
        assert summary.unrated == (record.id,)

    def test_record_deleted_mid_session(self, service, clock, word, rng):
        record = self._scheduled(service, word)
        clock.advance(days=4)
        session, _ = start_smart_session(service, rng=rng)
        play(session)
        service.delete(record.id)

        summary = session.finish(service, {record.id: 2})
        assert summary.missing == (record.id,)
        assert summary.total == 0
        assert service.get_all() == []
