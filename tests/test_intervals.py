"""
Tests for the interval and ease arithmetic.

Tests cover:
- Half-up rounding and input clamping
- SM-2 ease update and its floor
- First/second/later repetition intervals
- Lapse threshold
- State transition rule
- Difficulty-scaled and post-session intervals
"""

from datetime import datetime, timedelta, timezone

import pytest

from vocab.schemas import RecordState
from vocab.srs import intervals
from vocab.srs.constants import Difficulty, MIN_EASE_FACTOR


def sm2(quality, interval=0, ease_factor=2.5, repetitions=0, streak=0, state=RecordState.NEW):
    return intervals.apply_sm2(
        interval=interval,
        ease_factor=ease_factor,
        repetitions=repetitions,
        streak=streak,
        times_reviewed=0,
        times_correct=0,
        state=state,
        quality=quality,
    )


class TestRounding:

    def test_half_rounds_up(self):
        assert intervals.round_half_up(2.5) == 3
        assert intervals.round_half_up(3.5) == 4
        assert intervals.round_half_up(2.49) == 2

    def test_quality_clamped(self):
        assert intervals.clamp_quality(-2) == 0
        assert intervals.clamp_quality(9) == 5
        assert intervals.clamp_quality(3.5) == 4

    def test_difficulty_clamped_and_rounded(self):
        assert intervals.clamp_difficulty(0) == Difficulty.EASY
        assert intervals.clamp_difficulty(7) == Difficulty.HARD
        assert intervals.clamp_difficulty(2.5) == Difficulty.MEDIUM
        assert isinstance(intervals.clamp_difficulty(2), Difficulty)


class TestEaseFactor:

    def test_perfect_recall_raises_ease(self):
        assert intervals.update_ease_factor(2.5, 5) == pytest.approx(2.6)

    def test_good_recall_keeps_ease(self):
        assert intervals.update_ease_factor(2.5, 4) == pytest.approx(2.5)

    def test_hard_recall_lowers_ease(self):
        assert intervals.update_ease_factor(2.5, 3) == pytest.approx(2.36)

    def test_floor(self):
        assert intervals.update_ease_factor(1.3, 0) == MIN_EASE_FACTOR
        assert intervals.update_ease_factor(1.35, 1) == MIN_EASE_FACTOR

    def test_ease_never_drops_below_floor_over_many_failures(self):
        ease = 2.5
        for _ in range(20):
            ease = sm2(0, ease_factor=ease).ease_factor
        assert ease == MIN_EASE_FACTOR


class TestSm2Intervals:

    @pytest.mark.parametrize("quality, expected", [(3, 1), (4, 3), (5, 7)])
    def test_first_interval_by_quality_band(self, quality, expected):
        update = sm2(quality)
        assert update.interval == expected
        assert update.repetitions == 1
        assert update.streak == 1
        assert update.times_correct == 1

    def test_second_interval_is_six_days(self):
        update = sm2(4, interval=3, repetitions=1, streak=1, state=RecordState.REVIEWING)
        assert update.interval == 6
        assert update.repetitions == 2

    def test_later_intervals_grow_by_ease(self):
        update = sm2(4, interval=6, ease_factor=2.5, repetitions=2, streak=2, state=RecordState.REVIEWING)
        assert update.interval == 15

    def test_failed_recall_resets(self):
        update = sm2(2, interval=15, repetitions=3, streak=3, state=RecordState.REVIEWING)
        assert update.interval == 1
        assert update.repetitions == 0
        assert update.streak == 0
        assert update.times_reviewed == 1
        assert update.times_correct == 0
        assert update.state == RecordState.LEARNING


class TestLapse:

    def test_threshold_has_thirty_day_minimum(self):
        assert intervals.lapse_threshold(4) == timedelta(days=30)
        assert intervals.lapse_threshold(0) == timedelta(days=30)

    def test_threshold_scales_with_interval(self):
        assert intervals.lapse_threshold(20) == timedelta(days=60)

    def test_is_lapsed(self):
        now = datetime(2026, 3, 10, tzinfo=timezone.utc)
        assert intervals.is_lapsed(now - timedelta(days=40), now, 4)
        assert intervals.is_lapsed(now - timedelta(days=30), now, 4)
        assert not intervals.is_lapsed(now - timedelta(days=29), now, 4)
        assert not intervals.is_lapsed(now - timedelta(days=40), now, 20)

    def test_never_reviewed_cannot_lapse(self):
        now = datetime(2026, 3, 10, tzinfo=timezone.utc)
        assert not intervals.is_lapsed(None, now, 0)

    def test_lapsed_ease_penalty_has_floor(self):
        assert intervals.lapsed_ease_factor(2.5) == pytest.approx(2.25)
        assert intervals.lapsed_ease_factor(1.35) == MIN_EASE_FACTOR


class TestStateTransition:

    def test_reviewing_after_first_repetition(self):
        assert intervals.next_state(RecordState.NEW, 1, 1) == RecordState.REVIEWING

    def test_learning_without_repetitions(self):
        assert intervals.next_state(RecordState.REVIEWING, 0, 0) == RecordState.LEARNING

    def test_mastered_from_reviewing(self):
        assert intervals.next_state(RecordState.REVIEWING, 5, 3) == RecordState.MASTERED

    def test_mastered_needs_streak(self):
        assert intervals.next_state(RecordState.REVIEWING, 6, 2) == RecordState.REVIEWING

    @pytest.mark.parametrize("previous", [RecordState.NEW, RecordState.LEARNING])
    def test_no_jump_to_mastered(self, previous):
        assert intervals.next_state(previous, 5, 5) == RecordState.REVIEWING


class TestDifficultyScaledInterval:

    def test_incorrect_is_one_day(self):
        assert intervals.difficulty_scaled_interval(10, 3, 2.5, Difficulty.EASY, False) == 1

    @pytest.mark.parametrize("difficulty, expected", [
        (Difficulty.EASY, 7),
        (Difficulty.MEDIUM_EASY, 4),
        (Difficulty.MEDIUM, 2),
        (Difficulty.HARD, 1),
    ])
    def test_first_repetition_uses_base(self, difficulty, expected):
        assert intervals.difficulty_scaled_interval(0, 0, 2.5, difficulty, True) == expected

    def test_later_repetition_scales(self):
        # 4 * 2.6 * 1.6 = 16.64
        assert intervals.difficulty_scaled_interval(4, 1, 2.6, Difficulty.EASY, True) == 17
        # max(1, 0) * 1.3 * 1.0 = 1.3
        assert intervals.difficulty_scaled_interval(0, 2, 1.3, Difficulty.HARD, True) == 1


class TestPostSessionInterval:

    def test_no_previous_interval_uses_base(self):
        assert intervals.post_session_interval(0, Difficulty.EASY) == 7
        assert intervals.post_session_interval(0, Difficulty.HARD) == 1

    def test_scales_previous_interval(self):
        assert intervals.post_session_interval(10, Difficulty.EASY) == 20
        assert intervals.post_session_interval(10, Difficulty.MEDIUM_EASY) == 16
        assert intervals.post_session_interval(10, Difficulty.MEDIUM) == 13  # 12.5 rounds up

    def test_hard_shrinks_but_never_below_one(self):
        assert intervals.post_session_interval(10, Difficulty.HARD) == 8
        assert intervals.post_session_interval(1, Difficulty.HARD) == 1
