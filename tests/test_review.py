"""
Tests for the missing-word tracker and the review state machine.
"""

import pytest

from signboard.errors import InvalidTransitionError
from signboard.runtime import (
    MissingWords,
    ReviewEvent,
    ReviewMachine,
    ReviewState,
    VALID_TRANSITIONS,
    is_valid_transition,
    next_state,
)


class TestMissingWords:
    """Tests for MissingWords."""

    def test_add_rejects_duplicates(self):
        """Duplicates are not re-appended and keep their position."""
        missing = MissingWords(["cat", "dog"])
        added = missing.add(["dog", "bird", "cat"])

        assert added == ["bird"]
        assert missing.as_list() == ["cat", "dog", "bird"]

    def test_discard(self):
        missing = MissingWords(["cat"])
        assert missing.discard("cat") is True
        assert missing.discard("cat") is False
        assert not missing

    def test_clear_returns_pending(self):
        missing = MissingWords(["cat", "dog"])
        assert missing.clear() == ["cat", "dog"]
        assert len(missing) == 0

    def test_ignores_empty_words(self):
        missing = MissingWords(["", "cat"])
        assert list(missing) == ["cat"]


class TestTransitionTable:
    """Tests for VALID_TRANSITIONS and next_state."""

    def test_idle_cannot_jump_to_reviewing(self):
        assert not is_valid_transition(ReviewState.IDLE, ReviewState.REVIEWING)
        assert ReviewState.REVIEWING not in VALID_TRANSITIONS[ReviewState.IDLE]

    def test_speech_always_sequences(self):
        for state in ReviewState:
            assert next_state(
                state, ReviewEvent.SPEECH_FINALIZED, busy=True, has_missing=True
            ) is ReviewState.SEQUENCING

    def test_drained_with_missing_reviews(self):
        assert next_state(
            ReviewState.SEQUENCING, ReviewEvent.QUEUE_DRAINED, busy=False, has_missing=True
        ) is ReviewState.REVIEWING

    def test_drained_without_missing_idles(self):
        assert next_state(
            ReviewState.SEQUENCING, ReviewEvent.QUEUE_DRAINED, busy=False, has_missing=False
        ) is ReviewState.IDLE

    def test_drained_while_busy_raises(self):
        """Queue and review mode are mutually exclusive."""
        with pytest.raises(InvalidTransitionError):
            next_state(
                ReviewState.SEQUENCING, ReviewEvent.QUEUE_DRAINED, busy=True, has_missing=True
            )

    def test_skip_while_busy_keeps_sequencing(self):
        assert next_state(
            ReviewState.SEQUENCING, ReviewEvent.REVIEW_SKIPPED, busy=True, has_missing=False
        ) is ReviewState.SEQUENCING

    def test_resolution_outside_review_is_unchanged(self):
        assert next_state(
            ReviewState.SEQUENCING, ReviewEvent.WORD_RESOLVED, busy=True, has_missing=False
        ) is ReviewState.SEQUENCING

    def test_stop_always_idles(self):
        for state in ReviewState:
            assert next_state(
                state, ReviewEvent.SESSION_STOPPED, busy=False, has_missing=True
            ) is ReviewState.IDLE


class TestReviewMachine:
    """Tests for ReviewMachine."""

    @pytest.fixture
    def reviewing(self):
        machine = ReviewMachine()
        machine.speech_finalized(["very", "much"])
        machine.queue_drained()
        return machine

    def test_starts_idle(self):
        machine = ReviewMachine()
        assert machine.state is ReviewState.IDLE
        assert not machine.missing

    def test_drain_enters_review(self, reviewing):
        assert reviewing.state is ReviewState.REVIEWING
        assert reviewing.is_reviewing

    def test_speech_interrupts_review_and_keeps_missing(self, reviewing):
        """New speech hides review but pending words stay."""
        added = reviewing.speech_finalized(["thanks"])

        assert reviewing.state is ReviewState.SEQUENCING
        assert added == ["thanks"]
        assert reviewing.missing.as_list() == ["very", "much", "thanks"]

    def test_resolution_until_empty(self, reviewing):
        """Removing the last missing word returns to IDLE."""
        assert reviewing.resolve("very") is True
        assert reviewing.state is ReviewState.REVIEWING

        assert reviewing.resolve("much") is True
        assert reviewing.state is ReviewState.IDLE

    def test_resolving_unknown_word(self, reviewing):
        assert reviewing.resolve("unknown") is False
        assert reviewing.state is ReviewState.REVIEWING

    def test_skip_review(self, reviewing):
        dismissed = reviewing.skip_review()

        assert dismissed == ["very", "much"]
        assert reviewing.state is ReviewState.IDLE
        assert not reviewing.missing

    def test_stop(self, reviewing):
        reviewing.stop()
        assert reviewing.state is ReviewState.IDLE
        assert not reviewing.missing

    def test_reevaluate_after_authoring(self, reviewing):
        """Closing authoring without a save stays in review."""
        reviewing.reevaluate()
        assert reviewing.state is ReviewState.REVIEWING

    def test_history_and_listeners(self):
        machine = ReviewMachine(history_limit=2)
        seen = []
        machine.on_transition(seen.append)

        machine.speech_finalized(["a"])
        machine.queue_drained()
        machine.skip_review()

        assert [t.to_state for t in seen] == [
            ReviewState.SEQUENCING,
            ReviewState.REVIEWING,
            ReviewState.IDLE,
        ]
        assert len(machine.history) == 2
        assert machine.history[-1].event is ReviewEvent.REVIEW_SKIPPED

    def test_listener_errors_do_not_break_transitions(self):
        machine = ReviewMachine()

        def broken(transition):
            raise RuntimeError("listener failed")

        machine.on_transition(broken)
        machine.speech_finalized(["a"])

        assert machine.state is ReviewState.SEQUENCING
