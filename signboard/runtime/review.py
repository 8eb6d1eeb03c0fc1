"""
Review Machine - Owns the review state and the missing-word set.

The machine is the single authority for ReviewState. Callers describe
what happened (ReviewEvent) and whether playback is still busy; the
machine mutates the MissingWords where the event requires it, computes
the next state with next_state() and notifies listeners.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from signboard.runtime.missing import MissingWords
from signboard.runtime.states import ReviewEvent, ReviewState, Transition, next_state

logger = logging.getLogger(__name__)


class ReviewMachine:
    """
    Missing-word tracker and review-mode state machine.

    Example:
        machine = ReviewMachine()
        machine.speech_finalized(["very", "much"])   # SEQUENCING
        machine.queue_drained()                      # REVIEWING
        machine.resolve("very")                      # still REVIEWING
        machine.resolve("much")                      # IDLE
    """

    def __init__(self, history_limit: int = 500):
        self._state = ReviewState.IDLE
        self._missing = MissingWords()
        self._history: list[Transition] = []
        self._history_limit = history_limit
        self._listeners: list[Callable[[Transition], None]] = []

    @property
    def state(self) -> ReviewState:
        return self._state

    @property
    def missing(self) -> MissingWords:
        return self._missing

    @property
    def is_reviewing(self) -> bool:
        return self._state is ReviewState.REVIEWING

    @property
    def history(self) -> list[Transition]:
        return list(self._history)

    def speech_finalized(self, new_missing: Iterable[str] = (), *, busy: bool = True) -> list[str]:
        """New finalized speech arrived.

        Review is abandoned immediately; pending words are kept.

        Returns:
            Words newly added to the missing set
        """
        added = self._missing.add(new_missing)
        self._apply(ReviewEvent.SPEECH_FINALIZED, busy=busy)
        return added

    def drain_started(self) -> Transition:
        return self._apply(ReviewEvent.DRAIN_STARTED, busy=True)

    def queue_drained(self) -> Transition:
        """Playback emptied the queue; review if anything is missing."""
        return self._apply(ReviewEvent.QUEUE_DRAINED, busy=False)

    def skip_review(self, *, busy: bool = False) -> list[str]:
        """Dismiss every missing word.

        Returns:
            The words that were dismissed
        """
        dismissed = self._missing.clear()
        self._apply(ReviewEvent.REVIEW_SKIPPED, busy=busy)
        return dismissed

    def resolve(self, word: str, *, busy: bool = False) -> bool:
        """A word gained a library entry.

        Returns:
            True if the word was pending
        """
        removed = self._missing.discard(word)
        if removed:
            self._apply(ReviewEvent.WORD_RESOLVED, busy=busy)
        return removed

    def reevaluate(self, *, busy: bool = False) -> Transition:
        """Re-check the review state after an authoring round-trip."""
        return self._apply(ReviewEvent.WORD_RESOLVED, busy=busy)

    def stop(self) -> Transition:
        """Session ended: forget missing words, go idle."""
        self._missing.clear()
        return self._apply(ReviewEvent.SESSION_STOPPED, busy=False)

    def on_transition(self, callback: Callable[[Transition], None]) -> None:
        """Register a transition listener."""
        self._listeners.append(callback)

    def _apply(self, event: ReviewEvent, *, busy: bool) -> Transition:
        target = next_state(
            self._state,
            event,
            busy=busy,
            has_missing=bool(self._missing),
        )
        transition = Transition(event=event, from_state=self._state, to_state=target)
        self._state = target

        self._history.append(transition)
        if len(self._history) > self._history_limit:
            del self._history[: len(self._history) - self._history_limit]

        if transition.changed:
            logger.debug(
                f"Review state {transition.from_state.value} -> {target.value} "
                f"({event.value}, missing={len(self._missing)})"
            )

        for listener in self._listeners:
            try:
                listener(transition)
            except Exception as e:
                logger.error(f"Review transition listener error: {e}")

        return transition
