"""
Review States - Explicit playback/review state machine.

States:
    SEQUENCING  queue non-empty or a drain is running
    REVIEWING   queue drained, missing words presented to the user
    IDLE        queue drained, nothing missing

All state changes go through next_state(); illegal combinations
(reviewing while units are still queued) raise InvalidTransitionError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import time

from signboard.errors import InvalidTransitionError


class ReviewState(Enum):
    """Session display mode."""
    SEQUENCING = "sequencing"
    REVIEWING = "reviewing"
    IDLE = "idle"


class ReviewEvent(Enum):
    """Inputs to the review state machine."""

    SPEECH_FINALIZED = "speech_finalized"
    """A finalized transcript segment arrived. Always takes priority."""

    DRAIN_STARTED = "drain_started"
    """The sequencer started consuming the queue."""

    QUEUE_DRAINED = "queue_drained"
    """The sequencer emptied the queue."""

    REVIEW_SKIPPED = "review_skipped"
    """The user dismissed every missing word."""

    WORD_RESOLVED = "word_resolved"
    """A missing word gained a library entry."""

    SESSION_STOPPED = "session_stopped"
    """The listening session ended."""


# Valid state transitions (from -> to)
VALID_TRANSITIONS: dict[ReviewState, set[ReviewState]] = {
    ReviewState.IDLE: {ReviewState.IDLE, ReviewState.SEQUENCING},
    ReviewState.SEQUENCING: {ReviewState.SEQUENCING, ReviewState.REVIEWING, ReviewState.IDLE},
    ReviewState.REVIEWING: {ReviewState.REVIEWING, ReviewState.SEQUENCING, ReviewState.IDLE},
}


def is_valid_transition(from_state: ReviewState, to_state: ReviewState) -> bool:
    """Check if a state transition is valid."""
    return to_state in VALID_TRANSITIONS.get(from_state, set())


def next_state(
    state: ReviewState,
    event: ReviewEvent,
    *,
    busy: bool,
    has_missing: bool,
) -> ReviewState:
    """Single transition function for the review state machine.

    Args:
        state: Current state
        event: What happened
        busy: Queue non-empty or a drain is running
        has_missing: MissingSet non-empty (after the event's own mutation)

    Returns:
        The next state

    Raises:
        InvalidTransitionError: For transitions the machine forbids
    """
    if event in (ReviewEvent.SPEECH_FINALIZED, ReviewEvent.DRAIN_STARTED):
        target = ReviewState.SEQUENCING

    elif event is ReviewEvent.QUEUE_DRAINED:
        if busy:
            raise InvalidTransitionError(
                state.value,
                "drained",
                message="Queue reported drained while units are still pending",
            )
        target = ReviewState.REVIEWING if has_missing else ReviewState.IDLE

    elif event is ReviewEvent.REVIEW_SKIPPED:
        target = ReviewState.SEQUENCING if busy else ReviewState.IDLE

    elif event is ReviewEvent.WORD_RESOLVED:
        if state is ReviewState.REVIEWING:
            target = ReviewState.REVIEWING if has_missing else ReviewState.IDLE
        else:
            target = state

    elif event is ReviewEvent.SESSION_STOPPED:
        target = ReviewState.IDLE

    else:
        raise InvalidTransitionError(state.value, str(event), message=f"Unknown event: {event}")

    if target is ReviewState.REVIEWING and busy:
        raise InvalidTransitionError(
            state.value,
            target.value,
            message="Cannot review missing words while units are queued",
        )

    if not is_valid_transition(state, target):
        raise InvalidTransitionError(state.value, target.value)

    return target


@dataclass(frozen=True)
class Transition:
    """Record of one applied transition."""
    event: ReviewEvent
    from_state: ReviewState
    to_state: ReviewState
    timestamp: float = field(default_factory=time.time)

    @property
    def changed(self) -> bool:
        return self.from_state is not self.to_state
