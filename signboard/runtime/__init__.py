"""
Runtime - Playback sequencing, review state and the session that ties them.

Components:
    PlaybackSequencer - FIFO display of play units, one at a time
    ReviewMachine     - Missing words + SEQUENCING/REVIEWING/IDLE state
    SignSession       - Speech in, display frames and events out

Example:
    session = SignSession(MemoryLibraryStore(), renderer=renderer)
    await session.load()
    session.feed_final("thank you very much")
    await session.join()
    session.state            # ReviewState.REVIEWING
    session.missing_words    # ["thank", "you", "very", "much"]
"""

from signboard.runtime.display import DisplayFrame, DisplayKind, Renderer
from signboard.runtime.missing import MissingWords
from signboard.runtime.review import ReviewMachine
from signboard.runtime.sequencer import (
    CompletionOutcome,
    CompletionWait,
    PlaybackSequencer,
)
from signboard.runtime.session import AuthoringPort, SessionEvent, SignSession
from signboard.runtime.states import (
    ReviewEvent,
    ReviewState,
    Transition,
    VALID_TRANSITIONS,
    is_valid_transition,
    next_state,
)

__all__ = [
    # Display
    "DisplayFrame",
    "DisplayKind",
    "Renderer",
    # States
    "ReviewState",
    "ReviewEvent",
    "Transition",
    "VALID_TRANSITIONS",
    "is_valid_transition",
    "next_state",
    # Review
    "MissingWords",
    "ReviewMachine",
    # Sequencer
    "CompletionOutcome",
    "CompletionWait",
    "PlaybackSequencer",
    # Session
    "AuthoringPort",
    "SessionEvent",
    "SignSession",
]
