"""
Sign Session - Wires speech, matching, playback and review together.

    feed_final(text)
        -> tokenize + match against the library snapshot
        -> missing words into the ReviewMachine (SPEECH_FINALIZED)
        -> play units into the PlaybackSequencer
    sequencer drains
        -> ReviewMachine.queue_drained() -> REVIEWING or IDLE
    save_sign(key, payload)
        -> snapshot swap, word resolved, store.put()

Everything runs on one asyncio event loop. Listeners registered with
on_event() receive SessionEvent objects for display, state, missing,
transcript, warning, authoring_requested and capture_error.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from signboard.compiler.matcher import MatchResult, PlayUnit, match_text
from signboard.compiler.text import normalize_key
from signboard.config import SignboardConfig
from signboard.errors import RecognitionError, StorageError
from signboard.library.assets import Asset, Payload
from signboard.library.snapshot import Library
from signboard.library.store import LibraryStore
from signboard.monitoring.logging import StructuredLogger, get_logger
from signboard.runtime.display import DisplayFrame, Renderer
from signboard.runtime.review import ReviewMachine
from signboard.runtime.sequencer import PlaybackSequencer
from signboard.runtime.states import ReviewState, Transition

logger = logging.getLogger(__name__)


@runtime_checkable
class AuthoringPort(Protocol):
    """Asset authoring collaborator (camera, file picker, recorder).

    request() opens the authoring flow for one word. The collaborator
    answers through SignSession.save_sign() and, when the user closes
    the flow, SignSession.finish_authoring().
    """

    def request(self, word: str) -> None:
        ...


@dataclass
class SessionEvent:
    """
    Something observable happened in the session.

    Attributes:
        event_type: display, state, missing, transcript, warning,
            authoring_requested or capture_error
        data: Event payload
        timestamp: When it happened
    """

    event_type: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "event": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp,
        }


class SignSession:
    """
    One listening session over a sign library.

    Example:
        session = SignSession(FileLibraryStore("./signs"), renderer=renderer)
        await session.load()

        session.feed_interim("thank yo")
        session.feed_final("Thank you very much")

        # Renderer, when a video ends:
        session.display_complete("thank you")

        # Authoring UI, for a missing word:
        session.save_sign("very", png_bytes)
        session.finish_authoring("very")

        session.stop()
    """

    def __init__(
        self,
        store: LibraryStore,
        config: Optional[SignboardConfig] = None,
        renderer: Optional[Renderer] = None,
        authoring: Optional[AuthoringPort] = None,
        structured_logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize the session.

        Args:
            store: Persistent library store
            config: Timing and matching configuration
            renderer: Display collaborator
            authoring: Asset authoring collaborator
            structured_logger: Event logger (default: global logger)
        """
        self.config = config or SignboardConfig()
        self.session_id = uuid.uuid4().hex[:8]

        self._store = store
        self._authoring = authoring
        self._library = Library()
        self._machine = ReviewMachine()
        self._sequencer = PlaybackSequencer(
            self._library,
            self.config,
            renderer=renderer,
            on_drained=self._on_drained,
            on_started=self._machine.drain_started,
        )
        self._sequencer.on_display(self._on_display)
        self._machine.on_transition(self._on_transition)

        self._transcript: list[str] = []
        self._interim = ""
        self._event_listeners: list[Callable[[SessionEvent], None]] = []
        self._log = (structured_logger or get_logger()).bind(session_id=self.session_id)

    # Read-only state

    @property
    def state(self) -> ReviewState:
        return self._machine.state

    @property
    def current_unit(self) -> Optional[PlayUnit]:
        return self._sequencer.current_unit

    @property
    def missing_words(self) -> list[str]:
        return self._machine.missing.as_list()

    @property
    def transcript(self) -> list[str]:
        """Finalized segments, oldest first."""
        return list(self._transcript)

    @property
    def interim(self) -> str:
        return self._interim

    @property
    def library(self) -> Library:
        return self._library

    @property
    def pending_units(self) -> list[PlayUnit]:
        return self._sequencer.pending

    @property
    def sequencer(self) -> PlaybackSequencer:
        return self._sequencer

    @property
    def review(self) -> ReviewMachine:
        return self._machine

    # Library

    async def load(self) -> int:
        """Load the persisted library into the snapshot.

        A store that cannot be read leaves the session with an empty
        library; the failure is logged, not raised.

        Returns:
            Number of signs loaded
        """
        try:
            entries = await asyncio.to_thread(self._store.get_all)
        except StorageError as e:
            self._log.storage_failed(e, operation="load")
            entries = {}

        self._library.replace(entries)
        for key in entries:
            self._machine.resolve(key, busy=self._sequencer.busy)

        logger.info(f"Session {self.session_id} loaded {len(entries)} signs")
        return len(entries)

    def save_sign(self, key: str, payload: Payload) -> Asset:
        """Add or replace a sign.

        The in-memory library is updated first. A store failure is
        reported as a warning event and the in-memory entry is kept.

        Args:
            key: Word or phrase; normalized before use
            payload: Image/video bytes or a data URL

        Returns:
            The stored asset

        Raises:
            ValueError: If the key normalizes to nothing
            UnsupportedAssetError: If the payload is not an image or video
        """
        key = normalize_key(key)
        asset = Asset.from_payload(payload)

        self._library.replace(self._library.with_entry(key, asset))
        if self._machine.resolve(key, busy=self._sequencer.busy):
            self._emit("missing", {"words": self.missing_words, "resolved": key})

        try:
            self._store.put(key, asset)
        except StorageError as e:
            self._log.storage_failed(e, operation="put", key=key)
            self._emit("warning", {"message": f"Sign '{key}' was not saved: {e.message}", "key": key})

        return asset

    def delete_sign(self, key: str) -> bool:
        """Remove a sign.

        Returns:
            True if the key was in the library
        """
        key = normalize_key(key)
        if key not in self._library:
            return False

        self._library.replace(self._library.without_entry(key))
        try:
            self._store.delete(key)
        except StorageError as e:
            self._log.storage_failed(e, operation="delete", key=key)
            self._emit("warning", {"message": f"Sign '{key}' was not removed: {e.message}", "key": key})

        return True

    # Speech

    def feed_interim(self, text: str) -> None:
        """Update the live, not yet final, transcript text."""
        self._interim = text

    def feed_final(self, text: str) -> MatchResult:
        """Process one finalized transcript segment.

        Must be called from inside the event loop. Review mode, if
        active, is abandoned at once; pending missing words are kept.

        Returns:
            The match result for the segment
        """
        self._interim = ""
        segment = text.strip()
        if segment:
            self._transcript.append(segment)
            self._emit("transcript", {"text": segment, "lines": len(self._transcript)})

        result = match_text(segment, self._library, max_window=self.config.max_phrase_window)
        added = self._machine.speech_finalized(result.missing, busy=True)
        if added:
            self._emit("missing", {"words": self.missing_words, "added": added})

        self._log.segment_matched(segment, units=len(result.units), missing=result.missing)
        self._sequencer.enqueue_and_drain(result.units)
        return result

    def display_complete(self, key: Optional[str] = None) -> bool:
        """Renderer finished showing the current unit (video media end)."""
        return self._sequencer.display_complete(key)

    # Review

    def skip_review(self) -> list[str]:
        """Dismiss every missing word.

        Returns:
            The dismissed words
        """
        dismissed = self._machine.skip_review(busy=self._sequencer.busy)
        if dismissed:
            self._emit("missing", {"words": [], "dismissed": dismissed})
        if self._sequencer.pending:
            self._sequencer.enqueue_and_drain()
        return dismissed

    def request_authoring(self, word: str) -> None:
        """Ask the authoring collaborator for a sign for one word."""
        word = normalize_key(word)
        self._emit("authoring_requested", {"word": word})
        if self._authoring is not None:
            self._authoring.request(word)

    def finish_authoring(self, word: Optional[str] = None) -> ReviewState:
        """The authoring flow was closed.

        Args:
            word: The word that was being authored, if any

        Returns:
            The review state afterwards
        """
        busy = self._sequencer.busy
        if word:
            key = normalize_key(word)
            if key in self._library and self._machine.resolve(key, busy=busy):
                self._emit("missing", {"words": self.missing_words, "resolved": key})
        self._machine.reevaluate(busy=busy)
        return self.state

    # Capture

    def report_capture_error(self, error: RecognitionError) -> None:
        """Surface a capture failure to listeners."""
        self._log.capture_error(error, fatal=error.fatal)
        self._emit("capture_error", {"message": error.message, "fatal": error.fatal})

    # Lifecycle

    def stop(self) -> None:
        """Stop playback and forget queue, missing words and transcript."""
        self._sequencer.stop()
        self._machine.stop()
        self._transcript.clear()
        self._interim = ""
        self._emit("missing", {"words": []})
        self._emit("transcript", {"text": "", "lines": 0})
        logger.info(f"Session {self.session_id} stopped")

    async def join(self) -> None:
        """Wait until playback has drained."""
        await self._sequencer.join()

    def on_event(self, callback: Callable[[SessionEvent], None]) -> None:
        """Register a session event listener."""
        self._event_listeners.append(callback)

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        event = SessionEvent(event_type=event_type, data=data)
        for listener in self._event_listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Session event listener error: {e}")

    def _on_display(self, frame: Optional[DisplayFrame]) -> None:
        if frame is None:
            self._emit("display", {"key": None})
            return
        self._log.unit_displayed(frame.key, frame.kind.value, is_phrase=frame.unit.is_phrase)
        self._emit("display", frame.to_dict())

    def _on_drained(self) -> None:
        self._machine.queue_drained()

    def _on_transition(self, transition: Transition) -> None:
        if not transition.changed:
            return
        if transition.to_state is ReviewState.REVIEWING:
            self._log.review_entered(self.missing_words)
        self._emit(
            "state",
            {
                "from": transition.from_state.value,
                "to": transition.to_state.value,
                "reason": transition.event.value,
            },
        )
