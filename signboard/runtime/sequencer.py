"""
Playback Sequencer - Single-concurrency drain loop over play units.

Displays one unit at a time in strict FIFO order and suspends until
that unit's display is reported complete. Two things can complete a
unit, both through the same CompletionWait:

    - the sequencer's dwell timer (images and textual fallbacks)
    - the renderer's display_complete() signal (video media end)

Only one drain task is ever active. Calling enqueue_and_drain() while
a drain is running just appends; the running loop re-checks the queue
after every completion.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from enum import Enum
from typing import Callable, Iterable, Optional

from signboard.compiler.matcher import PlayUnit
from signboard.config import SignboardConfig
from signboard.errors import SequencerInvariantError
from signboard.library.snapshot import Library
from signboard.runtime.display import DisplayFrame, Renderer

logger = logging.getLogger(__name__)


class CompletionOutcome(Enum):
    """How a completion wait ended."""

    COMPLETED = "completed"
    """The unit finished displaying."""

    CANCELLED = "cancelled"
    """Force-resolved by stop(); the drain loop must exit."""


class CompletionWait:
    """
    Single pending "wait for next signal" slot.

    A wait is armed once per displayed unit, resolved exactly once,
    and can be force-resolved with CANCELLED. Arming while a wait is
    still outstanding is a programming error.

    Example:
        wait = CompletionWait()
        future = wait.arm()
        wait.resolve()           # True
        wait.resolve()           # False, already resolved
        await future             # CompletionOutcome.COMPLETED
    """

    def __init__(self) -> None:
        self._future: Optional[asyncio.Future] = None

    @property
    def pending(self) -> bool:
        """True while an armed wait has not been resolved."""
        return self._future is not None and not self._future.done()

    def arm(self) -> asyncio.Future:
        """Create the outstanding wait.

        Raises:
            SequencerInvariantError: If a wait is already outstanding
        """
        if self.pending:
            raise SequencerInvariantError("A completion wait is already outstanding")
        self._future = asyncio.get_running_loop().create_future()
        return self._future

    def is_current(self, future: asyncio.Future) -> bool:
        return self._future is future

    def resolve(self, outcome: CompletionOutcome = CompletionOutcome.COMPLETED) -> bool:
        """Resolve the outstanding wait.

        Returns:
            True if a pending wait was resolved by this call
        """
        if not self.pending:
            return False
        self._future.set_result(outcome)
        return True

    def cancel(self) -> bool:
        """Force-resolve the outstanding wait with CANCELLED."""
        return self.resolve(CompletionOutcome.CANCELLED)


class PlaybackSequencer:
    """
    FIFO playback of play units with externally-signaled completion.

    Example:
        sequencer = PlaybackSequencer(library, renderer=renderer)
        sequencer.enqueue_and_drain(result.units)

        # From the renderer, when a video ends:
        sequencer.display_complete("thank you")

        # Session stop:
        sequencer.stop()
    """

    def __init__(
        self,
        library: Library,
        config: Optional[SignboardConfig] = None,
        renderer: Optional[Renderer] = None,
        on_drained: Optional[Callable[[], None]] = None,
        on_started: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize the sequencer.

        Args:
            library: Shared library snapshot holder
            config: Timing configuration
            renderer: Display collaborator
            on_drained: Called once the queue is exhausted
            on_started: Called when a new drain task starts
        """
        self.config = config or SignboardConfig()
        self._library = library
        self._renderer = renderer
        self._on_drained = on_drained
        self._on_started = on_started
        self._display_listeners: list[Callable[[Optional[DisplayFrame]], None]] = []

        self._queue: deque[PlayUnit] = deque()
        self._current: Optional[DisplayFrame] = None
        self._draining = False
        self._wait = CompletionWait()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()
        self._displayed = 0

    @property
    def current_unit(self) -> Optional[PlayUnit]:
        """The unit awaiting its completion signal, if any."""
        return self._current.unit if self._current else None

    @property
    def current_frame(self) -> Optional[DisplayFrame]:
        return self._current

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def pending(self) -> list[PlayUnit]:
        """Queued units not yet displayed."""
        return list(self._queue)

    @property
    def has_outstanding_wait(self) -> bool:
        return self._wait.pending

    @property
    def busy(self) -> bool:
        """Queue non-empty or a drain is running."""
        return bool(self._queue) or self._draining

    @property
    def displayed_count(self) -> int:
        return self._displayed

    def on_display(self, callback: Callable[[Optional[DisplayFrame]], None]) -> None:
        """Register a listener for every published frame (None = cleared)."""
        self._display_listeners.append(callback)

    def enqueue(self, units: Iterable[PlayUnit]) -> int:
        """Append units to the back of the queue.

        Returns:
            Number of units appended
        """
        before = len(self._queue)
        self._queue.extend(units)
        return len(self._queue) - before

    def enqueue_and_drain(self, units: Iterable[PlayUnit] = ()) -> Optional[asyncio.Task]:
        """Append units and make sure a drain is running.

        Must be called from inside the event loop. While a drain is in
        progress this only appends.

        Returns:
            The active drain task
        """
        self.enqueue(units)
        if self._draining:
            return self._task

        self._draining = True
        if self._on_started:
            self._on_started()

        task = asyncio.get_running_loop().create_task(self._drain(), name="signboard-drain")
        self._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def display_complete(self, key: Optional[str] = None) -> bool:
        """External completion signal for the current unit.

        Args:
            key: Key the renderer finished showing. A key that does not
                match the current unit is a stale signal and is ignored.

        Returns:
            True if the current unit was completed
        """
        if self._current is None:
            return False
        if key is not None and key != self._current.key:
            logger.debug(f"Ignoring stale completion for '{key}' (showing '{self._current.key}')")
            return False
        return self._wait.resolve()

    def stop(self) -> int:
        """Clear the queue and force-resolve any outstanding wait.

        The suspended drain loop wakes with CANCELLED and exits without
        reporting a drain.

        Returns:
            Number of queued units discarded
        """
        dropped = len(self._queue)
        self._queue.clear()
        self._cancel_timer()
        self._wait.cancel()
        self._task = None
        self._draining = False

        had_frame = self._current is not None
        self._current = None
        if had_frame:
            self._publish(None)

        if dropped:
            logger.info(f"Playback stopped, dropped {dropped} queued units")
        return dropped

    async def join(self) -> None:
        """Wait for every drain task, including cancelled ones, to exit."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _drain(self) -> None:
        task = asyncio.current_task()
        loop = asyncio.get_running_loop()
        cancelled = False
        owned = False

        try:
            # stop() retires a drain by clearing self._task, possibly
            # before the task has run at all
            while self._queue and self._task is task:
                unit = self._queue.popleft()
                frame = DisplayFrame(unit=unit, asset=self._library.get(unit.key))

                waiter = self._wait.arm()
                self._current = frame
                self._displayed += 1
                logger.debug(f"Displaying '{unit.key}' ({frame.kind.value})")
                self._publish(frame)

                if not frame.waits_for_media_end:
                    self._timer = loop.call_later(
                        self.config.dwell_seconds, self._dwell_elapsed, waiter
                    )

                outcome = await waiter
                if outcome is CompletionOutcome.CANCELLED or self._task is not task:
                    cancelled = True
                    break
                self._cancel_timer()
        finally:
            if self._task is task:
                owned = True
                self._cancel_timer()
                self._wait.cancel()
                self._current = None
                self._draining = False
                self._task = None

        if cancelled or not owned:
            return

        self._publish(None)
        if self._on_drained:
            self._on_drained()

    def _dwell_elapsed(self, waiter: asyncio.Future) -> None:
        self._timer = None
        if self._wait.is_current(waiter):
            self._wait.resolve()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _publish(self, frame: Optional[DisplayFrame]) -> None:
        if self._renderer is not None:
            try:
                self._renderer.show(frame)
            except Exception as e:
                logger.error(f"Renderer error: {e}")
        for listener in self._display_listeners:
            try:
                listener(frame)
            except Exception as e:
                logger.error(f"Display listener error: {e}")
