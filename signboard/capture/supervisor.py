"""
Capture Supervisor - Keeps speech recognition running for a session.

Recognisers stop on their own: after silence, after a network hiccup,
or when the platform aborts them. While capture is active the supervisor
restarts the source after a short debounce. The exception is a denied
microphone, which ends capture and is reported to the session.

Error policy:
    NoSpeechError, RecognitionAbortedError  -> ignored, restart
    CapturePermissionError                  -> stop, capture_error event
    other RecognitionError                  -> logged, restart
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, TYPE_CHECKING

from signboard.capture.source import RecognitionSource
from signboard.errors import RecognitionError

if TYPE_CHECKING:
    from signboard.runtime.session import SignSession

logger = logging.getLogger(__name__)


class CaptureSupervisor:
    """
    Feeds recogniser output into a session and restarts the recogniser.

    Example:
        supervisor = CaptureSupervisor(MicrophoneSource, session)
        supervisor.start()
        ...
        await supervisor.stop()
    """

    def __init__(
        self,
        source_factory: Callable[[], RecognitionSource],
        session: "SignSession",
        restart_delay: Optional[float] = None,
    ):
        """
        Args:
            source_factory: Builds a fresh source for every (re)start
            session: Session receiving interim and final text
            restart_delay: Debounce before a restart
                (default: session.config.restart_delay_seconds)
        """
        self._source_factory = source_factory
        self._session = session
        self.restart_delay = (
            session.config.restart_delay_seconds if restart_delay is None else restart_delay
        )

        self._active = False
        self._task: Optional[asyncio.Task] = None
        self._restarts = 0
        self._last_error: Optional[RecognitionError] = None

    @property
    def is_listening(self) -> bool:
        return self._active

    @property
    def restarts(self) -> int:
        return self._restarts

    @property
    def last_error(self) -> Optional[RecognitionError]:
        return self._last_error

    def start(self) -> asyncio.Task:
        """Start capture. Calling start() while listening is a no-op."""
        if self._active and self._task is not None:
            return self._task
        self._active = True
        self._task = asyncio.get_running_loop().create_task(self._run(), name="signboard-capture")
        return self._task

    async def stop(self) -> None:
        """Stop capture and wait for the running source to exit."""
        self._active = False
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait(self) -> None:
        """Wait until capture ends on its own."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while self._active:
            source = self._source_factory()
            try:
                async for result in source.results():
                    if not self._active:
                        break
                    if result.is_final:
                        self._session.feed_final(result.text)
                    else:
                        self._session.feed_interim(result.text)
            except RecognitionError as e:
                self._last_error = e
                if e.fatal:
                    logger.error(f"Capture stopped: {e.message}")
                    self._active = False
                    self._session.report_capture_error(e)
                    break
                if e.transient:
                    logger.debug(f"Recognition ended: {e.message}")
                else:
                    logger.warning(f"Recognition error, restarting: {e.message}")

            if not self._active:
                break
            if not getattr(source, "restartable", True):
                logger.info("Recognition source exhausted")
                self._active = False
                break

            self._restarts += 1
            await asyncio.sleep(self.restart_delay)
