"""
Microphone Source - Live capture through the SpeechRecognition package.

Requires the ``microphone`` extra (SpeechRecognition + PyAudio):

    pip install signboard[microphone]

Each phrase is captured and recognised off the event loop. The source
ends on the first failure; CaptureSupervisor decides whether to restart.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Optional

import speech_recognition as sr

from signboard.capture.source import RecognitionResult
from signboard.errors import CapturePermissionError, NoSpeechError, RecognitionError

logger = logging.getLogger(__name__)


class MicrophoneSource:
    """
    Speech source backed by ``sr.Microphone`` and Google Web Speech.

    Example:
        supervisor = CaptureSupervisor(lambda: MicrophoneSource(language="en-US"), session)
        supervisor.start()
    """

    restartable = True

    def __init__(
        self,
        language: str = "en-US",
        timeout: Optional[float] = 5.0,
        phrase_time_limit: Optional[float] = 10.0,
        ambient_duration: float = 0.5,
        recognizer: Optional[sr.Recognizer] = None,
        microphone_factory: Callable[[], Any] = sr.Microphone,
    ):
        """
        Args:
            language: BCP-47 language tag passed to the recogniser
            timeout: Seconds to wait for speech to start
            phrase_time_limit: Longest phrase captured in one go
            ambient_duration: Noise calibration time on first use
            recognizer: Recogniser instance (default: new sr.Recognizer)
            microphone_factory: Builds the audio source context manager
        """
        self.language = language
        self.timeout = timeout
        self.phrase_time_limit = phrase_time_limit
        self.ambient_duration = ambient_duration
        self._recognizer = recognizer or sr.Recognizer()
        self._microphone_factory = microphone_factory
        self._calibrated = False

    async def results(self) -> AsyncIterator[RecognitionResult]:
        while True:
            text = await asyncio.to_thread(self._listen_once)
            if text:
                yield RecognitionResult(text=text, is_final=True)

    def _listen_once(self) -> str:
        try:
            with self._microphone_factory() as source:
                if not self._calibrated:
                    self._recognizer.adjust_for_ambient_noise(source, duration=self.ambient_duration)
                    self._calibrated = True
                audio = self._recognizer.listen(
                    source,
                    timeout=self.timeout,
                    phrase_time_limit=self.phrase_time_limit,
                )
        except sr.WaitTimeoutError as e:
            raise NoSpeechError("No speech detected") from e
        except OSError as e:
            raise CapturePermissionError(f"Microphone unavailable: {e}") from e

        try:
            text = self._recognizer.recognize_google(audio, language=self.language)
        except sr.UnknownValueError as e:
            raise NoSpeechError("Speech was not understood") from e
        except sr.RequestError as e:
            raise RecognitionError(f"Recognition service failed: {e}") from e

        logger.debug(f"Recognised {len(text)} characters")
        return text
