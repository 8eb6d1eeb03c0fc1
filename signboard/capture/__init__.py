"""
Speech capture - Recognition sources and the supervisor that restarts them.

MicrophoneSource lives in signboard.capture.microphone and is not
imported here; it needs the optional ``microphone`` extra.
"""

from signboard.capture.source import (
    RecognitionResult,
    RecognitionSource,
    TextStreamSource,
)
from signboard.capture.supervisor import CaptureSupervisor

__all__ = [
    "RecognitionResult",
    "RecognitionSource",
    "TextStreamSource",
    "CaptureSupervisor",
]
