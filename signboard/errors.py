"""
Signboard Errors - Domain-specific error types.

Error hierarchy:
    SignboardError (base)
    ├── StorageError
    ├── UnsupportedAssetError
    ├── InvalidTransitionError
    ├── SequencerInvariantError
    └── RecognitionError
        ├── NoSpeechError            (transient)
        ├── RecognitionAbortedError  (transient)
        └── CapturePermissionError   (fatal to the listening session)
"""

from __future__ import annotations

from typing import Any


class SignboardError(Exception):
    """Base error for all signboard errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageError(SignboardError):
    """
    Raised when the persistent sign library cannot be read or written.

    The session treats write failures as non-fatal: the in-memory
    library is already updated and the user is warned.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        operation: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.key = key
        self.operation = operation


class UnsupportedAssetError(SignboardError):
    """Raised when a payload is neither a recognised image nor video."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details)


class InvalidTransitionError(SignboardError):
    """
    Raised for illegal review-state transitions.

    Examples:
    - Entering REVIEWING while units are still queued
    - IDLE → REVIEWING without a drain in between
    """

    def __init__(
        self,
        from_state: str,
        to_state: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        msg = message or f"Invalid transition: {from_state} → {to_state}"
        super().__init__(msg, details)
        self.from_state = from_state
        self.to_state = to_state


class SequencerInvariantError(SignboardError):
    """Raised when a second completion wait is armed while one is pending."""


class RecognitionError(SignboardError):
    """
    Base error for the speech capture boundary.

    Unclassified recognition errors are logged and capture restarts.
    """

    transient: bool = False
    fatal: bool = False


class NoSpeechError(RecognitionError):
    """Nothing was heard before the recogniser timed out."""

    transient = True


class RecognitionAbortedError(RecognitionError):
    """Recognition was aborted, usually by an intentional stop."""

    transient = True


class CapturePermissionError(RecognitionError):
    """
    Microphone access was denied.

    Fatal to the listening session: capture stops and the user
    is notified. No automatic restart.
    """

    fatal = True
