"""
Signboard - Live speech to sign-language playback.

Architecture:
    Speech → Tokenizer → Phrase Matcher → Playback Queue → Renderer
                                 ↓                ↓
                           Missing Words → Review (when the queue drains)

Public API (stable):
    SignSession       - Feed finalized speech, receive frames and events
    SignboardConfig   - Dwell time, phrase window, restart delay, library dir
    FileLibraryStore  - Directory-backed sign library
    MemoryLibraryStore- In-memory sign library
    Asset             - Image or video payload with sniffed kind
    match_text        - Greedy phrase matching of one segment

Internals (for advanced users):
    signboard.compiler   - tokenize(), match_tokens()
    signboard.runtime    - PlaybackSequencer, ReviewMachine, states
    signboard.capture    - CaptureSupervisor, recognition sources
    signboard.adapters   - ConsoleRenderer, CLI
    signboard.testing    - RecordingRenderer, FailingLibraryStore, fixtures

Example:
    from signboard import SignSession, FileLibraryStore

    session = SignSession(FileLibraryStore("./signs"), renderer=renderer)
    await session.load()
    session.feed_final("Thank you very much")
    await session.join()
    print(session.state, session.missing_words)
"""

from signboard.compiler import (
    MatchResult,
    PlayUnit,
    match_text,
    match_tokens,
    normalize_text,
    tokenize,
)
from signboard.config import SignboardConfig
from signboard.errors import (
    CapturePermissionError,
    InvalidTransitionError,
    NoSpeechError,
    RecognitionAbortedError,
    RecognitionError,
    SequencerInvariantError,
    SignboardError,
    StorageError,
    UnsupportedAssetError,
)
from signboard.library import (
    Asset,
    AssetKind,
    FileLibraryStore,
    Library,
    LibraryStore,
    MemoryLibraryStore,
)
from signboard.runtime import (
    DisplayFrame,
    DisplayKind,
    PlaybackSequencer,
    Renderer,
    ReviewState,
    SessionEvent,
    SignSession,
)

__version__ = "1.0.0"

__all__ = [
    # Session
    "SignSession",
    "SessionEvent",
    "SignboardConfig",
    "ReviewState",
    "PlaybackSequencer",
    # Display
    "DisplayFrame",
    "DisplayKind",
    "Renderer",
    # Matching
    "tokenize",
    "normalize_text",
    "match_text",
    "match_tokens",
    "MatchResult",
    "PlayUnit",
    # Library
    "Asset",
    "AssetKind",
    "Library",
    "LibraryStore",
    "MemoryLibraryStore",
    "FileLibraryStore",
    # Errors
    "SignboardError",
    "StorageError",
    "UnsupportedAssetError",
    "InvalidTransitionError",
    "SequencerInvariantError",
    "RecognitionError",
    "NoSpeechError",
    "RecognitionAbortedError",
    "CapturePermissionError",
    # Version
    "__version__",
]
