"""
Test Fixtures - Common fixtures for testing.

Provides:
    - Minimal image and video payloads that pass the content sniff
    - Data-URL helpers
    - Test library and session setup
"""

from __future__ import annotations

import base64
from typing import Iterable, TYPE_CHECKING

from signboard.library.assets import Asset

if TYPE_CHECKING:
    from signboard.config import SignboardConfig
    from signboard.runtime.display import Renderer
    from signboard.runtime.session import AuthoringPort, SignSession


# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"

GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"

WEBP_BYTES = b"RIFF\x1a\x00\x00\x00WEBPVP8L\x0d\x00\x00\x00\x2f\x00\x00\x00\x10\x07\x10\x11\x11\x88\x88\xfe\x07\x00"

# File header plus the size field of a 40-byte BITMAPINFOHEADER
BMP_BYTES = b"BM\x3a\x00\x00\x00\x00\x00\x00\x00\x36\x00\x00\x00\x28\x00\x00\x00" + b"\x00" * 36

# EBML header of a WebM file
WEBM_BYTES = b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01\x42\xf7\x81\x01\x42\xf2\x81\x04\x42\xf3\x81\x08\x42\x82\x84webm"

# ISO-BMFF ftyp box of an MP4 file
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"

AVI_BYTES = b"RIFF\x24\x00\x00\x00AVI LIST\x04\x00\x00\x00hdrl"


# Finalized segments for testing
SAMPLE_SEGMENTS = {
    "greeting": "Hello, how are you?",
    "thanks": "Thank you very much!",
    "birthday": "Happy birthday to you",
    "repeats": "cat cat dog cat",
    "punctuation": "Wait... (really?) \"yes\"; okay!",
    "contraction": "I don't know",
    "empty": "   ",
}


def to_data_url(data: bytes, media_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def image_data_url(data: bytes = PNG_BYTES, media_type: str = "image/png") -> str:
    return to_data_url(data, media_type)


def video_data_url(data: bytes = WEBM_BYTES, media_type: str = "video/webm") -> str:
    return to_data_url(data, media_type)


def image_asset() -> Asset:
    return Asset.from_payload(PNG_BYTES)


def video_asset() -> Asset:
    return Asset.from_payload(WEBM_BYTES)


def create_test_library(
    images: Iterable[str] = (),
    videos: Iterable[str] = (),
) -> dict[str, Asset]:
    """
    Build library entries.

    Args:
        images: Keys that get a PNG asset
        videos: Keys that get a WebM asset

    Returns:
        Mapping suitable for MemoryLibraryStore or Library
    """
    entries = {key: image_asset() for key in images}
    entries.update({key: video_asset() for key in videos})
    return entries


def create_test_session(
    images: Iterable[str] = (),
    videos: Iterable[str] = (),
    dwell_seconds: float = 0.01,
    renderer: "Renderer | None" = None,
    authoring: "AuthoringPort | None" = None,
    config: "SignboardConfig | None" = None,
    **config_kwargs,
) -> "SignSession":
    """
    Create a SignSession over an in-memory store with short timings.

    The library snapshot is filled directly, so the session is usable
    without awaiting load().

    Args:
        images: Keys that get a PNG asset
        videos: Keys that get a WebM asset
        dwell_seconds: Dwell for images and fallbacks
        renderer: Display collaborator
        authoring: Authoring collaborator
        config: Full configuration (overrides dwell_seconds and kwargs)
        **config_kwargs: Additional config parameters

    Returns:
        Configured SignSession
    """
    from signboard.config import SignboardConfig
    from signboard.library.store import MemoryLibraryStore
    from signboard.runtime.session import SignSession

    entries = create_test_library(images, videos)
    config = config or SignboardConfig(dwell_seconds=dwell_seconds, **config_kwargs)
    session = SignSession(
        MemoryLibraryStore(entries), config=config, renderer=renderer, authoring=authoring
    )
    session.library.replace(entries)
    return session
