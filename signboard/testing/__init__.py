"""
Signboard - Testing Utilities

Components:
    RecordingRenderer    - Records frames, can auto-complete videos
    FailingLibraryStore  - Store with injected StorageError failures
    ScriptedSource       - Recognition source that replays a script
    Fixtures             - Payload bytes, data URLs, test sessions

Usage:
    from signboard.testing import RecordingRenderer, create_test_session

    renderer = RecordingRenderer()
    session = create_test_session(images=["hello"], renderer=renderer)
    session.feed_final("hello world")
    await session.join()
    assert renderer.keys == ["hello", "world"]
"""

from signboard.testing.mock import (
    FailingLibraryStore,
    FrameRecord,
    RecordingAuthoring,
    RecordingRenderer,
    ScriptedSource,
)

from signboard.testing.fixtures import (
    AVI_BYTES,
    BMP_BYTES,
    GIF_BYTES,
    JPEG_BYTES,
    MP4_BYTES,
    PNG_BYTES,
    SAMPLE_SEGMENTS,
    WEBM_BYTES,
    WEBP_BYTES,
    create_test_library,
    create_test_session,
    image_asset,
    image_data_url,
    to_data_url,
    video_asset,
    video_data_url,
)

__all__ = [
    # Mock
    "RecordingRenderer",
    "FrameRecord",
    "FailingLibraryStore",
    "ScriptedSource",
    "RecordingAuthoring",
    # Fixtures
    "PNG_BYTES",
    "JPEG_BYTES",
    "GIF_BYTES",
    "WEBP_BYTES",
    "WEBM_BYTES",
    "MP4_BYTES",
    "AVI_BYTES",
    "BMP_BYTES",
    "SAMPLE_SEGMENTS",
    "to_data_url",
    "image_data_url",
    "video_data_url",
    "image_asset",
    "video_asset",
    "create_test_library",
    "create_test_session",
]
