"""
Test Doubles - Renderers, stores and sources for testing.

Features:
    - Frame recording with optional automatic video completion
    - Failure injection for library stores
    - Scripted recognition sources
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Iterable, Optional

from signboard.capture.source import RecognitionResult
from signboard.errors import RecognitionError, StorageError
from signboard.library.assets import Asset
from signboard.library.store import MemoryLibraryStore
from signboard.runtime.display import DisplayFrame


@dataclass
class FrameRecord:
    """Record of one show() call."""

    frame: Optional[DisplayFrame]
    timestamp: float = field(default_factory=time.monotonic)

    @property
    def key(self) -> Optional[str]:
        return self.frame.key if self.frame else None


class RecordingRenderer:
    """
    Renderer that records every frame.

    Example:
        renderer = RecordingRenderer()
        session = create_test_session(images=["hello"], renderer=renderer)
        session.feed_final("hello world")
        await session.join()

        assert renderer.keys == ["hello", "world"]

        # Acknowledge videos automatically
        renderer.auto_complete = session.display_complete
    """

    def __init__(self, auto_complete: Optional[Callable[[str], bool]] = None):
        self.auto_complete = auto_complete
        self._records: list[FrameRecord] = []

    @property
    def records(self) -> list[FrameRecord]:
        return self._records

    @property
    def frames(self) -> list[DisplayFrame]:
        """Shown frames, without the None clears."""
        return [r.frame for r in self._records if r.frame is not None]

    @property
    def keys(self) -> list[str]:
        return [frame.key for frame in self.frames]

    @property
    def clear_count(self) -> int:
        return sum(1 for r in self._records if r.frame is None)

    @property
    def last_frame(self) -> Optional[DisplayFrame]:
        return self._records[-1].frame if self._records else None

    def show(self, frame: Optional[DisplayFrame]) -> None:
        self._records.append(FrameRecord(frame=frame))
        if frame is not None and frame.waits_for_media_end and self.auto_complete:
            asyncio.get_running_loop().call_soon(self.auto_complete, frame.key)

    def reset(self) -> None:
        self._records.clear()


class FailingLibraryStore(MemoryLibraryStore):
    """
    In-memory store with failure injection.

    Example:
        store = FailingLibraryStore(fail_on={"put"})
        session = SignSession(store)
        session.save_sign("hello", PNG_BYTES)   # warning event, kept in memory
        store.calls                              # [("put", "hello")]
    """

    def __init__(
        self,
        entries: Optional[dict[str, Asset]] = None,
        fail_on: Iterable[str] = ("get_all", "put", "delete"),
    ):
        super().__init__(entries)
        self.fail_on = set(fail_on)
        self.calls: list[tuple[str, Optional[str]]] = []

    def configure(self, fail_on: Iterable[str]) -> None:
        self.fail_on = set(fail_on)

    def get_all(self) -> dict[str, Asset]:
        self.calls.append(("get_all", None))
        if "get_all" in self.fail_on:
            raise StorageError("Injected read failure", operation="get_all")
        return super().get_all()

    def put(self, key: str, asset: Asset) -> None:
        self.calls.append(("put", key))
        if "put" in self.fail_on:
            raise StorageError("Injected write failure", key=key, operation="put")
        super().put(key, asset)

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        if "delete" in self.fail_on:
            raise StorageError("Injected delete failure", key=key, operation="delete")
        super().delete(key)


class ScriptedSource:
    """
    Recognition source that replays a script.

    Strings are final results; RecognitionResult items pass through
    as given. If ``error`` is set it is raised after the script.

    Example:
        sources = iter([
            ScriptedSource(["hello"], error=NoSpeechError("silence")),
            ScriptedSource(["thank you"]),
        ])
        supervisor = CaptureSupervisor(lambda: next(sources), session, restart_delay=0)
    """

    def __init__(
        self,
        script: Iterable[str | RecognitionResult] = (),
        error: Optional[RecognitionError] = None,
        restartable: bool = True,
    ):
        self.script = list(script)
        self.error = error
        self.restartable = restartable
        self.started = 0

    async def results(self) -> AsyncIterator[RecognitionResult]:
        self.started += 1
        for item in self.script:
            await asyncio.sleep(0)
            if isinstance(item, RecognitionResult):
                yield item
            else:
                yield RecognitionResult(text=item, is_final=True)
        if self.error is not None:
            raise self.error


class RecordingAuthoring:
    """Authoring collaborator that records requested words."""

    def __init__(self) -> None:
        self.requests: list[str] = []

    def request(self, word: str) -> None:
        self.requests.append(word)
