"""
Recognition Sources - Boundary for incoming speech text.

A source yields RecognitionResult objects: interim hypotheses while the
speaker is talking and one final result per committed segment. Sources
end normally when the recogniser stops and signal problems by raising
RecognitionError subclasses (see signboard.errors).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Protocol, TextIO, runtime_checkable


@dataclass(frozen=True)
class RecognitionResult:
    """One recogniser output."""
    text: str
    is_final: bool = True


@runtime_checkable
class RecognitionSource(Protocol):
    """Speech recogniser adapter.

    Sources may set ``restartable = False`` when ending means there is
    nothing more to read (a closed file, for example).
    """

    def results(self) -> AsyncIterator[RecognitionResult]:
        ...


class TextStreamSource:
    """Reads finalized segments, one per line, from a text stream.

    Lines are read off the event loop. End of stream ends the source for
    good.

    Example:
        source = TextStreamSource(sys.stdin)
        async for result in source.results():
            session.feed_final(result.text)
    """

    restartable = False

    def __init__(self, stream: TextIO):
        self._stream = stream

    async def results(self) -> AsyncIterator[RecognitionResult]:
        while True:
            line = await asyncio.to_thread(self._stream.readline)
            if not line:
                return
            text = line.strip()
            if text:
                yield RecognitionResult(text=text, is_final=True)
