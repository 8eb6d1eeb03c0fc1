"""
Console Renderer - Text rendering of display frames.

A terminal cannot play media, so video frames are acknowledged on the
next loop iteration instead of at media end.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Callable, Optional, TextIO

from signboard.runtime.display import DisplayFrame, DisplayKind


class ConsoleRenderer:
    """
    Prints one line per frame.

    Example:
        renderer = ConsoleRenderer()
        session = SignSession(store, renderer=renderer)
        renderer.on_complete = session.display_complete

        # [video]    thank you
        # [image]    very
        # [no sign]  much
    """

    LABELS = {
        DisplayKind.VIDEO: "[video]",
        DisplayKind.IMAGE: "[image]",
        DisplayKind.FALLBACK: "[no sign]",
    }

    def __init__(
        self,
        output: Optional[TextIO] = None,
        on_complete: Optional[Callable[[str], bool]] = None,
    ):
        self._output = output or sys.stdout
        self.on_complete = on_complete
        self.frames_shown = 0

    def show(self, frame: Optional[DisplayFrame]) -> None:
        if frame is None:
            return

        self.frames_shown += 1
        label = self.LABELS[frame.kind]
        print(f"{label:<10} {frame.key}", file=self._output, flush=True)

        if frame.waits_for_media_end and self.on_complete is not None:
            asyncio.get_running_loop().call_soon(self.on_complete, frame.key)
