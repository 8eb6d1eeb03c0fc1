"""
Display boundary - What the renderer is asked to show.

The core publishes one DisplayFrame at a time (or None when nothing is
on screen) and consumes a single completion signal per frame. Videos
complete when the renderer reports media end; images and textual
fallbacks complete on the sequencer's own dwell timer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from signboard.compiler.matcher import PlayUnit
from signboard.library.assets import Asset, AssetKind


class DisplayKind(Enum):
    """How a frame is rendered."""
    VIDEO = "video"
    IMAGE = "image"
    FALLBACK = "fallback"  # no asset: show the word itself


@dataclass(frozen=True)
class DisplayFrame:
    """The unit to display now, with its asset if the library has one."""
    unit: PlayUnit
    asset: Optional[Asset] = None

    @property
    def key(self) -> str:
        return self.unit.key

    @property
    def kind(self) -> DisplayKind:
        if self.asset is None:
            return DisplayKind.FALLBACK
        if self.asset.kind is AssetKind.VIDEO:
            return DisplayKind.VIDEO
        return DisplayKind.IMAGE

    @property
    def waits_for_media_end(self) -> bool:
        """True when only the renderer can signal completion."""
        return self.kind is DisplayKind.VIDEO

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "kind": self.kind.value,
            "is_phrase": self.unit.is_phrase,
        }


@runtime_checkable
class Renderer(Protocol):
    """Display collaborator.

    show() receives each frame in order and None when the queue is
    exhausted. For video frames the renderer must call the session's
    display_complete() when playback ends.
    """

    def show(self, frame: Optional[DisplayFrame]) -> None:
        ...
