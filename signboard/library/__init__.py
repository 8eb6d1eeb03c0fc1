"""
Sign library - Assets, the in-memory snapshot and persistence stores.
"""

from signboard.library.assets import (
    Asset,
    AssetKind,
    decode_data_url,
    sniff,
    sniff_kind,
)
from signboard.library.snapshot import Library
from signboard.library.store import (
    FileLibraryStore,
    LibraryStore,
    MemoryLibraryStore,
    SignEntry,
)

__all__ = [
    # Assets
    "Asset",
    "AssetKind",
    "sniff",
    "sniff_kind",
    "decode_data_url",
    # Snapshot
    "Library",
    # Stores
    "LibraryStore",
    "MemoryLibraryStore",
    "FileLibraryStore",
    "SignEntry",
]
