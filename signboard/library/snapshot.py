"""
Library Snapshot - Read-only in-memory mirror of the sign library.

The matcher and the renderer read the current snapshot; only the
mutation path replaces it, and it does so by swapping the whole
mapping, so readers never see a half-applied change.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping

from signboard.library.assets import Asset


class Library:
    """Holder for the current library snapshot.

    Example:
        library = Library(store.get_all())
        "thank you" in library            # True
        library.get("hello")              # Asset or None

        # Mutation path only
        library.replace(library.with_entry("hello", asset))
    """

    def __init__(self, entries: Mapping[str, Asset] | None = None):
        self._snapshot: Mapping[str, Asset] = MappingProxyType(dict(entries or {}))
        self._version = 0

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[str]:
        return iter(self._snapshot)

    def get(self, key: str) -> Asset | None:
        """Get the asset for a key, or None."""
        return self._snapshot.get(key)

    def keys(self) -> list[str]:
        return sorted(self._snapshot)

    @property
    def version(self) -> int:
        """Incremented on every replace()."""
        return self._version

    def snapshot(self) -> Mapping[str, Asset]:
        """Current read-only mapping."""
        return self._snapshot

    def replace(self, entries: Mapping[str, Asset]) -> None:
        """Atomically swap in a new mapping."""
        self._snapshot = MappingProxyType(dict(entries))
        self._version += 1

    def with_entry(self, key: str, asset: Asset) -> dict[str, Asset]:
        """Copy of the current mapping with one entry added or replaced."""
        entries = dict(self._snapshot)
        entries[key] = asset
        return entries

    def without_entry(self, key: str) -> dict[str, Asset]:
        """Copy of the current mapping with one entry removed."""
        entries = dict(self._snapshot)
        entries.pop(key, None)
        return entries
