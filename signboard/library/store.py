"""
Library Stores - Persistence boundary for the sign library.

The session never touches storage directly. It talks to a LibraryStore:

    get_all()         -> dict[key, Asset]   (once, at session start)
    put(key, asset)   -> None               (raises StorageError)
    delete(key)       -> None               (raises StorageError)

Two implementations:
    MemoryLibraryStore  - dict-backed, for tests and throwaway sessions
    FileLibraryStore    - directory with an index.json and one file per sign

Usage:
    store = FileLibraryStore("./signs")
    store.put("hello", Asset.from_payload(png_bytes))
    for key, asset in store.get_all().items():
        print(key, asset.kind.value)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from signboard.errors import StorageError, UnsupportedAssetError
from signboard.library.assets import Asset

logger = logging.getLogger(__name__)


@runtime_checkable
class LibraryStore(Protocol):
    """Persistence port for the sign library."""

    def get_all(self) -> dict[str, Asset]:
        ...

    def put(self, key: str, asset: Asset) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryLibraryStore:
    """In-memory library store."""

    def __init__(self, entries: dict[str, Asset] | None = None):
        self._entries: dict[str, Asset] = dict(entries or {})

    def get_all(self) -> dict[str, Asset]:
        return dict(self._entries)

    def put(self, key: str, asset: Asset) -> None:
        self._entries[key] = asset

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class SignEntry:
    """A sign entry in the index."""
    key: str
    file: str
    kind: str
    form: str = "bytes"  # bytes | data_url
    created_at: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "SignEntry":
        return cls(
            key=key,
            file=data["file"],
            kind=data.get("kind", ""),
            form=data.get("form", "bytes"),
            created_at=data.get("created_at", ""),
        )


class FileLibraryStore:
    """File-based sign library.

    Directory structure:
        ./signs/
            index.json                  # Key -> file index
            hello_5d41402a.png          # Image payload
            thank_you_2b5e7a1c.webm     # Video payload
            ...

    Corrupt index content or unreadable entries are skipped with a
    warning when loading. Write failures raise StorageError.

    Example:
        store = FileLibraryStore("./signs")
        store.put("thank you", Asset.from_payload(webm_bytes))
        store.get_all()["thank you"].kind   # AssetKind.VIDEO
    """

    INDEX_FILE = "index.json"
    INDEX_VERSION = "1.0"

    def __init__(self, directory: Path | str):
        """Initialize the store.

        Args:
            directory: Directory holding the index and payload files
        """
        self.directory = Path(directory)
        self._index: dict[str, SignEntry] = {}
        self._loaded = False

    def get_all(self) -> dict[str, Asset]:
        """Load every readable sign.

        Returns:
            Mapping of key to Asset. Entries that cannot be read or
            sniffed are left out.
        """
        self._load_index()
        assets: dict[str, Asset] = {}

        for key, entry in list(self._index.items()):
            path = self.directory / entry.file
            try:
                if entry.form == "data_url":
                    payload = path.read_text(encoding="utf-8")
                else:
                    payload = path.read_bytes()
                assets[key] = Asset.from_payload(payload)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping sign '{key}': cannot read {entry.file}: {e}")
            except UnsupportedAssetError as e:
                logger.warning(f"Skipping sign '{key}': {e.message}")

        logger.info(f"Loaded {len(assets)} signs from {self.directory}")
        return assets

    def put(self, key: str, asset: Asset) -> None:
        """Store or replace a sign.

        Raises:
            StorageError: If the payload or index cannot be written
        """
        self._ensure_loaded()
        form = "data_url" if isinstance(asset.payload, str) else "bytes"
        suffix = f".{asset.extension}.url" if form == "data_url" else f".{asset.extension}"
        filename = self._file_stem(key) + suffix

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self.directory / filename
            if form == "data_url":
                path.write_text(asset.payload, encoding="utf-8")
            else:
                path.write_bytes(asset.payload)

            previous = self._index.get(key)
            self._index[key] = SignEntry(
                key=key,
                file=filename,
                kind=asset.kind.value,
                form=form,
                created_at=datetime.now().isoformat(),
            )
            self._save_index()
        except OSError as e:
            raise StorageError(
                f"Failed to save sign '{key}': {e}", key=key, operation="put"
            ) from e

        if previous is not None and previous.file != filename:
            self._unlink_quietly(self.directory / previous.file)

        logger.info(f"Saved {asset.kind.value} sign '{key}'")

    def delete(self, key: str) -> None:
        """Remove a sign. Unknown keys are ignored.

        Raises:
            StorageError: If the index cannot be written
        """
        self._ensure_loaded()
        entry = self._index.pop(key, None)
        if entry is None:
            return

        try:
            self._save_index()
        except OSError as e:
            self._index[key] = entry
            raise StorageError(
                f"Failed to delete sign '{key}': {e}", key=key, operation="delete"
            ) from e

        self._unlink_quietly(self.directory / entry.file)
        logger.info(f"Removed sign '{key}'")

    def keys(self) -> list[str]:
        self._ensure_loaded()
        return sorted(self._index)

    def entry(self, key: str) -> SignEntry:
        """Get index metadata for a key.

        Raises:
            KeyError: If the key is not stored
        """
        self._ensure_loaded()
        if key not in self._index:
            raise KeyError(f"Sign '{key}' not found")
        return self._index[key]

    def __contains__(self, key: str) -> bool:
        self._ensure_loaded()
        return key in self._index

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._index)

    def _file_stem(self, key: str) -> str:
        slug = re.sub(r"[^a-z0-9]+", "_", key.lower()).strip("_")[:40] or "sign"
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
        return f"{slug}_{digest}"

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load_index()

    def _load_index(self) -> None:
        """Load index from disk, discarding anything malformed."""
        index_path = self.directory / self.INDEX_FILE
        self._loaded = True
        self._index = {}

        if not index_path.exists():
            return

        try:
            with open(index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load sign index, starting empty: {e}")
            return

        signs = data.get("signs", {}) if isinstance(data, dict) else {}
        if not isinstance(signs, dict):
            logger.warning("Sign index has no usable 'signs' table, starting empty")
            return

        for key, raw in signs.items():
            try:
                self._index[key] = SignEntry.from_dict(key, raw)
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed index entry '{key}': {e}")

    def _save_index(self) -> None:
        """Write the index atomically."""
        index_path = self.directory / self.INDEX_FILE
        tmp_path = index_path.with_suffix(".json.tmp")

        data = {
            "version": self.INDEX_VERSION,
            "signs": {
                key: {k: v for k, v in entry.to_dict().items() if k != "key"}
                for key, entry in self._index.items()
            },
        }

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, index_path)

    @staticmethod
    def _unlink_quietly(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")
