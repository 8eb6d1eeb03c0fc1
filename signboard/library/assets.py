"""
Sign Assets - Tagged image/video payloads.

The asset kind is always derived from the payload itself, never from
what the caller claims. Two payload forms are accepted:

- raw file bytes (PNG, JPEG, GIF, WEBP, BMP, WebM/Matroska, MP4/MOV, AVI, Ogg)
- ``data:`` URLs such as ``data:video/webm;base64,...``
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Union

from signboard.errors import UnsupportedAssetError


Payload = Union[bytes, str]


class AssetKind(Enum):
    """What a sign asset contains."""

    IMAGE = "image"
    """Still image, shown for the sequencer's dwell time."""

    VIDEO = "video"
    """Short clip, shown until the renderer reports media end."""


# (offset, signature, kind, extension)
MAGIC_SIGNATURES: list[tuple[int, bytes, AssetKind, str]] = [
    (0, b"\x89PNG\r\n\x1a\n", AssetKind.IMAGE, "png"),
    (0, b"\xff\xd8\xff", AssetKind.IMAGE, "jpg"),
    (0, b"GIF87a", AssetKind.IMAGE, "gif"),
    (0, b"GIF89a", AssetKind.IMAGE, "gif"),
    (0, b"\x1a\x45\xdf\xa3", AssetKind.VIDEO, "webm"),
    (4, b"ftyp", AssetKind.VIDEO, "mp4"),
    (0, b"OggS", AssetKind.VIDEO, "ogv"),
]

# BITMAPCOREHEADER through BITMAPV5HEADER, read little-endian at offset 14
BMP_DIB_HEADER_SIZES = {12, 16, 40, 52, 56, 64, 108, 124}

# Extension used when storing data-URL payloads on disk
DATA_URL_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "video/webm": "webm",
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/ogg": "ogv",
}


def _media_type(data_url: str) -> str:
    header = data_url[len("data:"):].split(",", 1)[0]
    return header.split(";", 1)[0].strip().lower()


def _sniff_bytes(data: bytes) -> tuple[AssetKind, str] | None:
    # RIFF containers carry their format at offset 8
    if data[:4] == b"RIFF" and len(data) >= 12:
        fourcc = data[8:12]
        if fourcc == b"WEBP":
            return AssetKind.IMAGE, "webp"
        if fourcc == b"AVI ":
            return AssetKind.VIDEO, "avi"
        return None

    if data[:2] == b"BM":
        if len(data) >= 18 and int.from_bytes(data[14:18], "little") in BMP_DIB_HEADER_SIZES:
            return AssetKind.IMAGE, "bmp"
        return None

    for offset, signature, kind, extension in MAGIC_SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return kind, extension
    return None


def sniff(payload: Payload) -> tuple[AssetKind, str]:
    """Determine asset kind and a file extension from the payload.

    Args:
        payload: Raw bytes or a data URL

    Returns:
        (AssetKind, extension)

    Raises:
        UnsupportedAssetError: If the content is not a known image or video
    """
    if isinstance(payload, str):
        if not payload.startswith("data:"):
            raise UnsupportedAssetError(
                "String payloads must be data URLs",
                details={"prefix": payload[:16]},
            )
        media_type = _media_type(payload)
        if media_type.startswith("image/"):
            return AssetKind.IMAGE, DATA_URL_EXTENSIONS.get(media_type, "img")
        if media_type.startswith("video/"):
            return AssetKind.VIDEO, DATA_URL_EXTENSIONS.get(media_type, "vid")
        raise UnsupportedAssetError(
            f"Unsupported media type: {media_type or 'none'}",
            details={"media_type": media_type},
        )

    found = _sniff_bytes(bytes(payload))
    if found is None:
        raise UnsupportedAssetError(
            "Payload is not a recognised image or video",
            details={"header": bytes(payload[:12]).hex()},
        )
    return found


def sniff_kind(payload: Payload) -> AssetKind:
    """Determine the asset kind from the payload content."""
    return sniff(payload)[0]


def decode_data_url(data_url: str) -> bytes:
    """Decode the body of a base64 data URL.

    Raises:
        UnsupportedAssetError: If the URL is not base64 encoded
    """
    header, _, body = data_url.partition(",")
    if ";base64" not in header:
        raise UnsupportedAssetError("Only base64 data URLs can be decoded")
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UnsupportedAssetError(f"Invalid base64 data URL: {e}") from e


@dataclass(frozen=True)
class Asset:
    """A sign asset: payload plus its sniffed kind.

    Build assets with Asset.from_payload() so the kind always matches
    the content.
    """
    kind: AssetKind
    payload: Payload

    @classmethod
    def from_payload(cls, payload: Payload) -> "Asset":
        """Create an asset, sniffing its kind from the payload."""
        return cls(kind=sniff_kind(payload), payload=payload)

    @property
    def is_video(self) -> bool:
        return self.kind is AssetKind.VIDEO

    @property
    def extension(self) -> str:
        return sniff(self.payload)[1]

    def __repr__(self) -> str:
        size = len(self.payload)
        return f"Asset(kind={self.kind.value}, size={size})"
