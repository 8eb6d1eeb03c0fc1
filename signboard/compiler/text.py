"""
Text Processing - Tokenization and normalization.

Turns one finalized transcript segment into a flat, ordered list of
normalized word tokens. Library keys go through the same path so that
lookups are case- and punctuation-insensitive.
"""

from __future__ import annotations

import re


# Whitespace runs separate tokens
WHITESPACE = re.compile(r"\s+")

# Punctuation removed from inside and around tokens
PUNCTUATION = re.compile(r"[.,!?;:\"()\[\]{}“”…¿¡]")

# Trimmed from token edges only; inner apostrophes survive ("don't")
EDGE_CHARS = "'‘’-–—"


def normalize_token(token: str) -> str:
    """Normalize a single word.

    Lowercases, removes punctuation and trims edge apostrophes/hyphens.
    Returns an empty string when nothing word-like remains.
    """
    token = PUNCTUATION.sub("", token.lower())
    return token.strip().strip(EDGE_CHARS)


def tokenize(text: str) -> list[str]:
    """Convert a finalized transcript segment into normalized tokens.

    Args:
        text: Raw finalized segment

    Returns:
        Ordered list of non-empty normalized tokens
    """
    if not text:
        return []

    tokens = []
    for raw in WHITESPACE.split(text.strip()):
        token = normalize_token(raw)
        if token:
            tokens.append(token)
    return tokens


def normalize_text(text: str) -> str:
    """Normalize text to its canonical space-joined token form.

    Idempotent: normalize_text(normalize_text(x)) == normalize_text(x).
    """
    return " ".join(tokenize(text))


def normalize_key(key: str) -> str:
    """Normalize a library key (word or phrase).

    Raises:
        ValueError: If the key has no word content
    """
    normalized = normalize_text(key)
    if not normalized:
        raise ValueError(f"Library key {key!r} is empty after normalization")
    return normalized
