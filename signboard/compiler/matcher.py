"""
Phrase Matcher - Greedy longest-match-first lookup against the sign library.

Consumes a token sequence left to right. At each position the largest
multi-word window that is a library key wins; otherwise the single word
is emitted and, when the library has no entry for it, reported missing.

Example:
    library = {"thank you": asset, "thank": asset, "you": asset}
    result = match_text("thank you very much", library)
    [u.key for u in result.units]   # ["thank you", "very", "much"]
    result.missing                  # ["very", "much"]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Container, Sequence

from signboard.compiler.text import tokenize
from signboard.config import DEFAULT_MAX_PHRASE_WINDOW


@dataclass(frozen=True)
class PlayUnit:
    """One phrase or word scheduled for display."""
    key: str
    token_count: int = 1

    @property
    def is_phrase(self) -> bool:
        return self.token_count > 1

    def __str__(self) -> str:
        return self.key


@dataclass
class MatchResult:
    """Output of matching one segment.

    Attributes:
        units: Play units in display order
        missing: Standalone words with no library entry, first-seen order,
            without duplicates
    """
    units: list[PlayUnit] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return [unit.key for unit in self.units]

    def __bool__(self) -> bool:
        return bool(self.units)


def match_tokens(
    tokens: Sequence[str],
    library: Container[str],
    max_window: int = DEFAULT_MAX_PHRASE_WINDOW,
) -> MatchResult:
    """Greedy phrase matching over normalized tokens.

    Args:
        tokens: Normalized tokens (see tokenize)
        library: Anything supporting ``key in library``
        max_window: Largest phrase window to try (>= 1)

    Returns:
        MatchResult with ordered units and newly missing words
    """
    result = MatchResult()
    seen_missing: set[str] = set()
    n = len(tokens)
    i = 0

    while i < n:
        matched = False
        # Try phrases, largest window first
        for window in range(min(max_window, n - i), 1, -1):
            phrase = " ".join(tokens[i:i + window])
            if phrase in library:
                result.units.append(PlayUnit(key=phrase, token_count=window))
                i += window
                matched = True
                break

        if matched:
            continue

        word = tokens[i]
        result.units.append(PlayUnit(key=word))
        if word not in library and word not in seen_missing:
            seen_missing.add(word)
            result.missing.append(word)
        i += 1

    return result


def match_text(
    text: str,
    library: Container[str],
    max_window: int = DEFAULT_MAX_PHRASE_WINDOW,
) -> MatchResult:
    """Tokenize a finalized segment and match it against the library."""
    return match_tokens(tokenize(text), library, max_window=max_window)
