"""
Missing Words - Ordered, deduplicated vocabulary without library entries.
"""

from __future__ import annotations

from typing import Iterable, Iterator


class MissingWords:
    """Ordered set of words seen in speech with no sign asset.

    Order is first-seen order. Re-adding a word that is already
    pending is a no-op; it does not move to the end.
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words: dict[str, None] = {}
        self.add(words)

    def add(self, words: Iterable[str]) -> list[str]:
        """Add words, skipping duplicates.

        Returns:
            The words that were not already pending
        """
        added = []
        for word in words:
            if word and word not in self._words:
                self._words[word] = None
                added.append(word)
        return added

    def discard(self, word: str) -> bool:
        """Remove one word. Returns True if it was pending."""
        if word in self._words:
            del self._words[word]
            return True
        return False

    def clear(self) -> list[str]:
        """Remove everything. Returns what was pending."""
        cleared = list(self._words)
        self._words.clear()
        return cleared

    def as_list(self) -> list[str]:
        return list(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._words))

    def __len__(self) -> int:
        return len(self._words)

    def __bool__(self) -> bool:
        return bool(self._words)

    def __repr__(self) -> str:
        return f"MissingWords({self.as_list()!r})"
