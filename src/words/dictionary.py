"""Word and prefix membership index built once from a word list."""

import logging
from typing import FrozenSet, Iterable, Set

log = logging.getLogger(__name__)


class EmptyDictionary(ValueError):
    """Raised when a word list normalizes to no words at all."""


def normalize_words(lines: Iterable[str]) -> Set[str]:
    """Trim and uppercase each token, dropping empties."""
    return {line.strip().upper() for line in lines if line.strip()}


class Dictionary:
    """
    Immutable set of uppercase words plus a derived prefix index.

    Every prefix of every word (the word itself included) is stored, so
    both `contains` and `is_prefix` are single set lookups.
    """

    __slots__ = ("_words", "_prefixes")

    def __init__(self, words: Iterable[str]):
        normalized = normalize_words(words)
        if not normalized:
            raise EmptyDictionary("Word list contains no words")

        prefixes: Set[str] = set()
        for word in normalized:
            for i in range(1, len(word) + 1):
                prefixes.add(word[:i])

        self._words: FrozenSet[str] = frozenset(normalized)
        self._prefixes: FrozenSet[str] = frozenset(prefixes)
        log.info("Loaded %d words into dictionary", len(self._words))

    @classmethod
    def from_text(cls, text: str) -> "Dictionary":
        """Build a dictionary from newline-separated text."""
        return cls(text.split("\n"))

    @property
    def words(self) -> FrozenSet[str]:
        return self._words

    def contains(self, word: str) -> bool:
        """
        Returns True if `word` is in the dictionary (case-insensitive).
        """
        if not word:
            return False
        return word.strip().upper() in self._words

    def is_prefix(self, prefix: str) -> bool:
        """
        Returns True if any dictionary word begins with `prefix`.

        The empty string is never treated as a prefix.
        """
        if not prefix:
            return False
        return prefix.strip().upper() in self._prefixes

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"Dictionary({len(self._words)} words)"
