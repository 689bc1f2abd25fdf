from typing import Dict, Set
from pydantic import BaseModel, Field


def word_score(length: int) -> int:
    """Points for a word: 3 letters -> 1 ... 8 letters -> 6."""
    return max(0, length - 2)


class ScoreBoard(BaseModel):
    """
    Running score and the set of words already found in the active scope.

    The scope is the session in free play and the current level in
    level play; the owner calls `reset()` when the scope changes.
    """

    total: int = 0
    word_count: int = 0
    found_words: Set[str] = Field(default_factory=set)

    @property
    def average(self) -> float:
        """Average points per word, 0 when no words have been found."""
        return self.total / self.word_count if self.word_count > 0 else 0.0

    def has_found(self, word: str) -> bool:
        return word.upper() in self.found_words

    def record(self, word: str, points: int) -> None:
        self.total += points
        self.word_count += 1
        self.found_words.add(word.upper())

    def reset(self) -> None:
        self.total = 0
        self.word_count = 0
        self.found_words.clear()

    def get_state(self) -> Dict:
        return {
            "total": self.total,
            "word_count": self.word_count,
            "average": round(self.average, 1),
            "found_words": sorted(self.found_words),
        }
