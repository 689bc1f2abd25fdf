"""Replacement letters for cells consumed by an accepted word."""

import random
from typing import List, Sequence, Set, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..words import Dictionary
from .generator import DEFAULT_ALPHABET, weighted_letter
from .grid import Grid
from .models import Position


class LetterRegenerator(BaseModel):
    """
    Picks a new letter for a consumed cell, biased toward its neighbours.

    A candidate letter is "good" when it forms a dictionary prefix with the
    surrounding letters: paired with one neighbour (either order), or
    placed around two distinct neighbours as neighbour+candidate+other or
    candidate+neighbour+other. A good letter is drawn uniformly; with no
    good letter (or no neighbours) the weighted pool is used instead.

    This is a local heuristic only. It does not guarantee that a word can
    still be formed on the grid.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dictionary: Dictionary
    alphabet: str = Field(default=DEFAULT_ALPHABET, min_length=1, pattern=r'^[A-Z]+$')
    rng: random.Random = Field(default_factory=random.Random)

    @property
    def candidates(self) -> List[str]:
        """Distinct letters of the pool, in a stable order."""
        return sorted(set(self.alphabet))

    def neighbor_letters(self, grid: Grid, pos: Position) -> List[str]:
        """Uppercased letters of the in-bounds, non-empty 8-neighbours."""
        return [cell.letter.upper() for cell in grid.neighbors(pos) if cell.letter]

    def fits_neighbors(self, candidate: str, neighbors: Sequence[str]) -> bool:
        """True if `candidate` forms a dictionary prefix with its neighbours."""
        distinct = set(neighbors)
        for neighbor in distinct:
            if self.dictionary.is_prefix(candidate + neighbor) or self.dictionary.is_prefix(neighbor + candidate):
                return True
            # The prefix index is prefix-closed, so a triple only passes when its pair already did
            for other in distinct:
                if other == neighbor:
                    continue
                if (self.dictionary.is_prefix(neighbor + candidate + other)
                        or self.dictionary.is_prefix(candidate + neighbor + other)):
                    return True
        return False

    def good_letters(self, grid: Grid, pos: Position) -> List[str]:
        neighbors = self.neighbor_letters(grid, pos)
        if not neighbors:
            return []
        return [c for c in self.candidates if self.fits_neighbors(c, neighbors)]

    def choose_letter(self, grid: Grid, pos: Position) -> str:
        """Pick a replacement letter for the cell at `pos`."""
        good = self.good_letters(grid, pos)
        if good:
            return good[self.rng.randrange(len(good))]
        return weighted_letter(self.rng, self.alphabet)

    def replace(self, grid: Grid, path: Sequence[Position]) -> List[Tuple[Position, str]]:
        """
        Replace the letter of every cell in `path`, in order.

        Later cells see the letters already chosen for earlier ones.

        Returns:
            List of (position, new letter)
        """
        replaced: List[Tuple[Position, str]] = []
        seen: Set[Position] = set()
        for pos in path:
            if pos in seen:
                continue
            seen.add(pos)
            letter = self.choose_letter(grid, pos)
            grid.cell(pos).letter = letter
            replaced.append((Position(*pos), letter))
        return replaced
