"""
Grid construction for both game modes.

Free play builds a seeded grid: a few seed words are placed at random
(letter-consistent overlaps allowed) and the rest is filled from a weighted
letter pool. Level play materializes a pre-authored layout.
"""

import logging
import random
from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict, Field

from .grid import Grid
from .models import (
    BLOCKED_BONUS,
    BLOCKED_TYPES,
    BONUS,
    NORMAL,
    Cell,
    Direction,
    InvalidLevelData,
    LevelRecord,
    Placement,
    Position,
)

log = logging.getLogger(__name__)


# Weighted letter pool: a letter appearing k times is drawn with probability k/len
DEFAULT_ALPHABET = "EEEEEEEEEEEEAAAAAAARRRRRRIIIIIIIOOOOOOTTTTTTNNNNNNSSSSSSLLLLCCCCDUUUM"

DEFAULT_SEED_WORDS: List[str] = [
    "CAR", "ART", "EAR", "STAR", "CARE", "REAL", "AREA", "TEAR", "CLEAR",
]

# Right, down, down-right, up-right. Words are never placed backwards.
PLACEMENT_DIRECTIONS: List[Direction] = [
    Direction(0, 1),
    Direction(1, 0),
    Direction(1, 1),
    Direction(-1, 1),
]

MAX_PLACEMENT_ATTEMPTS = 100
MIN_SEED_WORDS = 3
MAX_SEED_WORDS = 4


def weighted_letter(rng: random.Random, alphabet: str) -> str:
    """Draw one letter from the pool, weighted by occurrence count."""
    return alphabet[rng.randrange(len(alphabet))]


def tile_flags(tile_type: int) -> Tuple[bool, bool]:
    """
    Map an authored tile type to (blocked, bonus).

    Unknown types are logged and treated as normal tiles.
    """
    if tile_type == NORMAL:
        return False, False
    if tile_type == BONUS:
        return False, True
    if tile_type in BLOCKED_TYPES:
        return True, False
    if tile_type == BLOCKED_BONUS:
        return True, True
    log.warning("Unknown tile type: %s", tile_type)
    return False, False


class GridGenerator(BaseModel):
    """
    Builds grids from a seed-word pool or from authored level records.

    Attributes:
        alphabet: Weighted letter pool used to fill free cells
        seed_words: Candidate words to plant in seeded grids
        rng: Random source; share one instance for reproducible sessions
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    alphabet: str = Field(default=DEFAULT_ALPHABET, min_length=1, pattern=r'^[A-Z]+$')
    seed_words: List[str] = Field(default_factory=lambda: list(DEFAULT_SEED_WORDS))
    rng: random.Random = Field(default_factory=random.Random)

    def model_post_init(self, __context) -> None:
        """Normalize seed words to uppercase."""
        self.seed_words = [w.strip().upper() for w in self.seed_words if w.strip()]

    @classmethod
    def create(
        cls,
        seed: Optional[int] = None,
        alphabet: str = DEFAULT_ALPHABET,
        seed_words: Optional[Sequence[str]] = None,
    ) -> "GridGenerator":
        """Factory method to create a generator with its own seeded random source."""
        return cls(
            alphabet=alphabet,
            seed_words=list(seed_words) if seed_words is not None else list(DEFAULT_SEED_WORDS),
            rng=random.Random(seed),
        )

    def generate_seeded(self, rows: int, cols: int) -> Tuple[Grid, List[Placement]]:
        """
        Build a free-play grid.

        Shuffles the seed words, plants 3-4 of them and fills every
        remaining cell from the weighted pool. Placement is best-effort:
        a word that finds no fit within the attempt budget is skipped.

        Returns:
            Tuple of (grid, placements that succeeded)
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")

        letters: List[List[Optional[str]]] = [[None] * cols for _ in range(rows)]

        words = list(self.seed_words)
        self.rng.shuffle(words)
        count = self.rng.randint(MIN_SEED_WORDS, MAX_SEED_WORDS)

        placements: List[Placement] = []
        for word in words[:count]:
            placement = self._try_place_word(letters, word)
            if placement is None:
                log.debug("Could not place seed word %s after %d attempts", word, MAX_PLACEMENT_ATTEMPTS)
                continue
            placements.append(placement)

        cells = []
        for r in range(rows):
            for c in range(cols):
                letter = letters[r][c]
                if letter is None:
                    letter = weighted_letter(self.rng, self.alphabet)
                cells.append(Cell(position=Position(r, c), letter=letter))

        log.info("Seeded grid built with %d tiles (%d seed words placed)", rows * cols, len(placements))
        return Grid(rows=rows, cols=cols, cells=cells), placements

    def _try_place_word(self, letters: List[List[Optional[str]]], word: str) -> Optional[Placement]:
        """Attempt random placements of `word`, writing it on the first fit."""
        rows = len(letters)
        cols = len(letters[0])

        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            row = self.rng.randrange(rows)
            col = self.rng.randrange(cols)
            direction = PLACEMENT_DIRECTIONS[self.rng.randrange(len(PLACEMENT_DIRECTIONS))]

            end_row = row + direction.d_row * (len(word) - 1)
            end_col = col + direction.d_col * (len(word) - 1)
            if not (0 <= end_row < rows and 0 <= end_col < cols):
                continue

            fits = True
            for k, letter in enumerate(word):
                existing = letters[row + direction.d_row * k][col + direction.d_col * k]
                if existing is not None and existing != letter:
                    fits = False
                    break
            if not fits:
                continue

            for k, letter in enumerate(word):
                letters[row + direction.d_row * k][col + direction.d_col * k] = letter
            return Placement(word, Position(row, col), direction)

        return None

    def build_authored(self, levels: Sequence[LevelRecord], index: int) -> Grid:
        """
        Materialize the authored layout of level `index` (0-based).

        Raises:
            InvalidLevelData: If the index is out of range or the grid data
                is truncated or holds an unusable letter
        """
        if index < 0 or index >= len(levels):
            raise InvalidLevelData(
                f"Level index {index} doesn't exist. Available: 0..{len(levels) - 1}"
            )

        level = levels[index]
        rows, cols = level.rows, level.cols
        if len(level.grid_data) < rows * cols:
            raise InvalidLevelData(
                f"Level {index} grid data has {len(level.grid_data)} entries, "
                f"needs {rows * cols} for a {rows}x{cols} grid"
            )

        cells = []
        for row in range(rows):
            for col in range(cols):
                tile = level.grid_data[row * cols + col]
                letter = tile.letter.strip().upper()
                if len(letter) != 1 or not "A" <= letter <= "Z":
                    raise InvalidLevelData(
                        f"Level {index} tile ({row}, {col}) has invalid letter '{tile.letter}'"
                    )
                blocked, bonus = tile_flags(tile.tile_type)
                cells.append(Cell(position=Position(row, col), letter=letter, blocked=blocked, bonus=bonus))

        log.info("Level grid %d built: %dx%d", index, rows, cols)
        return Grid(rows=rows, cols=cols, cells=cells)
