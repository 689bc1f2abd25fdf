"""Letter grid construction and mutation."""

from .models import (
    Cell,
    Direction,
    GridSize,
    InvalidLevelData,
    LevelDataRoot,
    LevelRecord,
    Placement,
    Position,
    TileData,
)
from .grid import Grid, are_adjacent
from .generator import (
    DEFAULT_ALPHABET,
    DEFAULT_SEED_WORDS,
    MAX_PLACEMENT_ATTEMPTS,
    PLACEMENT_DIRECTIONS,
    GridGenerator,
    tile_flags,
    weighted_letter,
)
from .regenerator import LetterRegenerator
from .parsing import parse_levels

__all__ = [
    # Models
    "Cell",
    "Direction",
    "GridSize",
    "InvalidLevelData",
    "LevelDataRoot",
    "LevelRecord",
    "Placement",
    "Position",
    "TileData",
    # Grid
    "Grid",
    "are_adjacent",
    # Generation
    "DEFAULT_ALPHABET",
    "DEFAULT_SEED_WORDS",
    "MAX_PLACEMENT_ATTEMPTS",
    "PLACEMENT_DIRECTIONS",
    "GridGenerator",
    "tile_flags",
    "weighted_letter",
    "LetterRegenerator",
    # Parsing
    "parse_levels",
]
