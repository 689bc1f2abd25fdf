"""Data models for the letter grid and authored level records."""

from typing import List, NamedTuple
from pydantic import BaseModel, ConfigDict, Field


# Authored tile types
NORMAL = 0
BLOCKED_TYPES = (2, 3)
BONUS = 4
BLOCKED_BONUS = 5


class InvalidLevelData(ValueError):
    """Raised when a level record is missing, truncated or malformed."""


class Position(NamedTuple):
    """A cell position on the grid (0-indexed, row-major)."""
    row: int
    col: int


class Direction(NamedTuple):
    """A placement step (row delta, column delta)."""
    d_row: int
    d_col: int


class Cell(BaseModel):
    """One grid square: a letter plus state flags."""
    position: Position
    letter: str = Field(..., min_length=1, max_length=1, pattern=r'^[A-Z]$')
    blocked: bool = False
    bonus: bool = False
    bonus_consumed: bool = False

    @property
    def has_live_bonus(self) -> bool:
        """True while the bonus has not been consumed by a word."""
        return self.bonus and not self.bonus_consumed

    def consume_bonus(self) -> bool:
        """Mark the bonus consumed. Returns True if it was live."""
        if self.has_live_bonus:
            self.bonus_consumed = True
            return True
        return False

    def unblock(self) -> bool:
        """Clear the blocked flag. Returns True if the cell was blocked."""
        if self.blocked:
            self.blocked = False
            return True
        return False


class Placement(NamedTuple):
    """A seed word written into a generated grid."""
    word: str
    start: Position
    direction: Direction


class TileData(BaseModel):
    """One entry of an authored level's flat grid array."""
    model_config = ConfigDict(populate_by_name=True)

    tile_type: int = Field(0, alias="tileType")
    letter: str = ""


class GridSize(BaseModel):
    """Authored grid dimensions: x is columns, y is rows."""
    x: int = Field(..., ge=1)
    y: int = Field(..., ge=1)


class LevelRecord(BaseModel):
    """A parsed level record. Authoring fields the engine ignores are kept as extras."""
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    grid_size: GridSize = Field(..., alias="gridSize")
    grid_data: List[TileData] = Field(default_factory=list, alias="gridData")

    @property
    def rows(self) -> int:
        return self.grid_size.y

    @property
    def cols(self) -> int:
        return self.grid_size.x


class LevelDataRoot(BaseModel):
    """Top-level shape of a level data file."""
    data: List[LevelRecord] = Field(default_factory=list)
