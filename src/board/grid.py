"""Dense letter grid with O(1) position lookups."""

from typing import Iterator, List, Optional, Sequence
from pydantic import BaseModel, Field, model_validator

from .models import Cell, Direction, Position


# 8-neighbourhood offsets
NEIGHBOR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    ( 0, -1),          ( 0, 1),
    ( 1, -1), ( 1, 0), ( 1, 1),
]


def are_adjacent(a: Position, b: Position) -> bool:
    """True if two positions are 8-directionally adjacent (Chebyshev distance 1)."""
    d_row = abs(a[0] - b[0])
    d_col = abs(a[1] - b[1])
    return d_row <= 1 and d_col <= 1 and (d_row != 0 or d_col != 0)


class Grid(BaseModel):
    """
    A fixed-size rectangular grid of cells.

    Cells are stored row-major, so the cell at (row, col) lives at index
    row * cols + col. The grid is the only owner of letters and cell
    state; every other component looks cells up through it.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        cells: Row-major list of exactly rows * cols cells
    """

    rows: int = Field(..., ge=1)
    cols: int = Field(..., ge=1)
    cells: List[Cell] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dense(self) -> "Grid":
        if len(self.cells) != self.rows * self.cols:
            raise ValueError(
                f"Grid {self.rows}x{self.cols} needs {self.rows * self.cols} cells, "
                f"got {len(self.cells)}"
            )
        for index, cell in enumerate(self.cells):
            expected = Position(index // self.cols, index % self.cols)
            if cell.position != expected:
                raise ValueError(f"Cell at index {index} has position {cell.position}, expected {expected}")
        return self

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        """
        Build a plain grid (no flags) from equal-length strings, one per row.

        Useful for tests and for the text harness.
        """
        if not rows:
            raise ValueError("Grid needs at least one row")
        width = len(rows[0])
        cells = []
        for r, line in enumerate(rows):
            if len(line) != width:
                raise ValueError(f"Row {r} has length {len(line)}, expected {width}")
            for c, letter in enumerate(line):
                cells.append(Cell(position=Position(r, c), letter=letter.upper()))
        return cls(rows=len(rows), cols=width, cells=cells)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos[0] < self.rows and 0 <= pos[1] < self.cols

    def cell(self, pos: Position) -> Cell:
        """
        Get the cell at a position.

        Raises:
            IndexError: If the position is outside the grid
        """
        if not self.in_bounds(pos):
            raise IndexError(f"Position {tuple(pos)} outside {self.rows}x{self.cols} grid")
        return self.cells[pos[0] * self.cols + pos[1]]

    def get(self, pos: Position) -> Optional[Cell]:
        """Get the cell at a position, or None when out of bounds."""
        if not self.in_bounds(pos):
            return None
        return self.cells[pos[0] * self.cols + pos[1]]

    def neighbor_positions(self, pos: Position) -> List[Position]:
        """In-bounds positions of the 8-neighbourhood of `pos`."""
        result = []
        for d_row, d_col in NEIGHBOR_OFFSETS:
            candidate = Position(pos[0] + d_row, pos[1] + d_col)
            if self.in_bounds(candidate):
                result.append(candidate)
        return result

    def neighbors(self, pos: Position) -> List[Cell]:
        return [self.cell(p) for p in self.neighbor_positions(pos)]

    def iter_cells(self) -> Iterator[Cell]:
        return iter(self.cells)

    def word_along(self, path: Sequence[Position]) -> str:
        """Concatenate the letters at the given positions, uppercased."""
        return "".join(self.cell(p).letter for p in path).upper()

    def read_line(self, start: Position, direction: Direction, length: int) -> str:
        """Read `length` letters from `start` stepping by `direction`."""
        letters = []
        for k in range(length):
            pos = Position(start[0] + direction[0] * k, start[1] + direction[1] * k)
            letters.append(self.cell(pos).letter)
        return "".join(letters)

    @property
    def blocked_count(self) -> int:
        return sum(1 for cell in self.cells if cell.blocked)

    @property
    def live_bonus_count(self) -> int:
        return sum(1 for cell in self.cells if cell.has_live_bonus)

    def rows_as_strings(self) -> List[str]:
        """Letters of each row as a string."""
        return [
            "".join(cell.letter for cell in self.cells[r * self.cols:(r + 1) * self.cols])
            for r in range(self.rows)
        ]
