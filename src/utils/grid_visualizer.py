from typing import Iterable, List, Optional

from ..board.grid import Grid
from ..board.models import Position


def render_cell(letter: str, blocked: bool, live_bonus: bool, selected: bool) -> str:
    """Render one cell as a 3-character token."""
    if selected:
        return f"[{letter}]"
    if blocked:
        return f"#{letter}#"
    if live_bonus:
        return f"*{letter}*"
    return f" {letter} "


def render_grid(grid: Grid, selection: Optional[Iterable[Position]] = None, coordinates: bool = True) -> str:
    """
    Render the grid to a string.

    Blocked cells are shown as #X#, cells with a live bonus as *X* and
    selected cells as [X].
    """
    selected = {tuple(p) for p in selection} if selection else set()
    lines: List[str] = []

    if coordinates:
        lines.append("    " + "".join(f" {c:<2}" for c in range(grid.cols)))

    for r in range(grid.rows):
        row = ""
        for c in range(grid.cols):
            cell = grid.cell(Position(r, c))
            row += render_cell(cell.letter, cell.blocked, cell.has_live_bonus, (r, c) in selected)
        lines.append(f"{r:>3} {row}" if coordinates else row)

    return '\n'.join(lines)
