"""
Path selection state machine.

A gesture starts with `begin`, grows with `extend` and ends with `release`.
Consecutive cells of the path are always 8-adjacent and no cell appears
twice: re-entering an earlier cell truncates the path back to it.
"""

import logging
from typing import Callable, List, Literal, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field

from ..board.grid import Grid, are_adjacent
from ..board.models import Position
from .models import GameEvent, Listener, Mode

log = logging.getLogger(__name__)

T = TypeVar("T")

SelectionState = Literal["idle", "selecting"]


class SelectionController(BaseModel):
    """
    Tracks the in-progress selection path for one player.

    Attributes:
        mode: Game mode; blocked cells are only refused in level play
        path: Positions selected so far, in selection order
        state: "idle" or "selecting"
        emit: Optional observer receiving highlight events
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mode: Mode = "endless"
    path: List[Position] = Field(default_factory=list)
    state: SelectionState = "idle"
    emit: Optional[Listener] = None

    @property
    def is_selecting(self) -> bool:
        return self.state == "selecting"

    def _highlight(self, pos: Position, selected: bool) -> None:
        if self.emit is not None:
            self.emit(GameEvent(kind="cell_highlighted", position=pos, selected=selected))

    def _selectable(self, grid: Grid, pos: Position) -> bool:
        cell = grid.get(pos)
        if cell is None:
            log.debug("Ignoring out-of-bounds position %s", tuple(pos))
            return False
        if self.mode == "levels" and cell.blocked:
            log.debug("Ignoring blocked cell %s", tuple(pos))
            return False
        return True

    def begin(self, grid: Grid, pos: Position) -> None:
        """
        Start a gesture on `pos`.

        Starting while a gesture is already in progress abandons the old
        path. Starting on a blocked cell opens an empty gesture.
        """
        if grid.get(pos) is None:
            log.debug("Ignoring begin outside the grid at %s", tuple(pos))
            return

        self._clear()
        self.state = "selecting"
        if self._selectable(grid, pos):
            pos = Position(*pos)
            self.path.append(pos)
            self._highlight(pos, True)

    def extend(self, grid: Grid, pos: Position) -> None:
        """Add `pos` to the path, or backtrack to it if already selected."""
        if not self.is_selecting:
            return
        pos = Position(*pos)

        if pos in self.path:
            index = self.path.index(pos)
            # Backtracking: drop everything selected after the revisited cell
            while len(self.path) > index + 1:
                self._highlight(self.path.pop(), False)
            return

        if not self._selectable(grid, pos):
            return

        if self.path and not are_adjacent(self.path[-1], pos):
            log.debug("Cell %s is not adjacent to %s", tuple(pos), tuple(self.path[-1]))
            return

        self.path.append(pos)
        self._highlight(pos, True)

    def release(self, evaluate: Callable[[List[Position]], T]) -> Optional[T]:
        """
        End the gesture, handing the finished path to `evaluate`.

        The path is cleared and every cell un-highlighted whatever the
        evaluation returns (or raises).

        Returns:
            The evaluation result, or None when no gesture was in progress
        """
        if not self.is_selecting:
            return None

        finished = list(self.path)
        try:
            return evaluate(finished)
        finally:
            self._clear()

    def cancel(self) -> None:
        """Drop the current gesture without evaluating it (used on grid rebuilds)."""
        self._clear()

    def _clear(self) -> None:
        for pos in self.path:
            self._highlight(pos, False)
        self.path = []
        self.state = "idle"
