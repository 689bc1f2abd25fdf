"""
Word evaluation for finished selections.

Checks, in order, stopping at the first failure:
1. Length (3-8 letters)
2. Not already found in the active scope
3. Present in the dictionary

Rejections are returned as WordOutcome values and never touch the grid or
the score. An accepted word is scored, consumes live bonus cells, unblocks
the blocked cells around its path and, in free play, has its letters
regenerated.
"""

import logging
from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict

from ..board.grid import Grid
from ..board.models import Position
from ..board.regenerator import LetterRegenerator
from ..words import Dictionary
from .models import GameEvent, Listener, RejectionCode, WordOutcome
from .score import ScoreBoard, word_score

log = logging.getLogger(__name__)


MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 8


class WordEvaluator(BaseModel):
    """
    Applies the word rules to a finished path and mutates the grid on success.

    Attributes:
        dictionary: Shared read-only word index
        score: Running score and found words for the active scope
        regenerator: Letter regenerator; when set, accepted paths are refilled
        emit: Optional observer receiving outcome and cell events
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dictionary: Dictionary
    score: ScoreBoard
    regenerator: Optional[LetterRegenerator] = None
    emit: Optional[Listener] = None

    def _emit(self, event: GameEvent) -> None:
        if self.emit is not None:
            self.emit(event)

    def check_word(self, word: str) -> Optional[Tuple[RejectionCode, str]]:
        """
        Run the rejection checks on a word.

        Returns:
            (code, message) for the first failed check, or None if the word is playable
        """
        if len(word) < MIN_WORD_LENGTH or len(word) > MAX_WORD_LENGTH:
            return "INVALID_LENGTH", (
                f"'{word}' has {len(word)} letters; words need "
                f"{MIN_WORD_LENGTH}-{MAX_WORD_LENGTH}"
            )
        if self.score.has_found(word):
            return "ALREADY_FOUND", f"'{word}' has already been found"
        if not self.dictionary.contains(word):
            return "NOT_A_WORD", f"'{word}' is not a valid dictionary word"
        return None

    def evaluate(self, grid: Grid, path: Sequence[Position], regenerate: bool = False) -> WordOutcome:
        """
        Evaluate a finished selection path against `grid`.

        Args:
            grid: The grid the path was selected on
            path: Selected positions in order
            regenerate: Replace the path's letters after an accepted word (free play)

        Returns:
            WordOutcome describing acceptance or the rejection reason
        """
        path = [Position(*p) for p in path]
        word = grid.word_along(path)

        rejection = self.check_word(word)
        if rejection is not None:
            code, message = rejection
            log.debug("Rejected %s: %s", word, code)
            outcome = WordOutcome(word=word, accepted=False, code=code, message=message, path=path)
            self._emit(GameEvent(kind="word_rejected", outcome=outcome, reason=code))
            return outcome

        points = word_score(len(word))
        self.score.record(word, points)
        log.info("Valid word %s, score %d", word, points)

        bonus_used = self._consume_bonuses(grid, path)
        unlocked = self._unblock_around(grid, path)

        replaced: List[Position] = []
        if regenerate and self.regenerator is not None:
            for pos, letter in self.regenerator.replace(grid, path):
                replaced.append(pos)
                self._emit(GameEvent(kind="letter_replaced", position=pos, letter=letter))

        outcome = WordOutcome(
            word=word,
            accepted=True,
            score=points,
            bonus_used=bonus_used,
            path=path,
            unlocked_positions=unlocked,
            replaced_positions=replaced,
        )
        self._emit(GameEvent(kind="word_accepted", outcome=outcome))
        self._emit(GameEvent(kind="score_changed", total_score=self.score.total))
        return outcome

    def _consume_bonuses(self, grid: Grid, path: Sequence[Position]) -> int:
        """Consume every live bonus on the path. Returns how many were consumed."""
        count = 0
        for pos in path:
            if grid.cell(pos).consume_bonus():
                count += 1
                self._emit(GameEvent(kind="bonus_consumed", position=pos))
        return count

    def _unblock_around(self, grid: Grid, path: Sequence[Position]) -> List[Position]:
        """
        Unblock the blocked 8-neighbours of every path cell.

        Only the ring directly around the path is cleared; newly unblocked
        cells do not unblock their own neighbours.
        """
        unlocked: List[Position] = []
        for pos in path:
            for neighbor in grid.neighbor_positions(pos):
                if grid.cell(neighbor).unblock():
                    unlocked.append(neighbor)
                    log.debug("Unblocked cell %s", tuple(neighbor))
                    self._emit(GameEvent(kind="cell_unblocked", position=neighbor))
        return unlocked
