import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from ..board.generator import GridGenerator
from ..board.grid import Grid
from ..board.models import LevelRecord, Placement, Position
from ..board.regenerator import LetterRegenerator
from ..words import Dictionary
from .evaluator import WordEvaluator
from .models import EngineConfig, GameEvent, Listener, Mode, WordOutcome
from .progression import LevelProgression
from .scheduler import Scheduler
from .score import ScoreBoard
from .selection import SelectionController

log = logging.getLogger(__name__)


class WordGridEngine(BaseModel):
    """
    Top-level coordinator for a word grid session.

    Owns the grid and wires the selection controller, word evaluator,
    letter regenerator and level progression together. Input events
    (`begin`, `extend`, `release`) and `tick` must be delivered one at a
    time, in order, from a single thread.

    Attributes:
        config: Session configuration
        dictionary: Shared read-only word index
        levels: Parsed level records for level play
        mode: "endless" (free play) or "levels"
        grid: The current grid, None until a mode is started
        placements: Seed words planted in the current free-play grid
        listeners: Observers receiving every GameEvent
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: EngineConfig = Field(default_factory=EngineConfig)
    dictionary: Dictionary
    levels: List[LevelRecord] = Field(default_factory=list)
    generator: GridGenerator
    regenerator: LetterRegenerator
    score: ScoreBoard = Field(default_factory=ScoreBoard)
    selection: SelectionController = Field(default_factory=SelectionController)
    evaluator: WordEvaluator
    scheduler: Scheduler = Field(default_factory=Scheduler)
    progression: LevelProgression
    mode: Mode = "endless"
    grid: Optional[Grid] = None
    placements: List[Placement] = Field(default_factory=list)
    listeners: List[Listener] = Field(default_factory=list)

    def model_post_init(self, __context) -> None:
        """Route component events through the engine and hook level loads."""
        self.selection.emit = self._dispatch
        self.evaluator.emit = self._dispatch
        self.progression.emit = self._dispatch
        self.progression.on_level_loaded = self._on_level_loaded

    @classmethod
    def create(
        cls,
        dictionary: Union[Dictionary, Iterable[str]],
        config: Optional[EngineConfig] = None,
        levels: Optional[List[LevelRecord]] = None,
        **config_kwargs: Any
    ) -> "WordGridEngine":
        """
        Factory method to create an engine with wired components.

        Args:
            dictionary: A Dictionary, or raw word-list lines to build one from
            config: Optional EngineConfig instance
            levels: Parsed level records (required for level play)
            **config_kwargs: Config parameters if config not provided

        Returns:
            A configured engine; call start() to build the first grid

        Raises:
            EmptyDictionary: If the word list holds no words
        """
        if config is None:
            config = EngineConfig(**config_kwargs)
        if not isinstance(dictionary, Dictionary):
            dictionary = Dictionary(dictionary)

        # One random source so a seed reproduces the whole session
        rng = random.Random(config.seed)
        generator = GridGenerator(alphabet=config.alphabet, seed_words=config.seed_words, rng=rng)
        regenerator = LetterRegenerator(dictionary=dictionary, alphabet=config.alphabet, rng=rng)
        score = ScoreBoard()
        scheduler = Scheduler()
        levels = list(levels or [])

        return cls(
            config=config,
            dictionary=dictionary,
            levels=levels,
            generator=generator,
            regenerator=regenerator,
            score=score,
            evaluator=WordEvaluator(dictionary=dictionary, score=score, regenerator=regenerator),
            scheduler=scheduler,
            progression=LevelProgression(levels=levels, generator=generator, scheduler=scheduler),
        )

    @property
    def is_ready(self) -> bool:
        return self.grid is not None and len(self.dictionary) > 0

    def subscribe(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def _dispatch(self, event: GameEvent) -> None:
        for listener in self.listeners:
            listener(event)

    def _set_mode(self, mode: Mode) -> None:
        self.mode = mode
        self.selection.mode = mode

    def _install_grid(self, grid: Grid) -> None:
        self.selection.cancel()
        self.grid = grid
        self._dispatch(GameEvent(kind="grid_rebuilt"))

    def _reset_score(self) -> None:
        self.score.reset()
        self._dispatch(GameEvent(kind="score_changed", total_score=self.score.total))

    def _on_level_loaded(self, grid: Grid) -> None:
        self.placements = []
        self._install_grid(grid)
        self._reset_score()

    def start(self) -> Grid:
        """Start the configured mode."""
        if self.config.mode == "levels":
            return self.start_levels(self.config.start_level)
        return self.start_endless()

    def start_endless(self) -> Grid:
        """Switch to free play with a freshly seeded grid and a cleared score."""
        self.progression.stop()
        grid, placements = self.generator.generate_seeded(self.config.rows, self.config.cols)
        self._set_mode("endless")
        self.placements = placements
        self._install_grid(grid)
        self._reset_score()
        return grid

    def start_levels(self, level: int = 1) -> Grid:
        """
        Switch to level play at `level` (1-based).

        Raises:
            ValueError: If the engine has no level data
            InvalidLevelData: If the level cannot be loaded; the current grid is kept
        """
        if not self.levels:
            raise ValueError("Level mode needs level data")
        grid = self.progression.setup_level(level)
        self._set_mode("levels")
        return grid

    def load_level(self, level: int) -> Grid:
        """Jump to a level while in level play."""
        if self.mode != "levels":
            raise ValueError("load_level() only works in level mode")
        return self.progression.setup_level(level)

    def switch_mode(self, mode: Mode) -> Grid:
        if mode == "levels":
            return self.start_levels(self.config.start_level)
        return self.start_endless()

    def reset(self) -> Grid:
        """Rebuild the grid and clear the score (restarts the level in level play)."""
        if self.mode == "levels":
            return self.progression.restart_level()
        return self.start_endless()

    def begin(self, pos: Position) -> None:
        if self.grid is None:
            log.debug("Ignoring begin before a grid exists")
            return
        self.selection.begin(self.grid, Position(*pos))

    def extend(self, pos: Position) -> None:
        if self.grid is None:
            return
        self.selection.extend(self.grid, Position(*pos))

    def release(self) -> Optional[WordOutcome]:
        """
        End the current gesture and evaluate it.

        Returns:
            The word outcome, or None if no gesture was in progress
        """
        if self.grid is None:
            return None
        grid = self.grid
        regenerate = self.mode == "endless"
        outcome = self.selection.release(
            lambda path: self.evaluator.evaluate(grid, path, regenerate=regenerate)
        )
        if outcome is not None and outcome.accepted and self.mode == "levels":
            for _ in outcome.unlocked_positions:
                self.progression.on_cell_unblocked()
            self.progression.on_word_made(outcome)
        return outcome

    def select(self, path: Iterable[Position]) -> Optional[WordOutcome]:
        """Play a whole gesture: begin on the first position, extend through the rest, release."""
        positions = [Position(*p) for p in path]
        if not positions:
            return None
        self.begin(positions[0])
        for pos in positions[1:]:
            self.extend(pos)
        return self.release()

    def tick(self, delta: float) -> None:
        """
        Advance time by `delta` seconds: run due transitions, then the level timer.

        A level loaded by a transition in this tick is not charged for the same delta.
        """
        if delta < 0:
            raise ValueError(f"Time delta must be non-negative, got {delta}")
        generation = self.progression.generation
        self.scheduler.advance(delta)
        if self.mode == "levels" and self.progression.generation == generation:
            self.progression.tick(delta)

    def get_state(self) -> Dict:
        """
        Get the current engine state as a dictionary.

        Useful for serialization and logging.
        """
        return {
            "mode": self.mode,
            "rows": self.grid.rows if self.grid else 0,
            "cols": self.grid.cols if self.grid else 0,
            "grid": self.grid.rows_as_strings() if self.grid else [],
            "blocked": self.grid.blocked_count if self.grid else 0,
            "live_bonus": self.grid.live_bonus_count if self.grid else 0,
            "selection": [tuple(p) for p in self.selection.path],
            "score": self.score.get_state(),
            "level": self.progression.get_state() if self.mode == "levels" else None,
            "pending_tasks": len(self.scheduler.pending),
        }
