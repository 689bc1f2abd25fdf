"""
Pydantic models for the gameplay layer.

This module contains the data models (configuration, word outcomes, level
rules and state, observer events) used throughout the gameplay layer. The
stateful components (SelectionController, WordEvaluator, LevelProgression,
WordGridEngine) live in their own modules.
"""

from typing import Callable, List, Literal, Optional
from pydantic import BaseModel, Field

from ..board.generator import DEFAULT_ALPHABET, DEFAULT_SEED_WORDS
from ..board.models import Position


# Type aliases
Mode = Literal["endless", "levels"]
RejectionCode = Literal["INVALID_LENGTH", "ALREADY_FOUND", "NOT_A_WORD"]
LevelStatus = Literal["idle", "playing", "completed", "failed", "cleared"]
EventKind = Literal[
    "cell_highlighted",
    "cell_unblocked",
    "bonus_consumed",
    "letter_replaced",
    "word_accepted",
    "word_rejected",
    "score_changed",
    "grid_rebuilt",
    "level_started",
    "level_state_changed",
    "level_completed",
    "level_failed",
    "level_load_failed",
    "all_levels_cleared",
]


class WordOutcome(BaseModel):
    """Result of evaluating one finished selection."""
    word: str
    accepted: bool
    code: Optional[RejectionCode] = None
    message: str = ""
    score: int = 0
    bonus_used: int = 0
    path: List[Position] = Field(default_factory=list)
    unlocked_positions: List[Position] = Field(default_factory=list)
    replaced_positions: List[Position] = Field(default_factory=list)


class LevelRules(BaseModel):
    """Objectives for one level."""
    level: int = Field(..., ge=1)
    required_words: int = Field(..., ge=0)
    required_bonus: int = Field(0, ge=0)
    time_limit: float = Field(0, ge=0)  # 0 = untimed
    clear_blocked: bool = False

    @property
    def timed(self) -> bool:
        return self.time_limit > 0


class LevelState(BaseModel):
    """Progress counters for the level being played."""
    level: int = 0
    words_made: int = 0
    bonus_used: int = 0
    remaining_time: float = 0
    remaining_blocked: int = 0
    initial_blocked: int = 0
    timer_active: bool = False
    status: LevelStatus = "idle"


class GameEvent(BaseModel):
    """A state change reported to observers (presentation, logging, the CLI)."""
    kind: EventKind
    position: Optional[Position] = None
    selected: Optional[bool] = None
    letter: Optional[str] = None
    outcome: Optional[WordOutcome] = None
    total_score: Optional[int] = None
    level: Optional[int] = None
    state: Optional[LevelState] = None
    reason: str = ""


Listener = Callable[[GameEvent], None]


class EngineConfig(BaseModel):
    """Configuration for an engine session."""
    mode: Mode = "endless"
    rows: int = Field(4, ge=1)
    cols: int = Field(4, ge=1)
    seed: Optional[int] = None
    alphabet: str = Field(default=DEFAULT_ALPHABET, min_length=1, pattern=r'^[A-Z]+$')
    seed_words: List[str] = Field(default_factory=lambda: list(DEFAULT_SEED_WORDS))
    start_level: int = Field(1, ge=1)
    # Read by the command-line harness only; the engine itself does no I/O
    word_list: Optional[str] = None
    level_file: Optional[str] = None
