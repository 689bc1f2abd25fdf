"""
Level objectives and transitions for level play.

Each level has a word quota, an optional bonus-letter quota, an optional
time limit and (level 5) a requirement to clear every blocked cell. A
completed level advances after a short delay; a timed-out level restarts
after the same delay. Loading any level cancels a transition still waiting
to run, so a stale callback never acts on the new level.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..board.generator import GridGenerator
from ..board.grid import Grid
from ..board.models import InvalidLevelData, LevelRecord
from .models import GameEvent, LevelRules, LevelState, Listener, WordOutcome
from .scheduler import DeferredTask, Scheduler

log = logging.getLogger(__name__)


# level -> (required words, required bonus, time limit in seconds)
LEVEL_RULES: Dict[int, Tuple[int, int, int]] = {
    1: (5, 0, 0),
    2: (7, 0, 45),
    3: (10, 0, 120),
    4: (1, 4, 0),
    5: (1, 4, 0),
}
CLEAR_BLOCKED_LEVEL = 5
TRANSITION_DELAY = 2.0


def rules_for_level(level: int) -> LevelRules:
    """Objectives for a 1-based level number."""
    if level < 1:
        raise ValueError(f"Level numbers start at 1, got {level}")
    if level in LEVEL_RULES:
        words, bonus, time_limit = LEVEL_RULES[level]
    else:
        words = 5 + (level - 1) * 2
        bonus = 0
        time_limit = max(30, 60 - (level - 1) * 5)
    return LevelRules(
        level=level,
        required_words=words,
        required_bonus=bonus,
        time_limit=time_limit,
        clear_blocked=level == CLEAR_BLOCKED_LEVEL,
    )


class LevelProgression(BaseModel):
    """
    Tracks the current level's objectives and drives level transitions.

    Attributes:
        levels: Parsed level records; level n uses levels[n - 1]
        generator: Builds the authored grid for each level
        scheduler: Runs the delayed advance/restart
        rules: Objectives of the current level
        state: Progress counters of the current level
        generation: Incremented on every level load
        emit: Optional observer for level events
        on_level_loaded: Called with the new grid whenever a level is (re)loaded
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    levels: List[LevelRecord] = Field(default_factory=list)
    generator: GridGenerator = Field(default_factory=GridGenerator)
    scheduler: Scheduler = Field(default_factory=Scheduler)
    rules: Optional[LevelRules] = None
    state: LevelState = Field(default_factory=LevelState)
    generation: int = 0
    emit: Optional[Listener] = None
    on_level_loaded: Optional[Callable[[Grid], None]] = None
    _pending: Optional[DeferredTask] = None

    @property
    def current_level(self) -> int:
        return self.state.level

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def _emit(self, kind: str, reason: str = "") -> None:
        if self.emit is not None:
            self.emit(GameEvent(
                kind=kind,
                level=self.state.level,
                state=self.state.model_copy(),
                reason=reason,
            ))

    def setup_level(self, level: int) -> Grid:
        """
        Load level `level` (1-based) and reset its counters.

        The grid is built before anything else changes, so a failed load
        leaves the previous level untouched.

        Raises:
            InvalidLevelData: If the level does not exist or its data is malformed
        """
        try:
            grid = self.generator.build_authored(self.levels, level - 1)
        except InvalidLevelData as e:
            log.error("Failed to load level %d: %s", level, e)
            raise

        self._cancel_pending()
        self.generation += 1
        self.rules = rules_for_level(level)
        blocked = grid.blocked_count
        self.state = LevelState(
            level=level,
            remaining_time=self.rules.time_limit,
            remaining_blocked=blocked,
            initial_blocked=blocked,
            timer_active=self.rules.timed,
            status="playing",
        )

        if self.on_level_loaded is not None:
            self.on_level_loaded(grid)

        log.info(
            "Level %d rules: %d words, %d bonus, %ss, %d blocked",
            level, self.rules.required_words, self.rules.required_bonus,
            self.rules.time_limit, blocked,
        )
        self._emit("level_started")
        return grid

    def restart_level(self) -> Grid:
        return self.setup_level(self.state.level)

    def next_level(self) -> Optional[Grid]:
        """Advance to the following level, or report that every level is cleared."""
        following = self.state.level + 1
        if following > self.level_count:
            self.state.status = "cleared"
            self.state.timer_active = False
            log.info("All levels completed")
            self._emit("all_levels_cleared")
            return None
        log.info("Loading level %d", following)
        return self.setup_level(following)

    def stop(self) -> None:
        """Leave level play: cancel transitions and the timer."""
        self.scheduler.cancel_all()
        self._pending = None
        self.generation += 1
        self.state.timer_active = False
        self.state.status = "idle"

    def tick(self, delta: float) -> None:
        """Run the level timer down by `delta` seconds."""
        if not self.state.timer_active or self.state.remaining_time <= 0:
            return
        self.state.remaining_time -= delta
        if self.state.remaining_time <= 0:
            self.fail("Time's up.")

    def on_word_made(self, outcome: WordOutcome) -> None:
        """Count an accepted word and its bonus letters, then check for completion."""
        if self.state.status == "idle":
            return
        self.state.words_made += 1
        self.state.bonus_used += outcome.bonus_used
        log.debug(
            "Word '%s' made. Progress: %d/%d words, bonus %d/%d",
            outcome.word, self.state.words_made, self.rules.required_words,
            self.state.bonus_used, self.rules.required_bonus,
        )
        self._emit("level_state_changed")
        self.check_complete()

    def on_cell_unblocked(self) -> None:
        if self.state.status == "idle":
            return
        self.state.remaining_blocked = max(0, self.state.remaining_blocked - 1)
        log.debug("Tile unblocked, %d/%d remaining", self.state.remaining_blocked, self.state.initial_blocked)
        self._emit("level_state_changed")
        self.check_complete()

    def objectives_met(self) -> bool:
        if self.rules is None:
            return False
        state, rules = self.state, self.rules
        words_met = state.words_made >= rules.required_words
        bonus_met = rules.required_bonus == 0 or state.bonus_used >= rules.required_bonus
        time_ok = not state.timer_active or state.remaining_time > 0
        blocked_cleared = not rules.clear_blocked or state.remaining_blocked == 0
        return words_met and bonus_met and time_ok and blocked_cleared

    def check_complete(self) -> bool:
        """
        Complete the level if every objective is met.

        Only a level still in play can complete, so completion fires once.
        """
        if self.state.status != "playing" or not self.objectives_met():
            return False
        self.state.status = "completed"
        self.state.timer_active = False
        log.info("Level %d complete", self.state.level)
        self._emit("level_completed")
        self._defer(self.next_level, "advance")
        return True

    def fail(self, reason: str) -> None:
        if self.state.status != "playing":
            return
        self.state.status = "failed"
        self.state.timer_active = False
        log.info("Level %d failed: %s", self.state.level, reason)
        self._emit("level_failed", reason=reason)
        self._defer(self.restart_level, "restart")

    def _defer(self, action: Callable[[], object], label: str) -> None:
        generation = self.generation

        def run() -> None:
            if generation != self.generation:
                return
            self._pending = None
            try:
                action()
            except InvalidLevelData as e:
                # Already logged by setup_level; the current level stays as it is
                self._emit("level_load_failed", reason=str(e))

        self._cancel_pending()
        self._pending = self.scheduler.schedule(
            TRANSITION_DELAY, run, label=f"{label} level {self.state.level}"
        )

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    @property
    def has_pending_transition(self) -> bool:
        return self._pending is not None and self._pending.pending

    def objective_text(self) -> str:
        """Human-readable objective line for the current level."""
        if self.rules is None:
            return ""
        state, rules = self.state, self.rules
        progress = f"({state.words_made}/{rules.required_words})"
        if state.level == 1:
            return f"Make {rules.required_words} words\n{progress}"
        if state.level in (2, 3):
            return f"Make {rules.required_words} words in {rules.time_limit:g}s\n{progress}"
        if state.level == 4:
            return (
                f"Use {rules.required_bonus} bonus letters\n"
                f"(Bonus used: {state.bonus_used}/{rules.required_bonus})"
            )
        if state.level == CLEAR_BLOCKED_LEVEL:
            return (
                f"Unlock all blocked tiles & use {rules.required_bonus} bonus\n"
                f"Bonus: {state.bonus_used}/{rules.required_bonus} | "
                f"Blocked: {state.remaining_blocked} remaining"
            )
        return f"Words: {state.words_made}/{rules.required_words}, Time: {max(0, state.remaining_time):.0f}s"

    def get_state(self) -> Dict:
        return {
            "level": self.state.level,
            "status": self.state.status,
            "words_made": self.state.words_made,
            "bonus_used": self.state.bonus_used,
            "remaining_time": self.state.remaining_time,
            "remaining_blocked": self.state.remaining_blocked,
            "timer_active": self.state.timer_active,
            "rules": self.rules.model_dump() if self.rules else None,
            "has_pending_transition": self.has_pending_transition,
        }
