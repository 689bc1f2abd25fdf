"""Selection, scoring and level progression for the word grid."""

from .models import (
    EngineConfig,
    EventKind,
    GameEvent,
    LevelRules,
    LevelState,
    LevelStatus,
    Listener,
    Mode,
    RejectionCode,
    WordOutcome,
)
from .score import ScoreBoard, word_score
from .selection import SelectionController
from .evaluator import MAX_WORD_LENGTH, MIN_WORD_LENGTH, WordEvaluator
from .scheduler import DeferredTask, Scheduler
from .progression import LEVEL_RULES, TRANSITION_DELAY, LevelProgression, rules_for_level
from .engine import WordGridEngine

__all__ = [
    "EngineConfig",
    "EventKind",
    "GameEvent",
    "LevelRules",
    "LevelState",
    "LevelStatus",
    "Listener",
    "Mode",
    "RejectionCode",
    "WordOutcome",
    "ScoreBoard",
    "word_score",
    "SelectionController",
    "MAX_WORD_LENGTH",
    "MIN_WORD_LENGTH",
    "WordEvaluator",
    "DeferredTask",
    "Scheduler",
    "LEVEL_RULES",
    "TRANSITION_DELAY",
    "LevelProgression",
    "rules_for_level",
    "WordGridEngine",
]
