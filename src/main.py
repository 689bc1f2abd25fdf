"""
Text harness for playing the word grid engine from a terminal or a script.

Usage:
    python -m src.main config.yaml
    python -m src.main config.yaml --words words.txt --levels levels.json --verbose

Each line read from stdin is one command:
    0,0 0,1 1,2     select a path (row,col pairs) and release it
    tick 2.5        advance time by 2.5 seconds
    reset           rebuild the grid and clear the score
    state           print the engine state
    quit            stop reading
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import yaml

from .board import InvalidLevelData, LevelRecord, Position, parse_levels
from .gameplay import EngineConfig, GameEvent, WordGridEngine, WordOutcome
from .utils.grid_visualizer import render_grid
from .words import Dictionary, EmptyDictionary


def load_config(config_path: str) -> EngineConfig:
    """Load engine configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return EngineConfig(**data)


def load_dictionary(word_list_path: str) -> Dictionary:
    """Build a dictionary from a newline-separated word list file."""
    path = Path(word_list_path)
    if not path.exists():
        raise FileNotFoundError(f"Word list not found: {word_list_path}")
    return Dictionary.from_text(path.read_text(encoding="utf-8"))


def load_levels(level_file_path: str) -> List[LevelRecord]:
    """Parse a JSON level data file."""
    path = Path(level_file_path)
    if not path.exists():
        raise FileNotFoundError(f"Level file not found: {level_file_path}")
    return parse_levels(path.read_text(encoding="utf-8"))


def parse_path(line: str) -> List[Position]:
    """
    Parse a gesture line of whitespace-separated row,col pairs.

    Raises:
        ValueError: If a pair is malformed
    """
    positions = []
    for token in line.split():
        parts = token.split(",")
        if len(parts) != 2:
            raise ValueError(f"Invalid position '{token}', expected row,col")
        positions.append(Position(int(parts[0]), int(parts[1])))
    return positions


def format_outcome(outcome: WordOutcome) -> str:
    if outcome.accepted:
        text = f"✓ {outcome.word} +{outcome.score}"
        if outcome.bonus_used:
            text += f" (bonus x{outcome.bonus_used})"
        if outcome.unlocked_positions:
            text += f" (unblocked {len(outcome.unlocked_positions)})"
        return text
    return f"✗ {outcome.word or '(empty)'}: {outcome.message}"


def format_event(event: GameEvent) -> Optional[str]:
    """One-line description of level events; other events are not printed."""
    if event.kind == "level_started":
        return f"=== Level {event.level} ==="
    if event.kind == "level_completed":
        return f"*** Level {event.level} complete! ***"
    if event.kind == "level_failed":
        return f"Level {event.level} failed: {event.reason}"
    if event.kind == "level_load_failed":
        return f"Could not load the next level: {event.reason}"
    if event.kind == "all_levels_cleared":
        return "*** All levels cleared! ***"
    return None


def run_script(engine: WordGridEngine, lines: Iterable[str], echo: Callable[[str], None] = print) -> int:
    """
    Feed script commands to the engine.

    Returns:
        Number of commands processed
    """
    processed = 0
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        processed += 1
        command, _, argument = line.partition(" ")

        if command == "quit":
            break
        if command == "tick":
            try:
                engine.tick(float(argument))
            except ValueError as e:
                echo(f"Error: {e}")
        elif command == "reset":
            engine.reset()
            echo(render_grid(engine.grid))
        elif command == "state":
            echo(str(engine.get_state()))
        else:
            try:
                path = parse_path(line)
            except ValueError as e:
                echo(f"Error: {e}")
                continue
            outcome = engine.select(path)
            if outcome is not None:
                echo(format_outcome(outcome))
                echo(f"Score: {engine.score.total} | Average: {engine.score.average:.1f}")
                if engine.mode == "levels":
                    echo(engine.progression.objective_text())
                if outcome.accepted:
                    echo(render_grid(engine.grid))

    return processed


def main():
    parser = argparse.ArgumentParser(
        description="Play the word grid engine from stdin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  mode: endless
  rows: 4
  cols: 4
  seed: 42
  word_list: words.txt
        """
    )
    parser.add_argument(
        "config",
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--words", "-w",
        help="Word list file (overrides word_list in the config)"
    )
    parser.add_argument(
        "--levels", "-l",
        help="Level data JSON file (overrides level_file in the config)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log engine activity to stderr"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    word_list = args.words or config.word_list
    level_file = args.levels or config.level_file
    if not word_list:
        print("Error: a word list is required (--words or word_list in config)", file=sys.stderr)
        sys.exit(1)

    try:
        dictionary = load_dictionary(word_list)
        levels = load_levels(level_file) if level_file else []
    except (FileNotFoundError, EmptyDictionary, InvalidLevelData) as e:
        print(f"Error loading game data: {e}", file=sys.stderr)
        sys.exit(1)

    engine = WordGridEngine.create(dictionary, config=config, levels=levels)
    engine.subscribe(_print_event)

    try:
        engine.start()
    except (ValueError, InvalidLevelData) as e:
        print(f"Error starting game: {e}", file=sys.stderr)
        sys.exit(1)

    print(render_grid(engine.grid))
    if engine.mode == "levels":
        print(engine.progression.objective_text())

    try:
        run_script(engine, sys.stdin)
    except KeyboardInterrupt:
        print("\nInterrupted by user")

    print()
    print("=== Session Summary ===")
    print(f"Words found: {engine.score.word_count}")
    print(f"Total score: {engine.score.total}")
    print(f"Average word score: {engine.score.average:.1f}")

    return 0


def _print_event(event: GameEvent) -> None:
    text = format_event(event)
    if text:
        print(text)


if __name__ == "__main__":
    sys.exit(main())
