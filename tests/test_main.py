"""Test the command-line harness helpers."""

import pytest
from pydantic import ValidationError

from src.board import Grid, InvalidLevelData, LevelRecord, Position
from src.gameplay import EngineConfig, GameEvent, WordGridEngine
from src.main import (
    format_event,
    load_config,
    load_dictionary,
    load_levels,
    parse_path,
    run_script,
)
from src.utils.grid_visualizer import render_cell, render_grid


LEVEL_JSON = """
{"data": [
  {"gridSize": {"x": 3, "y": 2},
   "gridData": [
     {"tileType": 0, "letter": "C"}, {"tileType": 0, "letter": "A"}, {"tileType": 0, "letter": "T"},
     {"tileType": 0, "letter": "D"}, {"tileType": 0, "letter": "O"}, {"tileType": 0, "letter": "G"}
   ]}
]}
"""


@pytest.fixture
def level_engine():
    levels = [LevelRecord.model_validate({
        "gridSize": {"x": 3, "y": 2},
        "gridData": [{"tileType": 0, "letter": letter} for letter in "CATDOG"],
    })]
    engine = WordGridEngine.create(["CAT", "DOG"], levels=levels)
    engine.start_levels(1)
    return engine


class TestLoading:
    """Test loading config and game data from disk."""

    def test_load_config(self, tmp_path):
        """YAML values populate the engine config."""
        path = tmp_path / "config.yaml"
        path.write_text("mode: levels\nrows: 5\ncols: 6\nseed: 3\nword_list: words.txt\n")

        config = load_config(str(path))

        assert isinstance(config, EngineConfig)
        assert config.mode == "levels"
        assert (config.rows, config.cols) == (5, 6)
        assert config.seed == 3
        assert config.word_list == "words.txt"

    def test_empty_config_uses_defaults(self, tmp_path):
        """An empty YAML file gives the default config."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(str(path))
        assert config.mode == "endless"
        assert (config.rows, config.cols) == (4, 4)

    def test_missing_config(self, tmp_path):
        """A missing config file is reported."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_config_value(self, tmp_path):
        """Out-of-range values fail validation."""
        path = tmp_path / "config.yaml"
        path.write_text("rows: 0\n")
        with pytest.raises(ValidationError):
            load_config(str(path))

    def test_load_dictionary(self, tmp_path):
        """Word list files are read into a dictionary."""
        path = tmp_path / "words.txt"
        path.write_text("cat\ndog\n\n")
        dictionary = load_dictionary(str(path))
        assert len(dictionary) == 2
        assert dictionary.contains("DOG")

    def test_load_levels(self, tmp_path):
        """Level files are parsed into level records."""
        path = tmp_path / "levels.json"
        path.write_text(LEVEL_JSON)
        levels = load_levels(str(path))
        assert len(levels) == 1
        assert levels[0].rows == 2

    def test_load_bad_levels(self, tmp_path):
        """Malformed level files raise InvalidLevelData."""
        path = tmp_path / "levels.json"
        path.write_text("[1, 2")
        with pytest.raises(InvalidLevelData):
            load_levels(str(path))


class TestParsePath:
    """Test gesture line parsing."""

    def test_pairs(self):
        assert parse_path("0,0 0,1  1,2") == [Position(0, 0), Position(0, 1), Position(1, 2)]

    def test_empty_line(self):
        assert parse_path("") == []

    @pytest.mark.parametrize("line", ["0", "0,1,2", "a,b"])
    def test_malformed(self, line):
        """Malformed pairs raise ValueError."""
        with pytest.raises(ValueError):
            parse_path(line)


class TestRunScript:
    """Test feeding script lines to the engine."""

    def test_script(self, level_engine):
        """Gestures, repeats, bad input and quit are handled in order."""
        output = []
        lines = [
            "# comment",
            "0,0 0,1 0,2",
            "0,0 0,1 0,2",
            "1,0 1,1 1,2",
            "tick abc",
            "oops",
            "state",
            "quit",
            "0,0",
        ]

        processed = run_script(level_engine, lines, echo=output.append)

        assert processed == 7
        assert "✓ CAT +1" in output
        assert "✗ CAT: 'CAT' has already been found" in output
        assert "✓ DOG +1" in output
        assert sum(1 for line in output if line.startswith("Error:")) == 2
        assert level_engine.score.total == 2
        assert level_engine.progression.state.words_made == 2

    def test_tick_and_reset(self, level_engine):
        """tick advances the clock and reset restarts the level."""
        output = []
        run_script(level_engine, ["0,0 0,1 0,2", "tick 1.5", "reset"], echo=output.append)

        assert level_engine.scheduler.clock == 1.5
        assert level_engine.score.total == 0
        assert output[-1] == render_grid(level_engine.grid)


class TestFormatting:
    """Test text rendering of events and grids."""

    def test_level_events(self):
        assert format_event(GameEvent(kind="level_started", level=2)) == "=== Level 2 ==="
        assert format_event(GameEvent(kind="level_failed", level=2, reason="Time's up.")) == "Level 2 failed: Time's up."
        assert format_event(GameEvent(kind="all_levels_cleared")) == "*** All levels cleared! ***"
        assert format_event(GameEvent(kind="level_load_failed", reason="bad data")) == (
            "Could not load the next level: bad data"
        )

    def test_other_events_not_printed(self):
        assert format_event(GameEvent(kind="cell_highlighted")) is None

    def test_render_cell_markers(self):
        """Selected, blocked and bonus cells get distinct markers."""
        assert render_cell("A", False, False, False) == " A "
        assert render_cell("A", True, False, False) == "#A#"
        assert render_cell("A", False, True, False) == "*A*"
        assert render_cell("A", True, True, True) == "[A]"

    def test_render_grid_without_coordinates(self):
        grid = Grid.from_rows(["CAT", "DOG"])
        grid.cell(Position(1, 0)).blocked = True
        assert render_grid(grid, selection=[Position(0, 1)], coordinates=False) == " C [A] T \n#D# O  G "
