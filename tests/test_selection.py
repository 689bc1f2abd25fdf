"""Test the path selection state machine."""

import random
from unittest.mock import Mock

import pytest

from src.board import Grid, Position, are_adjacent
from src.gameplay import SelectionController


@pytest.fixture
def grid():
    return Grid.from_rows(["CAT", "ORE", "DOG"])


def highlighted(emit: Mock):
    """(position, selected) pairs from cell_highlighted events, in order."""
    return [
        (tuple(call.args[0].position), call.args[0].selected)
        for call in emit.call_args_list
        if call.args[0].kind == "cell_highlighted"
    ]


class TestBegin:
    """Test starting a gesture."""

    def test_begin_selects_first_cell(self, grid):
        """begin moves to selecting with a one-cell path."""
        emit = Mock()
        selection = SelectionController(emit=emit)
        selection.begin(grid, Position(0, 0))

        assert selection.state == "selecting"
        assert selection.path == [(0, 0)]
        assert highlighted(emit) == [((0, 0), True)]

    def test_begin_out_of_bounds_ignored(self, grid):
        """A touch outside the grid does nothing."""
        selection = SelectionController()
        selection.begin(grid, Position(5, 5))
        assert selection.state == "idle"
        assert selection.path == []

    def test_begin_while_selecting_restarts(self, grid):
        """A second begin drops the old path."""
        emit = Mock()
        selection = SelectionController(emit=emit)
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        selection.begin(grid, Position(2, 2))

        assert selection.path == [(2, 2)]
        assert ((0, 0), False) in highlighted(emit)
        assert ((0, 1), False) in highlighted(emit)

    def test_begin_on_blocked_cell_in_levels(self, grid):
        """In level play a blocked start cell opens an empty gesture."""
        grid.cell(Position(0, 0)).blocked = True
        selection = SelectionController(mode="levels")
        selection.begin(grid, Position(0, 0))

        assert selection.state == "selecting"
        assert selection.path == []

        selection.extend(grid, Position(2, 2))
        assert selection.path == [(2, 2)]

    def test_blocked_flag_ignored_in_endless(self, grid):
        """Free play does not refuse blocked cells."""
        grid.cell(Position(0, 0)).blocked = True
        selection = SelectionController(mode="endless")
        selection.begin(grid, Position(0, 0))
        assert selection.path == [(0, 0)]


class TestExtend:
    """Test growing and backtracking a path."""

    def test_extend_adjacent(self, grid):
        """Orthogonal and diagonal neighbours are appended."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(1, 1))
        selection.extend(grid, Position(1, 2))
        assert selection.path == [(0, 0), (1, 1), (1, 2)]

    def test_extend_non_adjacent_ignored(self, grid):
        """A cell two steps away is ignored."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 2))
        assert selection.path == [(0, 0)]

    def test_extend_out_of_bounds_ignored(self, grid):
        """A cell outside the grid is ignored."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(-1, 0))
        assert selection.path == [(0, 0)]

    def test_extend_when_idle_is_noop(self, grid):
        """extend without begin does nothing."""
        selection = SelectionController()
        selection.extend(grid, Position(0, 0))
        assert selection.state == "idle"
        assert selection.path == []

    def test_backtrack_to_middle(self, grid):
        """[A, B, C] then re-entering B leaves [A, B]."""
        emit = Mock()
        selection = SelectionController(emit=emit)
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        selection.extend(grid, Position(0, 2))
        selection.extend(grid, Position(0, 1))

        assert selection.path == [(0, 0), (0, 1)]
        assert highlighted(emit)[-1] == ((0, 2), False)

    def test_backtrack_to_first(self, grid):
        """Re-entering the first cell drops everything after it."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        selection.extend(grid, Position(1, 1))
        selection.extend(grid, Position(0, 0))
        assert selection.path == [(0, 0)]

    def test_reenter_last_is_noop(self, grid):
        """Re-entering the last cell changes nothing."""
        emit = Mock()
        selection = SelectionController(emit=emit)
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        count = emit.call_count
        selection.extend(grid, Position(0, 1))

        assert selection.path == [(0, 0), (0, 1)]
        assert emit.call_count == count

    def test_blocked_cell_ignored_in_levels(self, grid):
        """Blocked cells cannot join a level-play path."""
        grid.cell(Position(0, 1)).blocked = True
        selection = SelectionController(mode="levels")
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        assert selection.path == [(0, 0)]

    def test_random_walk_keeps_path_valid(self, grid):
        """Any sequence of touches leaves an adjacent, repetition-free path."""
        rng = random.Random(1234)
        selection = SelectionController()
        selection.begin(grid, Position(1, 1))

        for _ in range(500):
            selection.extend(grid, Position(rng.randrange(-1, 4), rng.randrange(-1, 4)))
            path = selection.path
            assert len(path) == len(set(path))
            for a, b in zip(path, path[1:]):
                assert are_adjacent(a, b)


class TestRelease:
    """Test finishing a gesture."""

    def test_release_hands_path_to_evaluator(self, grid):
        """The finished path is evaluated and its result returned."""
        evaluate = Mock(return_value="result")
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))

        assert selection.release(evaluate) == "result"
        evaluate.assert_called_once_with([(0, 0), (0, 1)])

    def test_release_clears_selection(self, grid):
        """After release the controller is idle and every cell un-highlighted."""
        emit = Mock()
        selection = SelectionController(emit=emit)
        selection.begin(grid, Position(0, 0))
        selection.extend(grid, Position(0, 1))
        selection.release(Mock())

        assert selection.state == "idle"
        assert selection.path == []
        assert highlighted(emit)[-2:] == [((0, 0), False), ((0, 1), False)]

    def test_release_when_idle(self, grid):
        """Releasing without a gesture returns None and evaluates nothing."""
        evaluate = Mock()
        selection = SelectionController()
        assert selection.release(evaluate) is None
        evaluate.assert_not_called()

    def test_release_clears_even_if_evaluation_raises(self, grid):
        """The selection is cleared when the evaluator raises."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))

        with pytest.raises(RuntimeError):
            selection.release(Mock(side_effect=RuntimeError("boom")))
        assert selection.state == "idle"
        assert selection.path == []

    def test_cancel(self, grid):
        """cancel drops the gesture without evaluating."""
        selection = SelectionController()
        selection.begin(grid, Position(0, 0))
        selection.cancel()
        assert selection.state == "idle"
        assert selection.path == []
