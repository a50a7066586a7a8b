"""
Unit tests for BoardConfig and Board.

Tests configuration validation, neighbor lookup, mine placement
and adjacency counting.
"""
import random

import numpy as np
import pytest
from minesweeper import Board, BoardConfig, InvalidConfigurationError


def count_mines_around(board: Board, x: int, y: int) -> int:
    """Brute-force count of mines in the 3x3 block around (x, y)."""
    count = 0
    for ny in range(y - 1, y + 2):
        for nx in range(x - 1, x + 2):
            if (nx, ny) == (x, y):
                continue
            cell = board.get_cell(nx, ny)
            if cell is not None and cell.is_mine:
                count += 1
    return count


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_valid_config_creation(self, valid_config: BoardConfig) -> None:
        """Valid configuration should be created successfully."""
        assert valid_config.width == 9
        assert valid_config.height == 9
        assert valid_config.num_mines == 10
        assert valid_config.total_cells == 81

    def test_zero_width_raises_error(self) -> None:
        """Width of 0 should raise an error."""
        with pytest.raises(InvalidConfigurationError, match="dimensions must be positive"):
            BoardConfig(0, 9, 10)

    def test_zero_height_raises_error(self) -> None:
        """Height of 0 should raise an error."""
        with pytest.raises(InvalidConfigurationError, match="dimensions must be positive"):
            BoardConfig(9, 0, 10)

    def test_negative_mines_raises_error(self) -> None:
        """Negative mine count should raise an error."""
        with pytest.raises(InvalidConfigurationError, match="cannot be negative"):
            BoardConfig(9, 9, -1)

    def test_too_many_mines_raises_error(self) -> None:
        """Mine count must leave at least one safe cell."""
        with pytest.raises(InvalidConfigurationError, match="Too many mines"):
            BoardConfig(3, 3, 9)

    def test_configuration_error_is_value_error(self) -> None:
        """Callers catching ValueError still see configuration errors."""
        with pytest.raises(ValueError):
            BoardConfig(-1, 3, 0)


# ============================================================================
# Grid Tests
# ============================================================================

class TestGrid:
    """Test grid layout and neighbor lookup."""

    def test_grid_is_indexed_by_row_then_column(self) -> None:
        """rows[y][x] holds the cell at (x, y)."""
        board = Board(BoardConfig(4, 2, 0))
        assert len(board.rows) == 2
        assert len(board.rows[0]) == 4
        assert board.rows[1][3].position == (3, 1)

    def test_get_cell_out_of_bounds_returns_none(self) -> None:
        """Out-of-bounds lookups return None."""
        board = Board(BoardConfig(3, 3, 0))
        assert board.get_cell(-1, 0) is None
        assert board.get_cell(0, 3) is None

    @pytest.mark.parametrize(
        "position, expected",
        [((0, 0), 3), ((1, 0), 5), ((1, 1), 8), ((2, 2), 3)],
    )
    def test_neighbor_count(self, position, expected) -> None:
        """Corners have 3 neighbors, edges 5 and interior cells 8."""
        board = Board(BoardConfig(3, 3, 0))
        assert len(board.neighbors(*position)) == expected

    def test_neighbors_exclude_center(self) -> None:
        """A cell is never its own neighbor."""
        board = Board(BoardConfig(3, 3, 0))
        positions = {cell.position for cell in board.neighbors(1, 1)}
        assert (1, 1) not in positions


# ============================================================================
# Mine Generation Tests
# ============================================================================

class TestGenerateMines:
    """Test random mine placement."""

    @pytest.mark.parametrize("seed", range(20))
    def test_places_exact_mine_count(self, seed: int) -> None:
        """Exactly num_mines cells hold a mine."""
        board = Board(BoardConfig(9, 9, 10))
        board.generate_mines((4, 4), random.Random(seed))
        assert board.mine_count == 10

    @pytest.mark.parametrize("initial", [(0, 0), (4, 4), (8, 0), (3, 8)])
    def test_first_click_area_is_mine_free(self, initial) -> None:
        """No mine lies in the 3x3 block around the first click."""
        board = Board(BoardConfig(9, 9, 60))
        board.generate_mines(initial, random.Random(7))
        initial_x, initial_y = initial
        for cell in board:
            if abs(cell.x - initial_x) <= 1 and abs(cell.y - initial_y) <= 1:
                assert cell.is_mine is False

    def test_adjacent_counts_match_neighbors(self) -> None:
        """Every safe cell counts the mines around it."""
        board = Board(BoardConfig(16, 16, 40))
        board.generate_mines((5, 5), random.Random(3))
        for cell in board:
            if not cell.is_mine:
                assert cell.adjacent_mines == count_mines_around(
                    board, cell.x, cell.y
                )

    def test_fills_every_eligible_cell(self) -> None:
        """Mines may take every cell outside the first click area."""
        board = Board(BoardConfig(4, 4, 12))
        positions = board.generate_mines((0, 0), random.Random(0))
        assert sorted(positions) == sorted(board.eligible_mine_positions((0, 0)))

    def test_too_many_mines_for_first_click_raises(self) -> None:
        """Placement fails fast when mines do not fit."""
        board = Board(BoardConfig(3, 3, 1))
        with pytest.raises(InvalidConfigurationError, match="Cannot place"):
            board.generate_mines((1, 1))
        assert board.mine_count == 0

    def test_same_seed_gives_same_layout(self) -> None:
        """Placement is reproducible with a seeded generator."""
        first = Board(BoardConfig(9, 9, 10))
        second = Board(BoardConfig(9, 9, 10))
        assert first.generate_mines((0, 0), random.Random(42)) == \
            second.generate_mines((0, 0), random.Random(42))


# ============================================================================
# Explicit Placement Tests
# ============================================================================

class TestPlaceMines:
    """Test fixed mine layouts."""

    def test_place_mines_sets_counts(self) -> None:
        """Adjacency is computed for a fixed layout."""
        board = Board(BoardConfig(3, 3, 1))
        board.place_mines([(2, 2)])
        assert board.get_cell(2, 2).is_mine is True
        assert board.get_cell(1, 1).adjacent_mines == 1
        assert board.get_cell(0, 0).adjacent_mines == 0

    def test_out_of_bounds_position_raises(self) -> None:
        """Positions outside the board are rejected."""
        board = Board(BoardConfig(3, 3, 1))
        with pytest.raises(InvalidConfigurationError, match="outside"):
            board.place_mines([(3, 0)])

    def test_duplicate_position_raises(self) -> None:
        """A position may hold only one mine."""
        board = Board(BoardConfig(3, 3, 2))
        with pytest.raises(InvalidConfigurationError, match="twice"):
            board.place_mines([(0, 0), (0, 0)])
        assert board.mine_count == 0


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test observation array."""

    def test_new_board_observation_all_hidden(self) -> None:
        """New board observation should be all -1."""
        obs = Board(BoardConfig(5, 3, 0)).get_observation()
        assert obs.shape == (3, 5)
        assert obs.dtype == np.int8
        assert np.all(obs == -1)

    def test_observation_uses_row_column_order(self) -> None:
        """obs[y, x] reflects the cell at (x, y)."""
        board = Board(BoardConfig(5, 3, 0))
        board.get_cell(4, 1).toggle_flag()
        assert board.get_observation()[1, 4] == -2
