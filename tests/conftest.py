"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import BoardConfig, Cell, GameEngine


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def default_engine() -> GameEngine:
    """Create a default 9x9 game with 10 mines."""
    return GameEngine(seed=1234)


@pytest.fixture
def small_engine() -> GameEngine:
    """Create a 3x3 game with one mine fixed at (2, 2)."""
    engine = GameEngine(BoardConfig(3, 3, 1))
    engine.place_mines([(2, 2)])
    return engine


@pytest.fixture
def empty_engine() -> GameEngine:
    """Create a game with no mines for cascade testing."""
    return GameEngine(BoardConfig(5, 5, 0))


@pytest.fixture
def chord_engine() -> GameEngine:
    """
    Create a 4x4 game with mines at (0, 0) and (3, 3).

    Layout (x to the right, y down)::

        * 1 0 0
        1 1 0 0
        0 0 1 1
        0 0 1 *
    """
    engine = GameEngine(BoardConfig(4, 4, 2))
    engine.place_mines([(0, 0), (3, 3)])
    return engine


@pytest.fixture
def fixed_clock():
    """Manually advanced clock for timestamp tests."""
    class Clock:
        def __init__(self) -> None:
            self.now = 1000.0

        def __call__(self) -> float:
            return self.now

    return Clock()


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
