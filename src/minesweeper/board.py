"""
Board module for Minesweeper game.

Implements the cell grid with neighbor lookup, mine placement and
adjacency counting. Game rules live in the engine module.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# (dx, dy) offsets of the eight surrounding cells
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)


class InvalidConfigurationError(ValueError):
    """Raised when board parameters cannot produce a playable game."""


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise InvalidConfigurationError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise InvalidConfigurationError("Number of mines cannot be negative")
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise InvalidConfigurationError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.width * self.height


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Grid of cells indexed ``[y][x]``.

    The board never changes size; a new game builds a new board.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell(x=x, y=y) for x in range(self.config.width)]
            for y in range(self.config.height)
        ]

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def rows(self) -> List[List[Cell]]:
        """The live grid rows."""
        return self._grid

    def __iter__(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order."""
        for row in self._grid:
            yield from row

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(x, y):
            return None
        return self._grid[y][x]

    def neighbors(self, x: int, y: int) -> List[Cell]:
        """
        Get the in-bounds cells surrounding a position.

        Args:
            x: Column of the center cell.
            y: Row of the center cell.

        Returns:
            Up to eight neighboring cells.
        """
        cells = []
        for dx, dy in NEIGHBOR_OFFSETS:
            new_x = x + dx
            new_y = y + dy
            if self.is_valid_position(new_x, new_y):
                cells.append(self._grid[new_y][new_x])
        return cells

    # ========================================================================
    # Mine Placement (Mid-level)
    # ========================================================================

    def eligible_mine_positions(
        self, initial: Tuple[int, int]
    ) -> List[Tuple[int, int]]:
        """
        Get all positions outside the 3x3 block around ``initial``.

        Args:
            initial: (x, y) of the first revealed cell.

        Returns:
            List of (x, y) positions that may hold a mine.
        """
        initial_x, initial_y = initial
        positions = []
        for cell in self:
            if abs(cell.x - initial_x) <= 1 and abs(cell.y - initial_y) <= 1:
                continue
            positions.append((cell.x, cell.y))
        return positions

    def generate_mines(
        self,
        initial: Tuple[int, int],
        rng: Optional[random.Random] = None,
    ) -> List[Tuple[int, int]]:
        """
        Place ``num_mines`` mines uniformly at random, keeping the block
        around ``initial`` clear, then compute adjacency counts.

        Args:
            initial: (x, y) of the first revealed cell.
            rng: Random source; the module-level generator when omitted.

        Returns:
            The (x, y) positions that received a mine.

        Raises:
            InvalidConfigurationError: If there are fewer eligible cells
                than mines to place. The board is left unchanged.
        """
        positions = self.eligible_mine_positions(initial)
        if self.config.num_mines > len(positions):
            raise InvalidConfigurationError(
                f"Cannot place {self.config.num_mines} mines: only "
                f"{len(positions)} cells are outside the first click area"
            )

        rng = rng or random
        mine_positions = rng.sample(positions, self.config.num_mines)
        for x, y in mine_positions:
            self._grid[y][x].is_mine = True
        self.calculate_adjacent_mines()

        logger.debug(
            "Placed %d mines on %dx%d board around first click %s",
            len(mine_positions), self.width, self.height, initial,
        )
        return mine_positions

    def place_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Place mines at explicit positions and compute adjacency counts.

        Args:
            positions: (x, y) coordinates of the mines.

        Raises:
            InvalidConfigurationError: On out-of-bounds or repeated
                positions, or if the board already holds mines.
        """
        if any(cell.is_mine for cell in self):
            raise InvalidConfigurationError("Board already holds mines")

        seen: Set[Tuple[int, int]] = set()
        for x, y in positions:
            if not self.is_valid_position(x, y):
                raise InvalidConfigurationError(
                    f"Mine position {(x, y)} is outside the board"
                )
            if (x, y) in seen:
                raise InvalidConfigurationError(
                    f"Mine position {(x, y)} given twice"
                )
            seen.add((x, y))

        for x, y in seen:
            self._grid[y][x].is_mine = True
        self.calculate_adjacent_mines()

    def calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for cell in self:
            if not cell.is_mine:
                cell.adjacent_mines = self._count_adjacent_mines(cell.x, cell.y)

    def _count_adjacent_mines(self, x: int, y: int) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(1 for neighbor in self.neighbors(x, y) if neighbor.is_mine)

    def reveal_all_mines(self) -> None:
        """Uncover every mine, as shown on a lost board."""
        for cell in self:
            if cell.is_mine:
                cell.reveal()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def mine_count(self) -> int:
        """Number of cells currently holding a mine."""
        return sum(1 for cell in self if cell.is_mine)

    @property
    def flag_count(self) -> int:
        """Number of covered cells carrying a flag."""
        return sum(1 for cell in self if cell.is_flagged)

    def all_safe_cells_cleared(self) -> bool:
        """
        Check whether every cell is revealed, flagged or a mine.

        A flagged safe cell counts as cleared.
        """
        return all(
            cell.revealed or cell.flagged or cell.is_mine for cell in self
        )

    def misflagged_positions(self) -> List[Tuple[int, int]]:
        """Positions of flagged cells that hold no mine."""
        return [
            (cell.x, cell.y) for cell in self
            if cell.is_flagged and not cell.is_mine
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D int8 array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for cell in self:
            obs[cell.y, cell.x] = cell.to_observation()
        return obs
