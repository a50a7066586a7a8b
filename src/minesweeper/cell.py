"""
Cell module for Minesweeper game.

Represents individual grid positions with their coordinates, content
(mine/number) and marking state (revealed/flagged).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        x: Column index (0-based).
        y: Row index (0-based).
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
            Only meaningful once mines have been generated.
        revealed: Whether the cell has been uncovered. Never reset.
        flagged: Whether the player marked the cell as a suspected mine.
    """

    x: int = 0
    y: int = 0
    is_mine: bool = False
    adjacent_mines: int = 0
    revealed: bool = False
    flagged: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell, dropping any flag on it.

        Returns:
            True if the cell changed, False if it was already revealed.
        """
        if self.revealed:
            return False
        self.revealed = True
        self.flagged = False
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.revealed:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def state(self) -> CellState:
        """Visual state derived from the reveal and flag markers."""
        if self.revealed:
            return CellState.REVEALED
        if self.flagged:
            return CellState.FLAGGED
        return CellState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if cell is neither revealed nor flagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.revealed

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged and still covered."""
        return self.state == CellState.FLAGGED

    @property
    def position(self) -> Tuple[int, int]:
        """(x, y) coordinates of the cell."""
        return self.x, self.y

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.is_mine:
            return 9
        return self.adjacent_mines
