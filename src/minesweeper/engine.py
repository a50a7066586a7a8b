"""
Game engine for Minesweeper.

Owns the board and game status, generates mines lazily on the first
reveal, and implements reveal, flag and chord actions together with
win/loss detection.
"""
import logging
import random
import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .board import Board, BoardConfig, InvalidConfigurationError
from .cell import Cell


logger = logging.getLogger(__name__)

Notification = Callable[[], None]


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    PLAY = "play"
    WIN = "win"
    LOST = "lost"


# Seconds between a losing move and the loss notification
LOST_NOTIFICATION_DELAY = 0.01


@dataclass
class GameState:
    """
    Aggregate state of one game.

    Attributes:
        board: Cell grid, owned exclusively by this state.
        mine_generated: Whether mines have been placed.
        status: Current game status.
        start_timestamp: Creation time in seconds.
        end_timestamp: Time the game left PLAY, if it has.
    """

    board: Board
    mine_generated: bool = False
    status: GameStatus = GameStatus.PLAY
    start_timestamp: float = field(default_factory=time.time)
    end_timestamp: Optional[float] = None


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    Rules engine for a single Minesweeper game.

    Every mutating action is a silent no-op returning False when the
    game is over or the action does not apply to the target cell.
    Cells are addressed by (x, y) coordinates.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        on_win: Optional[Notification] = None,
        on_lost: Optional[Notification] = None,
        lost_notification_delay: float = LOST_NOTIFICATION_DELAY,
    ) -> None:
        """
        Initialize the engine and start a fresh game.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            seed: Seed for mine placement; ignored when ``rng`` is given.
            rng: Random source for mine placement.
            clock: Returns the current time in seconds.
            on_win: Called once when the game is won.
            on_lost: Called once, after ``lost_notification_delay``
                seconds, when the game is lost.
            lost_notification_delay: Delay before ``on_lost`` fires.
        """
        self.config = config or BoardConfig()
        self.rng = rng or random.Random(seed)
        self.clock = clock
        self.on_win = on_win
        self.on_lost = on_lost
        self.lost_notification_delay = lost_notification_delay
        self._pending_lost: Optional[threading.Timer] = None
        self._state = self._new_state()

    def _new_state(self) -> GameState:
        return GameState(
            board=Board(self.config),
            start_timestamp=self.clock(),
        )

    # ========================================================================
    # Game Lifecycle
    # ========================================================================

    def reset(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        num_mines: Optional[int] = None,
    ) -> None:
        """
        Start a new game, optionally with new dimensions.

        Omitted parameters keep their current values. A pending loss
        notification from the previous game is cancelled.

        Args:
            width: Number of columns.
            height: Number of rows.
            num_mines: Total mines to place.
        """
        self.cancel_pending_notifications()
        self.config = BoardConfig(
            width=self.config.width if width is None else width,
            height=self.config.height if height is None else height,
            num_mines=self.config.num_mines if num_mines is None else num_mines,
        )
        self._state = self._new_state()

    def generate_mines(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Place mines around a first click at (x, y).

        The clicked cell and its neighbors stay mine-free.

        Returns:
            The (x, y) positions that received a mine.

        Raises:
            InvalidConfigurationError: If the mines do not fit outside
                the first click area.
        """
        positions = self._state.board.generate_mines((x, y), self.rng)
        self._state.mine_generated = True
        return positions

    def place_mines(self, positions: List[Tuple[int, int]]) -> None:
        """
        Use a fixed mine layout instead of random generation.

        Args:
            positions: (x, y) coordinates of the mines.

        Raises:
            InvalidConfigurationError: If mines were already generated or
                a position is invalid.
        """
        if self._state.mine_generated:
            raise InvalidConfigurationError("Mines have already been generated")
        self._state.board.place_mines(positions)
        self._state.mine_generated = True
        logger.debug("Placed %d fixed mines", len(positions))

    # ========================================================================
    # Game Actions
    # ========================================================================

    def reveal(self, x: int, y: int) -> bool:
        """
        Reveal the cell at (x, y).

        On first reveal, places mines avoiding this cell and its
        neighbors. Revealing a cell with no adjacent mines cascades to
        its neighbors. Revealing a mine loses the game. A flag on the
        target does not block a direct reveal.

        Returns:
            True if the cell was revealed, False otherwise.
        """
        if not self.is_playing:
            return False
        cell = self._state.board.get_cell(x, y)
        if cell is None or cell.revealed:
            return False

        if not self._state.mine_generated:
            self.generate_mines(x, y)

        cell.reveal()
        if cell.is_mine:
            self._game_over(GameStatus.LOST)
            return True

        self._flood_reveal(cell)
        self.check_win_condition()
        return True

    def toggle_flag(self, x: int, y: int) -> bool:
        """
        Toggle the flag on the cell at (x, y).

        Returns:
            True if the flag was toggled, False otherwise.
        """
        if not self.is_playing:
            return False
        cell = self._state.board.get_cell(x, y)
        if cell is None:
            return False
        return cell.toggle_flag()

    def chord_reveal(self, x: int, y: int) -> bool:
        """
        Resolve the neighbors of a revealed numbered cell.

        Both rules are evaluated against the neighbors as they were
        before this call:

        - if the neighboring flags match the cell's number, every
          covered unflagged neighbor is revealed, and a mine among them
          loses the game once all of them are uncovered;
        - if the covered unflagged neighbors are exactly as many as the
          missing flags, each of them is flagged.

        Returns:
            True if any neighbor changed, False otherwise.
        """
        if not self.is_playing:
            return False
        cell = self._state.board.get_cell(x, y)
        if cell is None or not cell.revealed:
            return False

        neighbors = self._state.board.neighbors(x, y)
        flagged_count = sum(1 for n in neighbors if n.flagged)
        covered = [n for n in neighbors if not n.revealed and not n.flagged]
        missing_flags = cell.adjacent_mines - flagged_count

        changed = False
        if flagged_count == cell.adjacent_mines:
            hit_mine = False
            for neighbor in covered:
                # an earlier cascade in this loop may have reached it
                if not neighbor.reveal():
                    continue
                changed = True
                if neighbor.is_mine:
                    hit_mine = True
                    continue
                self._flood_reveal(neighbor)
            if hit_mine:
                self._game_over(GameStatus.LOST)
                return True

        if self.is_playing and len(covered) == missing_flags:
            for neighbor in covered:
                if not neighbor.revealed and not neighbor.flagged:
                    neighbor.flagged = True
                    changed = True

        if changed:
            self.check_win_condition()
        return changed

    def _flood_reveal(self, start: Cell) -> None:
        """
        Reveal the zero-count region connected to ``start`` and its
        numbered border.

        Flags inside the region are cleared.
        """
        if start.is_mine or start.adjacent_mines != 0:
            return
        board = self._state.board
        stack = [start]
        while stack:
            cell = stack.pop()
            for neighbor in board.neighbors(cell.x, cell.y):
                if neighbor.reveal() and neighbor.adjacent_mines == 0:
                    stack.append(neighbor)

    # ========================================================================
    # Win/Loss
    # ========================================================================

    def check_win_condition(self) -> bool:
        """
        Win the game once every safe cell is revealed or flagged.

        Flags placed on safe cells do not change the outcome; they are
        only logged.

        Returns:
            True if this call won the game.
        """
        if not self._state.mine_generated or not self.is_playing:
            return False
        board = self._state.board
        if not board.all_safe_cells_cleared():
            return False

        misflagged = board.misflagged_positions()
        if misflagged:
            logger.info("Game won with %d misplaced flags", len(misflagged))
        self._game_over(GameStatus.WIN)
        return True

    def _game_over(self, status: GameStatus) -> None:
        """Move to a terminal status and notify listeners."""
        self._state.status = status
        self._state.end_timestamp = self.clock()
        logger.info(
            "Game %s after %.2fs", status.value, self.elapsed,
        )

        if status == GameStatus.LOST:
            self._state.board.reveal_all_mines()
            self._schedule_lost_notification()
        elif self.on_win is not None:
            self.on_win()

    def _schedule_lost_notification(self) -> None:
        if self.on_lost is None:
            return
        if self.lost_notification_delay <= 0:
            self.on_lost()
            return
        timer = threading.Timer(self.lost_notification_delay, self.on_lost)
        timer.daemon = True
        self._pending_lost = timer
        timer.start()

    def cancel_pending_notifications(self) -> None:
        """Cancel a loss notification that has not fired yet."""
        if self._pending_lost is not None:
            self._pending_lost.cancel()
            self._pending_lost = None

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        """Get current game status."""
        return self._state.status

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._state.status == GameStatus.PLAY

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._state.status == GameStatus.WIN

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._state.status == GameStatus.LOST

    @property
    def mine_generated(self) -> bool:
        return self._state.mine_generated

    @property
    def start_timestamp(self) -> float:
        return self._state.start_timestamp

    @property
    def end_timestamp(self) -> Optional[float]:
        return self._state.end_timestamp

    @property
    def elapsed(self) -> float:
        """Seconds played, frozen once the game ends."""
        end = self._state.end_timestamp
        if end is None:
            end = self.clock()
        return end - self._state.start_timestamp

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def num_mines(self) -> int:
        return self.config.num_mines

    @property
    def flag_count(self) -> int:
        return self._state.board.flag_count

    @property
    def mines_left(self) -> int:
        """Mines not yet accounted for by a flag (may go negative)."""
        return self.config.num_mines - self.flag_count

    def cell(self, x: int, y: int) -> Optional[Cell]:
        """Get a copy of the cell at (x, y), or None if invalid."""
        cell = self._state.board.get_cell(x, y)
        if cell is None:
            return None
        return replace(cell)

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        """Copy of the whole grid, indexed ``[y][x]``."""
        return tuple(
            tuple(replace(cell) for cell in row)
            for row in self._state.board.rows
        )

    def get_observation(self) -> np.ndarray:
        """Board state as an int8 array of shape (height, width)."""
        return self._state.board.get_observation()

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of cells that can be revealed.

        Returns:
            List of (x, y) positions that are covered and unflagged.
        """
        return [
            (cell.x, cell.y) for cell in self._state.board
            if cell.is_hidden
        ]


