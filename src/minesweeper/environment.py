"""
Gymnasium environment wrapper for Minesweeper.

Exposes the engine's reveal, flag and chord actions through a standard
RL interface.
"""
import random
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig
from .cell import Cell
from .engine import GameEngine
from .render import render_text


# ============================================================================
# Action Kinds
# ============================================================================

class Action(IntEnum):
    """Engine operation selected by an action index."""

    REVEAL = 0
    FLAG = 1
    CHORD = 2


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine (after a loss)

    Actions:
        Discrete action space of size 3 * width * height.
        ``action // (width * height)`` picks an ``Action`` kind and the
        remainder is the cell index ``y * width + x``.

    Rewards:
        - +1 for a reveal or chord that uncovers safe cells
        - 0 for toggling a flag
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
            seed: Seed for mine placement.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.engine = GameEngine(self.config, seed=seed)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        self._num_cells = self.config.height * self.config.width
        self.action_space = spaces.Discrete(len(Action) * self._num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for mine placement.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng = random.Random(seed)
        self.engine.reset()
        self._steps = 0

        return self.engine.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded (kind, cell) action index.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, x, y = self.decode_action(action)
        self._steps += 1

        reward = self._apply_action(kind, x, y)

        observation = self.engine.get_observation()
        terminated = not self.engine.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def encode_action(self, kind: Action, x: int, y: int) -> int:
        """Convert an action kind and cell position to an action index."""
        return int(kind) * self._num_cells + y * self.config.width + x

    def decode_action(self, action: int) -> Tuple[Action, int, int]:
        """Convert an action index to (kind, x, y)."""
        kind, index = divmod(int(action), self._num_cells)
        y, x = divmod(index, self.config.width)
        return Action(kind), x, y

    def _apply_action(self, kind: Action, x: int, y: int) -> float:
        """
        Perform an engine operation and score the result.

        Args:
            kind: Which operation to perform.
            x: Column index.
            y: Row index.

        Returns:
            Reward value.
        """
        if kind == Action.REVEAL:
            changed = self.engine.reveal(x, y)
        elif kind == Action.FLAG:
            changed = self.engine.toggle_flag(x, y)
        else:
            changed = self.engine.chord_reveal(x, y)

        if not changed:
            return -0.1
        if self.engine.is_won:
            return 10.0
        if self.engine.is_lost:
            return -10.0
        if kind == Action.FLAG:
            return 0.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        observation = self.engine.get_observation()
        return {
            "steps": self._steps,
            "revealed": int(np.count_nonzero(
                (observation >= 0) & (observation < 9)
            )),
            "total_safe": self.config.total_cells - self.config.num_mines,
            "mines_left": self.engine.mines_left,
            "game_state": self.engine.status.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        text = render_text(self.engine.get_observation())
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions applicable to each cell.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if not self.engine.is_playing:
            return mask

        snapshot = self.engine.snapshot()
        for row in snapshot:
            for cell in row:
                if cell.revealed:
                    if self._can_chord(snapshot, cell):
                        mask[self.encode_action(Action.CHORD, cell.x, cell.y)] = True
                    continue
                mask[self.encode_action(Action.REVEAL, cell.x, cell.y)] = True
                mask[self.encode_action(Action.FLAG, cell.x, cell.y)] = True
        return mask

    def _can_chord(
        self, snapshot: Tuple[Tuple[Cell, ...], ...], cell: Cell
    ) -> bool:
        """Check if a revealed number still has covered unflagged neighbors."""
        if cell.adjacent_mines == 0:
            return False
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                nx, ny = cell.x + dx, cell.y + dy
                if (dx, dy) == (0, 0):
                    continue
                if not (0 <= nx < self.config.width and 0 <= ny < self.config.height):
                    continue
                neighbor = snapshot[ny][nx]
                if not neighbor.revealed and not neighbor.flagged:
                    return True
        return False
