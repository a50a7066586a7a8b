"""
Minesweeper game module.

Provides the rules engine: board management, cell state, lazy mine
generation, reveal/flag/chord actions and win/loss detection.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, InvalidConfigurationError
from .engine import GameEngine, GameState, GameStatus
from .environment import MinesweeperEnv, Action
from .render import render_text

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "InvalidConfigurationError",
    "GameEngine",
    "GameState",
    "GameStatus",
    "MinesweeperEnv",
    "Action",
    "render_text",
]
