"""
Plain-text rendering of a Minesweeper observation.
"""
from typing import Dict

import numpy as np


SYMBOLS: Dict[int, str] = {
    -1: ".",
    -2: "F",
    0: " ",
    9: "*",
}


def render_text(observation: np.ndarray, show_axes: bool = False) -> str:
    """
    Render an observation array as rows of single-character cells.

    Args:
        observation: 2D array in the cell observation encoding.
        show_axes: Prefix rows and columns with their indices.

    Returns:
        Multi-line string, one line per row.
    """
    height, width = observation.shape
    lines = []
    if show_axes:
        header = "   " + "".join(f"{x % 10} " for x in range(width))
        lines.append(header.rstrip())

    for y in range(height):
        row_str = f"{y:>2} " if show_axes else ""
        for x in range(width):
            val = int(observation[y, x])
            row_str += SYMBOLS.get(val, str(val))
            row_str += " "
        lines.append(row_str)

    return "\n".join(lines)
