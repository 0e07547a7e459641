"""Plain-text rendering of the grid."""

from typing import Tuple

import numpy as np

from ..model.grid import Cell

SYMBOLS = {
    Cell.EMPTY: '.',
    Cell.DIRT: 'D',
    Cell.OBSTACLE: '#',
    Cell.CLEANED: 'C',
}
AGENT_SYMBOL = 'R'

LEGEND = "Legend: #=Obstacle  D=Dirt  .=Empty  R=Robot  C=Cleaned"


def render_text(cells: np.ndarray, position: Tuple[int, int],
                legend: bool = True) -> str:
    """Render the cell grid as rows of space-separated symbols."""
    ax, ay = position
    lines = [LEGEND] if legend else []
    for y, row in enumerate(cells):
        symbols = [
            AGENT_SYMBOL if (x, y) == (ax, ay) else SYMBOLS[Cell(int(value))]
            for x, value in enumerate(row)
        ]
        lines.append(' '.join(symbols))
    return '\n'.join(lines)
