"""Image export (PNG snapshots, GIF animations) of the cleaning run."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # headless rendering
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.lines import Line2D
from pathlib import Path
from typing import List, Optional, Tuple, TYPE_CHECKING
from PIL import Image

from ..model.grid import Cell

if TYPE_CHECKING:
    from ..model.state import SimulationState


CELL_COLORS = {
    Cell.EMPTY: '#ECF0F1',
    Cell.DIRT: '#8E6E53',
    Cell.OBSTACLE: '#2C3E50',
    Cell.CLEANED: '#A9DFBF',
}
AGENT_COLOR = '#E74C3C'
TARGET_COLOR = '#F39C12'


def cells_to_rgb(cells: np.ndarray) -> np.ndarray:
    """Map a cell grid to an (H, W, 3) float image."""
    image = np.zeros(cells.shape + (3,))
    for cell, color in CELL_COLORS.items():
        image[cells == cell] = to_rgb(color)
    return image


class Visualizer:
    """
    Draws the grid with matplotlib.

    Row 0 is at the top, as in the text rendering. The agent's path so far is
    overlaid as a faint line, and an optional target (e.g. the cell a
    waterfall strategy is heading for) as a square marker.
    """

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []
        self.trail: List[Tuple[int, int]] = []

    def record(self, state: "SimulationState") -> None:
        if not self.trail or self.trail[-1] != state.position:
            self.trail.append(state.position)

    def _draw(self, state: "SimulationState",
              target: Optional[Tuple[int, int]] = None) -> plt.Figure:
        side = 6
        fig, ax = plt.subplots(figsize=(max(side, side * self.width / self.height), side))

        ax.imshow(cells_to_rgb(state.cells), origin='upper', aspect='equal',
                  extent=(-0.5, self.width - 0.5, self.height - 0.5, -0.5))

        if len(self.trail) > 1:
            xs, ys = zip(*self.trail)
            ax.plot(xs, ys, '-', color=AGENT_COLOR, linewidth=1, alpha=0.4)

        if target is not None:
            ax.plot(*target, 's', color=TARGET_COLOR, markersize=8,
                    markeredgecolor='black', markeredgewidth=0.5, alpha=0.7)

        ax.plot(*state.position, 'o', color=AGENT_COLOR, markersize=9,
                markeredgecolor='white', markeredgewidth=0.5)

        remaining = int(state.metrics.get('remaining_dirt', 0))
        ax.set_title(f'Tick {state.step} | {state.strategy} | Dirt left: {remaining}')
        ax.set_xticks(range(self.width))
        ax.set_yticks(range(self.height))
        ax.tick_params(labelsize=7)

        handles = [Line2D([0], [0], marker='o', color='w', label='Robot',
                          markerfacecolor=AGENT_COLOR, markersize=8)]
        for cell in (Cell.DIRT, Cell.CLEANED, Cell.OBSTACLE):
            handles.append(Line2D([0], [0], marker='s', color='w',
                                  label=cell.name.capitalize(),
                                  markerfacecolor=CELL_COLORS[cell], markersize=8))
        ax.legend(handles=handles, loc='upper left', bbox_to_anchor=(1.01, 1.0),
                  fontsize=8)

        fig.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState",
                     target: Optional[Tuple[int, int]] = None) -> None:
        """Render the state into an in-memory frame for the animation."""
        fig = self._draw(state, target=target)
        fig.set_dpi(80)
        fig.canvas.draw()
        rgba = np.asarray(fig.canvas.buffer_rgba())
        self.frames.append(Image.fromarray(rgba).convert('RGB'))
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._draw(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Write buffered frames as a looping GIF. No frames, no file."""
        if not self.frames:
            return
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        first, *rest = self.frames
        first.save(output_path, save_all=True, append_images=rest,
                   duration=int(1000 / fps), loop=0)

    def clear_frames(self) -> None:
        self.frames.clear()
