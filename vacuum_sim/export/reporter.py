"""Summary report generation for the vacuum cleaning simulation."""

from typing import List, Dict, Optional, Tuple, TYPE_CHECKING
from pathlib import Path

import numpy as np
from scipy.ndimage import label

from ..model.grid import Cell

if TYPE_CHECKING:
    from ..model.state import SimulationState


# 8-connected labelling, matching the agent's movement
MOORE_STRUCTURE = np.ones((3, 3), dtype=int)
# 4-connected labelling, matching depth-first exploration
VON_NEUMANN_STRUCTURE = np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]])


def count_unreachable_dirt(cells: np.ndarray, position: Tuple[int, int],
                           diagonal: bool = True) -> int:
    """Count dirt cells lying outside the agent's connected region."""
    walkable = cells != Cell.OBSTACLE
    structure = MOORE_STRUCTURE if diagonal else VON_NEUMANN_STRUCTURE
    labels, _ = label(walkable, structure=structure)
    x, y = position
    dirt = cells == Cell.DIRT
    return int(np.count_nonzero(dirt & (labels != labels[y, x])))


class Reporter:
    """Generates summary statistics and formatted text report."""

    IDLE_STREAK_THRESHOLD = 10

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.step_metrics: List[Dict] = []
        self.strategies_used: List[str] = []
        self.idle_streaks = 0
        self.revisits = 0
        self._idle_steps = 0
        self._seen: set = set()

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per tick."""
        self.step_metrics.append(state.metrics.copy())

        if not self.strategies_used or self.strategies_used[-1] != state.strategy:
            self.strategies_used.append(state.strategy)

        # Long runs of no-op ticks
        if state.moved:
            self._idle_steps = 0
            if state.position in self._seen:
                self.revisits += 1
        else:
            self._idle_steps += 1
            if self._idle_steps >= self.IDLE_STREAK_THRESHOLD:
                self.idle_streaks += 1
                self._idle_steps = 0
        self._seen.add(state.position)

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics
        initial_dirt = int(metrics.get('initial_dirt', 0))
        cleaned = int(metrics.get('cleaned', 0))
        remaining = int(metrics.get('remaining_dirt', 0))
        coverage = metrics.get('coverage', 0) * 100
        # Exploration-only runs never take diagonal steps
        diagonal = set(self.strategies_used) != {"exploration"}
        unreachable = count_unreachable_dirt(final_state.cells, final_state.position,
                                             diagonal=diagonal)
        connectivity = "8-connected" if diagonal else "4-connected"

        cleaned_pct = (cleaned / initial_dirt * 100) if initial_dirt > 0 else 100.0
        outcome = final_state.outcome.value if final_state.outcome else "interrupted"

        lines = [
            "",
            "=" * 80,
            "                    VACUUM CLEANER SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            f"Strategies: {' -> '.join(self.strategies_used) or final_state.strategy}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Outcome:               {outcome}",
            f"Total Ticks:           {final_state.step}",
            f"Moves:                 {int(metrics.get('moves', 0))}",
            f"No-op Ticks:           {int(metrics.get('no_op_total', 0))}",
            f"Dirt Cleaned:          {cleaned} / {initial_dirt} ({cleaned_pct:.1f}%)",
            f"Dirt Remaining:        {remaining} ({unreachable} unreachable, {connectivity})",
            f"Floor Coverage:        {coverage:.1f}%",
            "",
            "BEHAVIORS DETECTED",
            "-" * 40,
            f"[{'X' if self.idle_streaks > 0 else ' '}] Idle Streaks: {self.idle_streaks} detected",
            f"[{'X' if self.revisits > 0 else ' '}] Revisited Cells: {self.revisits} moves",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        outputs = [
            ("CSV Log", csv_enabled, "simulation_log.csv"),
            ("Snapshot", snapshot_enabled, "final_state.png"),
            ("Animation", gif_enabled, "simulation.gif"),
        ]
        for label_text, enabled, filename in outputs:
            where = output_dir / filename if enabled else "(disabled)"
            lines.append(f"{label_text + ':':<11} {where}")
        lines.append("=" * 80)

        return "\n".join(lines)
