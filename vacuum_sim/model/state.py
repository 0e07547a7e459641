"""State snapshot dataclasses for the vacuum cleaning simulation."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np


class Outcome(Enum):
    """Reasons a simulation run ends."""
    ALL_CLEANED = "all_cleaned"
    NO_LEGAL_MOVES = "no_legal_moves"
    STALLED = "stalled"
    MAX_STEPS = "max_steps"


@dataclass
class SimulationState:
    """Complete snapshot of the simulation after a given tick."""
    step: int
    strategy: str
    action: Optional[str]       # None for a no-op tick
    moved: bool
    position: Tuple[int, int]
    cells: np.ndarray           # Copy of the cell grid
    metrics: Dict[str, float]   # remaining dirt, coverage, etc.
    outcome: Optional[Outcome] = None

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format."""
        return [
            {
                "step": self.step,
                "strategy": self.strategy,
                "action": self.action or "",
                "moved": int(self.moved),
                "x": self.position[0],
                "y": self.position[1],
                "remaining_dirt": int(self.metrics.get("remaining_dirt", 0)),
                "outcome": self.outcome.value if self.outcome else "",
            }
        ]
