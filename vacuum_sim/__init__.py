"""Grid-world vacuum cleaner simulation with pluggable strategies."""

from .model import (
    Agent,
    Cell,
    DistanceField,
    GridMap,
    Outcome,
    SimulationEngine,
    SimulationState,
    create_strategy,
)

__version__ = "0.1.0"

__all__ = [
    'Agent',
    'Cell',
    'DistanceField',
    'GridMap',
    'Outcome',
    'SimulationEngine',
    'SimulationState',
    'create_strategy',
]
