"""Model package for the vacuum cleaning simulation."""

from .grid import Cell, GridMap
from .agent import Agent, DIRECTIONS
from .distance_field import DistanceField, UNREACHED
from .strategies import (
    Strategy,
    SweepStrategy,
    RandomStrategy,
    WaterfallStrategy,
    ExplorationStrategy,
    STRATEGIES,
    create_strategy,
)
from .state import Outcome, SimulationState
from .engine import SimulationEngine

__all__ = [
    'Cell',
    'GridMap',
    'Agent',
    'DIRECTIONS',
    'DistanceField',
    'UNREACHED',
    'Strategy',
    'SweepStrategy',
    'RandomStrategy',
    'WaterfallStrategy',
    'ExplorationStrategy',
    'STRATEGIES',
    'create_strategy',
    'Outcome',
    'SimulationState',
    'SimulationEngine',
]
