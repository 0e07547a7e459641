"""Simulation engine driving the vacuum agent tick by tick."""

import numpy as np
from typing import Dict, Optional, Set, Tuple, TYPE_CHECKING

from .grid import Cell, GridMap
from .agent import Agent
from .strategies import Strategy, create_strategy
from .state import Outcome, SimulationState

if TYPE_CHECKING:
    from ..config import SimulationConfig


MAX_CONSECUTIVE_NO_OPS = 40


class SimulationEngine:
    """
    Orchestrates the discrete-time cleaning loop.

    Each tick:
    1. Ask the active strategy for a direction
    2. Apply it to the agent, cleaning the destination on success
    3. Check termination (no legal moves, stalled, all dirt cleaned)
    4. Return a state snapshot

    The strategy can be replaced between ticks with `set_strategy`; the grid,
    the agent and the no-op streak carry over.
    """

    def __init__(self, grid: GridMap, agent: Agent, strategy: Strategy,
                 max_consecutive_no_ops: int = MAX_CONSECUTIVE_NO_OPS,
                 max_steps: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        if agent.grid is not grid:
            raise ValueError("Agent must operate on the engine's grid")

        self.grid = grid
        self.agent = agent
        self.strategy = strategy
        self.max_consecutive_no_ops = max_consecutive_no_ops
        self.max_steps = max_steps
        self.rng = rng if rng is not None else grid.rng

        self.current_step = 0
        self.no_op_streak = 0
        self.no_op_total = 0
        self.outcome: Optional[Outcome] = None
        self.strategy_switches = 0

        # The robot starts by cleaning the cell it was placed on
        self.initial_dirt = grid.count_remaining_dirt()
        self.agent.clean_current_spot()
        self.visited: Set[Tuple[int, int]] = {agent.position}

    @classmethod
    def from_config(cls, config: "SimulationConfig") -> "SimulationEngine":
        """Build grid, agent and strategy from configuration."""
        rng = np.random.default_rng(config.seed)
        grid = GridMap(config.grid.width, config.grid.height, rng=rng)

        layout = config.layout
        start = config.agent.start
        grid.add_obstacle_points(layout.obstacles)
        grid.add_dirt_points(layout.dirt)
        # Keep the start cell free of random obstacles
        grid.place_random_obstacles(layout.random_obstacles, exclude=[start])
        grid.place_random_dirt(layout.random_dirt)

        agent = Agent(grid, start)
        strategy = create_strategy(config.strategy, rng)
        return cls(grid, agent, strategy,
                   max_consecutive_no_ops=config.max_consecutive_no_ops,
                   max_steps=config.max_steps,
                   rng=rng)

    def set_strategy(self, strategy: Strategy) -> None:
        """Swap the active strategy between ticks."""
        self.strategy = strategy
        self.strategy_switches += 1

    def step(self) -> SimulationState:
        """Execute one tick and return the resulting state."""
        if self.outcome is not None:
            raise RuntimeError(f"Simulation already finished: {self.outcome.value}")

        self.current_step += 1

        action = self.strategy.choose_move(self.agent, self.grid)
        moved = action is not None and self.agent.move(action)
        if moved:
            self.agent.clean_current_spot()
            self.visited.add(self.agent.position)
            self.no_op_streak = 0
        else:
            self.no_op_streak += 1
            self.no_op_total += 1

        if not self.agent.available_moves():
            self.outcome = Outcome.NO_LEGAL_MOVES
        elif self.no_op_streak >= self.max_consecutive_no_ops:
            self.outcome = Outcome.STALLED
        elif self.grid.count_remaining_dirt() == 0:
            self.outcome = Outcome.ALL_CLEANED
        elif self.max_steps is not None and self.current_step >= self.max_steps:
            self.outcome = Outcome.MAX_STEPS

        return self._create_state_snapshot(action, moved)

    def run(self) -> Optional[SimulationState]:
        """Step until finished; return the final state."""
        state = None
        while not self.is_finished():
            state = self.step()
        return state

    def is_finished(self) -> bool:
        return self.outcome is not None

    def _metrics(self) -> Dict[str, float]:
        walkable = self.grid.width * self.grid.height - self.grid.count_cells(Cell.OBSTACLE)
        return {
            'remaining_dirt': self.grid.count_remaining_dirt(),
            'cleaned': self.grid.count_cells(Cell.CLEANED),
            'initial_dirt': self.initial_dirt,
            'moves': self.agent.steps_taken,
            'no_op_streak': self.no_op_streak,
            'no_op_total': self.no_op_total,
            'coverage': len(self.visited) / walkable if walkable > 0 else 0,
        }

    def _create_state_snapshot(self, action: Optional[str],
                               moved: bool) -> SimulationState:
        return SimulationState(
            step=self.current_step,
            strategy=self.strategy.name,
            action=action,
            moved=moved,
            position=self.agent.position,
            cells=self.grid.cells.copy(),
            metrics=self._metrics(),
            outcome=self.outcome,
        )

    def snapshot(self) -> SimulationState:
        """State without advancing, e.g. for rendering tick 0."""
        return self._create_state_snapshot(None, False)

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        metrics = self._metrics()
        return {
            'total_steps': self.current_step,
            'outcome': self.outcome.value if self.outcome else None,
            'dirt_cleaned': metrics['cleaned'],
            'dirt_remaining': metrics['remaining_dirt'],
            'moves': metrics['moves'],
            'no_op_ticks': self.no_op_total,
            'coverage': metrics['coverage'],
            'strategy_switches': self.strategy_switches,
        }
