"""Decision strategies for the vacuum agent."""

from typing import Dict, List, Optional, Set, Tuple, Type, Union, TYPE_CHECKING

import numpy as np

from .agent import OFFSET_TO_DIRECTION
from .distance_field import DistanceField

if TYPE_CHECKING:
    from .agent import Agent
    from .grid import GridMap


class Strategy:
    """
    Selects the agent's next move each tick.

    `choose_move` returns a direction name, or None when the strategy declines
    to move (a no-op tick).
    """

    name = "strategy"

    def choose_move(self, agent: "Agent", grid: "GridMap") -> Optional[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SweepStrategy(Strategy):
    """Boustrophedon sweep: run east/west, drop one row south when blocked."""

    name = "sweep"

    def __init__(self, going_right: bool = True):
        self.going_right = going_right

    def choose_move(self, agent, grid):
        moves = agent.available_moves()

        horizontal = "E" if self.going_right else "W"
        if horizontal in moves:
            return horizontal

        if "S" in moves:
            self.going_right = not self.going_right
            return "S"

        return None


class RandomStrategy(Strategy):
    """Uniform random pick among the currently legal moves."""

    name = "random"

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def choose_move(self, agent, grid):
        moves = agent.allowed_moves()
        if not moves:
            return None
        return moves[int(self.rng.integers(len(moves)))]


class WaterfallStrategy(Strategy):
    """
    Greedy descent toward the nearest reachable dirt.

    Two breadth-first passes per tick:
    1. From the agent, to find the closest dirt cell (BFS order breaks ties).
    2. From that dirt cell, to rank the agent's legal moves.

    The move whose destination is closest to the target wins; the first such
    move in direction order wins ties. Nothing is cached between ticks, so the
    plan adapts immediately to cells cleaned or obstacles added meanwhile.
    """

    name = "waterfall"

    def __init__(self):
        self.target: Optional[Tuple[int, int]] = None

    def choose_move(self, agent, grid):
        self.target = None
        if grid.count_remaining_dirt() == 0:
            return None

        from_agent = DistanceField.from_grid(grid, [agent.position])
        target = from_agent.nearest(grid.is_dirt)
        if target is None:
            return None
        self.target = target

        from_target = DistanceField.from_grid(grid, [target])

        best_move = None
        best_dist = None
        for direction, (nx, ny) in agent.available_moves().items():
            dist = from_target.get_distance(nx, ny)
            if dist is None:
                continue
            if best_dist is None or dist < best_dist:
                best_dist = dist
                best_move = direction

        return best_move


class ExplorationStrategy(Strategy):
    """
    Depth-first exploration of the agent's 4-connected region.

    The traversal is driven by an explicit stack holding the path from the
    start cell to the agent. Each tick either advances to the first unvisited
    neighbour of the stack top (N, E, S, W order) or, at a dead end, steps back
    toward the parent cell. Once the stack is empty the region is fully
    explored and every further call is a no-op.

    If another strategy moved the agent in between, its position is pushed on
    top of the unfinished path. Backtracking then walks it back to the older
    branches, so no part of the region is lost.
    """

    name = "exploration"

    def __init__(self):
        self.visited: Set[Tuple[int, int]] = set()
        self.visit_order: List[Tuple[int, int]] = []
        self._stack: List[Tuple[int, int]] = []
        self._started = False

    @property
    def finished(self) -> bool:
        return self._started and not self._stack

    def _visit(self, cell: Tuple[int, int]) -> None:
        self.visited.add(cell)
        self.visit_order.append(cell)
        self._stack.append(cell)

    def _sync(self, position: Tuple[int, int]) -> None:
        """Make `position` the top of the path if the agent was moved."""
        if not self._started:
            self._started = True
            self._visit(position)
        elif position not in self.visited:
            self._visit(position)
        elif self._stack and self._stack[-1] != position:
            self._stack.append(position)

    @staticmethod
    def _route(agent, grid, cell: Tuple[int, int]) -> Optional[str]:
        """First step of a shortest route to `cell`, or None if unreachable."""
        best_move = None
        best_dist = None
        from_cell = None
        for direction, dest in agent.available_moves().items():
            if dest == cell:
                return direction
            if from_cell is None:
                from_cell = DistanceField.from_grid(grid, [cell])
            dist = from_cell.get_distance(*dest)
            if dist is not None and (best_dist is None or dist < best_dist):
                best_dist = dist
                best_move = direction
        return best_move

    def choose_move(self, agent, grid):
        self._sync(agent.position)

        while self._stack:
            top = self._stack[-1]
            if top != agent.position:
                move = self._route(agent, grid, top)
                if move is not None:
                    return move
                # Cut off from this branch
                self._stack.pop()
                continue

            cx, cy = top
            for nx, ny in grid.get_neighbors(cx, cy, include_diagonals=False):
                if (nx, ny) in self.visited:
                    continue
                self._visit((nx, ny))
                return OFFSET_TO_DIRECTION[(nx - cx, ny - cy)]
            self._stack.pop()

        return None


STRATEGIES: Dict[str, Type[Strategy]] = {
    SweepStrategy.name: SweepStrategy,
    RandomStrategy.name: RandomStrategy,
    WaterfallStrategy.name: WaterfallStrategy,
    ExplorationStrategy.name: ExplorationStrategy,
}

# Menu numbering of the interactive driver
STRATEGY_INDEX = {
    "1": SweepStrategy.name,
    "2": RandomStrategy.name,
    "3": WaterfallStrategy.name,
    "4": ExplorationStrategy.name,
}


def create_strategy(name: Union[str, int],
                    rng: Optional[np.random.Generator] = None) -> Strategy:
    """Instantiate a strategy by name (case-insensitive) or menu index."""
    key = str(name).strip().lower()
    key = STRATEGY_INDEX.get(key, key)
    if key not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name!r} "
                         f"(choose from {', '.join(STRATEGIES)})")
    if key == RandomStrategy.name:
        return RandomStrategy(rng)
    return STRATEGIES[key]()
