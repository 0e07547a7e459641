"""Breadth-first distance field over the grid."""

from collections import deque
from typing import Callable, Iterable, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from .grid import MOORE_OFFSETS

if TYPE_CHECKING:
    from .grid import GridMap


UNREACHED = -1


class DistanceField:
    """
    Shortest step counts from one or more source cells.

    Movement is 8-connected with uniform cost, so a diagonal step counts the
    same as a straight one. Obstacles are impassable. Cells that cannot be
    reached keep the value UNREACHED.
    """

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.field = np.full((grid_height, grid_width), UNREACHED, dtype=np.int32)
        # Cells in the order BFS settled them
        self.order: List[Tuple[int, int]] = []

    @classmethod
    def from_grid(cls, grid: "GridMap",
                  sources: Iterable[Tuple[int, int]]) -> "DistanceField":
        """Build and compute a field for the current state of `grid`."""
        distance_field = cls(grid.width, grid.height)
        distance_field.compute(grid.obstacles, sources)
        return distance_field

    def compute(self, obstacles: np.ndarray,
                sources: Iterable[Tuple[int, int]]) -> None:
        """
        Multi-source BFS. Every in-bounds source starts at distance 0 and the
        frontier grows one level at a time until it is empty.
        """
        self.field = np.full((self.height, self.width), UNREACHED, dtype=np.int32)
        self.order = []

        queue = deque()
        for sx, sy in sources:
            if (0 <= sx < self.width and 0 <= sy < self.height
                    and self.field[sy, sx] == UNREACHED):
                self.field[sy, sx] = 0
                queue.append((sx, sy))

        while queue:
            x, y = queue.popleft()
            self.order.append((x, y))
            dist = int(self.field[y, x])
            for dx, dy in MOORE_OFFSETS:
                nx, ny = x + dx, y + dy
                if (0 <= nx < self.width and 0 <= ny < self.height
                        and self.field[ny, nx] == UNREACHED
                        and not obstacles[ny, nx]):
                    self.field[ny, nx] = dist + 1
                    queue.append((nx, ny))

    def get_distance(self, x: int, y: int) -> Optional[int]:
        """Return the step count to (x, y), or None if it was not reached."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        dist = int(self.field[y, x])
        return None if dist == UNREACHED else dist

    def is_reached(self, x: int, y: int) -> bool:
        return self.get_distance(x, y) is not None

    def nearest(self, predicate: Callable[[int, int], bool]) -> Optional[Tuple[int, int]]:
        """
        First cell in visitation order satisfying `predicate`. BFS settles
        cells by increasing distance, so this is a closest match, with ties
        broken by visitation order.
        """
        for x, y in self.order:
            if predicate(x, y):
                return (x, y)
        return None
