"""Grid map management for the vacuum cleaning simulation."""

from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

import numpy as np


class Cell(IntEnum):
    """State of a single grid cell."""
    EMPTY = 0
    DIRT = 1
    OBSTACLE = 2
    CLEANED = 3


# Moore neighbourhood, E, W, S, N, SE, NE, SW, NW (y grows downward)
MOORE_OFFSETS = [
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (1, -1), (-1, 1), (-1, -1)
]

# Von Neumann neighbourhood, N, E, S, W
VON_NEUMANN_OFFSETS = [(0, -1), (1, 0), (0, 1), (-1, 0)]


class GridMap:
    """
    Fixed-size 2D environment holding one Cell per position.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    """

    def __init__(self, width: int, height: int,
                 rng: Optional[np.random.Generator] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()

        self.cells = np.full((height, width), Cell.EMPTY, dtype=np.int8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Return the cell state, treating out-of-bounds as obstacle."""
        if not self.in_bounds(x, y):
            return Cell.OBSTACLE
        return Cell(int(self.cells[y, x]))

    def is_dirt(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.cells[y, x] == Cell.DIRT)

    def is_obstacle(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.cells[y, x] == Cell.OBSTACLE)

    def is_walkable(self, x: int, y: int) -> bool:
        """Check if cell is within bounds and not an obstacle."""
        return self.in_bounds(x, y) and bool(self.cells[y, x] != Cell.OBSTACLE)

    @property
    def obstacles(self) -> np.ndarray:
        """Boolean mask: True = obstacle (impassable)."""
        return self.cells == Cell.OBSTACLE

    def add_obstacle(self, x: int, y: int) -> None:
        if self.in_bounds(x, y):
            self.cells[y, x] = Cell.OBSTACLE

    def add_dirt(self, x: int, y: int) -> None:
        if self.in_bounds(x, y):
            self.cells[y, x] = Cell.DIRT

    def add_obstacle_points(self, coords: Iterable[Tuple[int, int]]) -> None:
        """Mark specific cells as obstacles."""
        for x, y in coords:
            self.add_obstacle(x, y)

    def add_dirt_points(self, coords: Iterable[Tuple[int, int]]) -> None:
        """Mark specific cells as dirty."""
        for x, y in coords:
            self.add_dirt(x, y)

    def clean(self, x: int, y: int) -> bool:
        """Turn a dirt cell into a cleaned one. Returns True if it changed."""
        if not self.is_dirt(x, y):
            return False
        self.cells[y, x] = Cell.CLEANED
        return True

    def count_cells(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.cells == cell))

    def count_remaining_dirt(self) -> int:
        return self.count_cells(Cell.DIRT)

    def dirt_positions(self) -> List[Tuple[int, int]]:
        """Return all dirt cells in row-major order."""
        ys, xs = np.nonzero(self.cells == Cell.DIRT)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def _place_random(self, cell: Cell, count: int,
                      exclude: Iterable[Tuple[int, int]]) -> int:
        """
        Sample EMPTY cells without replacement and set them to `cell`.
        The request is clamped to the number of candidates available.
        """
        excluded = set(exclude)
        ys, xs = np.nonzero(self.cells == Cell.EMPTY)
        candidates = [(int(x), int(y)) for x, y in zip(xs, ys)
                      if (int(x), int(y)) not in excluded]

        count = max(0, min(count, len(candidates)))
        if count == 0:
            return 0

        picks = self.rng.choice(len(candidates), size=count, replace=False)
        for idx in picks:
            x, y = candidates[int(idx)]
            self.cells[y, x] = cell
        return count

    def place_random_obstacles(self, count: int,
                               exclude: Iterable[Tuple[int, int]] = ()) -> int:
        return self._place_random(Cell.OBSTACLE, count, exclude)

    def place_random_dirt(self, count: int,
                          exclude: Iterable[Tuple[int, int]] = ()) -> int:
        return self._place_random(Cell.DIRT, count, exclude)

    def get_neighbors(self, x: int, y: int,
                      include_diagonals: bool = True) -> List[Tuple[int, int]]:
        """
        Get walkable neighbouring cells (Moore or von Neumann neighbourhood)
        in a fixed order. The cell itself is never included.
        """
        offsets = MOORE_OFFSETS if include_diagonals else VON_NEUMANN_OFFSETS

        neighbors = []
        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if self.is_walkable(nx, ny):
                neighbors.append((nx, ny))
        return neighbors
