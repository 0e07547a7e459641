"""Vacuum agent with 8-directional movement."""

from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from .grid import MOORE_OFFSETS

if TYPE_CHECKING:
    from .grid import GridMap


DIRECTION_NAMES = ["E", "W", "S", "N", "SE", "NE", "SW", "NW"]

# Compass name -> (dx, dy); y grows downward so "S" is (0, 1)
DIRECTIONS: Dict[str, Tuple[int, int]] = dict(zip(DIRECTION_NAMES, MOORE_OFFSETS))

OFFSET_TO_DIRECTION: Dict[Tuple[int, int], str] = {
    offset: name for name, offset in DIRECTIONS.items()
}


def normalize_direction(direction: Optional[str]) -> Optional[str]:
    """Return the canonical direction name, or None if it is not one."""
    if not direction or not isinstance(direction, str):
        return None
    name = direction.strip().upper()
    return name if name in DIRECTIONS else None


class Agent:
    """
    The cleaning robot.

    The position always lies inside the grid and never on an obstacle. A
    successful move is the only thing that changes it. Cleaning is a separate
    call so the driver decides when it happens.
    """

    def __init__(self, grid: "GridMap", position: Tuple[int, int] = (0, 0)):
        if grid is None:
            raise ValueError("Agent requires a grid map")
        x, y = position
        if not grid.in_bounds(x, y):
            raise ValueError(f"Start position {position} is outside the "
                             f"{grid.width}x{grid.height} grid")
        if grid.is_obstacle(x, y):
            raise ValueError(f"Start position {position} is an obstacle")

        self.grid = grid
        self.position = (x, y)
        self.steps_taken = 0

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    def available_moves(self) -> Dict[str, Tuple[int, int]]:
        """Map each legal direction to the cell it leads to."""
        moves = {}
        for name, (dx, dy) in DIRECTIONS.items():
            nx, ny = self.x + dx, self.y + dy
            if self.grid.is_walkable(nx, ny):
                moves[name] = (nx, ny)
        return moves

    def allowed_moves(self) -> List[str]:
        return list(self.available_moves())

    def move(self, direction: Optional[str]) -> bool:
        """
        Step one cell in `direction`. Unknown names and blocked destinations
        are rejected and leave the position unchanged.
        """
        name = normalize_direction(direction)
        if name is None:
            return False

        dx, dy = DIRECTIONS[name]
        nx, ny = self.x + dx, self.y + dy
        if not self.grid.is_walkable(nx, ny):
            return False

        self.position = (nx, ny)
        self.steps_taken += 1
        return True

    def clean_current_spot(self) -> bool:
        """Clean the cell under the agent. Returns True if there was dirt."""
        return self.grid.clean(self.x, self.y)

    def __repr__(self) -> str:
        return f"Agent(pos={self.position}, steps={self.steps_taken})"
