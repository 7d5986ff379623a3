"""
Shared navigation types.

Cells are plain integer grid coordinates. A path is an ordered list of
cells in movement order, excluding the start cell and the goal cell.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Cell:
    """Integer grid coordinate. Equality and hashing use (x, y) only."""
    x: int
    y: int

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def offset(self, dx: int, dy: int) -> "Cell":
        return Cell(self.x + dx, self.y + dy)

    def chebyshev_to(self, other: "Cell") -> int:
        return chebyshev(self, other)

    def is_adjacent_to(self, other: "Cell") -> bool:
        """True if other is one of the 8 cells around this one."""
        return chebyshev(self, other) == 1

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"


Path = List[Cell]


def chebyshev(a: Cell, b: Cell) -> int:
    """Chebyshev distance: the step count of an 8-connected unit-cost move."""
    return max(abs(a.x - b.x), abs(a.y - b.y))


@dataclass
class NavigationState:
    """Current state of navigation progress."""
    has_path: bool
    current_waypoint: Optional[Cell]
    waypoints_remaining: int
    total_waypoints: int
    replans: int
    is_complete: bool
    is_stuck: bool  # Last planning call found no path
