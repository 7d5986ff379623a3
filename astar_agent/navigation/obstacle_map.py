"""
Grid-based obstacle map for pathfinding.

Holds the statically blocked cells of a width x height map (resources such
as trees and gold mines). Mobile units are not stored here; the pathfinder
takes the single hostile unit as a separate dynamic block.
"""
from typing import Dict, Iterable, List, Optional, Set

import numpy as np

from .base import Cell


# Neighbour scan order: dx outer, dy inner
NEIGHBOR_OFFSETS = [
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if dx != 0 or dy != 0
]


class ObstacleMap:
    """
    Occupancy grid where each cell is either passable (0) or blocked (1).

    The grid is indexed [y, x] so that printing it row by row matches the
    map as drawn, with y = 0 as the top row.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Map dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

        # Initialize empty grid (0 = passable, 1 = blocked)
        self.grid = np.zeros((height, width), dtype=np.uint8)

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Iterable[Cell]) -> "ObstacleMap":
        """Build a map from blocked cells. Cells outside the map are ignored."""
        obstacle_map = cls(width, height)
        for cell in cells:
            if obstacle_map.in_bounds(cell.x, cell.y):
                obstacle_map.add_obstacle(cell)
        return obstacle_map

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_blocked(self, x: int, y: int) -> bool:
        """Check if a grid cell is blocked."""
        if not self.in_bounds(x, y):
            return True  # Out of bounds is blocked
        return self.grid[y, x] == 1

    def is_passable(self, x: int, y: int) -> bool:
        """Check if a grid cell is passable."""
        return not self.is_blocked(x, y)

    def add_obstacle(self, cell: Cell) -> None:
        if not self.in_bounds(cell.x, cell.y):
            raise ValueError(f"Obstacle {cell} outside {self.width}x{self.height} map")
        self.grid[cell.y, cell.x] = 1

    def clear(self) -> None:
        self.grid.fill(0)

    def blocked_cells(self) -> Set[Cell]:
        ys, xs = np.nonzero(self.grid)
        return {Cell(int(x), int(y)) for x, y in zip(xs, ys)}

    def get_neighbors(
        self,
        cell: Cell,
        dynamic_block: Optional[Cell] = None,
        always_passable: Optional[Cell] = None,
    ) -> List[Cell]:
        """
        Get passable 8-connected neighbour cells.

        Args:
            cell: Current grid position
            dynamic_block: A single extra cell to treat as blocked (hostile unit)
            always_passable: A cell that is legal even if marked blocked (the goal)

        Returns:
            Neighbours in scan order. Diagonal steps are allowed even when
            both adjacent orthogonal cells are blocked.
        """
        neighbors = []

        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = cell.x + dx, cell.y + dy
            if not self.in_bounds(nx, ny):
                continue

            neighbor = Cell(nx, ny)
            if neighbor == dynamic_block:
                continue
            if self.grid[ny, nx] == 1 and neighbor != always_passable:
                continue
            neighbors.append(neighbor)

        return neighbors

    def to_ascii(
        self,
        path: Optional[Iterable[Cell]] = None,
        marks: Optional[Dict[Cell, str]] = None,
    ) -> str:
        """
        Generate ASCII visualization of the obstacle map.

        Args:
            path: Optional cells to draw as '*'
            marks: Optional single-character labels that win over everything else

        Returns:
            ASCII string representation, top row first
        """
        path_set = set(path) if path else set()
        marks = marks or {}
        lines = []

        for y in range(self.height):
            row = ""
            for x in range(self.width):
                cell = Cell(x, y)
                if cell in marks:
                    row += marks[cell]
                elif cell in path_set:
                    row += "*"
                elif self.grid[y, x] == 1:
                    row += "#"
                else:
                    row += "."
            lines.append(row)

        return "\n".join(lines)

    def __repr__(self) -> str:
        blocked = int(np.sum(self.grid))
        total = self.width * self.height
        return (
            f"ObstacleMap(size={self.width}x{self.height}, "
            f"blocked={blocked}/{total})"
        )
