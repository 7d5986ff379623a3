"""
Navigation module: grid cells, obstacle map and A* pathfinding.

Example usage:
    from astar_agent.navigation import AStarPathfinder, Cell, ObstacleMap

    obstacle_map = ObstacleMap.from_cells(5, 3, {Cell(0, 1), Cell(1, 1)})
    path = AStarPathfinder().find_path(obstacle_map, Cell(0, 0), Cell(0, 2))
    if path is None:
        ...  # goal unreachable
"""

# Cells and shared types
from .base import (
    Cell,
    Path,
    NavigationState,
    chebyshev,
)

# Obstacle map for pathfinding
from .obstacle_map import ObstacleMap

# A* pathfinding
from .pathfinding import (
    AStarPathfinder,
    SearchNode,
    search,
)

__all__ = [
    # Base
    "Cell",
    "Path",
    "NavigationState",
    "chebyshev",
    # Obstacle map
    "ObstacleMap",
    # Pathfinding
    "AStarPathfinder",
    "SearchNode",
    "search",
]
