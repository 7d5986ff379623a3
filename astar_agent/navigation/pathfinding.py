"""
A* pathfinding algorithm implementation.

Finds a minimum-step path through the obstacle grid with 8-directional,
unit-cost moves and a Chebyshev heuristic. The returned path ends on the
cell adjacent to the goal from which the goal was reached; neither the
start cell nor the goal cell is part of it.

Two simplifications of textbook A* are kept on purpose because they decide
which of several equal-length paths comes out:
- closed cells are never reopened;
- a cell already on the open list keeps the cost and predecessor it was
  discovered with, even if a later expansion reaches it just as cheaply.
Ties on f-score are broken by insertion order (first discovered, first
expanded), and neighbours are discovered in ObstacleMap's scan order, so
the output is fully deterministic.
"""
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from .base import Cell, Path, chebyshev
from .obstacle_map import ObstacleMap

logger = logging.getLogger(__name__)


@dataclass(order=True)
class SearchNode:
    """Node for priority queue in A*."""
    f_score: int
    order: int
    cell: Cell = field(compare=False)
    cost: int = field(compare=False)
    heuristic: int = field(compare=False)
    came_from: Optional["SearchNode"] = field(default=None, compare=False, repr=False)


class AStarPathfinder:
    """
    A* pathfinding over an ObstacleMap.

    Stateless between calls apart from `last_expansions`, which records how
    many nodes the most recent search closed.
    """

    def __init__(self):
        self.last_expansions: int = 0

    def _reconstruct_path(self, goal_node: SearchNode) -> Path:
        """Walk predecessors from the goal's parent back to, but excluding, start."""
        path: Path = []
        node = goal_node.came_from
        while node is not None and node.came_from is not None:
            path.append(node.cell)
            node = node.came_from
        path.reverse()
        return path

    def find_path(
        self,
        obstacle_map: ObstacleMap,
        start: Cell,
        goal: Cell,
        dynamic_block: Optional[Cell] = None,
    ) -> Optional[Path]:
        """
        Find a shortest path from start to a cell adjacent to goal.

        Args:
            obstacle_map: Grid of statically blocked cells
            start: Starting cell (legal even if marked blocked)
            goal: Goal cell (legal even if marked blocked)
            dynamic_block: Optional cell occupied by the hostile unit

        Returns:
            Cells in movement order, or None if the goal cannot be reached
        """
        for name, cell in (("start", start), ("goal", goal)):
            if not obstacle_map.in_bounds(cell.x, cell.y):
                raise ValueError(
                    f"{name} {cell} outside {obstacle_map.width}x{obstacle_map.height} map"
                )

        counter = itertools.count()
        h0 = chebyshev(start, goal)
        start_node = SearchNode(h0, next(counter), start, 0, h0)

        open_set = [start_node]
        open_nodes: Dict[Cell, SearchNode] = {start: start_node}
        closed: Set[Cell] = set()
        self.last_expansions = 0

        while open_set:
            current = heapq.heappop(open_set)
            del open_nodes[current.cell]
            closed.add(current.cell)
            self.last_expansions += 1

            if current.cell == goal:
                path = self._reconstruct_path(current)
                logger.debug(
                    "Path %s -> %s: %d cells, %d expansions",
                    start, goal, len(path), self.last_expansions,
                )
                return path

            neighbors = obstacle_map.get_neighbors(
                current.cell,
                dynamic_block=dynamic_block,
                always_passable=goal,
            )
            for neighbor in neighbors:
                if neighbor in closed:
                    continue
                if neighbor in open_nodes:
                    # First discovery wins, even on an equal-cost tie
                    continue

                cost = current.cost + 1
                h = chebyshev(neighbor, goal)
                node = SearchNode(cost + h, next(counter), neighbor, cost, h, current)
                heapq.heappush(open_set, node)
                open_nodes[neighbor] = node

        logger.info(
            "No available path from %s to %s (%d expansions)",
            start, goal, self.last_expansions,
        )
        return None


def search(
    start: Cell,
    goal: Cell,
    width: int,
    height: int,
    blocked: Iterable[Cell],
    dynamic_block: Optional[Cell] = None,
) -> Optional[Path]:
    """Convenience wrapper: plan on a width x height map with the given blocked cells."""
    obstacle_map = ObstacleMap.from_cells(width, height, blocked)
    return AStarPathfinder().find_path(obstacle_map, start, goal, dynamic_block)
