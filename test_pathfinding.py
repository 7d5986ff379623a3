"""
Tests for the A* pathfinder and obstacle map.

Usage:
    python test_pathfinding.py
    pytest test_pathfinding.py
"""
from pathlib import Path

import numpy as np

from astar_agent.controller import WorldQuery
from astar_agent.navigation import (
    AStarPathfinder,
    Cell,
    ObstacleMap,
    SearchNode,
    chebyshev,
    search,
)
from astar_agent.world import load_layout

MAPS_DIR = Path(__file__).parent / "maps"

HANDOUT_BLOCKED = {Cell(0, 1), Cell(1, 1), Cell(2, 1), Cell(4, 1)}


def assert_valid_path(path, start, goal, blocked=(), dynamic_block=None):
    """Every step is a single 8-way move and avoids obstacles."""
    cells = [start] + list(path) + [goal]
    for a, b in zip(cells, cells[1:]):
        assert a.is_adjacent_to(b), f"{a} -> {b} is not a single step"
    for cell in path:
        assert cell not in blocked, f"{cell} is blocked"
        assert cell != dynamic_block, f"{cell} is the dynamic block"


# =============================================================================
# Cells
# =============================================================================

def test_chebyshev():
    assert chebyshev(Cell(0, 0), Cell(3, -5)) == 5
    assert chebyshev(Cell(2, 2), Cell(2, 2)) == 0
    assert Cell(1, 1).chebyshev_to(Cell(0, 0)) == 1


def test_cell_equality_is_by_coordinates():
    assert Cell(3, 4) == Cell(3, 4)
    assert len({Cell(3, 4), Cell(3, 4), Cell(4, 3)}) == 2
    assert Cell(3, 4).offset(-1, 1) == Cell(2, 5)
    assert Cell(0, 0).is_adjacent_to(Cell(1, 1))
    assert not Cell(0, 0).is_adjacent_to(Cell(0, 0))


def test_search_node_orders_by_f_then_insertion():
    early = SearchNode(5, 0, Cell(9, 9), 3, 2)
    late = SearchNode(5, 1, Cell(0, 0), 1, 4)
    cheaper = SearchNode(4, 2, Cell(5, 5), 4, 0)
    assert early < late
    assert cheaper < early


# =============================================================================
# Obstacle map
# =============================================================================

def test_obstacle_map_bounds_and_blocking():
    obstacle_map = ObstacleMap.from_cells(4, 3, {Cell(1, 1), Cell(9, 9)})

    assert obstacle_map.grid.shape == (3, 4)
    assert obstacle_map.grid.dtype == np.uint8
    assert obstacle_map.is_blocked(1, 1)
    assert obstacle_map.is_passable(0, 0)
    assert obstacle_map.is_blocked(-1, 0)
    assert obstacle_map.is_blocked(4, 0)
    # Out-of-bounds input cells are ignored
    assert obstacle_map.blocked_cells() == {Cell(1, 1)}


def test_obstacle_map_rejects_bad_dimensions():
    for width, height in ((0, 3), (3, -1)):
        try:
            ObstacleMap(width, height)
        except ValueError:
            continue
        raise AssertionError(f"{width}x{height} should be rejected")


def test_neighbors_scan_order():
    obstacle_map = ObstacleMap(3, 3)
    neighbors = obstacle_map.get_neighbors(Cell(1, 1))
    assert neighbors == [
        Cell(0, 0), Cell(0, 1), Cell(0, 2),
        Cell(1, 0), Cell(1, 2),
        Cell(2, 0), Cell(2, 1), Cell(2, 2),
    ]
    # Corner cell only has three neighbours
    assert len(obstacle_map.get_neighbors(Cell(0, 0))) == 3


def test_neighbors_exclusions():
    obstacle_map = ObstacleMap.from_cells(3, 3, {Cell(1, 0), Cell(0, 1)})

    # Diagonal squeeze between two blocked cells is allowed
    assert obstacle_map.get_neighbors(Cell(0, 0)) == [Cell(1, 1)]
    # Dynamic block removes a cell
    assert obstacle_map.get_neighbors(Cell(0, 0), dynamic_block=Cell(1, 1)) == []
    # always_passable lets a blocked goal through
    assert Cell(1, 0) in obstacle_map.get_neighbors(Cell(0, 0), always_passable=Cell(1, 0))


def test_to_ascii():
    obstacle_map = ObstacleMap.from_cells(3, 2, {Cell(1, 0)})
    text = obstacle_map.to_ascii(path=[Cell(0, 1)], marks={Cell(2, 1): "H"})
    assert text == ".#.\n*.H"


# =============================================================================
# A* search
# =============================================================================

def test_handout_example():
    path = search(Cell(0, 0), Cell(0, 2), 5, 3, HANDOUT_BLOCKED)
    assert path == [Cell(1, 0), Cell(2, 0), Cell(3, 1), Cell(2, 2), Cell(1, 2)]


def test_open_grid_path_length_is_chebyshev():
    pairs = [
        (Cell(0, 0), Cell(9, 9)),
        (Cell(0, 0), Cell(9, 3)),
        (Cell(5, 5), Cell(0, 2)),
        (Cell(2, 7), Cell(8, 7)),
        (Cell(4, 4), Cell(4, 0)),
        (Cell(9, 0), Cell(0, 9)),
    ]
    for start, goal in pairs:
        path = search(start, goal, 10, 10, set())
        # Moves = cells on the path + the final step onto the goal
        assert len(path) + 1 == chebyshev(start, goal), (start, goal, path)
        assert_valid_path(path, start, goal)


def test_maze_path_avoids_obstacles():
    world = load_layout(MAPS_DIR / "maze.txt")
    query = WorldQuery(world.get_state())
    blocked = query.get_resource_cells()
    start, goal = Cell(0, 0), Cell(15, 11)

    path = search(start, goal, query.x_extent, query.y_extent, blocked)

    assert path is not None
    assert_valid_path(path, start, goal, blocked=blocked)


def test_dynamic_block_in_corridor_makes_goal_unreachable():
    assert search(Cell(0, 0), Cell(4, 0), 5, 1, set()) == [Cell(1, 0), Cell(2, 0), Cell(3, 0)]
    assert search(Cell(0, 0), Cell(4, 0), 5, 1, set(), dynamic_block=Cell(2, 0)) is None


def test_dynamic_block_detour():
    start, goal, hostile = Cell(0, 1), Cell(4, 1), Cell(2, 1)
    path = search(start, goal, 5, 3, set(), dynamic_block=hostile)

    assert len(path) == 3
    assert_valid_path(path, start, goal, dynamic_block=hostile)


def test_unreachable_goal_returns_none():
    world = load_layout(MAPS_DIR / "enclosed.txt")
    query = WorldQuery(world.get_state())
    path = search(Cell(0, 0), Cell(5, 3), query.x_extent, query.y_extent,
                  query.get_resource_cells())
    assert path is None


def test_adjacent_and_identical_start_goal():
    assert search(Cell(0, 0), Cell(1, 1), 3, 3, set()) == []
    assert search(Cell(2, 2), Cell(2, 2), 3, 3, set()) == []


def test_blocked_start_and_goal_are_still_legal():
    blocked = {Cell(0, 0), Cell(3, 0)}
    assert search(Cell(0, 0), Cell(3, 0), 5, 1, blocked) == [Cell(1, 0), Cell(2, 0)]


def test_equal_cost_tie_keeps_first_discovery():
    # (1,0), (1,1) and (1,2) all reach the goal in one step; (1,0) is
    # expanded first, discovers the goal, and later equal-cost routes
    # do not replace it.
    path = search(Cell(0, 1), Cell(2, 1), 3, 3, set())
    assert path == [Cell(1, 0)]


def test_deterministic_and_idempotent():
    world = load_layout(MAPS_DIR / "maze.txt")
    query = WorldQuery(world.get_state())
    obstacle_map = ObstacleMap.from_cells(query.x_extent, query.y_extent,
                                          query.get_resource_cells())
    pathfinder = AStarPathfinder()

    first = pathfinder.find_path(obstacle_map, Cell(0, 0), Cell(15, 11))
    expansions = pathfinder.last_expansions
    second = pathfinder.find_path(obstacle_map, Cell(0, 0), Cell(15, 11))

    assert first == second
    assert pathfinder.last_expansions == expansions
    assert 0 < expansions <= query.x_extent * query.y_extent


def test_out_of_bounds_start_raises():
    try:
        search(Cell(5, 0), Cell(0, 0), 5, 1, set())
    except ValueError as e:
        assert "start" in str(e)
    else:
        raise AssertionError("Out-of-bounds start should raise ValueError")


if __name__ == "__main__":
    import sys

    tests = [
        (name, fn) for name, fn in sorted(globals().items())
        if name.startswith("test_") and callable(fn)
    ]
    for name, fn in tests:
        fn()
        print(f"  {name}: ok")
    print(f"\nAll {len(tests)} pathfinding tests passed!")
    sys.exit(0)
