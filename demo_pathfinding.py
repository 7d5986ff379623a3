"""
Demo script to show A* paths on the bundled maps.
Run from project root: python demo_pathfinding.py
"""
import time

from astar_agent.controller import WorldQuery
from astar_agent.navigation import AStarPathfinder, Cell, ObstacleMap, search
from astar_agent.world import load_layout


def show_map(name: str) -> None:
    world = load_layout(f"maps/{name}.txt")
    query = WorldQuery(world.get_state())

    footman = query.get_unit(query.get_unit_ids(0)[0])
    enemy_ids = query.get_unit_ids(1)
    townhall = next(
        query.get_unit(i) for i in enemy_ids
        if query.get_unit(i).template_name.lower() == "townhall"
    )
    hostile = next(
        (query.get_unit(i).cell for i in enemy_ids
         if query.get_unit(i).template_name.lower() == "footman"),
        None,
    )

    obstacle_map = ObstacleMap.from_cells(
        query.x_extent, query.y_extent, query.get_resource_cells()
    )
    pathfinder = AStarPathfinder()

    start = time.perf_counter()
    path = pathfinder.find_path(obstacle_map, footman.cell, townhall.cell, hostile)
    elapsed = time.perf_counter() - start

    print(f"\n=== {name} ({query.x_extent}x{query.y_extent}) ===")
    marks = {footman.cell: "F", townhall.cell: "H"}
    if hostile is not None:
        marks[hostile] = "E"

    if path is None:
        print("No available path")
        print(obstacle_map.to_ascii(marks=marks))
        return

    print(f"Path: {len(path)} cells, {pathfinder.last_expansions} expansions, "
          f"{elapsed * 1000:.2f} ms")
    print(obstacle_map.to_ascii(path=path, marks=marks))


def main():
    print("=== A* Pathfinding Demo ===")

    # The handout example, straight through the module-level search()
    blocked = {Cell(0, 1), Cell(1, 1), Cell(2, 1), Cell(4, 1)}
    path = search(Cell(0, 0), Cell(0, 2), 5, 3, blocked)
    print(f"\nHandout example path: {path}")

    for name in ("simple", "maze", "dynamic", "enclosed"):
        show_map(name)

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
