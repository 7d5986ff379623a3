"""
Run the A* footman agent on an ASCII map.

Usage:
    python run_agent.py
    python run_agent.py --map maps/dynamic.txt --enemy intercept --show-map
    python run_agent.py --map maps/enclosed.txt --exit-on-failure
"""
import argparse
import json
import logging

from astar_agent.controller import AStarAgentController, AgentControllerConfig
from astar_agent.navigation import Cell, ObstacleMap
from astar_agent.runtime import Runtime, RuntimeConfig
from astar_agent.world import EnemyBehavior, World, WorldConfig, load_layout


def draw(world: World, controller: AStarAgentController) -> str:
    obstacle_map = ObstacleMap.from_cells(
        world.width, world.height,
        [Cell(x, y) for x, y in world.resource_cells()],
    )
    marks = {}
    for unit in world.units.values():
        cell = Cell(unit.position.x, unit.position.y)
        if unit.unit_id == controller.footman_id:
            marks[cell] = "F"
        elif unit.unit_id == controller.townhall_id:
            marks[cell] = "H"
        else:
            marks[cell] = "E"
    return obstacle_map.to_ascii(path=controller.active_path, marks=marks)


def main():
    parser = argparse.ArgumentParser(description="Run the A* footman agent")
    parser.add_argument("--map", type=str, default="maps/dynamic.txt",
                        help="ASCII layout file")
    parser.add_argument("--enemy", type=str, default="intercept",
                        choices=[b.name.lower() for b in EnemyBehavior],
                        help="Enemy footman behaviour")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-turns", type=int, default=500, help="Turn limit")
    parser.add_argument("--remaining-only", action="store_true",
                        help="Only replan when the enemy blocks a cell not yet reached")
    parser.add_argument("--exit-on-failure", action="store_true",
                        help="Exit the process when no path exists")
    parser.add_argument("--show-map", action="store_true",
                        help="Print the map every turn")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    world = load_layout(args.map, WorldConfig(
        enemy_behavior=EnemyBehavior[args.enemy.upper()],
        seed=args.seed,
    ))
    controller = AStarAgentController(
        player_num=world.config.agent_player,
        config=AgentControllerConfig(replan_on_remaining_only=args.remaining_only),
    )
    runtime = Runtime(world, controller, RuntimeConfig(
        max_turns=args.max_turns,
        exit_on_planning_failure=args.exit_on_failure,
    ))

    print(f"=== A* agent on {args.map} ({world.width}x{world.height}) ===")

    def show(step):
        print(f"\n--- Turn {step.turn}: {step.result.status.name.lower()} ---")
        print(draw(world, controller))

    outcome = runtime.run(on_step=show if args.show_map else None)

    print("\n=== Run Summary ===")
    print(json.dumps(outcome.to_dict(), indent=2))


if __name__ == "__main__":
    main()
