"""Tests for the turn-based host world, ASCII layouts and WorldQuery."""
from pathlib import Path

from astar_agent.controller import WorldQuery
from astar_agent.navigation import Cell
from astar_agent.world import (
    AttackCommand,
    Direction,
    EnemyBehavior,
    MoveCommand,
    Position,
    World,
    WorldConfig,
    load_layout,
    make_footman,
    parse_layout,
)

MAPS_DIR = Path(__file__).parent / "maps"


def test_parse_handout_layout():
    world = load_layout(MAPS_DIR / "simple.txt")

    assert world.width == 5 and world.height == 3
    footman = world.get_unit(0)
    townhall = world.get_unit(1)
    assert footman.template_name == "Footman" and footman.player == 0
    assert (footman.position.x, footman.position.y) == (0, 0)
    assert townhall.template_name == "TownHall" and townhall.player == 1
    assert (townhall.position.x, townhall.position.y) == (0, 2)
    assert world.resource_cells() == {(0, 1), (1, 1), (2, 1), (4, 1)}
    assert all(r.resource_type == "tree" for r in world.resources.values())


def test_compact_and_spaced_layouts_match():
    spaced = parse_layout("F - - - -\nx x x - x\nH - - - -")
    compact = parse_layout("F----\nxxx-x\nH----")
    assert spaced.get_state() == compact.get_state()


def test_bad_layouts_raise():
    for text in ("F--\n--", "F-Q", "# only a comment\n"):
        try:
            parse_layout(text)
        except ValueError:
            continue
        raise AssertionError(f"Layout {text!r} should be rejected")


def test_direction_deltas():
    assert Direction.from_delta(1, -1) == Direction.NORTHEAST
    assert Direction.from_delta(0, 1) == Direction.SOUTH
    assert Direction.from_delta(2, 0) is None
    assert Direction.from_delta(0, 0) is None
    assert (Direction.WEST.dx, Direction.WEST.dy) == (-1, 0)


def test_moves_respect_obstacles_and_bounds():
    world = load_layout(MAPS_DIR / "simple.txt")
    footman = world.get_unit(0)

    # South is a tree, north is off the map
    world.step({0: MoveCommand(0, Direction.SOUTH)})
    world.step({0: MoveCommand(0, Direction.NORTH)})
    assert (footman.position.x, footman.position.y) == (0, 0)

    world.step({0: MoveCommand(0, Direction.EAST)})
    assert (footman.position.x, footman.position.y) == (1, 0)
    assert world.turn == 3


def test_units_block_movement():
    world = parse_layout("FE-\n--H")
    world.step({0: MoveCommand(0, Direction.EAST)})
    assert world.get_unit(0).position == Position(0, 0)


def test_attack_destroys_townhall():
    world = parse_layout("FH")
    townhall_id = 1

    state = world.step({0: AttackCommand(0, townhall_id)})
    assert state["last_damage_dealt"] == 10
    assert world.get_unit(townhall_id).health == 20

    world.step({0: AttackCommand(0, townhall_id)})
    state = world.step({0: AttackCommand(0, townhall_id)})
    assert state["last_destroyed"] == townhall_id
    assert world.get_unit(townhall_id) is None
    assert all(u["unit_id"] != townhall_id for u in state["units"])


def test_attack_out_of_range_does_nothing():
    world = parse_layout("F-H")
    state = world.step({0: AttackCommand(0, 1)})
    assert state["last_damage_dealt"] == 0
    assert world.get_unit(1).health == world.get_unit(1).max_health


def test_commands_for_enemy_units_are_ignored():
    world = parse_layout("F--\n-E-\n--H")
    world.step({2: MoveCommand(2, Direction.NORTH)})
    enemy = world.get_unit(2)
    assert enemy.position == Position(1, 1)


def test_static_enemy_stays_put():
    world = parse_layout("F----\n-----\n----E\n-----\nH----")
    for _ in range(5):
        world.step()
    assert world.get_unit(2).position == Position(4, 2)


def test_intercept_enemy_closes_in():
    config = WorldConfig(enemy_behavior=EnemyBehavior.INTERCEPT)
    world = parse_layout("F----\n-----\n----E\n-----\nH----", config)
    enemy = world.get_unit(2)
    # Cell in front of the footman on the way to the town hall
    target = Position(0, 1)

    before = enemy.position.chebyshev_to(target)
    world.step()
    assert enemy.position.chebyshev_to(target) == before - 1


def test_random_enemy_takes_legal_steps():
    config = WorldConfig(enemy_behavior=EnemyBehavior.RANDOM, seed=7)
    world = parse_layout("F----\n-----\n--E--\n-----\n----H", config)
    enemy = world.get_unit(2)

    for _ in range(20):
        before = enemy.position.copy()
        world.step()
        assert enemy.position.chebyshev_to(before) <= 1
        assert world.in_bounds(enemy.position.x, enemy.position.y)
        assert (enemy.position.x, enemy.position.y) not in world.resource_cells()


def test_duplicate_and_foreign_units_rejected():
    world = World(WorldConfig(width=3, height=3))
    world.add_unit(make_footman(0, 0, 0, 0))
    for unit in (make_footman(0, 0, 1, 1), make_footman(1, 5, 1, 1)):
        try:
            world.add_unit(unit)
        except ValueError:
            continue
        raise AssertionError(f"{unit} should be rejected")


def test_world_query():
    world = load_layout(MAPS_DIR / "simple.txt")
    query = WorldQuery(world.get_state())

    assert query.get_player_numbers() == [0, 1]
    assert query.get_unit_ids(0) == [0]
    assert query.get_unit_ids(1) == [1]
    assert query.get_unit(1).template_name == "TownHall"
    assert query.get_unit(1).cell == Cell(0, 2)
    assert query.get_unit(99) is None
    assert query.x_extent == 5 and query.y_extent == 3
    assert query.get_resource_cells() == {Cell(0, 1), Cell(1, 1), Cell(2, 1), Cell(4, 1)}

    resource_id = query.get_all_resource_ids()[0]
    assert query.get_resource(resource_id).resource_type == "tree"

    world.step({0: MoveCommand(0, Direction.EAST)})
    query.update(world.get_state())
    assert query.turn == 1
    assert query.get_unit(0).cell == Cell(1, 0)


if __name__ == "__main__":
    tests = [
        (name, fn) for name, fn in sorted(globals().items())
        if name.startswith("test_") and callable(fn)
    ]
    for name, fn in tests:
        fn()
        print(f"  {name}: ok")
    print(f"\nAll {len(tests)} world tests passed!")
