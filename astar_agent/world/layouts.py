"""
ASCII map layouts.

A layout is one text row per map row, y = 0 at the top. Tokens may be
separated by spaces ("F - - - -") or written back to back ("F----").

    F  agent footman (player 0)
    H  enemy town hall (player 1)
    E  enemy footman (player 1)
    x  tree        T  tree        G  gold mine
    -  empty       .  empty

Lines starting with '#' are comments.
"""
from pathlib import Path
from typing import List, Optional, Union

from .entities import Position, ResourceNode, make_footman, make_townhall
from .world import World, WorldConfig

RESOURCE_TOKENS = {"x": "tree", "T": "tree", "G": "goldmine"}
EMPTY_TOKENS = {"-", "."}
UNIT_TOKENS = {"F", "H", "E"}


def _tokenize(line: str) -> List[str]:
    stripped = line.strip()
    if " " in stripped:
        return stripped.split()
    return list(stripped)


def parse_layout(text: str, config: Optional[WorldConfig] = None) -> World:
    """
    Build a World from an ASCII layout.

    Width and height come from the layout; other config fields (enemy
    behaviour, seed) are taken from `config` when given.
    """
    rows = []
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        rows.append(_tokenize(line))

    if not rows:
        raise ValueError("Layout is empty")
    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")

    base = config or WorldConfig()
    world = World(WorldConfig(
        width=width,
        height=len(rows),
        players=list(base.players),
        agent_player=base.agent_player,
        enemy_behavior=base.enemy_behavior,
        seed=base.seed,
    ))
    enemy_player = next(p for p in world.config.players if p != world.config.agent_player)

    # Units first so that the agent footman gets the lowest id
    for token in ("F", "H", "E"):
        for y, row in enumerate(rows):
            for x, cell in enumerate(row):
                if cell != token:
                    continue
                unit_id = world.next_entity_id()
                if token == "F":
                    world.add_unit(make_footman(unit_id, world.config.agent_player, x, y))
                elif token == "H":
                    world.add_unit(make_townhall(unit_id, enemy_player, x, y))
                else:
                    world.add_unit(make_footman(unit_id, enemy_player, x, y))

    for y, row in enumerate(rows):
        for x, cell in enumerate(row):
            if cell in RESOURCE_TOKENS:
                world.add_resource(ResourceNode(
                    resource_id=world.next_entity_id(),
                    resource_type=RESOURCE_TOKENS[cell],
                    position=Position(x, y),
                ))
            elif cell not in EMPTY_TOKENS and cell not in UNIT_TOKENS:
                raise ValueError(f"Unknown layout token {cell!r} at ({x},{y})")

    return world


def load_layout(path: Union[str, Path], config: Optional[WorldConfig] = None) -> World:
    """Read a layout file and build a World from it."""
    return parse_layout(Path(path).read_text(), config)
