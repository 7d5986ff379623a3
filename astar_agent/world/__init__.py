from .entities import (
    FOOTMAN,
    TOWNHALL,
    Position,
    ResourceNode,
    Unit,
    make_footman,
    make_townhall,
)
from .world import (
    AttackCommand,
    Command,
    Direction,
    EnemyBehavior,
    MoveCommand,
    World,
    WorldConfig,
)
from .layouts import load_layout, parse_layout

__all__ = [
    "FOOTMAN",
    "TOWNHALL",
    "Position",
    "ResourceNode",
    "Unit",
    "make_footman",
    "make_townhall",
    "AttackCommand",
    "Command",
    "Direction",
    "EnemyBehavior",
    "MoveCommand",
    "World",
    "WorldConfig",
    "load_layout",
    "parse_layout",
]
