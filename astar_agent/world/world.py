import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Set, Tuple, Union

from .entities import FOOTMAN, Position, ResourceNode, Unit

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Unit-step directions. y grows downward, so NORTH is dy = -1."""
    NORTH = (0, -1)
    NORTHEAST = (1, -1)
    EAST = (1, 0)
    SOUTHEAST = (1, 1)
    SOUTH = (0, 1)
    SOUTHWEST = (-1, 1)
    WEST = (-1, 0)
    NORTHWEST = (-1, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Optional["Direction"]:
        """Direction for a unit step, or None if (dx, dy) is not one."""
        return _DELTA_TO_DIRECTION.get((dx, dy))


_DELTA_TO_DIRECTION: Dict[Tuple[int, int], Direction] = {d.value: d for d in Direction}


class EnemyBehavior(Enum):
    STATIC = auto()     # Enemy footmen never move
    RANDOM = auto()     # One random legal step (or none) per turn
    INTERCEPT = auto()  # Step toward the cell in front of the agent footman


@dataclass
class MoveCommand:
    unit_id: int
    direction: Direction

    def to_dict(self) -> dict:
        return {"type": "move", "unit_id": self.unit_id, "direction": self.direction.name.lower()}


@dataclass
class AttackCommand:
    unit_id: int
    target_id: int

    def to_dict(self) -> dict:
        return {"type": "attack", "unit_id": self.unit_id, "target_id": self.target_id}


Command = Union[MoveCommand, AttackCommand]


@dataclass
class WorldConfig:
    width: int = 16
    height: int = 16
    players: List[int] = field(default_factory=lambda: [0, 1])
    agent_player: int = 0
    enemy_behavior: EnemyBehavior = EnemyBehavior.STATIC
    seed: Optional[int] = None


class World:
    """
    Turn-based grid world with units and static resources.

    Each call to step() executes the given commands for the agent's side,
    then the scripted enemy footman moves, then the turn counter advances.
    """

    def __init__(self, config: Optional[WorldConfig] = None):
        self.config = config or WorldConfig()
        if self.config.width <= 0 or self.config.height <= 0:
            raise ValueError(
                f"World dimensions must be positive, got {self.config.width}x{self.config.height}"
            )
        self.rng = random.Random(self.config.seed)
        self.turn: int = 0

        self.units: Dict[int, Unit] = {}
        self.resources: Dict[int, ResourceNode] = {}

        # Combat tracking for current step
        self.last_damage_dealt: int = 0
        self.last_destroyed: Optional[int] = None

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def add_unit(self, unit: Unit) -> Unit:
        if unit.unit_id in self.units or unit.unit_id in self.resources:
            raise ValueError(f"Duplicate entity id {unit.unit_id}")
        if unit.player not in self.config.players:
            raise ValueError(f"Unknown player {unit.player} for unit {unit.unit_id}")
        self.units[unit.unit_id] = unit
        return unit

    def add_resource(self, resource: ResourceNode) -> ResourceNode:
        if resource.resource_id in self.units or resource.resource_id in self.resources:
            raise ValueError(f"Duplicate entity id {resource.resource_id}")
        self.resources[resource.resource_id] = resource
        return resource

    def next_entity_id(self) -> int:
        used = set(self.units) | set(self.resources)
        return max(used) + 1 if used else 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def resource_cells(self) -> Set[Tuple[int, int]]:
        return {(r.position.x, r.position.y) for r in self.resources.values()}

    def unit_at(self, x: int, y: int) -> Optional[Unit]:
        for unit in self.units.values():
            if unit.is_alive and unit.position.x == x and unit.position.y == y:
                return unit
        return None

    def is_free(self, x: int, y: int) -> bool:
        """In bounds, no resource and no living unit."""
        if not self.in_bounds(x, y):
            return False
        if (x, y) in self.resource_cells():
            return False
        return self.unit_at(x, y) is None

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return self.units.get(unit_id)

    def get_units(self, player: int) -> List[Unit]:
        return [u for u in self.units.values() if u.player == player]

    def _apply_move(self, unit: Unit, direction: Direction) -> bool:
        if not unit.is_mobile:
            logger.warning("Unit %d cannot move", unit.unit_id)
            return False
        x, y = unit.position.x + direction.dx, unit.position.y + direction.dy
        if not self.is_free(x, y):
            logger.debug("Unit %d blocked moving %s", unit.unit_id, direction.name)
            return False
        unit.position = Position(x, y)
        return True

    def _apply_attack(self, unit: Unit, target_id: int) -> None:
        target = self.units.get(target_id)
        if target is None or not target.is_alive:
            logger.debug("Unit %d attacked missing target %d", unit.unit_id, target_id)
            return
        if unit.position.chebyshev_to(target.position) > 1:
            logger.debug("Unit %d out of range of %d", unit.unit_id, target_id)
            return

        damage = target.take_damage(unit.attack_damage)
        self.last_damage_dealt += damage
        if not target.is_alive:
            # Destroyed units leave the world
            del self.units[target_id]
            self.last_destroyed = target_id
            logger.info("Unit %d destroyed on turn %d", target_id, self.turn)

    def _free_neighbors(self, unit: Unit) -> List[Position]:
        cells = []
        for direction in Direction:
            x, y = unit.position.x + direction.dx, unit.position.y + direction.dy
            if self.is_free(x, y):
                cells.append(Position(x, y))
        return cells

    def _intercept_target(self) -> Optional[Position]:
        """The cell one step from the agent footman toward the enemy town hall."""
        agents = [
            u for u in self.get_units(self.config.agent_player)
            if u.template_name == FOOTMAN
        ]
        halls = [
            u for u in self.units.values()
            if u.player != self.config.agent_player and not u.is_mobile
        ]
        if not agents:
            return None
        agent = agents[0].position
        if not halls:
            return agent
        hall = halls[0].position
        step_x = (hall.x > agent.x) - (hall.x < agent.x)
        step_y = (hall.y > agent.y) - (hall.y < agent.y)
        return Position(agent.x + step_x, agent.y + step_y)

    def _process_enemy_ai(self) -> None:
        """Scripted movement for enemy footmen."""
        behavior = self.config.enemy_behavior
        if behavior == EnemyBehavior.STATIC:
            return

        for unit in list(self.units.values()):
            if unit.player == self.config.agent_player or unit.template_name != FOOTMAN:
                continue

            candidates = self._free_neighbors(unit)
            if not candidates:
                continue

            if behavior == EnemyBehavior.RANDOM:
                choice = self.rng.choice(candidates + [None])
                if choice is not None:
                    unit.position = choice
            elif behavior == EnemyBehavior.INTERCEPT:
                target = self._intercept_target()
                if target is None:
                    continue
                here = unit.position.chebyshev_to(target)
                best = min(candidates, key=lambda p: p.chebyshev_to(target))
                if best.chebyshev_to(target) < here:
                    unit.position = best

    def step(self, commands: Optional[Dict[int, Command]] = None) -> Dict:
        """Execute one turn of commands keyed by unit id and return the new state."""
        self.last_damage_dealt = 0
        self.last_destroyed = None

        for unit_id, command in (commands or {}).items():
            unit = self.units.get(unit_id)
            if unit is None or unit.player != self.config.agent_player:
                logger.warning("Ignoring command for unit %s", unit_id)
                continue
            if isinstance(command, MoveCommand):
                self._apply_move(unit, command.direction)
            elif isinstance(command, AttackCommand):
                self._apply_attack(unit, command.target_id)

        self._process_enemy_ai()

        self.turn += 1
        return self.get_state()

    def get_state(self) -> Dict:
        return {
            "turn": self.turn,
            "width": self.width,
            "height": self.height,
            "players": list(self.config.players),
            "units": [unit.to_dict() for unit in self.units.values()],
            "resources": [r.to_dict() for r in self.resources.values()],
            "last_damage_dealt": self.last_damage_dealt,
            "last_destroyed": self.last_destroyed,
        }
