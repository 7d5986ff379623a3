from dataclasses import dataclass
from typing import Optional


FOOTMAN = "Footman"
TOWNHALL = "TownHall"


@dataclass
class Position:
    x: int
    y: int

    def chebyshev_to(self, other: "Position") -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def copy(self) -> "Position":
        return Position(self.x, self.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class Unit:
    """A player-owned unit: the footmen and the town hall."""
    unit_id: int
    player: int
    template_name: str
    position: Position

    max_health: int = 60
    health: int = 60
    attack_damage: int = 0

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def is_mobile(self) -> bool:
        return self.template_name != TOWNHALL

    def take_damage(self, damage: int) -> int:
        """Apply damage and return actual damage taken."""
        actual_damage = min(damage, self.health)
        self.health -= actual_damage
        return actual_damage

    def to_dict(self) -> dict:
        return {
            "unit_id": self.unit_id,
            "player": self.player,
            "template_name": self.template_name,
            "position": self.position.to_dict(),
            "health": self.health,
            "max_health": self.max_health,
        }


@dataclass
class ResourceNode:
    """Static map feature (tree or gold mine) that blocks movement."""
    resource_id: int
    resource_type: str
    position: Position
    amount: int = 100

    def to_dict(self) -> dict:
        return {
            "resource_id": self.resource_id,
            "resource_type": self.resource_type,
            "position": self.position.to_dict(),
            "amount": self.amount,
        }


def make_footman(unit_id: int, player: int, x: int, y: int) -> Unit:
    return Unit(
        unit_id=unit_id,
        player=player,
        template_name=FOOTMAN,
        position=Position(x, y),
        max_health=60,
        health=60,
        attack_damage=10,
    )


def make_townhall(
    unit_id: int, player: int, x: int, y: int, health: Optional[int] = None
) -> Unit:
    health = 30 if health is None else health
    return Unit(
        unit_id=unit_id,
        player=player,
        template_name=TOWNHALL,
        position=Position(x, y),
        max_health=health,
        health=health,
    )
