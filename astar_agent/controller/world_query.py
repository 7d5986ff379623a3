"""
WorldQuery provides read-only access to world state for the agent.

This is the narrow interface the controller sees of the host simulation:
unit ids per player, unit lookups, resource positions and map extents.
Takes a world state dict (from World.get_state()) as input, so tests can
feed hand-built snapshots.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from ..navigation import Cell


@dataclass
class UnitMatch:
    """Read-only view of one unit."""
    unit_id: int
    player: int
    template_name: str
    x: int
    y: int
    health: int

    @property
    def cell(self) -> Cell:
        return Cell(self.x, self.y)


@dataclass
class ResourceMatch:
    """Read-only view of one resource node."""
    resource_id: int
    resource_type: str
    x: int
    y: int

    @property
    def cell(self) -> Cell:
        return Cell(self.x, self.y)


class WorldQuery:
    """
    Read-only interface to query world state.

    Usage:
        query = WorldQuery(world.get_state())
        footman_id = query.get_unit_ids(0)[0]
        footman = query.get_unit(footman_id)
        blocked = query.get_resource_cells()
    """

    def __init__(self, world_state: Dict[str, Any]):
        self._state = world_state

    def update(self, world_state: Dict[str, Any]) -> None:
        """Update with new world state."""
        self._state = world_state

    @property
    def turn(self) -> int:
        return self._state.get("turn", 0)

    @property
    def x_extent(self) -> int:
        return self._state["width"]

    @property
    def y_extent(self) -> int:
        return self._state["height"]

    # =========================================================================
    # Unit Queries
    # =========================================================================

    def get_player_numbers(self) -> List[int]:
        return list(self._state.get("players", []))

    def get_unit_ids(self, player: int) -> List[int]:
        """Ids of the given player's units, in world order."""
        return [
            unit["unit_id"]
            for unit in self._state.get("units", [])
            if unit["player"] == player
        ]

    def get_unit(self, unit_id: int) -> Optional[UnitMatch]:
        """Get a unit by id, or None if it is no longer in the world."""
        for unit in self._state.get("units", []):
            if unit["unit_id"] == unit_id:
                pos = unit["position"]
                return UnitMatch(
                    unit_id=unit["unit_id"],
                    player=unit["player"],
                    template_name=unit["template_name"],
                    x=pos["x"],
                    y=pos["y"],
                    health=unit.get("health", 0),
                )
        return None

    # =========================================================================
    # Resource Queries
    # =========================================================================

    def get_all_resource_ids(self) -> List[int]:
        return [r["resource_id"] for r in self._state.get("resources", [])]

    def get_resource(self, resource_id: int) -> Optional[ResourceMatch]:
        for resource in self._state.get("resources", []):
            if resource["resource_id"] == resource_id:
                pos = resource["position"]
                return ResourceMatch(
                    resource_id=resource["resource_id"],
                    resource_type=resource.get("resource_type", "tree"),
                    x=pos["x"],
                    y=pos["y"],
                )
        return None

    def get_resource_cells(self) -> Set[Cell]:
        """Cells occupied by resources: the static obstacles."""
        return {
            Cell(r["position"]["x"], r["position"]["y"])
            for r in self._state.get("resources", [])
        }
