"""
AStarAgentController - per-turn decision making for the footman.

Each turn the controller:
1. Stops if the enemy town hall is gone (task complete)
2. Replans with A* if the enemy footman stands on the planned path
3. Advances to the next waypoint once the current one is reached
4. Emits a one-step move toward the waypoint, or an attack on the town
   hall once the path is used up and the footman is next to it

Failures never raise across this boundary; they come back as TaskStatus
values on ControllerResult.
"""
import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Deque, Dict, Optional

from ..navigation import AStarPathfinder, Cell, NavigationState, ObstacleMap, Path
from ..world import FOOTMAN, AttackCommand, Command, Direction, MoveCommand
from .world_query import WorldQuery

logger = logging.getLogger(__name__)


class AgentState(Enum):
    """Lifecycle of the agent's task."""
    AWAITING_PATH = auto()  # Units not resolved or no plan yet
    MOVING = auto()         # Following the planned path
    ENGAGING = auto()       # Path exhausted, attacking the town hall
    DONE = auto()           # Town hall destroyed
    FAILED = auto()         # Setup or planning failure


class TaskStatus(Enum):
    """Outcome of a single controller turn."""
    IN_PROGRESS = auto()      # A command was issued
    INVALID_PLAN = auto()     # Plan inconsistent with the world, no command this turn
    COMPLETED = auto()        # Town hall destroyed
    SETUP_FAILED = auto()     # Could not identify footman / enemy / town hall
    PLANNING_FAILED = auto()  # No path to the town hall
    AGENT_LOST = auto()       # Our footman is no longer in the world


TERMINAL_STATUSES = (
    TaskStatus.COMPLETED,
    TaskStatus.SETUP_FAILED,
    TaskStatus.PLANNING_FAILED,
    TaskStatus.AGENT_LOST,
)


@dataclass
class ControllerResult:
    """Result of one controller turn."""
    status: TaskStatus
    command: Optional[Command] = None
    reason: Optional[str] = None
    replanned: bool = False
    waypoint: Optional[Cell] = None
    turn: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def as_actions(self) -> Dict[int, Command]:
        """Commands keyed by unit id, the form World.step() takes."""
        if self.command is None:
            return {}
        return {self.command.unit_id: self.command}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"status": self.status.name.lower(), "turn": self.turn}

        if self.command is not None:
            result["command"] = self.command.to_dict()
        if self.reason:
            result["reason"] = self.reason
        if self.replanned:
            result["replanned"] = True
        if self.waypoint is not None:
            result["waypoint"] = self.waypoint.to_tuple()

        return result


@dataclass
class TimingSummary:
    """Cumulative planning and execution time of one agent run."""
    turns: int
    planning_seconds: float
    execution_seconds: float

    @property
    def total_seconds(self) -> float:
        return self.planning_seconds + self.execution_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turns": self.turns,
            "planning_seconds": self.planning_seconds,
            "execution_seconds": self.execution_seconds,
            "total_seconds": self.total_seconds,
        }


@dataclass
class AgentControllerConfig:
    # False: replan when the enemy stands anywhere on the path returned by the
    # last planning call, including cells already walked. True: only the
    # cells not yet reached count.
    replan_on_remaining_only: bool = False


class AStarAgentController:
    """
    Drives one footman to the enemy town hall along an A* path.

    Usage:
        controller = AStarAgentController(player_num=0)
        result = controller.initial_step(world.get_state())
        while not result.is_terminal:
            world.step(result.as_actions())
            result = controller.middle_step(world.get_state())
    """

    def __init__(
        self,
        player_num: int = 0,
        pathfinder: Optional[AStarPathfinder] = None,
        config: Optional[AgentControllerConfig] = None,
    ):
        self.player_num = player_num
        self.config = config or AgentControllerConfig()
        self._pathfinder = pathfinder or AStarPathfinder()

        # Resolved in initial_step()
        self.footman_id: Optional[int] = None
        self.townhall_id: Optional[int] = None
        self.enemy_footman_id: Optional[int] = None

        # Plan state
        self._planned_path: Path = []
        self._active_path: Deque[Cell] = deque()
        self._next_waypoint: Optional[Cell] = None
        self._replan_count: int = 0
        self._is_stuck: bool = False

        self._state = AgentState.AWAITING_PATH
        self._terminal_result: Optional[ControllerResult] = None
        self.timing_summary: Optional[TimingSummary] = None

        # Cumulative timing (nanoseconds)
        self.total_plan_time_ns: int = 0
        self.total_execution_time_ns: int = 0

        logger.info("Constructed AStarAgentController for player %d", player_num)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self.footman_id is not None and self.townhall_id is not None

    @property
    def planned_path(self) -> Path:
        """Full path from the last planning call."""
        return list(self._planned_path)

    @property
    def active_path(self) -> Path:
        """Cells not yet taken as a waypoint."""
        return list(self._active_path)

    @property
    def next_waypoint(self) -> Optional[Cell]:
        return self._next_waypoint

    @property
    def replan_count(self) -> int:
        return self._replan_count

    def get_navigation_state(self) -> NavigationState:
        return NavigationState(
            has_path=bool(self._planned_path) or self._next_waypoint is not None,
            current_waypoint=self._next_waypoint,
            waypoints_remaining=len(self._active_path),
            total_waypoints=len(self._planned_path),
            replans=self._replan_count,
            is_complete=self._state == AgentState.DONE,
            is_stuck=self._is_stuck,
        )

    # =========================================================================
    # Main Interface
    # =========================================================================

    def step(self, world_state: Dict[str, Any]) -> ControllerResult:
        """Run initial_step() on the first call and middle_step() afterwards."""
        if not self.is_initialized and self._terminal_result is None:
            return self.initial_step(world_state)
        return self.middle_step(world_state)

    def initial_step(self, world_state: Dict[str, Any]) -> ControllerResult:
        """Identify our footman, the enemy town hall and enemy footman, then plan."""
        query = WorldQuery(world_state)

        reason = self._resolve_units(query)
        if reason is not None:
            logger.error(reason)
            return self._fail(TaskStatus.SETUP_FAILED, reason, query.turn)

        start_time = time.perf_counter_ns()
        path = self.find_path(query)
        self.total_plan_time_ns += time.perf_counter_ns() - start_time

        if path is None:
            return self._planning_failed(query.turn)
        self._set_path(path)

        return self.middle_step(world_state)

    def middle_step(self, world_state: Dict[str, Any]) -> ControllerResult:
        """Decide this turn's command."""
        if self._terminal_result is not None:
            return self._terminal_result
        if not self.is_initialized:
            return self.initial_step(world_state)

        start_time = time.perf_counter_ns()
        plan_time = 0
        query = WorldQuery(world_state)

        townhall = query.get_unit(self.townhall_id)
        if townhall is None:
            # Town hall was destroyed on the last turn
            logger.info("Town hall destroyed, task complete")
            self._state = AgentState.DONE
            self._terminal_result = ControllerResult(
                status=TaskStatus.COMPLETED,
                reason="town hall destroyed",
                turn=query.turn,
            )
            self.terminal_step(world_state)
            return self._terminal_result

        footman = query.get_unit(self.footman_id)
        if footman is None:
            reason = "Footman unit lost"
            logger.error(reason)
            return self._fail(TaskStatus.AGENT_LOST, reason, query.turn)

        replanned = False
        if self.should_replan(query):
            plan_start = time.perf_counter_ns()
            path = self.find_path(query)
            plan_time = time.perf_counter_ns() - plan_start
            self.total_plan_time_ns += plan_time

            if path is None:
                return self._planning_failed(query.turn)
            self._set_path(path, replan=True)
            replanned = True

        here = footman.cell
        if self._active_path and (self._next_waypoint is None or here == self._next_waypoint):
            self._next_waypoint = self._active_path.popleft()
            logger.info("Moving to %s", self._next_waypoint)

        if self._next_waypoint is not None and here != self._next_waypoint:
            dx = self._next_waypoint.x - here.x
            dy = self._next_waypoint.y - here.y
            direction = self.get_next_direction(dx, dy)

            if direction is None:
                logger.warning(
                    "Invalid path. Could not determine direction from %s to %s",
                    here, self._next_waypoint,
                )
                result = ControllerResult(
                    status=TaskStatus.INVALID_PLAN,
                    reason="waypoint not adjacent",
                    replanned=replanned,
                    waypoint=self._next_waypoint,
                    turn=query.turn,
                )
            else:
                self._state = AgentState.MOVING
                result = ControllerResult(
                    status=TaskStatus.IN_PROGRESS,
                    command=MoveCommand(self.footman_id, direction),
                    replanned=replanned,
                    waypoint=self._next_waypoint,
                    turn=query.turn,
                )
        elif here.chebyshev_to(townhall.cell) > 1:
            logger.warning("Invalid plan. Cannot attack town hall from %s", here)
            result = ControllerResult(
                status=TaskStatus.INVALID_PLAN,
                reason="path ended away from town hall",
                replanned=replanned,
                turn=query.turn,
            )
        else:
            logger.info("Attacking town hall")
            self._state = AgentState.ENGAGING
            result = ControllerResult(
                status=TaskStatus.IN_PROGRESS,
                command=AttackCommand(self.footman_id, self.townhall_id),
                replanned=replanned,
                turn=query.turn,
            )

        self.total_execution_time_ns += time.perf_counter_ns() - start_time - plan_time
        return result

    def terminal_step(self, world_state: Dict[str, Any]) -> TimingSummary:
        """Log and return cumulative planning and execution time."""
        summary = TimingSummary(
            turns=world_state.get("turn", 0),
            planning_seconds=self.total_plan_time_ns / 1e9,
            execution_seconds=self.total_execution_time_ns / 1e9,
        )
        logger.info("Total turns: %d", summary.turns)
        logger.info("Total planning time: %.6f", summary.planning_seconds)
        logger.info("Total execution time: %.6f", summary.execution_seconds)
        logger.info("Total time: %.6f", summary.total_seconds)
        self.timing_summary = summary
        return summary

    def save_player_data(self, stream: Any) -> None:
        """Agent state is not persisted."""

    def load_player_data(self, stream: Any) -> None:
        """Agent state is not persisted."""

    # =========================================================================
    # Planning
    # =========================================================================

    def should_replan(self, query: WorldQuery) -> bool:
        """True when the enemy footman stands on the planned path."""
        if self.enemy_footman_id is None:
            return False
        enemy = query.get_unit(self.enemy_footman_id)
        if enemy is None:
            return False

        if self.config.replan_on_remaining_only:
            watched = list(self._active_path)
            if self._next_waypoint is not None:
                watched.append(self._next_waypoint)
        else:
            watched = self._planned_path

        return enemy.cell in watched

    def find_path(self, query: WorldQuery) -> Optional[Path]:
        """Plan from the footman's live cell to a cell next to the town hall."""
        footman = query.get_unit(self.footman_id)
        townhall = query.get_unit(self.townhall_id)

        enemy_cell = None
        if self.enemy_footman_id is not None:
            enemy = query.get_unit(self.enemy_footman_id)
            if enemy is not None:
                enemy_cell = enemy.cell

        obstacle_map = ObstacleMap.from_cells(
            query.x_extent, query.y_extent, query.get_resource_cells()
        )
        return self._pathfinder.find_path(
            obstacle_map, footman.cell, townhall.cell, dynamic_block=enemy_cell
        )

    @staticmethod
    def get_next_direction(dx: int, dy: int) -> Optional[Direction]:
        """Direction of a unit step, or None if (dx, dy) is not one."""
        return Direction.from_delta(dx, dy)

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_units(self, query: WorldQuery) -> Optional[str]:
        """Fill in unit ids; return a failure reason or None."""
        unit_ids = query.get_unit_ids(self.player_num)
        if not unit_ids:
            return "No units found!"

        footman_id = unit_ids[0]
        footman = query.get_unit(footman_id)
        if footman.template_name != FOOTMAN:
            return "Footman unit not found"

        enemy_player = None
        for player in query.get_player_numbers():
            if player != self.player_num:
                enemy_player = player
                break
        if enemy_player is None:
            return "Failed to get enemy player number"

        enemy_unit_ids = query.get_unit_ids(enemy_player)
        if not enemy_unit_ids:
            return "Failed to find enemy units"

        townhall_id = None
        enemy_footman_id = None
        for unit_id in enemy_unit_ids:
            unit_type = query.get_unit(unit_id).template_name.lower()
            if unit_type == "townhall":
                townhall_id = unit_id
            elif unit_type == "footman":
                enemy_footman_id = unit_id
            else:
                logger.warning("Unknown unit type %r", unit_type)

        if townhall_id is None:
            return "Couldn't find townhall"

        self.footman_id = footman_id
        self.townhall_id = townhall_id
        self.enemy_footman_id = enemy_footman_id
        return None

    def _set_path(self, path: Path, replan: bool = False) -> None:
        self._planned_path = list(path)
        self._active_path = deque(path)
        # The new plan starts at the live cell, so an old waypoint no longer applies
        self._next_waypoint = None
        self._is_stuck = False
        if replan:
            self._replan_count += 1
            logger.info("Replanned path (%d cells)", len(path))
        else:
            logger.info("Planned path (%d cells)", len(path))

    def _planning_failed(self, turn: int) -> ControllerResult:
        logger.error("No available path")
        self._is_stuck = True
        return self._fail(TaskStatus.PLANNING_FAILED, "No available path", turn)

    def _fail(self, status: TaskStatus, reason: str, turn: int) -> ControllerResult:
        self._state = AgentState.FAILED
        self._terminal_result = ControllerResult(status=status, reason=reason, turn=turn)
        return self._terminal_result
