"""
Runtime orchestrator for the turn-based simulation.

Flow per turn:
1. Snapshot the world state
2. Controller decides a command (replanning if needed)
3. Record events for the turn
4. Apply the command to the world, which also moves the enemy footman

The run ends when the controller reaches a terminal status or the turn
limit is hit.
"""
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..controller import AStarAgentController, ControllerResult, TaskStatus, TimingSummary
from ..world import AttackCommand, MoveCommand, World
from .events import Event, EventLog, EventType

logger = logging.getLogger(__name__)


@dataclass
class RuntimeConfig:
    """Configuration for the runtime loop."""
    max_turns: int = 500
    enable_logging: bool = True  # Keep per-turn StepResults
    # Exit the process with status 1 on "no path". Off: the failure comes
    # back as the RunResult.
    exit_on_planning_failure: bool = False


@dataclass
class StepResult:
    """Result of a single runtime turn."""
    turn: int
    result: ControllerResult
    world_state: Dict[str, Any]
    events: List[Event]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn": self.turn,
            "result": self.result.to_dict(),
            "events": [e.to_dict() for e in self.events],
        }


@dataclass
class RunResult:
    """Outcome of a full run."""
    status: Optional[TaskStatus]
    turns: int
    replans: int
    timing: Optional[TimingSummary]
    steps: List[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.name.lower() if self.status else "turn_limit",
            "turns": self.turns,
            "replans": self.replans,
            "timing": self.timing.to_dict() if self.timing else None,
        }


_TERMINAL_EVENTS = {
    TaskStatus.COMPLETED: EventType.GOAL_DESTROYED,
    TaskStatus.SETUP_FAILED: EventType.SETUP_FAILED,
    TaskStatus.PLANNING_FAILED: EventType.PLANNING_FAILED,
    TaskStatus.AGENT_LOST: EventType.AGENT_LOST,
}


class Runtime:
    """
    Main loop that drives a World with an AStarAgentController.

    Usage:
        world = load_layout("maps/dynamic.txt")
        runtime = Runtime(world)
        outcome = runtime.run()
        print(outcome.to_dict())
    """

    def __init__(
        self,
        world: World,
        controller: Optional[AStarAgentController] = None,
        config: Optional[RuntimeConfig] = None,
    ):
        self.config = config or RuntimeConfig()
        self._world = world
        self._controller = controller or AStarAgentController(
            player_num=world.config.agent_player
        )
        self._events = EventLog()
        self._step_history: List[StepResult] = []
        self._last_result: Optional[ControllerResult] = None

    @property
    def world(self) -> World:
        return self._world

    @property
    def controller(self) -> AStarAgentController:
        return self._controller

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def history(self) -> List[StepResult]:
        return list(self._step_history)

    @property
    def is_finished(self) -> bool:
        return self._last_result is not None and self._last_result.is_terminal

    def step(self) -> StepResult:
        """Run one turn."""
        world_state = self._world.get_state()
        turn = world_state["turn"]
        first_turn = not self._controller.is_initialized

        result = self._controller.step(world_state)
        self._last_result = result

        tick_events = []
        if first_turn and self._controller.is_initialized and result.status != TaskStatus.PLANNING_FAILED:
            tick_events.append(self._events.record(
                EventType.PATH_PLANNED, turn,
                length=len(self._controller.planned_path),
            ))
        if result.replanned:
            tick_events.append(self._events.record(
                EventType.PATH_REPLANNED, turn,
                length=len(self._controller.planned_path),
            ))

        if isinstance(result.command, MoveCommand):
            tick_events.append(self._events.record(
                EventType.MOVE_ISSUED, turn,
                direction=result.command.direction.name.lower(),
            ))
        elif isinstance(result.command, AttackCommand):
            tick_events.append(self._events.record(
                EventType.ATTACK_ISSUED, turn, target_id=result.command.target_id,
            ))
        elif result.status == TaskStatus.INVALID_PLAN:
            tick_events.append(self._events.record(
                EventType.INVALID_PLAN, turn, reason=result.reason,
            ))
        elif result.status in _TERMINAL_EVENTS:
            tick_events.append(self._events.record(
                _TERMINAL_EVENTS[result.status], turn, reason=result.reason,
            ))

        if result.status == TaskStatus.PLANNING_FAILED and self.config.exit_on_planning_failure:
            logger.error("No available path, exiting")
            sys.exit(1)

        if not result.is_terminal:
            self._world.step(result.as_actions())

        step_result = StepResult(
            turn=turn,
            result=result,
            world_state=world_state,
            events=tick_events,
        )
        if self.config.enable_logging:
            self._step_history.append(step_result)
        return step_result

    def run(self, on_step: Optional[Callable[[StepResult], None]] = None) -> RunResult:
        """Run turns until the controller finishes or max_turns is reached."""
        turns = 0
        while not self.is_finished and turns < self.config.max_turns:
            step_result = self.step()
            if on_step is not None:
                on_step(step_result)
            turns += 1

        if not self.is_finished:
            logger.warning("Turn limit %d reached", self.config.max_turns)

        if self._controller.timing_summary is None:
            self._controller.terminal_step(self._world.get_state())

        status = self._last_result.status if self.is_finished else None
        return RunResult(
            status=status,
            turns=self._world.turn,
            replans=self._controller.replan_count,
            timing=self._controller.timing_summary,
            steps=self.history,
        )
