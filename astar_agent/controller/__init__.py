"""
Controller module - the footman's decision-making hub.

This module consolidates:
- AStarAgentController: per-turn replanning, waypoint following and attack
- WorldQuery: read-only world state queries

Usage:
    from astar_agent.controller import AStarAgentController

    controller = AStarAgentController(player_num=0)
    result = controller.step(world.get_state())

Flow:
    World state → WorldQuery → AStarAgentController → Command → World
"""

from .agent_controller import (
    AStarAgentController,
    AgentControllerConfig,
    AgentState,
    ControllerResult,
    TaskStatus,
    TimingSummary,
)
from .world_query import WorldQuery, UnitMatch, ResourceMatch

__all__ = [
    # Controller
    "AStarAgentController",
    "AgentControllerConfig",
    "AgentState",
    "ControllerResult",
    "TaskStatus",
    "TimingSummary",
    # World query
    "WorldQuery",
    "UnitMatch",
    "ResourceMatch",
]
