"""
Gym-compatible environment wrapper for the turn-based grid world.

Lets the footman task be driven by any Gymnasium policy. The A* controller
can act as an expert policy through command_to_action().
"""
import dataclasses
from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
from gymnasium import spaces
import numpy as np

from ..world import (
    AttackCommand,
    Command,
    Direction,
    MoveCommand,
    World,
    WorldConfig,
    parse_layout,
)

DEFAULT_LAYOUT = """
F-------
--------
--xxx---
----x-E-
----x---
------H-
"""

# Actions 0-7 follow Direction's definition order, 8 attacks the town hall
DIRECTIONS = list(Direction)
ATTACK_ACTION = len(DIRECTIONS)

CHANNEL_AGENT = 0
CHANNEL_GOAL = 1
CHANNEL_HOSTILE = 2
CHANNEL_OBSTACLE = 3


def command_to_action(command: Optional[Command]) -> Optional[int]:
    """Convert a controller command to a discrete action (None for no command)."""
    if isinstance(command, MoveCommand):
        return DIRECTIONS.index(command.direction)
    if isinstance(command, AttackCommand):
        return ATTACK_ACTION
    return None


class GridChaseEnv(gym.Env):
    """
    Gym environment for the footman / town hall task.

    Episode structure:
    - Episode starts: world rebuilt from the layout
    - Episode step: footman moves one cell or attacks; enemy footman moves
    - Episode ends: town hall destroyed (terminated) or max_steps (truncated)

    Action space: Discrete(9) - 8 directions + attack town hall
    Observation space: Box(0, 1, (4, H, W), uint8) - agent, goal, hostile,
                       obstacle channels
    """

    metadata = {"render_modes": ["ansi"]}

    def __init__(
        self,
        layout: Optional[str] = None,
        world_config: Optional[WorldConfig] = None,
        max_steps: int = 200,
        step_penalty: float = 0.01,
        render_mode: Optional[str] = None,
    ):
        super().__init__()

        self._layout = layout or DEFAULT_LAYOUT
        self._world_config = world_config or WorldConfig()
        self._max_steps = max_steps
        self._step_penalty = step_penalty
        self.render_mode = render_mode

        self._world: World = parse_layout(self._layout, self._world_config)
        self._current_step = 0

        self.action_space = spaces.Discrete(ATTACK_ACTION + 1)
        self.observation_space = spaces.Box(
            low=0,
            high=1,
            shape=(4, self._world.height, self._world.width),
            dtype=np.uint8,
        )

    @property
    def world(self) -> World:
        """Access the underlying world."""
        return self._world

    def _agent_unit(self):
        units = self._world.get_units(self._world.config.agent_player)
        return units[0] if units else None

    def _townhall_unit(self):
        for unit in self._world.units.values():
            if unit.player != self._world.config.agent_player and not unit.is_mobile:
                return unit
        return None

    def _get_obs(self) -> np.ndarray:
        obs = np.zeros(self.observation_space.shape, dtype=np.uint8)
        for unit in self._world.units.values():
            x, y = unit.position.x, unit.position.y
            if unit.player == self._world.config.agent_player:
                obs[CHANNEL_AGENT, y, x] = 1
            elif unit.is_mobile:
                obs[CHANNEL_HOSTILE, y, x] = 1
            else:
                obs[CHANNEL_GOAL, y, x] = 1
        for x, y in self._world.resource_cells():
            obs[CHANNEL_OBSTACLE, y, x] = 1
        return obs

    def _get_info(self) -> Dict[str, Any]:
        townhall = self._townhall_unit()
        return {
            "turn": self._world.turn,
            "townhall_health": townhall.health if townhall else 0,
            "world_state": self._world.get_state(),
        }

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Returns:
            observation: Initial observation
            info: Additional info dict
        """
        super().reset(seed=seed)

        config = self._world_config
        if seed is not None:
            config = dataclasses.replace(config, seed=seed)
        self._world = parse_layout(self._layout, config)
        self._current_step = 0

        return self._get_obs(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        """
        Execute one turn.

        Returns:
            observation, reward, terminated, truncated, info
        """
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}")

        agent = self._agent_unit()
        townhall = self._townhall_unit()
        commands: Dict[int, Command] = {}
        if agent is not None:
            if action == ATTACK_ACTION:
                if townhall is not None:
                    commands[agent.unit_id] = AttackCommand(agent.unit_id, townhall.unit_id)
            else:
                commands[agent.unit_id] = MoveCommand(agent.unit_id, DIRECTIONS[action])

        self._world.step(commands)
        self._current_step += 1

        destroyed = self._townhall_unit() is None
        reward = 1.0 if destroyed else -self._step_penalty
        terminated = destroyed
        truncated = not terminated and self._current_step >= self._max_steps

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[str]:
        """Render the world as text."""
        rows = []
        resources = self._world.resource_cells()
        for y in range(self._world.height):
            row = ""
            for x in range(self._world.width):
                unit = self._world.unit_at(x, y)
                if unit is None:
                    row += "#" if (x, y) in resources else "."
                elif unit.player == self._world.config.agent_player:
                    row += "F"
                elif unit.is_mobile:
                    row += "E"
                else:
                    row += "H"
            rows.append(row)
        return "\n".join(rows)

    def close(self) -> None:
        """Clean up resources."""
