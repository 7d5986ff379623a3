from .grid_chase_env import ATTACK_ACTION, DEFAULT_LAYOUT, GridChaseEnv, command_to_action

__all__ = ["ATTACK_ACTION", "DEFAULT_LAYOUT", "GridChaseEnv", "command_to_action"]
