"""
A* footman agent for a turn-based grid world.

Subpackages:
- navigation: grid cells, obstacle map and A* pathfinding
- world: the turn-based host simulation and ASCII map layouts
- controller: read-only world queries and the per-turn agent controller
- runtime: turn loop orchestration and event log
- envs: Gymnasium wrapper around the host simulation
"""

__version__ = "0.1.0"
