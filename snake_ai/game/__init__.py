"""
Snake game simulation.

This module provides:
- Grid geometry (Point, Direction, wall test)
- Agent: one snake game steered by its own network
"""
from .geometry import Direction, Point, is_wall
from .agent import Agent, MAX_RAY_LENGTH, FOOD_PLACEMENT_ATTEMPTS, STEP_LIMIT_TIERS

__all__ = [
    'Direction',
    'Point',
    'is_wall',
    'Agent',
    'MAX_RAY_LENGTH',
    'FOOD_PLACEMENT_ATTEMPTS',
    'STEP_LIMIT_TIERS',
]
