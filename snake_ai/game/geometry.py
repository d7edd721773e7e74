"""
Grid geometry for the snake game.

The grid is bordered by walls: a cell is a wall when either coordinate
is ``<= 0`` or reaches the grid width/height. Random cells are always
drawn strictly inside the walls.
"""
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import torch

from ..config import SimulationConfig
from ..rng import make_rng, randint


class Point(NamedTuple):
    """Grid cell."""
    x: int
    y: int

    def moved(self, direction: 'Direction') -> 'Point':
        dx, dy = direction.vector
        return Point(self.x + dx, self.y + dy)

    @classmethod
    def random(
        cls,
        config: SimulationConfig,
        rng: Optional[torch.Generator] = None,
    ) -> 'Point':
        """Random cell inside the walls."""
        if rng is None:
            rng = make_rng()
        return cls(
            randint(rng, 1, config.grid_width - 1),
            randint(rng, 1, config.grid_height - 1),
        )


class Direction(Enum):
    """
    Heading of a snake.

    Member order matches the network output layout: output index 0
    votes for LEFT, 1 for RIGHT, 2 for BOTTOM and 3 for TOP.
    """
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    BOTTOM = (0, 1)
    TOP = (0, -1)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.TOP, Direction.BOTTOM)

    @classmethod
    def from_index(cls, index: int) -> 'Direction':
        return _DIRECTIONS[index]

    @classmethod
    def random(cls, rng: Optional[torch.Generator] = None) -> 'Direction':
        if rng is None:
            rng = make_rng()
        return _DIRECTIONS[randint(rng, 0, len(_DIRECTIONS))]


_DIRECTIONS = tuple(Direction)


def is_wall(point: Point, config: SimulationConfig) -> bool:
    """Check whether a cell lies on or beyond the grid border."""
    return (
        point.x >= config.grid_width
        or point.x <= 0
        or point.y >= config.grid_height
        or point.y <= 0
    )
