"""
Snake game instance driven by a neural network.

An agent is one running game: a snake, a piece of food and the network
that steers the snake. Each tick the network looks along the four
cardinal directions from the head and votes for a heading.

State machine: running -> complete. Once complete the agent never
changes again.
"""
import math
from itertools import islice
from typing import List, Optional, Tuple

import numpy as np
import torch

from ..config import SimulationConfig
from ..networks import NeuralNetwork
from ..rng import make_rng
from .geometry import Direction, Point, is_wall

# Longest ray cast while building the vision vector
MAX_RAY_LENGTH = 1000

# Attempts at finding a food cell not covered by the snake
FOOD_PLACEMENT_ATTEMPTS = 5

# (score threshold, multiplier) for the no-food step limit, highest first
STEP_LIMIT_TIERS: Tuple[Tuple[int, int], ...] = (
    (80, 8),
    (30, 5),
    (20, 3),
    (10, 2),
)

_F32_TWO = np.float32(2.0)
_F32_TENTH = np.float32(0.1)


class Agent:
    """
    A single snake game with its own network.

    Attributes:
        config: Simulation configuration (grid size, step limit, layers).
        network: The agent's network. Owned exclusively by this agent.
        head: Current head cell.
        food: Current food cell.
        direction: Current heading.
        is_complete: True once the snake hit a wall, itself, or starved.
        num_steps: Ticks survived.
        no_food_steps: Ticks since food was last eaten.

    Example:
        agent = Agent(config, rng)
        while not agent.is_complete:
            agent.update()
        print(agent.score, agent.fitness())
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[torch.Generator] = None,
        network: Optional[NeuralNetwork] = None,
    ):
        """
        Start a new game with the snake at the grid centre.

        Args:
            config: Simulation configuration.
            rng: Random generator for food placement, the initial
                 heading and (if no network is given) the network weights.
            network: Network to steer with. Ownership passes to the
                     agent; pass a clone if the caller keeps using it.
        """
        if rng is None:
            rng = make_rng()

        self.config = config
        self._rng = rng

        self.head = Point(*config.spawn_position)
        self._body: List[Point] = [self.head]
        self.food = Point.random(config, rng)
        self.direction = Direction.random(rng)
        self.network = network if network is not None else NeuralNetwork(config.layer_sizes, rng)

        self.is_complete = False
        self.num_steps = 0
        self.no_food_steps = 0
        self._activations: List[torch.Tensor] = []

    @classmethod
    def with_network(
        cls,
        config: SimulationConfig,
        network: NeuralNetwork,
        rng: Optional[torch.Generator] = None,
    ) -> 'Agent':
        """Start a new game steered by a copy of the given network."""
        return cls(config, rng, network.clone())

    @property
    def body(self) -> Tuple[Point, ...]:
        """Snake segments, head first."""
        return tuple(self._body)

    @property
    def score(self) -> int:
        return len(self._body)

    @property
    def steps(self) -> int:
        return self.num_steps

    @property
    def activations(self) -> List[torch.Tensor]:
        """Per-layer activations of the most recent tick's forward pass."""
        return list(self._activations)

    def update(self) -> None:
        """Advance the game by one tick."""
        if self.is_complete:
            return

        self.num_steps += 1
        self._activations = self.net_output()
        self.direction = self._choose_direction(self._activations[-1])

        vacated = self._advance()
        self._handle_food(vacated)
        self._handle_step_limit()
        if is_wall(self.head, self.config) or self.is_snake_body(self.head):
            self.is_complete = True

    def net_output(self) -> List[torch.Tensor]:
        """Run the network on the current vision without changing state."""
        return self.network.predict(self.vision())

    def vision(self) -> List[float]:
        """
        Vision features, three per direction (LEFT, RIGHT, BOTTOM, TOP).

        For each direction: inverse distance to the first wall or body
        segment, 1.0 if the food lies on the way there (else 0.0), and
        the inverse distance again in the body slot.
        """
        features = []
        for direction in Direction:
            obstacle, food_seen, body = self._look(direction)
            features.append(obstacle)
            features.append(1.0 if food_seen else 0.0)
            features.append(body)
        return features

    def _look(self, direction: Direction) -> Tuple[float, bool, float]:
        food_seen = False
        point = self.head
        distance = 0

        while True:
            if is_wall(point, self.config):
                break
            if point == self.food:
                food_seen = True
            if self.is_snake_body(point):
                break

            point = point.moved(direction)
            distance += 1
            if distance > MAX_RAY_LENGTH:
                break

        # Only a finished snake can sit on an obstacle
        inverse = 1.0 / distance if distance else math.inf

        # Body slot repeats the obstacle distance
        return inverse, food_seen, inverse

    def _choose_direction(self, outputs: torch.Tensor) -> Direction:
        """Pick the strongest output, refusing to reverse onto the body."""
        proposed = Direction.from_index(int(torch.argmax(outputs).item()))

        if self.direction.is_horizontal and proposed.is_horizontal:
            return self.direction
        if self.direction.is_vertical and proposed.is_vertical:
            return self.direction
        return proposed

    def _advance(self) -> Point:
        """Move the head one cell; returns the cell the tail vacated."""
        self.head = self.head.moved(self.direction)
        self._body.insert(0, self.head)
        return self._body.pop()

    def _handle_food(self, vacated: Point) -> None:
        if self.head != self.food:
            self.no_food_steps += 1
            return

        self._body.append(vacated)
        self.food = self._random_empty_cell()
        self.no_food_steps = 0

    def _random_empty_cell(self) -> Point:
        point = Point.random(self.config, self._rng)
        for _ in range(FOOD_PLACEMENT_ATTEMPTS - 1):
            if point not in self._body:
                break
            point = Point.random(self.config, self._rng)
        return point

    def step_limit(self) -> int:
        """Ticks allowed without food at the current score."""
        score = self.score
        for threshold, multiplier in STEP_LIMIT_TIERS:
            if score > threshold:
                return self.config.base_step_limit * multiplier
        return self.config.base_step_limit

    def _handle_step_limit(self) -> None:
        if self.no_food_steps >= self.step_limit():
            self.is_complete = True

    def is_snake_body(self, point: Point) -> bool:
        """Check whether a cell is covered by a non-head segment."""
        return any(segment == point for segment in islice(self._body, 1, None))

    def fitness(self) -> float:
        """
        Fitness of the game so far.

        Evaluated in 32-bit floats, so very long snakes overflow to inf.
        """
        score = np.float32(self.score)
        steps = np.float32(self.num_steps)

        if score <= 1:
            return 1.0

        with np.errstate(over='ignore', invalid='ignore'):
            if score < 5:
                return float(steps * _F32_TENTH * _F32_TWO ** score * score)
            return float(_F32_TWO ** score * score * steps)

    def __repr__(self) -> str:
        state = 'complete' if self.is_complete else 'running'
        return f"Agent(score={self.score}, steps={self.num_steps}, {state})"
