"""
Population management across islands.

The population ticks every island in lock step. A generation ends only
when every agent on every island has finished; at that point each
island breeds its next cohort, and islands whose best score has
stagnated receive clones of a randomly chosen island's best network.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import torch

from ..config import SimulationConfig
from ..game import Agent
from ..networks import NeuralNetwork
from ..rng import make_rng, randint
from .island import Island
from .selection import sort_by_fitness

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationSummary:
    """Snapshot of a generation handed to the visualizer."""
    time_elapsed_secs: float
    max_score: int
    best_net: Optional[NeuralNetwork] = None


class Population:
    """
    Manages a set of islands of evolving agents.

    Example:
        pop = Population(config, rng=make_rng(seed=3))
        while True:
            if pop.tick() == 0:
                summary = pop.reset()
                print(summary.max_score)
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[torch.Generator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Create ``config.num_islands`` islands of random agents.

        Args:
            config: Simulation configuration.
            rng: Random generator shared by every island.
            clock: Seconds-returning clock for timing and stagnation.
        """
        if rng is None:
            rng = make_rng()

        self.config = config
        self._rng = rng
        self._clock = clock

        self.islands: List[Island] = [
            Island(config, rng, clock) for _ in range(config.num_islands)
        ]
        self.gen_start_ts = clock()

    @property
    def agents(self) -> Iterator[Agent]:
        """Every agent of every island."""
        for island in self.islands:
            yield from island.agents

    def tick(self) -> int:
        """
        Update every island once.

        Returns:
            Number of agents still running across all islands.
        """
        for island in self.islands:
            island.tick()
        return sum(island.num_alive for island in self.islands)

    def reset(self) -> GenerationSummary:
        """
        End the current generation and start the next one.

        Every island breeds a new cohort. With more than one island,
        each stagnated island is reseeded with the best network of a
        uniformly chosen island (possibly its own).

        Returns:
            Summary of the generation that just ended.
        """
        summary = self.summary()
        self.gen_start_ts = self._clock()

        best_nets = [island.reset() for island in self.islands]

        if len(self.islands) > 1:
            for index, island in enumerate(self.islands):
                if not island.is_local_maximum():
                    continue

                source = randint(self._rng, 0, len(best_nets))
                island.inject(best_nets[source])
                logger.debug(f"Migrated best network of island {source} into island {index}")

        return summary

    def summary(self) -> GenerationSummary:
        """Elapsed time, best score and best network of the current generation."""
        max_score = 0
        best_net = None

        for island in self.islands:
            island_score, island_net = island.summary()
            if island_score > max_score:
                max_score = island_score
                best_net = island_net

        return GenerationSummary(
            time_elapsed_secs=self._clock() - self.gen_start_ts,
            max_score=max_score,
            best_net=best_net,
        )

    def top_agents(self, count: int) -> List[Agent]:
        """The ``count`` fittest agents across all islands."""
        return sort_by_fitness(list(self.agents), Agent.fitness)[:count]
