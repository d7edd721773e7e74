"""
Island: an independently evolving cohort of agents.

An island ticks all of its agents until every game is over, then breeds
a new cohort from the old one:

1. Retained elite: the fittest agents' networks, unchanged
2. Children: crossover of fitness-proportionally sampled parents, mutated
3. Retained with mutation: mutated copies of the top of the ranking
4. Random: brand new networks

Islands track the best score they have seen and when it last improved,
so the population can reseed islands that stopped making progress.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import torch

from ..config import SimulationConfig
from ..game import Agent
from ..networks import NeuralNetwork
from ..rng import make_rng
from .crossover import WeightCrossover
from .mutations import WeightMutator
from .selection import GenePool, sort_by_fitness

logger = logging.getLogger(__name__)

# Absorbs float error so that e.g. 1000 * 0.29 yields 290, not 289
QUOTA_EPSILON = 1e-9


def quota(size: int, fraction: float) -> int:
    """Truncated share of a cohort."""
    return int(size * fraction + QUOTA_EPSILON)


@dataclass
class BreedingStats:
    """How the latest cohort of an island was assembled."""
    retained: int = 0
    children: int = 0
    retained_mutated: int = 0
    random: int = 0
    gene_pool_failed: bool = False

    @property
    def total(self) -> int:
        return self.retained + self.children + self.retained_mutated + self.random


def compute_quotas(size: int, config: SimulationConfig) -> BreedingStats:
    """
    Split a cohort of ``size`` agents into breeding quotas.

    Agents lost to truncation are added to the random quota so the
    quotas always sum to ``size``.
    """
    stats = BreedingStats(
        retained=quota(size, config.retained_fraction),
        children=quota(size, config.children_fraction),
        random=quota(size, config.random_fraction),
        retained_mutated=quota(size, config.retained_mutated_fraction),
    )
    stats.random += size - stats.total
    return stats


class Island:
    """
    A cohort of agents evolved in isolation between migrations.

    Attributes:
        agents: Current cohort, replaced wholesale on reset.
        max_score: Best score seen since the last injection.
        max_score_ts: Clock reading of the last max_score improvement.
        last_breeding: Quotas used by the most recent reset.

    Example:
        island = Island(config, rng)
        while island.num_alive:
            island.tick()
        best_net = island.reset()
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[torch.Generator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Create an island of fresh random agents.

        Args:
            config: Simulation configuration.
            rng: Random generator shared with the agents.
            clock: Seconds-returning clock for stagnation tracking.
        """
        if rng is None:
            rng = make_rng()

        self.config = config
        self._rng = rng
        self._clock = clock

        self.mutator = WeightMutator(
            mutation_rate=config.mutation_rate,
            variation=config.mutation_variation,
        )
        self.crossover = WeightCrossover()

        self.agents: List[Agent] = [
            Agent(config, rng) for _ in range(config.agents_per_island)
        ]
        self.max_score = 0
        self.max_score_ts = clock()
        self.last_breeding: Optional[BreedingStats] = None

    @property
    def num_alive(self) -> int:
        return sum(1 for agent in self.agents if not agent.is_complete)

    def tick(self) -> int:
        """
        Update every running agent once.

        Returns:
            Number of agents whose game ended during this tick.
        """
        terminated = 0

        for agent in self.agents:
            if agent.is_complete:
                continue

            agent.update()
            if agent.is_complete:
                terminated += 1

            if agent.score > self.max_score:
                self.max_score = agent.score
                self.max_score_ts = self._clock()

        return terminated

    def is_local_maximum(self) -> bool:
        """True if the best score has not improved within the wait threshold."""
        elapsed = self._clock() - self.max_score_ts
        return elapsed > self.config.local_max_wait_secs

    def reset(self) -> NeuralNetwork:
        """
        Breed the next cohort from the current one.

        Returns:
            Network of the fittest agent of the finished cohort.
        """
        config = self.config
        rng = self._rng
        old_agents = self.agents

        fitnesses = [agent.fitness() for agent in old_agents]
        ranked = [
            agent for agent, _ in sort_by_fitness(
                list(zip(old_agents, fitnesses)), lambda pair: pair[1]
            )
        ]
        stats = compute_quotas(len(old_agents), config)
        gene_pool = GenePool.build(fitnesses)

        new_agents = []

        # Retained, no mutation
        for agent in ranked[:stats.retained]:
            new_agents.append(Agent.with_network(config, agent.network, rng))

        # Children
        if gene_pool is not None:
            parents = gene_pool.sample(2 * stats.children, rng)
            for i in range(stats.children):
                parent_a = old_agents[parents[2 * i]]
                parent_b = old_agents[parents[2 * i + 1]]
                child = self.crossover.crossover(parent_a.network, parent_b.network, rng)
                self.mutator.mutate(child, rng, in_place=True)
                new_agents.append(Agent(config, rng, child))
        else:
            logger.warning(
                f"No usable fitness for a gene pool, breeding {stats.children} "
                f"mutated elites instead of children"
            )
            stats.retained_mutated += stats.children
            stats.children = 0
            stats.gene_pool_failed = True

        # Retained with mutation; may revisit the top performers
        for i in range(stats.retained_mutated):
            source = ranked[i % len(ranked)]
            network = self.mutator.mutate(source.network, rng)
            new_agents.append(Agent(config, rng, network))

        # Full random
        for _ in range(stats.random):
            new_agents.append(Agent(config, rng))

        logger.debug(
            f"Island bred {len(new_agents)} agents: retained={stats.retained} "
            f"children={stats.children} mutated={stats.retained_mutated} "
            f"random={stats.random}"
        )

        self.agents = new_agents
        self.last_breeding = stats
        return ranked[0].network

    def inject(self, network: NeuralNetwork) -> None:
        """
        Replace part of the cohort with clones of an outside network.

        The first slots of the cohort are dropped and the clones
        appended. Stagnation tracking restarts.
        """
        count = quota(len(self.agents), self.config.rejuvenation_fraction)

        del self.agents[:count]
        for _ in range(count):
            self.agents.append(Agent.with_network(self.config, network, self._rng))

        self.max_score = 0
        self.max_score_ts = self._clock()
        logger.debug(f"Injected {count} clones of a migrant network")

    def summary(self) -> Tuple[int, Optional[NeuralNetwork]]:
        """
        Best score among the current agents and a copy of its network.

        Returns:
            (max score, network) or (0, None) if the island is empty.
        """
        max_score = 0
        best_net = None

        for agent in self.agents:
            if agent.score > max_score:
                max_score = agent.score
                best_net = agent.network

        return max_score, best_net.clone() if best_net is not None else None
