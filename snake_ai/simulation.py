"""
Headless simulation driver.

Ticks the population, detects generation boundaries and keeps a
history of per-generation statistics. A renderer can call ``update()``
once per frame; batch runs use ``run()``.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import torch

from .config import SimulationConfig
from .evolution import GenerationSummary, Population
from .game import Agent
from .networks import NeuralNetwork
from .rng import make_rng

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Statistics for a finished generation."""
    generation: int = 0
    max_score: int = 0
    all_time_max_score: int = 0
    time_elapsed_secs: float = 0.0
    best_fitness: float = 0.0
    mean_score: float = 0.0
    num_ticks: int = 0


class Simulation:
    """
    Runs generations of a population until asked to stop.

    Attributes:
        population: The evolving population.
        generation: Number of generations completed.
        best_score: Best generation score seen so far.
        best_net: Network that achieved ``best_score``.
        stats_history: One GenerationStats per completed generation.

    Example:
        sim = Simulation(SimulationConfig(agents_per_island=100), rng=make_rng(1))
        history = sim.run(generations=5)
        print(history[-1].max_score)
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[torch.Generator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if rng is None:
            rng = make_rng()

        self.config = config
        self._rng = rng
        self._clock = clock

        self.population = Population(config, rng, clock)
        self.generation = 0
        self.best_score = 0
        self.best_net: Optional[NeuralNetwork] = None
        self.stats_history: List[GenerationStats] = []

        self._sim_start_ts = clock()
        self._ticks = 0

    def update(self) -> Optional[GenerationSummary]:
        """
        Tick the population once.

        Returns:
            Summary of the generation that just ended, or None if agents
            are still running.
        """
        games_alive = self.population.tick()
        self._ticks += 1

        if games_alive > 0:
            return None

        stats = self._collect_stats()
        summary = self.population.reset()
        self._end_generation(summary, stats)
        return summary

    def run(
        self,
        generations: int,
        max_ticks: Optional[int] = None,
        progress_callback: Optional[Callable[[int, GenerationStats], None]] = None,
    ) -> List[GenerationStats]:
        """
        Run until ``generations`` more generations have completed.

        Args:
            generations: Number of generations to complete.
            max_ticks: Stop after this many ticks even if the generations
                       are unfinished. None means no cap.
            progress_callback: Called with (generation, stats) after each.

        Returns:
            Statistics of the generations completed by this call.
        """
        target = self.generation + generations
        start = len(self.stats_history)
        ticks = 0

        while self.generation < target:
            if max_ticks is not None and ticks >= max_ticks:
                logger.info(f"Stopping after {ticks} ticks, generation {self.generation}")
                break

            ticks += 1
            if self.update() is not None and progress_callback:
                progress_callback(self.generation, self.stats_history[-1])

        return self.stats_history[start:]

    def showcase_agents(self, count: int) -> List[Agent]:
        """
        Fresh games all played by the best network found so far.

        Raises:
            ValueError: If no generation has produced a best network yet.
        """
        if self.best_net is None:
            raise ValueError("No best network yet, run at least one generation")
        return [
            Agent.with_network(self.config, self.best_net, self._rng)
            for _ in range(count)
        ]

    def _collect_stats(self) -> GenerationStats:
        agents = list(self.population.agents)
        scores = [agent.score for agent in agents]
        fitnesses = [agent.fitness() for agent in agents]

        return GenerationStats(
            generation=self.generation + 1,
            best_fitness=max(fitnesses, default=0.0),
            mean_score=sum(scores) / len(scores) if scores else 0.0,
            num_ticks=self._ticks,
        )

    def _end_generation(
        self,
        summary: GenerationSummary,
        stats: GenerationStats,
    ) -> None:
        self.generation += 1
        self._ticks = 0

        if summary.max_score > self.best_score:
            self.best_score = summary.max_score
            self.best_net = summary.best_net

        stats.max_score = summary.max_score
        stats.all_time_max_score = self.best_score
        stats.time_elapsed_secs = summary.time_elapsed_secs
        self.stats_history.append(stats)

        sim_minutes = (self._clock() - self._sim_start_ts) / 60.0
        logger.info(
            f"Gen: {self.generation}, Max Score: {self.best_score}, "
            f"Gen Max: {summary.max_score}, Sim Ts: {sim_minutes:.2f}m"
        )
