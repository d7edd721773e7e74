"""
Selection helpers for island breeding.

- A NaN-tolerant total-order comparator for ranking agents by fitness
- Fitness-proportional sampling ("gene pool") for picking crossover parents

Fitness values can be infinite or NaN (the fitness formula overflows
32-bit floats for long snakes), so ranking never relies on raw ``<``
alone and the gene pool ignores non-finite entries.
"""
import functools
import math
from typing import Callable, List, Optional, Sequence, TypeVar

import torch

from ..rng import make_rng

T = TypeVar('T')


def compare_fitness(a: float, b: float) -> int:
    """
    Compare two fitness values.

    Incomparable pairs (either side NaN) compare as equal.

    Returns:
        -1 if a < b, 1 if a > b, otherwise 0.
    """
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def sort_by_fitness(
    items: Sequence[T],
    fitness: Callable[[T], float],
) -> List[T]:
    """
    Sort items by fitness, fittest first.

    The sort is stable, so items of equal (or incomparable) fitness keep
    their original relative order.

    Args:
        items: Items to rank.
        fitness: Fitness of an item.

    Returns:
        New list sorted in descending fitness order.
    """
    scored = [(fitness(item), index) for index, item in enumerate(items)]

    def _compare(left, right):
        return compare_fitness(right[0], left[0])

    scored.sort(key=functools.cmp_to_key(_compare))
    return [items[index] for _, index in scored]


class GenePool:
    """
    Fitness-proportional sampling distribution over a cohort.

    Each finite fitness gets weight ``(fitness / max_fitness) * 100``;
    non-finite fitness values are excluded. Sampling returns indices
    into the original cohort.

    Example:
        pool = GenePool.build([agent.fitness() for agent in agents])
        if pool is not None:
            parent_a, parent_b = pool.sample(2, rng)
    """

    def __init__(self, indices: List[int], weights: torch.Tensor):
        self.indices = indices
        self.weights = weights

    @classmethod
    def build(cls, fitnesses: Sequence[float]) -> Optional['GenePool']:
        """
        Build a gene pool from cohort fitness values.

        Args:
            fitnesses: Fitness of every member of the cohort.

        Returns:
            The gene pool, or None if no member has a usable weight.
        """
        max_fitness = 0.0
        for fitness in fitnesses:
            if fitness > max_fitness:
                max_fitness = fitness

        if max_fitness <= 0.0:
            return None

        indices = []
        weights = []
        for index, fitness in enumerate(fitnesses):
            if not math.isfinite(fitness):
                continue
            weight = (fitness / max_fitness) * 100.0
            if weight < 0.0:
                return None
            indices.append(index)
            weights.append(weight)

        total = sum(weights)
        if not indices or not math.isfinite(total) or total <= 0.0:
            return None

        return cls(indices, torch.tensor(weights, dtype=torch.float64))

    def __len__(self) -> int:
        return len(self.indices)

    def sample(
        self,
        count: int,
        rng: Optional[torch.Generator] = None,
    ) -> List[int]:
        """
        Draw cohort indices with replacement, proportionally to weight.

        Args:
            count: Number of indices to draw.
            rng: Random generator.

        Returns:
            List of ``count`` indices into the cohort.
        """
        if count <= 0:
            return []
        if rng is None:
            rng = make_rng()

        picks = torch.multinomial(
            self.weights, count, replacement=True, generator=rng
        )
        return [self.indices[i] for i in picks.tolist()]
