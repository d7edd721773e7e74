"""
Neuroevolution module for evolving snake-playing networks.

Implements an island-model genetic algorithm over fixed-topology
networks:
- Weight mutation with out-of-range rerolls
- Uniform per-weight crossover
- NaN-tolerant fitness ranking and fitness-proportional parent sampling
- Islands that breed independently and track stagnation
- A population that synchronises generations and migrates elites

Example usage:
    from snake_ai import SimulationConfig, make_rng
    from snake_ai.evolution import Population

    config = SimulationConfig(agents_per_island=500, num_islands=4)
    pop = Population(config, rng=make_rng(seed=42))

    for gen in range(50):
        while pop.tick():
            pass
        summary = pop.reset()
        print(f"Gen {gen}: max score={summary.max_score}")
"""
from .mutations import WeightMutator, bounded_perturb
from .crossover import WeightCrossover
from .selection import GenePool, compare_fitness, sort_by_fitness
from .island import Island, BreedingStats, compute_quotas
from .population import Population, GenerationSummary

__all__ = [
    # Mutations
    'WeightMutator',
    'bounded_perturb',

    # Crossover
    'WeightCrossover',

    # Selection
    'GenePool',
    'compare_fitness',
    'sort_by_fitness',

    # Islands and population
    'Island',
    'BreedingStats',
    'compute_quotas',
    'Population',
    'GenerationSummary',
]
