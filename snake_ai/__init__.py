"""
Neuroevolution of snake-playing agents.

Small fixed-topology feed-forward networks are evolved with a genetic
algorithm to steer agents around a grid-based snake game. Agents are
grouped into islands that breed independently and exchange their best
networks when they stagnate.

Example usage:
    from snake_ai import SimulationConfig, Simulation, make_rng

    config = SimulationConfig(agents_per_island=200, num_islands=2)
    sim = Simulation(config, rng=make_rng(seed=7))
    sim.run(generations=10)
    print(sim.best_score)
"""
from .config import SimulationConfig
from .rng import make_rng
from .networks import NeuralNetwork
from .game import Agent, Direction, Point
from .evolution import Island, Population, GenerationSummary
from .simulation import Simulation, GenerationStats

__all__ = [
    'SimulationConfig',
    'make_rng',
    'NeuralNetwork',
    'Agent',
    'Direction',
    'Point',
    'Island',
    'Population',
    'GenerationSummary',
    'Simulation',
    'GenerationStats',
]
