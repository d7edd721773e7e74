"""
Command line entry point for headless evolution runs.

Usage:
    snake-ai [--generations 20] [--islands 2] [--agents 500] [--seed 7]

Runs the simulation without a renderer and logs one line per generation.
"""
import argparse
import logging
from typing import List, Optional

from .config import SimulationConfig
from .networks import snake_architecture
from .rng import make_rng
from .simulation import Simulation

defaults = SimulationConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='snake-ai',
        description='Evolve snake-playing neural networks with an island genetic algorithm',
    )
    parser.add_argument(
        '--generations',
        type=int,
        default=10,
        help='Number of generations to run (default: 10)',
    )
    parser.add_argument(
        '--islands',
        type=int,
        default=defaults.num_islands,
        help=f'Number of islands (default: {defaults.num_islands})',
    )
    parser.add_argument(
        '--agents',
        type=int,
        default=defaults.agents_per_island,
        help=f'Agents per island (default: {defaults.agents_per_island})',
    )
    parser.add_argument(
        '--grid',
        type=int,
        default=defaults.grid_width,
        help=f'Width and height of the grid (default: {defaults.grid_width})',
    )
    parser.add_argument(
        '--hidden',
        type=int,
        nargs='*',
        default=list(defaults.layer_sizes[1:-1]),
        help='Hidden layer sizes (default: 8)',
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for a reproducible run',
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)',
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if args.generations < 1:
        parser.error('--generations must be positive')

    try:
        config = SimulationConfig(
            grid_width=args.grid,
            grid_height=args.grid,
            agents_per_island=args.agents,
            num_islands=args.islands,
            layer_sizes=snake_architecture(args.hidden),
        )
    except ValueError as e:
        parser.error(str(e))

    sim = Simulation(config, rng=make_rng(args.seed))
    sim.run(args.generations)

    print(
        f"Completed {sim.generation} generations, "
        f"best score {sim.best_score}"
    )
    return 0
