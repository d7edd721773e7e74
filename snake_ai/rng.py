"""
Random number helpers built on a single torch.Generator.

Every stochastic step of a run (weight init, crossover, mutation, food
placement, headings, gene-pool sampling, migrant choice) draws from the
generator handed to it, so a seeded generator makes a run reproducible.
"""
from typing import Optional, Sequence, Union

import torch

Shape = Union[int, Sequence[int]]


def make_rng(seed: Optional[int] = None) -> torch.Generator:
    """
    Create a random generator.

    Args:
        seed: Fixed seed for reproducible runs. If None, the generator
              is seeded non-deterministically.
    """
    rng = torch.Generator()
    if seed is None:
        rng.seed()
    else:
        rng.manual_seed(seed)
    return rng


def _as_size(shape: Shape) -> Sequence[int]:
    if isinstance(shape, int):
        return (shape,)
    return tuple(shape)


def uniform(
    rng: torch.Generator,
    shape: Shape,
    low: float,
    high: float,
) -> torch.Tensor:
    """Float64 tensor of independent uniform values in [low, high)."""
    values = torch.rand(_as_size(shape), generator=rng, dtype=torch.float64)
    return low + (high - low) * values


def randint(rng: torch.Generator, low: int, high: int) -> int:
    """Single integer drawn uniformly from [low, high)."""
    return int(torch.randint(low, high, (1,), generator=rng).item())


def coin_flips(rng: torch.Generator, shape: Shape) -> torch.Tensor:
    """Boolean tensor where every element is True with probability 0.5."""
    return torch.rand(_as_size(shape), generator=rng) < 0.5


def bernoulli_mask(rng: torch.Generator, shape: Shape, p: float) -> torch.Tensor:
    """Boolean tensor where every element is True with probability p."""
    return torch.rand(_as_size(shape), generator=rng, dtype=torch.float64) < p
