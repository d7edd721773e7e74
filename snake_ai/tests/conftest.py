"""
Pytest fixtures for snake_ai tests.

Provides fixtures for:
- Default and small configurations
- Seeded random generators
- A controllable clock for stagnation tests
"""
import pytest
import torch

from snake_ai.config import SimulationConfig
from snake_ai.rng import make_rng

from snake_ai.tests.factories import FakeClock


@pytest.fixture
def config() -> SimulationConfig:
    """Default 25x25 configuration."""
    return SimulationConfig()


@pytest.fixture
def small_config() -> SimulationConfig:
    """Configuration with a small island for fast breeding tests."""
    return SimulationConfig(agents_per_island=20)


@pytest.fixture
def rng() -> torch.Generator:
    """Seeded random generator."""
    return make_rng(seed=1234)


@pytest.fixture
def clock() -> FakeClock:
    """Clock that only moves when advanced."""
    return FakeClock()
