"""
Tests for the headless simulation driver.

Tests Simulation for:
- Generation boundary detection
- Statistics history and best-network tracking
- Reproducibility with seeded generators
"""
import logging

import pytest
import torch

from snake_ai.config import SimulationConfig
from snake_ai.rng import make_rng
from snake_ai.simulation import GenerationStats, Simulation
from snake_ai.tests.factories import FakeClock


@pytest.fixture
def tiny_config() -> SimulationConfig:
    """Small grid, few agents and a short step limit."""
    return SimulationConfig(
        grid_width=10,
        grid_height=10,
        agents_per_island=10,
        num_islands=2,
        base_step_limit=5,
    )


class TestUpdate:
    """Tests for Simulation.update."""

    def test_none_while_agents_run(self, tiny_config, rng, clock):
        """Test that update returns None mid-generation."""
        sim = Simulation(tiny_config, rng, clock)

        # Nobody can starve or hit a wall in one tick from the centre
        assert sim.update() is None
        assert sim.generation == 0

    def test_summary_at_generation_boundary(self, tiny_config, rng, clock):
        """Test that update returns a summary when a generation ends."""
        sim = Simulation(tiny_config, rng, clock)

        summary = None
        while summary is None:
            summary = sim.update()

        assert sim.generation == 1
        assert summary.max_score >= 1
        assert len(sim.stats_history) == 1


class TestRun:
    """Tests for Simulation.run."""

    def test_runs_requested_generations(self, tiny_config, rng, clock):
        """Test that run completes the requested generations."""
        sim = Simulation(tiny_config, rng, clock)

        history = sim.run(3)

        assert sim.generation == 3
        assert len(history) == 3
        assert [stats.generation for stats in history] == [1, 2, 3]
        assert all(isinstance(stats, GenerationStats) for stats in history)

    def test_tracks_all_time_best(self, tiny_config, rng, clock):
        """Test that the all-time best score and network are kept."""
        sim = Simulation(tiny_config, rng, clock)

        history = sim.run(3)

        assert sim.best_score == max(stats.max_score for stats in history)
        assert history[-1].all_time_max_score == sim.best_score
        assert sim.best_net is not None

    def test_progress_callback(self, tiny_config, rng, clock):
        """Test that the callback fires after each generation."""
        sim = Simulation(tiny_config, rng, clock)
        calls = []

        sim.run(2, progress_callback=lambda gen, stats: calls.append((gen, stats)))

        assert [gen for gen, _ in calls] == [1, 2]
        assert calls[-1][1] is sim.stats_history[-1]

    def test_max_ticks_ends_run_early(self, rng, clock):
        """Test that a tick cap stops the run before the generation ends."""
        config = SimulationConfig(agents_per_island=5)
        sim = Simulation(config, rng, clock)

        # From the centre of a 25x25 grid no snake can finish in 10 ticks
        history = sim.run(1, max_ticks=10)

        assert history == []
        assert sim.generation == 0
        assert sim.population.tick() > 0

    def test_max_ticks_zero_does_nothing(self, tiny_config, rng, clock):
        """Test that a zero tick cap leaves the simulation untouched."""
        sim = Simulation(tiny_config, rng, clock)

        assert sim.run(2, max_ticks=0) == []
        assert sim.generation == 0

    def test_stats_contents(self, tiny_config, rng, clock):
        """Test the recorded statistics of a generation."""
        sim = Simulation(tiny_config, rng, clock)

        stats = sim.run(1)[0]

        assert stats.num_ticks >= 1
        assert stats.mean_score >= 1.0
        assert stats.best_fitness >= 1.0

    def test_seeded_runs_match(self, tiny_config):
        """Test that equal seeds give identical runs."""
        first = Simulation(tiny_config, make_rng(seed=21), FakeClock()).run(3)
        second = Simulation(tiny_config, make_rng(seed=21), FakeClock()).run(3)

        assert [(s.max_score, s.mean_score, s.num_ticks) for s in first] == [
            (s.max_score, s.mean_score, s.num_ticks) for s in second
        ]

    def test_logs_generation_line(self, tiny_config, rng, clock, caplog):
        """Test the per-generation log line."""
        sim = Simulation(tiny_config, rng, clock)

        with caplog.at_level(logging.INFO, logger='snake_ai.simulation'):
            sim.run(1)

        assert 'Gen: 1, Max Score:' in caplog.text


class TestShowcase:
    """Tests for Simulation.showcase_agents."""

    def test_requires_a_best_network(self, tiny_config, rng, clock):
        """Test that showcasing needs a finished generation."""
        sim = Simulation(tiny_config, rng, clock)

        with pytest.raises(ValueError):
            sim.showcase_agents(3)

    def test_agents_play_best_network(self, tiny_config, rng, clock):
        """Test that showcase agents carry copies of the best network."""
        sim = Simulation(tiny_config, rng, clock)
        sim.run(1)

        agents = sim.showcase_agents(4)

        assert len(agents) == 4
        for agent in agents:
            assert agent.network is not sim.best_net
            for a, b in zip(agent.network.layers, sim.best_net.layers):
                assert torch.equal(a, b)
