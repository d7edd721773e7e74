"""
Tests for population management.

Tests Population for:
- Synchronised ticking across islands
- Generation reset and summaries
- Cross-island migration of best networks
"""
import dataclasses

import pytest

from snake_ai.config import SimulationConfig
from snake_ai.evolution import GenerationSummary, Island, Population
from snake_ai.game import Point
from snake_ai.tests.factories import place


@pytest.fixture
def multi_config() -> SimulationConfig:
    return SimulationConfig(agents_per_island=10, num_islands=3)


def starve_all(population: Population) -> None:
    for agent in population.agents:
        agent.food = Point(1, 1)


class TestTick:
    """Tests for Population.tick."""

    def test_counts_alive_agents(self, multi_config, rng, clock):
        """Test that tick returns the number of running agents."""
        pop = Population(multi_config, rng, clock)

        alive = pop.tick()

        assert alive == sum(island.num_alive for island in pop.islands)
        assert 0 <= alive <= 30

    def test_zero_when_every_agent_finished(self, rng, clock):
        """Test that tick returns zero once every game is over."""
        config = SimulationConfig(agents_per_island=5, num_islands=2, base_step_limit=1)
        pop = Population(config, rng, clock)
        starve_all(pop)

        assert pop.tick() == 0

    def test_agents_spans_islands(self, multi_config, rng, clock):
        """Test that agents iterates over every island."""
        pop = Population(multi_config, rng, clock)

        assert len(pop.islands) == 3
        assert len(list(pop.agents)) == 30


class TestSummary:
    """Tests for Population.summary."""

    def test_reports_best_island(self, multi_config, rng, clock):
        """Test that summary reports the best island's score and elapsed time."""
        pop = Population(multi_config, rng, clock)
        champion = pop.islands[1].agents[4]
        place(champion, [Point(5, 5), Point(6, 5), Point(7, 5)])
        clock.advance(12.5)

        summary = pop.summary()

        assert summary.max_score == 3
        assert summary.time_elapsed_secs == pytest.approx(12.5)
        assert summary.best_net is not champion.network
        assert summary.best_net.layer_sizes == multi_config.layer_sizes

    def test_summary_is_a_value(self, multi_config, rng, clock):
        """Test that a summary cannot be modified."""
        summary = Population(multi_config, rng, clock).summary()

        with pytest.raises(dataclasses.FrozenInstanceError):
            summary.max_score = 99


class TestReset:
    """Tests for Population.reset."""

    def test_returns_summary_of_finished_generation(self, multi_config, rng, clock):
        """Test that reset returns the summary of the generation that ended."""
        pop = Population(multi_config, rng, clock)
        champion = pop.islands[0].agents[0]
        place(champion, [Point(5, 5), Point(6, 5), Point(7, 5), Point(8, 5)])
        clock.advance(3.0)

        summary = pop.reset()

        assert isinstance(summary, GenerationSummary)
        assert summary.max_score == 4
        assert summary.time_elapsed_secs == pytest.approx(3.0)

    def test_restarts_generation_timer(self, multi_config, rng, clock):
        """Test that reset restarts the generation clock."""
        pop = Population(multi_config, rng, clock)
        clock.advance(3.0)

        pop.reset()

        assert pop.summary().time_elapsed_secs == 0.0

    def test_every_island_breeds(self, multi_config, rng, clock):
        """Test that reset breeds a new cohort on every island."""
        pop = Population(multi_config, rng, clock)
        old_agents = list(pop.agents)

        pop.reset()

        new_agents = list(pop.agents)
        assert len(new_agents) == 30
        assert all(agent not in old_agents for agent in new_agents)
        assert all(island.last_breeding is not None for island in pop.islands)

    def test_stagnant_islands_receive_migrants(self, multi_config, rng, clock, monkeypatch):
        """Test that every stagnant island gets a migrant network."""
        pop = Population(multi_config, rng, clock)
        received = []
        monkeypatch.setattr(
            Island, 'inject', lambda self, network: received.append((self, network))
        )
        clock.advance(multi_config.local_max_wait_secs + 1)

        pop.reset()

        assert [island for island, _ in received] == pop.islands
        for _, network in received:
            assert network.layer_sizes == multi_config.layer_sizes

    def test_migrants_are_island_best_networks(self, multi_config, rng, clock, monkeypatch):
        """Test that migrants are best networks of the islands."""
        pop = Population(multi_config, rng, clock)
        best_nets = []
        original_reset = Island.reset

        def recording_reset(self):
            net = original_reset(self)
            best_nets.append(net)
            return net

        received = []
        monkeypatch.setattr(Island, 'reset', recording_reset)
        monkeypatch.setattr(
            Island, 'inject', lambda self, network: received.append(network)
        )
        clock.advance(multi_config.local_max_wait_secs + 1)

        pop.reset()

        assert len(received) == 3
        assert all(any(net is best for best in best_nets) for net in received)

    def test_active_islands_keep_their_cohort(self, multi_config, rng, clock, monkeypatch):
        """Test that improving islands receive no migrants."""
        pop = Population(multi_config, rng, clock)
        received = []
        monkeypatch.setattr(
            Island, 'inject', lambda self, network: received.append(self)
        )

        pop.reset()

        assert received == []

    def test_single_island_never_migrates(self, rng, clock, monkeypatch):
        """Test that a lone island is never reseeded."""
        config = SimulationConfig(agents_per_island=10, num_islands=1)
        pop = Population(config, rng, clock)
        received = []
        monkeypatch.setattr(
            Island, 'inject', lambda self, network: received.append(self)
        )
        clock.advance(config.local_max_wait_secs + 1)

        pop.reset()

        assert received == []

    def test_migration_restarts_stagnation(self, multi_config, rng, clock):
        """Test that migration restarts stagnation tracking."""
        pop = Population(multi_config, rng, clock)
        clock.advance(multi_config.local_max_wait_secs + 1)

        pop.reset()

        assert not any(island.is_local_maximum() for island in pop.islands)


class TestTopAgents:
    """Tests for Population.top_agents."""

    def test_sorted_by_fitness(self, multi_config, rng, clock):
        """Test that top_agents returns the fittest agents first."""
        pop = Population(multi_config, rng, clock)
        champion = pop.islands[2].agents[9]
        place(champion, [Point(5, 5), Point(6, 5)])
        champion.num_steps = 20

        top = pop.top_agents(5)

        assert len(top) == 5
        assert top[0] is champion
