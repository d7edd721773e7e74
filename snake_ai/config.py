"""
Configuration for a neuroevolution run.

All values are read once at start-up and never change while the
simulation runs. Defaults reproduce the classic setup: a 25x25 grid,
one island of 1000 agents and a 12-8-4 network.
"""
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

# Four directions, three features each (wall distance, food seen, body distance)
VISION_SIZE = 12
NUM_ACTIONS = 4


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for a neuroevolution run."""

    # Game
    grid_width: int = 25
    grid_height: int = 25
    base_step_limit: int = 100

    # Islands
    agents_per_island: int = 1000
    num_islands: int = 1
    rejuvenation_fraction: float = 0.1
    local_max_wait_secs: float = 90.0

    # Selection quotas (fractions of the previous cohort)
    retained_fraction: float = 0.01
    children_fraction: float = 0.5
    random_fraction: float = 0.2
    retained_mutated_fraction: float = 0.29

    # Network
    mutation_rate: float = 0.1
    mutation_variation: float = 0.1
    layer_sizes: Tuple[int, ...] = (VISION_SIZE, 8, NUM_ACTIONS)

    def __post_init__(self):
        # Frozen dataclasses need object.__setattr__ to normalise fields
        object.__setattr__(self, 'layer_sizes', tuple(self.layer_sizes))
        self._validate()

    def _validate(self) -> None:
        """Raise ValueError if the configuration cannot drive a simulation."""
        if len(self.layer_sizes) < 2:
            raise ValueError("Need at least 2 layers")
        if any(size < 1 for size in self.layer_sizes):
            raise ValueError("Empty layers not allowed")
        if self.layer_sizes[0] != VISION_SIZE:
            raise ValueError(
                f"Input layer must have {VISION_SIZE} nodes, got {self.layer_sizes[0]}"
            )
        if self.layer_sizes[-1] != NUM_ACTIONS:
            raise ValueError(
                f"Output layer must have {NUM_ACTIONS} nodes, got {self.layer_sizes[-1]}"
            )

        # Smallest grid with at least one playable cell inside the walls
        if self.grid_width < 3 or self.grid_height < 3:
            raise ValueError("Grid must be at least 3x3")
        if self.base_step_limit < 1:
            raise ValueError("base_step_limit must be positive")
        if self.agents_per_island < 1:
            raise ValueError("agents_per_island must be positive")
        if self.num_islands < 1:
            raise ValueError("num_islands must be positive")
        if self.local_max_wait_secs < 0:
            raise ValueError("local_max_wait_secs must not be negative")
        if self.mutation_variation < 0:
            raise ValueError("mutation_variation must not be negative")

        for name in (
            'rejuvenation_fraction',
            'retained_fraction',
            'children_fraction',
            'random_fraction',
            'retained_mutated_fraction',
            'mutation_rate',
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

        if sum(self.selection_fractions) > 1.0 + 1e-9:
            raise ValueError("Selection fractions must not sum above 1")

    @property
    def selection_fractions(self) -> Tuple[float, float, float, float]:
        """(retained, children, random, retained_mutated) fractions."""
        return (
            self.retained_fraction,
            self.children_fraction,
            self.random_fraction,
            self.retained_mutated_fraction,
        )

    @property
    def total_agents(self) -> int:
        return self.agents_per_island * self.num_islands

    @property
    def spawn_position(self) -> Tuple[int, int]:
        return self.grid_width // 2, self.grid_height // 2

    def replace(self, **changes: Any) -> 'SimulationConfig':
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        data['layer_sizes'] = list(self.layer_sizes)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SimulationConfig':
        """
        Build a configuration from a plain mapping.

        Args:
            data: Field names to values. Missing fields keep their defaults.

        Returns:
            A validated SimulationConfig.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**dict(data))
