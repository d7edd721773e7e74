"""
Fixed-topology feed-forward network for neuroevolution.

The network cannot be trained by gradient descent; it only changes
through the crossover and mutation operators in ``snake_ai.evolution``.

Each layer is a float64 weight matrix of shape ``(out, in + 1)``.
Column 0 holds the bias of every output node, the remaining columns
the weights applied to the previous layer's activations.
"""
from typing import List, Optional, Sequence, Tuple, Union

import torch

from ..rng import make_rng, uniform

WEIGHT_LOW = -1.0
WEIGHT_HIGH = 1.0


def validate_layer_sizes(layer_sizes: Sequence[int]) -> None:
    """Raise ValueError for a topology a network cannot be built from."""
    if len(layer_sizes) < 2:
        raise ValueError("Need at least 2 layers")
    for size in layer_sizes:
        if size < 1:
            raise ValueError("Empty layers not allowed")


class NeuralNetwork:
    """
    Feed-forward network with sigmoid activations on every layer.

    Attributes:
        layers: One ``(out, in + 1)`` weight matrix per non-input layer.

    Example:
        rng = make_rng(seed=1)
        net = NeuralNetwork((12, 8, 4), rng)
        activations = net.predict([0.0] * 12)
        outputs = activations[-1]  # 4 values in (0, 1)
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        rng: Optional[torch.Generator] = None,
    ):
        """
        Build a network with uniformly random weights in [-1, 1].

        Args:
            layer_sizes: Node count per layer, input layer first.
            rng: Random generator for the initial weights.

        Raises:
            ValueError: If fewer than 2 layers or any empty layer is given.
        """
        validate_layer_sizes(layer_sizes)
        if rng is None:
            rng = make_rng()

        self.layers: List[torch.Tensor] = []
        prev_size = layer_sizes[0]
        for size in layer_sizes[1:]:
            self.layers.append(
                uniform(rng, (size, prev_size + 1), WEIGHT_LOW, WEIGHT_HIGH)
            )
            prev_size = size

    @classmethod
    def from_layers(cls, layers: Sequence[torch.Tensor]) -> 'NeuralNetwork':
        """
        Build a network from explicit weight matrices.

        Args:
            layers: ``(out, in + 1)`` matrices, first hidden layer first.

        Returns:
            A network owning float64 copies of the given matrices.

        Raises:
            ValueError: If the matrices do not chain into a valid topology.
        """
        if not layers:
            raise ValueError("Need at least 2 layers")

        weights = [torch.as_tensor(w, dtype=torch.float64).clone() for w in layers]
        for i, w in enumerate(weights):
            if w.dim() != 2 or w.shape[0] < 1 or w.shape[1] < 2:
                raise ValueError(f"Layer {i} must be a non-empty (out, in + 1) matrix")
            if i > 0 and w.shape[1] != weights[i - 1].shape[0] + 1:
                raise ValueError(
                    f"Layer {i} expects {w.shape[1] - 1} inputs but "
                    f"layer {i - 1} has {weights[i - 1].shape[0]} outputs"
                )

        network = cls.__new__(cls)
        network.layers = weights
        return network

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        sizes = [self.layers[0].shape[1] - 1]
        sizes.extend(w.shape[0] for w in self.layers)
        return tuple(sizes)

    @property
    def input_size(self) -> int:
        return self.layers[0].shape[1] - 1

    @property
    def output_size(self) -> int:
        return self.layers[-1].shape[0]

    def same_topology(self, other: 'NeuralNetwork') -> bool:
        """Check whether two networks have identical layer shapes."""
        if len(self.layers) != len(other.layers):
            return False
        return all(a.shape == b.shape for a, b in zip(self.layers, other.layers))

    def predict(
        self,
        inputs: Union[Sequence[float], torch.Tensor],
    ) -> List[torch.Tensor]:
        """
        Run a forward pass.

        Every node computes ``sigmoid(bias + sum(weight_i * input_i))``.

        Args:
            inputs: Input vector of exactly ``input_size`` values.

        Returns:
            Activation vector of every layer, the raw inputs first and
            the network output last.

        Raises:
            ValueError: If the input length does not match the input layer.
        """
        x = torch.as_tensor(inputs, dtype=torch.float64).flatten()
        if x.shape[0] != self.input_size:
            raise ValueError(
                f"Bad input size, expected {self.input_size} but got {x.shape[0]}"
            )

        activations = [x]
        with torch.no_grad():
            for w in self.layers:
                x = torch.sigmoid(w[:, 0] + w[:, 1:] @ x)
                activations.append(x)

        return activations

    def clone(self) -> 'NeuralNetwork':
        """Create an independent copy of this network."""
        return NeuralNetwork.from_layers(self.layers)

    def merge(
        self,
        other: 'NeuralNetwork',
        rng: Optional[torch.Generator] = None,
    ) -> 'NeuralNetwork':
        """Uniform per-weight crossover with another network of the same topology."""
        from ..evolution.crossover import WeightCrossover

        return WeightCrossover().crossover(self, other, rng)

    def mutate(
        self,
        mutation_rate: float,
        variation: float,
        rng: Optional[torch.Generator] = None,
    ) -> None:
        """Perturb weights in place, rerolling any that leave [-1, 1]."""
        from ..evolution.mutations import WeightMutator

        WeightMutator(mutation_rate=mutation_rate, variation=variation).mutate(
            self, rng, in_place=True
        )

    def num_weights(self) -> int:
        return sum(w.numel() for w in self.layers)

    def __repr__(self) -> str:
        sizes = '-'.join(str(s) for s in self.layer_sizes)
        return f"NeuralNetwork({sizes})"
