"""
Crossover operator for combining two parent networks.

Parents always share the same fixed topology, so weights line up one
to one. The child takes every weight from one parent or the other,
chosen by an independent coin flip; weights are never blended.
"""
from typing import Optional, TYPE_CHECKING

import torch

from ..rng import coin_flips, make_rng

if TYPE_CHECKING:
    from ..networks import NeuralNetwork


class WeightCrossover:
    """
    Uniform weight-level crossover for networks with identical topology.

    Example:
        crossover = WeightCrossover()
        child = crossover.crossover(parent_a, parent_b, rng)
    """

    def crossover(
        self,
        parent_a: 'NeuralNetwork',
        parent_b: 'NeuralNetwork',
        rng: Optional[torch.Generator] = None,
    ) -> 'NeuralNetwork':
        """
        Create offspring from two parent networks.

        Args:
            parent_a: First parent network.
            parent_b: Second parent network.
            rng: Random generator for the per-weight coin flips.

        Returns:
            New network; neither parent is modified.

        Raises:
            ValueError: If parents have different topologies.
        """
        from ..networks import NeuralNetwork

        if not parent_a.same_topology(parent_b):
            raise ValueError("Parents must have identical architectures")
        if rng is None:
            rng = make_rng()

        layers = []
        with torch.no_grad():
            for weights_a, weights_b in zip(parent_a.layers, parent_b.layers):
                mask = coin_flips(rng, weights_a.shape)
                layers.append(torch.where(mask, weights_a, weights_b))

        return NeuralNetwork.from_layers(layers)
