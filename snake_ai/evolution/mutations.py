"""
Weight mutation operator for neuroevolution.

Topology is fixed, so mutation only perturbs weights. Each weight is
picked independently with probability ``mutation_rate`` and shifted by
a uniform amount in ``[-variation, variation]``. Weights are kept in
``[-1, 1]``: a weight pushed out of range is replaced by a fresh
uniform value rather than clamped.
"""
from typing import Optional, TYPE_CHECKING

import torch

from ..networks.feedforward import WEIGHT_HIGH, WEIGHT_LOW
from ..rng import bernoulli_mask, make_rng, uniform

if TYPE_CHECKING:
    from ..networks import NeuralNetwork


def bounded_perturb(
    values: torch.Tensor,
    mask: torch.Tensor,
    variation: float,
    rng: torch.Generator,
    low: float = WEIGHT_LOW,
    high: float = WEIGHT_HIGH,
) -> torch.Tensor:
    """
    Perturb the masked values; resample anything left outside the bounds.

    Args:
        values: Values to perturb.
        mask: Boolean tensor selecting which values get perturbed.
        variation: Half-width of the uniform perturbation.
        rng: Random generator.
        low: Lower bound (inclusive).
        high: Upper bound (inclusive).

    Returns:
        New tensor with every element in [low, high].
    """
    noise = uniform(rng, values.shape, -variation, variation)
    perturbed = torch.where(mask, values + noise, values)

    out_of_bounds = (perturbed > high) | (perturbed < low)
    resampled = uniform(rng, values.shape, low, high)
    return torch.where(out_of_bounds, resampled, perturbed)


class WeightMutator:
    """
    Weight perturbation mutation operator.

    Attributes:
        mutation_rate: Probability of mutating each weight.
        variation: Maximum absolute perturbation of a mutated weight.

    Example:
        mutator = WeightMutator(mutation_rate=0.1, variation=0.1)
        child = mutator.mutate(parent, rng)
    """

    def __init__(
        self,
        mutation_rate: float = 0.1,
        variation: float = 0.1,
    ):
        """
        Initialize the weight mutator.

        Args:
            mutation_rate: Probability of mutating each weight (0-1).
            variation: Perturbations are drawn from [-variation, variation].
        """
        self.mutation_rate = mutation_rate
        self.variation = variation

    def mutate(
        self,
        network: 'NeuralNetwork',
        rng: Optional[torch.Generator] = None,
        in_place: bool = False,
    ) -> 'NeuralNetwork':
        """
        Apply weight perturbation to a network.

        Args:
            network: The network to mutate.
            rng: Random generator.
            in_place: If True, overwrite the network's weights.
                     If False, return a mutated copy.

        Returns:
            Mutated network (same object if in_place=True).
        """
        if rng is None:
            rng = make_rng()
        if not in_place:
            network = network.clone()

        with torch.no_grad():
            for i, weights in enumerate(network.layers):
                mask = bernoulli_mask(rng, weights.shape, self.mutation_rate)
                network.layers[i] = bounded_perturb(weights, mask, self.variation, rng)

        return network
