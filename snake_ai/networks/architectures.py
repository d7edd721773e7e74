"""
Preset layer layouts for snake-playing networks.

The input and output layers are fixed by the game: twelve vision
features in, one score per heading out. Only the hidden layers vary.
"""
from typing import Sequence, Tuple

from ..config import NUM_ACTIONS, VISION_SIZE


def snake_architecture(hidden_sizes: Sequence[int] = (8,)) -> Tuple[int, ...]:
    """
    Layer sizes for a snake controller.

    Architecture:
        Vision (12) -> Hidden (8, sigmoid) -> Headings (4, sigmoid)

    Args:
        hidden_sizes: Node counts of the hidden layers. An empty sequence
                      connects the vision features straight to the output.

    Returns:
        Layer sizes, input layer first.
    """
    return (VISION_SIZE, *hidden_sizes, NUM_ACTIONS)
