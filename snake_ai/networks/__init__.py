"""
Neural network infrastructure for snake agents.

This module provides:
- NeuralNetwork: fixed-topology feed-forward network with a forward
  pass that exposes every layer's activations
- Preset layer layouts for the snake game
"""
from .feedforward import NeuralNetwork, validate_layer_sizes, WEIGHT_LOW, WEIGHT_HIGH
from .architectures import snake_architecture

__all__ = [
    'NeuralNetwork',
    'validate_layer_sizes',
    'WEIGHT_LOW',
    'WEIGHT_HIGH',
    'snake_architecture',
]
