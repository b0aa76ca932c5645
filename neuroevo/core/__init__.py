"""Core numeric building blocks: deterministic randomness and controller networks."""

from .random import Random, RandomState
from .activations import ACTIVATIONS, get_activation
from .initializers import create_initializer
from .network import LayerConfig, NetworkConfig, NeuralNetwork

__all__ = [
    'Random',
    'RandomState',
    'ACTIVATIONS',
    'get_activation',
    'create_initializer',
    'LayerConfig',
    'NetworkConfig',
    'NeuralNetwork',
]
