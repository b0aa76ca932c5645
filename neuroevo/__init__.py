"""
neuroevo - genetic algorithms for neural-network-controlled agents.

Evolves populations of fixed-topology controller networks with selection,
crossover, mutation and elitism, driven by a caller-supplied fitness function.
Runs are reproducible from a single seed.
"""

from .errors import NeuroevoError, ConfigurationError, ShapeError, DomainError
from .core import Random, RandomState, LayerConfig, NetworkConfig, NeuralNetwork
from .evolution import (
    GeneticAlgorithm,
    GeneticAlgorithmConfig,
    SelectionConfig,
    CrossoverConfig,
    MutationConfig,
    SelectionMethod,
    CrossoverMethod,
    MutationMethod,
    Individual,
    PopulationStats,
)

__version__ = '0.1.0'

__all__ = [
    'NeuroevoError',
    'ConfigurationError',
    'ShapeError',
    'DomainError',
    'Random',
    'RandomState',
    'LayerConfig',
    'NetworkConfig',
    'NeuralNetwork',
    'GeneticAlgorithm',
    'GeneticAlgorithmConfig',
    'SelectionConfig',
    'CrossoverConfig',
    'MutationConfig',
    'SelectionMethod',
    'CrossoverMethod',
    'MutationMethod',
    'Individual',
    'PopulationStats',
]
