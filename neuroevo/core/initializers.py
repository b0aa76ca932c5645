"""
Weight initialization strategies.

Initializers only ever draw from the `random_fn` they are handed (a network's
own seeded Random), so two networks built from the same config are identical.
"""

import math
from typing import Callable, Dict

import numpy as np

from ..errors import ConfigurationError
from .random import gaussian_deviate

RandomFn = Callable[[], float]


class UniformInitializer:
    """Uniform weights and biases in [min_weight, max_weight)."""

    def __init__(self, min_weight: float = -1.0, max_weight: float = 1.0):
        if min_weight >= max_weight:
            raise ConfigurationError(
                f"Weight range min must be less than max, got ({min_weight}, {max_weight})"
            )
        self.min_weight = min_weight
        self.max_weight = max_weight

    def _draw(self, random_fn: RandomFn) -> float:
        return self.min_weight + random_fn() * (self.max_weight - self.min_weight)

    def initialize_weights(self, fan_in: int, fan_out: int, random_fn: RandomFn) -> np.ndarray:
        # Row-major draw order
        weights = np.empty((fan_in, fan_out))
        for i in range(fan_in):
            for j in range(fan_out):
                weights[i, j] = self._draw(random_fn)
        return weights

    def initialize_biases(self, size: int, random_fn: RandomFn) -> np.ndarray:
        return np.array([self._draw(random_fn) for _ in range(size)], dtype=float)


class XavierInitializer:
    """Glorot uniform weights in +-sqrt(6 / (fan_in + fan_out)), zero biases."""

    def initialize_weights(self, fan_in: int, fan_out: int, random_fn: RandomFn) -> np.ndarray:
        limit = math.sqrt(6.0 / (fan_in + fan_out))
        weights = np.empty((fan_in, fan_out))
        for i in range(fan_in):
            for j in range(fan_out):
                weights[i, j] = (random_fn() * 2 - 1) * limit
        return weights

    def initialize_biases(self, size: int, random_fn: RandomFn) -> np.ndarray:
        return np.zeros(size)


class HeInitializer:
    """He normal weights with std sqrt(2 / fan_in), zero biases."""

    def initialize_weights(self, fan_in: int, fan_out: int, random_fn: RandomFn) -> np.ndarray:
        std = math.sqrt(2.0 / fan_in)
        weights = np.empty((fan_in, fan_out))
        for i in range(fan_in):
            for j in range(fan_out):
                weights[i, j] = gaussian_deviate(random_fn, 0.0, std)
        return weights

    def initialize_biases(self, size: int, random_fn: RandomFn) -> np.ndarray:
        return np.zeros(size)


INITIALIZERS: Dict[str, Callable[..., object]] = {
    'uniform': UniformInitializer,
    'xavier': lambda min_weight, max_weight: XavierInitializer(),
    'he': lambda min_weight, max_weight: HeInitializer(),
}


def create_initializer(name: str, min_weight: float = -1.0, max_weight: float = 1.0):
    """Build an initializer by name. Only 'uniform' uses the weight range."""
    if name not in INITIALIZERS:
        available = ', '.join(INITIALIZERS.keys())
        raise ConfigurationError(f"Unknown initializer '{name}'. Available: {available}")
    return INITIALIZERS[name](min_weight, max_weight)
