"""
Activation functions for evolved controller networks.

Every function works element-wise on numpy arrays and is deterministic.
Sigmoid clamps its argument before exponentiation so large pre-activations
never overflow.
"""

import numpy as np
from typing import Callable, Dict, List

from ..errors import ConfigurationError


def linear(x: np.ndarray) -> np.ndarray:
    """Identity activation - no nonlinearity."""
    return x


def relu(x: np.ndarray) -> np.ndarray:
    """Rectified Linear Unit: max(0, x)."""
    return np.maximum(0, x)


def sigmoid(x: np.ndarray) -> np.ndarray:
    """Sigmoid - smooth, bounded (0, 1)."""
    # Clip to avoid overflow
    x = np.clip(x, -500, 500)
    return 1 / (1 + np.exp(-x))


def tanh(x: np.ndarray) -> np.ndarray:
    """Hyperbolic tangent - smooth, bounded (-1, 1)."""
    return np.tanh(x)


class Activation:
    """Named element-wise activation."""

    def __init__(self, name: str, func: Callable[[np.ndarray], np.ndarray]):
        self.name = name
        self.func = func

    def __call__(self, x: np.ndarray) -> np.ndarray:
        return self.func(x)

    def __repr__(self):
        return f"Activation({self.name})"


ACTIVATIONS: Dict[str, Activation] = {
    'linear': Activation('linear', linear),
    'relu': Activation('relu', relu),
    'sigmoid': Activation('sigmoid', sigmoid),
    'tanh': Activation('tanh', tanh),
}


def get_activation(name: str) -> Activation:
    """Get an activation function by name."""
    if name not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ConfigurationError(f"Unknown activation '{name}'. Available: {available}")
    return ACTIVATIONS[name]


def list_activations() -> List[str]:
    return list(ACTIVATIONS.keys())
