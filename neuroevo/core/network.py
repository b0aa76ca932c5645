"""
Feedforward controller networks - the phenotype being evolved.

A NeuralNetwork is a fixed-topology, fully connected stack of dense layers:
- Layer i maps the previous layer's values through `weights[i]` of shape
  (prev_size, size), adds `biases[i]` and applies its activation
- Topology never changes after construction; only parameter values do
- Parameters are initialized from the network's own seeded Random, so two
  networks built from the same NetworkConfig are element-wise identical

Genome manipulation goes through get_state()/set_state(), which expose the raw
per-layer matrices.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError, ShapeError
from .activations import Activation, get_activation
from .initializers import INITIALIZERS, create_initializer
from .random import Random


@dataclass(frozen=True)
class LayerConfig:
    """One dense layer: neuron count, activation name, and whether it has biases."""
    size: int
    activation: str = 'relu'
    use_bias: bool = True

    def __post_init__(self):
        if self.size <= 0:
            raise ConfigurationError(f"Layer size must be positive, got {self.size}")
        get_activation(self.activation)

    def to_dict(self) -> Dict[str, Any]:
        return {'size': self.size, 'activation': self.activation, 'use_bias': self.use_bias}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LayerConfig':
        return cls(
            size=data['size'],
            activation=data.get('activation', 'relu'),
            use_bias=data.get('use_bias', True),
        )


def _as_layer_config(layer: Any) -> LayerConfig:
    if isinstance(layer, LayerConfig):
        return layer
    if isinstance(layer, dict):
        return LayerConfig.from_dict(layer)
    raise ConfigurationError(f"Expected LayerConfig or dict, got {type(layer).__name__}")


@dataclass(frozen=True)
class NetworkConfig:
    """
    Architecture of a controller network.

    Attributes:
        input_size: Length of the input vector accepted by process()
        hidden_layers: Ordered hidden layers (may be empty)
        output_layer: Output layer settings
        weight_range: (min, max) for the uniform initializer
        seed: Seed for the network's own Random (None means the default seed)
        initializer: 'uniform', 'xavier' or 'he'
    """
    input_size: int
    hidden_layers: Tuple[LayerConfig, ...] = ()
    output_layer: LayerConfig = field(default_factory=lambda: LayerConfig(1, 'sigmoid'))
    weight_range: Tuple[float, float] = (-1.0, 1.0)
    seed: Optional[int] = None
    initializer: str = 'uniform'

    def __post_init__(self):
        if self.input_size <= 0:
            raise ConfigurationError(f"Input size must be positive, got {self.input_size}")

        # Normalize to immutable, typed containers
        object.__setattr__(
            self, 'hidden_layers', tuple(_as_layer_config(l) for l in self.hidden_layers)
        )
        object.__setattr__(self, 'output_layer', _as_layer_config(self.output_layer))
        object.__setattr__(
            self, 'weight_range', (float(self.weight_range[0]), float(self.weight_range[1]))
        )

        if self.weight_range[0] >= self.weight_range[1]:
            raise ConfigurationError(
                f"Weight range min must be less than max, got {self.weight_range}"
            )
        if self.initializer not in INITIALIZERS:
            raise ConfigurationError(f"Unknown initializer '{self.initializer}'")

    @property
    def layers(self) -> Tuple[LayerConfig, ...]:
        """All parameterized layers: hidden layers then the output layer."""
        return self.hidden_layers + (self.output_layer,)

    @property
    def depth(self) -> int:
        """Number of hidden layers."""
        return len(self.hidden_layers)

    @property
    def output_size(self) -> int:
        return self.output_layer.size

    @property
    def total_params(self) -> int:
        """Total number of trainable parameters (the genome length)."""
        params = 0
        prev_dim = self.input_size
        for layer in self.layers:
            params += prev_dim * layer.size  # weights
            if layer.use_bias:
                params += layer.size  # biases
            prev_dim = layer.size
        return params

    def architecture(self) -> Tuple:
        """Hashable signature of everything that shapes the parameters."""
        return (self.input_size,) + tuple(
            (l.size, l.activation, l.use_bias) for l in self.layers
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'input_size': self.input_size,
            'hidden_layers': [l.to_dict() for l in self.hidden_layers],
            'output_layer': self.output_layer.to_dict(),
            'weight_range': list(self.weight_range),
            'seed': self.seed,
            'initializer': self.initializer,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkConfig':
        return cls(
            input_size=data['input_size'],
            hidden_layers=tuple(LayerConfig.from_dict(l) for l in data.get('hidden_layers', [])),
            output_layer=LayerConfig.from_dict(data['output_layer']),
            weight_range=tuple(data.get('weight_range', (-1.0, 1.0))),
            seed=data.get('seed'),
            initializer=data.get('initializer', 'uniform'),
        )


class NeuralNetwork:
    """
    Fixed-topology feedforward network driven by evolution rather than training.

    Args:
        config: Network architecture. Immutable once the network is built.
    """

    def __init__(self, config: NetworkConfig):
        self.config = config
        self.random = Random(config.seed)
        self.activations: List[Activation] = [
            get_activation(layer.activation) for layer in config.layers
        ]
        self._init_weights()

    def _init_weights(self):
        """Draw all weights (layer by layer, row-major), then all biases."""
        initializer = create_initializer(self.config.initializer, *self.config.weight_range)
        random_fn = self.random.random

        self.weights: List[np.ndarray] = []
        self.biases: List[Optional[np.ndarray]] = []

        layer_dims = [self.config.input_size] + [l.size for l in self.config.layers]

        for i in range(len(layer_dims) - 1):
            fan_in, fan_out = layer_dims[i], layer_dims[i + 1]
            self.weights.append(initializer.initialize_weights(fan_in, fan_out, random_fn))

        for layer in self.config.layers:
            if layer.use_bias:
                self.biases.append(initializer.initialize_biases(layer.size, random_fn))
            else:
                self.biases.append(None)

    @property
    def n_layers(self) -> int:
        return len(self.weights)

    @property
    def parameter_count(self) -> int:
        return self.config.total_params

    def process(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Forward pass for a single input vector.

        Args:
            inputs: Vector of length config.input_size

        Returns:
            Output layer activations as a 1-D float array
        """
        current = np.asarray(inputs, dtype=float)
        if current.ndim != 1 or current.shape[0] != self.config.input_size:
            raise ShapeError(
                f"Input size mismatch: expected {self.config.input_size}, "
                f"got {current.shape[0] if current.ndim == 1 else current.shape}"
            )

        for W, b, activation in zip(self.weights, self.biases, self.activations):
            z = current @ W
            if b is not None:
                z = z + b
            current = activation(z)

        return current

    def get_state(self) -> Dict[str, List[Dict[str, Optional[np.ndarray]]]]:
        """Copies of every layer's weight matrix and bias vector."""
        return {
            'layers': [
                {
                    'weights': W.copy(),
                    'biases': b.copy() if b is not None else None,
                }
                for W, b in zip(self.weights, self.biases)
            ]
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        """
        Replace weights and biases from external data.

        A layer entry may omit 'weights' or 'biases' to keep the current values.
        Every shape is checked before anything is assigned, so a rejected
        payload leaves the network untouched.
        """
        layers = state.get('layers') if isinstance(state, dict) else None
        if layers is None:
            raise ShapeError("State must be a mapping with a 'layers' list")
        if len(layers) != self.n_layers:
            raise ShapeError(
                f"State layer count mismatch: expected {self.n_layers}, got {len(layers)}"
            )

        new_weights = []
        new_biases = []
        for i, layer_state in enumerate(layers):
            weights = layer_state.get('weights')
            if weights is None:
                new_weights.append(self.weights[i])
            else:
                W = np.array(weights, dtype=float)
                if W.shape != self.weights[i].shape:
                    raise ShapeError(
                        f"Layer {i} weight dimensions mismatch: expected "
                        f"{self.weights[i].shape}, got {W.shape}"
                    )
                new_weights.append(W)

            biases = layer_state.get('biases')
            if biases is None:
                new_biases.append(self.biases[i])
            else:
                if self.biases[i] is None:
                    raise ShapeError(f"Layer {i} does not have biases")
                b = np.array(biases, dtype=float)
                if b.shape != self.biases[i].shape:
                    raise ShapeError(
                        f"Layer {i} bias dimensions mismatch: expected "
                        f"{self.biases[i].shape}, got {b.shape}"
                    )
                new_biases.append(b)

        self.weights = new_weights
        self.biases = new_biases

    def clone(self) -> 'NeuralNetwork':
        """Independent deep copy; shares no arrays with the original."""
        twin = NeuralNetwork(self.config)
        twin.set_state(self.get_state())
        return twin

    def to_dict(self) -> Dict[str, Any]:
        return {
            'config': self.config.to_dict(),
            'state': {
                'layers': [
                    {
                        'weights': W.tolist(),
                        'biases': b.tolist() if b is not None else None,
                    }
                    for W, b in zip(self.weights, self.biases)
                ]
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NeuralNetwork':
        network = cls(NetworkConfig.from_dict(data['config']))
        network.set_state(data['state'])
        return network

    def serialize(self) -> str:
        """JSON representation of the config and all parameters."""
        return json.dumps(self.to_dict())

    def deserialize(self, data: str) -> None:
        """
        Load parameters from serialize() output into this network.

        The payload's architecture must match this network's config.
        """
        parsed = json.loads(data)
        if not isinstance(parsed, dict) or 'config' not in parsed or 'state' not in parsed:
            raise ShapeError("Invalid serialized network: expected 'config' and 'state'")

        other = NetworkConfig.from_dict(parsed['config'])
        if other.architecture() != self.config.architecture():
            raise ShapeError("Serialized network configuration mismatch")

        self.set_state(parsed['state'])

    def __repr__(self):
        arch = f"{self.config.input_size}→" + "→".join(str(l.size) for l in self.config.layers)
        return f"NeuralNetwork(arch={arch}, params={self.parameter_count})"
