"""
Genome codec: flat parameter vectors for controller networks.

A genome lists every trainable parameter of a network in a fixed order:
for each layer, all weights row-major, then all biases. Its length depends
only on the architecture, so any two networks built from the same
NetworkConfig produce genomes that can be recombined position by position.
"""

import numpy as np

from ..core.network import NeuralNetwork
from ..errors import ShapeError


def parameter_count(network: NeuralNetwork) -> int:
    """Genome length for this network's architecture."""
    total = 0
    for layer in network.get_state()['layers']:
        if layer['weights'] is not None:
            total += layer['weights'].size
        if layer['biases'] is not None:
            total += layer['biases'].size
    return total


def extract_genome(network: NeuralNetwork) -> np.ndarray:
    """
    Flatten a network's weights and biases into one vector.

    Returns:
        1-D float64 array (a copy; editing it does not touch the network)
    """
    parts = []
    for layer in network.get_state()['layers']:
        if layer['weights'] is not None:
            parts.append(np.ravel(layer['weights']))
        if layer['biases'] is not None:
            parts.append(np.ravel(layer['biases']))

    if not parts:
        return np.array([], dtype=float)
    return np.concatenate(parts).astype(float)


def apply_genome(network: NeuralNetwork, genome) -> None:
    """
    Write a flat genome back into a network, in extract_genome() order.

    Raises:
        ShapeError: If the genome length differs from the parameter count.
            The network is left untouched in that case.
    """
    genome = np.asarray(genome, dtype=float).ravel()
    state = network.get_state()

    expected = parameter_count(network)
    if genome.shape[0] != expected:
        raise ShapeError(
            f"Genome length {genome.shape[0]} does not match network parameter count {expected}"
        )

    offset = 0
    new_layers = []
    for layer in state['layers']:
        new_layer = {'weights': None, 'biases': None}

        if layer['weights'] is not None:
            numel = layer['weights'].size
            new_layer['weights'] = genome[offset:offset + numel].reshape(layer['weights'].shape)
            offset += numel

        if layer['biases'] is not None:
            numel = layer['biases'].size
            new_layer['biases'] = genome[offset:offset + numel].copy()
            offset += numel

        new_layers.append(new_layer)

    network.set_state({'layers': new_layers})


def check_compatible(genome_a: np.ndarray, genome_b: np.ndarray) -> None:
    """Raise ShapeError unless two genomes can be recombined gene by gene."""
    if len(genome_a) != len(genome_b):
        raise ShapeError(
            f"Parent networks must have the same structure "
            f"(genome lengths {len(genome_a)} and {len(genome_b)})"
        )
