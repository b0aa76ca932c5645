"""
Population management for neuroevolution.

Handles:
- The Individual record (network + fitness + generation + id)
- Initial population creation from a template network
- Deterministic individual identifiers
- Fitness ordering helpers
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ..core.network import NeuralNetwork

# Fitness carried by individuals that have not been evaluated yet
UNEVALUATED_FITNESS = 0.0


def generate_individual_id(generation: int, index: int) -> str:
    """
    Deterministic identifier: generation number plus slot in that generation.

    Unique within a run because no two individuals share a (generation, slot).
    """
    return f"gen{generation}_{index:04d}"


@dataclass
class Individual:
    """
    One candidate controller in the population.

    Attributes:
        network: The controller network (owned exclusively by this individual)
        fitness: Score from the last evaluation (higher is better)
        generation: Generation in which this individual was created
        id: Unique identifier within the run
        evaluated: False until a fitness function has scored this individual
        parents: Ids of the individuals this one was derived from
    """
    network: NeuralNetwork
    fitness: float = UNEVALUATED_FITNESS
    generation: int = 0
    id: str = ''
    evaluated: bool = False
    parents: Tuple[str, ...] = field(default_factory=tuple)

    def __repr__(self) -> str:
        fitness_str = f"{self.fitness:.4f}" if self.evaluated else "unevaluated"
        return f"Individual(id={self.id}, gen={self.generation}, fitness={fitness_str})"


def create_initial_population(
    template: NeuralNetwork,
    population_size: int,
    generation: int = 0,
) -> List[Individual]:
    """
    Fill a population with independent clones of a template network.

    Args:
        template: Network whose architecture and parameters are copied
        population_size: Number of individuals to create
        generation: Generation number stamped on every individual

    Returns:
        List of unevaluated Individuals
    """
    return [
        Individual(
            network=template.clone(),
            fitness=UNEVALUATED_FITNESS,
            generation=generation,
            id=generate_individual_id(generation, i),
        )
        for i in range(population_size)
    ]


def sort_by_fitness(population: List[Individual]) -> List[Individual]:
    """Descending by fitness. Stable, so equal scores keep their current order."""
    return sorted(population, key=lambda ind: ind.fitness, reverse=True)


def fitness_values(population: List[Individual]) -> np.ndarray:
    return np.array([ind.fitness for ind in population], dtype=float)
