"""
Population statistics and run history.

Records per-generation fitness statistics for analysis, and decides when a
run has stagnated long enough to stop early.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np

from ..errors import DomainError
from .population import Individual, fitness_values


@dataclass
class PopulationStats:
    """Fitness statistics for a single generation."""
    generation: int
    size: int
    best_fitness: float
    average_fitness: float
    worst_fitness: float
    fitness_std_dev: float
    best_individual: Individual

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generation': self.generation,
            'size': self.size,
            'best_fitness': self.best_fitness,
            'average_fitness': self.average_fitness,
            'worst_fitness': self.worst_fitness,
            'fitness_std_dev': self.fitness_std_dev,
            'best_individual_id': self.best_individual.id,
        }


def best_individual(population: List[Individual]) -> Individual:
    """Highest fitness; the earliest individual wins ties."""
    if not population:
        raise DomainError("Population is empty")
    return max(population, key=lambda ind: ind.fitness)


def calculate_stats(population: List[Individual], generation: int) -> PopulationStats:
    """
    Compute best/worst/average fitness and population standard deviation.

    Raises:
        DomainError: If the population is empty.
    """
    if not population:
        raise DomainError("Cannot calculate stats for empty population")

    fitnesses = fitness_values(population)

    return PopulationStats(
        generation=generation,
        size=len(population),
        best_fitness=float(np.max(fitnesses)),
        average_fitness=float(np.mean(fitnesses)),
        worst_fitness=float(np.min(fitnesses)),
        fitness_std_dev=float(np.std(fitnesses)),
        best_individual=best_individual(population),
    )


class EvolutionHistory:
    """
    Tracks evolution progress over generations.

    Records per-generation statistics for analysis and early stopping.
    """

    def __init__(self):
        self.generations: List[PopulationStats] = []
        self.fitness_trajectory: List[float] = []

    def record_generation(self, stats: PopulationStats) -> PopulationStats:
        self.generations.append(stats)
        self.fitness_trajectory.append(stats.best_fitness)
        return stats

    def __len__(self) -> int:
        return len(self.generations)

    def to_dict(self) -> Dict[str, Any]:
        """Convert history to dictionary for serialization."""
        return {
            'generations': [g.to_dict() for g in self.generations],
            'fitness_trajectory': list(self.fitness_trajectory),
        }

    def should_early_stop(
        self,
        patience: int = 10,
        min_improvement: float = 0.0,
    ) -> bool:
        """
        Check if evolution should stop early.

        Compares the best fitness of the last `patience` generations with the
        best fitness recorded before them.

        Args:
            patience: Generations without improvement before stopping
            min_improvement: Improvement that must be exceeded to count as progress

        Returns:
            True if should stop, False otherwise
        """
        # Need at least patience + 1 generations to compare
        if len(self.fitness_trajectory) <= patience:
            return False

        recent_best = max(self.fitness_trajectory[-patience:])
        older_best = max(self.fitness_trajectory[:-patience])

        improvement = recent_best - older_best
        return improvement <= min_improvement
