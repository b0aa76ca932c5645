"""
Evolutionary operators: selection, crossover, and mutation.

These operators drive the search by:
- Selecting fit individuals for reproduction
- Combining parent genomes through crossover
- Introducing variation through mutation

Every operator draws randomness only from the `random_fn` it is given (a
zero-argument callable returning floats in [0, 1)), so a run is reproducible
from its seed. Strategy sets are closed: each family has an enum and a
factory table mapping enum values to implementations.
"""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List, Tuple

import numpy as np

from ..core.network import NeuralNetwork
from ..core.random import gaussian_deviate
from ..errors import ConfigurationError, DomainError
from .genome import apply_genome, check_compatible, extract_genome
from .population import (
    Individual,
    UNEVALUATED_FITNESS,
    fitness_values,
    generate_individual_id,
)

RandomFn = Callable[[], float]


class SelectionMethod(str, Enum):
    TOURNAMENT = 'tournament'
    ROULETTE_WHEEL = 'roulette_wheel'


class CrossoverMethod(str, Enum):
    SINGLE_POINT = 'single_point'
    MULTI_POINT = 'multi_point'
    UNIFORM = 'uniform'


class MutationMethod(str, Enum):
    GAUSSIAN = 'gaussian'
    UNIFORM = 'uniform'


def _check_rate(name: str, rate: float) -> None:
    if not 0.0 <= rate <= 1.0:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {rate}")


def _uniform_index(random_fn: RandomFn, n: int) -> int:
    return int(math.floor(random_fn() * n))


# =============================================================================
# Selection Operators
# =============================================================================

class SelectionStrategy(ABC):
    """Chooses parents from a population, with replacement."""

    @abstractmethod
    def select(
        self,
        population: List[Individual],
        count: int,
        random_fn: RandomFn,
    ) -> List[Individual]:
        """
        Args:
            population: Current population with fitness scores
            count: Number of individuals to select
            random_fn: Uniform [0, 1) source

        Returns:
            List of `count` selected individuals (may contain duplicates)
        """

    @staticmethod
    def _validate(population: List[Individual], count: int) -> None:
        if len(population) == 0:
            raise DomainError("Population cannot be empty")
        if count < 0:
            raise DomainError(f"Selection count must be non-negative, got {count}")


class TournamentSelection(SelectionStrategy):
    """
    Tournament selection with replacement.

    Each pick draws tournament_size contestants uniformly (with replacement)
    and keeps the strictly fittest; the earliest draw wins ties.
    """

    def __init__(self, tournament_size: int = 3):
        if tournament_size < 1:
            raise ConfigurationError(f"Tournament size must be at least 1, got {tournament_size}")
        self.tournament_size = tournament_size

    def select(self, population, count, random_fn):
        self._validate(population, count)
        n = len(population)
        selected = []

        for _ in range(count):
            best = population[_uniform_index(random_fn, n)]
            for _ in range(1, self.tournament_size):
                competitor = population[_uniform_index(random_fn, n)]
                if competitor.fitness > best.fitness:
                    best = competitor
            selected.append(best)

        return selected


class RouletteWheelSelection(SelectionStrategy):
    """
    Fitness-proportionate selection.

    Fitness is shifted so the worst individual scores 1, then raised to
    `selection_pressure`. When every adjusted value is equal (or all are
    zero) the wheel is flat and picks are plain uniform draws.
    """

    def __init__(self, selection_pressure: float = 1.0):
        if selection_pressure <= 0:
            raise ConfigurationError(
                f"Selection pressure must be positive, got {selection_pressure}"
            )
        self.selection_pressure = selection_pressure

    def select(self, population, count, random_fn):
        self._validate(population, count)
        n = len(population)

        fitnesses = fitness_values(population)
        adjusted = np.maximum(0.0, fitnesses - fitnesses.min() + 1.0) ** self.selection_pressure
        total = float(np.sum(adjusted))

        if total == 0.0 or np.all(adjusted == adjusted[0]):
            return [population[_uniform_index(random_fn, n)] for _ in range(count)]

        cumulative = np.cumsum(adjusted / total)

        selected = []
        for _ in range(count):
            # First partition boundary >= r; rounding can leave r past the end
            index = int(np.searchsorted(cumulative, random_fn(), side='left'))
            selected.append(population[min(index, n - 1)])

        return selected


# =============================================================================
# Crossover Operators
# =============================================================================

class CrossoverStrategy(ABC):
    """Recombines two parent networks into two freshly cloned children."""

    @abstractmethod
    def crossover(
        self,
        parent_a: NeuralNetwork,
        parent_b: NeuralNetwork,
        random_fn: RandomFn,
    ) -> Tuple[NeuralNetwork, NeuralNetwork]:
        """
        Args:
            parent_a: First parent (left untouched)
            parent_b: Second parent (left untouched)
            random_fn: Uniform [0, 1) source

        Returns:
            Tuple of (child_a, child_b), clones of parent_a and parent_b
            carrying the recombined genomes
        """

    @staticmethod
    def _parent_genomes(parent_a, parent_b) -> Tuple[np.ndarray, np.ndarray]:
        genome_a = extract_genome(parent_a)
        genome_b = extract_genome(parent_b)
        check_compatible(genome_a, genome_b)
        return genome_a, genome_b

    @staticmethod
    def _offspring(parent_a, parent_b, genome_a, genome_b) -> Tuple[NeuralNetwork, NeuralNetwork]:
        child_a = parent_a.clone()
        child_b = parent_b.clone()
        apply_genome(child_a, genome_a)
        apply_genome(child_b, genome_b)
        return child_a, child_b


class SinglePointCrossover(CrossoverStrategy):
    """
    Single-point crossover.

    Example (cut at 2):
        A: [1, 1, 1, 1]    B: [2, 2, 2, 2]
        child_a: [1, 1, 2, 2]
        child_b: [2, 2, 1, 1]
    """

    def crossover(self, parent_a, parent_b, random_fn):
        genome_a, genome_b = self._parent_genomes(parent_a, parent_b)

        point = _uniform_index(random_fn, len(genome_a))

        child_a = np.concatenate([genome_a[:point], genome_b[point:]])
        child_b = np.concatenate([genome_b[:point], genome_a[point:]])

        return self._offspring(parent_a, parent_b, child_a, child_b)


class MultiPointCrossover(CrossoverStrategy):
    """
    Multi-point crossover.

    Draws `points` cut indices, drops duplicates, sorts them and alternates
    the donor parent between consecutive cuts, starting with parent A.
    """

    def __init__(self, points: int = 2):
        if points < 1:
            raise ConfigurationError(f"Number of crossover points must be at least 1, got {points}")
        self.points = points

    def crossover(self, parent_a, parent_b, random_fn):
        genome_a, genome_b = self._parent_genomes(parent_a, parent_b)
        length = len(genome_a)

        cuts = sorted({_uniform_index(random_fn, length) for _ in range(self.points)})

        # True where child_a takes from parent A
        from_a = np.empty(length, dtype=bool)
        use_a = True
        last = 0
        for cut in cuts:
            from_a[last:cut] = use_a
            use_a = not use_a
            last = cut
        from_a[last:] = use_a

        child_a = np.where(from_a, genome_a, genome_b)
        child_b = np.where(from_a, genome_b, genome_a)

        return self._offspring(parent_a, parent_b, child_a, child_b)


class UniformCrossover(CrossoverStrategy):
    """
    Uniform crossover with gene-by-gene donor choice.

    A draw below uniform_rate keeps each child's own parent's gene;
    otherwise the gene comes from the other parent.
    """

    def __init__(self, uniform_rate: float = 0.5):
        _check_rate("Uniform rate", uniform_rate)
        self.uniform_rate = uniform_rate

    def crossover(self, parent_a, parent_b, random_fn):
        genome_a, genome_b = self._parent_genomes(parent_a, parent_b)

        keep = np.array(
            [random_fn() < self.uniform_rate for _ in range(len(genome_a))],
            dtype=bool,
        )

        child_a = np.where(keep, genome_a, genome_b)
        child_b = np.where(keep, genome_b, genome_a)

        return self._offspring(parent_a, parent_b, child_a, child_b)


# =============================================================================
# Mutation Operators
# =============================================================================

class MutationStrategy(ABC):
    """Perturbs a network's parameters in place."""

    @abstractmethod
    def mutate(self, network: NeuralNetwork, random_fn: RandomFn) -> None:
        """Mutate every weight and bias independently, in genome order."""


class GaussianMutation(MutationStrategy):
    """Adds N(0, magnitude) noise to each parameter with probability `rate`."""

    def __init__(self, rate: float, magnitude: float):
        _check_rate("Mutation rate", rate)
        if magnitude < 0:
            raise ConfigurationError(f"Mutation magnitude must be non-negative, got {magnitude}")
        self.rate = rate
        self.magnitude = magnitude

    def mutate(self, network, random_fn):
        genome = extract_genome(network)
        for i in range(len(genome)):
            if random_fn() < self.rate:
                genome[i] += gaussian_deviate(random_fn, 0.0, self.magnitude)
        apply_genome(network, genome)


class UniformMutation(MutationStrategy):
    """Replaces each parameter with probability `rate` by a uniform draw in [min_value, max_value)."""

    def __init__(self, rate: float, min_value: float = -1.0, max_value: float = 1.0):
        _check_rate("Mutation rate", rate)
        if min_value >= max_value:
            raise ConfigurationError(
                f"Minimum value must be less than maximum value, got ({min_value}, {max_value})"
            )
        self.rate = rate
        self.min_value = min_value
        self.max_value = max_value

    def mutate(self, network, random_fn):
        genome = extract_genome(network)
        span = self.max_value - self.min_value
        for i in range(len(genome)):
            if random_fn() < self.rate:
                genome[i] = self.min_value + random_fn() * span
        apply_genome(network, genome)


# =============================================================================
# Elitism
# =============================================================================

def elitism_selection(
    sorted_population: List[Individual],
    n_elite: int,
    generation: int,
) -> List[Individual]:
    """
    Carry the top n_elite individuals into the next generation.

    Args:
        sorted_population: Population sorted by fitness, best first
        n_elite: Number of elites to preserve
        generation: Generation number for the copies

    Returns:
        Fresh Individuals with cloned networks, new ids and reset fitness
    """
    return [
        Individual(
            network=source.network.clone(),
            fitness=UNEVALUATED_FITNESS,
            generation=generation,
            id=generate_individual_id(generation, i),
            parents=(source.id,),
        )
        for i, source in enumerate(sorted_population[:n_elite])
    ]


# =============================================================================
# Factory tables
# =============================================================================

SELECTION_STRATEGIES: Dict[SelectionMethod, Callable[..., SelectionStrategy]] = {
    SelectionMethod.TOURNAMENT: lambda cfg: TournamentSelection(cfg.tournament_size),
    SelectionMethod.ROULETTE_WHEEL: lambda cfg: RouletteWheelSelection(cfg.selection_pressure),
}

CROSSOVER_STRATEGIES: Dict[CrossoverMethod, Callable[..., CrossoverStrategy]] = {
    CrossoverMethod.SINGLE_POINT: lambda cfg: SinglePointCrossover(),
    CrossoverMethod.MULTI_POINT: lambda cfg: MultiPointCrossover(cfg.points),
    CrossoverMethod.UNIFORM: lambda cfg: UniformCrossover(cfg.uniform_rate),
}

MUTATION_STRATEGIES: Dict[MutationMethod, Callable[..., MutationStrategy]] = {
    MutationMethod.GAUSSIAN: lambda cfg: GaussianMutation(cfg.rate, cfg.magnitude),
    MutationMethod.UNIFORM: lambda cfg: UniformMutation(cfg.rate, cfg.min_value, cfg.max_value),
}


def _lookup(table: Dict, enum_type, method, family: str):
    try:
        key = enum_type(method)
    except ValueError:
        available = ', '.join(m.value for m in enum_type)
        raise ConfigurationError(
            f"Unknown {family} method '{method}'. Available: {available}"
        ) from None
    return table[key]


def create_selection_strategy(config) -> SelectionStrategy:
    """Build the selection strategy named by `config.method`."""
    return _lookup(SELECTION_STRATEGIES, SelectionMethod, config.method, 'selection')(config)


def create_crossover_strategy(config) -> CrossoverStrategy:
    """Build the crossover strategy named by `config.method`."""
    return _lookup(CROSSOVER_STRATEGIES, CrossoverMethod, config.method, 'crossover')(config)


def create_mutation_strategy(config) -> MutationStrategy:
    """Build the mutation strategy named by `config.method`."""
    return _lookup(MUTATION_STRATEGIES, MutationMethod, config.method, 'mutation')(config)
