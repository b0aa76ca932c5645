"""
Configuration for genetic algorithm runs.

All configs are frozen dataclasses validated once in __post_init__; invalid
values raise ConfigurationError instead of being clamped.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import ConfigurationError
from .operators import (
    CrossoverMethod,
    MutationMethod,
    SelectionMethod,
    create_crossover_strategy,
    create_mutation_strategy,
    create_selection_strategy,
)


@dataclass(frozen=True)
class SelectionConfig:
    """Parent selection method and its parameters."""
    method: SelectionMethod = SelectionMethod.TOURNAMENT
    tournament_size: int = 3
    selection_pressure: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'method', _coerce(SelectionMethod, self.method, 'selection'))
        # Constructing the strategy validates its parameters
        create_selection_strategy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method.value,
            'tournament_size': self.tournament_size,
            'selection_pressure': self.selection_pressure,
        }


@dataclass(frozen=True)
class CrossoverConfig:
    """Crossover method, the probability of applying it, and its parameters."""
    method: CrossoverMethod = CrossoverMethod.SINGLE_POINT
    rate: float = 0.8
    points: int = 2
    uniform_rate: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, 'method', _coerce(CrossoverMethod, self.method, 'crossover'))
        if not 0.0 <= self.rate <= 1.0:
            raise ConfigurationError(f"Crossover rate must be between 0 and 1, got {self.rate}")
        create_crossover_strategy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method.value,
            'rate': self.rate,
            'points': self.points,
            'uniform_rate': self.uniform_rate,
        }


@dataclass(frozen=True)
class MutationConfig:
    """Mutation method and its parameters (rate is per weight/bias)."""
    method: MutationMethod = MutationMethod.GAUSSIAN
    rate: float = 0.1
    magnitude: float = 0.1
    min_value: float = -1.0
    max_value: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'method', _coerce(MutationMethod, self.method, 'mutation'))
        create_mutation_strategy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method.value,
            'rate': self.rate,
            'magnitude': self.magnitude,
            'min_value': self.min_value,
            'max_value': self.max_value,
        }


@dataclass(frozen=True)
class GeneticAlgorithmConfig:
    """
    Configuration for a GeneticAlgorithm.

    Attributes:
        population_size: Individuals per generation
        selection: Parent selection settings
        crossover: Crossover settings
        mutation: Mutation settings
        elitism_rate: Fraction of the population carried over unchanged
        max_generations: Default generation budget for run()
        target_fitness: Stop once the best fitness reaches this value
        seed: Seed for the algorithm's Random (None means the default seed)
        n_workers: Threads for fitness evaluation (None or 1 evaluates in-line)
        early_stop_patience: Generations without improvement before stopping
            (None disables early stopping)
        early_stop_min_improvement: Improvement in best fitness that counts as progress
    """
    population_size: int = 50
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    crossover: CrossoverConfig = field(default_factory=CrossoverConfig)
    mutation: MutationConfig = field(default_factory=MutationConfig)
    elitism_rate: float = 0.1
    max_generations: int = 100
    target_fitness: Optional[float] = None
    seed: Optional[int] = None
    n_workers: Optional[int] = None
    early_stop_patience: Optional[int] = None
    early_stop_min_improvement: float = 0.0

    def __post_init__(self):
        for name, cls in (
            ('selection', SelectionConfig),
            ('crossover', CrossoverConfig),
            ('mutation', MutationConfig),
        ):
            value = getattr(self, name)
            if isinstance(value, dict):
                object.__setattr__(self, name, cls(**value))
            elif not isinstance(value, cls):
                raise ConfigurationError(f"{name} must be a {cls.__name__} or dict")

        if self.population_size <= 0:
            raise ConfigurationError(
                f"Population size must be positive, got {self.population_size}"
            )
        if not 0.0 <= self.elitism_rate <= 1.0:
            raise ConfigurationError(
                f"Elitism rate must be between 0 and 1, got {self.elitism_rate}"
            )
        if self.max_generations <= 0:
            raise ConfigurationError(
                f"Maximum generations must be positive, got {self.max_generations}"
            )
        if self.n_workers is not None and self.n_workers < 1:
            raise ConfigurationError(f"n_workers must be at least 1, got {self.n_workers}")
        if self.early_stop_patience is not None and self.early_stop_patience < 1:
            raise ConfigurationError(
                f"Early stop patience must be at least 1, got {self.early_stop_patience}"
            )

    @property
    def elite_count(self) -> int:
        return int(self.population_size * self.elitism_rate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'population_size': self.population_size,
            'selection': self.selection.to_dict(),
            'crossover': self.crossover.to_dict(),
            'mutation': self.mutation.to_dict(),
            'elitism_rate': self.elitism_rate,
            'max_generations': self.max_generations,
            'target_fitness': self.target_fitness,
            'seed': self.seed,
            'n_workers': self.n_workers,
            'early_stop_patience': self.early_stop_patience,
            'early_stop_min_improvement': self.early_stop_min_improvement,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeneticAlgorithmConfig':
        """Create from a dictionary such as one loaded from JSON; missing keys use defaults."""
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def _coerce(enum_type, value, family: str):
    try:
        return enum_type(value)
    except ValueError:
        available = ', '.join(m.value for m in enum_type)
        raise ConfigurationError(
            f"Unknown {family} method '{value}'. Available: {available}"
        ) from None
