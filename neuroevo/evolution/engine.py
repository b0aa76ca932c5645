"""
Main evolutionary optimization engine.

Orchestrates the evolution loop:
1. Initialize population from a template network
2. Evaluate fitness (fan-out, then join)
3. Carry elites forward
4. Select parents
5. Create offspring via crossover/mutation
6. Record statistics
7. Repeat until the generation budget, target fitness or early stop
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..core.network import NeuralNetwork
from ..core.random import Random
from ..errors import ConfigurationError, DomainError
from .config import GeneticAlgorithmConfig
from .fitness import FitnessFunction, evaluate_networks, evaluate_networks_async
from .history import EvolutionHistory, PopulationStats, best_individual, calculate_stats
from .operators import (
    create_crossover_strategy,
    create_mutation_strategy,
    create_selection_strategy,
    elitism_selection,
)
from .population import (
    Individual,
    UNEVALUATED_FITNESS,
    create_initial_population,
    generate_individual_id,
    sort_by_fitness,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, PopulationStats], None]


class AlgorithmState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    INITIALIZED = 'initialized'
    EVALUATED = 'evaluated'
    EVOLVED = 'evolved'
    TERMINATED = 'terminated'


class GeneticAlgorithm:
    """
    Generational genetic algorithm over controller networks.

    The algorithm owns a single Random seeded from the config; selection,
    crossover and mutation all draw from it in a fixed order, so two
    instances with the same config and a deterministic fitness function
    produce identical runs.
    """

    def __init__(self, config: GeneticAlgorithmConfig):
        if not isinstance(config, GeneticAlgorithmConfig):
            raise ConfigurationError("config must be a GeneticAlgorithmConfig")
        self.config = config
        self.random = Random(config.seed)

        self.selection_strategy = create_selection_strategy(config.selection)
        self.crossover_strategy = create_crossover_strategy(config.crossover)
        self.mutation_strategy = create_mutation_strategy(config.mutation)

        self._population: List[Individual] = []
        self._generation = 0
        self._stats: Optional[PopulationStats] = None
        self._state = AlgorithmState.UNINITIALIZED
        self._stop_requested = False
        self.history = EvolutionHistory()

    @property
    def population(self) -> Tuple[Individual, ...]:
        return tuple(self._population)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> AlgorithmState:
        return self._state

    @property
    def stats(self) -> PopulationStats:
        """Statistics for the current population, cached until it changes."""
        if self._stats is None:
            self._stats = self.calculate_stats()
        return self._stats

    def initialize_population(self, template: NeuralNetwork) -> None:
        """
        Fill the population with clones of the template network.

        Resets the generation counter, cached stats and history.
        """
        self._population = create_initial_population(template, self.config.population_size)
        self._generation = 0
        self._stats = None
        self.history = EvolutionHistory()
        self._state = AlgorithmState.INITIALIZED
        logger.debug("Initialized population of %d from %r", len(self._population), template)

    def _assign_fitness(self, scores: List[float]) -> None:
        for individual, score in zip(self._population, scores):
            individual.fitness = score
            individual.evaluated = True
        self._stats = None
        self._state = AlgorithmState.EVALUATED

    def evaluate_fitness(self, fitness_fn: FitnessFunction) -> None:
        """
        Score every individual once.

        Scores are assigned only after all evaluations finish. If the fitness
        function raises, the error propagates and the population keeps its
        previous fitness values.
        """
        scores = evaluate_networks(
            [ind.network for ind in self._population],
            fitness_fn,
            n_workers=self.config.n_workers,
        )
        self._assign_fitness(scores)

    async def evaluate_fitness_async(self, fitness_fn: FitnessFunction) -> None:
        """Async counterpart of evaluate_fitness, for use inside an event loop."""
        scores = await evaluate_networks_async(
            [ind.network for ind in self._population],
            fitness_fn,
            max_concurrency=self.config.n_workers,
        )
        self._assign_fitness(scores)

    def calculate_stats(self) -> PopulationStats:
        return calculate_stats(self._population, self._generation)

    def get_stats(self) -> PopulationStats:
        return self.stats

    def get_best_individual(self) -> Individual:
        """Fittest individual in the current population; first one wins ties."""
        return best_individual(self._population)

    def evolve(self) -> None:
        """Replace the population with the next generation."""
        if not self._population:
            raise DomainError("Population must be initialized before evolution")

        size = self.config.population_size
        next_generation = self._generation + 1
        random_fn = self.random.random

        ranked = sort_by_fitness(self._population)
        self._population = ranked

        # 1. Elitism
        new_population = elitism_selection(ranked, self.config.elite_count, next_generation)
        n_elite = len(new_population)

        # 2. Offspring, two at a time
        n_crossovers = 0
        for _ in range(0, size - n_elite, 2):
            parent_a, parent_b = self.selection_strategy.select(ranked, 2, random_fn)

            if random_fn() < self.config.crossover.rate:
                child_a, child_b = self.crossover_strategy.crossover(
                    parent_a.network, parent_b.network, random_fn
                )
                n_crossovers += 1
            else:
                child_a = parent_a.network.clone()
                child_b = parent_b.network.clone()

            self.mutation_strategy.mutate(child_a, random_fn)
            self.mutation_strategy.mutate(child_b, random_fn)

            lineage = (parent_a.id, parent_b.id)
            new_population.append(self._offspring(child_a, next_generation, len(new_population), lineage))

            # Odd remainder: the second child only fits while below size
            if len(new_population) < size:
                new_population.append(
                    self._offspring(child_b, next_generation, len(new_population), lineage)
                )

        logger.debug(
            "Generation %d: %d elites, %d offspring, %d crossovers",
            next_generation, n_elite, len(new_population) - n_elite, n_crossovers,
        )

        self._population = new_population
        self._generation = next_generation
        self._stats = None
        self._state = AlgorithmState.EVOLVED

    @staticmethod
    def _offspring(network, generation, index, parents) -> Individual:
        return Individual(
            network=network,
            fitness=UNEVALUATED_FITNESS,
            generation=generation,
            id=generate_individual_id(generation, index),
            parents=parents,
        )

    def request_stop(self) -> None:
        """Ask a running run() to stop before its next generation."""
        self._stop_requested = True

    def _resolve_generations(self, generations: Optional[int]) -> int:
        if generations is None:
            return self.config.max_generations
        if generations < 0:
            raise ConfigurationError(f"generations must be non-negative, got {generations}")
        return generations

    def _record(self, stats_history: List[PopulationStats]) -> PopulationStats:
        stats = self.get_stats()
        stats_history.append(stats)
        self.history.record_generation(stats)
        logger.info(
            "Generation %d: best=%.4f avg=%.4f std=%.4f",
            stats.generation, stats.best_fitness, stats.average_fitness, stats.fitness_std_dev,
        )
        return stats

    def _stop_reason(self) -> Optional[str]:
        """Why run() should stop before evolving again, or None to continue."""
        if self._stop_requested:
            return "stop requested"

        target = self.config.target_fitness
        if target is not None and self.stats.best_fitness >= target:
            return f"target fitness {target} reached"

        patience = self.config.early_stop_patience
        if patience is not None and self.history.should_early_stop(
            patience=patience,
            min_improvement=self.config.early_stop_min_improvement,
        ):
            return (
                f"no improvement > {self.config.early_stop_min_improvement} "
                f"in {patience} generations"
            )
        return None

    def run(
        self,
        template: NeuralNetwork,
        fitness_fn: FitnessFunction,
        generations: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[PopulationStats]:
        """
        Run full evolutionary optimization.

        Args:
            template: Network used to seed the population if it is empty
            fitness_fn: Callable scoring one network
            generations: Maximum generations to evolve (default: config.max_generations)
            progress_callback: Optional callback(generation, total, stats)

        Returns:
            Stats for the initial evaluation plus one entry per evolved generation
        """
        max_gens = self._resolve_generations(generations)
        self._stop_requested = False
        stats_history: List[PopulationStats] = []

        if not self._population:
            self.initialize_population(template)

        self.evaluate_fitness(fitness_fn)
        stats = self._record(stats_history)
        if progress_callback:
            progress_callback(self._generation, max_gens, stats)

        for _ in range(max_gens):
            reason = self._stop_reason()
            if reason:
                logger.info("Stopping at generation %d: %s", self._generation, reason)
                break

            self.evolve()
            self.evaluate_fitness(fitness_fn)
            stats = self._record(stats_history)
            if progress_callback:
                progress_callback(self._generation, max_gens, stats)

        self._state = AlgorithmState.TERMINATED
        return stats_history

    async def run_async(
        self,
        template: NeuralNetwork,
        fitness_fn: FitnessFunction,
        generations: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[PopulationStats]:
        """Async counterpart of run(); fitness is awaited via evaluate_fitness_async."""
        max_gens = self._resolve_generations(generations)
        self._stop_requested = False
        stats_history: List[PopulationStats] = []

        if not self._population:
            self.initialize_population(template)

        await self.evaluate_fitness_async(fitness_fn)
        stats = self._record(stats_history)
        if progress_callback:
            progress_callback(self._generation, max_gens, stats)

        for _ in range(max_gens):
            reason = self._stop_reason()
            if reason:
                logger.info("Stopping at generation %d: %s", self._generation, reason)
                break

            self.evolve()
            await self.evaluate_fitness_async(fitness_fn)
            stats = self._record(stats_history)
            if progress_callback:
                progress_callback(self._generation, max_gens, stats)

        self._state = AlgorithmState.TERMINATED
        return stats_history

    def reset(self) -> None:
        """Clear the population, generation counter, cached stats and history."""
        self._population = []
        self._generation = 0
        self._stats = None
        self._stop_requested = False
        self.history = EvolutionHistory()
        self._state = AlgorithmState.UNINITIALIZED
