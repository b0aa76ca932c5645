"""
Genetic algorithm machinery for evolving controller networks.

Key components:
- Genome codec: flat parameter vectors for any NeuralNetwork
- Operators: selection, crossover, and mutation strategies
- GeneticAlgorithm: population orchestration and the run loop

Example usage:
    from neuroevo import NeuralNetwork, NetworkConfig, LayerConfig
    from neuroevo.evolution import GeneticAlgorithm, GeneticAlgorithmConfig

    template = NeuralNetwork(NetworkConfig(
        input_size=2,
        hidden_layers=(LayerConfig(4, 'relu'),),
        output_layer=LayerConfig(1, 'sigmoid'),
    ))

    ga = GeneticAlgorithm(GeneticAlgorithmConfig(population_size=20, seed=7))
    history = ga.run(template, lambda net: float(net.process([1.0, 0.0])[0]), generations=10)

    print(f"Best fitness: {history[-1].best_fitness:.3f}")
"""

from .genome import extract_genome, apply_genome, parameter_count, check_compatible
from .population import Individual, UNEVALUATED_FITNESS, create_initial_population
from .operators import (
    SelectionMethod,
    CrossoverMethod,
    MutationMethod,
    TournamentSelection,
    RouletteWheelSelection,
    SinglePointCrossover,
    MultiPointCrossover,
    UniformCrossover,
    GaussianMutation,
    UniformMutation,
    create_selection_strategy,
    create_crossover_strategy,
    create_mutation_strategy,
)
from .config import (
    SelectionConfig,
    CrossoverConfig,
    MutationConfig,
    GeneticAlgorithmConfig,
)
from .fitness import evaluate_networks, evaluate_networks_async
from .history import PopulationStats, EvolutionHistory
from .engine import GeneticAlgorithm, AlgorithmState

__all__ = [
    # Core classes
    'GeneticAlgorithm',
    'AlgorithmState',
    'GeneticAlgorithmConfig',
    'SelectionConfig',
    'CrossoverConfig',
    'MutationConfig',
    'Individual',
    'PopulationStats',
    'EvolutionHistory',
    'UNEVALUATED_FITNESS',
    # Genome codec
    'extract_genome',
    'apply_genome',
    'parameter_count',
    'check_compatible',
    # Population
    'create_initial_population',
    # Fitness
    'evaluate_networks',
    'evaluate_networks_async',
    # Operators
    'SelectionMethod',
    'CrossoverMethod',
    'MutationMethod',
    'TournamentSelection',
    'RouletteWheelSelection',
    'SinglePointCrossover',
    'MultiPointCrossover',
    'UniformCrossover',
    'GaussianMutation',
    'UniformMutation',
    'create_selection_strategy',
    'create_crossover_strategy',
    'create_mutation_strategy',
]
