#!/usr/bin/env python3
"""
Quick start: evolve a controller that steers an agent toward a goal.

Each network is dropped into a tiny 2-D world and driven for a fixed number
of steps. Its inputs are the offset to the goal; its two tanh outputs are the
velocity. Fitness is higher the closer the agent ends up.

Usage:
    python examples/quick_start.py
"""

import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neuroevo import (
    GeneticAlgorithm,
    GeneticAlgorithmConfig,
    LayerConfig,
    NetworkConfig,
    NeuralNetwork,
)

GOALS = [np.array([3.0, 4.0]), np.array([-2.0, 1.0]), np.array([0.5, -3.0])]
STEPS = 25
SPEED = 0.3


def simulate(network: NeuralNetwork) -> float:
    """Negative mean final distance to the goal over a few episodes."""
    distances = []
    for goal in GOALS:
        position = np.zeros(2)
        for _ in range(STEPS):
            velocity = network.process(goal - position)
            position = position + SPEED * velocity
        distances.append(np.linalg.norm(goal - position))
    return -float(np.mean(distances))


def main():
    template = NeuralNetwork(NetworkConfig(
        input_size=2,
        hidden_layers=(LayerConfig(6, 'tanh'),),
        output_layer=LayerConfig(2, 'tanh'),
        seed=11,
    ))
    config = GeneticAlgorithmConfig(
        population_size=30,
        max_generations=40,
        elitism_rate=0.1,
        mutation={'rate': 0.2, 'magnitude': 0.3},
        target_fitness=-0.1,
        early_stop_patience=10,
        seed=11,
    )

    print("=" * 60)
    print("   neuroevo quick start: goal seeking")
    print("=" * 60)

    ga = GeneticAlgorithm(config)

    def report(generation, total, stats):
        print(f"   gen {generation:3d}/{total}  best={stats.best_fitness:8.4f}  "
              f"avg={stats.average_fitness:8.4f}")

    history = ga.run(template, simulate, progress_callback=report)

    best = ga.get_best_individual()
    print(f"\nFinished after {len(history) - 1} generations")
    print(f"Best individual: {best}")


if __name__ == '__main__':
    main()
