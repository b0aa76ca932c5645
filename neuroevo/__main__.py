"""
Entry point for running a demo evolution.

Evolves a small controller network to reproduce the XOR truth table. The
fitness function stands in for a world simulation: it scores a network by
how closely its outputs match the targets (4.0 is perfect).

Usage:
    python -m neuroevo --generations 50 --seed 7
    python -m neuroevo --config run.json --target 3.9 -v
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from .core.network import LayerConfig, NetworkConfig, NeuralNetwork
from .errors import NeuroevoError
from .evolution.config import GeneticAlgorithmConfig
from .evolution.engine import GeneticAlgorithm
from .evolution.operators import CrossoverMethod, MutationMethod, SelectionMethod

XOR_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_TARGETS = np.array([0.0, 1.0, 1.0, 0.0])


def xor_fitness(network: NeuralNetwork) -> float:
    """4 minus the summed squared error over the XOR truth table."""
    outputs = np.array([network.process(x)[0] for x in XOR_INPUTS])
    return float(len(XOR_TARGETS) - np.sum((outputs - XOR_TARGETS) ** 2))


def build_config(args: argparse.Namespace) -> GeneticAlgorithmConfig:
    """Merge an optional JSON config file with command-line overrides."""
    data = {}
    if args.config:
        with open(Path(args.config), 'r') as f:
            data = json.load(f)

    overrides = {
        'population_size': args.population,
        'max_generations': args.generations,
        'elitism_rate': args.elitism,
        'target_fitness': args.target,
        'seed': args.seed,
        'n_workers': args.workers,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})

    if args.selection:
        data['selection'] = {**data.get('selection', {}), 'method': args.selection}
    if args.crossover:
        data['crossover'] = {**data.get('crossover', {}), 'method': args.crossover}
    if args.crossover_rate is not None:
        data['crossover'] = {**data.get('crossover', {}), 'rate': args.crossover_rate}
    if args.mutation:
        data['mutation'] = {**data.get('mutation', {}), 'method': args.mutation}
    if args.mutation_rate is not None:
        data['mutation'] = {**data.get('mutation', {}), 'rate': args.mutation_rate}

    return GeneticAlgorithmConfig.from_dict(data)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='neuroevo',
        description='Evolve a controller network on the XOR demo task',
    )
    parser.add_argument('--config', type=str, help='JSON file with GeneticAlgorithmConfig fields')
    parser.add_argument('--population', type=int, help='Population size')
    parser.add_argument('--generations', type=int, help='Maximum generations')
    parser.add_argument('--elitism', type=float, help='Elitism rate in [0, 1]')
    parser.add_argument('--target', type=float, help='Stop once best fitness reaches this')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument('--workers', type=int, help='Threads for fitness evaluation')
    parser.add_argument('--selection', choices=[m.value for m in SelectionMethod])
    parser.add_argument('--crossover', choices=[m.value for m in CrossoverMethod])
    parser.add_argument('--crossover-rate', type=float)
    parser.add_argument('--mutation', choices=[m.value for m in MutationMethod])
    parser.add_argument('--mutation-rate', type=float)
    parser.add_argument('--hidden', type=int, nargs='*', default=[4],
                        help='Hidden layer sizes (ReLU)')
    parser.add_argument('--history-out', type=str,
                        help='Write per-generation statistics to this JSON file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        config = build_config(args)
        template = NeuralNetwork(NetworkConfig(
            input_size=2,
            hidden_layers=tuple(LayerConfig(size, 'relu') for size in args.hidden),
            output_layer=LayerConfig(1, 'sigmoid'),
            seed=config.seed,
        ))
    except NeuroevoError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    ga = GeneticAlgorithm(config)
    history = ga.run(template, xor_fitness)

    best = ga.get_best_individual()
    print("=" * 60)
    print(f"Generations run: {len(history) - 1}")
    print(f"Best fitness: {best.fitness:.4f} ({best.id})")
    for x in XOR_INPUTS:
        print(f"   {x.astype(int).tolist()} -> {best.network.process(x)[0]:.3f}")
    print("=" * 60)

    if args.history_out:
        with open(Path(args.history_out), 'w') as f:
            json.dump(ga.history.to_dict(), f, indent=2)
        print(f"History saved to {args.history_out}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
