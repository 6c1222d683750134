"""
Shared fixtures for integration tests.
"""

import pytest

from kneat.run.config import Config


class NodeCountTask:
    """Fitness is the number of nodes: rewards structural growth only."""

    def evaluate(self, genome):
        return float(genome.node_count)


class WeightTargetTask:
    """Fitness grows as the enabled weights approach a target value."""

    def __init__(self, target=2.0):
        self.target = target

    def evaluate(self, genome):
        weights = [gene.weight for gene in genome.conn_genes if gene.enabled]
        if not weights:
            return 0.0
        error = sum((w - self.target) ** 2 for w in weights) / len(weights)
        return 1.0 / (1.0 + error)


@pytest.fixture
def node_count_task():
    return NodeCountTask()


@pytest.fixture
def weight_target_task():
    return WeightTargetTask()


@pytest.fixture
def growth_config():
    """
    Only node additions mutate genomes, once per child, and crossover never
    re-disables genes: the fittest genome gains exactly one node per generation.
    """
    config = Config()
    config.population_size          = 10
    config.num_inputs               = 2
    config.num_outputs              = 1
    config.num_species              = 1
    config.elitism_proportion       = 0.1
    config.disable_probability      = 0.0
    config.weight_mutation_prob     = 0.0
    config.bias_mutation_prob       = 0.0
    config.node_addition_prob       = 1.0
    config.connection_addition_prob = 0.0
    config.acyclic                  = True
    config.max_number_generations   = 3
    return config
