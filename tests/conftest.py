"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from kneat.genotype.connection_gene    import ConnectionGene
from kneat.genotype.genome             import Genome
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.run.config                  import Config


@pytest.fixture
def config():
    """Small default configuration: 2 inputs, 1 output, acyclic."""
    config = Config()
    config.population_size = 10
    config.num_inputs      = 2
    config.num_outputs     = 1
    config.num_species     = 1
    config.max_number_generations = 3
    return config


@pytest.fixture
def cyclic_config(config):
    config.acyclic = False
    return config


@pytest.fixture
def tracker():
    return InnovationTracker()


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def make_genome(config, tracker, rng):
    """
    Factory building a genome from (innovation, node_in, node_out, weight[, enabled]) tuples.
    """
    def _make(genes, node_count=None, fitness=0.0, config=config):
        conn_genes = [ConnectionGene(*gene) for gene in genes]
        if node_count is None:
            node_count = config.num_inputs + 1 + config.num_outputs
        genome = Genome.from_genes(config, tracker, rng, conn_genes, node_count)
        genome.fitness = fitness
        return genome
    return _make
