"""
Structure Matching Problem Implementation for NEAT

A toy problem which needs no network evaluation: the fitness of a genome
measures how close its enabled connections come to a target structure.

Fitness Function:
    Fitness = 1 / (1 + |num_enabled - target_connections| + mean((weight - target_weight)^2))

    - num_enabled:        number of enabled connection genes
    - target_connections: desired number of enabled connections
    - target_weight:      desired weight of every enabled connection

Expected Solution:
    Genomes grow (through node and connection additions) until they have the
    target number of enabled connections, while their weights drift towards
    the target weight. The fitness approaches 1.

Classes:
    StructureTask: Fitness function for the structure matching problem

Usage:
    python examples/trial_structure.py
"""

from pathlib import Path

import numpy as np

from kneat import Config, Genome, Trial

class StructureTask:
    """
    Rewards genomes with 'target_connections' enabled connections of weight 'target_weight'.
    """

    def __init__(self, target_connections: int = 12, target_weight: float = 0.5):
        self.target_connections = target_connections
        self.target_weight      = target_weight

    def evaluate(self, genome: Genome) -> float:
        weights = np.array([gene.weight for gene in genome.conn_genes if gene.enabled])
        if weights.size == 0:
            return 0.0

        size_error   = abs(weights.size - self.target_connections)
        weight_error = float(np.mean((weights - self.target_weight) ** 2))
        return 1.0 / (1.0 + size_error + weight_error)

if __name__ == '__main__':
    config = Config(str(Path(__file__).parent / "config_structure.ini"))
    trial  = Trial(StructureTask(), config, seed=1)
    best   = trial.run(num_jobs=1)
    print(best)
