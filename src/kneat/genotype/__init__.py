"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm, and the crossover operators acting on it.

Modules:
    connection_gene:    ConnectionGene class
    innovation_tracker: InnovationTracker class
    genome:             TopologyMode enumeration and Genome class
    crossover:          Dominant-parent and merge crossover operators

Exported Classes:
    ConnectionGene:    Gene encoding a weighted connection between nodes
    InnovationTracker: Run-scoped tracker for innovation numbers
    TopologyMode:      Enumeration for network topologies (ACYCLIC, CYCLIC)
    Genome:            Genome representing a neural network
"""

from kneat.genotype.connection_gene    import ConnectionGene
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.genotype.genome             import TopologyMode, Genome

__all__ = ['ConnectionGene',
           'InnovationTracker',
           'TopologyMode',
           'Genome']
