"""
kneat - NEAT (NeuroEvolution of Augmenting Topologies) with k-means speciation.

This package evolves a population of variable-topology networks, encoded as
lists of connection genes carrying historical markings (innovation numbers).
The population is split into a fixed number of species by clustering the genomes
in innovation space; species receive offspring in proportion to their mean fitness.

Main components:
- genotype: Genetic encoding (genomes, genes, innovation tracking, crossover)
- pool: Population, speciation, selection and reproduction
- run: Configuration and trial execution

Example:
    >>> from kneat import Config, Trial
    >>> class NodeCount:
    ...     def evaluate(self, genome):
    ...         return float(genome.node_count)
    >>> config = Config("config.ini")
    >>> best = Trial(NodeCount(), config, seed=0).run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from kneat.errors                      import ConfigurationError, DegenerateStateError
from kneat.run.config                  import Config
from kneat.run.trial                   import Trial, TrialState
from kneat.genotype.genome             import Genome, TopologyMode
from kneat.genotype.connection_gene    import ConnectionGene
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.pool.population             import Population
from kneat.pool.selection              import SelectionPolicy, RankSelection

__all__ = [
    "ConfigurationError",
    "DegenerateStateError",
    "Config",
    "Trial",
    "TrialState",
    "Genome",
    "TopologyMode",
    "ConnectionGene",
    "InnovationTracker",
    "Population",
    "SelectionPolicy",
    "RankSelection",
]
