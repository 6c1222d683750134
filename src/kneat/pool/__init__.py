"""
NEAT Pool Package

This package contains classes for managing populations and species in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Modules:
    selection:       Parent selection policies
    species:         Individual species representation and reproduction
    species_manager: Speciation by clustering and offspring allocation
    population:      Top-level population management and evolution

Exported Classes:
    SelectionPolicy: Abstract parent selection policy
    RankSelection:   Linear rank-based selection
    Species:         A cluster of similar genomes
    SpeciesManager:  Manages species across generations
    Population:      Top-level evolutionary coordinator
"""

from kneat.pool.selection       import SelectionPolicy, RankSelection
from kneat.pool.species         import Species
from kneat.pool.species_manager import SpeciesManager
from kneat.pool.population      import Population

__all__ = [
    'SelectionPolicy',
    'RankSelection',
    'Species',
    'SpeciesManager',
    'Population',
]
