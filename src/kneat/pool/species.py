"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species is the group of genomes that the clustering step put together
in the current generation; they compete for offspring only among themselves.

Classes:
    Species: A single species with its members and its reproduction logic
"""

import numpy as np
from loguru import logger
from typing import TYPE_CHECKING

from kneat.genotype.crossover import crossover
if TYPE_CHECKING:
    from kneat.genotype.genome  import Genome
    from kneat.pool.selection   import SelectionPolicy

class Species:
    """
    A species: the genomes assigned to the same cluster in the current generation.

    Species are rebuilt from scratch at every generation, only their index
    (the index of the cluster) carries over. A species may be empty.

    Public Attributes:
        index:   Index of the cluster this species corresponds to
        members: The genomes that are part of this species

    Public Methods:
        mean_fitness():   Average fitness of the members (0 for an empty species)
        spawn(...):       Generate this species' share of the next generation
    """

    def __init__(self, index: int, members: list['Genome'] | None = None):
        self.index  : int            = index
        self.members: list['Genome'] = members if members is not None else []

    def __len__(self):
        return len(self.members)

    def mean_fitness(self) -> float:
        if not self.members:
            return 0.0
        return float(np.mean([genome.fitness for genome in self.members]))

    def spawn(self,
              num_offspring: int,
              num_elite    : int,
              selection    : 'SelectionPolicy',
              disable_prob : float,
              rng          : np.random.Generator) -> list['Genome']:
        """
        Generate offspring for the next generation through elitism and reproduction.

        The spawning process:
        1. Sort all members by fitness (highest first)
        2. Transfer the 'num_elite' fittest members unchanged
        3. Fill the remaining slots with mutated children: the parents are picked
           by the selection policy, then crossed over

        A species with a single member cannot provide two distinct parents;
        its remaining slots are filled with mutated copies of that member.

        As a precondition for running this method, the fitness of all members
        must have been evaluated.

        Parameters:
            num_offspring: Number of genomes this species should produce
            num_elite:     Number of fittest members copied unchanged
            selection:     Parent selection policy
            disable_prob:  Crossover probability of disabling a gene disabled in either parent
            rng:           Random source of the run

        Returns:
            List of offspring genomes for the next generation
        """

        # Trivial case
        if num_offspring == 0 or not self.members:
            return []

        # Stable sort, so equally fit members keep their order
        sorted_members = sorted(self.members, key=lambda genome: genome.fitness, reverse=True)

        num_elite = min(num_elite, num_offspring, len(sorted_members))
        offspring = [genome.clone() for genome in sorted_members[:num_elite]]

        # The selection policy expects the candidates in ascending fitness order
        ascending = sorted_members[::-1]
        fitnesses = [genome.fitness for genome in ascending]

        if len(ascending) == 1 and len(offspring) < num_offspring:
            logger.debug(f"[Species {self.index}] single member, filling "
                         f"{num_offspring - len(offspring)} slots with mutated copies")

        while len(offspring) < num_offspring:
            if len(ascending) == 1:
                child = ascending[0].clone()
                child.fitness = 0.0
            else:
                idx1, idx2 = selection.select(fitnesses, rng)
                child = crossover(ascending[idx1], ascending[idx2], disable_prob, rng)
            child.mutate()
            offspring.append(child)

        return offspring
