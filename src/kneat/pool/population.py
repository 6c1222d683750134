"""
NEAT Population Module

This module implements the Population class, which holds the genomes of the
current generation and produces the next one.

Classes:
    Population: The genomes of one generation, their species and their reproduction
"""

import numpy as np
from loguru import logger

from kneat.genotype.genome             import Genome
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.pool.selection              import SelectionPolicy, RankSelection
from kneat.pool.species_manager        import SpeciesManager, elite_count
from kneat.run.config                  import Config

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    Public Attributes:
        genomes: List of all Genome objects in the current generation

    Public Methods:
        speciate(initial):        Split the current generation into species
        get_fittest_genome():     Return the genome with highest fitness
        spawn_next_generation():  Replace the population through reproduction
    """

    def __init__(self,
                 config   : Config,
                 tracker  : InnovationTracker,
                 rng      : np.random.Generator,
                 selection: SelectionPolicy | None = None):
        """
        Create 'population_size' fresh genomes.
        The population is not split into species until 'speciate()' is called.

        Parameters:
            config:    Stores configuration parameters
            tracker:   Innovation tracker of the run
            rng:       Random source of the run
            selection: Parent selection policy (rank selection by default)
        """
        self._config    = config
        self._tracker   = tracker
        self._rng       = rng
        self._selection = selection if selection is not None else RankSelection()

        self.genomes: list[Genome] = [Genome(config, tracker, rng) for _ in range(config.population_size)]
        self._species_manager = SpeciesManager(config)

    @property
    def species_manager(self) -> SpeciesManager:
        return self._species_manager

    def speciate(self, initial: bool) -> None:
        """
        Split the current generation into species.

        Parameters:
            initial: cluster from scratch instead of starting from the previous clustering
        """
        self._species_manager.speciate(self.genomes, self._tracker.num_innovations, self._rng, initial)

    def get_fittest_genome(self) -> Genome | None:
        """
        Return the genome with the highest fitness; on ties, the first one.
        """
        if not self.genomes:
            return None
        return max(self.genomes, key=lambda genome: genome.fitness)

    def spawn_next_generation(self) -> None:
        """
        Replace the current generation with its offspring.

        Step 1: Offspring Allocation
        - Each species receives offspring in proportion to its mean fitness
        - Quotas are corrected to add up to exactly the population size

        Step 2: Reproduction
        - Each species copies its fittest members unchanged (elitism)
        - The remaining offspring are created through crossover and mutation

        As a precondition, the population must have been split into species and
        the fitness of all genomes evaluated.
        """
        allocations = self._species_manager.calculate_offspring_allocations()

        offspring_all = []
        for spec, num_offspring in zip(self._species_manager.species, allocations):
            num_elite = elite_count(num_offspring, self._config.elitism_proportion)
            offspring = spec.spawn(num_offspring,
                                   num_elite,
                                   self._selection,
                                   self._config.disable_probability,
                                   self._rng)
            offspring_all.extend(offspring)

        assert len(offspring_all) == self._config.population_size, "Population size changed during reproduction!"
        self.genomes = offspring_all

        logger.debug(f"[Population] spawned {len(self.genomes)} genomes")

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
