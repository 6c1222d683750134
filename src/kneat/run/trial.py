"""
NEAT Trial Module

This module defines the Trial class, which runs the NEAT algorithm, with
built-in support for CPU-based parallelization of fitness evaluation using joblib.

A trial represents one independent run of the NEAT algorithm, evolving a
population through a fixed number of generations and returning the best
genome of the final population.

Classes:
    TrialState: The stages a trial goes through
    Trial:      One run of the NEAT algorithm
"""

from enum       import Enum
from joblib     import Parallel, delayed
from loguru     import logger
from statistics import mean
from typing     import Protocol

import numpy as np

from kneat.genotype.genome             import Genome
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.pool.population             import Population
from kneat.pool.selection              import SelectionPolicy
from kneat.run.config                  import Config

class Task(Protocol):
    """
    The problem the networks are evolved for.

    IMPORTANT: The fitness must be a positive number (or zero).
    """

    def evaluate(self, genome: Genome) -> float:
        ...

class TrialState(Enum):
    UNINITIALIZED = 'uninitialized'
    INITIALIZED   = 'initialized'
    EVALUATING    = 'evaluating'
    REPRODUCING   = 'reproducing'
    SPECIATING    = 'speciating'
    TERMINATED    = 'terminated'

class Trial:
    """
    One run of the NEAT algorithm.

    The trial owns everything that is specific to a run: the population, the
    innovation tracker and the random source. Two trials never share state, so
    they can be run side by side.

    Each generation:
    1. The mutation buffer of the innovation tracker is cleared
    2. The task evaluates the fitness of every genome
    3. The population reproduces (offspring allocation, elitism, crossover, mutation)
    4. The new population is split into species

    After the last generation the final population is evaluated and
    its fittest genome is returned.

    Public Attributes:
        state:      Current TrialState
        generation: Number of generations completed
        population: The current Population (None before 'run()')

    Public Methods:
        run(): Execute a complete NEAT trial

    Parallelization of fitness evaluation:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self,
                 task     : Task,
                 config   : Config,
                 seed     : int | None = None,
                 selection: SelectionPolicy | None = None):
        """
        Initialize the trial.

        Parameters:
            task:      Evaluates the fitness of a genome
            config:    Configuration parameters
            seed:      Seed of the random source (None for a non-reproducible run)
            selection: Parent selection policy (rank selection by default)

        Raises:
            ConfigurationError: if a configuration parameter is invalid
        """
        config.validate()

        self._task      : Task                   = task
        self._config    : Config                 = config
        self._seed      : int | None             = seed
        self._selection : SelectionPolicy | None = selection
        self._tracker   : InnovationTracker      = InnovationTracker()
        self._rng       : np.random.Generator    = np.random.default_rng(seed)
        self.population : Population | None      = None
        self.generation : int                    = 0
        self.state      : TrialState             = TrialState.UNINITIALIZED

    def run(self, num_jobs: int = 1) -> Genome:
        """
        Run the trial.

        Resets the trial state and runs the evolutionary algorithm
        for the configured number of generations.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes

        Returns:
            The fittest genome of the final population

        Raises:
            ValueError: if num_jobs is 0
        """
        if num_jobs == 0:
            raise ValueError("num_jobs must be 1 (serial), -1 (all cores) or the number of processes, got 0")

        self._reset()

        while self.generation < self._config.max_number_generations:
            self._tracker.clear_buffer()

            self.state = TrialState.EVALUATING
            self._evaluate_fitness_all(num_jobs)
            self._report_progress()

            self.state = TrialState.REPRODUCING
            self.population.spawn_next_generation()

            self.state = TrialState.SPECIATING
            self.population.speciate(initial=False)

            self.generation += 1

        # The offspring of the last generation have not been evaluated yet
        self._evaluate_fitness_all(num_jobs)
        self.state = TrialState.TERMINATED

        best = self.population.get_fittest_genome()
        self._final_report(best)
        return best

    def _reset(self):
        """
        Start a new run: reset innovation numbering and the random
        source, create the initial population and split it into species.
        """
        self._tracker.reset()
        self._rng       = np.random.default_rng(self._seed)
        self.generation = 0

        self.population = Population(self._config, self._tracker, self._rng, self._selection)
        self.population.speciate(initial=True)
        self.state = TrialState.INITIALIZED

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Evaluate the fitness of all genomes in the population.

        Uses serial or parallel evaluation based on num_jobs:
        - num_jobs=1: Sequential evaluation in single process
        - num_jobs>1 or -1: Parallel evaluation using joblib

        In the parallel case workers receive copies of the genomes; the fitness
        values are written back once all evaluations have completed.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
        """
        genomes = self.population.genomes

        if num_jobs == 1:
            for genome in genomes:
                genome.fitness = float(self._task.evaluate(genome))
        else:
            fitness_all = Parallel(num_jobs)(delayed(self._task.evaluate)(g) for g in genomes)
            for genome, fitness in zip(genomes, fitness_all):
                genome.fitness = float(fitness)

    def _report_progress(self):
        """
        Log statistics about the generation just evaluated.
        """
        fitness_all  = [genome.fitness for genome in self.population.genomes]
        species_size = [len(spec) for spec in self.population.species_manager.species]
        logger.info(f"Generation {self.generation:4d}: "
                    f"max fitness {max(fitness_all):+.4f}, mean fitness {mean(fitness_all):+.4f}, "
                    f"species sizes {species_size}")

    def _final_report(self, best: Genome):
        logger.info(f"Trial finished after {self.generation} generations, "
                    f"best fitness {best.fitness:+.4f} with {best.node_count} nodes "
                    f"and {len(best.conn_genes)} connections")
