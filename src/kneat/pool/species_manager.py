"""
NEAT Species Manager Module

This module implements the SpeciesManager class for the NEAT algorithm.
The manager splits the population into species and decides how many
offspring each species contributes to the next generation.

Speciation by clustering:
Each genome is a point in a space with one coordinate per innovation number
ever issued in the run; the coordinate is the weight of the matching gene, or 0
when the genome lacks it. The points are clustered with k-means into a fixed
number of species. The first clustering starts from scratch; later ones start
from the previous centroids (padded with zeros for the innovations that appeared
in the meantime), so a cluster index keeps designating roughly the same region
of the space from one generation to the next.

Offspring allocation:
Species receive offspring in proportion to the mean fitness of their members.
The rounded quotas are corrected so that they add up to the population size.

Functions:
    build_feature_matrix: Genomes as points in innovation space
    cluster_population:   k-means clustering, optionally warm-started
    allocate_offspring:   Offspring quotas from mean fitnesses
    elite_count:          Number of members copied unchanged

Classes:
    SpeciesManager: Owns the species and the clustering state across generations
"""

import math
import warnings
from typing import Sequence, TYPE_CHECKING

import numpy as np
from loguru             import logger
from sklearn.cluster    import KMeans
from sklearn.exceptions import ConvergenceWarning

from kneat.errors       import DegenerateStateError
from kneat.pool.species import Species
from kneat.run.config   import Config
if TYPE_CHECKING:
    from kneat.genotype.genome import Genome

def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def build_feature_matrix(genomes: Sequence['Genome'], num_innovations: int) -> np.ndarray:
    """
    Build the matrix whose row 'i' holds the weights of genome 'i', indexed by innovation number.

    Parameters:
        genomes:         the genomes to describe
        num_innovations: number of innovation numbers issued so far

    Returns:
        array of shape (len(genomes), num_innovations)
    """
    features = np.zeros((len(genomes), num_innovations))
    for i, genome in enumerate(genomes):
        for gene in genome.conn_genes:
            features[i, gene.innovation] = gene.weight
    return features

def cluster_population(genomes        : Sequence['Genome'],
                       num_species    : int,
                       num_innovations: int,
                       centroids      : np.ndarray | None = None,
                       random_state   : int | None = None) -> tuple[np.ndarray, np.ndarray]:
    """
    Assign each genome to one of 'num_species' species with k-means.

    Parameters:
        genomes:         the genomes to cluster
        num_species:     number of clusters
        num_innovations: number of innovation numbers issued so far
        centroids:       centroids of the previous clustering, None for the initial one
        random_state:    seed for the clustering algorithm

    Returns:
        2-tuple (assignment, centroids): the species index of each genome and the
        new centroids, of shape (num_species, num_innovations)
    """
    features = build_feature_matrix(genomes, num_innovations)

    # Nothing to tell the genomes apart
    if num_species == 1 or num_innovations == 0:
        assignment = np.zeros(len(genomes), dtype=int)
        centroids  = np.zeros((num_species, num_innovations))
        if len(genomes) > 0:
            centroids[0] = features.mean(axis=0)
        return assignment, centroids

    if centroids is None:
        kmeans = KMeans(n_clusters=num_species, n_init=10, random_state=random_state)
    else:
        init = np.zeros((num_species, num_innovations))
        init[:, :centroids.shape[1]] = centroids[:, :num_innovations]
        kmeans = KMeans(n_clusters=num_species, init=init, n_init=1, random_state=random_state)

    # Identical genomes (e.g. right after initialization with few
    # inputs) can yield fewer distinct points than clusters.
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', ConvergenceWarning)
        assignment = kmeans.fit_predict(features)

    return assignment.astype(int), kmeans.cluster_centers_

def allocate_offspring(mean_fitnesses: Sequence[float],
                       pop_size      : int,
                       member_counts : Sequence[int]) -> list[int]:
    """
    Calculate how many offspring each species should produce.

    Each species receives offspring in proportion to its mean fitness, relative
    to the sum of the mean fitnesses of all species. Rounding errors are then
    corrected one offspring at a time, visiting the species in index order
    starting from the first one (and wrapping around), until the quotas add up
    to the population size. Empty species are skipped by the correction, and
    no quota is ever decreased below 0.

    When every species has zero fitness, the population is split evenly among
    the non-empty species.

    Parameters:
        mean_fitnesses: mean fitness of each species
        pop_size:       size of the next generation
        member_counts:  number of members of each species

    Returns:
        the number of offspring of each species

    Raises:
        DegenerateStateError: the total fitness is negative or not finite,
                              or all species are empty
    """
    eligible = [i for i, n in enumerate(member_counts) if n > 0]
    if not eligible:
        raise DegenerateStateError("cannot allocate offspring: all species are empty")

    total_fitness = float(sum(mean_fitnesses))
    if not math.isfinite(total_fitness) or total_fitness < 0:
        raise DegenerateStateError(f"cannot allocate offspring: total mean fitness is {total_fitness}")

    if total_fitness == 0:
        logger.warning("All species have zero fitness, splitting offspring evenly")
        share  = pop_size // len(eligible)
        quotas = [share if i in eligible else 0 for i in range(len(member_counts))]
    else:
        quotas = [max(0, _round_half_up(fitness / total_fitness * pop_size)) for fitness in mean_fitnesses]

    # Correct rounding errors
    delta = pop_size - sum(quotas)
    i = 0
    while delta != 0:
        idx = eligible[i % len(eligible)]
        if delta > 0:
            quotas[idx] += 1
            delta -= 1
        elif quotas[idx] > 0:
            quotas[idx] -= 1
            delta += 1
        i += 1

    return quotas

def elite_count(quota: int, elitism_prop: float) -> int:
    """
    Number of the fittest members a species copies unchanged into the next generation.
    At least one member survives whenever the species receives any offspring.
    """
    if quota < 1:
        return 0
    return min(quota, max(1, _round_half_up(elitism_prop * quota)))

class SpeciesManager:
    """
    Manages the species and the speciation process across generations.

    The manager owns the centroids of the last clustering, which seed the next
    one. Species are rebuilt at every speciation; there are always exactly
    'num_species' of them, some possibly empty.

    Public Attributes:
        species:   List of Species, indexed by cluster
        centroids: Centroids of the last clustering (None before the first one)

    Public Methods:
        speciate(genomes, num_innovations, rng, initial): Assign all genomes to species
        calculate_offspring_allocations():                Determine offspring count per species
    """

    def __init__(self, config: Config):
        """
        Initialize the Species Manager.

        Parameters:
            config: Stores configuration parameters.
        """
        self.species  : list[Species]     = []
        self.centroids: np.ndarray | None = None
        self._config                      = config

    def speciate(self,
                 genomes        : Sequence['Genome'],
                 num_innovations: int,
                 rng            : np.random.Generator,
                 initial        : bool) -> np.ndarray:
        """
        Assign all genomes to species.

        Parameters:
            genomes:         the genomes of the current generation
            num_innovations: number of innovation numbers issued so far
            rng:             random source of the run (seeds the clustering)
            initial:         whether to cluster from scratch rather than
                             starting from the previous centroids

        Returns:
            the species index of each genome
        """
        previous = None if initial else self.centroids
        assignment, self.centroids = cluster_population(genomes,
                                                        self._config.num_species,
                                                        num_innovations,
                                                        previous,
                                                        int(rng.integers(2**31 - 1)))

        self.species = [Species(index) for index in range(self._config.num_species)]
        for genome, index in zip(genomes, assignment):
            self.species[index].members.append(genome)

        logger.debug(f"[SpeciesManager] species sizes: {[len(spec) for spec in self.species]}")

        # Error check: all genomes must have been allocated to a species
        assigned_count = sum(len(spec) for spec in self.species)
        assert assigned_count == len(genomes), "Lost genomes during speciation!"

        return assignment

    def calculate_offspring_allocations(self) -> list[int]:
        """
        Calculate how many offspring each species should produce.

        Returns:
            the number of offspring of each species, indexed like 'self.species'
        """
        allocations = allocate_offspring([spec.mean_fitness() for spec in self.species],
                                         self._config.population_size,
                                         [len(spec) for spec in self.species])
        logger.debug(f"[SpeciesManager] offspring allocations: {allocations}")
        return allocations
