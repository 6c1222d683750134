"""
NEAT Crossover Module

This module implements the two crossover operators used to produce
a child genome from two parent genomes.

Functions:
    crossover_dominant: Child built on the genes of the fitter parent
    crossover_merge:    Child built by merging the genes of both parents
    crossover:          Pick the operator suited to the parents
"""

import numpy as np

from kneat.genotype.genome import Genome, TopologyMode

# Parents whose fitness differs by less than this are considered equally fit.
FITNESS_TIE_TOLERANCE = 0.001

def is_tied(parent1: Genome, parent2: Genome) -> bool:
    return abs(parent1.fitness - parent2.fitness) < FITNESS_TIE_TOLERANCE

def crossover_dominant(parent1     : Genome,
                       parent2     : Genome,
                       disable_prob: float,
                       rng         : np.random.Generator) -> Genome:
    """
    Crossover in which the child inherits the structure of the fitter parent.

    The fitter parent (chosen at random when both are equally fit) is the base:
    the child receives a copy of all its genes, its node count and (in acyclic
    mode) its node depths. For every gene the other parent shares with the base:
     + if the gene is disabled in either parent, the child's copy is disabled
       with probability 'disable_prob' and enabled otherwise
     + with probability 0.5 the child takes the weight from the other parent
    Genes present only in the less fit parent are not inherited.

    Parameters:
        parent1:      first parent
        parent2:      second parent
        disable_prob: probability of disabling a gene which is disabled in either parent
        rng:          random source of the run

    Returns:
        the child genome
    """
    if is_tied(parent1, parent2):
        base, other = (parent1, parent2) if rng.random() < 0.5 else (parent2, parent1)
    elif parent1.fitness > parent2.fitness:
        base, other = parent1, parent2
    else:
        base, other = parent2, parent1

    child_genes = [gene.copy() for gene in base.conn_genes]
    position    = {gene.innovation: i for i, gene in enumerate(child_genes)}

    # Matching genes
    for other_gene in other.conn_genes:
        i = position.get(other_gene.innovation)
        if i is None:
            continue
        child_gene = child_genes[i]

        if not child_gene.enabled or not other_gene.enabled:
            child_gene.enabled = not (rng.random() < disable_prob)

        if rng.random() < 0.5:
            child_gene.weight = other_gene.weight

    return base.derive(child_genes, base.node_count, base.node_depths)

def crossover_merge(parent1: Genome, parent2: Genome, rng: np.random.Generator) -> Genome:
    """
    Crossover in which the child draws genes from both parents.

    Walks both gene lists (sorted by innovation number) at once:
     + matching genes are inherited from a parent chosen at random
     + genes present in only one parent are inherited with probability 0.5,
       including the excess genes at the end of the longer list
    The child's node count is the larger of the parents' node counts.

    Parameters:
        parent1: first parent
        parent2: second parent
        rng:     random source of the run

    Returns:
        the child genome
    """
    if len(parent1.conn_genes) >= len(parent2.conn_genes):
        max_genes, min_genes = parent1.conn_genes, parent2.conn_genes
    else:
        max_genes, min_genes = parent2.conn_genes, parent1.conn_genes

    child_genes = []
    i = j = 0
    while i < len(max_genes) and j < len(min_genes):
        max_gene = max_genes[i]
        min_gene = min_genes[j]

        if min_gene.innovation < max_gene.innovation:
            if rng.random() < 0.5:
                child_genes.append(min_gene.copy())
            j += 1

        elif min_gene.innovation == max_gene.innovation:
            child_genes.append((min_gene if rng.random() < 0.5 else max_gene).copy())
            i += 1
            j += 1

        else:
            if rng.random() < 0.5:
                child_genes.append(max_gene.copy())
            i += 1

    # Excess genes
    for gene in max_genes[i:] + min_genes[j:]:
        if rng.random() < 0.5:
            child_genes.append(gene.copy())

    node_count = max(parent1.node_count, parent2.node_count)
    return parent1.derive(child_genes, node_count)

def crossover(parent1     : Genome,
              parent2     : Genome,
              disable_prob: float,
              rng         : np.random.Generator) -> Genome:
    """
    Produce a child from two parents.

    Acyclic genomes always use the dominant-parent crossover, which keeps the
    child a DAG. Cyclic genomes use it too unless the parents are equally fit,
    in which case their genes are merged.

    Parameters:
        parent1:      first parent
        parent2:      second parent
        disable_prob: probability of disabling a gene which is disabled in either parent
        rng:          random source of the run

    Returns:
        the child genome
    """
    if parent1.topology_mode == TopologyMode.ACYCLIC or not is_tied(parent1, parent2):
        return crossover_dominant(parent1, parent2, disable_prob, rng)
    return crossover_merge(parent1, parent2, rng)
