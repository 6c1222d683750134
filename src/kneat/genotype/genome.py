"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    TopologyMode: Whether a genome describes an acyclic or a cyclic network
    Genome:       Genome representing a neural network structure
"""

from enum import Enum

import numpy as np

from kneat.genotype.connection_gene    import ConnectionGene
from kneat.genotype.innovation_tracker import InnovationTracker
from kneat.run.config                  import Config

class TopologyMode(Enum):
    ACYCLIC = 'acyclic'
    CYCLIC  = 'cyclic'

class Genome:
    """
    A NEAT genome representing a neural network as a list of connection genes.

    The genome stores its connection genes in ascending innovation order. Nodes are
    not stored explicitly: they are numbered from 0 to 'node_count - 1', and new
    nodes always receive the next free number.

    Node numbering convention:
        - Input nodes:  [0, num_inputs)
        - Bias node:    num_inputs
        - Output nodes: [num_inputs + 1, num_inputs + 1 + num_outputs)
        - Hidden nodes: [num_inputs + 1 + num_outputs, node_count)

    In acyclic mode the genome also keeps a depth for every node (the length of
    the longest path reaching it). A connection may only go from a shallower to
    a deeper node, which keeps the network graph a DAG.

    A genome shares with every other genome of the run the configuration (the
    mutation hyperparameters), the innovation tracker and the random source.

    Public Attributes:
        conn_genes:  Connection genes, in ascending innovation order
        node_count:  Number of nodes in the network
        node_depths: Depth of each node (acyclic mode only, otherwise None)
        fitness:     Fitness assigned by the last evaluation

    Public Properties:
        topology_mode: TopologyMode.ACYCLIC or TopologyMode.CYCLIC
        num_inputs, num_outputs, bias_node, output_nodes

    Public Methods:
        clone():  Independent copy of the genome (same fitness)
        mutate(): Apply all possible mutation operations stochastically

    Class Methods:
        from_genes(...): Build a genome from an explicit list of genes
    """

    def __init__(self, config: Config, tracker: InnovationTracker, rng: np.random.Generator):
        """
        Initialize a genome in which every input node and the bias
        node are connected to every output node.

        Parameters:
            config:  Stores configuration parameters
            tracker: Innovation tracker of the run
            rng:     Random source of the run
        """
        self._config  = config
        self._tracker = tracker
        self._rng     = rng

        self.fitness   : float = 0.0
        self.node_count: int   = config.num_inputs + 1 + config.num_outputs
        self.conn_genes: list[ConnectionGene] = []

        for node_in in range(config.num_inputs + 1):
            for node_out in self.output_nodes:
                innovation = tracker.get_innovation_number(node_in, node_out)
                weight     = float(rng.uniform(-1.0, 1.0))
                self.conn_genes.append(ConnectionGene(innovation, node_in, node_out, weight))

        self.node_depths: list[int] | None = None
        if config.acyclic:
            self._update_depths()

    @classmethod
    def from_genes(cls,
                   config     : Config,
                   tracker    : InnovationTracker,
                   rng        : np.random.Generator,
                   conn_genes : list[ConnectionGene],
                   node_count : int,
                   node_depths: list[int] | None = None) -> 'Genome':
        """
        Create a genome from a list of connection genes.

        The genes are used as given (not copied). In acyclic mode the node
        depths are computed from the genes when they are not provided.

        Parameters:
            config:      Stores configuration parameters
            tracker:     Innovation tracker of the run
            rng:         Random source of the run
            conn_genes:  Connection genes, in ascending innovation order
            node_count:  Number of nodes in the network
            node_depths: Depth of each node (acyclic mode only)

        Returns:
            A new Genome with fitness 0
        """
        genome = cls.__new__(cls)
        genome._config     = config
        genome._tracker    = tracker
        genome._rng        = rng
        genome.fitness     = 0.0
        genome.node_count  = node_count
        genome.conn_genes  = conn_genes
        genome.node_depths = None

        if config.acyclic:
            if node_depths is not None:
                genome.node_depths = list(node_depths)
            else:
                genome._update_depths()

        return genome

    @property
    def topology_mode(self) -> TopologyMode:
        return TopologyMode.ACYCLIC if self._config.acyclic else TopologyMode.CYCLIC

    @property
    def num_inputs(self) -> int:
        return self._config.num_inputs

    @property
    def num_outputs(self) -> int:
        return self._config.num_outputs

    @property
    def bias_node(self) -> int:
        return self._config.num_inputs

    @property
    def output_nodes(self) -> range:
        first = self._config.num_inputs + 1
        return range(first, first + self._config.num_outputs)

    @property
    def innovations(self) -> list[int]:
        return [gene.innovation for gene in self.conn_genes]

    def derive(self,
               conn_genes : list[ConnectionGene],
               node_count : int,
               node_depths: list[int] | None = None) -> 'Genome':
        """
        Create a new genome from the given genes, sharing the configuration,
        tracker and random source of this genome.
        """
        return Genome.from_genes(self._config, self._tracker, self._rng, conn_genes, node_count, node_depths)

    def clone(self) -> 'Genome':
        """
        Return a copy of this genome that can be modified independently.
        The configuration, tracker and random source are shared, not copied.
        """
        genome = self.derive([gene.copy() for gene in self.conn_genes], self.node_count, self.node_depths)
        genome.fitness = self.fitness
        return genome

    def mutate(self) -> None:
        """
        Apply to the current genome all possible mutation operations.

        The list of possible mutations is:
          + perturb connection weights (bias connections use their own parameters)
          + add a node, by splitting an existing connection
          + add a connection
        Each mutation occurs randomly with a given probability.
        """
        for gene in self.conn_genes:
            if gene.node_in == self.bias_node:
                if self._rng.random() < self._config.bias_mutation_prob:
                    gene.perturb(self._config.bias_mutation_size, self._rng)
            elif self._rng.random() < self._config.weight_mutation_prob:
                gene.perturb(self._config.weight_mutation_size, self._rng)

        if self._rng.random() < self._config.node_addition_prob:
            self._mutate_add_node()

        if self._rng.random() < self._config.connection_addition_prob:
            self._mutate_add_connection()

    def _mutate_add_node(self) -> None:
        """
        Split a random enabled connection by adding a new node.

        The split connection is disabled and replaced by two new connections:
        'node_in -> new node' with weight 1.0 and 'new node -> node_out' with
        the weight of the split connection.
        """
        enabled_genes = [gene for gene in self.conn_genes if gene.enabled]
        if not enabled_genes:
            return
        split_gene = enabled_genes[self._rng.integers(len(enabled_genes))]
        split_gene.enabled = False

        new_node_id    = self.node_count
        innov1, innov2 = self._tracker.get_split_innovations(split_gene.innovation, new_node_id)
        self.node_count += 1

        self.conn_genes.append(ConnectionGene(innov1, split_gene.node_in, new_node_id, 1.0))
        self.conn_genes.append(ConnectionGene(innov2, new_node_id, split_gene.node_out, split_gene.weight))

        if self.node_depths is not None:
            self._update_depths()

    def _mutate_add_connection(self) -> None:
        """
        Add a new connection between two existing nodes.

        The nodes at the two ends of the new connection are selected at random,
        however we cannot add a connection:
         + ending at an input or at the bias node
         + between two nodes already connected by a direct connection
         + (acyclic mode) starting at an output node
         + (acyclic mode) from a node which is not shallower than its destination

        The method gives up after a maximum number of failed attempts.
        """
        connected_nodes = {(gene.node_in, gene.node_out) for gene in self.conn_genes}
        first_output    = self.num_inputs + 1

        NUM_ATTEMPTS = 20
        for _ in range(NUM_ATTEMPTS):
            node_in  = int(self._rng.integers(self.node_count))
            node_out = int(self._rng.integers(first_output, self.node_count))

            if (node_in, node_out) in connected_nodes:
                continue
            if self.node_depths is not None:
                if node_in in self.output_nodes:
                    continue
                if self.node_depths[node_in] >= self.node_depths[node_out]:
                    continue

            innovation = self._tracker.get_innovation_number(node_in, node_out)
            weight     = float(self._rng.uniform(-1.0, 1.0))
            self.conn_genes.append(ConnectionGene(innovation, node_in, node_out, weight))

            # The innovation number may have been issued earlier in this
            # generation, before the ones this genome just got from a split.
            self.conn_genes.sort(key=lambda gene: gene.innovation)

            if self.node_depths is not None:
                self._update_depths()
            break

    def _update_depths(self) -> None:
        """
        Recompute the depth of every node as the length of the longest
        path reaching it. Nodes without incoming connections have depth 0,
        output nodes have depth at least 1.
        Disabled connections are considered too, since they may be re-enabled.
        """
        successors = [[] for _ in range(self.node_count)]
        in_degree  = [0] * self.node_count
        for gene in self.conn_genes:
            successors[gene.node_in].append(gene.node_out)
            in_degree[gene.node_out] += 1

        depths = [0] * self.node_count
        for node in self.output_nodes:
            depths[node] = 1

        # Kahn's algorithm, relaxing depths in topological order
        ready = [node for node in range(self.node_count) if in_degree[node] == 0]
        while ready:
            node = ready.pop()
            for succ in successors[node]:
                depths[succ] = max(depths[succ], depths[node] + 1)
                in_degree[succ] -= 1
                if in_degree[succ] == 0:
                    ready.append(succ)

        self.node_depths = depths

    def __str__(self):
        conn_genes_str = ''.join(str(gene) for gene in self.conn_genes)
        return f"Nodes: {self.node_count} Fitness: {self.fitness:+.4f}\nConns: {conn_genes_str}"
