"""
NEAT Connection Gene Module

This module implements the ConnectionGene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    ConnectionGene: Gene encoding a weighted connection between nodes
"""

import numpy as np

class ConnectionGene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each connection gene represents a directed edge in the neural network graph,
    connecting a source node to a destination node with an associated weight.
    Connection genes are uniquely identified by their innovation number, which
    serves as a historical marker enabling gene alignment during crossover and
    which is also the coordinate of the gene in the speciation feature space.

    The identity of a gene (innovation number and end points) never changes;
    only its weight and its enabled status can be modified.

    Public Attributes:
        weight:     Weight of the connection
        enabled:    Whether this connection is active in the network

    Public Properties:
        innovation: Innovation number uniquely identifying this connection
        node_in:    ID of the source node
        node_out:   ID of the destination node

    Public Methods:
        copy():                  Return an independent copy of the gene
        perturb(strength, rng):  Add Gaussian noise to the weight
    """

    __slots__ = ('_innovation', '_node_in', '_node_out', 'weight', 'enabled')

    def __init__(self,
                 innovation: int,
                 node_in   : int,
                 node_out  : int,
                 weight    : float,
                 enabled   : bool = True):
        """
        Initialize a connection gene.

        Parameters:
            innovation: Number uniquely and globally identifying this connection
            node_in:    ID of the source node
            node_out:   ID of the destination node
            weight:     Weight of the connection
            enabled:    Whether this connection is active in the network
        """
        self._innovation: int   = innovation
        self._node_in   : int   = node_in
        self._node_out  : int   = node_out
        self.weight     : float = weight
        self.enabled    : bool  = enabled

    @property
    def innovation(self) -> int:
        return self._innovation

    @property
    def node_in(self) -> int:
        return self._node_in

    @property
    def node_out(self) -> int:
        return self._node_out

    def copy(self) -> 'ConnectionGene':
        return ConnectionGene(self._innovation, self._node_in, self._node_out, self.weight, self.enabled)

    def perturb(self, strength: float, rng: np.random.Generator) -> None:
        """
        Modify the weight additively by a value drawn from a zero-centered normal distribution.

        Parameters:
            strength: standard deviation of the perturbation
            rng:      random source of the run
        """
        self.weight += float(rng.normal(0.0, strength))

    def __eq__(self, other):
        if not isinstance(other, ConnectionGene):
            return NotImplemented
        return (self._innovation == other._innovation and
                self._node_in    == other._node_in    and
                self._node_out   == other._node_out   and
                self.weight      == other.weight      and
                self.enabled     == other.enabled)

    __hash__ = None

    def __repr__(self):
        return (f"ConnectionGene(innovation={self._innovation:03d}, node_in={self._node_in:03d}, "
                f"node_out={self._node_out:03d}, weight={self.weight:+.6f}, enabled={self.enabled})")

    def __str__(self):
        s  = f"[{self._innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self._node_in:02d}=>{self._node_out:02d},{self.weight:+.02f}]"
        return s
