"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Run-scoped tracker for innovation numbers
"""

from itertools import count

class InnovationTracker:
    """
    Hands out innovation numbers for the connection genes created during one run.

    Innovation numbers are strictly increasing and never reused within a run.
    Structural changes that happen more than once in the same generation (the
    same connection added, or the same connection split, by different genomes)
    receive the same innovation numbers; this is remembered in a mutation buffer
    which is emptied at the start of each generation.

    A tracker is owned by the Trial running the evolution and passed to every
    genome it creates, so independent runs never share innovation state.

    Public Properties:
        num_innovations: how many innovation numbers have been issued so far

    Public Methods:
        reset():                                         Start a new run
        clear_buffer():                                  Start a new generation
        get_innovation_number(node_in, node_out):        Innovation number for a new connection
        get_split_innovations(innovation, new_node_id):  Innovation numbers for a connection split
    """

    def __init__(self):
        self._counter    = count(0)
        self._num_issued = 0

        # (node_in, node_out) -> innovation number
        self._connection_buffer: dict[tuple[int, int], int] = {}

        # (split innovation number, new node ID) -> (innovation1, innovation2)
        self._split_buffer: dict[tuple[int, int], tuple[int, int]] = {}

    @property
    def num_innovations(self) -> int:
        return self._num_issued

    def reset(self) -> None:
        """
        Restart numbering from 0 and forget all previous structural changes.
        """
        self._counter    = count(0)
        self._num_issued = 0
        self.clear_buffer()

    def clear_buffer(self) -> None:
        """
        Forget the structural changes recorded during the current generation.
        """
        self._connection_buffer = {}
        self._split_buffer      = {}

    def _next(self) -> int:
        self._num_issued += 1
        return next(self._counter)

    def get_innovation_number(self, node_in: int, node_out: int) -> int:
        """
        Get the innovation number for a connection, identified by its endpoints.
        Returns the number assigned to the same connection earlier in this
        generation, otherwise assigns a new one.

        Parameters:
            node_in:  node ID for the 'from' end of the connection
            node_out: node ID for the 'to'   end of the connection

        Returns:
            connection ID (a.k.a. innovation number)
        """
        key = (node_in, node_out)
        if key not in self._connection_buffer:
            self._connection_buffer[key] = self._next()
        return self._connection_buffer[key]

    def get_split_innovations(self, split_innovation: int, new_node_id: int) -> tuple[int, int]:
        """
        Get the innovation numbers of the two connections which replace a split connection.

        Parameters:
            split_innovation: innovation number of the connection being split
            new_node_id:      ID of the node inserted in the middle of the connection

        Returns:
            2-tuple (innovation1, innovation2): innovation1 is for the connection
            entering the new node, innovation2 for the one leaving it
        """
        key = (split_innovation, new_node_id)
        if key not in self._split_buffer:
            self._split_buffer[key] = (self._next(), self._next())
        return self._split_buffer[key]
