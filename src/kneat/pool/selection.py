"""
NEAT Selection Module

This module implements the parent selection policies used during reproduction.

Classes:
    SelectionPolicy: Abstract base class for parent selection
    RankSelection:   Linear rank-based selection
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from kneat.errors import DegenerateStateError

class SelectionPolicy(ABC):
    """
    Picks two distinct parents from a collection of candidates sorted by
    ascending fitness (the last candidate is the fittest).
    """

    @abstractmethod
    def select(self, fitnesses: Sequence[float], rng: np.random.Generator) -> tuple[int, int]:
        """
        Parameters:
            fitnesses: candidate fitnesses, in ascending order
            rng:       random source of the run

        Returns:
            indices of the two (distinct) selected candidates
        """
        pass

class RankSelection(SelectionPolicy):
    """
    Rank selection: each candidate is accepted with a probability depending only
    on its rank. With N candidates and rank 1 for the fittest one, the candidate
    of rank r is accepted with probability 2 * (N - r + 1) / (N * (N + 1)).

    Candidates are visited cyclically, starting from the least fit one, until one
    is accepted. The second parent is drawn the same way, skipping the first one.
    Both draws give up after 'max_cycles' full passes over the candidates.
    """

    def __init__(self, max_cycles: int = 10000):
        self._max_cycles = max_cycles

    @staticmethod
    def probability(pos: int, size: int) -> float:
        """
        Acceptance probability of the candidate at position 'pos' of an
        ascending fitness vector of length 'size'.
        """
        return 2.0 * (pos + 1) / (size * (size + 1))

    def select(self, fitnesses: Sequence[float], rng: np.random.Generator) -> tuple[int, int]:
        size = len(fitnesses)
        if size < 2:
            raise DegenerateStateError(f"rank selection needs at least 2 candidates, got {size}")

        first  = self._draw(size, rng, exclude=None)
        second = self._draw(size, rng, exclude=first)
        return first, second

    def _draw(self, size: int, rng: np.random.Generator, exclude: int | None) -> int:
        for _ in range(self._max_cycles):
            for pos in range(size):
                if pos == exclude:
                    continue
                if rng.random() < self.probability(pos, size):
                    return pos

        raise DegenerateStateError(f"rank selection accepted no candidate in {self._max_cycles} cycles")
