"""
Problem Definition Interface

A problem supplies the domain semantics the engine is generic over:
how to draw a random gene, how to score a chromosome and, optionally,
how to print one.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from random_source import RandomSource


class ProblemDefinition(ABC):
    """
    Base class for user problems.

    Subclasses implement random_gene() and score(). random_gene() may be
    called from a background run and from caller code at the same time.
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.random_source = random_source or RandomSource()

    @abstractmethod
    def random_gene(self) -> Any:
        """Generate a random gene."""

    @abstractmethod
    def score(self, chromosome: Sequence[Any]) -> float:
        """Compute the fitness score of a chromosome; higher is better."""

    def print_chromosome(self, chromosome: Sequence[Any]) -> str:
        """Chromosome to string, empty by default."""
        return ""


class FunctionProblem(ProblemDefinition):
    """Problem definition assembled from plain callables."""

    def __init__(self, random_gene: Callable[[], Any],
                 score: Callable[[Sequence[Any]], float],
                 printer: Optional[Callable[[Sequence[Any]], str]] = None,
                 random_source: Optional[RandomSource] = None):
        super().__init__(random_source)
        self._random_gene = random_gene
        self._score = score
        self._printer = printer

    def random_gene(self) -> Any:
        return self._random_gene()

    def score(self, chromosome: Sequence[Any]) -> float:
        return self._score(chromosome)

    def print_chromosome(self, chromosome: Sequence[Any]) -> str:
        if self._printer is None:
            return ""
        return self._printer(chromosome)
