"""
Genetic Operations Module

Core genetic algorithm operations: crossover and mutation. These are the
fundamental building blocks that drive evolutionary search.

Features:
- Block crossover for chromosomes of different lengths
- Range mutation with user supplied random genes
- Statistics tracking
"""

from typing import Any, List, Sequence, Tuple

from ga_exceptions import CrossoverError, MutationError
from random_source import RandomSource


class GeneticOperations:
    """
    Core genetic operations for the evolution engine.

    Crossover exchanges alternating blocks of random length between two
    parents. Mutation replaces a random range of one chromosome with fresh
    genes from the problem definition.
    """

    def __init__(self, random_source: RandomSource, mutation_probability: float):
        """
        Initialize genetic operations.

        Args:
            random_source: Source of uniform random numbers
            mutation_probability: Probability of mutating a chromosome
        """
        self.random_source = random_source
        self.mutation_probability = mutation_probability

        # Statistics tracking
        self.crossover_count = 0
        self.mutation_count = 0
        self.genes_mutated = 0

    def exchange_positions(self, shortest_length: int) -> List[int]:
        """
        Pick the gene positions swapped by one crossover.

        Cut points are drawn left to right in [index, shortest_length];
        the runs between them are alternately exchanged and kept, starting
        with an exchanged run.

        Args:
            shortest_length: Length of the shorter parent

        Returns:
            Ascending list of positions to exchange
        """
        positions = []
        index = 0
        exchange = True

        while index < shortest_length:
            next_index = self.random_source.uniform(index, shortest_length)
            if exchange:
                positions.extend(range(index, next_index))
            exchange = not exchange
            index = next_index

        return positions

    @staticmethod
    def apply_exchange(parent1: Sequence[Any], parent2: Sequence[Any],
                       positions: Sequence[int]) -> Tuple[List[Any], List[Any]]:
        """
        Swap the genes at the given positions between copies of two parents.

        Applying the same positions twice gives back the original parents.
        """
        child1 = list(parent1)
        child2 = list(parent2)
        for position in positions:
            child1[position], child2[position] = child2[position], child1[position]
        return child1, child2

    def crossover(self, parents: Sequence[Sequence[Any]]) -> Tuple[List[Any], List[Any]]:
        """
        Recombine two parents into two children.

        Only positions below the shorter parent's length can be exchanged,
        so each child keeps the length of its own parent.

        Args:
            parents: Exactly two chromosomes

        Returns:
            Tuple of two children
        """
        if len(parents) != 2:
            raise CrossoverError(f"Crossover needs exactly 2 parents, got {len(parents)}",
                                 parent_count=len(parents))

        parent1, parent2 = parents
        positions = self.exchange_positions(min(len(parent1), len(parent2)))
        self.crossover_count += 1

        return self.apply_exchange(parent1, parent2, positions)

    def mutate(self, chromosome: List[Any], problem) -> bool:
        """
        Mutate a chromosome in place.

        With probability mutation_probability, genes in [begin, end) are
        replaced by new random genes, where begin is drawn from
        [0, length - 1] and end from [begin, length]. The range can be
        empty, and for a length-1 chromosome it always is.

        Args:
            chromosome: Chromosome to mutate
            problem: ProblemDefinition providing random_gene()

        Returns:
            True if a mutation was triggered
        """
        if not chromosome:
            raise MutationError("Cannot mutate an empty chromosome",
                                chromosome_length=0,
                                mutation_probability=self.mutation_probability)

        # Uniform in (0, 1] so probability 0 never mutates and 1 always does
        draw = 1.0 - self.random_source.random()
        if draw > self.mutation_probability:
            return False

        length = len(chromosome)
        if length == 1:
            begin = end = 0
        else:
            begin = self.random_source.uniform(0, length - 1)
            end = self.random_source.uniform(begin, length)

        for i in range(begin, end):
            chromosome[i] = problem.random_gene()

        self.mutation_count += 1
        self.genes_mutated += end - begin
        return True

    def get_statistics(self) -> dict:
        """Get statistics about genetic operations performed."""
        return {
            'crossover_count': self.crossover_count,
            'mutation_count': self.mutation_count,
            'genes_mutated': self.genes_mutated
        }

    def reset_statistics(self):
        """Reset operation counters."""
        self.crossover_count = 0
        self.mutation_count = 0
        self.genes_mutated = 0
