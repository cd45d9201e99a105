"""
Population Management Module

Handles random chromosome creation, population initialization and the
assembly of the next generation from selected parents.

Features:
- Random chromosomes within configured length bounds
- Initial population seeding
- Selection and pairing rounds for the next population
- Population statistics
"""

from typing import Any, List

from ga_constants import GAConstants
from ga_components.genetic_operations import GeneticOperations
from ga_components.scored_population import ScoredPopulation
from ga_components.selection import SelectionStrategy
from random_source import RandomSource


class PopulationManager:
    """
    Manages population-level operations for the evolution engine.

    The population size is a target: a pairing round appends every pair it
    can form, so the next population may overshoot the target by the size
    of one round.
    """

    def __init__(self, problem, random_source: RandomSource, population_size: int,
                 min_chromosome_size: int, max_chromosome_size: int):
        """
        Initialize population manager.

        Args:
            problem: ProblemDefinition providing random_gene()
            random_source: Source of uniform random numbers
            population_size: Target population size
            min_chromosome_size: Minimum length of a new chromosome
            max_chromosome_size: Maximum length of a new chromosome
        """
        self.problem = problem
        self.random_source = random_source
        self.population_size = population_size
        self.min_chromosome_size = min_chromosome_size
        self.max_chromosome_size = max_chromosome_size

        # Statistics
        self.stats = {
            'chromosomes_created': 0,
            'populations_initialized': 0,
            'selection_rounds': 0,
            'discarded_selections': 0
        }

    def random_chromosome(self) -> List[Any]:
        """Create a chromosome of random length filled with random genes."""
        size = self.random_source.uniform(self.min_chromosome_size, self.max_chromosome_size)
        self.stats['chromosomes_created'] += 1
        return [self.problem.random_gene() for _ in range(size)]

    def initialize_population(self) -> List[List[Any]]:
        """
        Initialize a random population.

        Returns:
            List of population_size chromosomes
        """
        population = [self.random_chromosome() for _ in range(self.population_size)]
        self.stats['populations_initialized'] += 1
        return population

    def build_next_population(self, scored_population: ScoredPopulation,
                              selection: SelectionStrategy,
                              operations: GeneticOperations) -> List[List[Any]]:
        """
        Breed the next population from a scored generation.

        Each round draws selections until at least two chromosomes are
        buffered, then crosses them in disjoint pairs. An odd chromosome
        left at the end of a round is dropped.

        Args:
            scored_population: Current generation
            selection: Strategy used to draw parents
            operations: Crossover operator

        Returns:
            Unmutated next population
        """
        population = []

        while len(population) < self.population_size:
            selected = []
            while len(selected) < GAConstants.MIN_PARENTS_FOR_CROSSOVER:
                selected.extend(selection.select(scored_population))
            self.stats['selection_rounds'] += 1

            for i in range(len(selected) // 2):
                children = operations.crossover((selected[2 * i], selected[2 * i + 1]))
                population.extend(children)

            self.stats['discarded_selections'] += len(selected) % 2

        return population

    def get_statistics(self) -> dict:
        """Get population statistics."""
        return self.stats.copy()
