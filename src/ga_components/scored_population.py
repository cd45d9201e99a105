"""
Scored Population Module

One generation's chromosomes ordered by ascending fitness score. The
structure is rebuilt from scratch every generation and is read-only
once built.

Features:
- Stable ascending order (equal scores keep insertion order)
- Constant-time access to the best chromosome
- Cumulative-fitness lookup for proportional selection
- Rank lookup for tournament selection
"""

from typing import Any, Iterator, List, Sequence, Tuple

from ga_exceptions import PopulationError, validate_fitness


class ScoredPopulation:
    """
    Ascending multi-map from fitness score to chromosome.

    Lookups that fall outside the population return the best chromosome
    instead of raising. Every chromosome handed out is a copy, so parents
    stay intact while children are built from them.
    """

    def __init__(self, scored_chromosomes: Sequence[Tuple[float, List[Any]]]):
        """
        Build from (score, chromosome) pairs.

        Args:
            scored_chromosomes: Pairs in insertion order; must not be empty
        """
        if not scored_chromosomes:
            raise PopulationError("Cannot build a scored population from an empty population")

        ordered = sorted(scored_chromosomes, key=lambda pair: pair[0])
        self._scores = [score for score, _ in ordered]
        self._chromosomes = [chromosome for _, chromosome in ordered]
        self._total_score = sum(self._scores)

    @classmethod
    def from_population(cls, population: Sequence[List[Any]], problem) -> 'ScoredPopulation':
        """
        Score every chromosome of a population.

        Args:
            population: Chromosomes of the generation
            problem: ProblemDefinition providing score()

        Returns:
            A freshly built ScoredPopulation

        Raises:
            InvalidFitnessError: If a score is not a real number
        """
        scored = []
        for chromosome in population:
            score = validate_fitness(problem.score(chromosome), len(chromosome))
            scored.append((score, list(chromosome)))
        return cls(scored)

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[Tuple[float, List[Any]]]:
        """Iterate over (score, chromosome copy) pairs in ascending order."""
        for score, chromosome in zip(self._scores, self._chromosomes):
            yield score, list(chromosome)

    def best(self) -> Tuple[float, List[Any]]:
        """Return (score, chromosome) of the highest scoring element."""
        return self._scores[-1], list(self._chromosomes[-1])

    def best_score(self) -> float:
        return self._scores[-1]

    def worst_score(self) -> float:
        return self._scores[0]

    def average_score(self) -> float:
        return self._total_score / len(self._scores)

    def total_score(self) -> float:
        """Sum of all scores; can be zero or negative."""
        return self._total_score

    def scores(self) -> List[float]:
        """All scores in ascending order."""
        return list(self._scores)

    def score_at_rank(self, index: int) -> float:
        """
        Score at an ascending position.

        Out of range indices give the best score.
        """
        if 0 <= index < len(self._scores):
            return self._scores[index]
        return self._scores[-1]

    def chromosome_at_rank(self, index: int) -> List[Any]:
        """
        Chromosome at an ascending position.

        Out of range indices give the best chromosome.
        """
        if 0 <= index < len(self._chromosomes):
            return list(self._chromosomes[index])
        return list(self._chromosomes[-1])

    def rank_at_cumulative_fitness(self, target: float) -> int:
        """
        First ascending position whose running score sum reaches target.

        Returns the index of the best element when target lies beyond the
        total score.
        """
        cumulative_fitness = 0.0
        for index, score in enumerate(self._scores):
            cumulative_fitness += score
            if target <= cumulative_fitness:
                return index
        return len(self._scores) - 1

    def chromosome_at_cumulative_fitness(self, target: float) -> List[Any]:
        """Chromosome whose cumulative fitness first reaches target."""
        return list(self._chromosomes[self.rank_at_cumulative_fitness(target)])
