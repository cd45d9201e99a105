"""
Selection Methods Module

Implements the selection strategies used to pick parent chromosomes
from a scored population.

Features:
- Roulette wheel (fitness-proportionate) selection
- Stochastic universal sampling (several evenly spaced picks per call)
- Tournament selection with replacement
- Selection statistics tracking

Proportional strategies assume a positive total score. With zero or
negative totals they keep returning chromosomes but the preference order
is meaningless; tournament selection is the right choice for such
problems.
"""

from typing import Any, List

from ga_config import GAConfig, SelectionType, resolve_selection_type
from ga_constants import GAConstants
from ga_exceptions import ConfigurationError, SelectionError
from ga_components.scored_population import ScoredPopulation
from random_source import RandomSource


class SelectionStrategy:
    """
    Base class for selection strategies.

    Strategies only read the scored population and return one or more
    chromosome copies per call.
    """

    selection_type: SelectionType = None

    def __init__(self, random_source: RandomSource):
        self.random_source = random_source

        # Statistics tracking
        self.selection_stats = {
            'selections_made': 0,
            'chromosomes_selected': 0
        }

    def select(self, scored_population: ScoredPopulation) -> List[List[Any]]:
        """
        Select chromosomes for recombination.

        Args:
            scored_population: Current generation, read only

        Returns:
            Non-empty list of selected chromosomes
        """
        if len(scored_population) == 0:
            raise SelectionError("Cannot select from an empty population",
                                 population_size=0,
                                 selection_type=self._type_name())

        selected = self._select(scored_population)

        self.selection_stats['selections_made'] += 1
        self.selection_stats['chromosomes_selected'] += len(selected)
        return selected

    def _select(self, scored_population: ScoredPopulation) -> List[List[Any]]:
        raise NotImplementedError

    def _type_name(self) -> str:
        return self.selection_type.value if self.selection_type else type(self).__name__

    def get_statistics(self) -> dict:
        """Get selection statistics."""
        stats = self.selection_stats.copy()
        stats['selection_type'] = self._type_name()
        return stats

    def reset_statistics(self):
        """Reset selection statistics."""
        self.selection_stats = {
            'selections_made': 0,
            'chromosomes_selected': 0
        }


class RouletteWheelSelection(SelectionStrategy):
    """
    Fitness-proportionate selection.

    Spins a wheel whose slots are as wide as each chromosome's score and
    returns the single chromosome it stops on.
    """

    selection_type = SelectionType.ROULETTE_WHEEL

    def _select(self, scored_population: ScoredPopulation) -> List[List[Any]]:
        # Draw in [0, total)
        selection_point = self.random_source.random() * scored_population.total_score()
        return [scored_population.chromosome_at_cumulative_fitness(selection_point)]


class StochasticUniversalSelection(SelectionStrategy):
    """
    Stochastic universal sampling.

    Picks a random number of chromosomes at evenly spaced positions along
    the cumulative fitness range, so weaker chromosomes keep a fair chance
    of being selected.
    """

    selection_type = SelectionType.STOCHASTIC_UNIVERSAL

    def _select(self, scored_population: ScoredPopulation) -> List[List[Any]]:
        total_score = scored_population.total_score()
        max_picks = max(1, len(scored_population) // GAConstants.SUS_POPULATION_DIVISOR)
        picks = self.random_source.uniform(1, max_picks)

        spacing = total_score / picks
        start = self.random_source.random() * spacing

        selected = []
        for i in range(picks):
            position = start + i * spacing
            # The first pick is always kept so degenerate totals still select
            if i and position > total_score:
                break
            selected.append(scored_population.chromosome_at_cumulative_fitness(position))
        return selected


class TournamentSelection(SelectionStrategy):
    """
    Tournament selection.

    Draws tournament_size ranks with replacement and keeps the one with the
    strictly highest score; the first drawn wins ties.
    """

    selection_type = SelectionType.TOURNAMENT

    def __init__(self, random_source: RandomSource,
                 tournament_size: int = GAConstants.DEFAULT_TOURNAMENT_SIZE):
        super().__init__(random_source)
        if tournament_size < 1:
            raise ConfigurationError(f"Tournament size ({tournament_size}) must be at least 1")
        self.tournament_size = tournament_size
        self.selection_stats['tournaments_held'] = 0

    def _select(self, scored_population: ScoredPopulation) -> List[List[Any]]:
        last_rank = len(scored_population) - 1
        tournament = [self.random_source.uniform(0, last_rank)
                      for _ in range(self.tournament_size)]

        best_rank = tournament[0]
        best_score = scored_population.score_at_rank(best_rank)
        for rank in tournament[1:]:
            score = scored_population.score_at_rank(rank)
            if score > best_score:
                best_rank = rank
                best_score = score

        self.selection_stats['tournaments_held'] += 1
        return [scored_population.chromosome_at_rank(best_rank)]

    def reset_statistics(self):
        super().reset_statistics()
        self.selection_stats['tournaments_held'] = 0


def create_selection_strategy(config: GAConfig, random_source: RandomSource) -> SelectionStrategy:
    """
    Build the selection strategy named by a configuration.

    Raises:
        ConfigurationError: If the selection type is unknown
    """
    selection_type = resolve_selection_type(config.selection_type)

    if selection_type is SelectionType.ROULETTE_WHEEL:
        return RouletteWheelSelection(random_source)
    if selection_type is SelectionType.STOCHASTIC_UNIVERSAL:
        return StochasticUniversalSelection(random_source)
    if selection_type is SelectionType.TOURNAMENT:
        return TournamentSelection(random_source, config.tournament_size)

    raise ConfigurationError(f"Unknown selection type {selection_type!r}")
