"""
GA Components Module

Modular components of the evolution engine. Each component handles a
specific aspect of the GA process:

- ScoredPopulation: One generation sorted by ascending fitness
- SelectionStrategy: Roulette wheel, stochastic universal and tournament selection
- GeneticOperations: Crossover and mutation operations
- EndingCriterion: MaxScore, BestScore and NeverStop criteria
- PopulationManager: Population initialization and next-generation assembly
- GAReporter: Per-generation statistics and run reports

Usage:
    from ga_components import ScoredPopulation, TournamentSelection
    from ga_components.convergence_detection import BestScoreCriterion
"""

from .scored_population import ScoredPopulation
from .selection import (
    SelectionStrategy,
    RouletteWheelSelection,
    StochasticUniversalSelection,
    TournamentSelection,
    create_selection_strategy
)
from .genetic_operations import GeneticOperations
from .convergence_detection import (
    EndingCriterion,
    MaxScoreCriterion,
    BestScoreCriterion,
    NeverStopCriterion,
    create_ending_criterion
)
from .population_management import PopulationManager
from .reporting import GAReporter

__all__ = [
    'ScoredPopulation',
    'SelectionStrategy',
    'RouletteWheelSelection',
    'StochasticUniversalSelection',
    'TournamentSelection',
    'create_selection_strategy',
    'GeneticOperations',
    'EndingCriterion',
    'MaxScoreCriterion',
    'BestScoreCriterion',
    'NeverStopCriterion',
    'create_ending_criterion',
    'PopulationManager',
    'GAReporter'
]

# Version information
__version__ = '1.0.0'
__description__ = 'Generic evolutionary optimization engine'
