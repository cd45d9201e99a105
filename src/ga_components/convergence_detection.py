"""
Ending Criteria

Decides, once per generation, whether the evolution should stop.

Features:
- MaxScore: stop as soon as the best score reaches a threshold
- BestScore: stop when the best score has plateaued over a trailing window
- NeverStop: run until an external stop request
"""

from collections import deque
from typing import Deque, Tuple

from ga_config import EndingCriterionType, GAConfig, resolve_ending_criterion
from ga_constants import GAConstants
from ga_exceptions import ConfigurationError
from ga_components.scored_population import ScoredPopulation


class EndingCriterion:
    """Base class for ending criteria."""

    criterion_type: EndingCriterionType = None

    def __init__(self):
        self.checks_performed = 0

    def check(self, scored_population: ScoredPopulation) -> Tuple[bool, str]:
        """
        Check whether evolution is over.

        Args:
            scored_population: The generation just scored

        Returns:
            Tuple of (should_stop: bool, reason: str)
        """
        self.checks_performed += 1
        return self._check(scored_population.best_score())

    def _check(self, best_score: float) -> Tuple[bool, str]:
        raise NotImplementedError

    def reset(self):
        """Reset the criterion for a new run."""
        self.checks_performed = 0

    def get_statistics(self) -> dict:
        return {
            'criterion': self.criterion_type.value if self.criterion_type else None,
            'checks_performed': self.checks_performed
        }


class MaxScoreCriterion(EndingCriterion):
    """Stops at the first generation whose best score reaches the threshold."""

    criterion_type = EndingCriterionType.MAX_SCORE

    def __init__(self, max_score: float = GAConstants.DEFAULT_MAX_SCORE):
        super().__init__()
        self.max_score = max_score

    def _check(self, best_score: float) -> Tuple[bool, str]:
        if best_score >= self.max_score:
            return True, f"Best score {best_score} reached threshold {self.max_score}"
        return False, f"Best score {best_score} below threshold {self.max_score}"


class BestScoreCriterion(EndingCriterion):
    """
    Stops when the best score stops improving.

    One best score is recorded per generation in a trailing window of
    steady_generations entries. Once the window is full, the criterion
    fires when no entry is strictly greater than the oldest one.
    """

    criterion_type = EndingCriterionType.BEST_SCORE

    def __init__(self, steady_generations: int = GAConstants.DEFAULT_STEADY_GENERATIONS):
        super().__init__()
        if steady_generations < 1:
            raise ConfigurationError(f"Steady generations ({steady_generations}) must be at least 1")
        self.steady_generations = steady_generations
        self.score_history: Deque[float] = deque()

    def _check(self, best_score: float) -> Tuple[bool, str]:
        self.score_history.append(best_score)

        if len(self.score_history) <= self.steady_generations:
            return False, (f"Insufficient score history "
                           f"({len(self.score_history)}/{self.steady_generations + 1} generations)")
        self.score_history.popleft()

        oldest = self.score_history[0]
        if any(score > oldest for score in self.score_history):
            return False, f"Still improving over the last {self.steady_generations} generations"
        return True, f"No improvement over {oldest} for {self.steady_generations} generations"

    def reset(self):
        super().reset()
        self.score_history.clear()

    def get_statistics(self) -> dict:
        stats = super().get_statistics()
        stats['steady_generations'] = self.steady_generations
        stats['score_history'] = list(self.score_history)
        return stats


class NeverStopCriterion(EndingCriterion):
    """Never fires; the run ends only through an external stop request."""

    criterion_type = EndingCriterionType.NEVER_STOP

    def _check(self, best_score: float) -> Tuple[bool, str]:
        return False, "Running until stopped"


def create_ending_criterion(config: GAConfig) -> EndingCriterion:
    """
    Build the ending criterion named by a configuration.

    Raises:
        ConfigurationError: If the criterion is unknown
    """
    criterion = resolve_ending_criterion(config.ending_criterion)

    if criterion is EndingCriterionType.MAX_SCORE:
        return MaxScoreCriterion(config.max_score)
    if criterion is EndingCriterionType.BEST_SCORE:
        return BestScoreCriterion(config.steady_generations)
    if criterion is EndingCriterionType.NEVER_STOP:
        return NeverStopCriterion()

    raise ConfigurationError(f"Unknown ending criterion {criterion!r}")
