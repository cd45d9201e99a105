"""
Configuration Management for Genetic Algorithm

Validates and organizes the engine parameters into a clean structure.
Per-field domains are checked when the config is created; checks that
only matter once a run starts are done by validate_for_run().
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Union

from ga_constants import GAConstants
from ga_exceptions import ConfigurationError


class SelectionType(Enum):
    """How chromosomes are picked for recombination."""
    ROULETTE_WHEEL = "roulette_wheel"
    STOCHASTIC_UNIVERSAL = "stochastic_universal"
    TOURNAMENT = "tournament"


class EndingCriterionType(Enum):
    """How the evolution decides to stop."""
    MAX_SCORE = "max_score"
    BEST_SCORE = "best_score"
    NEVER_STOP = "never_stop"


def _resolve(enum_cls, value, what: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ConfigurationError(
            f"Unknown {what} {value!r}; expected one of {valid}",
            errors=[f"Unknown {what}: {value!r}"])


def resolve_selection_type(value) -> SelectionType:
    """Turn an enum member or its string value into a SelectionType."""
    return _resolve(SelectionType, value, "selection type")


def resolve_ending_criterion(value) -> EndingCriterionType:
    """Turn an enum member or its string value into an EndingCriterionType."""
    return _resolve(EndingCriterionType, value, "ending criterion")


@dataclass
class GAConfig:
    """
    Configuration container for one evolution run.

    The engine copies the config when a run starts, so changing it later
    never affects a run that is already in progress.
    """

    # Main parameters
    population_size: int = GAConstants.DEFAULT_POPULATION_SIZE
    mutation_probability: float = GAConstants.DEFAULT_MUTATION_PROBABILITY

    # Chromosome length bounds (same value for a constant length)
    min_chromosome_size: int = GAConstants.DEFAULT_MIN_CHROMOSOME_SIZE
    max_chromosome_size: int = GAConstants.DEFAULT_MAX_CHROMOSOME_SIZE

    # Selection
    selection_type: Union[SelectionType, str] = SelectionType.TOURNAMENT
    tournament_size: int = GAConstants.DEFAULT_TOURNAMENT_SIZE

    # Ending criterion
    ending_criterion: Union[EndingCriterionType, str] = EndingCriterionType.BEST_SCORE
    max_score: float = GAConstants.DEFAULT_MAX_SCORE
    steady_generations: int = GAConstants.DEFAULT_STEADY_GENERATIONS
    max_generations: Optional[int] = None

    # Reporting (generations kept in memory, None keeps all)
    history_limit: Optional[int] = GAConstants.DEFAULT_HISTORY_LIMIT

    # Execution
    allow_background: bool = True
    output_dir: Optional[str] = None

    def __post_init__(self):
        """Validate user parameters after initialization."""
        self._validate()

    def _validate(self):
        """Validate per-field types and domains to catch errors early."""
        errors = []

        def check_int(value, label: str, minimum: int = 1):
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{label} ({value!r}) must be an integer")
                return False
            if value < minimum:
                errors.append(f"{label} ({value}) must be at least {minimum}")
                return False
            return True

        def check_number(value, label: str) -> bool:
            if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
                errors.append(f"{label} ({value!r}) must be a real number")
                return False
            return True

        check_int(self.population_size, "Population size")

        if check_number(self.mutation_probability, "Mutation probability") \
                and not 0.0 <= self.mutation_probability <= 1.0:
            errors.append(f"Mutation probability ({self.mutation_probability}) must be between 0.0 and 1.0")

        min_ok = check_int(self.min_chromosome_size, "Minimum chromosome size")
        max_ok = check_int(self.max_chromosome_size, "Maximum chromosome size")
        if min_ok and max_ok and self.min_chromosome_size > self.max_chromosome_size:
            errors.append(f"Minimum chromosome size ({self.min_chromosome_size}) cannot exceed "
                          f"maximum chromosome size ({self.max_chromosome_size})")

        check_int(self.tournament_size, "Tournament size")
        check_number(self.max_score, "Max score")
        check_int(self.steady_generations, "Steady generations")
        if self.max_generations is not None:
            check_int(self.max_generations, "Max generations")
        if self.history_limit is not None:
            check_int(self.history_limit, "History limit")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors),
                errors=errors)

    def validate_for_run(self):
        """
        Validate settings that are checked once, when a run starts.

        Resolves the selection and ending-criterion variants and checks the
        tournament size against the population size.

        Raises:
            ConfigurationError: If the configuration cannot be run
        """
        self._validate()
        selection_type = resolve_selection_type(self.selection_type)
        resolve_ending_criterion(self.ending_criterion)

        if selection_type is SelectionType.TOURNAMENT and self.tournament_size > self.population_size:
            raise ConfigurationError(
                f"Tournament size ({self.tournament_size}) cannot exceed population size "
                f"({self.population_size})")

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        selection = getattr(self.selection_type, "value", self.selection_type)
        criterion = getattr(self.ending_criterion, "value", self.ending_criterion)

        summary = f"""GA Configuration:
  Population: {self.population_size}
  Mutation probability: {self.mutation_probability:.3f}
  Chromosome size: {self.min_chromosome_size}-{self.max_chromosome_size}
  Selection: {selection}"""
        if selection == SelectionType.TOURNAMENT.value:
            summary += f" (tournament size {self.tournament_size})"

        summary += f"\n  Ending criterion: {criterion}"
        if criterion == EndingCriterionType.MAX_SCORE.value:
            summary += f" (max score {self.max_score})"
        elif criterion == EndingCriterionType.BEST_SCORE.value:
            summary += f" (steady generations {self.steady_generations})"

        if self.max_generations is not None:
            summary += f"\n  Max generations: {self.max_generations}"
        if self.output_dir:
            summary += f"\n  Output: {self.output_dir}"

        return summary

    def __str__(self) -> str:
        return (f"GAConfig(pop={self.population_size}, "
                f"mutation={self.mutation_probability}, "
                f"size={self.min_chromosome_size}-{self.max_chromosome_size})")

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        data = asdict(self)
        data['selection_type'] = getattr(self.selection_type, "value", self.selection_type)
        data['ending_criterion'] = getattr(self.ending_criterion, "value", self.ending_criterion)
        return data

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'GAConfig':
        """Create config from dictionary."""
        return cls(**config_dict)

    def update(self, **kwargs) -> 'GAConfig':
        """Create a new config with updated values."""
        current_config = self.to_dict()
        current_config.update(kwargs)
        return self.from_dict(current_config)
