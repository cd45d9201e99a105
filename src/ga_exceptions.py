"""
Custom Exception Classes for Genetic Algorithm

Provides specific, meaningful exceptions for the failure modes of the
evolution engine. Degenerate inputs (empty cumulative ranges, out of
range ranks, non-positive total scores) are handled by fallbacks and
never raise.
"""

import math
from typing import List


class GAException(Exception):
    """Base exception for all genetic algorithm related errors."""
    pass


class ConfigurationError(GAException):
    """Raised when GA configuration is invalid or inconsistent."""

    def __init__(self, message: str, errors: List[str] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class EngineStateError(GAException):
    """Raised when an operation is not allowed in the current run state."""

    def __init__(self, message: str, state: str = None):
        super().__init__(message)
        self.state = state


class InvalidFitnessError(GAException):
    """Raised when the scoring function returns an invalid result."""

    def __init__(self, fitness_value, chromosome_length: int = None):
        message = f"Invalid fitness value: {fitness_value!r}"
        if chromosome_length is not None:
            message += f" (chromosome length {chromosome_length})"
        super().__init__(message)
        self.fitness_value = fitness_value
        self.chromosome_length = chromosome_length


class PopulationError(GAException):
    """Raised when population operations fail."""
    pass


class SelectionError(GAException):
    """Raised when selection operations fail."""

    def __init__(self, message: str, population_size: int = None,
                 selection_type: str = None):
        super().__init__(message)
        self.population_size = population_size
        self.selection_type = selection_type


class CrossoverError(GAException):
    """Raised when crossover operations fail."""

    def __init__(self, message: str, parent_count: int = None):
        super().__init__(message)
        self.parent_count = parent_count


class MutationError(GAException):
    """Raised when mutation operations fail."""

    def __init__(self, message: str, chromosome_length: int = None,
                 mutation_probability: float = None):
        super().__init__(message)
        self.chromosome_length = chromosome_length
        self.mutation_probability = mutation_probability


class ReportingError(GAException):
    """Raised when result reporting/saving fails."""

    def __init__(self, message: str, output_dir: str = None,
                 file_type: str = None):
        super().__init__(message)
        self.output_dir = output_dir
        self.file_type = file_type


def validate_fitness(fitness, chromosome_length: int = None) -> float:
    """
    Validate a score returned by the problem definition.

    Args:
        fitness: Value returned by the scoring function
        chromosome_length: Length of the scored chromosome, for error context

    Returns:
        The score as a float

    Raises:
        InvalidFitnessError: If the score is not a real number
    """
    if fitness is None or not isinstance(fitness, (int, float)):
        raise InvalidFitnessError(fitness, chromosome_length)

    fitness = float(fitness)
    if math.isnan(fitness):
        raise InvalidFitnessError(fitness, chromosome_length)

    return fitness
