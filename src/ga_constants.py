"""
Configuration Constants for Genetic Algorithm

Centralizes default values and hard-coded numbers of the evolution engine.
All constants are organized by category with clear documentation.
"""


class GAConstants:
    """Default values for the genetic algorithm engine."""

    # Main parameters
    DEFAULT_POPULATION_SIZE = 100        # Target number of chromosomes per generation
    DEFAULT_MUTATION_PROBABILITY = 0.01  # Probability of mutating a chromosome

    # Chromosome length bounds
    DEFAULT_MIN_CHROMOSOME_SIZE = 1
    DEFAULT_MAX_CHROMOSOME_SIZE = 100

    # Selection
    DEFAULT_TOURNAMENT_SIZE = 10         # Chromosomes drawn per tournament
    SUS_POPULATION_DIVISOR = 10          # Upper bound of SUS picks is population_size // 10
    MIN_PARENTS_FOR_CROSSOVER = 2

    # Ending criteria
    DEFAULT_MAX_SCORE = 0.0              # Threshold for MaxScore criterion
    DEFAULT_STEADY_GENERATIONS = 10      # Plateau window for BestScore criterion

    # Reporting
    DEFAULT_HISTORY_LIMIT = 1000         # Generation records kept in memory


class LoggingConstants:
    """Logging-related defaults."""

    DEFAULT_LOGGER_NAME = "GA"
    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_LOG_DIR = "logs"


class MemoryConstants:
    """Memory-related configuration constants."""

    # Unit conversion constants
    BYTES_PER_MB = 1024 * 1024


def bytes_to_mb(bytes_value: int) -> float:
    """Convert bytes to megabytes."""
    return bytes_value / MemoryConstants.BYTES_PER_MB
