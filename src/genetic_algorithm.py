"""
Genetic Algorithm Engine

Owns the generation loop: scoring, ending-criterion checks, selection,
crossover and mutation. A run either blocks the caller or evolves on a
background thread that the caller can stop and query while it works.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

import psutil

from ga_config import GAConfig, SelectionType, EndingCriterionType
from ga_constants import bytes_to_mb
from ga_exceptions import ConfigurationError, EngineStateError
from ga_logging import get_logger, log_exception
from ga_components.convergence_detection import create_ending_criterion
from ga_components.genetic_operations import GeneticOperations
from ga_components.population_management import PopulationManager
from ga_components.reporting import GAReporter
from ga_components.scored_population import ScoredPopulation
from ga_components.selection import create_selection_strategy
from random_source import RandomSource


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class BestSnapshot:
    """Best chromosome of a completed generation, never mutated once published."""
    generation: int
    score: float
    chromosome: Tuple[Any, ...]
    printed: str = ""


class EvolutionHandle:
    """
    Handle on one background run.

    The handle stays bound to its own worker thread, so after the engine
    has been run again it neither waits on nor stops the newer run.
    """

    def __init__(self, algorithm: 'GeneticAlgorithm', thread: threading.Thread = None):
        self.algorithm = algorithm
        self.thread = thread
        self.error: Optional[BaseException] = None

    def stop(self):
        """Ask the run to stop at the next generation boundary."""
        if self.thread.is_alive():
            self.algorithm.stop()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for this run to end.

        Returns:
            True if the run has ended

        Raises:
            Exception: Whatever ended the worker abnormally
        """
        self.thread.join(timeout)
        if self.thread.is_alive():
            return False
        if self.error is not None:
            raise self.error
        return True

    def is_alive(self) -> bool:
        return self.thread.is_alive()

    def best(self) -> List[Any]:
        return self.algorithm.best()

    def snapshot(self) -> Optional[BestSnapshot]:
        return self.algorithm.snapshot()


class GeneticAlgorithm:
    """
    Evolution engine, generic over the gene type of its problem.

    Configuration is copied when a run starts. The best chromosome of each
    generation is published as an immutable BestSnapshot once the ending
    criterion has been checked, so other threads can query it at any time.
    """

    def __init__(self, problem, config: GAConfig = None, random_source: RandomSource = None):
        """
        Initialize the engine.

        Args:
            problem: ProblemDefinition to optimize
            config: Engine configuration (defaults if None)
            random_source: Random numbers for the engine; defaults to the problem's source
        """
        self.problem = problem
        self.config = config or GAConfig()
        self.random_source = random_source or getattr(problem, 'random_source', None) or RandomSource()
        self.logger = get_logger("GeneticAlgorithm")

        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._state = RunState.IDLE
        self._generation = 0
        self._snapshot: Optional[BestSnapshot] = None
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None
        self._log_enabled = False
        self._process = psutil.Process()

        self.stop_reason: Optional[str] = None

        # Components are built per run from the run's config
        self.run_config: Optional[GAConfig] = None
        self.selection = None
        self.ending_criterion = None
        self.genetic_operations = None
        self.population_manager = None
        self.reporter = None

    # Configuration

    def _ensure_not_running(self):
        if self._state is RunState.RUNNING:
            raise EngineStateError("Cannot reconfigure the algorithm while it is running",
                                   state=self._state.value)

    def set_main_parameters(self, population_size: int, mutation_probability: float):
        """Set the population size and mutation probability."""
        self._ensure_not_running()
        self.config = self.config.update(population_size=population_size,
                                         mutation_probability=mutation_probability)

    def set_chromosome_size(self, minimum: int, maximum: int):
        """Set the chromosome length bounds; equal values give a constant length."""
        self._ensure_not_running()
        self.config = self.config.update(min_chromosome_size=minimum,
                                         max_chromosome_size=maximum)

    def set_selection_type(self, selection_type, tournament_size: int = None):
        """Set the selection type, with the tournament size for tournament selection."""
        self._ensure_not_running()
        changes = {'selection_type': selection_type}
        if tournament_size is not None:
            changes['tournament_size'] = tournament_size
        self.config = self.config.update(**changes)

    def set_ending_criterion(self, criterion, max_score: float = None,
                             steady_generations: int = None):
        """Set the ending criterion with its threshold or plateau window."""
        self._ensure_not_running()
        changes = {'ending_criterion': criterion}
        if max_score is not None:
            changes['max_score'] = max_score
        if steady_generations is not None:
            changes['steady_generations'] = steady_generations
        self.config = self.config.update(**changes)

    # Execution

    def run(self, blocking: bool = True, enable_logging: bool = False) -> Optional[EvolutionHandle]:
        """
        Run the algorithm until the ending criterion fires or a stop is requested.

        Args:
            blocking: Evolve on the calling thread if True, on a background thread otherwise
            enable_logging: Emit one progress record per generation

        Returns:
            None for blocking runs, an EvolutionHandle for background runs

        Raises:
            ConfigurationError: If the configuration cannot be run
            EngineStateError: If a run is already in progress
        """
        with self._lock:
            if self._state is RunState.RUNNING:
                raise EngineStateError("The algorithm is already running", state=self._state.value)

            config = GAConfig.from_dict(self.config.to_dict())
            config.validate_for_run()
            if not blocking and not config.allow_background:
                raise ConfigurationError("Cannot run in background mode because it is disabled")

            self._prepare_run(config)
            self._log_enabled = enable_logging
            if enable_logging:
                self.logger.log_run_start(config, blocking)

            population = self.population_manager.initialize_population()
            self._state = RunState.RUNNING

        if blocking:
            self._thread = None
            self._evolve(population)
            return None

        handle = EvolutionHandle(self)
        handle.thread = threading.Thread(target=self._run_worker, args=(population, handle),
                                         name="ga-evolution", daemon=True)
        self._thread = handle.thread
        handle.thread.start()
        return handle

    def _prepare_run(self, config: GAConfig):
        """Reset run state and build the run's components."""
        self.run_config = config
        self.selection = create_selection_strategy(config, self.random_source)
        self.ending_criterion = create_ending_criterion(config)
        self.genetic_operations = GeneticOperations(self.random_source, config.mutation_probability)
        self.population_manager = PopulationManager(
            self.problem,
            self.random_source,
            config.population_size,
            config.min_chromosome_size,
            config.max_chromosome_size
        )
        self.reporter = GAReporter(output_dir=config.output_dir, history_limit=config.history_limit)
        self.reporter.start_run(config.to_dict())

        self._state = RunState.IDLE
        self._stop_requested.clear()
        self._generation = 0
        self._snapshot = None
        self._error = None
        self.stop_reason = None

    def _run_worker(self, population: List[List[Any]], handle: EvolutionHandle):
        try:
            self._evolve(population)
        except Exception as e:
            self._error = e
            handle.error = e
            log_exception(e, "evolution worker", generation=self._generation)

    def _evolve(self, population: List[List[Any]]):
        """Make the population evolve until the run has to stop."""
        config = self.run_config
        try:
            while True:
                generation_start = time.time()

                # Score the generation
                scored_population = ScoredPopulation.from_population(population, self.problem)
                best_score, best_chromosome = scored_population.best()
                printed = self.problem.print_chromosome(best_chromosome)

                time_taken = time.time() - generation_start
                memory_mb = bytes_to_mb(self._process.memory_info().rss)
                self.reporter.record_generation(self._generation, scored_population,
                                                time_taken=time_taken, memory_mb=memory_mb)
                if self._log_enabled:
                    self.logger.log_generation_complete(self._generation, best_score, printed,
                                                        time_taken, memory_mb)

                # Check ending criterion
                should_stop, reason = self.ending_criterion.check(scored_population)
                if (not should_stop and config.max_generations is not None
                        and self._generation + 1 >= config.max_generations):
                    should_stop, reason = True, "Max generations reached"

                self._publish(BestSnapshot(self._generation, best_score,
                                           tuple(best_chromosome), printed))

                if should_stop:
                    self.stop_reason = reason
                    if self._log_enabled:
                        self.logger.log_convergence(self._generation, reason)
                    break
                if self._stop_requested.is_set():
                    self.stop_reason = "Stopped by user"
                    break

                # Breed and mutate the next population
                population = self.population_manager.build_next_population(
                    scored_population, self.selection, self.genetic_operations)
                for chromosome in population:
                    self.genetic_operations.mutate(chromosome, self.problem)

                with self._lock:
                    self._generation += 1

            self._finish_run()
        finally:
            with self._lock:
                self._state = RunState.STOPPED

    def _publish(self, snapshot: BestSnapshot):
        with self._lock:
            self._snapshot = snapshot

    def _finish_run(self):
        snapshot = self._snapshot
        if self._log_enabled:
            self.logger.log_run_complete(snapshot.generation, snapshot.score,
                                         snapshot.printed, self.stop_reason)

        if self.run_config.output_dir:
            self.reporter.export_fitness_history()
            self.reporter.save_run_summary(snapshot.printed, {
                'stop_reason': self.stop_reason,
                'final_generation': snapshot.generation,
                'best_score': snapshot.score
            })

    def stop(self):
        """
        Request the run to stop.

        The request is checked once per generation, after the ending
        criterion, so the run may finish one more generation first.
        """
        self._stop_requested.set()
        if self._log_enabled:
            self.logger.log_stop_requested(self._generation)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for a background run to end.

        Returns:
            True if no run is in progress anymore

        Raises:
            Exception: The error that ended the background worker, if any
        """
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                return False
        if self._error is not None:
            raise self._error
        return self._state is not RunState.RUNNING

    # Queries

    def snapshot(self) -> Optional[BestSnapshot]:
        """The last published best snapshot, or None before the first generation."""
        with self._lock:
            return self._snapshot

    def best(self) -> List[Any]:
        """
        Best chromosome of the last completed generation.

        Raises:
            EngineStateError: If no generation has been scored yet
        """
        snapshot = self.snapshot()
        if snapshot is None:
            raise EngineStateError("No generation has been scored yet", state=self._state.value)
        return list(snapshot.chromosome)

    def best_score(self) -> float:
        snapshot = self.snapshot()
        if snapshot is None:
            raise EngineStateError("No generation has been scored yet", state=self._state.value)
        return snapshot.score

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    def is_running(self) -> bool:
        return self.state is RunState.RUNNING

    def get_statistics(self) -> dict:
        """Collect statistics from all run components."""
        if self.run_config is None:
            return {}
        return {
            'generation': self.generation,
            'state': self.state.value,
            'stop_reason': self.stop_reason,
            'selection': self.selection.get_statistics(),
            'genetic_operations': self.genetic_operations.get_statistics(),
            'population_manager': self.population_manager.get_statistics(),
            'ending_criterion': self.ending_criterion.get_statistics(),
            'reporter': self.reporter.get_statistics()
        }


__all__ = [
    'GeneticAlgorithm',
    'EvolutionHandle',
    'BestSnapshot',
    'RunState',
    'SelectionType',
    'EndingCriterionType',
]
