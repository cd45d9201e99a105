"""
GA Integration Tests

End-to-end runs of the engine on small problems, in blocking and
background mode, including configuration errors and cooperative stop.
"""

import os
import shutil
import sys
import tempfile
import time
import unittest

# Add project root and source directory to path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)
sys.path.insert(0, os.path.join(ROOT, 'src'))

from ga_config import GAConfig, SelectionType, EndingCriterionType
from ga_exceptions import ConfigurationError, EngineStateError, InvalidFitnessError
from ga_logging import setup_logging
from genetic_algorithm import GeneticAlgorithm, RunState
from problem_definition import FunctionProblem
from random_source import RandomSource
from tests.ga_fixtures import CountingProblem, NegativeScoreProblem, OneMaxProblem


def wait_for(condition, timeout=10.0):
    """Poll until condition() is true or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class NaNAfterProblem(OneMaxProblem):
    """OneMax whose score turns NaN after a number of calls."""

    def __init__(self, random_source, valid_calls):
        super().__init__(random_source)
        self.valid_calls = valid_calls

    def score(self, chromosome):
        self.valid_calls -= 1
        if self.valid_calls < 0:
            return float('nan')
        return super().score(chromosome)


class TestBlockingRuns(unittest.TestCase):
    """Runs that evolve on the calling thread."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_onemax_reaches_max_score(self):
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(2024)))
        ga.set_main_parameters(50, 0.05)
        ga.set_chromosome_size(8, 8)
        ga.set_selection_type(SelectionType.TOURNAMENT, tournament_size=5)
        ga.set_ending_criterion(EndingCriterionType.MAX_SCORE, max_score=8.0)
        ga.config = ga.config.update(max_generations=5000)

        ga.run(blocking=True)

        self.assertEqual(ga.best(), [1] * 8)
        self.assertEqual(ga.best_score(), 8.0)
        self.assertEqual(ga.state, RunState.STOPPED)
        self.assertIn("reached threshold 8.0", ga.stop_reason)
        self.assertEqual(ga.snapshot().printed, "11111111")

    def test_every_selection_type_runs(self):
        for selection_type in SelectionType:
            config = GAConfig(population_size=20, min_chromosome_size=3, max_chromosome_size=9,
                              selection_type=selection_type, tournament_size=4,
                              ending_criterion=EndingCriterionType.NEVER_STOP,
                              max_generations=15)
            ga = GeneticAlgorithm(OneMaxProblem(RandomSource(5)), config)

            ga.run()

            self.assertEqual(ga.generation, 14)
            self.assertEqual(ga.stop_reason, "Max generations reached")
            self.assertLessEqual(len(ga.best()), 9)

    def test_best_score_plateau_stops_run(self):
        config = GAConfig(population_size=10, min_chromosome_size=1, max_chromosome_size=1,
                          mutation_probability=0.0, steady_generations=3)
        problem = FunctionProblem(lambda: 1, lambda chromosome: 1.0, random_source=RandomSource(1))
        ga = GeneticAlgorithm(problem, config)

        ga.run()

        self.assertEqual(ga.generation, 3)
        self.assertEqual(ga.best_score(), 1.0)

    def test_negative_scores(self):
        config = GAConfig(population_size=30, min_chromosome_size=4, max_chromosome_size=4,
                          selection_type=SelectionType.STOCHASTIC_UNIVERSAL,
                          ending_criterion=EndingCriterionType.NEVER_STOP, max_generations=10)
        ga = GeneticAlgorithm(NegativeScoreProblem(RandomSource(8)), config)

        ga.run()

        self.assertLess(ga.best_score(), 0.0)

    def test_tournament_larger_than_population_fails_fast(self):
        problem = CountingProblem(RandomSource(1))
        ga = GeneticAlgorithm(problem)
        ga.set_main_parameters(20, 0.01)
        ga.set_selection_type(SelectionType.TOURNAMENT, tournament_size=25)

        with self.assertRaises(ConfigurationError):
            ga.run(blocking=True)

        self.assertEqual(problem.score_calls, 0)
        self.assertEqual(ga.generation, 0)
        self.assertEqual(ga.state, RunState.IDLE)

    def test_best_before_first_generation(self):
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(1)))
        self.assertIsNone(ga.snapshot())
        with self.assertRaises(EngineStateError):
            ga.best()
        with self.assertRaises(EngineStateError):
            ga.best_score()
        self.assertEqual(ga.get_statistics(), {})

    def test_invalid_score_propagates(self):
        config = GAConfig(population_size=5, ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(NaNAfterProblem(RandomSource(1), valid_calls=12), config)

        with self.assertRaises(InvalidFitnessError):
            ga.run()
        self.assertEqual(ga.state, RunState.STOPPED)

    def test_same_seed_same_history(self):
        histories = []
        for _ in range(2):
            config = GAConfig(population_size=16, min_chromosome_size=2, max_chromosome_size=12,
                              mutation_probability=0.2, max_generations=12,
                              ending_criterion=EndingCriterionType.NEVER_STOP)
            ga = GeneticAlgorithm(OneMaxProblem(RandomSource(99)), config)
            ga.run()
            histories.append((ga.reporter.fitness_history(), ga.best()))

        self.assertEqual(histories[0], histories[1])

    def test_run_logging_enabled(self):
        config = GAConfig(population_size=6, max_generations=3,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(3)), config)

        ga.run(enable_logging=True)

        self.assertEqual(ga.get_statistics()['reporter']['total_generations'], 3)

    def test_report_written_to_output_dir(self):
        temp_dir = tempfile.mkdtemp()
        try:
            config = GAConfig(population_size=8, max_generations=4, output_dir=temp_dir,
                              ending_criterion=EndingCriterionType.NEVER_STOP)
            ga = GeneticAlgorithm(OneMaxProblem(RandomSource(4)), config)
            ga.run()

            files = sorted(os.listdir(temp_dir))
            self.assertEqual(len(files), 2)
            self.assertTrue(files[0].endswith("_fitness_history.csv"))
            self.assertTrue(files[1].endswith("_summary.json"))
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

    def test_run_can_be_repeated(self):
        config = GAConfig(population_size=8, max_generations=3,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(6)), config)

        ga.run()
        ga.set_ending_criterion(EndingCriterionType.NEVER_STOP)
        ga.config = ga.config.update(max_generations=5)
        ga.run()

        self.assertEqual(ga.generation, 4)
        self.assertEqual(len(ga.reporter.fitness_history()), 5)

    def test_fractional_tournament_size_rejected_before_scoring(self):
        problem = CountingProblem(RandomSource(1))
        ga = GeneticAlgorithm(problem, GAConfig(population_size=10,
                                                ending_criterion=EndingCriterionType.NEVER_STOP))

        with self.assertRaises(ConfigurationError):
            ga.set_selection_type(SelectionType.TOURNAMENT, tournament_size=2.5)

        self.assertEqual(ga.config.tournament_size, 10)
        self.assertEqual(problem.score_calls, 0)
        self.assertEqual(ga.state, RunState.IDLE)

    def test_long_never_stop_run_keeps_bounded_history(self):
        config = GAConfig(population_size=4, min_chromosome_size=2, max_chromosome_size=2,
                          tournament_size=2, ending_criterion=EndingCriterionType.NEVER_STOP,
                          max_generations=300, history_limit=20)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(21)), config)

        ga.run()

        self.assertEqual(len(ga.reporter.fitness_history()), 20)
        self.assertEqual(len(ga.reporter.generation_data), 20)
        self.assertEqual(ga.reporter.generation_data[-1]['generation'], 299)
        self.assertEqual(ga.get_statistics()['reporter']['total_generations'], 300)

    def test_rerun_starts_from_idle(self):
        genes = {'fail': False}

        def random_gene():
            if genes['fail']:
                raise RuntimeError("no genes left")
            return 1

        config = GAConfig(population_size=4, min_chromosome_size=1, max_chromosome_size=1,
                          tournament_size=2, max_generations=2,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(FunctionProblem(random_gene, lambda chromosome: 1.0,
                                              random_source=RandomSource(2)), config)
        ga.run()
        self.assertEqual(ga.state, RunState.STOPPED)

        genes['fail'] = True
        with self.assertRaises(RuntimeError):
            ga.run()
        self.assertEqual(ga.state, RunState.IDLE)


class TestBackgroundRuns(unittest.TestCase):
    """Runs that evolve on a background thread."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_never_stop_until_requested(self):
        config = GAConfig(population_size=20, min_chromosome_size=5, max_chromosome_size=10,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(11)), config)

        handle = ga.run(blocking=False)
        self.assertTrue(wait_for(lambda: ga.generation >= 3))
        self.assertIsNotNone(handle.snapshot())

        handle.stop()
        self.assertTrue(handle.join(timeout=10))
        self.assertFalse(handle.is_alive())

        generation = ga.generation
        snapshot = ga.snapshot()
        time.sleep(0.05)
        self.assertEqual(ga.generation, generation)
        self.assertIs(ga.snapshot(), snapshot)
        self.assertEqual(ga.stop_reason, "Stopped by user")
        self.assertEqual(ga.state, RunState.STOPPED)
        self.assertEqual(handle.best(), list(snapshot.chromosome))

    def test_snapshot_is_consistent_while_running(self):
        config = GAConfig(population_size=20, min_chromosome_size=4, max_chromosome_size=4,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(12)), config)

        handle = ga.run(blocking=False)
        try:
            self.assertTrue(wait_for(lambda: ga.snapshot() is not None))
            for _ in range(50):
                snapshot = ga.snapshot()
                self.assertEqual(snapshot.score, float(sum(snapshot.chromosome)))
        finally:
            handle.stop()
            handle.join(timeout=10)

    def test_reconfiguration_rejected_while_running(self):
        config = GAConfig(population_size=10, ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(13)), config)

        handle = ga.run(blocking=False)
        try:
            self.assertTrue(ga.is_running())
            with self.assertRaises(EngineStateError):
                ga.set_main_parameters(50, 0.1)
            with self.assertRaises(EngineStateError):
                ga.set_chromosome_size(2, 3)
            with self.assertRaises(EngineStateError):
                ga.set_selection_type(SelectionType.ROULETTE_WHEEL)
            with self.assertRaises(EngineStateError):
                ga.set_ending_criterion(EndingCriterionType.MAX_SCORE, max_score=1.0)
            with self.assertRaises(EngineStateError):
                ga.run(blocking=False)
        finally:
            handle.stop()
            handle.join(timeout=10)

        ga.set_main_parameters(50, 0.1)
        self.assertEqual(ga.config.population_size, 50)

    def test_background_disabled(self):
        config = GAConfig(allow_background=False)
        problem = CountingProblem(RandomSource(1))
        ga = GeneticAlgorithm(problem, config)

        with self.assertRaises(ConfigurationError):
            ga.run(blocking=False)
        self.assertEqual(problem.score_calls, 0)
        self.assertEqual(ga.state, RunState.IDLE)

    def test_background_run_ends_on_criterion(self):
        config = GAConfig(population_size=10, max_generations=5,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(14)), config)

        handle = ga.run(blocking=False)

        self.assertTrue(handle.join(timeout=10))
        self.assertEqual(ga.generation, 4)
        self.assertEqual(ga.stop_reason, "Max generations reached")

    def test_worker_error_raised_from_join(self):
        config = GAConfig(population_size=5, ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(NaNAfterProblem(RandomSource(1), valid_calls=12), config)

        handle = ga.run(blocking=False)

        with self.assertRaises(InvalidFitnessError):
            handle.join(timeout=10)
        self.assertEqual(ga.state, RunState.STOPPED)

    def test_old_handle_is_bound_to_its_own_run(self):
        config = GAConfig(population_size=10, max_generations=2,
                          ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(OneMaxProblem(RandomSource(17)), config)
        first = ga.run(blocking=False)
        self.assertTrue(first.join(timeout=10))

        ga.set_ending_criterion(EndingCriterionType.NEVER_STOP)
        ga.config = ga.config.update(max_generations=None)
        second = ga.run(blocking=False)
        try:
            self.assertTrue(first.join(timeout=0.1))
            first.stop()
            time.sleep(0.05)
            self.assertTrue(second.is_alive())
            self.assertTrue(ga.is_running())
        finally:
            second.stop()
            self.assertTrue(second.join(timeout=10))
        self.assertIsNot(first.thread, second.thread)

    def test_old_handle_keeps_its_own_error(self):
        config = GAConfig(population_size=5, ending_criterion=EndingCriterionType.NEVER_STOP)
        ga = GeneticAlgorithm(NaNAfterProblem(RandomSource(1), valid_calls=7), config)
        failed = ga.run(blocking=False)
        with self.assertRaises(InvalidFitnessError):
            failed.join(timeout=10)

        ga.problem = OneMaxProblem(RandomSource(3))
        ga.config = ga.config.update(max_generations=2)
        succeeded = ga.run(blocking=False)

        self.assertTrue(succeeded.join(timeout=10))
        with self.assertRaises(InvalidFitnessError):
            failed.join(timeout=1)


if __name__ == '__main__':
    unittest.main()
