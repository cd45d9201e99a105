"""
Reporting and I/O Module

Tracks per-generation statistics of a run and writes the run report.

Features:
- Best / average / worst score per generation
- Bounded in-memory history, so never-ending runs keep constant memory
- Fitness history CSV, streamed row by row while the run goes
- JSON run summary
"""

import os
import csv
import json
import time
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from ga_constants import GAConstants
from ga_exceptions import ReportingError
from ga_logging import get_logger
from ga_components.scored_population import ScoredPopulation


CSV_HEADER = ['Generation', 'Best_Score', 'Avg_Score', 'Worst_Score']


class GAReporter:
    """
    Reporting manager for one evolution run.

    Only the last history_limit generation records are kept in memory.
    When an output directory is configured every record is also appended
    to the fitness history CSV as soon as it is made, so the file holds
    the whole run.
    """

    def __init__(self, output_dir: Optional[str] = None, experiment_name: str = None,
                 history_limit: Optional[int] = GAConstants.DEFAULT_HISTORY_LIMIT):
        """
        Initialize GA reporter.

        Args:
            output_dir: Directory for output files (None keeps everything in memory)
            experiment_name: Name of the experiment (auto-generated if None)
            history_limit: Generation records kept in memory (None keeps all)
        """
        self.output_dir = output_dir
        self.experiment_name = experiment_name or f"ga_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.history_limit = history_limit
        self.logger = get_logger("Reporter")

        self.start_time = None
        self.run_config: Dict[str, Any] = {}
        self.history_file: Optional[str] = None
        self._reset_tracking()

    def _reset_tracking(self):
        self.generation_data: Deque[Dict[str, Any]] = deque(maxlen=self.history_limit)
        self.best_fitness_history: Deque[float] = deque(maxlen=self.history_limit)
        self.statistics = {
            'total_generations': 0,
            'best_overall_score': None,
            'total_runtime': 0.0
        }

    def start_run(self, run_config: Dict[str, Any]):
        """Reset tracking for a new run and start the history file if there is an output directory."""
        self.start_time = time.time()
        self.run_config = dict(run_config)
        self._reset_tracking()

        self.history_file = None
        if self.output_dir:
            self.history_file = self._write_rows(self._output_path("fitness_history.csv"), [], 'w')

    def record_generation(self, generation: int, scored_population: ScoredPopulation,
                          time_taken: float = 0.0, memory_mb: float = 0.0) -> Dict[str, Any]:
        """
        Record the statistics of a scored generation.

        Args:
            generation: Generation index
            scored_population: The generation's scored chromosomes
            time_taken: Seconds spent scoring the generation
            memory_mb: Resident memory of the process

        Returns:
            The recorded generation info
        """
        generation_info = {
            'generation': generation,
            'timestamp': datetime.now().isoformat(),
            'population_size': len(scored_population),
            'best_score': scored_population.best_score(),
            'avg_score': scored_population.average_score(),
            'worst_score': scored_population.worst_score(),
            'time_taken': time_taken,
            'memory_mb': memory_mb
        }

        self.generation_data.append(generation_info)
        self.best_fitness_history.append(generation_info['best_score'])
        if self.history_file:
            self._write_rows(self.history_file, [generation_info], 'a')

        self.statistics['total_generations'] += 1
        best_overall = self.statistics['best_overall_score']
        if best_overall is None or generation_info['best_score'] > best_overall:
            self.statistics['best_overall_score'] = generation_info['best_score']

        return generation_info

    def fitness_history(self) -> List[float]:
        """Best score of every generation still held in memory."""
        return list(self.best_fitness_history)

    def _output_path(self, suffix: str) -> str:
        if not self.output_dir:
            raise ReportingError("No output directory configured", file_type=suffix)
        os.makedirs(self.output_dir, exist_ok=True)
        return os.path.join(self.output_dir, f"{self.experiment_name}_{suffix}")

    def _write_rows(self, filename: str, records, mode: str) -> str:
        try:
            with open(filename, mode, newline='') as f:
                writer = csv.writer(f)
                if mode == 'w':
                    writer.writerow(CSV_HEADER)
                for record in records:
                    writer.writerow([record['generation'], record['best_score'],
                                     record['avg_score'], record['worst_score']])
        except OSError as e:
            raise ReportingError(f"Could not write fitness history: {e}",
                                 output_dir=self.output_dir, file_type="csv") from e
        return filename

    def export_fitness_history(self, filename: str = None) -> str:
        """
        Export fitness history to CSV.

        Without a filename this is the history file streamed during the
        run, which already holds every generation. An explicit filename
        gets the generations still held in memory.

        Returns:
            Path to exported file
        """
        if filename is None:
            if self.history_file is None:
                self.history_file = self._write_rows(self._output_path("fitness_history.csv"),
                                                     self.generation_data, 'w')
            return self.history_file

        return self._write_rows(filename, self.generation_data, 'w')

    def save_run_summary(self, final_result: str, convergence_info: Dict[str, Any] = None) -> str:
        """
        Save comprehensive run summary as JSON.

        Args:
            final_result: Printed representation of the best chromosome
            convergence_info: Stop reason and final generation

        Returns:
            Path to the summary file
        """
        if self.start_time:
            self.statistics['total_runtime'] = time.time() - self.start_time

        if convergence_info:
            self.statistics.update(convergence_info)

        summary_filename = self._output_path("summary.json")
        summary_data = {
            'experiment_name': self.experiment_name,
            'end_time': datetime.now().isoformat(),
            'configuration': self.run_config,
            'statistics': self.statistics,
            'final_result': final_result,
            'generation_summary': list(self.generation_data),
            'fitness_history': list(self.best_fitness_history)
        }

        try:
            with open(summary_filename, 'w') as f:
                json.dump(summary_data, f, indent=2)
        except OSError as e:
            raise ReportingError(f"Could not write run summary: {e}",
                                 output_dir=self.output_dir, file_type="json") from e

        self.logger.debug("Run summary saved", path=summary_filename)
        return summary_filename

    def get_statistics(self) -> dict:
        """Get reporting statistics."""
        return self.statistics.copy()
