"""
Logging Tests

Tests component loggers, context formatting and file output.
"""

import logging
import os
import shutil
import sys
import tempfile
import unittest

# Add project root and source directory to path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)
sys.path.insert(0, os.path.join(ROOT, 'src'))

from ga_logging import ContextLogger, get_logger, setup_logging


class TestGALogging(unittest.TestCase):
    """Test the engine logger hierarchy."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        setup_logging(level="ERROR", log_to_file=False)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_component_logger_is_child_of_root(self):
        setup_logging(level="ERROR", log_to_file=False)
        logger = get_logger("Reporter")

        self.assertEqual(logger.name, "GA.Reporter")
        self.assertEqual(logger.logger.getEffectiveLevel(), logging.ERROR)

    def test_setup_applies_to_existing_component_loggers(self):
        setup_logging(level="ERROR", log_to_file=False)
        logger = get_logger("GeneticAlgorithm")
        setup_logging(level="DEBUG", log_to_file=False)

        self.assertEqual(logger.logger.getEffectiveLevel(), logging.DEBUG)

    def test_context_suffix(self):
        self.assertEqual(ContextLogger._with_context("Saved", {'path': 'a.csv', 'rows': 3}),
                         "Saved | path=a.csv rows=3")
        self.assertEqual(ContextLogger._with_context("Saved", {}), "Saved")

    def test_file_output(self):
        root = setup_logging(level="INFO", log_to_file=True, output_dir=self.temp_dir,
                             console_colors=False)
        get_logger("Engine").error("Run failed", exception=ValueError("bad score"), generation=4)
        for handler in root.logger.handlers:
            handler.flush()

        with open(root.log_file) as f:
            content = f.read()
        self.assertIn("GA.Engine | Run failed", content)
        self.assertIn("exception=ValueError(bad score)", content)
        self.assertIn("generation=4", content)


if __name__ == '__main__':
    unittest.main()
