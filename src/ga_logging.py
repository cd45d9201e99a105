"""
Centralized Logging System for Genetic Algorithm

All engine components log through children of one root logger, so a single
setup_logging() call controls level and destinations for the whole engine.
Records carry a `key=value` context suffix. The engine never depends on a
log record being delivered.
"""

import logging
import sys
from datetime import datetime
from typing import Optional
from pathlib import Path

from ga_constants import LoggingConstants


class GAFormatter(logging.Formatter):
    """Formats records as `LEVEL | logger | message`, colouring the level on terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    PLAIN_FORMAT = '%(levelname)-8s | %(name)s | %(message)s'
    TIMESTAMP_FORMAT = '[%(asctime)s] ' + PLAIN_FORMAT

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True, stream=None):
        stream = stream or sys.stdout
        isatty = getattr(stream, 'isatty', None)
        self.use_colors = use_colors and isatty is not None and isatty()

        if include_timestamp:
            super().__init__(self.TIMESTAMP_FORMAT, '%H:%M:%S')
        else:
            super().__init__(self.PLAIN_FORMAT)

    def formatMessage(self, record):
        if not self.use_colors:
            return super().formatMessage(record)

        # Other handlers share the record, restore the plain level name
        plain = record.levelname
        record.levelname = f"{self.LEVEL_COLORS.get(record.levelno, '')}{plain}{self.RESET}"
        try:
            return super().formatMessage(record)
        finally:
            record.levelname = plain


class ContextLogger:
    """
    Thin wrapper over a stdlib logger.

    Keyword arguments of every call are appended to the message as
    `key=value` pairs. Also provides the engine's run event messages.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @property
    def name(self) -> str:
        return self.logger.name

    @staticmethod
    def _with_context(message: str, context: dict) -> str:
        if not context:
            return message
        return message + " | " + " ".join(f"{key}={value}" for key, value in context.items())

    def debug(self, message: str, **context):
        self.logger.debug(self._with_context(message, context))

    def info(self, message: str, **context):
        self.logger.info(self._with_context(message, context))

    def warning(self, message: str, **context):
        self.logger.warning(self._with_context(message, context))

    def error(self, message: str, exception: BaseException = None, **context):
        """Log an error, naming the exception type when one is given."""
        if exception is not None:
            context['exception'] = f"{type(exception).__name__}({exception})"
        self.logger.error(self._with_context(message, context))

    # Run events

    def log_run_start(self, config, blocking: bool):
        self.info("Starting evolution", mode="blocking" if blocking else "background")
        for line in config.summary().splitlines()[1:]:
            self.debug(line.strip())

    def log_generation_complete(self, generation: int, best_score: float, printed: str,
                                time_taken: float, memory_mb: float):
        """One progress record per scored generation."""
        message = f"Generation {generation}: best fitness score is {best_score}"
        if printed:
            message += f" ({printed})"
        self.info(message, time=f"{time_taken:.3f}s", rss=f"{memory_mb:.1f}MB")

    def log_convergence(self, generation: int, reason: str):
        self.info(f"Ending criterion matched at generation {generation}", reason=reason)

    def log_stop_requested(self, generation: int):
        self.info("Stop requested", generation=generation)

    def log_run_complete(self, generation: int, best_score: float, printed: str, reason: str):
        message = f"Evolution over, best fitness score is {best_score}"
        if printed:
            message += f" ({printed})"
        self.info(message, generation=generation, reason=reason)


class GALogger(ContextLogger):
    """
    Root engine logger owning the console and file handlers.

    Component loggers obtained with child() have no handlers of their own
    and propagate here, so reconfiguring the root affects them too.
    """

    def __init__(self, name: str = LoggingConstants.DEFAULT_LOGGER_NAME,
                 level: str = LoggingConstants.DEFAULT_LOG_LEVEL,
                 log_to_file: bool = False, output_dir: str = LoggingConstants.DEFAULT_LOG_DIR,
                 console_colors: bool = True):
        """
        Initialize the root logger, replacing any handlers it already has.

        Args:
            name: Root logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Also write every record to a timestamped file
            output_dir: Directory for log files
            console_colors: Colour level names on terminal output
        """
        super().__init__(logging.getLogger(name))
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False
        self.log_file: Optional[str] = None

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(GAFormatter(use_colors=console_colors, include_timestamp=False))
        self.logger.addHandler(console)

        if log_to_file:
            self.log_file = self._add_file_handler(output_dir)

    def _add_file_handler(self, output_dir: str) -> str:
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"ga_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        handler = logging.FileHandler(log_file)
        handler.setFormatter(GAFormatter(use_colors=False, include_timestamp=True))
        self.logger.addHandler(handler)
        return str(log_file)

    def child(self, component: str) -> ContextLogger:
        """Logger for one engine component, named `<root>.<component>`."""
        return ContextLogger(self.logger.getChild(component))


_root_logger: Optional[GALogger] = None


def get_logger(component: Optional[str] = None) -> ContextLogger:
    """
    Get the engine logger, or the logger of one component.

    The root logger is created with default settings on first use.
    """
    global _root_logger
    if _root_logger is None:
        _root_logger = GALogger()
    if component is None:
        return _root_logger
    return _root_logger.child(component)


def setup_logging(level: str = LoggingConstants.DEFAULT_LOG_LEVEL, log_to_file: bool = False,
                  output_dir: str = LoggingConstants.DEFAULT_LOG_DIR,
                  console_colors: bool = True) -> GALogger:
    """
    Configure engine logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Also write every record to a timestamped file
        output_dir: Directory for log files
        console_colors: Colour level names on terminal output

    Returns:
        The configured root logger
    """
    global _root_logger
    _root_logger = GALogger(level=level, log_to_file=log_to_file,
                            output_dir=output_dir, console_colors=console_colors)
    return _root_logger


def log_exception(exception: BaseException, context: str = "", **kwargs):
    """Log an exception on the engine logger."""
    get_logger().error(f"Exception in {context}", exception=exception, **kwargs)
