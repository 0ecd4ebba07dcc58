"""
Logging utilities for the TOPSIS ranking engine.

Every module logs through a child of the ``topsis_engine`` logger
(``get_logger(__name__)``), so one call to ``setup_logging`` controls the
level and destinations of the whole package. Engine internals such as
zero-norm criteria and alternatives coinciding with both ideal points are
reported at DEBUG; run progress is reported at INFO.
"""
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = 'topsis_engine'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn a level name ("debug", "INFO", ...) or number into a logging level.

    Raises:
        ValueError: if the name is not a standard logging level
    """
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    name = str(level).strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, name)


def setup_logging(
    log_dir: Optional[Path] = None,
    run_id: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    console: bool = True
) -> logging.Logger:
    """
    Configure the package logger.

    Existing handlers are closed and replaced, so calling this again
    reconfigures logging rather than duplicating output.

    Args:
        log_dir: Directory for the run log file (``<run_id>.log``)
        run_id: Run identifier for log file naming; defaults to "topsis"
        level: Logging level, as a number or a name such as "DEBUG"
        console: Whether to log to stdout

    Returns:
        The ``topsis_engine`` logger
    """
    level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{run_id or 'topsis'}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to: {log_file} at {logging.getLevelName(level)}")

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get the package logger, or a child of it when given a module name."""
    return logging.getLogger(name)


class LogContext:
    """Time a pipeline stage and log its outcome."""

    def __init__(self, logger: logging.Logger, stage: str):
        self.logger = logger
        self.stage = stage
        self.elapsed = None
        self._start = None

    def __enter__(self):
        self._start = time.perf_counter()
        self.logger.info(f"{self.stage}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._start
        if exc_type is None:
            self.logger.info(f"{self.stage} done in {self.elapsed:.3f}s")
        else:
            self.logger.error(f"{self.stage} failed after {self.elapsed:.3f}s: {exc_val}")
        return False
