"""
Logging Configuration
Sets up the 'leaderboard' logger for the command line and the tests.

The score engine is rebuilt on every selection and drop, so data problems
(an unknown divisor, say) would be reported again on each rebuild.
RepeatedWarningFilter lets each distinct warning through once per run.
"""
import logging
import sys
from typing import Optional


class RepeatedWarningFilter(logging.Filter):
    """Drop WARNING records identical to one already emitted by the same logger."""

    def __init__(self) -> None:
        super().__init__()
        self._seen: set[tuple[str, str]] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno != logging.WARNING:
            return True
        key = (record.name, record.getMessage())
        if key in self._seen:
            return False
        self._seen.add(key)
        return True


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger of the 'leaderboard' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger("leaderboard")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter('%(levelname)-7s %(name)s: %(message)s')
    repeated = RepeatedWarningFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(repeated)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)-7s %(name)s: %(message)s', datefmt='%Y-%m-%d %H:%M:%S'
        ))
        file_handler.addFilter(repeated)
        logger.addHandler(file_handler)

    logger.debug(f"Logging at {logging.getLevelName(level)}" + (f", also to {log_file}." if log_file else "."))
